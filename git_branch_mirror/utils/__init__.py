"""Utility modules for shared functionality."""

from .constants import (
    PREFIX_EXEMPT_BRANCHES,
    SOURCE_REMOTE_NAME,
    TARGET_REMOTE_NAME,
)
from .helpers import mask_url, strip_heads_prefix

__all__ = [
    "PREFIX_EXEMPT_BRANCHES",
    "SOURCE_REMOTE_NAME",
    "TARGET_REMOTE_NAME",
    "mask_url",
    "strip_heads_prefix",
]
