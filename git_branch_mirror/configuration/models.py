"""Models for configuration between CLI arguments and environment variables."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CredentialType(str, Enum):
    """Enum for the ways a credential is presented to an HTTP(S) remote."""

    URL = "url"
    BEARER = "bearer"
    BASIC = "basic"


@dataclass
class SyncConfig:
    """Configuration class for the sync command."""

    debug: bool
    git_dir: Path
    branch: str
    source_url: str
    branch_pattern: re.Pattern[str] | None
    source_token: str | None
    target_token: str | None
    credential_type: CredentialType
    forced_prefix: str | None
    delay: float
    continue_on_error: bool
