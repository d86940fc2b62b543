"""General utility functions and helper classes."""

from urllib.parse import urlsplit, urlunsplit

from git_branch_mirror.utils.constants import HEADS_REF_PREFIX, MASKED_CREDENTIAL


def strip_heads_prefix(branch: str) -> str:
    """Strip a leading 'refs/heads/' from a branch name, if present."""
    if branch.startswith(HEADS_REF_PREFIX):
        return branch[len(HEADS_REF_PREFIX) :]
    return branch


def url_scheme(url: str | None) -> str:
    """Return the lowercase scheme of a URL, or an empty string for scp-like or local paths."""
    if not url or "://" not in url:
        return ""
    return urlsplit(url).scheme.lower()


def mask_url(url: str | None) -> str:
    """Mask the user-info portion of a URL so it can be logged safely.

    Examples:
        https://token@example.com/repo.git -> https://***@example.com/repo.git
        git@example.com:repo.git -> git@example.com:repo.git (no credential present)
    """
    if not url:
        return ""
    if "://" not in url:
        return url
    parts = urlsplit(url)
    if "@" not in parts.netloc:
        return url
    host = parts.netloc.rsplit("@", 1)[1]
    return urlunsplit((parts.scheme, f"{MASKED_CREDENTIAL}@{host}", parts.path, parts.query, parts.fragment))


def is_truthy_flag(value: str | None) -> bool:
    """Return True if a configuration value is the string 'true' in any letter case."""
    if value is None:
        return False
    return value.strip().lower() == "true"
