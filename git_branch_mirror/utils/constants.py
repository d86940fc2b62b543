"""Shared constants used across the application."""

# Remote Names
# ------------

TARGET_REMOTE_NAME = "origin"
"""Name of the remote the mirrored branches are pushed to."""

SOURCE_REMOTE_NAME = "source"
"""Name of the remote created for the upstream repository."""

# Branch Naming
# -------------

HEADS_REF_PREFIX = "refs/heads/"
"""Prefix of fully-qualified local branch references."""

REMOTES_REF_PREFIX = "refs/remotes/"
"""Prefix of fully-qualified remote-tracking references."""

PREFIX_EXEMPT_BRANCHES = frozenset({"master", "develop"})
"""Branches that keep their name on the target regardless of the forced prefix."""

ROOT_JOB_DISPLAY_NAME = "ROOT"
"""Name used in log output for the job of the top-level repository."""

# Submodule Configuration
# -----------------------

GITMODULES_FILE_NAME = ".gitmodules"
"""File declaring the submodules of a working tree."""

SUBMODULE_SOURCE_URL_KEY = "source-url"
"""Submodule configuration key holding the upstream URL to mirror from."""

SUBMODULE_IGNORE_MIRROR_KEY = "ignore-mirror"
"""Submodule configuration key that excludes a submodule from mirroring when set to true."""

# Credential Overrides
# --------------------

HTTP_EXTRA_HEADER_KEY = "http.extraHeader"
"""Git configuration key used to attach an Authorization header to a single call."""

HTTP_SSL_VERIFY_KEY = "http.sslVerify"
"""Git configuration key used to disable TLS verification for a single call."""

CREDENTIAL_URL_SCHEMES = frozenset({"http", "https"})
"""URL schemes that accept credential injection."""

MASKED_CREDENTIAL = "***"
"""Replacement text for credentials in log output."""

URL_INSTEAD_OF_KEY_TEMPLATE = "url.{base}.insteadOf"
"""Git configuration key that rewrites a remote URL to one carrying the credential for a single call."""
