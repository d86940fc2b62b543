"""Base exception shared by every error the application raises on purpose."""


class GitBranchMirrorError(Exception):
    """Base class for errors that abort a mirroring run with a user-facing message."""

    pass
