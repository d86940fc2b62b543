"""Contains exceptions raised when reconciling application configuration."""

from git_branch_mirror.exceptions import GitBranchMirrorError


class RequiredConfigurationElementError(GitBranchMirrorError):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(
            f"Missing required configuration element: {name} (command line option {cli_name}, environment variable {env_name})"
        )
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class InvalidBranchPatternError(GitBranchMirrorError):
    """Raised when the branch discovery pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Initializes the exception with the offending pattern and the compiler's reason."""
        super().__init__(f"Invalid branch discovery pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class CredentialConfigurationError(GitBranchMirrorError):
    """Raised when the credential settings are inconsistent."""

    pass


class InvalidConfigurationValueError(GitBranchMirrorError):
    """Raised when a configuration element has a value outside of its accepted range."""

    pass
