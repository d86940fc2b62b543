"""Maps source branch names to the names they are mirrored under on the target."""

from git_branch_mirror.utils.constants import PREFIX_EXEMPT_BRANCHES


def map_branch_name(source_branch: str, prefix: str | None) -> str:
    """Return the target branch name of a source branch under a forced prefix.

    Rules, in order:

    1. Without a prefix the name is unchanged.
    2. 'master' and 'develop' are never prefixed.
    3. Leading and trailing slashes are trimmed from the name and the prefix. A prefix made only
       of slashes is ignored and the trimmed name is returned.
    4. A name already starting with '<prefix>/' is returned as is, so mapping is idempotent.
    5. Otherwise the result is '<prefix>/<name>'.

    Examples:
        map_branch_name("feature/x", "mirror") -> "mirror/feature/x"
        map_branch_name("mirror/feature/x", "mirror") -> "mirror/feature/x"
        map_branch_name("develop", "mirror") -> "develop"
    """
    if not prefix:
        return source_branch
    if source_branch in PREFIX_EXEMPT_BRANCHES:
        return source_branch

    source_name = source_branch.strip("/")
    trimmed_prefix = prefix.strip("/")
    if not source_name:
        return source_branch
    if not trimmed_prefix:
        return source_name
    if source_name.startswith(f"{trimmed_prefix}/"):
        return source_name
    return f"{trimmed_prefix}/{source_name}"


class BranchNameMapper:
    """Applies a configured prefix policy to branch names."""

    def __init__(self, prefix: str | None = None) -> None:
        """Initialize the mapper with the forced prefix, if any."""
        self.prefix = prefix

    def map(self, source_branch: str) -> str:
        """Return the target branch name of a source branch."""
        return map_branch_name(source_branch, self.prefix)

    def __call__(self, source_branch: str) -> str:
        return self.map(source_branch)
