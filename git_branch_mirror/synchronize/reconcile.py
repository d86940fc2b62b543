"""Decides which source branches still have to be replicated to the target."""

import re
from typing import Callable, Iterable

from git_branch_mirror.git.repository import RemoteBranch


def filter_branches(branches: Iterable[RemoteBranch], pattern: re.Pattern[str]) -> list[RemoteBranch]:
    """Return the branches whose short name matches the discovery pattern anywhere."""
    return [branch for branch in branches if pattern.search(branch.name)]


def find_unmapped_branches(
    source_branches: Iterable[RemoteBranch],
    target_branches: Iterable[RemoteBranch],
    pattern: re.Pattern[str],
    mapper: Callable[[str], str],
) -> set[RemoteBranch]:
    """Find the source branches matching the pattern that have no counterpart on the target yet.

    A matched source branch is unmapped when no target branch carries its mapped name. The
    result does not depend on the order of either listing.

    Args:
        source_branches (Iterable[RemoteBranch]): All branches of the source remote.
        target_branches (Iterable[RemoteBranch]): All branches of the target remote.
        pattern (re.Pattern[str]): The discovery pattern selecting source branches.
        mapper (Callable[[str], str]): Maps a source branch name to its target branch name.

    Returns:
        set[RemoteBranch]: The source branches to fetch and push under their mapped names.
    """
    target_names = {branch.name for branch in target_branches}
    return {branch for branch in filter_branches(source_branches, pattern) if mapper(branch.name) not in target_names}
