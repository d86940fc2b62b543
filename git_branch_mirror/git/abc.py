"""Base ABC for branch listings."""

from abc import ABC, abstractmethod
from typing import Any


class BranchListingBase(ABC):
    """Produces the current set of named branches of a remote or of the local tree."""

    @abstractmethod
    async def list_branches(self, name: str | None = None) -> list[Any]:
        """List branches, optionally scoped to a single short branch name."""
        pass

    async def find_branch(self, name: str) -> Any | None:
        """Return the branch with the given short name, or None if it does not exist."""
        for branch in await self.list_branches(name):
            if branch.name == name:
                return branch
        return None
