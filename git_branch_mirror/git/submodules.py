"""Reads submodule declarations from .gitmodules and prepares submodule working trees.

The declarations are read with ``git config --file .gitmodules --list`` so git
itself does the parsing. Every ``submodule.<name>.<key>`` entry is kept in the
submodule's configuration map, which lets repositories carry mirroring keys
such as ``source-url`` and ``ignore-mirror`` next to the standard ones.
"""

from dataclasses import dataclass, field

import structlog
from structlog.stdlib import BoundLogger

from git_branch_mirror.git.repository import Repository
from git_branch_mirror.utils.constants import GITMODULES_FILE_NAME

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


@dataclass(frozen=True)
class Submodule:
    """A submodule as declared in .gitmodules."""

    name: str
    path: str
    url: str | None = None
    branch: str | None = None
    config: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return a configuration value of the submodule, or None if it is not declared."""
        return self.config.get(key)


def parse_submodule_config(output: str) -> list[Submodule]:
    """Parse 'git config --list' output of a .gitmodules file into submodules, in declaration order.

    Submodule names may contain dots, so the key is taken from the last dot of each entry.
    Entries without a path are dropped since they cannot be located in the working tree.
    """
    entries: dict[str, dict[str, str]] = {}
    for line in output.splitlines():
        if not line.strip() or "=" not in line:
            continue
        full_key, value = line.split("=", 1)
        if not full_key.startswith("submodule."):
            continue
        qualified = full_key[len("submodule.") :]
        if "." not in qualified:
            continue
        name, key = qualified.rsplit(".", 1)
        entries.setdefault(name, {})[key] = value

    submodules: list[Submodule] = []
    for name, config in entries.items():
        path = config.get("path")
        if not path:
            logger.warning("Submodule declares no path and will be ignored", submodule=name)
            continue
        submodules.append(
            Submodule(
                name=name,
                path=path,
                url=config.get("url"),
                branch=config.get("branch"),
                config=config,
            )
        )
    return submodules


async def has_submodules(repository: Repository) -> bool:
    """Return True if the working tree declares submodules."""
    return (repository.local_folder / GITMODULES_FILE_NAME).is_file()


async def read_submodules(repository: Repository) -> list[Submodule]:
    """Read the submodules declared by a working tree. A missing .gitmodules yields no submodules."""
    if not await has_submodules(repository):
        return []
    result = await repository.git("config", "--file", GITMODULES_FILE_NAME, "--list")
    return parse_submodule_config(result.stdout)


async def init_submodule(repository: Repository, submodule: Submodule) -> None:
    """Register a submodule in the parent repository's configuration."""
    await repository.git("submodule", "init", "--", submodule.path)


async def resolve_submodule_url(repository: Repository, submodule: Submodule) -> str | None:
    """Return the submodule URL registered by 'git submodule init', falling back to the declared URL.

    Declared URLs may be relative to the parent's remote; the registered URL is absolute.
    """
    result = await repository.git("config", "--get", f"submodule.{submodule.name}.url", tolerate_non_zero_exit=True)
    registered = result.stdout.strip()
    if result.exit_code == 0 and registered:
        return registered
    return submodule.url


async def update_submodule(repository: Repository, submodule: Submodule) -> None:
    """Check out a submodule's working tree.

    A non-zero exit is tolerated, since partially initialized submodules fail the
    update while still leaving a usable working tree behind.
    """
    await repository.git("submodule", "update", "--", submodule.path, tolerate_non_zero_exit=True)
