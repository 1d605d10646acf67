"""Loading of repository packages for the reducer.

The reducer filters out every package of a repository that has no chance of
being part of a solution. It is a fast preflight filter which drastically
reduces the number of variables the SAT solver has to handle.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .api import Entry, Package, parse_repository

_PLATFORM_PYTHON = "/usr/libexec/platform-python"


class RepoCache(Protocol):
    """Source of already fetched primary repository metadata."""

    def current_primaries(self, repos, arch):
        """Return the cached primary repositories for the given architecture."""


@dataclass
class PackageInfo:
    """Available packages and a mapping of provisions to their packages."""

    packages: list[Package] = field(default_factory=list)
    provides: dict[str, list[Package]] = field(default_factory=dict)


def _own_copy(pkg):
    return dataclasses.replace(pkg, format=dataclasses.replace(pkg.format))


@dataclass
class RepoLoader:
    """Loads packages from primary.xml files and from a repository cache."""

    repo_files: list[str] = field(default_factory=list)
    arch: str = ""
    architectures: list[str] = field(default_factory=list)
    repos: Any = None
    cache_helper: Any = None

    def load(self):
        """Read all packages matching the architectures and index their provisions."""
        info = PackageInfo()
        accepted = set(self.architectures)

        for path in self.repo_files:
            repository = parse_repository(Path(path).read_bytes())
            info.packages.extend(p for p in repository.packages if p.arch in accepted)

        if self.cache_helper is not None:
            for repository in self.cache_helper.current_primaries(self.repos, self.arch):
                info.packages.extend(
                    _own_copy(p) for p in repository.packages if p.arch in accepted
                )

        for pkg in info.packages:
            fix_packages(pkg)

        for pkg in info.packages:
            pkg.format.requires = [
                entry for entry in pkg.format.requires if not entry.name.startswith("(")
            ]
            for entry in pkg.format.provides:
                info.provides.setdefault(entry.name, []).append(pkg)
            for item in pkg.format.files:
                info.provides.setdefault(item.text, []).append(pkg)

        return info


def fix_packages(package):
    """Patch known metadata quirks of individual packages in place."""
    # Stand-in for proper resolution of alternative(python) on some distributions.
    if package.name == "platform-python":
        package.format.provides = [*package.format.provides, Entry(name=_PLATFORM_PYTHON)]
        package.format.requires = [
            entry for entry in package.format.requires if entry.name != _PLATFORM_PYTHON
        ]