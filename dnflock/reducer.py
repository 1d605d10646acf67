"""Reduction of repositories to the packages possibly involved in a solution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .loader import PackageInfo, RepoLoader

_log = logging.getLogger(__name__)


def _priority(pkg):
    return pkg.repository.priority if pkg.repository is not None else 0


def _candidates(packages, req):
    name = None
    candidates = []
    for pkg in packages:
        if not (str(pkg).startswith(req) and req.startswith(pkg.name)):
            continue
        if name is None or len(pkg.name) < len(name):
            candidates = [pkg]
            name = pkg.name
        elif pkg.name == name:
            candidates.append(pkg)
    return candidates


@dataclass
class RepoReducer:
    """Finds every package that could take part in installing the requested ones."""

    loader: Any
    implicit_requires: list[str] = field(default_factory=list)
    package_info: PackageInfo | None = None

    def load(self):
        self.package_info = self.loader.load()

    def _info(self):
        if self.package_info is None:
            raise RuntimeError("packages have not been loaded")
        return self.package_info

    def package_count(self):
        return len(self._info().packages)

    def resolve(self, packages, ignore_missing):
        """Return the names of the matched packages and all involved packages."""
        info = self._info()
        matched = []
        discovered = {}

        for req in [*packages, *self.implicit_requires]:
            candidates = _candidates(info.packages, req)
            if not candidates and not ignore_missing:
                raise LookupError(f"Package {req} does not exist")
            for candidate in candidates:
                key = str(candidate)
                selected = discovered.get(key)
                if selected is None or _priority(selected) > _priority(candidate):
                    discovered[key] = candidate
            if candidates:
                matched.append(candidates[0].name)

        pinned = {pkg.name: pkg for pkg in discovered.values()}

        while True:
            current = list(discovered.values())
            for pkg in current:
                for wanted in self._requires(info, pkg):
                    key = str(wanted)
                    if key in discovered:
                        continue
                    if wanted.name in pinned:
                        _log.debug(
                            "excluding %s because of pinned dependency %s",
                            key,
                            pinned[wanted.name],
                        )
                        continue
                    discovered[key] = wanted
            if len(current) == len(discovered):
                break

        involved = list(discovered.values())
        required = {entry.name for pkg in involved for entry in pkg.format.requires}
        # Drop provisions nobody in the reduced set asks for.
        for pkg in involved:
            pkg.format.provides = [
                entry
                for entry in pkg.format.provides
                if entry.name in required or entry.name == pkg.name
            ]

        return matched, involved

    @staticmethod
    def _requires(info, pkg):
        wants = []
        for requirement in pkg.format.requires:
            providers = info.provides.get(requirement.name)
            if providers is not None:
                _log.debug(
                    "%s wants %s because of %s",
                    pkg.name,
                    [p.name for p in providers],
                    requirement,
                )
                wants.extend(providers)
            else:
                _log.debug("%s requires %s which can't be satisfied", pkg.name, requirement)
        return wants


def new_repo_reducer(repos, repo_files, base_system, arch, cache_helper):
    """Create a reducer loading noarch and ``arch`` packages."""
    implicit_requires = [base_system] if base_system else []
    loader = RepoLoader(
        repo_files=list(repo_files),
        arch=arch,
        architectures=["noarch", arch],
        repos=repos,
        cache_helper=cache_helper,
    )
    return RepoReducer(loader=loader, implicit_requires=implicit_requires)