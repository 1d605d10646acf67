"""Conversion of a resolved package set into lock file configuration."""

from __future__ import annotations

import logging

from .config import RPM, Config

_log = logging.getLogger(__name__)


def to_config(install, force_ignored, targets, cmdline):
    """Build the lock file configuration for the installed and ignored packages."""
    ignored = {pkg.name for pkg in force_ignored}

    all_packages = {}
    repositories = {}
    for pkg in install:
        repositories[pkg.repository.name] = list(pkg.repository.mirrors)
        try:
            integrity = pkg.checksum.integrity()
        except ValueError as exc:
            raise ValueError(f"Unable to read package {pkg.name} integrity: {exc}") from exc
        all_packages[pkg.name] = RPM(
            name=pkg.name,
            integrity=integrity,
            urls=[pkg.location.href],
            repository=pkg.repository.name,
            dependencies=sorted(entry.name for entry in pkg.format.requires),
        )

    providers = collect_providers(force_ignored, install)
    rpms = []
    for name in sorted(all_packages):
        rpm = all_packages[name]
        rpm.set_dependencies(collect_dependencies(name, rpm.dependencies, providers, ignored))
        rpms.append(rpm)

    return Config(
        command_line_arguments=list(cmdline),
        force_ignored=sorted(ignored),
        rpms=rpms,
        repositories=repositories,
        targets=list(targets),
    )


def collect_providers(*args):
    """Map every provision and file of the given package sets to its package name.

    Later package sets win over earlier ones.
    """
    providers = {}
    for pkg_set in args:
        for pkg in pkg_set:
            for entry in pkg.format.provides:
                providers[entry.name] = pkg.name
            for item in pkg.format.files:
                providers[item.text] = pkg.name
    return providers


def collect_dependencies(pkg, requires, providers, ignored):
    """Return the sorted names of the packages providing ``requires``.

    Ignored requirements and providers are skipped, as is the package itself.
    """
    dependencies = set()
    for req in requires:
        if req in ignored:
            _log.debug("Ignoring dependency %s", req)
            continue
        _log.debug("Resolving dependency %s", req)
        provider = providers.get(req)
        if provider is None:
            raise LookupError(f"could not find provider for {req}")
        _log.debug("Found provider %s for %s", provider, req)
        if provider in ignored:
            _log.debug("Ignoring provider %s for %s", provider, req)
            continue
        dependencies.add(provider)

    # Packages may depend on themselves; such edges are dropped.
    return sorted(dep for dep in dependencies if dep != pkg)