"""Lock file configuration and repository definitions."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RPM:
    """A single locked RPM with its integrity, download URLs and dependencies."""

    name: str
    integrity: str = ""
    urls: list[str] = field(default_factory=list)
    repository: str = ""
    dependencies: list[str] = field(default_factory=list)

    def set_dependencies(self, pkgs):
        """Replace the dependencies, dropping any reference to the package itself."""
        self.dependencies = [pkg for pkg in pkgs if pkg != self.name]

    def to_dict(self):
        return {
            "name": self.name,
            "integrity": self.integrity,
            "urls": list(self.urls),
            "repository": self.repository,
            "dependencies": list(self.dependencies),
        }


@dataclass
class Config:
    """Content of a lock file."""

    name: str = ""
    repositories: dict[str, list[str]] = field(default_factory=dict)
    rpms: list[RPM] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
    force_ignored: list[str] = field(default_factory=list)
    command_line_arguments: list[str] = field(default_factory=list)

    def to_dict(self):
        data: dict[str, Any] = {}
        if self.command_line_arguments:
            data["cli-arguments"] = list(self.command_line_arguments)
        data["name"] = self.name
        data["repositories"] = {
            key: list(self.repositories[key]) for key in sorted(self.repositories)
        }
        data["rpms"] = [rpm.to_dict() for rpm in self.rpms]
        if self.targets:
            data["targets"] = list(self.targets)
        if self.force_ignored:
            data["ignored"] = list(self.force_ignored)
        return data

    def to_json(self):
        """Serialise as tab-indented JSON with HTML-sensitive characters escaped."""
        text = json.dumps(self.to_dict(), indent="\t", ensure_ascii=False)
        for char, escaped in _JSON_ESCAPES.items():
            text = text.replace(char, escaped)
        return text


_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass
class Repository:
    """Definition of a remote RPM repository."""

    name: str = ""
    disabled: bool = False
    metalink: str = ""
    baseurl: str = ""
    arch: str = ""
    mirrors: list[str] = field(default_factory=list)
    gpgkey: str = ""
    priority: int = 0

    def to_dict(self):
        data: dict[str, Any] = {"name": self.name}
        if self.disabled:
            data["disabled"] = True
        if self.metalink:
            data["metalink"] = self.metalink
        if self.baseurl:
            data["baseurl"] = self.baseurl
        data["arch"] = self.arch
        if self.mirrors:
            data["mirrors"] = list(self.mirrors)
        if self.gpgkey:
            data["gpgkey"] = self.gpgkey
        if self.priority:
            data["priority"] = self.priority
        return data


@dataclass
class Repositories:
    """A collection of repository definitions."""

    repositories: list[Repository] = field(default_factory=list)

    def to_dict(self):
        return {"repositories": [repo.to_dict() for repo in self.repositories]}


def _field(data, key, kind, default):
    value = data.get(key)
    if value is None:
        return default
    if kind is int and isinstance(value, bool):
        raise TypeError(f"field {key!r} must be int, got bool")
    if not isinstance(value, kind):
        raise TypeError(f"field {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _string_list(data, key):
    values = _field(data, key, list, [])
    for value in values:
        if not isinstance(value, str):
            raise TypeError(f"entries of {key!r} must be strings")
    return list(values)


def _repository_from_dict(data):
    if not isinstance(data, Mapping):
        raise TypeError("repository entry must be a mapping")
    return Repository(
        name=_field(data, "name", str, ""),
        disabled=_field(data, "disabled", bool, False),
        metalink=_field(data, "metalink", str, ""),
        baseurl=_field(data, "baseurl", str, ""),
        arch=_field(data, "arch", str, ""),
        mirrors=_string_list(data, "mirrors"),
        gpgkey=_field(data, "gpgkey", str, ""),
        priority=_field(data, "priority", int, 0),
    )


def repositories_from_dict(data):
    """Build a Repositories object from decoded JSON or YAML data."""
    if not isinstance(data, Mapping):
        raise TypeError("repository information must be a mapping")
    entries = _field(data, "repositories", list, [])
    return Repositories([_repository_from_dict(entry) for entry in entries])