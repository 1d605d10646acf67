"""Lock file writing and the naming helpers it relies on."""

from __future__ import annotations

import posixpath
import re
import string
from pathlib import Path
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from .config import RPM

_SANITIZE = (
    (":", "__"),
    ("+", "__plus__"),
    ("~", "__tilde__"),
    ("^", "__caret__"),
)

_RAW_PATH_CHARS = frozenset(string.ascii_letters + string.digits + "-_.~/!$&'()*+,;=:@[]%")
_PATH_SAFE = "-_.~$&+,/:;=@"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_macro(macro):
    """Split a ``macroFile%defName`` expression into its file and def name."""
    parts = macro.split("%")
    if len(parts) != 2:
        raise ValueError(f"invalid macro expression: {macro}")
    return parts[0], parts[1]


def sanitize(name):
    """Turn a package string into a name usable as a repository label."""
    for old, new in _SANITIZE:
        name = name.replace(old, new)
    return name


def _clean(path):
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _join(*elements):
    present = [element for element in elements if element]
    if not present:
        return ""
    return _clean("/".join(present))


def _escape_path(path):
    if all(char in _RAW_PATH_CHARS for char in path):
        return path
    return quote(unquote(path), safe=_PATH_SAFE)


def join_url(mirror, href):
    """Append ``href`` to the path of ``mirror``, cleaning the joined path."""
    if any(ord(char) < 0x20 or char == "\x7f" for char in mirror):
        raise ValueError(f"invalid control character in URL {mirror!r}")
    if _BAD_ESCAPE.search(mirror):
        raise ValueError(f"invalid URL escape in {mirror!r}")
    try:
        parts = urlsplit(mirror)
    except ValueError as exc:
        raise ValueError(f"invalid URL {mirror!r}: {exc}") from exc

    base = parts.path
    if base.startswith("/"):
        path = _join(base, href)
    else:
        path = _join("/" + base, href)[1:]
    if href.endswith("/") and not path.endswith("/"):
        path += "/"

    return urlunsplit(
        (parts.scheme, parts.netloc, _escape_path(path), parts.query, parts.fragment)
    )


def add_config_rpms(config, pkgs, arch):
    """Append an RPM entry for each package, with one URL per repository mirror."""
    for pkg in pkgs:
        urls = [join_url(mirror, pkg.location.href) for mirror in pkg.repository.mirrors]
        try:
            integrity = pkg.checksum.integrity()
        except ValueError as exc:
            raise ValueError(f"Unable to load package {pkg} integrity: {exc}") from exc
        config.rpms.append(
            RPM(name=sanitize(f"{pkg}.{arch}"), integrity=integrity, urls=urls)
        )


def write_lock_file(config, path):
    """Write the configuration as JSON to ``path``."""
    Path(path).write_text(config.to_json(), encoding="utf-8")