"""Selection of files that matter for C/C++ builds."""

from __future__ import annotations

_ALLOWED = frozenset(
    {
        "c", "cc", "cpp", "cxx", "c++", "C",
        "h", "hh", "hpp", "hxx", "inc", "inl", "H", "S",
        "a", "lo", "so", "o",
    }
)

_DENIED = frozenset({"hmac"})


def _base(path):
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def filter_files(files):
    """Keep sources, headers, objects and versioned shared libraries."""
    selected = []
    for path in files:
        parts = _base(path).split(".")
        suffix = parts[-1]
        if suffix in _DENIED:
            continue
        if suffix in _ALLOWED or "so" in parts[1:]:
            selected.append(path)
    return selected