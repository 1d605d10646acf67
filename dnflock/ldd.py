"""Shared library dependency discovery for ELF binaries."""

from __future__ import annotations

import errno
import os
import posixpath
import stat
import struct
from pathlib import Path

_ELF_MAGIC = b"\x7fELF"
_SHT_DYNAMIC = 6
_DT_NEEDED = 1

# class -> (offset format, e_shoff position, e_shentsize position, section format, dyn format)
_LAYOUTS = {
    1: ("I", 0x20, 0x2E, "IIIIIIIIII", "iI"),
    2: ("Q", 0x28, 0x3A, "IIQQQQIIQQ", "qQ"),
}
_ENDIAN = {1: "<", 2: ">"}


def _join(*elements):
    present = [element for element in elements if element]
    if not present:
        return ""
    cleaned = posixpath.normpath("/".join(present))
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _dir(path):
    head = posixpath.dirname(path)
    if not head:
        return "."
    return _join(head) or "."


def _string_at(table, offset):
    if offset < 0 or offset >= len(table):
        return None
    end = table.find(b"\0", offset)
    if end < 0:
        return None
    return table[offset:end].decode("utf-8", errors="surrogateescape")


def _section_data(data, offset, size):
    chunk = data[offset:offset + size]
    if len(chunk) != size:
        raise ValueError("ELF section extends past the end of the file")
    return chunk


def imported_libraries(path):
    """Return the DT_NEEDED entries of the ELF file at ``path``."""
    data = Path(path).read_bytes()
    if data[:4] != _ELF_MAGIC or len(data) < 6:
        raise ValueError(f"{path}: bad magic number")
    layout = _LAYOUTS.get(data[4])
    endian = _ENDIAN.get(data[5])
    if layout is None or endian is None:
        raise ValueError(f"{path}: unknown ELF class or data encoding")
    offset_format, shoff_at, shent_at, section_format, dyn_format = layout

    try:
        (shoff,) = struct.unpack_from(endian + offset_format, data, shoff_at)
        shentsize, shnum = struct.unpack_from(endian + "HH", data, shent_at)
        sections = [
            struct.unpack_from(endian + section_format, data, shoff + index * shentsize)
            for index in range(shnum)
        ]
    except struct.error as exc:
        raise ValueError(f"{path}: truncated ELF file") from exc

    dynamic = next((s for s in sections if s[1] == _SHT_DYNAMIC), None)
    if dynamic is None:
        return []
    link = dynamic[6]
    if link >= len(sections):
        raise ValueError(f"{path}: invalid string table link {link}")
    strtab_section = sections[link]
    strtab = _section_data(data, strtab_section[4], strtab_section[5])

    entry_size = struct.calcsize(endian + dyn_format)
    raw = _section_data(data, dynamic[4], dynamic[5])
    raw = raw[: len(raw) // entry_size * entry_size]

    needed = []
    for tag, value in struct.iter_unpack(endian + dyn_format, raw):
        if tag != _DT_NEEDED:
            continue
        name = _string_at(strtab, value)
        if name is not None:
            needed.append(name)
    return needed


def follow_symlinks(path):
    """Follow a chain of symlinks, listing every target and the final file.

    Relative link targets are resolved against the directory of ``path``.
    """
    directory = _dir(path)
    files = []
    seen = set()
    current = path
    while True:
        if stat.S_ISLNK(os.lstat(current).st_mode):
            if current in seen:
                raise OSError(errno.ELOOP, "too many levels of symbolic links", path)
            seen.add(current)
            current = os.readlink(current)
            if not posixpath.isabs(current):
                current = _join(directory, current)
            files.append(current)
        else:
            files.append(current)
            return files


def _locate(library, library_path):
    for directory in library_path:
        candidate = _join(directory, library)
        try:
            os.stat(candidate)
        except FileNotFoundError:
            continue
        return candidate
    return None


def _ldd(library, library_path):
    discovered = []
    for name in imported_libraries(library):
        found = _locate(name, library_path)
        if found is None:
            raise LookupError(f"{name} not found in any of [{' '.join(library_path)}]")
        discovered.append(found)
        discovered.extend(follow_symlinks(found))
    return discovered


def _resolve_one(library, library_path):
    queue = [library]
    processed = set()
    found = []
    while queue:
        for dependency in _ldd(queue[0], library_path):
            if dependency not in processed:
                processed.add(dependency)
                queue.append(dependency)
                found.append(dependency)
        queue = queue[1:-1]
    found.append(library)
    found.extend(follow_symlinks(library))
    return found


def resolve(objects, library_path):
    """Return the objects and the shared libraries they need, without duplicates."""
    seen = set()
    result = []
    for obj in objects:
        for item in _resolve_one(obj, library_path):
            if item not in seen:
                seen.add(item)
                result.append(item)
    return result