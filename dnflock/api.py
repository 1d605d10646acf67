"""RPM repository metadata: primary, repomd and metalink documents."""

from __future__ import annotations

import base64
import binascii
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from .config import Repository as RepositoryConfig

PRIMARY_FILE_TYPE = "primary"
FILELISTS_FILE_TYPE = "filelists"


@dataclass
class Version:
    epoch: str = ""
    ver: str = ""
    rel: str = ""

    def __str__(self):
        version = f"{self.epoch or '0'}:{self.ver}"
        if self.rel:
            version += f"-{self.rel}"
        return version


@dataclass
class Entry:
    """A provides/requires style dependency entry."""

    name: str = ""
    flags: str = ""
    epoch: str = ""
    ver: str = ""
    rel: str = ""

    def __str__(self):
        if self.flags:
            version = Version(epoch=self.epoch, ver=self.ver, rel=self.rel)
            return f"{self.name}-{self.flags}-{version}"
        return self.name


@dataclass
class Checksum:
    text: str = ""
    type: str = ""
    pkgid: str = ""

    def to_base64(self):
        """Re-encode the hexadecimal checksum as standard base64."""
        try:
            raw = binascii.unhexlify(self.text)
        except binascii.Error as exc:
            raise ValueError(f"invalid hex checksum {self.text!r}: {exc}") from exc
        return base64.b64encode(raw).decode("ascii")

    def integrity(self):
        """Return a subresource-integrity string for the checksum."""
        if self.type == "sha":
            return f"sha1-{self.to_base64()}"
        if self.type in ("sha512", "sha256"):
            return f"{self.type}-{self.to_base64()}"
        raise ValueError(f"Invalid integrity type: {self.type}")


@dataclass
class Location:
    href: str = ""


@dataclass
class ProvidedFile:
    text: str = ""
    type: str = ""


@dataclass
class PackageSize:
    package: int = 0
    installed: int = 0
    archive: int = 0


@dataclass
class PackageFormat:
    license: str = ""
    vendor: str = ""
    group: str = ""
    buildhost: str = ""
    sourcerpm: str = ""
    header_start: str = ""
    header_end: str = ""
    provides: list[Entry] = field(default_factory=list)
    requires: list[Entry] = field(default_factory=list)
    files: list[ProvidedFile] = field(default_factory=list)
    conflicts: list[Entry] = field(default_factory=list)
    obsoletes: list[Entry] = field(default_factory=list)
    recommends: list[Entry] = field(default_factory=list)
    suggests: list[Entry] = field(default_factory=list)
    enhances: list[Entry] = field(default_factory=list)
    supplements: list[Entry] = field(default_factory=list)


_DEPENDENCY_KINDS = (
    "provides",
    "requires",
    "conflicts",
    "obsoletes",
    "recommends",
    "suggests",
    "enhances",
    "supplements",
)


@dataclass
class Package:
    type: str = ""
    name: str = ""
    arch: str = ""
    version: Version = field(default_factory=Version)
    checksum: Checksum = field(default_factory=Checksum)
    summary: str = ""
    description: str = ""
    packager: str = ""
    url: str = ""
    time_file: str = ""
    time_build: str = ""
    size: PackageSize = field(default_factory=PackageSize)
    location: Location = field(default_factory=Location)
    format: PackageFormat = field(default_factory=PackageFormat)
    repository: RepositoryConfig | None = None

    def __str__(self):
        return f"{self.name}-{self.version}"


@dataclass
class Repository:
    """A parsed primary.xml document."""

    xmlns: str = ""
    rpm: str = ""
    package_count: str = ""
    packages: list[Package] = field(default_factory=list)


@dataclass
class FileListPackage:
    pkgid: str = ""
    name: str = ""
    arch: str = ""
    version: Version = field(default_factory=Version)
    files: list[ProvidedFile] = field(default_factory=list)

    def __str__(self):
        return f"{self.name}-{self.version}"


@dataclass
class MetalinkFile:
    """A file entry of a metalink document.

    ``urls`` holds dicts with the keys text, protocol, type, location and
    preference; ``hashes`` holds (type, value) pairs; ``alternates`` holds one
    list of such pairs per alternate.
    """

    name: str = ""
    urls: list[dict[str, str]] = field(default_factory=list)
    timestamp: str = ""
    size: str = ""
    hashes: list[tuple[str, str]] = field(default_factory=list)
    alternates: list[list[tuple[str, str]]] = field(default_factory=list)

    def sha256(self):
        """All sha256 sums of the file and its alternates."""
        sums = [value for kind, value in self.hashes if kind == "sha256"]
        for alternate in self.alternates:
            sums.extend(value for kind, value in alternate if kind == "sha256")
        if not sums:
            raise ValueError("no sha256 found")
        return sums


@dataclass
class Metalink:
    files: list[MetalinkFile] = field(default_factory=list)

    def repomd(self):
        """The entry describing repomd.xml, or None."""
        return next((f for f in self.files if f.name == "repomd.xml"), None)


@dataclass
class Data:
    """A data section of repomd.xml."""

    type: str = ""
    checksum_type: str = ""
    checksum: str = ""
    open_checksum_type: str = ""
    open_checksum: str = ""
    location_href: str = ""
    timestamp: str = ""
    size: str = ""
    open_size: str = ""
    database_version: str = ""
    header_checksum_type: str = ""
    header_checksum: str = ""
    header_size: str = ""

    def _checksum_of(self, kind):
        if self.checksum_type == kind:
            return self.checksum
        raise ValueError(f"no {kind} found")

    def sha512(self):
        return self._checksum_of("sha512")

    def sha256(self):
        return self._checksum_of("sha256")

    def sha(self):
        return self._checksum_of("sha")


@dataclass
class Repomd:
    xmlns: str = ""
    rpm: str = ""
    revision: str = ""
    data: list[Data] = field(default_factory=list)

    def file(self, file_type):
        """The first data section of the given type, or None."""
        return next((d for d in self.data if d.type == file_type), None)

    def filelists(self):
        return self.file(FILELISTS_FILE_TYPE)


def _local(tag):
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _namespace(tag):
    if isinstance(tag, str) and tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def _children(element, name):
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _child(element, name):
    children = _children(element, name)
    return children[0] if children else None


def _text(element):
    if element is None:
        return ""
    return element.text or ""


def _child_text(element, name):
    return _text(_child(element, name))


def _attr(element, name):
    if element is None:
        return ""
    for key, value in element.attrib.items():
        if _local(key) == name:
            return value
    return ""


def _int_attr(element, name):
    value = _attr(element, name).strip()
    if not value:
        return 0
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"invalid integer attribute {name}={value!r}") from exc


def _root(data, name):
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"invalid XML: {exc}") from exc
    if _local(root.tag) != name:
        raise ValueError(f"expected element type <{name}> but have <{_local(root.tag)}>")
    return root


def _parse_version(element):
    return Version(
        epoch=_attr(element, "epoch"),
        ver=_attr(element, "ver"),
        rel=_attr(element, "rel"),
    )


def _parse_entries(element):
    return [
        Entry(
            name=_attr(entry, "name"),
            flags=_attr(entry, "flags"),
            epoch=_attr(entry, "epoch"),
            ver=_attr(entry, "ver"),
            rel=_attr(entry, "rel"),
        )
        for entry in _children(element, "entry")
    ]


def _parse_files(element):
    return [
        ProvidedFile(text=_text(item), type=_attr(item, "type"))
        for item in _children(element, "file")
    ]


def _parse_format(element):
    header = _child(element, "header-range")
    fmt = PackageFormat(
        license=_child_text(element, "license"),
        vendor=_child_text(element, "vendor"),
        group=_child_text(element, "group"),
        buildhost=_child_text(element, "buildhost"),
        sourcerpm=_child_text(element, "sourcerpm"),
        header_start=_attr(header, "start"),
        header_end=_attr(header, "end"),
        files=_parse_files(element),
    )
    for kind in _DEPENDENCY_KINDS:
        setattr(fmt, kind, _parse_entries(_child(element, kind)))
    return fmt


def _parse_package(element):
    checksum = _child(element, "checksum")
    time = _child(element, "time")
    size = _child(element, "size")
    return Package(
        type=_attr(element, "type"),
        name=_child_text(element, "name"),
        arch=_child_text(element, "arch"),
        version=_parse_version(_child(element, "version")),
        checksum=Checksum(
            text=_text(checksum),
            type=_attr(checksum, "type"),
            pkgid=_attr(checksum, "pkgid"),
        ),
        summary=_child_text(element, "summary"),
        description=_child_text(element, "description"),
        packager=_child_text(element, "packager"),
        url=_child_text(element, "url"),
        time_file=_attr(time, "file"),
        time_build=_attr(time, "build"),
        size=PackageSize(
            package=_int_attr(size, "package"),
            installed=_int_attr(size, "installed"),
            archive=_int_attr(size, "archive"),
        ),
        location=Location(href=_attr(_child(element, "location"), "href")),
        format=_parse_format(_child(element, "format")),
    )


def parse_repository(data):
    """Parse a primary.xml document."""
    root = _root(data, "metadata")
    return Repository(
        xmlns=_namespace(root.tag),
        rpm=_attr(root, "rpm"),
        package_count=_attr(root, "packages"),
        packages=[_parse_package(item) for item in _children(root, "package")],
    )


def _sub(parent, tag, text="", **attrs):
    element = ET.SubElement(parent, tag, {k: v for k, v in attrs.items() if v})
    if text:
        element.text = text
    return element


def _write_entries(parent, tag, entries):
    container = ET.SubElement(parent, tag)
    for entry in entries:
        _sub(
            container,
            "entry",
            name=entry.name,
            flags=entry.flags,
            epoch=entry.epoch,
            ver=entry.ver,
            rel=entry.rel,
        )


def _write_package(parent, pkg):
    element = _sub(parent, "package", type=pkg.type)
    _sub(element, "name", pkg.name)
    _sub(element, "arch", pkg.arch)
    _sub(element, "version", epoch=pkg.version.epoch, ver=pkg.version.ver, rel=pkg.version.rel)
    _sub(element, "checksum", pkg.checksum.text, type=pkg.checksum.type, pkgid=pkg.checksum.pkgid)
    _sub(element, "summary", pkg.summary)
    _sub(element, "description", pkg.description)
    _sub(element, "packager", pkg.packager)
    _sub(element, "url", pkg.url)
    _sub(element, "time", file=pkg.time_file, build=pkg.time_build)
    ET.SubElement(
        element,
        "size",
        {
            "package": str(pkg.size.package),
            "installed": str(pkg.size.installed),
            "archive": str(pkg.size.archive),
        },
    )
    _sub(element, "location", href=pkg.location.href)
    fmt = pkg.format
    format_element = ET.SubElement(element, "format")
    _sub(format_element, "license", fmt.license)
    _sub(format_element, "vendor", fmt.vendor)
    _sub(format_element, "group", fmt.group)
    _sub(format_element, "buildhost", fmt.buildhost)
    _sub(format_element, "sourcerpm", fmt.sourcerpm)
    _sub(format_element, "header-range", start=fmt.header_start, end=fmt.header_end)
    _write_entries(format_element, "provides", fmt.provides)
    _write_entries(format_element, "requires", fmt.requires)
    for item in fmt.files:
        _sub(format_element, "file", item.text, type=item.type)
    for kind in _DEPENDENCY_KINDS[2:]:
        _write_entries(format_element, kind, getattr(fmt, kind))


def write_repository(repository):
    """Serialise a primary.xml document as indented XML bytes."""
    root = ET.Element("metadata")
    if repository.xmlns:
        root.set("xmlns", repository.xmlns)
    if repository.rpm:
        root.set("rpm", repository.rpm)
    root.set("packages", repository.package_count)
    for pkg in repository.packages:
        _write_package(root, pkg)
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode", short_empty_elements=False).encode("utf-8")


def _parse_hashes(verification):
    return [(_attr(item, "type"), _text(item)) for item in _children(verification, "hash")]


def _parse_metalink_file(element):
    resources = _child(element, "resources")
    alternates = _child(element, "alternates")
    return MetalinkFile(
        name=_attr(element, "name"),
        urls=[
            {
                "text": _text(url),
                "protocol": _attr(url, "protocol"),
                "type": _attr(url, "type"),
                "location": _attr(url, "location"),
                "preference": _attr(url, "preference"),
            }
            for url in _children(resources, "url")
        ],
        timestamp=_child_text(element, "timestamp"),
        size=_child_text(element, "size"),
        hashes=_parse_hashes(_child(element, "verification")),
        alternates=[
            _parse_hashes(_child(alternate, "verification"))
            for alternate in _children(alternates, "alternate")
        ],
    )


def parse_metalink(data):
    """Parse a metalink document."""
    root = _root(data, "metalink")
    files = _child(root, "files")
    return Metalink(files=[_parse_metalink_file(item) for item in _children(files, "file")])


def _parse_data(element):
    checksum = _child(element, "checksum")
    open_checksum = _child(element, "open-checksum")
    header_checksum = _child(element, "header-checksum")
    return Data(
        type=_attr(element, "type"),
        checksum_type=_attr(checksum, "type"),
        checksum=_text(checksum),
        open_checksum_type=_attr(open_checksum, "type"),
        open_checksum=_text(open_checksum),
        location_href=_attr(_child(element, "location"), "href"),
        timestamp=_child_text(element, "timestamp"),
        size=_child_text(element, "size"),
        open_size=_child_text(element, "open-size"),
        database_version=_child_text(element, "database_version"),
        header_checksum_type=_attr(header_checksum, "type"),
        header_checksum=_text(header_checksum),
        header_size=_child_text(element, "header-size"),
    )


def parse_repomd(data):
    """Parse a repomd.xml document."""
    root = _root(data, "repomd")
    return Repomd(
        xmlns=_namespace(root.tag),
        rpm=_attr(root, "rpm"),
        revision=_child_text(root, "revision"),
        data=[_parse_data(item) for item in _children(root, "data")],
    )