import pytest

from dnflock.api import Checksum, Entry, Location, Package, ProvidedFile
from dnflock.config import RPM, Config
from dnflock.config import Repository as RepositoryConfig
from dnflock.lockconfig import collect_dependencies, collect_providers, to_config


def new_package(name, checksum, url, repository, mirrors):
    return Package(
        name=name,
        checksum=Checksum(text=checksum, type="sha256"),
        location=Location(href=url),
        repository=RepositoryConfig(name=repository, mirrors=list(mirrors)),
    )


def new_simple_package(name):
    return new_package(name, "", "", "repository", [])


def new_package_with_deps(name, *deps):
    pkg = new_simple_package(name)
    pkg.format.requires = [Entry(name=dep) for dep in deps]
    pkg.format.provides = [Entry(name=name)]
    return pkg


def new_package_with_files(name, *files):
    pkg = new_simple_package(name)
    pkg.format.files = [ProvidedFile(text=item) for item in files]
    return pkg


def new_simple_rpm(name, *deps):
    return RPM(
        name=name,
        urls=[""],
        integrity="sha256-",
        repository="repository",
        dependencies=list(deps),
    )


SHA_A = "f87b49c517aac9eb4890a4b5005bcc4a586748f2760ea1106382f3897129a60e"
SHA_B = "9146a02ed928ffca6ef0f1241d2d86e4e998e6f70aae875754601fda54951fbd"
INTEGRITY_A = "sha256-+HtJxReqyetIkKS1AFvMSlhnSPJ2DqEQY4LziXEppg4="
INTEGRITY_B = "sha256-kUagLtko/8pu8PEkHS2G5OmY5vcKrodXVGAf2lSVH70="


def test_base_case():
    cfg = to_config([], [], [], [])
    assert cfg == Config(
        command_line_arguments=[],
        name="",
        repositories={},
        rpms=[],
        targets=[],
        force_ignored=[],
    )


def test_simple_inputs():
    ignored = [Package(name="package0"), Package(name="package1")]
    targets = ["foo", "bar", "baz"]
    commandline = ["baf", "bam"]
    cfg = to_config([], ignored, targets, commandline)
    assert cfg == Config(
        command_line_arguments=commandline,
        name="",
        repositories={},
        rpms=[],
        targets=targets,
        force_ignored=["package0", "package1"],
    )


def test_missing_provider():
    with pytest.raises(LookupError, match="could not find provider for somedep"):
        to_config([new_package_with_deps("parent", "somedep")], [], [], [])


def test_invalid_integrity():
    pkg = new_package("broken", "zz", "url", "repository", [])
    with pytest.raises(ValueError, match="Unable to read package broken integrity"):
        to_config([pkg], [], [], [])


CASES = [
    (
        "one installed",
        lambda: [new_package("package0", SHA_A, "urlforrpm", "repository", ["mirror0", "mirror1"])],
        lambda: [],
        {"repository": ["mirror0", "mirror1"]},
        lambda: [
            RPM("package0", INTEGRITY_A, ["urlforrpm"], "repository", []),
        ],
        [],
    ),
    (
        "two installed",
        lambda: [
            new_package("package0", SHA_A, "urlforrpm", "repository", ["mirror0", "mirror1"]),
            new_package("package1", SHA_B, "urlforrpm0", "repository0", []),
        ],
        lambda: [],
        {"repository": ["mirror0", "mirror1"], "repository0": []},
        lambda: [
            RPM("package0", INTEGRITY_A, ["urlforrpm"], "repository", []),
            RPM("package1", INTEGRITY_B, ["urlforrpm0"], "repository0", []),
        ],
        [],
    ),
    (
        "two installed repo overlap",
        lambda: [
            new_package("package0", SHA_A, "urlforrpm", "repository", ["mirror0", "mirror1"]),
            new_package("package1", SHA_B, "urlforrpm0", "repository", []),
        ],
        lambda: [],
        {"repository": []},
        lambda: [
            RPM("package0", INTEGRITY_A, ["urlforrpm"], "repository", []),
            RPM("package1", INTEGRITY_B, ["urlforrpm0"], "repository", []),
        ],
        [],
    ),
    (
        "two installed out of order",
        lambda: [new_simple_package("package2"), new_simple_package("package1")],
        lambda: [],
        {"repository": []},
        lambda: [new_simple_rpm("package1"), new_simple_rpm("package2")],
        [],
    ),
    (
        "two installed dep between",
        lambda: [new_package_with_deps("package1", "package2"), new_package_with_deps("package2")],
        lambda: [],
        {"repository": []},
        lambda: [new_simple_rpm("package1", "package2"), new_simple_rpm("package2")],
        [],
    ),
    (
        "three installed dep from first",
        lambda: [
            new_package_with_deps("package1", "package2", "package3"),
            new_package_with_deps("package2"),
            new_package_with_deps("package3"),
        ],
        lambda: [],
        {"repository": []},
        lambda: [
            new_simple_rpm("package1", "package2", "package3"),
            new_simple_rpm("package2"),
            new_simple_rpm("package3"),
        ],
        [],
    ),
    (
        "three installed dep from first sort deps",
        lambda: [
            new_package_with_deps("package1", "package3", "package2"),
            new_package_with_deps("package2"),
            new_package_with_deps("package3"),
        ],
        lambda: [],
        {"repository": []},
        lambda: [
            new_simple_rpm("package1", "package2", "package3"),
            new_simple_rpm("package2"),
            new_simple_rpm("package3"),
        ],
        [],
    ),
    (
        "three installed dep transitive",
        lambda: [
            new_package_with_deps("package1", "package2"),
            new_package_with_deps("package2", "package3"),
            new_package_with_deps("package3"),
        ],
        lambda: [],
        {"repository": []},
        lambda: [
            new_simple_rpm("package1", "package2"),
            new_simple_rpm("package2", "package3"),
            new_simple_rpm("package3"),
        ],
        [],
    ),
    (
        "three installed dep overlap",
        lambda: [
            new_package_with_deps("package1", "package3"),
            new_package_with_deps("package2", "package3"),
            new_package_with_deps("package3"),
        ],
        lambda: [],
        {"repository": []},
        lambda: [
            new_simple_rpm("package1", "package3"),
            new_simple_rpm("package2", "package3"),
            new_simple_rpm("package3"),
        ],
        [],
    ),
    (
        "two installed require ignored",
        lambda: [new_package_with_deps("package1", "package2")],
        lambda: [new_package_with_deps("package2")],
        {"repository": []},
        lambda: [new_simple_rpm("package1")],
        ["package2"],
    ),
    (
        "depends on self",
        lambda: [new_package_with_deps("package1", "package1")],
        lambda: [],
        {"repository": []},
        lambda: [new_simple_rpm("package1")],
        [],
    ),
    (
        "sort ignored",
        lambda: [],
        lambda: [new_package_with_deps("package2"), new_package_with_deps("package1")],
        {},
        lambda: [],
        ["package1", "package2"],
    ),
    (
        "file based deps",
        lambda: [
            new_package_with_deps("package1", "somefile"),
            new_package_with_files("package2", "somefile"),
        ],
        lambda: [],
        {"repository": []},
        lambda: [new_simple_rpm("package1", "package2"), new_simple_rpm("package2")],
        [],
    ),
    (
        "file based deps ignored provider",
        lambda: [new_package_with_deps("package1", "somefile")],
        lambda: [new_package_with_files("package2", "somefile")],
        {"repository": []},
        lambda: [new_simple_rpm("package1")],
        ["package2"],
    ),
]


@pytest.mark.parametrize(
    "installed, ignored, repositories, rpms, force_ignored",
    [case[1:] for case in CASES],
    ids=[case[0] for case in CASES],
)
def test_config_transform(installed, ignored, repositories, rpms, force_ignored):
    cfg = to_config(installed(), ignored(), [], [])
    assert cfg == Config(
        command_line_arguments=[],
        name="",
        repositories=repositories,
        rpms=rpms(),
        targets=[],
        force_ignored=force_ignored,
    )


def test_collect_providers_later_sets_win():
    first = new_package_with_files("first", "shared")
    second = new_package_with_files("second", "shared")
    providers = collect_providers([first], [second])
    assert providers == {"shared": "second"}


def test_collect_dependencies_skips_ignored_and_self():
    providers = {"a": "pkg-a", "b": "pkg-b", "self": "me", "c": "pkg-c"}
    deps = collect_dependencies("me", ["c", "self", "a", "b"], providers, {"b"})
    assert deps == ["pkg-a", "pkg-c"]


def test_collect_dependencies_ignored_provider():
    deps = collect_dependencies("me", ["x"], {"x": "blocked"}, {"blocked"})
    assert deps == []