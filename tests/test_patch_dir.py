import pytest

from jarpatch.modules.jarreplace.domain import InvalidCoordinate, PatchOptions
from jarpatch.modules.jarreplace.service import PatchDirectoryApplier, extract_base_name
from jarpatch.settings import Settings


class IdleChecker:
    def ensure_available(self) -> None:
        return None

    def is_open(self, path) -> bool:
        return False


def build_applier() -> PatchDirectoryApplier:
    return PatchDirectoryApplier(Settings(_env_file=None), checker=IdleChecker())


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("json-smart-2.5.2.jar", "json-smart"),
        ("netty-handler-4.1.118.Final.jar", "netty-handler"),
        ("commons-lang3-3.12.0.jar", "commons-lang3"),
        ("spring-boot-2.7.0-SNAPSHOT.jar", "spring-boot"),
        ("/home/patches/jackson-databind-2.15.2.jar", "jackson-databind"),
    ],
)
def test_extract_base_name(filename, expected):
    assert extract_base_name(filename) == expected


def test_apply_replaces_older_versions(tmp_path):
    patches = tmp_path / "patches"
    patches.mkdir()
    (patches / "netty-handler-4.1.118.Final.jar").write_bytes(b"patched")
    lib = tmp_path / "opt" / "app" / "lib"
    lib.mkdir(parents=True)
    (lib / "netty-handler-4.1.100.Final.jar").write_bytes(b"old")
    (lib / "netty-handler-proxy-4.1.100.Final.jar").write_bytes(b"proxy")
    done = tmp_path / "opt" / "plugins"
    done.mkdir()
    (done / "netty-handler-4.1.118.Final.jar").write_bytes(b"patched")

    report = build_applier().apply(patches, tmp_path / "opt", PatchOptions(backup=True))

    assert report.exit_code == 0
    assert [item.path.name for item in report.replaced] == ["netty-handler-4.1.100.Final.jar"]
    assert sorted(p.name for p in lib.iterdir() if p.is_file()) == [
        "netty-handler-4.1.118.Final.jar",
        "netty-handler-proxy-4.1.100.Final.jar",
    ]
    assert (lib / "netty-handler-4.1.118.Final.jar").read_bytes() == b"patched"
    assert len(list((lib / "backup").iterdir())) == 1
    assert sorted(p.name for p in done.iterdir()) == ["netty-handler-4.1.118.Final.jar"]


def test_apply_with_empty_patch_directory(tmp_path):
    patches = tmp_path / "patches"
    patches.mkdir()

    report = build_applier().apply(patches, tmp_path, PatchOptions())

    assert report.no_matches
    assert report.exit_code == 0


def test_apply_dry_run(tmp_path):
    patches = tmp_path / "patches"
    patches.mkdir()
    (patches / "json-smart-2.5.2.jar").write_bytes(b"new")
    target = tmp_path / "opt"
    target.mkdir()
    (target / "json-smart-2.4.3.jar").write_bytes(b"old")

    report = build_applier().apply(patches, target, PatchOptions(dry_run=True))

    assert len(report.matched) == 1
    assert [p.name for p in target.iterdir()] == ["json-smart-2.4.3.jar"]


@pytest.mark.parametrize("missing", ["patches", "target"])
def test_apply_requires_existing_directories(tmp_path, missing):
    patches = tmp_path / "patches"
    target = tmp_path / "target"
    for directory in (patches, target):
        if directory.name != missing:
            directory.mkdir()

    with pytest.raises(InvalidCoordinate):
        build_applier().apply(patches, target, PatchOptions())
