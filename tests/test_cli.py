import httpx
import pytest

from jarpatch.cli import apply_patches_main, main, split_target_dirs
from jarpatch.settings import Settings


class IdleChecker:
    def ensure_available(self) -> None:
        return None

    def is_open(self, path) -> bool:
        return False


def build_settings(tmp_path) -> Settings:
    return Settings(_env_file=None, download_dir=str(tmp_path / "downloads"))


def build_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def build_tree(tmp_path):
    dirs = [tmp_path / "lib", tmp_path / "plugins"]
    for directory in dirs:
        directory.mkdir()
        (directory / "json-smart-2.4.3.jar").write_bytes(b"old")
    return dirs


def test_split_target_dirs():
    assert split_target_dirs("/opt/lib  /opt/plugins", ".") == ["/opt/lib", "/opt/plugins"]
    assert split_target_dirs(None, ".") == ["."]


def test_help_exits_zero(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"], settings=build_settings(tmp_path))

    assert exc_info.value.code == 0
    assert "group" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["net.minidev", "json-smart", "2.4.3"],
        ["--unknown", "net.minidev", "json-smart", "2.4.3", "2.5.2"],
        ["net.minidev", "json-smart", "2.4.3", "2.5.2", "/opt", "extra"],
    ],
)
def test_argument_errors_exit_one(tmp_path, argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv, settings=build_settings(tmp_path))

    assert exc_info.value.code == 1


def test_identical_versions_exit_one(tmp_path):
    code = main(
        ["net.minidev", "json-smart", "2.4.3", "2.4.3", str(tmp_path)],
        settings=build_settings(tmp_path),
        checker=IdleChecker(),
    )

    assert code == 1


def test_successful_run(tmp_path):
    lib, plugins = build_tree(tmp_path)
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, content=b"new")

    code = main(
        [
            "-r",
            "https://mirror.example.com/central",
            "--backup",
            "net.minidev",
            "json-smart",
            "2.4.3",
            "2.5.2",
            f"{lib} {plugins}",
        ],
        settings=build_settings(tmp_path),
        client=build_client(handler),
        checker=IdleChecker(),
    )

    assert code == 0
    assert calls == ["https://mirror.example.com/central/net/minidev/json-smart/2.5.2/json-smart-2.5.2.jar"]
    for directory in (lib, plugins):
        assert (directory / "json-smart-2.5.2.jar").read_bytes() == b"new"
        assert not (directory / "json-smart-2.4.3.jar").exists()
        assert (directory / "backup").is_dir()


def test_download_failure_exits_one(tmp_path):
    lib, plugins = build_tree(tmp_path)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    code = main(
        ["net.minidev", "json-smart", "2.4.3", "2.5.2", f"{lib} {plugins}"],
        settings=build_settings(tmp_path),
        client=build_client(handler),
        checker=IdleChecker(),
    )

    assert code == 1
    assert (lib / "json-smart-2.4.3.jar").read_bytes() == b"old"
    assert (plugins / "json-smart-2.4.3.jar").read_bytes() == b"old"


def test_no_matches_exits_zero(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("nothing should be downloaded")

    code = main(
        ["--dry-run", "net.minidev", "json-smart", "2.4.3", "2.5.2", str(tmp_path)],
        settings=build_settings(tmp_path),
        client=build_client(handler),
    )

    assert code == 0


def test_apply_patches_missing_directory_exits_one(tmp_path):
    code = apply_patches_main([str(tmp_path / "missing"), str(tmp_path)], settings=build_settings(tmp_path))

    assert code == 1


def test_apply_patches(tmp_path):
    patches = tmp_path / "patches"
    patches.mkdir()
    (patches / "json-smart-2.5.2.jar").write_bytes(b"new")
    target = tmp_path / "opt"
    target.mkdir()
    (target / "json-smart-2.4.3.jar").write_bytes(b"old")

    code = apply_patches_main([str(patches), str(target)], settings=build_settings(tmp_path), checker=IdleChecker())

    assert code == 0
    assert [p.name for p in target.iterdir()] == ["json-smart-2.5.2.jar"]


def test_caller_supplied_client_is_left_open(tmp_path):
    lib, plugins = build_tree(tmp_path)
    client = build_client(lambda request: httpx.Response(200, content=b"new"))

    code = main(
        ["net.minidev", "json-smart", "2.4.3", "2.5.2", f"{lib} {plugins}"],
        settings=build_settings(tmp_path),
        client=client,
        checker=IdleChecker(),
    )

    assert code == 0
    assert not client.is_closed
    client.close()
