import logging
import shutil

from jarpatch.modules.jarreplace.filereplace import BackupManager


def test_backup_disabled_is_noop(tmp_path):
    jar = tmp_path / "json-smart-2.4.3.jar"
    jar.write_bytes(b"old")

    assert BackupManager(enabled=False).backup(jar) is None
    assert not (tmp_path / "backup").exists()


def test_backup_copies_with_timestamp_suffix(tmp_path):
    jar = tmp_path / "json-smart-2.4.3.jar"
    jar.write_bytes(b"old")

    backup = BackupManager(enabled=True).backup(jar)

    assert backup is not None
    assert backup.parent == tmp_path / "backup"
    assert backup.name.startswith("json-smart-2.4.3.jar.backup.")
    assert backup.read_bytes() == b"old"
    assert jar.exists()


def test_backup_to_explicit_directory(tmp_path):
    jar = tmp_path / "json-smart-2.4.3.jar"
    jar.write_bytes(b"old")
    target = tmp_path / "saved" / "jars"

    backup = BackupManager(enabled=True, timestamp_format="%Y").backup(jar, target)

    assert backup is not None and backup.parent == target


def test_backup_failure_is_logged_not_raised(tmp_path, monkeypatch, caplog):
    jar = tmp_path / "json-smart-2.4.3.jar"
    jar.write_bytes(b"old")

    def boom(*_, **__):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(shutil, "copy2", boom)

    assert BackupManager(enabled=True).backup(jar) is None
    assert any(rec.levelno == logging.WARNING and "Backup failed" in rec.getMessage() for rec in caplog.records)


def test_backup_dry_run_writes_nothing(tmp_path):
    jar = tmp_path / "json-smart-2.4.3.jar"
    jar.write_bytes(b"old")

    assert BackupManager(enabled=True).backup(jar, dry_run=True) is None
    assert not (tmp_path / "backup").exists()
