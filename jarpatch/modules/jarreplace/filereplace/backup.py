"""Best-effort backups of jars before they are replaced."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from jarpatch.modules.jarreplace.domain.constants import BACKUP_MARKER, DRY_RUN_PREFIX


class BackupManager:
    """Copy files to ``<backup_dir>/<name>.backup.<timestamp>``.

    Failures are logged and swallowed: a missing backup never blocks a patch.
    """

    def __init__(
        self,
        enabled: bool,
        backup_dir_name: str = "backup",
        timestamp_format: str = "%Y%m%d_%H%M%S",
    ) -> None:
        self.enabled = enabled
        self.backup_dir_name = backup_dir_name
        self.timestamp_format = timestamp_format
        self.log = logging.getLogger(self.__class__.__name__)

    def backup_dir_for(self, file: Path) -> Path:
        return Path(file).parent / self.backup_dir_name

    def backup(self, file: Path, backup_dir: Optional[Path] = None, *, dry_run: bool = False) -> Optional[Path]:
        if not self.enabled:
            return None
        source = Path(file)
        target_dir = Path(backup_dir) if backup_dir else self.backup_dir_for(source)
        if dry_run:
            self.log.info("%s Would backup: %s -> %s/", DRY_RUN_PREFIX, source, target_dir)
            return None
        stamp = datetime.now().strftime(self.timestamp_format)
        dest = target_dir / f"{source.name}{BACKUP_MARKER}{stamp}"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
        except OSError as exc:
            self.log.warning("Backup failed: %s (%s)", source, exc)
            return None
        self.log.info("File backed up to: %s", dest)
        return dest
