"""Swap a matched jar for its replacement inside the same directory."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

from jarpatch.modules.jarreplace.domain import CopyFailed, DeleteFailed, FileInUse, MatchedFile
from jarpatch.modules.jarreplace.domain.constants import DRY_RUN_PREFIX, TEMP_SUFFIX

InUseCheck = Callable[[Path], bool]


class JarReplacer:
    """Copy the new jar next to the matched one, then delete the matched one.

    The copy always happens before the delete, so a directory may briefly
    hold both versions but never neither.
    """

    def __init__(self, in_use_check: Optional[InUseCheck] = None) -> None:
        self.in_use_check = in_use_check
        self.log = logging.getLogger(self.__class__.__name__)

    def replace(
        self,
        matched: MatchedFile,
        new_artifact_path: Path,
        *,
        force: bool = False,
        dry_run: bool = False,
    ) -> Path:
        source = Path(new_artifact_path)
        target = matched.containing_dir / source.name
        if dry_run:
            self.log.info("%s Would copy: %s -> %s", DRY_RUN_PREFIX, source, target)
            self.log.info("%s Would delete: %s", DRY_RUN_PREFIX, matched.path)
            return target

        if not force and self.in_use_check is not None and self.in_use_check(matched.path):
            self.log.warning("File is in use: %s", matched.path)
            raise FileInUse(
                f"{matched.path} is in use; use --force to replace it anyway, "
                "or stop the process using the file first"
            )

        self._copy(source, target)
        self._delete(matched.path)
        self.log.info("Replaced %s with %s", matched.path, target)
        return target

    def _copy(self, source: Path, target: Path) -> None:
        temp_target = target.with_name(target.name + TEMP_SUFFIX)
        self.log.debug("Copying %s -> %s", source, target)
        try:
            shutil.copyfile(source, temp_target)
            temp_target.replace(target)
        except OSError as exc:
            temp_target.unlink(missing_ok=True)
            raise CopyFailed(f"failed to copy {source} to {target}: {exc}") from exc

    def _delete(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError as exc:
            raise DeleteFailed(f"failed to delete {path}, new jar left beside it: {exc}") from exc
        self.log.info("Deleted: %s", path)
