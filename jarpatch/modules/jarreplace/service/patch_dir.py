"""Apply a directory of pre-downloaded patch jars to an installation tree."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from jarpatch.modules.jarreplace.domain import (
    InvalidCoordinate,
    MatchedFile,
    OperationReport,
    PatchOptions,
    ReplacementError,
    ReportBuilder,
)
from jarpatch.modules.jarreplace.filelocate import ArtifactLocator
from jarpatch.modules.jarreplace.filereplace import BackupManager, JarReplacer, OpenFileChecker
from jarpatch.modules.jarreplace.service.patcher import log_report
from jarpatch.settings import Settings

# json-smart-2.5.2 / commons-lang3-3.12.0 / spring-boot-2.7.0-SNAPSHOT
_STANDARD_VERSION = re.compile(r"-[0-9]+(\.[0-9]+)*(\.[0-9]+)*(-[A-Za-z0-9]+)*$")
# netty-handler-4.1.118.Final
_QUALIFIED_VERSION = re.compile(r"-[0-9]+(\.[0-9]+)*(\.[0-9]+)*\.([A-Za-z0-9]+)*$")


def extract_base_name(jar_file: str | Path) -> str:
    """Strip the version suffix from a jar file name.

    >>> extract_base_name("netty-handler-4.1.118.Final.jar")
    'netty-handler'
    """
    filename = Path(jar_file).name
    if filename.endswith(".jar"):
        filename = filename[: -len(".jar")]
    base_name = _STANDARD_VERSION.sub("", filename, count=1)
    if base_name == filename:
        base_name = _QUALIFIED_VERSION.sub("", filename, count=1)
    return base_name


class PatchDirectoryApplier:
    """Replace ``<base>-<any version>.jar`` files with the jars found in a patch directory."""

    def __init__(
        self,
        settings: Settings,
        *,
        locator: Optional[ArtifactLocator] = None,
        checker: Optional[OpenFileChecker] = None,
        replacer: Optional[JarReplacer] = None,
    ) -> None:
        self.settings = settings
        self.locator = locator or ArtifactLocator()
        self.checker = checker or OpenFileChecker()
        self.replacer = replacer or JarReplacer(in_use_check=self.checker.is_open)
        self.log = logging.getLogger(self.__class__.__name__)

    def apply(self, patches_dir: Path, target_dir: Path, options: PatchOptions) -> OperationReport:
        patches_dir = Path(patches_dir)
        target_dir = Path(target_dir)
        if not patches_dir.is_dir():
            raise InvalidCoordinate(f"patches directory does not exist: {patches_dir}")
        if not target_dir.is_dir():
            raise InvalidCoordinate(f"target directory does not exist: {target_dir}")
        if not options.force and not options.dry_run:
            self.checker.ensure_available()

        self.log.info("Starting jar patch process")
        self.log.info("Patches directory: %s", patches_dir)
        self.log.info("Target directory: %s", target_dir)

        patch_jars = sorted(item for item in patches_dir.glob("*.jar") if item.is_file())
        if not patch_jars:
            self.log.info("No jar files found in patches directory: %s", patches_dir)

        report = OperationReport()
        for patch_jar in patch_jars:
            report = report.merge(self._apply_one(patch_jar, target_dir, options))

        self.log.info("Total patches processed: %d", len(patch_jars))
        log_report(self.log, report, dry_run=options.dry_run)
        return report

    def _apply_one(self, patch_jar: Path, target_dir: Path, options: PatchOptions) -> OperationReport:
        self.log.info("Processing patch jar: %s", patch_jar)
        base_name = extract_base_name(patch_jar)
        self.log.info("Base name extracted: %s", base_name)

        builder = ReportBuilder()
        matches = self._targets_for(base_name, patch_jar, target_dir)
        builder.add_matches(matches)
        if not matches:
            self.log.info("No target jars found for base name: %s", base_name)
            return builder.build()

        backups = BackupManager(
            enabled=options.backup,
            backup_dir_name=self.settings.backup_dir_name,
            timestamp_format=self.settings.backup_timestamp_format,
        )
        for matched in matches:
            backups.backup(matched.path, dry_run=options.dry_run)
            try:
                self.replacer.replace(matched, patch_jar, force=options.force, dry_run=options.dry_run)
            except ReplacementError as exc:
                self.log.error("[%s] %s: %s", exc.error_code, matched.path, exc)
                builder.record_failed(matched, exc)
                continue
            builder.record_replaced(matched)

        result = builder.build()
        self.log.info("Replaced %d jar(s) for base name: %s", len(result.replaced), base_name)
        return result

    def _targets_for(self, base_name: str, patch_jar: Path, target_dir: Path) -> List[MatchedFile]:
        prefix = f"{base_name}-"
        targets = []
        for matched in self.locator.locate_by_base_name(base_name, [target_dir]):
            name = matched.path.name
            if name == patch_jar.name:
                self.log.debug("Already patched: %s", matched.path)
                continue
            # netty-handler must not pick up netty-handler-proxy-*.jar
            if not name[len(prefix):][:1].isdigit():
                continue
            targets.append(matched)
        return targets
