"""Orchestrates locate, download, backup and replace for one coordinate."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from jarpatch.modules.jarreplace.domain import (
    DownloadedArtifact,
    MatchedFile,
    OperationReport,
    PatchRequest,
    PatchStage,
    ReplacementError,
    ReportBuilder,
    resolve_artifact_url,
)
from jarpatch.modules.jarreplace.domain.constants import DRY_RUN_PREFIX
from jarpatch.modules.jarreplace.filelocate import ArtifactLocator
from jarpatch.modules.jarreplace.fileget import MavenDownloader
from jarpatch.modules.jarreplace.filereplace import BackupManager, JarReplacer, OpenFileChecker
from jarpatch.settings import Settings


class ArtifactPatcher:
    """Replace every copy of ``request.old`` with ``request.new``.

    The new jar is downloaded once into a private temp directory and then
    copied into each directory holding a match. A failed download aborts the
    run before any search directory is touched; per-file failures are
    collected in the report and do not stop the remaining files.
    """

    def __init__(
        self,
        settings: Settings,
        downloader: MavenDownloader,
        *,
        locator: Optional[ArtifactLocator] = None,
        checker: Optional[OpenFileChecker] = None,
        replacer: Optional[JarReplacer] = None,
    ) -> None:
        self.settings = settings
        self.downloader = downloader
        self.locator = locator or ArtifactLocator()
        self.checker = checker or OpenFileChecker()
        self.replacer = replacer or JarReplacer(in_use_check=self.checker.is_open)
        self.log = logging.getLogger(self.__class__.__name__)

    def run(self, request: PatchRequest) -> OperationReport:
        options = request.options
        self.log.info("Starting jar replacement %s -> %s", request.old, request.new.version)
        self.log.info("Target directories: %s", " ".join(str(item) for item in request.search_dirs))
        self.log.info("Maven repository: %s", request.repository_url)
        if options.dry_run:
            self.log.info("Run mode: dry run")
        if not options.force and not options.dry_run:
            self.checker.ensure_available()

        report = ReportBuilder()

        self._stage(PatchStage.DISCOVER, request)
        matches = self._discover(request)
        report.add_matches(matches)
        if not matches:
            self.log.info("NoMatchesFound: no jar files found for %s, nothing to do", request.old)
            return self._finish(request, report)
        for matched in matches:
            self.log.info("  - %s", matched.path)

        self._stage(PatchStage.RESOLVE, request)
        url = resolve_artifact_url(request.new, request.repository_url)
        self.log.info("Resolved %s to %s", request.new, url)

        self._stage(PatchStage.DOWNLOAD, request)
        if options.dry_run:
            self.log.info("%s Would download: %s", DRY_RUN_PREFIX, url)
            self._replace_all(request, matches, Path(request.new.filename), report)
            return self._finish(request, report)

        if self.settings.download_dir:
            Path(self.settings.download_dir).mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="jarpatch-", dir=self.settings.download_dir))
        try:
            artifact = DownloadedArtifact(
                local_path=self.downloader.fetch(
                    url,
                    work_dir / request.new.filename,
                    verify_checksum=options.verify_checksum,
                ),
                coordinate=request.new,
            )
            self._replace_all(request, matches, artifact.local_path, report)
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)
            self.log.debug("Removed temporary download directory %s", work_dir)
        return self._finish(request, report)

    def _discover(self, request: PatchRequest) -> List[MatchedFile]:
        found = self.locator.locate(request.old.artifactid, request.old.version, request.search_dirs)
        target_name = request.new.filename
        matches = []
        for matched in found:
            # the lexical fallback pattern can match the replacement itself
            if matched.path.name == target_name:
                self.log.info("Skipping %s, already at %s", matched.path, request.new.version)
                continue
            matches.append(matched)
        return matches

    def _replace_all(
        self,
        request: PatchRequest,
        matches: List[MatchedFile],
        new_artifact_path: Path,
        report: ReportBuilder,
    ) -> None:
        options = request.options
        backups = BackupManager(
            enabled=options.backup,
            backup_dir_name=self.settings.backup_dir_name,
            timestamp_format=self.settings.backup_timestamp_format,
        )
        for matched in matches:
            if options.backup:
                self._stage(PatchStage.BACKUP, request, matched)
                backups.backup(matched.path, dry_run=options.dry_run)
            self._stage(PatchStage.REPLACE, request, matched)
            try:
                self.replacer.replace(
                    matched,
                    new_artifact_path,
                    force=options.force,
                    dry_run=options.dry_run,
                )
            except ReplacementError as exc:
                self.log.error("[%s] %s: %s", exc.error_code, matched.path, exc)
                report.record_failed(matched, exc)
                continue
            report.record_replaced(matched)

    def _finish(self, request: PatchRequest, builder: ReportBuilder) -> OperationReport:
        self._stage(PatchStage.REPORT, request)
        report = builder.build()
        log_report(self.log, report, dry_run=request.options.dry_run)
        return report

    def _stage(self, stage: PatchStage, request: PatchRequest, matched: Optional[MatchedFile] = None) -> None:
        if matched is None:
            self.log.info("Stage %s for %s", stage.value, request.old)
        else:
            self.log.info("Stage %s for %s at %s", stage.value, request.old, matched.path)


def log_report(logger: logging.Logger, report: OperationReport, *, dry_run: bool = False) -> None:
    prefix = f"{DRY_RUN_PREFIX} " if dry_run else ""
    logger.info(
        "%sSummary: matched=%d replaced=%d failed=%d",
        prefix,
        len(report.matched),
        len(report.replaced),
        len(report.failed),
    )
    for item in report.replaced:
        logger.info("%sNew jar placed in %s", prefix, item.containing_dir)
    for failure in report.failed:
        logger.error("Failed %s [%s]: %s", failure.matched.path, failure.error_code, failure.reason)
    if report.success:
        logger.info("JAR file management operation completed")
    else:
        logger.error("JAR file management operation finished with %d failure(s)", len(report.failed))
