"""Dataclasses describing a patch run and its outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Set, Tuple

from .artifact import ArtifactCoordinates
from .exceptions import InvalidCoordinate, ReplacementError


class PatchStage(str, Enum):
    DISCOVER = "DISCOVER"
    RESOLVE = "RESOLVE"
    DOWNLOAD = "DOWNLOAD"
    BACKUP = "BACKUP"
    REPLACE = "REPLACE"
    REPORT = "REPORT"


@dataclass(frozen=True)
class PatchOptions:
    dry_run: bool = False
    verbose: bool = False
    force: bool = False
    backup: bool = False
    verify_checksum: bool = False


@dataclass(frozen=True)
class PatchRequest:
    """Immutable description of one patch invocation."""

    old: ArtifactCoordinates
    new: ArtifactCoordinates
    search_dirs: Tuple[Path, ...]
    repository_url: str
    options: PatchOptions = field(default_factory=PatchOptions)

    @classmethod
    def create(
        cls,
        *,
        group: str,
        artifact: str,
        old_version: str,
        new_version: str,
        search_dirs: Iterable[str | Path],
        repository_url: str,
        options: PatchOptions | None = None,
    ) -> "PatchRequest":
        old = ArtifactCoordinates(groupid=group, artifactid=artifact, version=old_version).validate()
        new = ArtifactCoordinates(groupid=group, artifactid=artifact, version=new_version).validate()
        if old.version == new.version:
            raise InvalidCoordinate(f"old and new version are identical: {old.version}")
        if not (repository_url or "").strip():
            raise InvalidCoordinate("repository URL must not be empty")
        dirs = tuple(Path(item) for item in search_dirs if str(item).strip())
        if not dirs:
            raise InvalidCoordinate("at least one target directory is required")
        return cls(
            old=old,
            new=new,
            search_dirs=dirs,
            repository_url=repository_url.strip(),
            options=options or PatchOptions(),
        )


@dataclass(frozen=True)
class MatchedFile:
    """One on-disk occurrence of the old artifact."""

    path: Path
    search_dir: Path

    @property
    def containing_dir(self) -> Path:
        return self.path.parent

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class DownloadedArtifact:
    local_path: Path
    coordinate: ArtifactCoordinates


@dataclass(frozen=True)
class FailedFile:
    matched: MatchedFile
    reason: str
    error_code: str


@dataclass(frozen=True)
class OperationReport:
    matched: Tuple[MatchedFile, ...] = ()
    replaced: Tuple[MatchedFile, ...] = ()
    failed: Tuple[FailedFile, ...] = ()

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    @property
    def no_matches(self) -> bool:
        return not self.matched

    def merge(self, other: "OperationReport") -> "OperationReport":
        return OperationReport(
            matched=self.matched + other.matched,
            replaced=self.replaced + other.replaced,
            failed=self.failed + other.failed,
        )


class ReportBuilder:
    """Accumulates per-file outcomes and freezes them into an OperationReport."""

    def __init__(self) -> None:
        self._matched: List[MatchedFile] = []
        self._replaced: List[MatchedFile] = []
        self._failed: List[FailedFile] = []
        self._settled: Set[MatchedFile] = set()

    def add_matches(self, matches: Iterable[MatchedFile]) -> None:
        self._matched.extend(matches)

    def record_replaced(self, matched: MatchedFile) -> None:
        self._settle(matched)
        self._replaced.append(matched)

    def record_failed(self, matched: MatchedFile, error: ReplacementError) -> None:
        self._settle(matched)
        self._failed.append(FailedFile(matched=matched, reason=str(error), error_code=error.error_code))

    def build(self) -> OperationReport:
        return OperationReport(
            matched=tuple(self._matched),
            replaced=tuple(self._replaced),
            failed=tuple(self._failed),
        )

    def _settle(self, matched: MatchedFile) -> None:
        if matched in self._settled:
            raise ValueError(f"outcome already recorded for {matched}")
        self._settled.add(matched)
