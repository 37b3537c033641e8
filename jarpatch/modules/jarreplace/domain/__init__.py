from .artifact import ArtifactCoordinates, resolve_artifact_url
from .exceptions import (
    CopyFailed,
    DeleteFailed,
    FetchFailed,
    FileInUse,
    InvalidCoordinate,
    MissingDependency,
    PatchError,
    ReplacementError,
)
from .models import (
    DownloadedArtifact,
    FailedFile,
    MatchedFile,
    OperationReport,
    PatchOptions,
    PatchRequest,
    PatchStage,
    ReportBuilder,
)

__all__ = [
    "ArtifactCoordinates",
    "resolve_artifact_url",
    "CopyFailed",
    "DeleteFailed",
    "FetchFailed",
    "FileInUse",
    "InvalidCoordinate",
    "MissingDependency",
    "PatchError",
    "ReplacementError",
    "DownloadedArtifact",
    "FailedFile",
    "MatchedFile",
    "OperationReport",
    "PatchOptions",
    "PatchRequest",
    "PatchStage",
    "ReportBuilder",
]
