"""Error taxonomy for jar replacement."""

from __future__ import annotations


class PatchError(RuntimeError):
    """Base class for every failure raised by the patching flow."""


class InvalidCoordinate(PatchError):
    """Raised for malformed coordinates or arguments, before any I/O happens."""


class MissingDependency(PatchError):
    """Raised at startup when a required runtime capability is absent."""


class FetchFailed(PatchError):
    """Raised when the replacement artifact cannot be downloaded."""


class ReplacementError(PatchError):
    """Per-file failure; recorded in the report instead of aborting the run."""

    error_code = "ReplacementError"


class FileInUse(ReplacementError):
    error_code = "FileInUse"


class CopyFailed(ReplacementError):
    error_code = "CopyFailed"


class DeleteFailed(ReplacementError):
    error_code = "DeleteFailed"
