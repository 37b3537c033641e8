"""Jar replacement module exports."""

from .service import ArtifactPatcher, PatchDirectoryApplier

__all__ = ["ArtifactPatcher", "PatchDirectoryApplier"]
