"""Wire patching services from Settings."""

from __future__ import annotations

from typing import Optional

import httpx

from jarpatch.modules.jarreplace import ArtifactPatcher, PatchDirectoryApplier
from jarpatch.modules.jarreplace.fileget import MavenDownloader
from jarpatch.modules.jarreplace.filereplace import OpenFileChecker
from jarpatch.settings import Settings


def create_patcher(
    settings: Settings,
    *,
    client: Optional[httpx.Client] = None,
    checker: Optional[OpenFileChecker] = None,
) -> ArtifactPatcher:
    downloader = MavenDownloader(settings, client=client)
    return ArtifactPatcher(settings, downloader, checker=checker)


def create_patch_applier(settings: Settings, *, checker: Optional[OpenFileChecker] = None) -> PatchDirectoryApplier:
    return PatchDirectoryApplier(settings, checker=checker)
