"""Maven coordinates and download URL resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .exceptions import InvalidCoordinate


@dataclass(frozen=True)
class ArtifactCoordinates:
    """Represents a Maven artifact coordinate."""

    groupid: str
    artifactid: str
    version: str
    extension: str = "jar"

    @property
    def filename(self) -> str:
        return f"{self.artifactid}-{self.version}.{self.extension}"

    @property
    def path_segments(self) -> List[str]:
        group_path = self.groupid.replace(".", "/")
        return [group_path, self.artifactid, self.version, self.filename]

    def validate(self) -> "ArtifactCoordinates":
        missing = [
            name
            for name in ("groupid", "artifactid", "version")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise InvalidCoordinate(f"coordinate is missing {', '.join(missing)}: {self}")
        return self

    def __str__(self) -> str:
        return f"{self.groupid}:{self.artifactid}:{self.version}"


def resolve_artifact_url(coords: ArtifactCoordinates, repository_url: str) -> str:
    """Build ``<repo>/<group/path>/<artifact>/<version>/<artifact>-<version>.jar``."""
    coords.validate()
    base = (repository_url or "").strip().rstrip("/")
    if not base:
        raise InvalidCoordinate("repository URL must not be empty")
    return f"{base}/{'/'.join(coords.path_segments)}"
