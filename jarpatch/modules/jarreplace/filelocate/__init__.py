from .locator import ArtifactLocator, artifact_patterns

__all__ = ["ArtifactLocator", "artifact_patterns"]
