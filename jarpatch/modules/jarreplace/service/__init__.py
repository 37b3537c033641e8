from .patch_dir import PatchDirectoryApplier, extract_base_name
from .patcher import ArtifactPatcher, log_report

__all__ = ["ArtifactPatcher", "PatchDirectoryApplier", "extract_base_name", "log_report"]
