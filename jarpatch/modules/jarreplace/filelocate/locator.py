"""Filesystem search for jar files belonging to a coordinate."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List, Sequence, Set

from jarpatch.modules.jarreplace.domain import MatchedFile
from jarpatch.modules.jarreplace.domain.constants import JAR_EXTENSION, QUALIFIED_SUFFIXES


def artifact_patterns(artifact: str, version: str) -> List[str]:
    """Filename globs for an artifact version, most specific first."""
    stem = f"{artifact}-{version}"
    patterns = [f"{stem}.{JAR_EXTENSION}"]
    patterns.extend(f"{stem}{suffix}.{JAR_EXTENSION}" for suffix in QUALIFIED_SUFFIXES)
    patterns.append(f"*{artifact}*{version}*.{JAR_EXTENSION}")
    return patterns


class ArtifactLocator:
    """Find jar files by name under a list of search directories.

    Only file names are inspected. Missing or unreadable directories are
    logged and skipped so a single bad path never aborts the search.
    """

    def __init__(self) -> None:
        self.log = logging.getLogger(self.__class__.__name__)

    def locate(self, artifact: str, version: str, dirs: Iterable[Path]) -> List[MatchedFile]:
        patterns = artifact_patterns(artifact, version)
        self.log.info("Searching for %s-%s jars with patterns %s", artifact, version, patterns)
        return self._search(patterns, dirs)

    def locate_by_base_name(self, base_name: str, dirs: Iterable[Path]) -> List[MatchedFile]:
        patterns = [f"{base_name}-*.{JAR_EXTENSION}"]
        self.log.info("Searching for %s jars with patterns %s", base_name, patterns)
        return self._search(patterns, dirs)

    def _search(self, patterns: Sequence[str], dirs: Iterable[Path]) -> List[MatchedFile]:
        results: List[MatchedFile] = []
        seen: Set[Path] = set()
        for raw_dir in dirs:
            search_dir = Path(raw_dir)
            # os.path.isdir reports unreadable parents as False instead of raising
            if not os.path.isdir(search_dir):
                self.log.warning("Directory does not exist or is not accessible, skipping: %s", search_dir)
                continue
            self.log.debug("Searching directory: %s", search_dir)
            found = 0
            for path in self._walk(search_dir, patterns):
                # symlinks are not followed here: every linked location needs its own new jar
                key = Path(os.path.abspath(path))
                if key in seen:
                    continue
                seen.add(key)
                results.append(MatchedFile(path=path, search_dir=search_dir))
                found += 1
            self.log.info("Found %d matching jar(s) in %s", found, search_dir)
        return results

    def _walk(self, search_dir: Path, patterns: Sequence[str]) -> List[Path]:
        def on_error(exc: OSError) -> None:
            self.log.warning("Cannot read %s, skipping: %s", exc.filename, exc.strerror or exc)

        matches: List[Path] = []
        for root, _dirs, files in os.walk(search_dir, onerror=on_error):
            for name in files:
                if any(fnmatchcase(name, pattern) for pattern in patterns):
                    path = Path(root) / name
                    if os.path.isfile(path):
                        matches.append(path)
        return sorted(matches)
