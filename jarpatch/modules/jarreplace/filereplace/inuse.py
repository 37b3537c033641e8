"""Detect whether another process holds a file open."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import psutil

from jarpatch.modules.jarreplace.domain import MissingDependency

log = logging.getLogger(__name__)


class OpenFileChecker:
    """psutil based replacement for ``lsof <file>``."""

    def __init__(self) -> None:
        self._own_pid = os.getpid()

    def ensure_available(self) -> None:
        try:
            psutil.Process(self._own_pid).open_files()
        except (psutil.AccessDenied, NotImplementedError) as exc:
            raise MissingDependency(
                f"cannot query open files on this platform ({exc}); use --force to skip the in-use check"
            ) from exc

    def is_open(self, path: Path) -> bool:
        target = os.path.realpath(path)
        for proc in psutil.process_iter(["pid"]):
            if proc.pid == self._own_pid:
                continue
            try:
                open_files = proc.open_files()
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            for item in open_files:
                if os.path.realpath(item.path) == target:
                    log.debug("File %s is held open by pid=%s", target, proc.pid)
                    return True
        return False
