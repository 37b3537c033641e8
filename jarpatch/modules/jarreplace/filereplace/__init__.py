from .backup import BackupManager
from .inuse import OpenFileChecker
from .replacer import JarReplacer

__all__ = ["BackupManager", "OpenFileChecker", "JarReplacer"]
