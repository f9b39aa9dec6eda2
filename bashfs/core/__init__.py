# bashfs - Core Module
"""
Core infrastructure for bashfs.
Outcome types, logging, configuration and the OS providers the operators call through.
"""

from .outcome import OperationResult, OutcomeStatus
from .logger import AuditLogger, AuditEntry, OperationLogger
from .config import BashfsConfig, load_config, save_config
from .providers import FileSystemProvider, ProcessProvider, OsFileSystem, SubprocessRunner

__all__ = [
    "OperationResult",
    "OutcomeStatus",
    "AuditLogger",
    "AuditEntry",
    "OperationLogger",
    "BashfsConfig",
    "load_config",
    "save_config",
    "FileSystemProvider",
    "ProcessProvider",
    "OsFileSystem",
    "SubprocessRunner",
]
