"""
bashfs - Bash-like filesystem utilities.

Simple functions named after shell commands (mkdir, rm, rm_r, mv, ...) that
return True/False instead of raising, plus operator classes that report the
reason behind each outcome.
"""

import logging

from .api import (
    cd,
    configure,
    create_file,
    create_file_bytes,
    directory_is_empty,
    get_file_operator,
    get_process_operator,
    mkdir,
    mv,
    path_exists,
    read_file,
    rm,
    rm_r,
    rmdir,
    run_command,
    write_file,
    write_file_append,
)
from .core import AuditLogger, BashfsConfig, OperationLogger, OperationResult, OutcomeStatus, load_config
from .os_operator import FileOperator, ProcessOperator

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "cd",
    "configure",
    "create_file",
    "create_file_bytes",
    "directory_is_empty",
    "get_file_operator",
    "get_process_operator",
    "mkdir",
    "mv",
    "path_exists",
    "read_file",
    "rm",
    "rm_r",
    "rmdir",
    "run_command",
    "write_file",
    "write_file_append",
    "AuditLogger",
    "BashfsConfig",
    "OperationLogger",
    "OperationResult",
    "OutcomeStatus",
    "load_config",
    "FileOperator",
    "ProcessOperator",
]

__version__ = "0.1.0"
