"""
Bash-like module-level functions.

These wrap a default FileOperator / ProcessOperator pair and collapse each
OperationResult into a plain bool, str or optional exit code. Use the
operators directly when the reason for a failure matters.
"""

from typing import Optional, Sequence, Union

from .core.config import BashfsConfig
from .core.logger import AuditLogger, OperationLogger
from .os_operator.file_ops import Content, FileOperator, PathArg
from .os_operator.process_ops import ProcessOperator


_file_operator: Optional[FileOperator] = None
_process_operator: Optional[ProcessOperator] = None


def configure(
    config: Optional[BashfsConfig] = None,
    file_operator: Optional[FileOperator] = None,
    process_operator: Optional[ProcessOperator] = None
) -> None:
    """
    Rebuild the operators used by the module-level functions.

    Explicit operators win over ones built from ``config``.
    """
    global _file_operator, _process_operator

    config = config or BashfsConfig()
    audit = AuditLogger(config.audit_log) if config.audit_log else None
    logger = OperationLogger(audit=audit)

    _file_operator = file_operator or FileOperator(logger=logger, encoding=config.encoding)
    _process_operator = process_operator or ProcessOperator(logger=logger)


def get_file_operator() -> FileOperator:
    """Get the default file operator, creating it on first use."""
    if _file_operator is None:
        configure()
    return _file_operator


def get_process_operator() -> ProcessOperator:
    """Get the default process operator, creating it on first use."""
    if _process_operator is None:
        configure()
    return _process_operator


def mkdir(path: PathArg) -> bool:
    """
    Creates a directory recursively at ``path``.

    Returns False if the path already exists or creation failed.

    >>> mkdir("testdir")
    True
    """
    return get_file_operator().mkdir(path).success


def rm(path: PathArg) -> bool:
    """Removes the file at ``path``. False if it does not exist."""
    return get_file_operator().rm(path).success


def rmdir(path: PathArg) -> bool:
    """
    Removes an empty directory.

    True if removed or if it did not exist. Use ``rm_r`` for recursive removal.
    """
    return get_file_operator().rmdir(path).success


def rm_r(path: PathArg) -> bool:
    """Removes a directory recursively. True if removed or if it did not exist."""
    return get_file_operator().rm_r(path).success


def path_exists(path: PathArg) -> bool:
    return get_file_operator().path_exists(path).success


def directory_is_empty(path: PathArg) -> bool:
    """True only for an existing directory with no entries."""
    result = get_file_operator().directory_is_empty(path)
    return result.success and result.data == 0


def mv(path_one: PathArg, path_two: PathArg) -> bool:
    """Moves ``path_one`` to ``path_two``."""
    return get_file_operator().mv(path_one, path_two).success


def create_file(path: PathArg) -> bool:
    """Creates an empty file, truncating it if it exists."""
    return get_file_operator().create_file(path).success


def create_file_bytes(path: PathArg, bytes_to_write: Union[bytes, bytearray, memoryview]) -> bool:
    return get_file_operator().create_file_bytes(path, bytes_to_write).success


def write_file(path: PathArg, contents: Content) -> bool:
    """
    Writes ``contents`` to a file, replacing what was there.

    >>> write_file("text.txt", "Hello, world!")
    True
    >>> read_file("text.txt")
    'Hello, world!'
    """
    return get_file_operator().write_file(path, contents).success


def write_file_append(path: PathArg, contents: Content) -> bool:
    """Appends ``contents`` to a file, creating it if absent."""
    return get_file_operator().write_file_append(path, contents).success


def read_file(path: PathArg) -> str:
    """
    Reads a file and returns its contents.

    An unreadable file and an empty file both give ``""``.
    """
    return get_file_operator().read_file(path).data


def cd(path: PathArg) -> bool:
    """Changes the current working directory."""
    return get_process_operator().cd(path).success


def run_command(program: str, args: Sequence[str] = ()) -> Optional[int]:
    """
    Runs ``program`` with ``args`` and waits for it.

    Returns the exit code, or None if it could not be spawned or was
    killed by a signal.
    """
    return get_process_operator().run_command(program, args).data
