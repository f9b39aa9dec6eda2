"""
File operations module for bashfs.

Bash-like file and directory operations. Each method makes at most one
native call through the filesystem provider and reports the outcome as an
OperationResult; OS errors are logged, never raised.
"""

import codecs
import os
from typing import Optional, Union

from ..core.logger import OperationLogger
from ..core.outcome import OperationResult, OutcomeStatus
from ..core.providers import FileSystemProvider, OsFileSystem


PathArg = Union[str, "os.PathLike[str]"]
Content = Union[str, bytes, bytearray, memoryview]


class FileOperator:
    """Operations on files and directories."""

    def __init__(
        self,
        fs: Optional[FileSystemProvider] = None,
        logger: Optional[OperationLogger] = None,
        encoding: str = "utf-8"
    ):
        """
        Initialize FileOperator.

        Args:
            fs: Filesystem provider (defaults to the real OS filesystem)
            logger: Operation logger instance
            encoding: Encoding used to turn text into bytes and back
        """
        self.fs = fs or OsFileSystem()
        self.logger = logger or OperationLogger()
        self.encoding = encoding

    def _result(
        self,
        operation: str,
        path: str,
        status: OutcomeStatus,
        description: str,
        data=None
    ) -> OperationResult:
        result = OperationResult(operation=operation, path=path, status=status, data=data)
        return self.logger.log_result(result, description)

    def _error(self, operation: str, path: str, error: Exception, description: str) -> OperationResult:
        result = OperationResult.from_error(operation, path, error)
        return self.logger.log_result(result, f"{description}: {error}")

    def _to_bytes(self, contents) -> bytes:
        if isinstance(contents, (bytes, bytearray, memoryview)):
            return bytes(contents)
        raise TypeError(f"Expected str or bytes-like contents, got {type(contents).__name__}")

    def _encode(self, contents: Content) -> bytes:
        if isinstance(contents, str):
            return contents.encode(self.encoding)
        return self._to_bytes(contents)

    def _encode_append(self, path: str, contents: Content) -> bytes:
        """Encode text that continues an existing file; BOM encodings emit no second BOM."""
        if not isinstance(contents, str):
            return self._encode(contents)

        encoder = codecs.getincrementalencoder(self.encoding)()
        if self.fs.exists(path) and self.fs.size(path) > 0:
            encoder.encode("")
        return encoder.encode(contents, final=True)

    # Directories

    def mkdir(self, path: PathArg) -> OperationResult:
        """
        Create a directory and any missing parents, like ``mkdir -p``.

        Returns DONE when created, ALREADY_EXISTS when the path was already
        there (nothing is touched), FAILED when the OS refused.
        """
        path = os.fspath(path)
        if self.fs.exists(path):
            return self._result("mkdir", path, OutcomeStatus.ALREADY_EXISTS, f"{path} already exists")

        try:
            self.fs.make_dirs(path)
        except OSError as e:
            return self._error("mkdir", path, e, f"Error creating directory {path}")

        return self._result("mkdir", path, OutcomeStatus.DONE, f"Created {path}")

    def rmdir(self, path: PathArg) -> OperationResult:
        """
        Remove an empty directory.

        This does not remove a directory recursively; use ``rm_r`` for that.
        A path that does not exist counts as already removed.
        """
        path = os.fspath(path)
        if not self.fs.exists(path):
            return self._result("rmdir", path, OutcomeStatus.ALREADY_ABSENT, f"Directory {path} does not exist")

        try:
            self.fs.remove_dir(path)
        except OSError as e:
            return self._error("rmdir", path, e, f"The directory {path} is not empty or cannot be removed")

        return self._result("rmdir", path, OutcomeStatus.DONE, f"Removed directory at {path}")

    def rm_r(self, path: PathArg) -> OperationResult:
        """
        Remove a directory and everything below it. Use carefully.

        A path that does not exist counts as already removed.
        """
        path = os.fspath(path)
        if not self.fs.exists(path):
            return self._result("rm_r", path, OutcomeStatus.ALREADY_ABSENT, f"Directory {path} does not exist")

        try:
            self.fs.remove_tree(path)
        except OSError as e:
            return self._error("rm_r", path, e, f"The directory {path} is not empty or cannot be removed")

        return self._result("rm_r", path, OutcomeStatus.DONE, f"Removed directory at {path}")

    def directory_is_empty(self, path: PathArg) -> OperationResult:
        """
        Count the direct entries of a directory.

        On DONE, ``data`` holds the entry count; the directory is empty when
        it is 0. Missing paths and non-directories are reported as such.
        """
        path = os.fspath(path)
        if not self.fs.exists(path):
            return self._result("directory_is_empty", path, OutcomeStatus.MISSING,
                                f"The path {path} passed does not exist")

        if not self.fs.is_dir(path):
            return self._result("directory_is_empty", path, OutcomeStatus.NOT_A_DIRECTORY,
                                f"The path {path} passed is not a directory")

        try:
            count = len(self.fs.list_dir(path))
        except OSError as e:
            return self._error("directory_is_empty", path, e, f"Cannot list directory {path}")

        return self._result("directory_is_empty", path, OutcomeStatus.DONE,
                            f"{path} has {count} entries", data=count)

    # Paths

    def path_exists(self, path: PathArg) -> OperationResult:
        """Check if a path exists. DONE if it does, MISSING otherwise."""
        path = os.fspath(path)
        if self.fs.exists(path):
            return self._result("path_exists", path, OutcomeStatus.DONE, f"{path} exists", data=True)
        return self._result("path_exists", path, OutcomeStatus.MISSING, f"{path} does not exist", data=False)

    def rm(self, path: PathArg) -> OperationResult:
        """Remove a file. Directories are left alone (the OS call fails)."""
        path = os.fspath(path)
        if not self.fs.exists(path):
            return self._result("rm", path, OutcomeStatus.MISSING, f"Cannot remove {path}: does not exist")

        try:
            self.fs.remove_file(path)
        except OSError as e:
            return self._error("rm", path, e, f"Error removing {path}")

        return self._result("rm", path, OutcomeStatus.DONE, f"Removed file {path}")

    def mv(self, path_one: PathArg, path_two: PathArg) -> OperationResult:
        """
        Move ``path_one`` to ``path_two`` with rename semantics.

        There is no copy-and-delete fallback, so moves across filesystems
        fail if the OS rename does.
        """
        path_one = os.fspath(path_one)
        path_two = os.fspath(path_two)
        if not self.fs.exists(path_one):
            return self._result("mv", path_one, OutcomeStatus.MISSING, f"Cannot move {path_one}: does not exist")

        try:
            self.fs.rename(path_one, path_two)
        except OSError as e:
            return self._error("mv", path_one, e, f"File moving error from {path_one} to {path_two}")

        return self._result("mv", path_one, OutcomeStatus.DONE, f"Moved from {path_one} to {path_two}",
                            data=path_two)

    # File contents

    def _write(self, operation: str, path: str, data: bytes, mode: str) -> OperationResult:
        """Open ``path`` in ``mode`` and write ``data``; both steps may fail."""
        try:
            handle = self.fs.open(path, mode)
        except OSError as e:
            return self._error(operation, path, e, f"Cannot write file to location '{path}'")

        try:
            with handle:
                handle.write(data)
        except OSError as e:
            return self._error(operation, path, e, f"Error writing to {path}")

        return self._result(operation, path, OutcomeStatus.DONE, f"Wrote {len(data)} bytes to {path}",
                            data=len(data))

    def create_file(self, path: PathArg) -> OperationResult:
        """Create an empty file, truncating an existing one. The parent must exist."""
        path = os.fspath(path)
        try:
            with self.fs.open(path, "wb"):
                pass
        except OSError as e:
            return self._error("create_file", path, e, f"Cannot create file {path}")

        return self._result("create_file", path, OutcomeStatus.DONE, f"Successfully created file {path}")

    def create_file_bytes(self, path: PathArg, bytes_to_write: Union[bytes, bytearray, memoryview]) -> OperationResult:
        """Create (or truncate) a file and write all of ``bytes_to_write``."""
        return self._write("create_file_bytes", os.fspath(path), self._to_bytes(bytes_to_write), "wb")

    def write_file(self, path: PathArg, contents: Content) -> OperationResult:
        """
        Create (or truncate) a file and write ``contents``.

        Text is encoded with the operator's encoding; bytes are written as is.
        A failure while writing is reported like any other failure.
        """
        path = os.fspath(path)
        try:
            data = self._encode(contents)
        except UnicodeEncodeError as e:
            return self._error("write_file", path, e, f"Cannot encode contents for {path}")
        return self._write("write_file", path, data, "wb")

    def write_file_append(self, path: PathArg, contents: Content) -> OperationResult:
        """Append ``contents`` to a file, creating it if absent."""
        path = os.fspath(path)
        try:
            data = self._encode_append(path, contents)
        except (OSError, UnicodeEncodeError) as e:
            return self._error("write_file_append", path, e, f"Cannot encode contents for {path}")
        return self._write("write_file_append", path, data, "ab")

    def read_file(self, path: PathArg) -> OperationResult:
        """
        Read a whole file as text.

        ``data`` is always a string: the contents on DONE, ``""`` otherwise.
        """
        path = os.fspath(path)
        try:
            with self.fs.open(path, "rb") as f:
                raw = f.read()
        except OSError as e:
            result = OperationResult.from_error("read_file", path, e)
            result.data = ""
            return self.logger.log_result(result, f"Cannot read file {path}: {e}")

        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            result = OperationResult.from_error("read_file", path, e)
            result.data = ""
            return self.logger.log_result(result, f"Cannot decode file {path} as {self.encoding}: {e}")

        return self._result("read_file", path, OutcomeStatus.DONE, f"Read {len(raw)} bytes from {path}", data=text)
