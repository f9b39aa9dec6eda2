"""
Filesystem and process providers.

Operators never touch ``os`` directly; they go through these adapters so the
failure paths can be exercised in tests by injecting a provider that raises.
"""

import os
import shutil
import subprocess
from typing import BinaryIO, List, Protocol, Sequence


class FileSystemProvider(Protocol):
    """Protocol for native filesystem calls. Failures raise OSError."""

    def exists(self, path: str) -> bool:
        ...

    def is_dir(self, path: str) -> bool:
        ...

    def size(self, path: str) -> int:
        """Size of a file in bytes."""
        ...

    def make_dirs(self, path: str) -> None:
        """Create a directory and all missing parents."""
        ...

    def remove_file(self, path: str) -> None:
        ...

    def remove_dir(self, path: str) -> None:
        """Remove an empty directory."""
        ...

    def remove_tree(self, path: str) -> None:
        ...

    def rename(self, src: str, dst: str) -> None:
        ...

    def list_dir(self, path: str) -> List[str]:
        """Names of the direct entries, without ``.`` and ``..``."""
        ...

    def open(self, path: str, mode: str) -> BinaryIO:
        """Open a file in a binary mode (``rb``, ``wb`` or ``ab``)."""
        ...


class ProcessProvider(Protocol):
    """Protocol for process-level calls."""

    def run(self, argv: Sequence[str]) -> int:
        """Spawn ``argv``, wait, return the raw return code."""
        ...

    def chdir(self, path: str) -> None:
        ...


class OsFileSystem:
    """Real filesystem implementation."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def size(self, path: str) -> int:
        return os.path.getsize(path)

    def make_dirs(self, path: str) -> None:
        os.makedirs(path)

    def remove_file(self, path: str) -> None:
        os.remove(path)

    def remove_dir(self, path: str) -> None:
        os.rmdir(path)

    def remove_tree(self, path: str) -> None:
        shutil.rmtree(path)

    def rename(self, src: str, dst: str) -> None:
        os.rename(src, dst)

    def list_dir(self, path: str) -> List[str]:
        with os.scandir(path) as it:
            return [entry.name for entry in it]

    def open(self, path: str, mode: str) -> BinaryIO:
        if "b" not in mode:
            raise ValueError(f"Binary mode required, got {mode!r}")
        return open(path, mode)


class SubprocessRunner:
    """Runs child processes with inherited stdio and no timeout."""

    def run(self, argv: Sequence[str]) -> int:
        completed = subprocess.run(list(argv))
        return completed.returncode

    def chdir(self, path: str) -> None:
        os.chdir(path)
