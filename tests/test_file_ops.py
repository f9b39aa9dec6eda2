"""
Tests for the FileOperator.
"""

import errno
import io
import logging
import pytest
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from bashfs.core.logger import AuditLogger, OperationLogger
from bashfs.core.outcome import OutcomeStatus
from bashfs.core.providers import OsFileSystem
from bashfs.os_operator import FileOperator


class BrokenWriteHandle(io.BytesIO):
    """A file handle that opens fine but cannot be written to."""

    def write(self, data):
        raise OSError(errno.ENOSPC, "No space left on device")


class FullDiskFileSystem(OsFileSystem):
    """Opens for writing succeed, every write fails."""

    def open(self, path, mode):
        if "r" in mode:
            return super().open(path, mode)
        return BrokenWriteHandle()


class ReadOnlyFileSystem(OsFileSystem):
    """Every mutating call is refused."""

    def _refuse(self, *args, **kwargs):
        raise PermissionError(errno.EACCES, "Permission denied")

    make_dirs = _refuse
    remove_file = _refuse
    remove_dir = _refuse
    remove_tree = _refuse
    rename = _refuse

    def open(self, path, mode):
        if "r" in mode:
            return super().open(path, mode)
        self._refuse()


@pytest.fixture
def files():
    """A FileOperator on the real filesystem."""
    return FileOperator()


class TestDirectories:
    """Test mkdir, rmdir, rm_r and directory_is_empty."""

    def test_mkdir_creates_parents(self, files, tmp_path):
        target = tmp_path / "a" / "b" / "c"

        result = files.mkdir(target)

        assert result.success
        assert result.status == OutcomeStatus.DONE
        assert target.is_dir()

    def test_mkdir_existing_path(self, files, tmp_path):
        result = files.mkdir(tmp_path)

        assert not result.success
        assert result.status == OutcomeStatus.ALREADY_EXISTS
        assert result.message is None

    def test_mkdir_over_existing_file(self, files, tmp_path):
        """An existing file also counts as 'already exists'."""
        target = tmp_path / "file"
        target.write_text("x")

        assert files.mkdir(target).status == OutcomeStatus.ALREADY_EXISTS

    def test_mkdir_failure_reports_reason(self, tmp_path):
        files = FileOperator(fs=ReadOnlyFileSystem())

        result = files.mkdir(tmp_path / "new")

        assert result.failed
        assert result.errno == errno.EACCES
        assert "Permission denied" in result.message

    def test_rmdir_empty_directory(self, files, tmp_path):
        target = tmp_path / "empty"
        target.mkdir()

        result = files.rmdir(target)

        assert result.status == OutcomeStatus.DONE
        assert not target.exists()

    def test_rmdir_missing_is_satisfied(self, files, tmp_path):
        result = files.rmdir(tmp_path / "nope")

        assert result.success
        assert result.status == OutcomeStatus.ALREADY_ABSENT

    def test_rmdir_non_empty_fails(self, files, tmp_path):
        target = tmp_path / "full"
        target.mkdir()
        (target / "child").write_text("x")

        result = files.rmdir(target)

        assert result.failed
        assert target.exists()

    def test_rm_r_removes_tree(self, files, tmp_path):
        root = tmp_path / "tree"
        nested = [root / "a", root / "a" / "b", root / "a" / "b" / "f.txt", root / "g.txt"]
        (root / "a" / "b").mkdir(parents=True)
        (root / "a" / "b" / "f.txt").write_text("f")
        (root / "g.txt").write_text("g")

        result = files.rm_r(root)

        assert result.status == OutcomeStatus.DONE
        assert not root.exists()
        for path in nested:
            assert not path.exists()

    def test_rm_r_missing_is_satisfied(self, files, tmp_path):
        assert files.rm_r(tmp_path / "nope").status == OutcomeStatus.ALREADY_ABSENT

    def test_rm_r_failure(self, tmp_path):
        target = tmp_path / "tree"
        target.mkdir()
        files = FileOperator(fs=ReadOnlyFileSystem())

        result = files.rm_r(target)

        assert result.failed
        assert not result.success
        assert target.exists()

    def test_directory_is_empty_counts_entries(self, files, tmp_path):
        empty = files.directory_is_empty(tmp_path)
        (tmp_path / "x").write_text("")
        (tmp_path / "y").mkdir()
        full = files.directory_is_empty(tmp_path)

        assert empty.status == OutcomeStatus.DONE
        assert empty.data == 0
        assert full.data == 2

    def test_directory_is_empty_on_file(self, files, tmp_path):
        target = tmp_path / "file"
        target.write_text("")

        assert files.directory_is_empty(target).status == OutcomeStatus.NOT_A_DIRECTORY

    def test_directory_is_empty_on_missing_path(self, files, tmp_path):
        assert files.directory_is_empty(tmp_path / "nope").status == OutcomeStatus.MISSING


class TestPaths:
    """Test path_exists, rm and mv."""

    def test_path_exists(self, files, tmp_path):
        assert files.path_exists(tmp_path).success
        assert files.path_exists(tmp_path / "nope").status == OutcomeStatus.MISSING

    def test_rm_file(self, files, tmp_path):
        target = tmp_path / "file"
        target.write_text("x")

        assert files.rm(target).status == OutcomeStatus.DONE
        assert not target.exists()

    def test_rm_missing_file(self, files, tmp_path):
        result = files.rm(tmp_path / "nope")

        assert not result.success
        assert result.status == OutcomeStatus.MISSING

    def test_rm_refuses_directories(self, files, tmp_path):
        target = tmp_path / "dir"
        target.mkdir()

        result = files.rm(target)

        assert result.failed
        assert target.is_dir()

    def test_mv_moves_file(self, files, tmp_path):
        src = tmp_path / "one" / "the_file"
        dst = tmp_path / "two" / "the_file"
        src.parent.mkdir()
        dst.parent.mkdir()
        src.write_text("payload")

        result = files.mv(src, dst)

        assert result.status == OutcomeStatus.DONE
        assert result.data == str(dst)
        assert not src.exists()
        assert dst.read_text() == "payload"

    def test_mv_missing_source(self, files, tmp_path):
        result = files.mv(tmp_path / "nope", tmp_path / "dst")

        assert result.status == OutcomeStatus.MISSING

    def test_mv_into_missing_directory_fails(self, files, tmp_path):
        src = tmp_path / "file"
        src.write_text("x")

        result = files.mv(src, tmp_path / "missing" / "file")

        assert result.failed
        assert src.exists()


class TestFileContents:
    """Test create/write/append/read."""

    def test_create_file_truncates(self, files, tmp_path):
        target = tmp_path / "file"
        target.write_text("old contents")

        assert files.create_file(target).success
        assert target.read_bytes() == b""

    def test_create_file_needs_parent(self, files, tmp_path):
        result = files.create_file(tmp_path / "missing" / "file")

        assert result.failed
        assert result.errno == errno.ENOENT

    def test_create_file_bytes(self, files, tmp_path):
        target = tmp_path / "binary"
        payload = bytes(range(256))

        result = files.create_file_bytes(target, payload)

        assert result.success
        assert result.data == 256
        assert target.read_bytes() == payload

    def test_write_then_read(self, files, tmp_path):
        target = tmp_path / "text.txt"

        assert files.write_file(target, "Hello, world! ünïcödé").success
        assert files.read_file(target).data == "Hello, world! ünïcödé"

    def test_write_file_accepts_bytes(self, files, tmp_path):
        target = tmp_path / "raw"

        assert files.write_file(target, b"\x00\x01").success
        assert target.read_bytes() == b"\x00\x01"

    def test_append(self, files, tmp_path):
        target = tmp_path / "text.txt"

        files.write_file(target, "A")
        files.write_file_append(target, "B")

        assert files.read_file(target).data == "AB"

    def test_append_creates_file(self, files, tmp_path):
        target = tmp_path / "new.txt"

        assert files.write_file_append(target, "first").success
        assert target.read_text() == "first"

    def test_write_failure_after_open_is_reported(self, tmp_path):
        """A failed write is a normal failure result, not a crash."""
        files = FileOperator(fs=FullDiskFileSystem())

        result = files.write_file(tmp_path / "file", "data")

        assert result.failed
        assert result.errno == errno.ENOSPC

    def test_append_failure_after_open_is_reported(self, tmp_path):
        files = FileOperator(fs=FullDiskFileSystem())

        assert files.write_file_append(tmp_path / "file", "data").failed

    def test_create_file_bytes_write_failure(self, tmp_path):
        files = FileOperator(fs=FullDiskFileSystem())

        assert not files.create_file_bytes(tmp_path / "file", b"data").success

    def test_write_open_failure(self, tmp_path):
        files = FileOperator(fs=ReadOnlyFileSystem())

        result = files.write_file(tmp_path / "file", "data")

        assert result.failed
        assert result.errno == errno.EACCES

    def test_read_missing_file(self, files, tmp_path):
        result = files.read_file(tmp_path / "nope")

        assert result.failed
        assert result.data == ""

    def test_read_empty_file(self, files, tmp_path):
        target = tmp_path / "empty"
        target.touch()

        result = files.read_file(target)

        assert result.success
        assert result.data == ""

    def test_read_undecodable_file(self, files, tmp_path):
        target = tmp_path / "latin1"
        target.write_bytes(b"\xff\xfe\xfa")

        result = files.read_file(target)

        assert result.failed
        assert result.data == ""

    def test_custom_encoding(self, tmp_path):
        files = FileOperator(encoding="latin-1")
        target = tmp_path / "latin1"

        files.write_file(target, "café")

        assert target.read_bytes() == "café".encode("latin-1")
        assert files.read_file(target).data == "café"

    @pytest.mark.parametrize("encoding", ["utf-16", "utf-8-sig"])
    def test_append_with_bom_encoding(self, tmp_path, encoding):
        """Appending never puts a second byte-order mark mid-file."""
        files = FileOperator(encoding=encoding)
        target = tmp_path / "bom.txt"

        files.write_file(target, "A")
        files.write_file_append(target, "B")
        files.write_file_append(target, "C")

        assert target.read_bytes() == "ABC".encode(encoding)
        assert files.read_file(target).data == "ABC"

    def test_append_bom_encoding_to_new_file(self, tmp_path):
        files = FileOperator(encoding="utf-16")
        target = tmp_path / "fresh.txt"

        files.write_file_append(target, "first")

        assert files.read_file(target).data == "first"

    def test_write_rejects_non_bytes_contents(self, files, tmp_path):
        target = tmp_path / "file"

        with pytest.raises(TypeError):
            files.write_file(target, 5)
        with pytest.raises(TypeError):
            files.write_file_append(target, 5)

        assert not target.exists()

    def test_create_file_bytes_rejects_int(self, files, tmp_path):
        target = tmp_path / "file"

        with pytest.raises(TypeError):
            files.create_file_bytes(target, 3)

        assert not target.exists()


class TestLogging:
    """Test that outcomes are logged and audited."""

    def test_success_logged_at_info(self, files, tmp_path, caplog):
        with caplog.at_level(logging.INFO, logger="bashfs"):
            files.mkdir(tmp_path / "new")

        assert any(r.levelno == logging.INFO and "Created" in r.getMessage() for r in caplog.records)

    def test_failure_logged_at_error(self, files, tmp_path, caplog):
        with caplog.at_level(logging.INFO, logger="bashfs"):
            files.create_file(tmp_path / "missing" / "file")

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "Cannot create file" in errors[0].getMessage()

    def test_outcomes_written_to_audit_log(self, tmp_path):
        audit = AuditLogger(log_path=tmp_path / "audit.jsonl")
        files = FileOperator(logger=OperationLogger(audit=audit))

        files.mkdir(tmp_path / "d")
        files.rm(tmp_path / "nope")
        files.create_file(tmp_path / "missing" / "f")

        recent = audit.get_recent()
        assert [e.operation for e in recent] == ["create_file", "rm", "mkdir"]
        assert [e.status for e in recent] == ["failed", "missing", "done"]
        assert recent[0].metadata["errno"] == errno.ENOENT

    def test_unwritable_audit_log_does_not_break_operations(self, tmp_path, caplog):
        log_path = tmp_path / "audit.jsonl"
        audit = AuditLogger(log_path=log_path)
        log_path.unlink()
        log_path.mkdir()
        files = FileOperator(logger=OperationLogger(audit=audit))

        with caplog.at_level(logging.INFO, logger="bashfs"):
            exists = files.path_exists(tmp_path)
            created = files.mkdir(tmp_path / "d")

        assert exists.success
        assert created.status == OutcomeStatus.DONE
        assert any("Cannot write audit log" in r.getMessage() for r in caplog.records)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
