"""
Logging for bashfs.

Operation records go to the standard ``logging`` hierarchy under ``bashfs``.
The host application owns handler configuration; without one the records are
dropped. An optional append-only JSONL audit trail keeps a durable copy of
every operation outcome.
"""

import csv
import io
import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Dict, Any, Union

from .outcome import OperationResult, OutcomeStatus


LOGGER_NAME = "bashfs"


@dataclass
class AuditEntry:
    """Represents a single audit log entry."""
    timestamp: str
    operation: str
    path: str
    status: str
    message: Optional[str]
    metadata: Dict[str, Any]

    @classmethod
    def create(
        cls,
        operation: str,
        path: str,
        status: OutcomeStatus,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "AuditEntry":
        """Factory method to create an audit entry with current timestamp."""
        return cls(
            timestamp=datetime.now().isoformat(),
            operation=operation,
            path=path,
            status=status.value,
            message=message,
            metadata=metadata or {}
        )

    @classmethod
    def from_result(cls, result: OperationResult, description: str) -> "AuditEntry":
        metadata: Dict[str, Any] = {"description": description}
        if result.errno is not None:
            metadata["errno"] = result.errno
        return cls.create(
            operation=result.operation,
            path=result.path,
            status=result.status,
            message=result.message,
            metadata=metadata
        )

    def to_json(self) -> str:
        """Convert entry to JSON string."""
        return json.dumps(asdict(self), ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> "AuditEntry":
        """Create entry from JSON string."""
        data = json.loads(json_str)
        return cls(**data)


class AuditLogger:
    """
    Append-only audit logger.

    Every operation outcome is written as one JSON line. Entries are never
    rewritten; ``clear`` moves the file aside instead of truncating it.
    """

    def __init__(self, log_path: Union[str, Path] = "bashfs_audit.jsonl"):
        """
        Initialize the audit logger.

        Args:
            log_path: Path to the JSONL log file
        """
        self.log_path = Path(log_path)
        self._ensure_log_directory()

    def _ensure_log_directory(self) -> None:
        """Create the log directory and file if they don't exist."""
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.log_path.exists():
            self.log_path.touch()

    def log(self, entry: AuditEntry) -> None:
        """
        Append an audit entry to the log.

        Args:
            entry: The AuditEntry to log
        """
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(entry.to_json() + "\n")

    def _read_entries(self) -> List[AuditEntry]:
        entries = []

        if not self.log_path.exists():
            return entries

        with open(self.log_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(AuditEntry.from_json(line))
                except (json.JSONDecodeError, TypeError):
                    continue

        return entries

    def get_recent(self, limit: int = 100) -> List[AuditEntry]:
        """
        Get the most recent audit entries.

        Args:
            limit: Maximum number of entries to return

        Returns:
            List of AuditEntry objects, most recent first
        """
        entries = self._read_entries()
        if limit <= 0:
            return []
        return list(reversed(entries[-limit:]))

    def get_by_operation(self, operation: str, limit: int = 100) -> List[AuditEntry]:
        """Get entries for one operation name (e.g. ``"mkdir"``), oldest first."""
        matches = [e for e in self._read_entries() if e.operation == operation]
        return matches[:limit]

    def get_failures(self, limit: int = 50) -> List[AuditEntry]:
        """
        Get entries whose OS call failed.

        Useful for reviewing what went wrong without scanning log output.
        """
        failed = OutcomeStatus.FAILED.value
        matches = [e for e in self._read_entries() if e.status == failed]
        return matches[:limit]

    def export(self, format: str = "json") -> str:
        """
        Export the entire audit log.

        Args:
            format: Export format ("json" or "csv")

        Returns:
            String containing the exported data
        """
        entries = self.get_recent(limit=10000)

        if format == "json":
            return json.dumps([asdict(e) for e in entries], indent=2)
        elif format == "csv":
            buffer = io.StringIO()
            writer = csv.writer(buffer, lineterminator="\n")
            writer.writerow(["timestamp", "operation", "path", "status", "message"])
            for e in entries:
                writer.writerow([e.timestamp, e.operation, e.path, e.status, e.message or ""])
            return buffer.getvalue()
        else:
            raise ValueError(f"Unsupported export format: {format}")

    def clear(self, confirm: bool = False) -> bool:
        """
        Clear the audit log.

        The current file is renamed to a timestamped backup and a fresh one
        is started.

        Args:
            confirm: Must be True to actually clear the log

        Returns:
            True if cleared, False otherwise
        """
        if not confirm:
            return False

        if self.log_path.exists():
            backup_path = self.log_path.with_suffix(f".backup.{datetime.now().strftime('%Y%m%d_%H%M%S')}.jsonl")
            self.log_path.rename(backup_path)
            self.log_path.touch()
            return True

        return False


class OperationLogger:
    """
    Emits one record per operation outcome.

    Failed OS calls are logged at ERROR, everything else at INFO. When an
    AuditLogger is attached the outcome is also appended to the audit trail.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        audit: Optional[AuditLogger] = None
    ):
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.audit = audit

    def log_result(self, result: OperationResult, description: str) -> OperationResult:
        """
        Log an operation outcome and hand the result back.

        Args:
            result: The outcome to record
            description: Human-readable log message

        Returns:
            The same OperationResult, so callers can ``return`` this call
        """
        level = logging.ERROR if result.failed else logging.INFO
        self.logger.log(level, description)

        if self.audit is not None:
            try:
                self.audit.log(AuditEntry.from_result(result, description))
            except OSError as e:
                self.logger.error("Cannot write audit log %s: %s", self.audit.log_path, e)

        return result
