"""
Audit Logger for Filer.

Append-only log of file operations with timestamps, outcomes and details.
Entries go to a JSONL file, or stay in memory when no file is configured.
"""

import json
from collections import deque
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Deque, List, Optional, Dict, Any
from enum import Enum

from rich.console import Console
from rich.markup import escape


class ActionType(Enum):
    """Kinds of operations that can be logged."""
    CREATE = "create"
    COPY = "copy"
    MOVE = "move"
    RENAME = "rename"
    DELETE = "delete"
    READ = "read"
    SEARCH = "search"
    CONFIG = "config"


class ActionStatus(Enum):
    """Outcome recorded for an entry."""
    INFO = "info"
    EXECUTED = "executed"
    FAILED = "failed"
    SKIPPED = "skipped"


DEFAULT_MEMORY_LIMIT = 1000

STATUS_STYLES = {
    ActionStatus.INFO.value: "dim",
    ActionStatus.EXECUTED.value: "green",
    ActionStatus.FAILED.value: "red",
    ActionStatus.SKIPPED.value: "yellow",
}


@dataclass
class AuditEntry:
    """Represents a single audit log entry."""
    timestamp: str
    action_type: str
    action_description: str
    status: str
    result: Optional[str]
    metadata: Dict[str, Any]

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        action_description: str,
        status: ActionStatus = ActionStatus.INFO,
        result: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "AuditEntry":
        """Factory method to create an audit entry with current timestamp."""
        return cls(
            timestamp=datetime.now().isoformat(),
            action_type=action_type.value,
            action_description=action_description,
            status=status.value,
            result=result,
            metadata=metadata or {}
        )

    def to_json(self) -> str:
        """Convert entry to JSON string."""
        return json.dumps(asdict(self), ensure_ascii=False, default=str)

    @classmethod
    def from_json(cls, json_str: str) -> "AuditEntry":
        """Create entry from JSON string."""
        data = json.loads(json_str)
        return cls(**data)


class AuditLogger:
    """
    Append-only audit logger for Filer.

    With a log_path, every entry is appended to a JSONL file. Without one,
    entries are kept in memory up to memory_limit, oldest dropped first,
    which is what tests use to capture output.
    An optional rich console echoes each entry as it is written.
    """

    def __init__(
        self,
        log_path: Optional[str] = None,
        console: Optional[Console] = None,
        memory_limit: int = DEFAULT_MEMORY_LIMIT,
    ):
        """
        Initialize the audit logger.

        Args:
            log_path: Path to the JSONL log file, or None to log in memory
            console: Console to echo entries to
            memory_limit: Most recent entries kept when logging in memory
        """
        self.log_path = Path(log_path) if log_path else None
        self.console = console
        self._memory: Deque[AuditEntry] = deque(maxlen=memory_limit)
        self._ensure_log_directory()

    def _ensure_log_directory(self) -> None:
        """Create the log directory and file if they don't exist."""
        if self.log_path is None:
            return

        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.log_path.exists():
            self.log_path.touch()

    def log(self, entry: AuditEntry) -> None:
        """
        Append an audit entry to the log.

        Args:
            entry: The AuditEntry to log
        """
        if self.log_path is None:
            self._memory.append(entry)
        else:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(entry.to_json() + "\n")

        if self.console is not None:
            self._echo(entry)

    def _echo(self, entry: AuditEntry) -> None:
        style = STATUS_STYLES.get(entry.status, "")
        line = f"[{style}]{entry.status.upper():<8}[/{style}] {escape(entry.action_description)}"
        if entry.result:
            line += f" [dim]({escape(entry.result)})[/dim]"
        self.console.print(line, highlight=False)

    def log_action(
        self,
        action_type: ActionType,
        description: str,
        status: ActionStatus = ActionStatus.INFO,
        result: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> AuditEntry:
        """
        Convenience method to create and log an entry in one call.

        Returns the created AuditEntry.
        """
        entry = AuditEntry.create(
            action_type=action_type,
            action_description=description,
            status=status,
            result=result,
            metadata=metadata
        )
        self.log(entry)
        return entry

    def _read_all(self) -> List[AuditEntry]:
        """All entries, oldest first. Unparseable lines are skipped."""
        if self.log_path is None:
            return list(self._memory)

        entries = []
        if not self.log_path.exists():
            return entries

        with open(self.log_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
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
        entries = self._read_all()
        return list(reversed(entries[-limit:])) if limit > 0 else []

    def get_by_action_type(self, action_type: ActionType, limit: int = 100) -> List[AuditEntry]:
        """
        Get audit entries filtered by action type.

        Args:
            action_type: The ActionType to filter by
            limit: Maximum number of entries to return

        Returns:
            List of matching AuditEntry objects, oldest first
        """
        matches = [e for e in self._read_all() if e.action_type == action_type.value]
        return matches[:limit]

    def get_failed_actions(self, limit: int = 50) -> List[AuditEntry]:
        """
        Get operations that failed.

        Useful for reviewing what went wrong in a session.
        """
        failed = [e for e in self._read_all() if e.status == ActionStatus.FAILED.value]
        return failed[:limit]

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
            return json.dumps([asdict(e) for e in entries], indent=2, default=str)
        elif format == "csv":
            lines = ["timestamp,action_type,action_description,status,result"]
            for e in entries:
                lines.append(f'"{e.timestamp}","{e.action_type}","{e.action_description}","{e.status}","{e.result or ""}"')
            return "\n".join(lines) + "\n"
        else:
            raise ValueError(f"Unsupported export format: {format}")

    def clear(self, confirm: bool = False) -> bool:
        """
        Clear the audit log.

        A file-backed log is renamed to a timestamped backup first.

        Args:
            confirm: Must be True to actually clear the log

        Returns:
            True if cleared, False otherwise
        """
        if not confirm:
            return False

        if self.log_path is None:
            self._memory.clear()
            return True

        if self.log_path.exists():
            backup_path = self.log_path.with_suffix(f".backup.{datetime.now().strftime('%Y%m%d_%H%M%S')}.jsonl")
            self.log_path.rename(backup_path)
            self.log_path.touch()
            return True

        return False
