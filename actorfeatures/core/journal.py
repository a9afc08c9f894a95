"""
Append-only journal of actor lifecycle events.
The test driver polls /test/logs to assert which events happened.
"""

import threading
import time
from dataclasses import dataclass
from typing import Dict, List


def epoch_millis() -> int:
    """Current unix epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class LogEntry:
    action: str
    actor_type: str
    actor_id: str
    start_timestamp: int
    end_timestamp: int

    def to_dict(self) -> Dict:
        """Wire representation; zero-valued fields are omitted."""
        data = {
            "action": self.action,
            "actorType": self.actor_type,
            "actorId": self.actor_id,
            "startTimestamp": self.start_timestamp,
            "endTimestamp": self.end_timestamp,
        }
        return {k: v for k, v in data.items() if v}


class LogJournal:
    """Insertion-ordered, thread-safe list of LogEntry."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: List[LogEntry] = []

    def append(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def record(self, actor_type: str, actor_id: str, action: str, start: int) -> LogEntry:
        """Append an entry that ends now."""
        entry = LogEntry(
            action=action,
            actor_type=actor_type,
            actor_id=actor_id,
            start_timestamp=start,
            end_timestamp=epoch_millis(),
        )
        self.append(entry)
        return entry

    def snapshot(self) -> List[LogEntry]:
        """Independent copy of the entries in insertion order."""
        with self._lock:
            return list(self._entries)

    def reset(self) -> None:
        with self._lock:
            self._entries = []
