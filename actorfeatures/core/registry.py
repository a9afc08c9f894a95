"""
Registry of activated actors, keyed by composite actor ID.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Optional

ACTOR_ID_SEPARATOR = "."


def create_actor_id(actor_type: str, actor_id: str) -> str:
    """Build the composite registry key for an actor."""
    return f"{actor_type}{ACTOR_ID_SEPARATOR}{actor_id}"


@dataclass(frozen=True)
class ActorRecord:
    actor_type: str
    composite_id: str
    last_activity_epoch_millis: int


class ActorRegistry:
    """Thread-safe map of composite actor ID to its latest activation record.

    Each operation is atomic on its own; there is no ordering guarantee
    between operations on different keys.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._actors: Dict[str, ActorRecord] = {}

    def store(self, composite_id: str, record: ActorRecord) -> None:
        with self._lock:
            self._actors[composite_id] = record

    def load(self, composite_id: str) -> Optional[ActorRecord]:
        with self._lock:
            return self._actors.get(composite_id)

    def delete(self, composite_id: str) -> bool:
        """Remove an actor; returns True only if it was present."""
        with self._lock:
            return self._actors.pop(composite_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._actors)
