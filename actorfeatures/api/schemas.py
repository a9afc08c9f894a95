"""
Wire models for the actor features test app.
"""

import base64
import json

from pydantic import BaseModel, Field, field_serializer
from typing import Optional, List, Dict


class DaprConfigResponse(BaseModel):
    """Actor type registration read by the sidecar from /dapr/config.

    Serialized with exclude_defaults so empty fields are omitted.
    """
    entities: List[str] = Field(default_factory=list)
    actorIdleTimeout: str = ""
    actorScanInterval: str = ""
    drainOngoingCallTimeout: str = ""
    drainRebalancedActors: bool = False
    remindersStoragePartitions: int = 0


class ActorResponse(BaseModel):
    """Envelope returned for an actor method invocation."""
    data: bytes = b""
    metadata: Optional[Dict[str, str]] = None

    @field_serializer("data", when_used="json")
    def serialize_data(self, data: bytes) -> str:
        # Byte payloads travel as standard base64 strings
        return base64.b64encode(data).decode("ascii")


class TimerReminderRequest(BaseModel):
    """Timer or reminder registration forwarded to the sidecar."""
    oldName: str = ""
    actorType: str = ""
    actorID: str = ""
    newName: str = ""
    data: str = ""
    dueTime: str = ""
    period: str = ""
    ttl: str = ""
    callback: str = ""

    @classmethod
    def from_body(cls, raw: bytes) -> "TimerReminderRequest":
        """
        Decode a driver request body leniently.

        Keys match field names case-insensitively. A field whose value is not
        a string is skipped and the remaining fields are kept. A body that is
        not a JSON object yields an empty request.

        Raises:
            ValueError: the body is not valid JSON
        """
        decoded = json.loads(raw) if raw else {}
        if not isinstance(decoded, dict):
            return cls()

        names = {name.lower(): name for name in cls.model_fields}
        fields = {}
        for key, value in decoded.items():
            name = names.get(key.lower())
            if name is not None and isinstance(value, str):
                fields[name] = value
        return cls(**fields)

    def to_payload(self) -> Dict[str, str]:
        """Request body for the sidecar; empty fields are omitted."""
        return self.model_dump(exclude_defaults=True)


class LogEntryResponse(BaseModel):
    action: Optional[str] = None
    actorType: Optional[str] = None
    actorId: Optional[str] = None
    startTimestamp: Optional[int] = None
    endTimestamp: Optional[int] = None
