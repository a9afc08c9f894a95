"""
Shared fixtures: an in-memory stand-in for the sidecar.
"""

import json
import re
from typing import Dict, List, Optional, Tuple

import pytest

from actorfeatures.core import config
from actorfeatures.core.errors import StatusMismatchError

STATE_URL = re.compile(
    re.escape(config.DAPR_V1_URL) + r"/actors/(?P<type>[^/]+)/(?P<id>[^/]+)/state/(?:(?P<key>[^/]+)/)?$"
)


class FakeSidecarClient:
    """RuntimeClient replacement that answers like a sidecar with an actor state store.

    An actor ID is known once a state transaction has been saved for it.
    Individual responses can be forced with `override`.
    """

    def __init__(self):
        self.state: Dict[Tuple[str, str], Dict[str, object]] = {}
        self.calls: List[Tuple[str, str, object, int]] = []
        self.overrides: Dict[Tuple[str, str], Tuple[int, bytes]] = {}
        self.metadata = b'{"id":"actorfeatures"}'

    def override(self, method: str, url: str, status: int, body: bytes = b""):
        self.overrides[(method, url)] = (status, body)

    def call(self, method: str, url: str, body=None, expected_status: int = 200) -> bytes:
        self.calls.append((method, url, body, expected_status))
        status, content = self._respond(method, url, body)
        if status != expected_status:
            raise StatusMismatchError(expected_status, status, content)
        return content

    def get_value(self, actor_type: str, actor_id: str, key: str) -> Optional[object]:
        return self.state.get((actor_type, actor_id), {}).get(key)

    def _respond(self, method: str, url: str, body) -> Tuple[int, bytes]:
        if (method, url) in self.overrides:
            return self.overrides[(method, url)]

        if url == config.METADATA_URL:
            return 200, self.metadata
        if url == config.SHUTDOWN_URL:
            return 204, b""

        match = STATE_URL.match(url)
        if match is None:
            return 404, b"not found"

        actor = (match.group("type"), match.group("id"))
        if method == "POST" and match.group("key") is None:
            store = self.state.setdefault(actor, {})
            for op in body:
                if op["operation"] == "upsert":
                    store[op["request"]["key"]] = op["request"]["value"]
                elif op["operation"] == "delete":
                    store.pop(op["request"]["key"], None)
            return 201, b""

        if method == "GET" and match.group("key") is not None:
            if actor not in self.state:
                return 400, b'{"errorCode":"ERR_ACTOR_INSTANCE_MISSING"}'
            key = match.group("key")
            if key not in self.state[actor]:
                return 204, b""
            return 200, json.dumps(self.state[actor][key]).encode("utf-8")

        return 405, b""


@pytest.fixture
def fake_sidecar():
    return FakeSidecarClient()
