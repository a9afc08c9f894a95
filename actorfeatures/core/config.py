"""
Configuration for the actor features test app.
Module constants are read from the environment at import time; values the
test driver may change at runtime go through EnvOverrides.
"""

import os
import re
import threading
from typing import Dict, List, Optional

# Ports
APP_PORT = int(os.getenv("APP_PORT", "3000"))
DAPR_HTTP_PORT = int(os.getenv("DAPR_HTTP_PORT", "3500"))

# Sidecar endpoints
DAPR_V1_URL = f"http://localhost:{DAPR_HTTP_PORT}/v1.0"
ACTOR_METHOD_URL_FORMAT = DAPR_V1_URL + "/actors/{actor_type}/{actor_id}/{call_type}/{method}"
ACTOR_SAVE_STATE_URL_FORMAT = DAPR_V1_URL + "/actors/{actor_type}/{actor_id}/state/"
ACTOR_GET_STATE_URL_FORMAT = DAPR_V1_URL + "/actors/{actor_type}/{actor_id}/state/{key}/"
METADATA_URL = DAPR_V1_URL + "/metadata"
SHUTDOWN_URL = DAPR_V1_URL + "/shutdown"

# Actor type registration (actor type must be unique per test app)
DEFAULT_ACTOR_TYPE = "testactorfeatures"
ACTOR_TYPE_ENV_NAME = "TEST_APP_ACTOR_TYPE"
ACTOR_REMINDERS_PARTITIONS_ENV_NAME = "TEST_APP_ACTOR_REMINDERS_PARTITIONS"
ACTOR_IDLE_TIMEOUT = "1h"
ACTOR_SCAN_INTERVAL = "30s"
DRAIN_ONGOING_CALL_TIMEOUT = "30s"
DRAIN_REBALANCED_ACTORS = True

# Simulated work for generic actor methods (skipped for timers and reminders)
SECONDS_TO_WAIT_IN_METHOD = 5

# Worker threads shared by actor invocations and sidecar proxy calls
MAX_CONCURRENT_REQUESTS = int(os.getenv("MAX_CONCURRENT_REQUESTS", "1000"))

# Sidecar HTTP client timeouts, in seconds
DIAL_TIMEOUT_SEC = 5
TLS_HANDSHAKE_TIMEOUT_SEC = 5
REQUEST_TIMEOUT_SEC = 30

# Seconds between a forwarded /test/shutdown and the simulated app crash
FATAL_SHUTDOWN_DELAY_SEC = 1

VERSION = "1.0.0"


class EnvOverrides:
    """Process-local environment overrides set by the test driver.

    Lookups fall back to the real process environment when no override
    has been stored for a name.
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._lock = threading.Lock()
        self._values: Dict[str, str] = {}
        self._environ = environ if environ is not None else os.environ

    def get(self, name: str) -> str:
        with self._lock:
            if name in self._values:
                return self._values[name]
        return self._environ.get(name, "")

    def set(self, name: str, value: str) -> None:
        with self._lock:
            self._values[name] = value


def get_actor_type(env: EnvOverrides) -> str:
    """Actor type advertised to the sidecar."""
    return env.get(ACTOR_TYPE_ENV_NAME) or DEFAULT_ACTOR_TYPE


def get_actor_reminders_partitions(env: EnvOverrides) -> int:
    """Reminder partition count; unset or non-numeric values mean 0."""
    value = env.get(ACTOR_REMINDERS_PARTITIONS_ENV_NAME)
    # Plain decimal integers only; int() would also accept whitespace and underscores
    if not re.fullmatch(r"[+-]?\d+", value):
        return 0
    return int(value)


def dapr_config(env: EnvOverrides) -> Dict:
    """Build the actor type registration descriptor read by the sidecar."""
    entities: List[str] = [get_actor_type(env)]
    return {
        "entities": entities,
        "actorIdleTimeout": ACTOR_IDLE_TIMEOUT,
        "actorScanInterval": ACTOR_SCAN_INTERVAL,
        "drainOngoingCallTimeout": DRAIN_ONGOING_CALL_TIMEOUT,
        "drainRebalancedActors": DRAIN_REBALANCED_ACTORS,
        "remindersStoragePartitions": get_actor_reminders_partitions(env),
    }


def actor_method_url(actor_type: str, actor_id: str, call_type: str, method: str) -> str:
    return ACTOR_METHOD_URL_FORMAT.format(
        actor_type=actor_type, actor_id=actor_id, call_type=call_type, method=method
    )


def actor_save_state_url(actor_type: str, actor_id: str) -> str:
    return ACTOR_SAVE_STATE_URL_FORMAT.format(actor_type=actor_type, actor_id=actor_id)


def actor_get_state_url(actor_type: str, actor_id: str, key: str) -> str:
    return ACTOR_GET_STATE_URL_FORMAT.format(actor_type=actor_type, actor_id=actor_id, key=key)
