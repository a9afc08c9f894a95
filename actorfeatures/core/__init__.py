from .errors import (
    ContentMismatchError,
    RuntimeClientError,
    SidecarTransportError,
    StatusMismatchError,
    UnexpectedStateTestStepError,
    UnknownActorTypeError,
)
from .invocation import ActorInvocationHandler
from .journal import LogEntry, LogJournal
from .registry import ActorRecord, ActorRegistry, create_actor_id
from .runtime_client import RuntimeClient
from .state_test import Delete, StateTestSequencer, StateTestStep, Upsert

__all__ = [
    "ActorInvocationHandler",
    "ActorRecord",
    "ActorRegistry",
    "ContentMismatchError",
    "Delete",
    "LogEntry",
    "LogJournal",
    "RuntimeClient",
    "RuntimeClientError",
    "SidecarTransportError",
    "StateTestSequencer",
    "StateTestStep",
    "StatusMismatchError",
    "UnexpectedStateTestStepError",
    "UnknownActorTypeError",
    "Upsert",
    "create_actor_id",
]
