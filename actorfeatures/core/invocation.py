"""
Handling of actor calls made by the sidecar: method invocations,
activation bookkeeping and deactivation.
"""

import json
import socket
import time
from typing import Callable, Dict

from util.logging import logger
from . import config
from .errors import UnknownActorTypeError
from .journal import LogJournal, epoch_millis
from .registry import ActorRecord, ActorRegistry, create_actor_id
from .state_test import STATE_TEST_METHODS, StateTestSequencer

HOSTNAME_METHOD = "hostname"
DEACTIVATION_ACTION = "deactivation"


class ActorInvocationHandler:
    """
    Impersonates the user actor implementation behind the sidecar.

    Every invocation refreshes the actor in the registry. Successful
    invocations are appended to the journal; a failed state test step is
    not.
    """

    def __init__(self, registry: ActorRegistry, journal: LogJournal,
                 sequencer: StateTestSequencer, registered_actor_type: str,
                 work_seconds: float = config.SECONDS_TO_WAIT_IN_METHOD,
                 sleep: Callable[[float], None] = time.sleep,
                 hostname: Callable[[], str] = socket.gethostname):
        self.registry = registry
        self.journal = journal
        self.sequencer = sequencer
        self.registered_actor_type = registered_actor_type
        self.work_seconds = work_seconds
        self._sleep = sleep
        self._hostname = hostname

        self._methods: Dict[str, Callable[..., bytes]] = {HOSTNAME_METHOD: self._hostname_method}
        for name in STATE_TEST_METHODS:
            self._methods[name] = self._state_test_method

    def invoke(self, actor_type: str, actor_id: str, method: str,
               reminder_or_timer: bool = False) -> bytes:
        """
        Invoke an actor method and return the response data.

        Raises:
            RuntimeClientError: a state test step failed against the sidecar
        """
        start = epoch_millis()
        logger.log_actor_invocation(actor_type, actor_id, method, reminder_or_timer)

        composite_id = create_actor_id(actor_type, actor_id)
        self.registry.store(composite_id, ActorRecord(
            actor_type=actor_type,
            composite_id=composite_id,
            last_activity_epoch_millis=epoch_millis(),
        ))

        handler = self._methods.get(method, self._generic_method)
        data = handler(actor_type, actor_id, method, start, reminder_or_timer)

        self.journal.record(actor_type, actor_id, method, start)
        return data

    def activate(self, actor_type: str, actor_id: str) -> str:
        """Activation bookkeeping; journals an empty action."""
        return self._track(actor_type, actor_id, remove=False)

    def deactivate(self, actor_type: str, actor_id: str) -> str:
        """
        Deactivate an actor.

        Returns "deactivation" if the actor was tracked and has been removed,
        otherwise an empty string. Either way the action is journaled.

        Raises:
            UnknownActorTypeError: actor_type is not the registered type
        """
        return self._track(actor_type, actor_id, remove=True)

    def _track(self, actor_type: str, actor_id: str, remove: bool) -> str:
        start = epoch_millis()

        if actor_type != self.registered_actor_type:
            logger.log_actor_deactivation(actor_type, actor_id, "", status="rejected")
            raise UnknownActorTypeError(actor_type, self.registered_actor_type)

        action = ""
        if remove and self.registry.delete(create_actor_id(actor_type, actor_id)):
            action = DEACTIVATION_ACTION

        self.journal.record(actor_type, actor_id, action, start)
        logger.log_actor_deactivation(actor_type, actor_id, action)
        return action

    def _hostname_method(self, actor_type: str, actor_id: str, method: str,
                         start: int, reminder_or_timer: bool) -> bytes:
        return self._hostname().encode("utf-8")

    def _state_test_method(self, actor_type: str, actor_id: str, method: str,
                           start: int, reminder_or_timer: bool) -> bytes:
        self.sequencer.run(method, actor_type, actor_id)
        return self._method_response(actor_type, actor_id, method, start)

    def _generic_method(self, actor_type: str, actor_id: str, method: str,
                        start: int, reminder_or_timer: bool) -> bytes:
        # Timers and reminders skip the simulated work
        if not reminder_or_timer:
            self._sleep(self.work_seconds)
        return self._method_response(actor_type, actor_id, method, start)

    @staticmethod
    def _method_response(actor_type: str, actor_id: str, method: str, start: int) -> bytes:
        payload = {
            "actorType": actor_type,
            "actorId": actor_id,
            "method": method,
            "start_time": start,
            "end_time": epoch_millis(),
        }
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")
