"""
Errors raised while talking to the sidecar or running actor state tests.
"""

from typing import Optional


class RuntimeClientError(Exception):
    """Base class for failures of a call to the sidecar."""


class SidecarTransportError(RuntimeClientError):
    """The sidecar could not be reached (DNS, connection refused, timeout)."""


class StatusMismatchError(RuntimeClientError):
    """The sidecar answered with a status other than the expected one."""

    def __init__(self, expected_status: int, actual_status: int, body: Optional[bytes] = None):
        self.expected_status = expected_status
        self.actual_status = actual_status
        self.body = body

        if body is not None:
            message = (
                f"Expected http status {expected_status}, received {actual_status}, "
                f"payload ='{body.decode('utf-8', errors='replace')}'"
            )
        else:
            message = f"Expected http status {expected_status}, received {actual_status}"
        super().__init__(message)


class ContentMismatchError(RuntimeClientError):
    """The sidecar returned content where an empty body was expected."""

    def __init__(self, url: str, body: bytes):
        self.url = url
        self.body = body
        super().__init__(f"expected 0 length response from {url}, received {len(body)} bytes")


class UnexpectedStateTestStepError(ValueError):
    """Raised for a state test step name that is not one of the four known steps."""

    def __init__(self, step: str):
        self.step = step
        super().__init__(f"actor state test - unexpected option: {step}")


class UnknownActorTypeError(ValueError):
    """Raised when a lifecycle call names an actor type this app did not register."""

    def __init__(self, actor_type: str, registered_actor_type: str):
        self.actor_type = actor_type
        self.registered_actor_type = registered_actor_type
        super().__init__(f"Unknown actor type: {actor_type}")
