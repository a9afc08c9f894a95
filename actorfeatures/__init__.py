"""Actor features test app: impersonates an actor host behind a Dapr-style sidecar."""

from .core.config import VERSION

__version__ = VERSION
