"""
Structured logging for the actor features test app.
Every component logs through the shared `logger` instance below.
"""

import logging
from typing import Any, Dict, Optional


class StructuredLogger:
    """Structured logger for actor lifecycle, sidecar calls and state tests."""

    def __init__(self, name: str = "actorfeatures"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "rejected"):
            self.logger.error(message)
        else:
            self.logger.info(message)

    def log_actor_invocation(self, actor_type: str, actor_id: str, method: str,
                             reminder_or_timer: bool = False, status: str = "success"):
        """Log an actor method invocation coming from the sidecar."""
        details = {
            "actor_type": actor_type,
            "actor_id": actor_id,
            "method": method,
        }
        if reminder_or_timer:
            details["reminder_or_timer"] = True

        self.log_operation("actor.invoke", status, details)

    def log_actor_deactivation(self, actor_type: str, actor_id: str, action: str, status: str = "success"):
        """Log an activation/deactivation request."""
        details = {
            "actor_type": actor_type,
            "actor_id": actor_id,
            "action": action or "<none>",
        }
        self.log_operation("actor.deactivate", status, details)

    def log_sidecar_call(self, method: str, url: str, expected_status: int,
                         actual_status: Optional[int] = None, status: str = "success",
                         error: str = None):
        """Log a single HTTP call issued to the sidecar."""
        details = {
            "method": method,
            "url": url,
            "expected_status": expected_status,
        }
        if actual_status is not None:
            details["actual_status"] = actual_status
        if error:
            details["error"] = error[:200]

        self.log_operation("sidecar.call", status, details)

    def log_state_test_step(self, step: str, actor_type: str, actor_id: str,
                            status: str = "success", error: str = None):
        """Log the outcome of one actor state test step."""
        details = {
            "step": step,
            "actor_type": actor_type,
            "actor_id": actor_id,
        }
        if error:
            details["error"] = error[:200]

        self.log_operation("state_test.step", status, details)

    def log_request(self, method: str, path: str, request_id: str, duration_ms: float = None):
        """Log receipt or completion of an inbound HTTP request."""
        if duration_ms is None:
            self.logger.info(f"Received request {method}: {path} {request_id}")
        else:
            self.logger.info(f"Request {request_id}: completed in {duration_ms}ms")

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()
