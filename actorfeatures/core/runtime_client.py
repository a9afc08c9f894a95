"""
HTTP client for calls from the test app back into the sidecar.
"""

import time
from typing import Any, Optional

import requests

from util.logging import logger
from . import config
from .errors import SidecarTransportError, StatusMismatchError

# Small reads keep a trickling body from blocking past the request deadline
BODY_CHUNK_SIZE = 1


class RuntimeClient:
    """
    Issues single HTTP calls to the sidecar and checks the response status.

    There are no retries: the first transport failure or status mismatch is
    raised to the caller. Each call, body included, must finish within
    request_timeout seconds.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 connect_timeout: float = config.DIAL_TIMEOUT_SEC,
                 request_timeout: float = config.REQUEST_TIMEOUT_SEC):
        self.session = session or requests.Session()
        self.request_timeout = request_timeout
        # requests applies the read value per socket read, not to the whole call
        self.timeout = (connect_timeout, request_timeout)

    def call(self, method: str, url: str, body: Any = None, expected_status: int = 200) -> bytes:
        """
        Call the sidecar and return the raw response body.

        Args:
            method: HTTP verb
            url: Absolute sidecar URL
            body: Optional JSON-serializable request payload
            expected_status: Status code the call must return

        Returns:
            Response body bytes, possibly empty

        Raises:
            SidecarTransportError: the request could not be completed in time
            StatusMismatchError: the sidecar answered with another status
        """
        deadline = time.monotonic() + self.request_timeout
        kwargs = {"timeout": self.timeout, "stream": True}
        if body is not None:
            kwargs["json"] = body

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.log_sidecar_call(method, url, expected_status, status="failed", error=str(e))
            raise SidecarTransportError(f"{method} {url} failed: {e}") from e

        try:
            if response.status_code != expected_status:
                try:
                    error_body = self._read_body(response, deadline)
                except (requests.RequestException, SidecarTransportError):
                    error_body = None

                error = StatusMismatchError(expected_status, response.status_code, error_body)
                logger.log_sidecar_call(method, url, expected_status, response.status_code,
                                        status="failed", error=str(error))
                raise error

            try:
                content = self._read_body(response, deadline)
            except (requests.RequestException, SidecarTransportError) as e:
                logger.log_sidecar_call(method, url, expected_status, response.status_code,
                                        status="failed", error=str(e))
                raise SidecarTransportError(f"{method} {url} body read failed: {e}") from e
        finally:
            response.close()

        logger.log_sidecar_call(method, url, expected_status, response.status_code)
        return content

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        chunks = []
        for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise SidecarTransportError(f"timed out after {self.request_timeout}s")
            chunks.append(chunk)
        if time.monotonic() > deadline:
            raise SidecarTransportError(f"timed out after {self.request_timeout}s")
        return b"".join(chunks)
