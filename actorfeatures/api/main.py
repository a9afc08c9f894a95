"""
HTTP surface of the actor features test app.

The sidecar calls /dapr/config and /actors/...; the test driver calls
/test/... to inspect the journal and to drive the sidecar through this app.
Blocking work runs on worker threads drawn from a limiter sized by
MAX_CONCURRENT_REQUESTS, so a slow actor method holds only its own thread.
"""

import base64
import json
import os
import threading
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional

from anyio import CapacityLimiter, to_thread
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .schemas import ActorResponse, DaprConfigResponse, LogEntryResponse, TimerReminderRequest
from ..core import config
from ..core.config import EnvOverrides
from ..core.errors import RuntimeClientError, UnexpectedStateTestStepError, UnknownActorTypeError
from ..core.invocation import ActorInvocationHandler
from ..core.journal import LogJournal
from ..core.registry import ActorRegistry
from ..core.runtime_client import RuntimeClient
from ..core.state_test import StateTestSequencer
from util.logging import logger


@dataclass
class Services:
    registry: ActorRegistry
    journal: LogJournal
    env: EnvOverrides
    client: RuntimeClient
    sequencer: StateTestSequencer
    handler: ActorInvocationHandler


def build_services(client: Optional[RuntimeClient] = None,
                   env: Optional[EnvOverrides] = None, **handler_options) -> Services:
    """Construct the shared components once for the process lifetime."""
    env = env or EnvOverrides()
    client = client or RuntimeClient()
    registry = ActorRegistry()
    journal = LogJournal()
    sequencer = StateTestSequencer(client)
    handler = ActorInvocationHandler(
        registry=registry,
        journal=journal,
        sequencer=sequencer,
        registered_actor_type=config.get_actor_type(env),
        **handler_options,
    )
    return Services(registry, journal, env, client, sequencer, handler)


def get_services(request: Request) -> Services:
    return request.app.state.services


def schedule_fatal_exit(delay_sec: float = config.FATAL_SHUTDOWN_DELAY_SEC) -> threading.Timer:
    """Terminate the process shortly after responding, simulating an app crash."""
    def _exit():
        logger.error("simulating fatal shutdown")
        os._exit(1)

    timer = threading.Timer(delay_sec, _exit)
    timer.daemon = True
    timer.start()
    return timer


def create_app(services: Optional[Services] = None) -> FastAPI:
    app = FastAPI(
        title="Actor Features Test App",
        version=config.VERSION,
        description="Impersonates an actor host behind the sidecar and drives actor conformance checks",
    )
    app.state.services = services or build_services()
    app.state.worker_limiter = None

    async def run_in_worker(func, *args):
        # Created on first use so it belongs to the running event loop
        if app.state.worker_limiter is None:
            app.state.worker_limiter = CapacityLimiter(config.MAX_CONCURRENT_REQUESTS)
        return await to_thread.run_sync(func, *args, limiter=app.state.worker_limiter)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Check if we have a request ID or generate one
        request_id = request.query_params.get("reqid") or f"s-{uuid.uuid4()}"
        logger.log_request(request.method, request.url.path, request_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 2)
        logger.log_request(request.method, request.url.path, request_id, duration_ms)
        return response

    @app.get("/")
    def index():
        logger.info("index handler is called")
        return Response(status_code=200)

    @app.get("/healthz")
    def healthz():
        return Response(status_code=200)

    @app.get("/dapr/config", response_model=DaprConfigResponse, response_model_exclude_defaults=True)
    def dapr_config(services: Services = Depends(get_services)):
        descriptor = DaprConfigResponse(**config.dapr_config(services.env))
        logger.info(f"Processing dapr config request, responding with {descriptor.model_dump()}")
        return descriptor

    def invoke_actor(services: Services, actor_type: str, actor_id: str, method: str,
                     reminder_or_timer: bool) -> Response:
        try:
            data = services.handler.invoke(actor_type, actor_id, method, reminder_or_timer)
        except UnexpectedStateTestStepError as e:
            logger.warning(str(e))
            return Response(status_code=400)
        except RuntimeClientError as e:
            logger.error(f"actor state call failed: {e}")
            return Response(status_code=500)

        return JSONResponse(content=ActorResponse(data=data).model_dump(mode="json"))

    @app.put("/actors/{actor_type}/{actor_id}/method/{method}")
    async def actor_method(actor_type: str, actor_id: str, method: str,
                           services: Services = Depends(get_services)):
        return await run_in_worker(invoke_actor, services, actor_type, actor_id, method, False)

    @app.put("/actors/{actor_type}/{actor_id}/method/{reminder_or_timer}/{method}")
    async def actor_timer_or_reminder(actor_type: str, actor_id: str, reminder_or_timer: str, method: str,
                                      services: Services = Depends(get_services)):
        return await run_in_worker(invoke_actor, services, actor_type, actor_id, method, True)

    @app.api_route("/actors/{actor_type}/{actor_id}", methods=["POST", "DELETE"])
    def actor_lifecycle(request: Request, actor_type: str, actor_id: str,
                        services: Services = Depends(get_services)):
        try:
            if request.method == "DELETE":
                services.handler.deactivate(actor_type, actor_id)
            else:
                services.handler.activate(actor_type, actor_id)
        except UnknownActorTypeError as e:
            logger.warning(str(e))
            return Response(status_code=400)

        return Response(status_code=200, media_type="application/json")

    @app.api_route("/test/logs", methods=["GET", "DELETE"],
                   response_model=List[LogEntryResponse], response_model_exclude_none=True)
    def logs(request: Request, services: Services = Depends(get_services)):
        if request.method == "DELETE":
            services.journal.reset()
        return [LogEntryResponse(**entry.to_dict()) for entry in services.journal.snapshot()]

    @app.get("/test/metadata")
    def test_metadata(services: Services = Depends(get_services)):
        try:
            body = services.client.call("GET", config.METADATA_URL, expected_status=200)
        except RuntimeClientError as e:
            logger.error(f"Could not read metadata response: {e}")
            return Response(status_code=500)

        return Response(content=body, status_code=200)

    def shutdown_sidecar(services: Services) -> bool:
        try:
            services.client.call("POST", config.SHUTDOWN_URL, expected_status=204)
        except RuntimeClientError as e:
            logger.error(f"Could not shutdown sidecar: {e}")
            return False
        return True

    @app.post("/test/shutdown")
    def test_shutdown(services: Services = Depends(get_services)):
        if not shutdown_sidecar(services):
            return Response(status_code=500)

        schedule_fatal_exit()
        return Response(status_code=200)

    @app.post("/test/shutdownsidecar")
    def test_shutdown_sidecar(services: Services = Depends(get_services)):
        if not shutdown_sidecar(services):
            return Response(status_code=500)
        return Response(status_code=200)

    @app.get("/test/env/{env_name}")
    def get_env(env_name: str, services: Services = Depends(get_services)):
        return PlainTextResponse(services.env.get(env_name))

    @app.post("/test/env/{env_name}")
    async def set_env(env_name: str, request: Request, services: Services = Depends(get_services)):
        body = await request.body()
        services.env.set(env_name, body.decode("utf-8"))
        return Response(status_code=200)

    # Calls the sidecar's actor method/timer/reminder API, simulating an actor client
    @app.api_route("/test/{actor_type}/{actor_id}/{call_type}/{method}",
                   methods=["POST", "DELETE", "PATCH", "GET"])
    async def test_call_actor(request: Request, actor_type: str, actor_id: str, call_type: str,
                              method: str, services: Services = Depends(get_services)):
        url = config.actor_method_url(actor_type, actor_id, call_type, method)

        expected_status = 200
        payload = {}
        if call_type in ("timers", "reminders"):
            expected_status = 200 if request.method == "GET" else 204
            raw = await request.body()
            try:
                payload = TimerReminderRequest.from_body(raw).to_payload()
            except ValueError as e:
                logger.warning(f"Could not parse reminder request, sending empty body: {e}")

        return await run_in_worker(
            proxy_actor_call, services.client, request.method, url, payload, expected_status
        )

    return app


def proxy_actor_call(client: RuntimeClient, method: str, url: str, payload, expected_status: int) -> Response:
    """Forward a call to the sidecar and relay the decoded invocation data."""
    try:
        body = client.call(method, url, body=payload, expected_status=expected_status)
    except RuntimeClientError as e:
        logger.error(f"Could not read actor's test response: {e}")
        return Response(status_code=500)

    if len(body) == 0:
        return Response(status_code=200)

    try:
        envelope = json.loads(body)
        data = base64.b64decode(envelope.get("data") or "")
    except (ValueError, TypeError, AttributeError) as e:
        logger.error(f"Could not parse actor's test response: {e}")
        return Response(status_code=500)

    return Response(content=data, status_code=200)


app = create_app()
