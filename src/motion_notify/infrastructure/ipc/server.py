"""
HTTP surface of the worker process.

Endpoints are plain ``def`` functions, so FastAPI runs each request on its
thread pool and concurrent enqueues reach the worker in parallel.
"""

import uvicorn
from fastapi import FastAPI

from motion_notify.domain.protocols import IJobReceiver
from motion_notify.infrastructure.ipc.endpoint import RemoteEndpoint
from motion_notify.infrastructure.ipc.messages import (
    EnqueueRequest,
    EnqueueResponse,
    HealthResponse,
)
from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)


def create_app(receiver: IJobReceiver) -> FastAPI:
    """Build the FastAPI application bound to a queue owner."""
    app = FastAPI(title="motion-notify worker", version="1.0.0")

    @app.post("/enqueue", response_model=EnqueueResponse)
    def enqueue(request: EnqueueRequest) -> EnqueueResponse:
        depth = receiver.enqueue(request.to_job(delete_after_upload=receiver.unlink))
        return EnqueueResponse(accepted=True, queued=depth)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        stats = receiver.stats()
        return HealthResponse(
            status="ok",
            pid=stats.pid,
            queued=stats.queued,
            delivered=stats.delivered,
            failed=stats.failed,
            pending=stats.pending,
            avg_delivery_seconds=stats.avg_delivery_seconds,
            uptime_seconds=stats.uptime_seconds,
        )

    return app


def create_server(app: FastAPI, endpoint: RemoteEndpoint) -> uvicorn.Server:
    """
    Build a uvicorn server for the app.

    uvicorn installs SIGINT/SIGTERM handlers that make ``run()`` return
    after a graceful shutdown.
    """
    config = uvicorn.Config(
        app,
        host=endpoint.host,
        port=endpoint.port,
        log_level="warning",
        access_log=False,
    )
    return uvicorn.Server(config)
