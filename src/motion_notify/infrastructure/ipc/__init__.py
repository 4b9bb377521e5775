"""Client/worker remote call plumbing."""

from motion_notify.infrastructure.ipc.endpoint import RemoteEndpoint
from motion_notify.infrastructure.ipc.client import WorkerStub
from motion_notify.infrastructure.ipc.server import create_app, create_server

__all__ = ["RemoteEndpoint", "WorkerStub", "create_app", "create_server"]
