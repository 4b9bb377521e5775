"""Storage infrastructure."""

from motion_notify.infrastructure.storage.b2_sink import B2UploadSink, create_sink
from motion_notify.infrastructure.storage.pid_marker import PidMarker

__all__ = ['B2UploadSink', 'create_sink', 'PidMarker']
