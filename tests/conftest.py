import sys
import os
import threading
from datetime import datetime
from pathlib import Path

import pytest

# Ensure src/ is on sys.path so 'motion_notify' is importable without installing
SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from motion_notify.domain.models import Job, UploadResult
from motion_notify.domain.exceptions import UploadError
from motion_notify.infrastructure.config.loader import UploaderSettings
from motion_notify.shared.logging import PACKAGE_LOGGER, setup_logger


class RecordingSink:
    """In-memory sink recording every call; uploads listed in fail_on raise."""

    def __init__(self):
        self.calls = []
        self.fail_on = set()
        self._uploads = 0
        self._lock = threading.Lock()

    def ensure_container(self, parent_id, title):
        with self._lock:
            self.calls.append(("ensure_container", parent_id, title))
        return f"{parent_id}/{title}"

    def upload_blob(self, container_id, name, source_path):
        with self._lock:
            self._uploads += 1
            number = self._uploads
            self.calls.append(("upload_blob", container_id, name, Path(source_path)))
        if number in self.fail_on:
            raise UploadError("sink unavailable")
        return UploadResult(success=True, key=f"{container_id}/{name}")

    @property
    def uploads(self):
        return [c for c in self.calls if c[0] == "upload_blob"]


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Rebind the package logger to the current stdout after each test."""
    yield
    setup_logger(PACKAGE_LOGGER)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def picture(tmp_path):
    """Create a small picture file."""
    path = tmp_path / "a.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0 fake jpeg")
    return path


@pytest.fixture
def make_job(tmp_path):
    """Build jobs backed by real files under tmp_path."""
    def _make(tag="1", when="2024-03-01 14:05:30", delete=False, create=True):
        path = tmp_path / f"frame-{tag}.jpg"
        if create:
            path.write_bytes(b"data")
        return Job(
            timestamp=datetime.strptime(when, "%Y-%m-%d %H:%M:%S"),
            sequence_tag=tag,
            source_path=path,
            delete_after_upload=delete,
        )
    return _make


@pytest.fixture
def settings(tmp_path):
    config = tmp_path / "b2.yaml"
    config.write_text("key_id: k\napplication_key: s\nbucket: pictures\n")
    return UploaderSettings(
        folder_id="folder123",
        config_path=config,
        pid_path=tmp_path / "worker.pid",
    )
