"""Request/response messages exchanged between client and worker."""

from datetime import datetime

from pydantic import BaseModel, Field

from motion_notify.domain.models import Job


class EnqueueRequest(BaseModel):
    """Enqueue call payload."""
    timestamp: datetime = Field(description="Event time, second resolution")
    sequence_tag: str = Field(min_length=1, description="Distinguishes jobs sharing a timestamp")
    source_path: str = Field(min_length=1, description="File to upload")

    @classmethod
    def from_job(cls, job: Job) -> "EnqueueRequest":
        return cls(
            timestamp=job.timestamp,
            sequence_tag=job.sequence_tag,
            source_path=str(job.source_path),
        )

    def to_job(self, delete_after_upload: bool) -> Job:
        return Job(
            timestamp=self.timestamp,
            sequence_tag=self.sequence_tag,
            source_path=self.source_path,
            delete_after_upload=delete_after_upload,
        )


class EnqueueResponse(BaseModel):
    """Enqueue acknowledgment."""
    accepted: bool = True
    queued: int = Field(description="Queue depth after the push")


class HealthResponse(BaseModel):
    """Worker health and counters."""
    status: str = Field(default="ok")
    pid: int
    queued: int = 0
    delivered: int = 0
    failed: int = 0
    pending: int = 0
    avg_delivery_seconds: float = Field(default=0.0, description="Mean upload time of delivered and failed jobs")
    uptime_seconds: float = 0.0
