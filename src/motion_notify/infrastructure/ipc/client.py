"""Client stub for the worker's remote surface."""

from typing import Optional

import requests
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import ConnectTimeout, RequestException

from motion_notify.domain.models import Job
from motion_notify.domain.exceptions import ConnectivityError, RemoteCallError
from motion_notify.infrastructure.ipc.endpoint import RemoteEndpoint
from motion_notify.infrastructure.ipc.messages import EnqueueRequest, EnqueueResponse, HealthResponse
from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)


class WorkerStub:
    """
    Typed handle on a worker endpoint.
    Implements IWorkerStub protocol.

    Nothing is connected on construction; each call opens (or reuses) a
    connection. Failures are classified into ``ConnectivityError`` (nobody
    listening) and ``RemoteCallError`` (everything else).
    """

    def __init__(
        self,
        endpoint: RemoteEndpoint,
        connect_timeout: float = 2.0,
        read_timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.endpoint = endpoint
        self.timeout = (connect_timeout, read_timeout)
        self.session = session or requests.Session()
        # Loopback traffic must not be routed through HTTP_PROXY/HTTPS_PROXY
        self.session.trust_env = False
        self.session.headers.update({
            'Accept': 'application/json',
        })

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.endpoint.url}/{path.lstrip('/')}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (RequestsConnectionError, ConnectTimeout) as e:
            # ReadTimeout is not a ConnectionError subclass, so a slow worker
            # is reported as a remote failure rather than an absent one
            raise ConnectivityError(f"Worker not reachable at {self.endpoint}: {e}") from e
        except RequestException as e:
            raise RemoteCallError(f"Worker call {method} {url} failed: {e}") from e

        if response.status_code >= 400:
            raise RemoteCallError(
                f"Worker call {method} {url} returned {response.status_code}: {response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise RemoteCallError(f"Worker returned invalid JSON from {url}") from e

    def enqueue(self, job: Job) -> int:
        """
        Hand a job to the worker.

        Returns:
            Queue depth reported by the worker

        Raises:
            ConnectivityError: If no worker is listening
            RemoteCallError: On any other failure
        """
        payload = EnqueueRequest.from_job(job)
        data = self._request('POST', '/enqueue', json=payload.model_dump(mode='json'))
        ack = EnqueueResponse.model_validate(data)
        logger.debug(f"Worker accepted {job.blob_name}, queue depth {ack.queued}")
        return ack.queued

    def health(self) -> HealthResponse:
        """Fetch worker counters."""
        return HealthResponse.model_validate(self._request('GET', '/health'))

    def close(self) -> None:
        self.session.close()
