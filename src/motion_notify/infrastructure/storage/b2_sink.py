"""
B2 upload sink implementation.

Infrastructure layer for Backblaze B2 integration using boto3 (S3-compatible API).
Containers are key prefixes; a zero-byte ``<prefix>/`` object marks one.
"""

import threading
import time
from pathlib import Path
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError, BotoCoreError

from motion_notify.domain.models import UploadResult
from motion_notify.domain.exceptions import UploadError
from motion_notify.infrastructure.config.loader import SinkCredentials
from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)

_MISSING_CODES = ('404', 'NoSuchKey', 'NotFound')


class B2UploadSink:
    """
    Upload sink for Backblaze B2 using the S3-compatible API.
    Implements IUploadSink protocol.

    The boto3 client is created on first use and kept for the life of the
    sink, so a worker authenticates once.
    """

    def __init__(self, credentials: SinkCredentials):
        """
        Initialize B2 sink.

        Args:
            credentials: Storage credentials and bucket
        """
        self.credentials = credentials
        self.bucket = credentials.bucket
        self._client = None
        self._client_lock = threading.Lock()
        self._logger = get_logger(__name__)

    @property
    def client(self):
        """Get or create the S3 client."""
        with self._client_lock:
            if self._client is None:
                self._client = self._create_client()
            return self._client

    def _create_client(self):
        """Create S3 client with B2-compatible configuration."""
        self._logger.info(f"Opening storage session: {self.credentials.endpoint} bucket={self.bucket}")
        config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'virtual'}
        )

        kwargs = {
            'endpoint_url': self.credentials.endpoint,
            'aws_access_key_id': self.credentials.key_id,
            'aws_secret_access_key': self.credentials.application_key,
            'config': config
        }

        if self.credentials.region:
            kwargs['region_name'] = self.credentials.region

        return boto3.client('s3', **kwargs)

    def ensure_container(self, parent_id: str, title: str) -> str:
        """
        Find or create the container ``title`` under ``parent_id``.

        Returns:
            Container id (key prefix without trailing slash)

        Raises:
            UploadError: If the storage service cannot be queried or written
        """
        container_id = f"{parent_id.strip('/')}/{title}" if parent_id.strip('/') else title
        placeholder = f"{container_id}/"

        try:
            try:
                self.client.head_object(Bucket=self.bucket, Key=placeholder)
                return container_id
            except ClientError as e:
                if e.response['Error']['Code'] not in _MISSING_CODES:
                    raise

            self.client.put_object(Bucket=self.bucket, Key=placeholder, Body=b'')
            self._logger.info(f"Created container s3://{self.bucket}/{placeholder}")
            return container_id

        except (ClientError, BotoCoreError) as e:
            error_msg = f"Failed to ensure container {placeholder}: {e}"
            self._logger.error(error_msg)
            raise UploadError(error_msg) from e

    def upload_blob(self, container_id: str, name: str, source_path: Path) -> UploadResult:
        """
        Upload a file into a container.

        Args:
            container_id: Container returned by ``ensure_container``
            name: Object name inside the container
            source_path: Local file to upload

        Returns:
            UploadResult with upload details

        Raises:
            UploadError: If the file is missing or the upload fails
        """
        source_path = Path(source_path)
        if not source_path.exists():
            raise UploadError(f"File not found: {source_path}")

        key = f"{container_id}/{name}"
        file_size = source_path.stat().st_size
        self._logger.debug(f"Uploading {source_path} ({file_size} bytes) to s3://{self.bucket}/{key}")

        started = time.time()
        try:
            self.client.upload_file(str(source_path), self.bucket, key)
        except (ClientError, BotoCoreError) as e:
            error_msg = f"Upload failed: {e}"
            self._logger.error(error_msg)
            raise UploadError(error_msg) from e

        return UploadResult(
            success=True,
            url=f"s3://{self.bucket}/{key}",
            bucket=self.bucket,
            key=key,
            size_bytes=file_size,
            duration_seconds=time.time() - started,
        )


def create_sink(credentials: Optional[SinkCredentials]) -> B2UploadSink:
    """Build the default sink, failing early on missing credentials."""
    if credentials is None or not credentials.validate():
        raise UploadError("Storage credentials not set (key_id, application_key, bucket)")
    return B2UploadSink(credentials)
