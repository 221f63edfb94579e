"""Upload captured pictures to Azure Blob Storage."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import BlobServiceClient, ContentSettings

from emotion_engine.config import BLOB_CONNECTION_STRING, BLOB_CONTAINER, DEVICE_ID
from emotion_engine.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedBlob:
    """Name and public URL of an uploaded picture."""

    name: str
    url: str


def build_blob_name(device_id: str, when: datetime) -> str:
    """``photos/<deviceId>_<YYYY-MM-DD_HH-MM-SS_ff>.jpg``, ff being hundredths of a second."""
    return f"photos/{device_id}_{when:%Y-%m-%d_%H-%M-%S}_{when.microsecond // 10000:02d}.jpg"


class BlobUploader:
    """Uploads pictures into one container, creating it on first use."""

    def __init__(
        self,
        connection_string: str | None = None,
        container: str = BLOB_CONTAINER,
        device_id: str = DEVICE_ID,
        service_client: BlobServiceClient | None = None,
    ) -> None:
        if service_client is None:
            connection_string = connection_string or BLOB_CONNECTION_STRING
            if not connection_string:
                raise ConfigurationError(
                    "Blob connection string is required. Set BLOB_CONNECTION_STRING in .env file."
                )
            service_client = BlobServiceClient.from_connection_string(connection_string)
        self.service_client = service_client
        self.container = container
        self.device_id = device_id
        self._container_ready = False

    def _container_client(self):
        container = self.service_client.get_container_client(self.container)
        if not self._container_ready:
            try:
                container.create_container()
            except ResourceExistsError:
                pass
            self._container_ready = True
        return container

    def upload(
        self, path: Path, delete_local: bool = False, when: datetime | None = None
    ) -> UploadedBlob:
        """Upload a picture and return its blob name and URL.

        Args:
            path: Local JPEG file.
            delete_local: Remove the local file once the upload succeeded.
            when: Timestamp used in the blob name (default: now).
        """
        blob_name = build_blob_name(self.device_id, when or datetime.now())
        blob = self._container_client().get_blob_client(blob_name)
        with path.open("rb") as data:
            blob.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type="image/jpeg"),
            )
        logger.debug("Uploaded %s to container %s", blob_name, self.container)

        if delete_local:
            path.unlink(missing_ok=True)
        return UploadedBlob(name=blob_name, url=blob.url)
