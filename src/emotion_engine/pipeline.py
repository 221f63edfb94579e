"""Capture, analyze, merge, report and publish: one cycle per button press."""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from PIL import Image

from emotion_engine.analysis.emotion_client import EmotionClient
from emotion_engine.analysis.face_client import FaceClient
from emotion_engine.capture.camera import Camera
from emotion_engine.capture.geolocation import Geolocator, configured_location
from emotion_engine.config import (
    BLOB_CONNECTION_STRING,
    CAMERA_INDEX,
    DEVICE_ID,
    EVENT_LOG_DIR,
    IOTHUB_DEVICE_CONNECTION_STRING,
    PICTURES_DIR,
)
from emotion_engine.errors import CameraError, FaceAlignmentError
from emotion_engine.merge import merge_faces
from emotion_engine.models import EmotionResult, FaceResult, Location, MergedFaceRecord
from emotion_engine.publish.blob_storage import BlobUploader
from emotion_engine.publish.envelope import EventPublisher, PublishOutcome
from emotion_engine.report import format_report

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CycleResult:
    """Everything one capture cycle produced, including every status shown."""

    picture: Path | None = None
    image: Image.Image | None = None
    faces: list[FaceResult] | None = None
    emotions: list[EmotionResult] | None = None
    records: list[MergedFaceRecord] = field(default_factory=list)
    aligned: bool = True
    report: str = ""
    image_uri: str | None = None
    publish: PublishOutcome | None = None
    statuses: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return self.statuses[-1] if self.statuses else ""


def _note(
    result: CycleResult, message: str, level: int = logging.INFO, exc_info: bool = False
) -> None:
    logger.log(level, message, exc_info=exc_info)
    result.statuses.append(message)


def _load_picture(path: Path) -> tuple[Image.Image, bytes]:
    """Preview image and raw bytes of a captured picture."""
    with Image.open(path) as img:
        preview = img.copy()
    return preview, path.read_bytes()


class EmotionPipeline:
    """Runs capture cycles against service objects owned by the caller."""

    def __init__(
        self,
        camera: Camera,
        face_client: FaceClient,
        emotion_client: EmotionClient,
        geolocator: Geolocator | None = None,
        uploader: BlobUploader | None = None,
        publisher: EventPublisher | None = None,
        delete_after_upload: bool = True,
    ) -> None:
        self.camera = camera
        self.face_client = face_client
        self.emotion_client = emotion_client
        self.geolocator = geolocator
        self.uploader = uploader
        self.publisher = publisher
        self.delete_after_upload = delete_after_upload
        self.location: Location | None = None

    async def start(self) -> list[str]:
        """Open the camera and read the initial location. Returns status messages."""
        result = CycleResult()
        try:
            self.camera.open()
        except CameraError as e:
            _note(result, str(e), logging.ERROR)
        else:
            _note(result, "Camera initialized...Waiting for input!")

        if self.geolocator is not None:
            try:
                self.location = await self.geolocator.locate()
            except Exception as e:
                _note(result, f"Location unavailable: {e}", logging.WARNING)
            else:
                if self.publisher is not None and self.publisher.location is None:
                    self.publisher.location = self.location
        return result.statuses

    def close(self) -> None:
        self.camera.close()
        if self.publisher is not None:
            self.publisher.sender.close()

    async def run(self, remote_logging: bool = True, local_logging: bool = False) -> CycleResult:
        """Take a picture and run it through analysis, report and publish.

        Args:
            remote_logging: Upload the picture and send the event to IoT Hub.
            local_logging: Also write the event JSON locally (only when publishing).
        """
        result = CycleResult()
        try:
            result.picture = await asyncio.to_thread(self.camera.take_picture)
        except CameraError as e:
            _note(result, str(e), logging.ERROR)
            return result

        result.image, image = await asyncio.to_thread(_load_picture, result.picture)
        _note(result, f"Took Photo: {result.picture.name}")

        await self._analyze(result, image)

        if remote_logging and result.aligned:
            await self._publish(result, local_logging)
        return result

    async def analyze_file(self, path: Path) -> CycleResult:
        """Analyze an existing image file without capturing or publishing."""
        result = CycleResult(picture=path)
        try:
            image = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            _note(result, f"Error reading picture: {e}", logging.ERROR)
            result.report = format_report([])
            return result
        await self._analyze(result, image)
        return result

    async def _call(
        self, result: CycleResult, name: str, request: Awaitable[list[T]]
    ) -> list[T] | None:
        try:
            items = await request
        except Exception as e:
            _note(result, f"{name} failed: {e}", logging.ERROR, exc_info=True)
            return None
        _note(result, f"{name} succeeded: {len(items)} faces.")
        return items

    async def _analyze(self, result: CycleResult, image: bytes) -> None:
        _note(result, "Calling face and emotion services...")
        result.faces, result.emotions = await asyncio.gather(
            self._call(result, "Face detection", self.face_client.detect(image)),
            self._call(result, "Emotion recognition", self.emotion_client.recognize(image)),
        )

        if result.faces is None or result.emotions is None:
            result.records = []
        else:
            try:
                result.records = merge_faces(result.emotions, result.faces)
            except FaceAlignmentError as e:
                result.aligned = False
                result.records = []
                _note(result, f"Face and emotion results do not line up: {e}", logging.ERROR)
        result.report = format_report(result.records)

    async def _publish(self, result: CycleResult, local_logging: bool) -> None:
        if self.uploader is None:
            _note(result, "Blob storage is not configured, picture not uploaded.", logging.WARNING)
        else:
            try:
                blob = await asyncio.to_thread(
                    self.uploader.upload, result.picture, self.delete_after_upload
                )
            except Exception as e:
                _note(result, f"Uploading picture failed: {e}", logging.ERROR, exc_info=True)
            else:
                result.image_uri = blob.url
                _note(result, f"{blob.name} uploaded to Azure.")

        if self.publisher is None:
            _note(result, "IoT Hub is not configured, event not sent.", logging.WARNING)
            return
        result.publish = await self.publisher.publish(
            result.records, result.image_uri, local_logging
        )
        _note(
            result,
            result.publish.status,
            logging.INFO if result.publish.sent else logging.ERROR,
        )


def build_pipeline(
    camera_index: int = CAMERA_INDEX,
    pictures_dir: Path = PICTURES_DIR,
    log_dir: Path = EVENT_LOG_DIR,
) -> EmotionPipeline:
    """Construct the pipeline and its service objects from configuration.

    Blob storage and IoT Hub are left out when their connection strings
    are not set.
    """
    from emotion_engine.publish.iothub import IoTHubSender

    geolocator = Geolocator(fixed=configured_location())
    uploader = BlobUploader() if BLOB_CONNECTION_STRING else None
    publisher = (
        EventPublisher(IoTHubSender(), geolocator=geolocator, device_id=DEVICE_ID, log_dir=log_dir)
        if IOTHUB_DEVICE_CONNECTION_STRING
        else None
    )
    return EmotionPipeline(
        camera=Camera(index=camera_index, pictures_dir=pictures_dir),
        face_client=FaceClient(),
        emotion_client=EmotionClient(),
        geolocator=geolocator,
        uploader=uploader,
        publisher=publisher,
    )
