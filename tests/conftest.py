"""Shared test fixtures."""

from pathlib import Path

import pytest
from PIL import Image

from emotion_engine.errors import CameraError
from emotion_engine.models import (
    EmotionResult,
    EmotionScores,
    FaceAttributes,
    FaceRectangle,
    FaceResult,
    FacialHair,
    Location,
    MergedFaceRecord,
)
from emotion_engine.publish.blob_storage import UploadedBlob


def _rect(index: int, left: int | None) -> FaceRectangle:
    return FaceRectangle(left=100 * index if left is None else left, top=50, width=80, height=80)


def make_face(
    index: int = 0,
    age: float = 30.0,
    gender: str = "male",
    left: int | None = None,
) -> FaceResult:
    """Helper to create a FaceResult whose fields are derived from *index*."""
    return FaceResult(
        face_rectangle=_rect(index, left),
        face_attributes=FaceAttributes(
            age=age,
            gender=gender,
            smile=0.5,
            facial_hair=FacialHair(moustache=0.1, beard=0.2, sideburns=0.0),
        ),
        face_id=f"face-{index}",
        face_landmarks={"pupilLeft": (10.0 + index, 20.0), "noseTip": (15.5, 30.25)},
    )


def make_emotion(index: int = 0, happiness: float = 0.9, left: int | None = None) -> EmotionResult:
    """Helper to create an EmotionResult aligned with ``make_face(index)``."""
    return EmotionResult(
        face_rectangle=_rect(index, left),
        scores=EmotionScores(happiness=happiness, neutral=round(1.0 - happiness, 6)),
    )


def make_record(index: int = 0, happiness: float = 0.9) -> MergedFaceRecord:
    face = make_face(index)
    return MergedFaceRecord(
        face_attributes=face.face_attributes,
        face_id=face.face_id,
        face_landmarks=face.face_landmarks,
        face_rectangle=face.face_rectangle,
        scores=make_emotion(index, happiness).scores,
    )


FACE_API_ITEM = {
    "faceId": "c5c24a82-6845-4031-9d5d-978df9175426",
    "faceRectangle": {"top": 131, "left": 177, "width": 162, "height": 162},
    "faceLandmarks": {
        "pupilLeft": {"x": 220.8, "y": 180.3},
        "pupilRight": {"x": 291.4, "y": 177.9},
    },
    "faceAttributes": {
        "age": 27.3,
        "gender": "female",
        "smile": 0.88,
        "facialHair": {"moustache": 0.0, "beard": 0.0, "sideburns": 0.0},
    },
}

EMOTION_API_ITEM = {
    "faceRectangle": {"top": 131, "left": 177, "width": 162, "height": 162},
    "scores": {
        "anger": 0.0001,
        "contempt": 0.002,
        "disgust": 0.0003,
        "fear": 0.00001,
        "happiness": 0.9,
        "neutral": 0.09,
        "sadness": 0.007,
        "surprise": 0.0006,
    },
}


class FakeCamera:
    """Writes a small JPEG instead of talking to a device."""

    def __init__(self, directory: Path, fail_open: bool = False) -> None:
        self.directory = directory
        self.fail_open = fail_open
        self.opened = False
        self.closed = False

    def open(self) -> None:
        if self.fail_open:
            raise CameraError("Unable to initialize camera 0: device not available")
        self.opened = True

    def take_picture(self) -> Path:
        if not self.opened:
            raise CameraError("Error taking picture: camera is not initialized")
        path = self.directory / "EmotionPic.jpg"
        Image.new("RGB", (16, 12), "white").save(path, "JPEG")
        return path

    def close(self) -> None:
        self.closed = True


class FakeFaceClient:
    def __init__(self, faces=None, error: Exception | None = None) -> None:
        self.faces = faces or []
        self.error = error
        self.calls = 0

    async def detect(self, image: bytes):
        self.calls += 1
        if self.error:
            raise self.error
        return self.faces


class FakeEmotionClient:
    def __init__(self, emotions=None, error: Exception | None = None) -> None:
        self.emotions = emotions or []
        self.error = error
        self.calls = 0

    async def recognize(self, image: bytes):
        self.calls += 1
        if self.error:
            raise self.error
        return self.emotions


class FakeGeolocator:
    def __init__(self, location: Location | None = None, error: Exception | None = None) -> None:
        self.location = location or Location(longitude=18.0686, latitude=59.3293)
        self.error = error
        self.calls = 0

    async def locate(self) -> Location:
        self.calls += 1
        if self.error:
            raise self.error
        return self.location


class FakeSender:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.messages: list[str] = []
        self.closed = False

    def send(self, text: str) -> None:
        if self.error:
            raise self.error
        self.messages.append(text)

    def close(self) -> None:
        self.closed = True


class FakeUploader:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.uploaded: list[Path] = []

    def upload(self, path: Path, delete_local: bool = False) -> UploadedBlob:
        if self.error:
            raise self.error
        self.uploaded.append(path)
        name = f"photos/dev_{path.stem}.jpg"
        return UploadedBlob(name=name, url=f"https://account.blob.core.windows.net/iot/{name}")


@pytest.fixture
def location() -> Location:
    return Location(longitude=18.0686, latitude=59.3293)


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()
