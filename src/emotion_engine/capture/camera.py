"""Still-picture capture from a USB webcam via OpenCV."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import cv2

from emotion_engine.config import CAMERA_INDEX, PICTURE_NAME, PICTURES_DIR
from emotion_engine.errors import CameraError

logger = logging.getLogger(__name__)


def unique_picture_path(directory: Path, name: str = PICTURE_NAME) -> Path:
    """Return ``directory/name``, or ``name (2)``, ``name (3)``... if taken."""
    candidate = directory / name
    stem, suffix = candidate.stem, candidate.suffix
    n = 2
    while candidate.exists():
        candidate = directory / f"{stem} ({n}){suffix}"
        n += 1
    return candidate


class Camera:
    """Wraps a ``cv2.VideoCapture`` that stays open between pictures."""

    def __init__(
        self,
        index: int = CAMERA_INDEX,
        pictures_dir: Path = PICTURES_DIR,
        capture_factory: Callable[[int], Any] = cv2.VideoCapture,
    ) -> None:
        self.index = index
        self.pictures_dir = Path(pictures_dir)
        self._capture_factory = capture_factory
        self._capture: Any = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        """Open the capture device. Does nothing when it is already open.

        Raises:
            CameraError: The device is missing or busy.
        """
        if self._capture is not None:
            return
        try:
            capture = self._capture_factory(self.index)
        except cv2.error as e:
            raise CameraError(f"Unable to initialize camera {self.index}: {e}") from e
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Unable to initialize camera {self.index}: device not available")
        self._capture = capture
        logger.debug("Camera %d opened", self.index)

    def take_picture(self) -> Path:
        """Grab one frame and save it as a JPEG in the pictures directory.

        Returns:
            Path of the written file.

        Raises:
            CameraError: The camera is not open, or no frame could be read or written.
        """
        if self._capture is None:
            raise CameraError("Error taking picture: camera is not initialized")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraError("Error taking picture: no frame received from camera")

        self.pictures_dir.mkdir(parents=True, exist_ok=True)
        path = unique_picture_path(self.pictures_dir)
        if not cv2.imwrite(str(path), frame):
            raise CameraError(f"Error taking picture: could not write {path}")
        return path

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None

    def __enter__(self) -> "Camera":
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
