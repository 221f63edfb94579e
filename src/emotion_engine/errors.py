"""Exceptions raised by the emotion engine."""


class EmotionEngineError(Exception):
    """Base class for all emotion engine errors."""


class ConfigurationError(EmotionEngineError, ValueError):
    """A required key or connection string is missing."""


class CameraError(EmotionEngineError):
    """The webcam could not be opened or did not deliver a frame."""


class FaceAlignmentError(EmotionEngineError, IndexError):
    """Face and emotion results cannot be paired by position."""

    def __init__(self, face_count: int, emotion_count: int) -> None:
        super().__init__(
            f"{face_count} faces detected but only {emotion_count} emotion results returned"
        )
        self.face_count = face_count
        self.emotion_count = emotion_count
