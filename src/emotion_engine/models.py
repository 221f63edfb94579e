"""Data models for face, emotion and event records.

Each model can be built from the cloud service response (``from_api``) and
converted to and from the event message shape (``to_dict`` / ``from_dict``).
Event messages use PascalCase keys.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

EMOTION_LABELS = (
    "anger",
    "contempt",
    "disgust",
    "fear",
    "happiness",
    "neutral",
    "sadness",
    "surprise",
)


def _pascal(name: str) -> str:
    return name[:1].upper() + name[1:]


def _camel(name: str) -> str:
    return name[:1].lower() + name[1:]


@dataclass(frozen=True)
class FaceRectangle:
    """Face bounding box in image pixels."""

    left: int
    top: int
    width: int
    height: int

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FaceRectangle":
        return cls(
            left=int(data["left"]),
            top=int(data["top"]),
            width=int(data["width"]),
            height=int(data["height"]),
        )

    def to_dict(self) -> dict[str, int]:
        return {"Left": self.left, "Top": self.top, "Width": self.width, "Height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FaceRectangle":
        return cls(left=data["Left"], top=data["Top"], width=data["Width"], height=data["Height"])


@dataclass(frozen=True)
class FacialHair:
    """Facial hair confidences, each in [0, 1]."""

    moustache: float
    beard: float
    sideburns: float

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FacialHair":
        return cls(
            moustache=float(data.get("moustache", 0.0)),
            beard=float(data.get("beard", 0.0)),
            sideburns=float(data.get("sideburns", 0.0)),
        )

    def to_dict(self) -> dict[str, float]:
        return {"Moustache": self.moustache, "Beard": self.beard, "Sideburns": self.sideburns}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FacialHair":
        return cls(moustache=data["Moustache"], beard=data["Beard"], sideburns=data["Sideburns"])


@dataclass(frozen=True)
class FaceAttributes:
    """Demographic and expression attributes of one face."""

    age: float
    gender: str
    smile: float
    facial_hair: FacialHair | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FaceAttributes":
        hair = data.get("facialHair")
        return cls(
            age=float(data.get("age", 0.0)),
            gender=str(data.get("gender", "")),
            smile=float(data.get("smile", 0.0)),
            facial_hair=FacialHair.from_api(hair) if hair else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "Age": self.age,
            "Gender": self.gender,
            "Smile": self.smile,
            "FacialHair": self.facial_hair.to_dict() if self.facial_hair else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FaceAttributes":
        hair = data.get("FacialHair")
        return cls(
            age=data["Age"],
            gender=data["Gender"],
            smile=data["Smile"],
            facial_hair=FacialHair.from_dict(hair) if hair else None,
        )


Landmarks = dict[str, tuple[float, float]]


def _landmarks_from_api(data: dict[str, Any] | None) -> Landmarks:
    if not data:
        return {}
    return {name: (float(point["x"]), float(point["y"])) for name, point in data.items()}


def _landmarks_to_dict(landmarks: Landmarks) -> dict[str, dict[str, float]]:
    return {_pascal(name): {"X": x, "Y": y} for name, (x, y) in landmarks.items()}


def _landmarks_from_dict(data: dict[str, Any] | None) -> Landmarks:
    if not data:
        return {}
    return {_camel(name): (point["X"], point["Y"]) for name, point in data.items()}


@dataclass(frozen=True)
class FaceResult:
    """A single face returned by the face-attribute service."""

    face_rectangle: FaceRectangle
    face_attributes: FaceAttributes
    face_id: str | None = None
    face_landmarks: Landmarks = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FaceResult":
        return cls(
            face_rectangle=FaceRectangle.from_api(data["faceRectangle"]),
            face_attributes=FaceAttributes.from_api(data.get("faceAttributes", {})),
            face_id=data.get("faceId"),
            face_landmarks=_landmarks_from_api(data.get("faceLandmarks")),
        )


@dataclass(frozen=True)
class EmotionScores:
    """Probabilities over the eight emotion labels."""

    anger: float = 0.0
    contempt: float = 0.0
    disgust: float = 0.0
    fear: float = 0.0
    happiness: float = 0.0
    neutral: float = 0.0
    sadness: float = 0.0
    surprise: float = 0.0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "EmotionScores":
        return cls(**{label: float(data.get(label, 0.0)) for label in EMOTION_LABELS})

    def items(self) -> list[tuple[str, float]]:
        """(label, score) pairs in the fixed label order."""
        return [(label, getattr(self, label)) for label in EMOTION_LABELS]

    def to_dict(self) -> dict[str, float]:
        return {_pascal(label): score for label, score in self.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmotionScores":
        return cls(**{label: data[_pascal(label)] for label in EMOTION_LABELS})


@dataclass(frozen=True)
class EmotionResult:
    """A single face returned by the emotion service."""

    face_rectangle: FaceRectangle
    scores: EmotionScores

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "EmotionResult":
        return cls(
            face_rectangle=FaceRectangle.from_api(data["faceRectangle"]),
            scores=EmotionScores.from_api(data.get("scores", {})),
        )


@dataclass(frozen=True)
class MergedFaceRecord:
    """One face result combined with the emotion result at the same index."""

    face_attributes: FaceAttributes
    face_id: str | None
    face_landmarks: Landmarks
    face_rectangle: FaceRectangle
    scores: EmotionScores

    def to_dict(self) -> dict[str, Any]:
        return {
            "FaceAttributes": self.face_attributes.to_dict(),
            "FaceId": self.face_id,
            "FaceLandmarks": _landmarks_to_dict(self.face_landmarks),
            "FaceRectangle": self.face_rectangle.to_dict(),
            "Scores": self.scores.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MergedFaceRecord":
        return cls(
            face_attributes=FaceAttributes.from_dict(data["FaceAttributes"]),
            face_id=data.get("FaceId"),
            face_landmarks=_landmarks_from_dict(data.get("FaceLandmarks")),
            face_rectangle=FaceRectangle.from_dict(data["FaceRectangle"]),
            scores=EmotionScores.from_dict(data["Scores"]),
        )


@dataclass(frozen=True)
class Location:
    """Device position in decimal degrees."""

    longitude: float
    latitude: float

    def to_dict(self) -> dict[str, float]:
        return {"Longitude": self.longitude, "Latitude": self.latitude}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        return cls(longitude=data["Longitude"], latitude=data["Latitude"])


@dataclass
class PublishEnvelope:
    """Event sent to the device-messaging hub after each capture."""

    event_id: str
    device_id: str
    location: Location | None
    timestamp: datetime
    image_uri: str | None
    faces: list[MergedFaceRecord]

    def to_dict(self) -> dict[str, Any]:
        return {
            "EventId": self.event_id,
            "DeviceId": self.device_id,
            "Location": self.location.to_dict() if self.location else None,
            "Timestamp": self.timestamp.isoformat(),
            "AzureUri": self.image_uri,
            "Faces": [face.to_dict() for face in self.faces],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PublishEnvelope":
        location = data.get("Location")
        return cls(
            event_id=data["EventId"],
            device_id=data["DeviceId"],
            location=Location.from_dict(location) if location else None,
            timestamp=datetime.fromisoformat(data["Timestamp"]),
            image_uri=data.get("AzureUri"),
            faces=[MergedFaceRecord.from_dict(face) for face in data.get("Faces", [])],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "PublishEnvelope":
        return cls.from_dict(json.loads(text))
