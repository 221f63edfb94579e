"""Human-readable reports of detection results."""

from collections.abc import Sequence

from emotion_engine.models import (
    EmotionResult,
    EmotionScores,
    FaceRectangle,
    FaceResult,
    Location,
    MergedFaceRecord,
)

_FALLBACK_REASONS = (
    "    image is too small to detect faces\n"
    "    no faces are in the images\n"
    "    faces poses make it difficult to detect {what}\n"
    "    or other factors"
)

NO_EMOTION_MESSAGE = "No emotion is detected. This might be due to:\n" + _FALLBACK_REASONS.format(
    what="emotions"
)
NO_FACE_MESSAGE = "No faces is detected. This might be due to:\n" + _FALLBACK_REASONS.format(
    what="faces"
)


def _number(value: float) -> str:
    """Up to three decimals, trailing zeros dropped (``31.5``, ``27``)."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _rectangle_line(rect: FaceRectangle) -> str:
    return (
        f"  FaceRectangle = left: {rect.left}, top: {rect.top}, "
        f"width: {rect.width}, height: {rect.height}"
    )


def _score_lines(scores: EmotionScores) -> list[str]:
    return [f"  {label.capitalize()}: {score:.2%}." for label, score in scores.items()]


def location_line(location: Location) -> str:
    return f"Long: {_number(location.longitude)}, Lat: {_number(location.latitude)}."


def _finish(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def format_report(records: Sequence[MergedFaceRecord]) -> str:
    """One block per merged face: index, rectangle, age, gender and scores."""
    if not records:
        return _finish([NO_EMOTION_MESSAGE])

    lines: list[str] = []
    for i, record in enumerate(records):
        lines.append(f"Face: {i}")
        lines.append(_rectangle_line(record.face_rectangle))
        lines.append(f"  Age: {_number(record.face_attributes.age)}.")
        lines.append(f"  Gender: {record.face_attributes.gender}")
        lines.extend(_score_lines(record.scores))
    return _finish(lines)


def format_report_with_location(
    records: Sequence[MergedFaceRecord],
    location: Location | None,
) -> str:
    """Like :func:`format_report`, followed by the device position when known."""
    text = format_report(records)
    if location is None:
        return text
    return text + location_line(location) + "\n"


def format_face_results(faces: Sequence[FaceResult] | None) -> str:
    """Report of face-attribute results alone."""
    if not faces:
        return _finish([NO_FACE_MESSAGE])

    lines: list[str] = []
    for i, face in enumerate(faces):
        lines.append(f"Face[{i}]")
        lines.append(_rectangle_line(face.face_rectangle))
        lines.append(f"  Age: {_number(face.face_attributes.age)}.")
        lines.append(f"  Gender: {face.face_attributes.gender}")
    return _finish(lines)


def format_emotion_results(emotions: Sequence[EmotionResult] | None) -> str:
    """Report of emotion results alone."""
    if not emotions:
        return _finish([NO_EMOTION_MESSAGE])

    lines: list[str] = []
    for i, emotion in enumerate(emotions):
        lines.append(f"Emotion[{i}]")
        lines.append(_rectangle_line(emotion.face_rectangle))
        lines.extend(_score_lines(emotion.scores))
    return _finish(lines)
