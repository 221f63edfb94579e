"""Combine face-attribute and emotion results into one record per face."""

import logging
from collections.abc import Sequence

from emotion_engine.errors import FaceAlignmentError
from emotion_engine.models import EmotionResult, FaceRectangle, FaceResult, MergedFaceRecord

logger = logging.getLogger(__name__)

# Pairs overlapping less than this are logged; they are still merged.
MIN_PAIR_OVERLAP = 0.5


def rectangle_overlap(a: FaceRectangle, b: FaceRectangle) -> float:
    """Intersection-over-union of two face rectangles, in [0, 1]."""
    ix = max(0, min(a.left + a.width, b.left + b.width) - max(a.left, b.left))
    iy = max(0, min(a.top + a.height, b.top + b.height) - max(a.top, b.top))
    intersection = ix * iy
    union = a.width * a.height + b.width * b.height - intersection
    if union <= 0:
        return 0.0
    return intersection / union


def merge_faces(
    emotions: Sequence[EmotionResult],
    faces: Sequence[FaceResult],
) -> list[MergedFaceRecord]:
    """Pair ``faces[i]`` with ``emotions[i]`` for every detected face.

    Both services run their own face detection, so the pairing is purely
    positional and assumes they return faces in the same order.

    Args:
        emotions: Emotion service results, in service order.
        faces: Face service results, in service order.

    Returns:
        One MergedFaceRecord per face, in face order. Empty when no faces
        were detected.

    Raises:
        FaceAlignmentError: Fewer emotion results than faces.
    """
    if len(emotions) < len(faces):
        raise FaceAlignmentError(len(faces), len(emotions))

    records: list[MergedFaceRecord] = []
    for i, face in enumerate(faces):
        emotion = emotions[i]
        overlap = rectangle_overlap(face.face_rectangle, emotion.face_rectangle)
        if overlap < MIN_PAIR_OVERLAP:
            logger.warning(
                "Face %d: face and emotion rectangles overlap only %.2f, pairing may be wrong",
                i,
                overlap,
            )
        records.append(
            MergedFaceRecord(
                face_attributes=face.face_attributes,
                face_id=face.face_id,
                face_landmarks=face.face_landmarks,
                face_rectangle=face.face_rectangle,
                scores=emotion.scores,
            )
        )
    return records
