"""Tests for the capture → analyze → merge → report → publish cycle."""

import asyncio
import json

import httpx
from conftest import (
    FakeCamera,
    FakeEmotionClient,
    FakeFaceClient,
    FakeGeolocator,
    FakeSender,
    FakeUploader,
    make_emotion,
    make_face,
)

from emotion_engine.pipeline import EmotionPipeline
from emotion_engine.publish.envelope import EventPublisher
from emotion_engine.report import NO_EMOTION_MESSAGE, format_report


def _pipeline(tmp_path, faces=None, emotions=None, **kwargs):
    camera = kwargs.pop("camera", None) or FakeCamera(tmp_path)
    face_client = kwargs.pop("face_client", None) or FakeFaceClient(faces)
    emotion_client = kwargs.pop("emotion_client", None) or FakeEmotionClient(emotions)
    return EmotionPipeline(camera, face_client, emotion_client, **kwargs)


def _started(pipeline: EmotionPipeline) -> EmotionPipeline:
    asyncio.run(pipeline.start())
    return pipeline


def test_two_faces_merged_by_index(tmp_path):
    faces = [make_face(0, age=21.0), make_face(1, age=45.0)]
    emotions = [make_emotion(0, happiness=0.2), make_emotion(1, happiness=0.7)]
    pipeline = _started(_pipeline(tmp_path, faces, emotions))

    result = asyncio.run(pipeline.run(remote_logging=False))

    assert len(result.records) == 2
    assert result.records[0].face_attributes.age == 21.0
    assert result.records[0].scores.happiness == 0.2
    assert result.records[1].face_attributes.age == 45.0
    assert result.records[1].scores.happiness == 0.7
    assert result.report == format_report(result.records)
    assert result.image.size == (16, 12)
    assert "Took Photo: EmotionPic.jpg" in result.statuses


def test_both_services_empty_reports_fallback(tmp_path):
    pipeline = _started(_pipeline(tmp_path, [], []))
    result = asyncio.run(pipeline.run(remote_logging=False))
    assert result.records == []
    assert result.report == NO_EMOTION_MESSAGE + "\n"


def test_camera_unavailable_stops_cycle(tmp_path):
    face_client = FakeFaceClient([make_face(0)])
    emotion_client = FakeEmotionClient([make_emotion(0)])
    sender = FakeSender()
    pipeline = _pipeline(
        tmp_path,
        camera=FakeCamera(tmp_path, fail_open=True),
        face_client=face_client,
        emotion_client=emotion_client,
        uploader=FakeUploader(),
        publisher=EventPublisher(sender, log_dir=tmp_path),
    )

    start_statuses = asyncio.run(pipeline.start())
    result = asyncio.run(pipeline.run(remote_logging=True, local_logging=True))

    assert any("Unable to initialize" in status for status in start_statuses)
    assert "Error taking picture" in result.status
    assert result.picture is None
    assert result.records == []
    assert face_client.calls == 0
    assert emotion_client.calls == 0
    assert sender.messages == []
    assert list(tmp_path.glob("*.json")) == []


def test_service_failure_treated_as_no_data(tmp_path):
    request = httpx.Request("POST", "https://face.test/face/v1.0/detect")
    error = httpx.HTTPStatusError(
        "401 Unauthorized", request=request, response=httpx.Response(401, request=request)
    )
    pipeline = _started(
        _pipeline(
            tmp_path,
            face_client=FakeFaceClient(error=error),
            emotion_client=FakeEmotionClient([make_emotion(0)]),
        )
    )

    result = asyncio.run(pipeline.run(remote_logging=False))

    assert result.faces is None
    assert result.records == []
    assert result.report == NO_EMOTION_MESSAGE + "\n"
    assert any(status.startswith("Face detection failed") for status in result.statuses)
    assert "Emotion recognition succeeded: 1 faces." in result.statuses


def test_misaligned_results_reported_not_published(tmp_path):
    sender = FakeSender()
    uploader = FakeUploader()
    pipeline = _started(
        _pipeline(
            tmp_path,
            [make_face(0), make_face(1)],
            [make_emotion(0)],
            uploader=uploader,
            publisher=EventPublisher(sender, log_dir=tmp_path),
        )
    )

    result = asyncio.run(pipeline.run(remote_logging=True))

    assert not result.aligned
    assert result.records == []
    assert result.report == NO_EMOTION_MESSAGE + "\n"
    assert "do not line up" in result.status
    assert uploader.uploaded == []
    assert sender.messages == []


def test_remote_logging_uploads_and_publishes(tmp_path):
    sender = FakeSender()
    uploader = FakeUploader()
    geolocator = FakeGeolocator()
    pipeline = _started(
        _pipeline(
            tmp_path,
            [make_face(0)],
            [make_emotion(0)],
            geolocator=geolocator,
            uploader=uploader,
            publisher=EventPublisher(sender, geolocator, device_id="dev", log_dir=tmp_path / "log"),
        )
    )

    result = asyncio.run(pipeline.run(remote_logging=True, local_logging=True))

    assert result.image_uri == "https://account.blob.core.windows.net/iot/photos/dev_EmotionPic.jpg"
    assert "photos/dev_EmotionPic.jpg uploaded to Azure." in result.statuses
    assert result.publish.sent
    data = json.loads(sender.messages[0])
    assert data["AzureUri"] == result.image_uri
    assert data["DeviceId"] == "dev"
    assert len(data["Faces"]) == 1
    assert (tmp_path / "log" / f"{data['EventId']}.json").exists()
    assert pipeline.location == geolocator.location
    assert geolocator.calls == 2


def test_remote_logging_off_skips_publish(tmp_path):
    sender = FakeSender()
    uploader = FakeUploader()
    pipeline = _started(
        _pipeline(
            tmp_path,
            [make_face(0)],
            [make_emotion(0)],
            uploader=uploader,
            publisher=EventPublisher(sender, log_dir=tmp_path),
        )
    )
    result = asyncio.run(pipeline.run(remote_logging=False, local_logging=True))
    assert result.publish is None
    assert uploader.uploaded == []
    assert sender.messages == []


def test_upload_failure_still_publishes_without_uri(tmp_path):
    sender = FakeSender()
    pipeline = _started(
        _pipeline(
            tmp_path,
            [make_face(0)],
            [make_emotion(0)],
            uploader=FakeUploader(error=OSError("storage down")),
            publisher=EventPublisher(sender, log_dir=tmp_path),
        )
    )

    result = asyncio.run(pipeline.run(remote_logging=True))

    assert result.image_uri is None
    assert any("Uploading picture failed" in status for status in result.statuses)
    assert json.loads(sender.messages[0])["AzureUri"] is None


def test_send_failure_is_status_only(tmp_path):
    pipeline = _started(
        _pipeline(
            tmp_path,
            [make_face(0)],
            [make_emotion(0)],
            publisher=EventPublisher(
                FakeSender(error=ConnectionError("no route")), log_dir=tmp_path
            ),
        )
    )
    result = asyncio.run(pipeline.run(remote_logging=True, local_logging=True))
    assert not result.publish.sent
    assert "no route" in result.status
    assert len(result.records) == 1
    assert result.publish.log_path.exists()


def test_local_log_failure_still_publishes(tmp_path):
    (tmp_path / "blocker").write_text("not a directory")
    sender = FakeSender()
    pipeline = _started(
        _pipeline(
            tmp_path,
            [make_face(0)],
            [make_emotion(0)],
            publisher=EventPublisher(sender, log_dir=tmp_path / "blocker" / "events"),
        )
    )

    result = asyncio.run(pipeline.run(remote_logging=True, local_logging=True))

    assert len(sender.messages) == 1
    assert result.publish.sent
    assert "Writing event log failed" in result.status


def test_analyze_file(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"jpeg")
    pipeline = _pipeline(tmp_path, [make_face(0)], [make_emotion(0)])
    result = asyncio.run(pipeline.analyze_file(path))
    assert len(result.records) == 1
    assert result.report.startswith("Face: 0\n")


def test_analyze_missing_file(tmp_path):
    pipeline = _pipeline(tmp_path, [make_face(0)], [make_emotion(0)])
    result = asyncio.run(pipeline.analyze_file(tmp_path / "missing.jpg"))
    assert result.records == []
    assert result.status.startswith("Error reading picture")
    assert result.report == NO_EMOTION_MESSAGE + "\n"


def test_close_releases_camera_and_sender(tmp_path):
    camera = FakeCamera(tmp_path)
    sender = FakeSender()
    publisher = EventPublisher(sender, log_dir=tmp_path)
    pipeline = _pipeline(tmp_path, camera=camera, publisher=publisher)
    pipeline.close()
    assert camera.closed
    assert sender.closed
