"""Build, persist and send event envelopes."""

import asyncio
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from emotion_engine.capture.geolocation import Geolocator
from emotion_engine.config import DEVICE_ID, EVENT_LOG_DIR
from emotion_engine.models import Location, MergedFaceRecord, PublishEnvelope

logger = logging.getLogger(__name__)


class MessageSender(Protocol):
    def send(self, text: str) -> None: ...

    def close(self) -> None: ...


def build_envelope(
    records: Sequence[MergedFaceRecord],
    image_uri: str | None,
    location: Location | None,
    device_id: str = DEVICE_ID,
) -> PublishEnvelope:
    """Wrap merged records with a fresh event id and the current time."""
    return PublishEnvelope(
        event_id=str(uuid.uuid4()),
        device_id=device_id,
        location=location,
        timestamp=datetime.now(UTC),
        image_uri=image_uri,
        faces=list(records),
    )


def write_local_log(envelope: PublishEnvelope, directory: Path = EVENT_LOG_DIR) -> Path:
    """Write the envelope JSON to ``<directory>/<eventId>.json``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{envelope.event_id}.json"
    path.write_text(envelope.to_json(), encoding="utf-8")
    return path


@dataclass
class PublishOutcome:
    """What happened to one event."""

    envelope: PublishEnvelope
    log_path: Path | None
    sent: bool
    status: str
    log_error: str | None = None


class EventPublisher:
    """Sends one envelope per capture to the device-messaging hub."""

    def __init__(
        self,
        sender: MessageSender,
        geolocator: Geolocator | None = None,
        device_id: str = DEVICE_ID,
        log_dir: Path = EVENT_LOG_DIR,
        location: Location | None = None,
    ) -> None:
        self.sender = sender
        self.geolocator = geolocator
        self.device_id = device_id
        self.log_dir = Path(log_dir)
        self.location = location

    async def refresh_location(self) -> Location | None:
        """Re-read the position; keep the last known one if the lookup fails."""
        if self.geolocator is None:
            return self.location
        try:
            self.location = await self.geolocator.locate()
        except Exception:
            logger.warning("Could not refresh location, using last known", exc_info=True)
        return self.location

    async def publish(
        self,
        records: Sequence[MergedFaceRecord],
        image_uri: str | None,
        local_logging: bool = False,
    ) -> PublishOutcome:
        """Build the envelope, optionally log it locally, then send it.

        A failed local write or send is reported in the outcome status and
        does not stop the other. The local file is kept either way and
        nothing is retried.
        """
        location = await self.refresh_location()
        envelope = build_envelope(records, image_uri, location, self.device_id)

        log_path = None
        log_error = None
        if local_logging:
            try:
                log_path = await asyncio.to_thread(write_local_log, envelope, self.log_dir)
            except OSError as e:
                logger.error("Writing event %s locally failed: %s", envelope.event_id, e)
                log_error = f"Writing event log failed: {e}"
            else:
                logger.info("Event written to %s", log_path)

        try:
            await asyncio.to_thread(self.sender.send, envelope.to_json())
        except Exception as e:
            logger.exception("Sending event %s failed", envelope.event_id)
            status = f"Sending event failed: {e}"
            sent = False
        else:
            status = f"Event {envelope.event_id} sent to IoT Hub."
            sent = True

        if log_error:
            status = f"{log_error}. {status}"
        return PublishOutcome(envelope, log_path, sent=sent, status=status, log_error=log_error)
