"""Re-send locally logged events to IoT Hub (e.g. events recorded while offline)."""

import argparse
from pathlib import Path

from emotion_engine.config import EVENT_LOG_DIR
from emotion_engine.models import PublishEnvelope
from emotion_engine.publish.iothub import IoTHubSender


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dir", type=Path, default=EVENT_LOG_DIR, help="Event log directory")
    parser.add_argument("--delete-sent", action="store_true", help="Remove files once sent")
    args = parser.parse_args()

    paths = sorted(args.dir.glob("*.json"))
    if not paths:
        print(f"No events found in {args.dir}")
        return

    sender = IoTHubSender()
    sent = 0
    try:
        for path in paths:
            try:
                envelope = PublishEnvelope.from_json(path.read_text(encoding="utf-8"))
            except (ValueError, KeyError) as e:
                print(f"  skip {path.name}: not an event ({e})")
                continue
            sender.send(envelope.to_json())
            sent += 1
            print(f"  sent {envelope.event_id} ({len(envelope.faces)} faces)")
            if args.delete_sent:
                path.unlink()
    finally:
        sender.close()

    print(f"Done. Sent {sent}/{len(paths)} events.")


if __name__ == "__main__":
    main()
