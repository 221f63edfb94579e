"""Project-wide configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(os.environ.get("EMOTION_ENGINE_PROJECT_ROOT", Path.cwd()))

load_dotenv(PROJECT_ROOT / ".env")

# Local storage
PICTURES_DIR = Path(os.environ.get("PICTURES_DIR", PROJECT_ROOT / "data" / "pictures"))
EVENT_LOG_DIR = Path(os.environ.get("EVENT_LOG_DIR", PICTURES_DIR))
PICTURE_NAME = "EmotionPic.jpg"

# Webcam
CAMERA_INDEX = int(os.environ.get("CAMERA_INDEX", "0"))

# Cognitive Services – Face
FACE_API_ENDPOINT = os.environ.get(
    "FACE_API_ENDPOINT", "https://westus.api.cognitive.microsoft.com"
)
FACE_API_KEY = os.environ.get("FACE_API_KEY", "")
FACE_ATTRIBUTES = ("age", "gender", "facialHair", "smile")

# Cognitive Services – Emotion
EMOTION_API_ENDPOINT = os.environ.get(
    "EMOTION_API_ENDPOINT", "https://westus.api.cognitive.microsoft.com"
)
EMOTION_API_KEY = os.environ.get("EMOTION_API_KEY", "")

HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "30"))

# Azure IoT Hub / Blob Storage
DEVICE_ID = os.environ.get("DEVICE_ID", "emotion-engine")
IOTHUB_DEVICE_CONNECTION_STRING = os.environ.get("IOTHUB_DEVICE_CONNECTION_STRING", "")
BLOB_CONNECTION_STRING = os.environ.get("BLOB_CONNECTION_STRING", "")
BLOB_CONTAINER = os.environ.get("BLOB_CONTAINER", "iot")

# Geolocation
GEOLOCATION_API_BASE = os.environ.get("GEOLOCATION_API_BASE", "http://ip-api.com/json/")
GEOLOCATION_ACCURACY_M = int(os.environ.get("GEOLOCATION_ACCURACY_M", "100"))
LOCATION_LONGITUDE = os.environ.get("LOCATION_LONGITUDE", "")
LOCATION_LATITUDE = os.environ.get("LOCATION_LATITUDE", "")
