from __future__ import annotations

from io import BytesIO
from typing import Any, Dict, Optional, Tuple

import piexif
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from exif_overlay.config import AppConfig
from exif_overlay.main import create_app


SAMPLE_EXIF: Dict[str, Any] = {
	"0th": {
		piexif.ImageIFD.Model: "Model-X",
		piexif.ImageIFD.ImageDescription: "Harbour at dusk",
	},
	"Exif": {
		piexif.ExifIFD.DateTimeOriginal: "2024:05:01 14:30:00",
		piexif.ExifIFD.ISOSpeedRatings: 400,
		piexif.ExifIFD.ExposureTime: (1, 200),
		piexif.ExifIFD.FNumber: (28, 10),
		piexif.ExifIFD.FocalLength: (50, 1),
	},
	"GPS": {
		piexif.GPSIFD.GPSLatitudeRef: "N",
		piexif.GPSIFD.GPSLatitude: [(48, 1), (51, 1), (0, 1)],
		piexif.GPSIFD.GPSLongitudeRef: "W",
		piexif.GPSIFD.GPSLongitude: [(2, 1), (21, 1), (0, 1)],
	},
}


def make_jpeg(size: Tuple[int, int] = (64, 48), exif: Optional[Dict[str, Any]] = None, color=(40, 80, 120)) -> bytes:
	img = Image.new("RGB", size, color)
	buf = BytesIO()
	kwargs = {"exif": piexif.dump(exif)} if exif else {}
	img.save(buf, format="JPEG", **kwargs)
	return buf.getvalue()


def make_png(size: Tuple[int, int] = (64, 48), color=(200, 30, 30)) -> bytes:
	buf = BytesIO()
	Image.new("RGB", size, color).save(buf, format="PNG")
	return buf.getvalue()


@pytest.fixture
def sample_jpeg() -> bytes:
	return make_jpeg((640, 480), SAMPLE_EXIF)


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
	return AppConfig(prefs_path=tmp_path / "prefs.json", log_level="DEBUG", log_dir=None, cors_origins=["*"])


@pytest.fixture
def client(app_config):
	with TestClient(create_app(app_config)) as c:
		yield c
