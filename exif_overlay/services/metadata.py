from __future__ import annotations

import math
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, Optional

from PIL import ExifTags, Image
import piexif

from exif_overlay.models import EXIF_FIELDS, PLACEHOLDER
from exif_overlay.services.logging_service import get_logger


logger = get_logger(__name__)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# JPEG, TIFF (both byte orders), WebP, raw APP1 payload
PIEXIF_MAGIC = (b"\xff\xd8", b"II", b"MM", b"RIFF", b"Exif")


def _rational_to_float(x: Any) -> Optional[float]:
	if x is None:
		return None
	try:
		if isinstance(x, tuple) and len(x) == 2:
			num, den = x
			if not den:
				return None
			f = float(num) / float(den)
		else:
			f = float(x)
	except (TypeError, ValueError, ZeroDivisionError):
		return None
	# Pillow reads x/0 rationals as nan
	return f if math.isfinite(f) else None


def _bytes_to_str(v: Any) -> Optional[str]:
	if v is None:
		return None
	if isinstance(v, bytes):
		v = v.decode("utf-8", errors="ignore")
	s = str(v).replace("\x00", "").strip()
	return s or None


def _to_int_safe(v: Any) -> Optional[int]:
	if v is None:
		return None
	if isinstance(v, (list, tuple)):
		v = v[0] if v else None
	f = _rational_to_float(v)
	if f is None or f <= 0:
		return None
	return int(f)


def _dms_to_degrees(dms: Any, ref: Any) -> Optional[float]:
	if not isinstance(dms, (list, tuple)) or len(dms) != 3:
		return None
	parts = [_rational_to_float(p) for p in dms]
	if any(p is None for p in parts):
		return None
	deg = parts[0] + parts[1] / 60.0 + parts[2] / 3600.0
	if _bytes_to_str(ref) in ("S", "W"):
		deg = -deg
	return deg


def _format_number(x: float) -> str:
	x = round(x, 6)
	return str(int(x)) if x.is_integer() else str(x)


def _read_piexif(data: bytes) -> Dict[str, Any]:
	ex = piexif.load(data)
	zeroth = ex.get("0th", {})
	exif = ex.get("Exif", {})
	gps = ex.get("GPS", {})
	return {
		"Model": zeroth.get(piexif.ImageIFD.Model),
		"ImageDescription": zeroth.get(piexif.ImageIFD.ImageDescription),
		"DateTime": zeroth.get(piexif.ImageIFD.DateTime),
		"DateTimeOriginal": exif.get(piexif.ExifIFD.DateTimeOriginal),
		"ISOSpeedRatings": exif.get(piexif.ExifIFD.ISOSpeedRatings),
		"ExposureTime": exif.get(piexif.ExifIFD.ExposureTime),
		"FNumber": exif.get(piexif.ExifIFD.FNumber),
		"FocalLength": exif.get(piexif.ExifIFD.FocalLength),
		"GPSLatitude": gps.get(piexif.GPSIFD.GPSLatitude),
		"GPSLatitudeRef": gps.get(piexif.GPSIFD.GPSLatitudeRef),
		"GPSLongitude": gps.get(piexif.GPSIFD.GPSLongitude),
		"GPSLongitudeRef": gps.get(piexif.GPSIFD.GPSLongitudeRef),
	}


def _read_pillow(data: bytes) -> Dict[str, Any]:
	# Containers piexif does not understand (PNG, HEIF via plugins)
	with Image.open(BytesIO(data)) as img:
		exif = img.getexif()
	raw: Dict[str, Any] = {}
	ifds = [exif, exif.get_ifd(ExifTags.IFD.Exif)]
	for ifd in ifds:
		for tag_id, value in ifd.items():
			raw[str(ExifTags.TAGS.get(tag_id, tag_id))] = value
	for tag_id, value in exif.get_ifd(ExifTags.IFD.GPSInfo).items():
		raw[str(ExifTags.GPSTAGS.get(tag_id, tag_id))] = value
	return raw


def read_exif(data: bytes) -> Dict[str, Any]:
	"""Raw EXIF tag values keyed by tag name; empty when nothing can be read."""
	if data.startswith(PIEXIF_MAGIC):
		try:
			return _read_piexif(data)
		except Exception as e:
			logger.debug(f"piexif could not read EXIF ({e}); trying Pillow")
	try:
		return _read_pillow(data)
	except Exception as e:
		logger.warning(f"No readable EXIF: {e}")
		return {}


def format_date(v: Any) -> Optional[str]:
	s = _bytes_to_str(v)
	if s is None:
		return None
	try:
		return datetime.strptime(s, EXIF_DATE_FORMAT).strftime("%Y-%m-%d %H:%M:%S")
	except ValueError:
		return s


def format_shutter(v: Any) -> Optional[str]:
	t = _rational_to_float(v)
	if not t or t <= 0:
		return None
	# half-up rounding of the reciprocal
	return f"1/{int(math.floor(1.0 / t + 0.5))}"


def format_aperture(v: Any) -> Optional[str]:
	f = _rational_to_float(v)
	return f"f/{_format_number(f)}" if f else None


def format_focal(v: Any) -> Optional[str]:
	f = _rational_to_float(v)
	return f"{_format_number(f)}mm" if f else None


def format_gps(raw: Dict[str, Any]) -> Optional[str]:
	lat = _dms_to_degrees(raw.get("GPSLatitude"), raw.get("GPSLatitudeRef"))
	lon = _dms_to_degrees(raw.get("GPSLongitude"), raw.get("GPSLongitudeRef"))
	if lat is None or lon is None:
		return None
	return f"{_format_number(lat)}, {_format_number(lon)}"


def format_fields(raw: Dict[str, Any]) -> Dict[str, str]:
	iso = _to_int_safe(raw.get("ISOSpeedRatings"))
	values: Dict[str, Optional[str]] = {
		"camera": _bytes_to_str(raw.get("Model")),
		"date": format_date(raw.get("DateTimeOriginal")) or format_date(raw.get("DateTime")),
		"iso": str(iso) if iso else None,
		"shutter": format_shutter(raw.get("ExposureTime")),
		"aperture": format_aperture(raw.get("FNumber")),
		"focal": format_focal(raw.get("FocalLength")),
		"gps": format_gps(raw),
		"description": _bytes_to_str(raw.get("ImageDescription")),
	}
	return {k: values.get(k) or PLACEHOLDER for k in EXIF_FIELDS}


def extract_fields(data: bytes) -> Dict[str, str]:
	try:
		return format_fields(read_exif(data))
	except Exception as e:
		logger.warning(f"EXIF formatting failed: {e}")
		return {k: PLACEHOLDER for k in EXIF_FIELDS}
