from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import PurePath
from typing import Iterable, List, Set, Tuple

from PIL import Image

from exif_overlay.services.entries import ImageEntry
from exif_overlay.services.logging_service import get_logger


logger = get_logger(__name__)

ARCHIVE_FOLDER = "exif_images"
ARCHIVE_NAME = f"{ARCHIVE_FOLDER}.zip"
EXPORT_SUFFIX = "_exif.jpg"
DEFAULT_QUALITY = 100


class ExportError(Exception):
	pass


@dataclass
class ArchiveResult:
	data: bytes
	filenames: List[str] = field(default_factory=list)
	skipped: List[str] = field(default_factory=list)


def export_filename(name: str) -> str:
	base = PurePath(name.replace("\\", "/")).name
	stem = base.rsplit(".", 1)[0] if "." in base else base
	return f"{stem or 'image'}{EXPORT_SUFFIX}"


def encode_jpeg(surface: Image.Image, quality: int = DEFAULT_QUALITY) -> bytes:
	buf = BytesIO()
	try:
		img = surface if surface.mode == "RGB" else surface.convert("RGB")
		img.save(buf, format="JPEG", quality=quality)
	except (OSError, ValueError) as e:
		raise ExportError(f"JPEG encoding failed: {e}") from e
	return buf.getvalue()


def encode_png(surface: Image.Image) -> bytes:
	buf = BytesIO()
	surface.save(buf, format="PNG")
	return buf.getvalue()


def export_one(surface: Image.Image, base_filename: str, quality: int = DEFAULT_QUALITY) -> Tuple[str, bytes]:
	return export_filename(base_filename), encode_jpeg(surface, quality)


def _unique_name(name: str, used: Set[str]) -> str:
	stem, ext = name[: -len(".jpg")], ".jpg"
	cand = name
	i = 1
	while cand in used:
		cand = f"{stem}_{i}{ext}"
		i += 1
	used.add(cand)
	return cand


def export_all(entries: Iterable[ImageEntry], quality: int = DEFAULT_QUALITY) -> ArchiveResult:
	"""Zip every rendered entry under ``exif_images/``.

	Entries without a surface are skipped; an encoding failure aborts the
	whole archive.
	"""
	result = ArchiveResult(data=b"")
	used: Set[str] = set()
	mem = BytesIO()
	with zipfile.ZipFile(mem, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
		for entry in entries:
			if entry.surface is None:
				logger.warning(f"Skipping {entry.filename} in archive: not rendered")
				result.skipped.append(entry.filename)
				continue
			data = encode_jpeg(entry.surface, quality)
			name = _unique_name(export_filename(entry.filename), used)
			zf.writestr(f"{ARCHIVE_FOLDER}/{name}", data)
			result.filenames.append(name)
	result.data = mem.getvalue()
	logger.info(f"Built {ARCHIVE_NAME} with {len(result.filenames)} image(s), {len(result.skipped)} skipped")
	return result
