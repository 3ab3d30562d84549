import zipfile
from io import BytesIO

import pytest
from PIL import Image

from exif_overlay.models import StyleSettings
from exif_overlay.services.entries import ImageEntry
from exif_overlay.services.export import (
	ARCHIVE_FOLDER,
	ExportError,
	encode_jpeg,
	export_all,
	export_filename,
	export_one,
)
from exif_overlay.services.metadata import extract_fields
from exif_overlay.services.renderer import render

from conftest import make_jpeg, make_png


def _rendered(name: str, data: bytes, settings: StyleSettings = StyleSettings()) -> ImageEntry:
	entry = ImageEntry.create(name, data, extract_fields(data))
	render(entry, settings)
	return entry


@pytest.mark.parametrize(
	"name,expected",
	[
		("IMG_0001.JPG", "IMG_0001_exif.jpg"),
		("holiday.photo.jpeg", "holiday.photo_exif.jpg"),
		("noext", "noext_exif.jpg"),
		("dir/sub/pic.png", "pic_exif.jpg"),
		("C:\\shots\\pic.tif", "pic_exif.jpg"),
	],
)
def test_export_filename(name, expected):
	assert export_filename(name) == expected


def test_export_one_round_trips_dimensions():
	entry = _rendered("big.jpg", make_jpeg((3000, 2000)), StyleSettings(max_width=1920))
	name, data = export_one(entry.surface, entry.filename, 90)
	assert name == "big_exif.jpg"
	with Image.open(BytesIO(data)) as img:
		assert img.format == "JPEG"
		assert img.size == (1920, 1280)


def test_quality_affects_size():
	entry = _rendered("a.jpg", make_jpeg((300, 200)))
	assert len(encode_jpeg(entry.surface, 50)) < len(encode_jpeg(entry.surface, 100))


def test_export_all_layout():
	entries = [_rendered("a.jpg", make_jpeg()), _rendered("b.png", make_png())]
	result = export_all(entries, 80)
	with zipfile.ZipFile(BytesIO(result.data)) as zf:
		assert zf.namelist() == [f"{ARCHIVE_FOLDER}/a_exif.jpg", f"{ARCHIVE_FOLDER}/b_exif.jpg"]
		with Image.open(BytesIO(zf.read(f"{ARCHIVE_FOLDER}/b_exif.jpg"))) as img:
			assert img.size == (64, 48)
	assert result.skipped == []


def test_export_all_skips_unrendered():
	entries = [_rendered("a.jpg", make_jpeg()), _rendered("bad.jpg", b"garbage")]
	result = export_all(entries)
	assert result.filenames == ["a_exif.jpg"]
	assert result.skipped == ["bad.jpg"]
	with zipfile.ZipFile(BytesIO(result.data)) as zf:
		assert len(zf.namelist()) == 1


def test_export_all_keeps_duplicate_names():
	entries = [_rendered("a.jpg", make_jpeg()), _rendered("a.jpeg", make_jpeg()), _rendered("a.png", make_png())]
	result = export_all(entries)
	assert result.filenames == ["a_exif.jpg", "a_exif_1.jpg", "a_exif_2.jpg"]


def test_export_all_empty():
	result = export_all([])
	with zipfile.ZipFile(BytesIO(result.data)) as zf:
		assert zf.namelist() == []


def test_encode_failure_aborts_archive(monkeypatch):
	entries = [_rendered("a.jpg", make_jpeg()), _rendered("b.jpg", make_jpeg())]

	def boom(self, *args, **kwargs):
		raise OSError("encoder exploded")

	monkeypatch.setattr(Image.Image, "save", boom)
	with pytest.raises(ExportError):
		export_all(entries)
