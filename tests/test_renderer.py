from exif_overlay.models import PLACEHOLDER, StyleSettings
from exif_overlay.services.entries import ImageEntry
from exif_overlay.services.image_utils import decode_image
from exif_overlay.services.metadata import extract_fields
from exif_overlay.services.renderer import format_lines, load_font, render

from conftest import SAMPLE_EXIF, make_jpeg


def _entry(data: bytes, name: str = "a.jpg") -> ImageEntry:
	return ImageEntry.create(name, data, extract_fields(data))


def test_format_lines_follows_selection_order():
	meta = {"iso": "400", "camera": "Model-X"}
	assert format_lines(meta, ["iso", "camera", "gps"]) == ["ISO: 400", "Camera: Model-X", f"GPS: {PLACEHOLDER}"]
	assert format_lines(meta, []) == []


def test_render_scales_to_max_width():
	entry = _entry(make_jpeg((3000, 2000)))
	surface = render(entry, StyleSettings(max_width=1920))
	assert surface.size == (1920, 1280)
	assert entry.surface is surface
	assert entry.error is None


def test_keep_original_does_not_scale():
	entry = _entry(make_jpeg((2400, 100)))
	assert render(entry, StyleSettings(max_width="original")).size == (2400, 100)


def test_empty_selection_draws_no_text():
	data = make_jpeg((320, 240), SAMPLE_EXIF)
	entry = _entry(data)
	surface = render(entry, StyleSettings(selected_fields=[], max_width="original"))
	assert surface.tobytes() == decode_image(data).tobytes()


def test_selected_fields_draw_text():
	data = make_jpeg((320, 240), SAMPLE_EXIF)
	entry = _entry(data)
	plain = render(entry, StyleSettings(selected_fields=[])).tobytes()
	for anchor in ("top-left", "top-right", "bottom-left", "bottom-right", "bottom-center"):
		drawn = render(entry, StyleSettings(selected_fields=["camera", "iso"], anchor=anchor)).tobytes()
		assert drawn != plain


def test_outline_changes_output():
	entry = _entry(make_jpeg((320, 240), SAMPLE_EXIF))
	with_outline = render(entry, StyleSettings(outline=True, font_size=30)).tobytes()
	without = render(entry, StyleSettings(outline=False, font_size=30)).tobytes()
	assert with_outline != without


def test_render_is_idempotent():
	entry = _entry(make_jpeg((400, 300), SAMPLE_EXIF))
	settings = StyleSettings(font_size=24, text_color="#FFCC00", anchor="bottom-center")
	first = render(entry, settings).tobytes()
	second = render(entry, settings).tobytes()
	assert first == second


def test_render_does_not_touch_metadata_or_source():
	data = make_jpeg(exif=SAMPLE_EXIF)
	entry = _entry(data)
	before = dict(entry.metadata)
	render(entry, StyleSettings(font_size=150))
	assert dict(entry.metadata) == before
	assert entry.source == data


def test_decode_failure_leaves_entry_blank():
	entry = _entry(b"broken bytes", "broken.jpg")
	assert render(entry, StyleSettings()) is None
	assert entry.surface is None
	assert "could not decode" in entry.error
	assert set(entry.metadata.values()) == {PLACEHOLDER}


def test_released_entry_renders_nothing():
	entry = _entry(make_jpeg())
	render(entry, StyleSettings())
	entry.release()
	assert render(entry, StyleSettings()) is None
	assert entry.released


def test_unknown_font_falls_back():
	font = load_font("No Such Font Family", 33)
	assert font is not None


def test_font_names_with_control_bytes_still_load():
	assert load_font("Ar\x00ial", 20) is not None


def test_bitmap_font_reports_missing_outline(caplog):
	import logging

	from PIL import Image, ImageDraw, ImageFont

	from exif_overlay.services.renderer import _draw_line

	surface = Image.new("RGB", (200, 60))
	caplog.set_level(logging.DEBUG, logger="exif_overlay.services.renderer")
	_draw_line(ImageDraw.Draw(surface), (10, 40), "ISO: 400", ImageFont.load_default_imagefont(), (255, 255, 255), True)
	assert "Outline unavailable" in caplog.text
	assert surface.getbbox() is not None
