from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from exif_overlay.models import FIELD_LABELS, PLACEHOLDER, StyleSettings
from exif_overlay.services.entries import ImageEntry
from exif_overlay.services.image_utils import compute_output_size, decode_image
from exif_overlay.services.layout import compute_origin, line_baselines
from exif_overlay.services.logging_service import get_logger


logger = get_logger(__name__)

OUTLINE_COLOR = (0, 0, 0)
OUTLINE_WIDTH = 3
FALLBACK_FONT = "DejaVuSans.ttf"


@lru_cache(maxsize=64)
def load_font(family: str, size: int):
	for candidate in (family, f"{family}.ttf", FALLBACK_FONT):
		try:
			return ImageFont.truetype(candidate, size)
		except (OSError, ValueError, TypeError):
			continue
	logger.debug(f"Font {family!r} not found; using Pillow default")
	return ImageFont.load_default(size=size)


def format_lines(metadata, selected_fields: Sequence[str]) -> List[str]:
	return [f"{FIELD_LABELS[f]}: {metadata.get(f, PLACEHOLDER)}" for f in selected_fields]


def _draw_line(draw: ImageDraw.ImageDraw, xy: Tuple[float, float], line: str, font, fill, outline: bool) -> None:
	x, y = xy
	kwargs = {}
	if isinstance(font, ImageFont.FreeTypeFont):
		kwargs["anchor"] = "ls"
		if outline:
			kwargs["stroke_width"] = OUTLINE_WIDTH
			kwargs["stroke_fill"] = OUTLINE_COLOR
	else:
		# bitmap fonts draw from the top-left corner and cannot be stroked
		if outline:
			logger.debug("Outline unavailable without FreeType; drawing fill only")
		y -= font.getbbox(line)[3]
	draw.text((x, y), line, fill=fill, font=font, **kwargs)


def draw_overlay(surface: Image.Image, lines: Sequence[str], settings: StyleSettings) -> None:
	if not lines:
		return
	font = load_font(settings.font_family, settings.font_size)
	draw = ImageDraw.Draw(surface)
	widths = [draw.textlength(ln, font=font) for ln in lines]
	x, y = compute_origin(lines, widths, settings.font_size, settings.anchor, surface.width, surface.height)
	fill = ImageColor.getrgb(settings.text_color)
	for ln, baseline in zip(lines, line_baselines(y, len(lines), settings.font_size)):
		_draw_line(draw, (x, baseline), ln, font, fill, settings.outline)


def render(entry: ImageEntry, settings: StyleSettings) -> Optional[Image.Image]:
	"""Redraw ``entry.surface`` from its source and metadata.

	A source that cannot be decoded leaves the entry without a surface and
	with ``entry.error`` set.
	"""
	if entry.source is None:
		entry.set_surface(None)
		return None
	try:
		img = decode_image(entry.source)
	except Exception as e:
		logger.warning(f"Could not decode {entry.filename}: {e}")
		entry.set_surface(None)
		entry.error = f"could not decode image: {e}"
		return None

	size = compute_output_size(img.width, img.height, settings.max_width_px)
	if img.size != size:
		img = img.resize(size, Image.Resampling.LANCZOS)
	surface = Image.new("RGB", size)
	surface.paste(img, (0, 0))

	draw_overlay(surface, format_lines(entry.metadata, settings.selected_fields), settings)
	entry.set_surface(surface)
	entry.error = None
	return surface
