from __future__ import annotations

from io import BytesIO
from typing import Optional, Tuple

from PIL import ExifTags, Image


def apply_exif_orientation(img: Image.Image) -> Image.Image:
	orientation = img.getexif().get(ExifTags.Base.Orientation)
	if orientation is None:
		return img
	try:
		o = int(orientation)
	except (TypeError, ValueError):
		return img
	if o == 2:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
	if o == 3:
		return img.rotate(180, expand=True)
	if o == 4:
		return img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
	if o == 5:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).rotate(90, expand=True)
	if o == 6:
		return img.rotate(270, expand=True)
	if o == 7:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).rotate(270, expand=True)
	if o == 8:
		return img.rotate(90, expand=True)
	return img


def decode_image(data: bytes) -> Image.Image:
	"""Fully decode ``data`` into an upright RGB image.

	Raises whatever Pillow raises for unreadable data.
	"""
	img = Image.open(BytesIO(data))
	img.load()
	img = apply_exif_orientation(img)
	if img.mode != "RGB":
		img = img.convert("RGB")
	return img


def compute_output_size(width: int, height: int, max_width: Optional[int]) -> Tuple[int, int]:
	if max_width is None or width <= max_width:
		return (width, height)
	r = max_width / float(width)
	# half-up so 3000x2000 -> 1920x1280 and odd sizes round consistently
	return (max_width, max(1, int(height * r + 0.5)))
