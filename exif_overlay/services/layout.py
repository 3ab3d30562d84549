from __future__ import annotations

from typing import List, Sequence, Tuple


PADDING = 20
LINE_GAP = 5


def line_pitch(font_size: int) -> int:
	return font_size + LINE_GAP


def compute_origin(
	lines: Sequence[str],
	measured_widths: Sequence[float],
	font_size: int,
	anchor: str,
	canvas_width: int,
	canvas_height: int,
) -> Tuple[float, float]:
	"""Baseline origin (x, y) of the first line of the text block.

	Lines are never wrapped; a line wider than the canvas overflows.
	"""
	max_text_width = max(measured_widths) if measured_widths else 0
	bottom_y = canvas_height - len(lines) * line_pitch(font_size)
	top_y = PADDING + font_size
	if anchor == "top-left":
		return (PADDING, top_y)
	if anchor == "top-right":
		return (canvas_width - PADDING - max_text_width, top_y)
	if anchor == "bottom-left":
		return (PADDING, bottom_y)
	if anchor == "bottom-right":
		return (canvas_width - PADDING - max_text_width, bottom_y)
	if anchor == "bottom-center":
		return ((canvas_width - max_text_width) / 2, bottom_y)
	raise ValueError(f"unknown anchor: {anchor!r}")


def line_baselines(origin_y: float, count: int, font_size: int) -> List[float]:
	return [origin_y + i * line_pitch(font_size) for i in range(count)]
