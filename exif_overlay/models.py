from __future__ import annotations

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


PLACEHOLDER = "N/A"

# Canonical order, also the default line order
EXIF_FIELDS = ("camera", "date", "iso", "shutter", "aperture", "focal", "gps", "description")

FIELD_LABELS: Dict[str, str] = {
	"camera": "Camera",
	"date": "Date",
	"iso": "ISO",
	"shutter": "Shutter",
	"aperture": "Aperture",
	"focal": "Focal Length",
	"gps": "GPS",
	"description": "Description",
}

ANCHORS = ("top-left", "top-right", "bottom-left", "bottom-right", "bottom-center")
Anchor = Literal["top-left", "top-right", "bottom-left", "bottom-right", "bottom-center"]

RESOLUTIONS = (1920, 1080)
KEEP_ORIGINAL = "original"

THEMES = ("light", "dark")


class StyleSettings(BaseModel):
	"""Shared styling applied to every entry.

	Aliases are the keys of the persisted ``exifSettings`` object.
	"""

	model_config = ConfigDict(populate_by_name=True, extra="ignore")

	font_family: str = Field("Arial", alias="selectedFont", min_length=1)
	font_size: int = Field(20, alias="fontSize", ge=10, le=150)
	text_color: str = Field("#FFFFFF", alias="textColor", pattern=r"^#[0-9A-Fa-f]{6}$")
	outline: bool = Field(True, alias="showOutline")
	anchor: Anchor = Field("top-left", alias="textPosition")
	selected_fields: List[str] = Field(default_factory=lambda: list(EXIF_FIELDS), alias="selectedExifFields")
	max_width: Union[int, Literal["original"]] = Field(1920, alias="resolution")
	export_quality: int = Field(100, alias="exportQuality", ge=50, le=100)

	@field_validator("font_family")
	@classmethod
	def _plain_font_name(cls, v: str) -> str:
		# a family name, never a filesystem path
		if any(ord(ch) < 32 or ord(ch) == 127 for ch in v):
			raise ValueError("selectedFont must not contain control characters")
		if "/" in v or "\\" in v:
			raise ValueError("selectedFont must be a font family name, not a path")
		return v

	@field_validator("selected_fields")
	@classmethod
	def _known_fields(cls, v: List[str]) -> List[str]:
		unknown = [f for f in v if f not in EXIF_FIELDS]
		if unknown:
			raise ValueError(f"unknown EXIF fields: {', '.join(unknown)}")
		if len(set(v)) != len(v):
			raise ValueError("selectedExifFields must not repeat a field")
		return v

	@field_validator("max_width")
	@classmethod
	def _known_resolution(cls, v: Union[int, str]) -> Union[int, str]:
		if v != KEEP_ORIGINAL and v not in RESOLUTIONS:
			raise ValueError(f"resolution must be one of {list(RESOLUTIONS)} or '{KEEP_ORIGINAL}'")
		return v

	@property
	def max_width_px(self) -> Optional[int]:
		return None if self.max_width == KEEP_ORIGINAL else int(self.max_width)

	def to_json_dict(self) -> Dict[str, object]:
		return self.model_dump(by_alias=True)


class EntryOut(BaseModel):
	id: str
	filename: str
	metadata: Dict[str, str]
	width: Optional[int] = None
	height: Optional[int] = None
	rendered: bool
	error: Optional[str] = None
	preview_url: str
	download_url: str


class UploadOut(BaseModel):
	entries: List[EntryOut]
	rejected: List[str] = []


class ThemeIn(BaseModel):
	theme: Literal["light", "dark"]
