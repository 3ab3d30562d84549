from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import PurePath
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from PIL import Image


def _new_id() -> str:
	return uuid.uuid4().hex


@dataclass(eq=False)
class ImageEntry:
	"""One uploaded image, its metadata and its current rendered surface."""

	filename: str
	source: Optional[bytes]
	metadata: Mapping[str, str]
	id: str = field(default_factory=_new_id)
	surface: Optional[Image.Image] = None
	error: Optional[str] = None

	@classmethod
	def create(cls, filename: str, source: bytes, metadata: Dict[str, str]) -> "ImageEntry":
		# metadata is fixed at upload time
		name = PurePath(filename.replace("\\", "/")).name or "image.jpg"
		return cls(filename=name, source=source, metadata=MappingProxyType(dict(metadata)))

	@property
	def preview_url(self) -> str:
		return f"/images/{self.id}/preview"

	@property
	def download_url(self) -> str:
		return f"/images/{self.id}/download"

	@property
	def released(self) -> bool:
		return self.source is None

	def set_surface(self, surface: Optional[Image.Image]) -> None:
		if self.surface is not None and self.surface is not surface:
			self.surface.close()
		self.surface = surface

	def release(self) -> None:
		self.set_surface(None)
		self.source = None
