from __future__ import annotations

from typing import Any, Dict, List, Optional

from exif_overlay.models import StyleSettings
from exif_overlay.services.entries import ImageEntry
from exif_overlay.services.logging_service import get_logger
from exif_overlay.services.preferences import Preferences
from exif_overlay.services.renderer import render


logger = get_logger(__name__)


class EntryNotFound(KeyError):
	pass


class EntryNotRendered(Exception):
	pass


class Workspace:
	"""Owns the entry collection and the shared style settings.

	Any change to either goes through here and ends in ``recompute()``.
	"""

	def __init__(self, preferences: Preferences) -> None:
		self.preferences = preferences
		self.settings: StyleSettings = preferences.load_style_settings()
		self._entries: Dict[str, ImageEntry] = {}

	@property
	def entries(self) -> List[ImageEntry]:
		return list(self._entries.values())

	def get(self, entry_id: str) -> ImageEntry:
		try:
			return self._entries[entry_id]
		except KeyError:
			raise EntryNotFound(entry_id) from None

	def rendered_surface(self, entry_id: str):
		entry = self.get(entry_id)
		if entry.surface is None:
			raise EntryNotRendered(entry.error or f"{entry.filename} has not been rendered")
		return entry.surface

	def replace_entries(self, entries: List[ImageEntry]) -> None:
		for old in self._entries.values():
			old.release()
		self._entries = {e.id: e for e in entries}
		logger.info(f"Workspace holds {len(self._entries)} image(s)")
		self.recompute()

	def remove(self, entry_id: str) -> None:
		entry = self.get(entry_id)
		del self._entries[entry_id]
		entry.release()

	def update_settings(self, settings: StyleSettings) -> None:
		self.settings = settings
		self.preferences.save_style_settings(settings)
		self.recompute()

	def patch_settings(self, changes: Dict[str, Any]) -> StyleSettings:
		merged = {**self.settings.to_json_dict(), **changes}
		settings = StyleSettings.model_validate(merged)
		self.update_settings(settings)
		return settings

	def recompute(self) -> None:
		for entry in self._entries.values():
			render(entry, self.settings)

	def clear(self) -> None:
		self.replace_entries([])

	def export_quality(self, override: Optional[int] = None) -> int:
		return override if override is not None else self.settings.export_quality
