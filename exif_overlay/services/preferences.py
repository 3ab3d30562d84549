"""
Preferences store.

A flat JSON object of string keys to string values, kept in one file so it
survives restarts. Two keys are used: ``theme`` and ``exifSettings`` (the
latter holds the style settings serialized as a JSON string).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from exif_overlay.models import THEMES, StyleSettings
from exif_overlay.services.logging_service import get_logger


THEME_KEY = "theme"
SETTINGS_KEY = "exifSettings"
DEFAULT_THEME = "light"


class Preferences:
	def __init__(self, path: Path) -> None:
		self._logger = get_logger(__name__)
		self._path = path
		self._values: Dict[str, str] = self._read()

	@property
	def path(self) -> Path:
		return self._path

	def _read(self) -> Dict[str, str]:
		if not self._path.exists():
			return {}
		try:
			with self._path.open("r", encoding="utf-8") as f:
				data = json.load(f)
		except (OSError, json.JSONDecodeError) as e:
			self._logger.warning(f"Preferences at {self._path} unreadable: {e}. Using defaults.")
			return {}
		if not isinstance(data, dict):
			self._logger.warning(f"Preferences at {self._path} are not a JSON object. Using defaults.")
			return {}
		return {str(k): v for k, v in data.items() if isinstance(v, str)}

	def _write(self) -> None:
		try:
			self._path.parent.mkdir(parents=True, exist_ok=True)
			with self._path.open("w", encoding="utf-8") as f:
				json.dump(self._values, f, indent=2)
		except OSError as e:
			self._logger.error(f"Could not save preferences to {self._path}: {e}")

	def get(self, key: str) -> Optional[str]:
		return self._values.get(key)

	def set(self, key: str, value: str) -> None:
		self._values[key] = value
		self._write()

	# --- typed accessors ---

	def load_theme(self) -> str:
		theme = self.get(THEME_KEY)
		return theme if theme in THEMES else DEFAULT_THEME

	def save_theme(self, theme: str) -> None:
		if theme not in THEMES:
			raise ValueError(f"unknown theme: {theme!r}")
		self.set(THEME_KEY, theme)

	def load_style_settings(self) -> StyleSettings:
		raw = self.get(SETTINGS_KEY)
		if raw is None:
			return StyleSettings()
		try:
			return StyleSettings.model_validate_json(raw)
		except ValidationError as e:
			self._logger.warning(f"Stored {SETTINGS_KEY} invalid, using defaults: {e.error_count()} error(s)")
			return StyleSettings()

	def save_style_settings(self, settings: StyleSettings) -> None:
		self.set(SETTINGS_KEY, settings.model_dump_json(by_alias=True))
