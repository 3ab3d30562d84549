from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


CONFIG_DIR = Path.home() / ".config" / "exif_overlay"
PREFS_PATH = CONFIG_DIR / "preferences.json"


def _origins_from_env() -> List[str]:
	raw = os.environ.get("EXIF_OVERLAY_CORS_ORIGINS", "*")
	return [o.strip() for o in raw.split(",") if o.strip()]


def _log_dir_from_env() -> Optional[Path]:
	v = os.environ.get("EXIF_OVERLAY_LOG_DIR", "")
	return Path(v) if v else None


@dataclass
class AppConfig:
	# Preferences (theme + exifSettings)
	prefs_path: Path = field(default_factory=lambda: Path(os.environ.get("EXIF_OVERLAY_PREFS_PATH", str(PREFS_PATH))))

	# Logging
	log_level: str = field(default_factory=lambda: os.environ.get("EXIF_OVERLAY_LOG_LEVEL", "INFO"))
	log_dir: Optional[Path] = field(default_factory=_log_dir_from_env)

	# HTTP
	cors_origins: List[str] = field(default_factory=_origins_from_env)

	@property
	def log_level_value(self) -> int:
		level = logging.getLevelName(self.log_level.upper())
		return level if isinstance(level, int) else logging.INFO
