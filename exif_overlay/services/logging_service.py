"""
Logging setup for the EXIF overlay service.

Console output is always on; a dated log file is added when a log directory
is configured.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_initialized = False


def setup_logging(log_level: int = logging.INFO, log_dir: Optional[Path] = None) -> None:
	"""Configure the package logger once; later calls are no-ops."""
	global _logging_initialized
	if _logging_initialized:
		return

	pkg_logger = logging.getLogger("exif_overlay")
	pkg_logger.setLevel(log_level)
	formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

	console_handler = logging.StreamHandler()
	console_handler.setLevel(log_level)
	console_handler.setFormatter(formatter)
	pkg_logger.addHandler(console_handler)

	if log_dir is not None:
		try:
			log_dir.mkdir(parents=True, exist_ok=True)
			log_path = log_dir / f"exif_overlay_{datetime.now().strftime('%Y%m%d')}.log"
			file_handler = logging.FileHandler(log_path, encoding="utf-8")
			file_handler.setLevel(log_level)
			file_handler.setFormatter(formatter)
			pkg_logger.addHandler(file_handler)
		except OSError as e:
			pkg_logger.warning(f"Could not create log file in {log_dir}: {e}. Logging to console only.")

	_logging_initialized = True


def get_logger(name: str) -> logging.Logger:
	return logging.getLogger(name)
