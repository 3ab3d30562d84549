from __future__ import annotations

import asyncio
from typing import Any, Dict, List

from starlette.concurrency import run_in_threadpool

from exif_overlay.services.entries import ImageEntry
from exif_overlay.services.logging_service import get_logger
from exif_overlay.services.metadata import extract_fields
from exif_overlay.services.workspace import Workspace


logger = get_logger(__name__)


async def _extract(fm: Dict[str, Any]) -> ImageEntry:
	metadata = await run_in_threadpool(extract_fields, fm["data"])
	return ImageEntry.create(fm["filename"], fm["data"], metadata)


async def build_entries(files_meta: List[Dict[str, Any]]) -> List[ImageEntry]:
	# extraction of one file never waits on another; results keep upload order
	return list(await asyncio.gather(*(_extract(fm) for fm in files_meta)))


async def run_upload(workspace: Workspace, files_meta: List[Dict[str, Any]]) -> List[ImageEntry]:
	if not files_meta:
		return workspace.entries
	entries = await build_entries(files_meta)
	logger.info(f"Extracted metadata for {len(entries)} file(s)")
	workspace.replace_entries(entries)
	failed = [e.filename for e in entries if e.error]
	if failed:
		logger.warning(f"{len(failed)} upload(s) could not be decoded: {', '.join(failed)}")
	return entries
