from __future__ import annotations

from io import BytesIO
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from exif_overlay.services.export import ARCHIVE_NAME, ExportError, export_all
from exif_overlay.services.workspace import Workspace
from exif_overlay.routers.deps import attachment_headers, get_workspace


router = APIRouter(prefix="/export", tags=["export"])


@router.get("/zip", summary="All rendered images as exif_images.zip")
async def export_zip(
	quality: Optional[int] = Query(None, ge=0, le=100),
	ws: Workspace = Depends(get_workspace),
):
	try:
		result = export_all(ws.entries, ws.export_quality(quality))
	except ExportError as e:
		raise HTTPException(status_code=500, detail=str(e))
	headers = attachment_headers(ARCHIVE_NAME)
	if result.skipped:
		headers["X-Skipped-Entries"] = ", ".join(quote(n) for n in result.skipped)
	return StreamingResponse(BytesIO(result.data), media_type="application/zip", headers=headers)
