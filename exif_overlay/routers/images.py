from __future__ import annotations

from io import BytesIO
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse

from exif_overlay.models import EntryOut, UploadOut
from exif_overlay.services.entries import ImageEntry
from exif_overlay.services.export import ExportError, encode_png, export_one
from exif_overlay.services.upload_pipeline import run_upload
from exif_overlay.services.workspace import EntryNotFound, EntryNotRendered, Workspace
from exif_overlay.routers.deps import attachment_headers, get_workspace


router = APIRouter(prefix="/images", tags=["images"])


def entry_out(e: ImageEntry) -> EntryOut:
	return EntryOut(
		id=e.id,
		filename=e.filename,
		metadata=dict(e.metadata),
		width=e.surface.width if e.surface is not None else None,
		height=e.surface.height if e.surface is not None else None,
		rendered=e.surface is not None,
		error=e.error,
		preview_url=e.preview_url,
		download_url=e.download_url,
	)


def _surface_or_error(ws: Workspace, entry_id: str):
	try:
		return ws.rendered_surface(entry_id)
	except EntryNotFound:
		raise HTTPException(status_code=404, detail=f"no image with id {entry_id}")
	except EntryNotRendered as e:
		raise HTTPException(status_code=409, detail=str(e))


@router.post("", response_model=UploadOut, summary="Upload images, extract EXIF and render overlays")
async def upload(
	files: List[UploadFile] = File(default=[]),
	ws: Workspace = Depends(get_workspace),
):
	files_meta = []
	rejected = []
	for f in files:
		name = f.filename or "image.jpg"
		if not (f.content_type or "").startswith("image/"):
			rejected.append(name)
			continue
		files_meta.append({"filename": name, "data": await f.read()})
	entries = await run_upload(ws, files_meta)
	return UploadOut(entries=[entry_out(e) for e in entries], rejected=rejected)


@router.get("", response_model=List[EntryOut], summary="List uploaded images")
async def list_images(ws: Workspace = Depends(get_workspace)):
	return [entry_out(e) for e in ws.entries]


@router.delete("", status_code=204, summary="Discard all images")
async def clear_images(ws: Workspace = Depends(get_workspace)):
	ws.clear()


@router.get("/{entry_id}", response_model=EntryOut)
async def get_image(entry_id: str, ws: Workspace = Depends(get_workspace)):
	try:
		return entry_out(ws.get(entry_id))
	except EntryNotFound:
		raise HTTPException(status_code=404, detail=f"no image with id {entry_id}")


@router.delete("/{entry_id}", status_code=204, summary="Discard one image")
async def delete_image(entry_id: str, ws: Workspace = Depends(get_workspace)):
	try:
		ws.remove(entry_id)
	except EntryNotFound:
		raise HTTPException(status_code=404, detail=f"no image with id {entry_id}")


@router.get("/{entry_id}/preview", summary="Rendered image as PNG")
async def preview(entry_id: str, ws: Workspace = Depends(get_workspace)):
	surface = _surface_or_error(ws, entry_id)
	return StreamingResponse(BytesIO(encode_png(surface)), media_type="image/png")


@router.get("/{entry_id}/download", summary="Rendered image as a JPEG download")
async def download(
	entry_id: str,
	quality: Optional[int] = Query(None, ge=0, le=100),
	ws: Workspace = Depends(get_workspace),
):
	surface = _surface_or_error(ws, entry_id)
	entry = ws.get(entry_id)
	try:
		name, data = export_one(surface, entry.filename, ws.export_quality(quality))
	except ExportError as e:
		raise HTTPException(status_code=500, detail=str(e))
	headers = attachment_headers(name)
	return StreamingResponse(BytesIO(data), media_type="image/jpeg", headers=headers)
