from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from exif_overlay.models import StyleSettings, ThemeIn
from exif_overlay.services.workspace import Workspace
from exif_overlay.routers.deps import get_workspace


router = APIRouter(tags=["settings"])

SETTINGS_KEYS = {f.alias for f in StyleSettings.model_fields.values()}


@router.get("/settings", summary="Current style settings")
async def get_settings(ws: Workspace = Depends(get_workspace)):
	return ws.settings.to_json_dict()


@router.put("/settings", summary="Replace style settings and re-render every image")
async def put_settings(settings: StyleSettings, ws: Workspace = Depends(get_workspace)):
	ws.update_settings(settings)
	return ws.settings.to_json_dict()


@router.patch("/settings", summary="Change some style settings and re-render every image")
async def patch_settings(changes: Dict[str, Any] = Body(...), ws: Workspace = Depends(get_workspace)):
	unknown = sorted(set(changes) - SETTINGS_KEYS)
	if unknown:
		raise HTTPException(status_code=422, detail=f"unknown settings: {', '.join(unknown)}")
	try:
		settings = ws.patch_settings(changes)
	except ValidationError as e:
		raise HTTPException(status_code=422, detail=jsonable_encoder(e.errors(include_url=False)))
	return settings.to_json_dict()


@router.get("/preferences/theme")
async def get_theme(ws: Workspace = Depends(get_workspace)):
	return {"theme": ws.preferences.load_theme()}


@router.put("/preferences/theme")
async def put_theme(body: ThemeIn, ws: Workspace = Depends(get_workspace)):
	ws.preferences.save_theme(body.theme)
	return {"theme": body.theme}
