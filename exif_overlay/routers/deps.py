from __future__ import annotations

from typing import Dict
from urllib.parse import quote

from fastapi import Request

from exif_overlay.services.workspace import Workspace


def get_workspace(request: Request) -> Workspace:
	return request.app.state.workspace


def attachment_headers(filename: str) -> Dict[str, str]:
	return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
