from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from exif_overlay.config import AppConfig
from exif_overlay.routers.export import router as export_router
from exif_overlay.routers.images import router as images_router
from exif_overlay.routers.settings import router as settings_router
from exif_overlay.services.logging_service import get_logger, setup_logging
from exif_overlay.services.preferences import Preferences
from exif_overlay.services.workspace import Workspace


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
	config = config or AppConfig()
	setup_logging(config.log_level_value, config.log_dir)

	app = FastAPI(title="EXIF Overlay", version="0.1.0")
	app.state.config = config
	app.state.workspace = Workspace(Preferences(config.prefs_path))

	# CORS (adjust origins in production)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=config.cors_origins,
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
		expose_headers=["Content-Disposition", "X-Skipped-Entries"],
	)

	# Routers
	app.include_router(images_router)
	app.include_router(export_router)
	app.include_router(settings_router)

	get_logger(__name__).info(f"Preferences at {config.prefs_path}")
	return app


app = create_app()


if __name__ == "__main__":
	# Local dev server: uvicorn exif_overlay.main:app --reload
	import uvicorn

	uvicorn.run("exif_overlay.main:app", host="127.0.0.1", port=8000, reload=True)
