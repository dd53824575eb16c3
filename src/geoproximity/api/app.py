# src/geoproximity/api/app.py
"""
FastAPI application wiring.

Creates the `FastAPI` instance and serves the web page. The page runs browser
geolocation and posts the outcome to `/api/proximity`; logic lives in
`geoproximity.api.routes` and `geoproximity.service`.
"""

from __future__ import annotations

import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.middleware.cors import CORSMiddleware

from geoproximity.config.settings import get_settings
from geoproximity.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="GeoProximity API", version="0.1.0")

# Configure via env: GEOPROXIMITY_CORS_ORIGINS="http://localhost:8003,http://127.0.0.1:8003"
cors_origins = [s.strip() for s in os.getenv("GEOPROXIMITY_CORS_ORIGINS", "").split(",") if s.strip()]
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(router)

BASE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = BASE_DIR / "web" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@app.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    """Serve the geolocation page."""
    settings = get_settings()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_name": settings.app.name,
            "reference": settings.proximity.reference,
            "position_options": settings.position_options,
        },
    )
