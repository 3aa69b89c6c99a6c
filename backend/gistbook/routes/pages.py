"""
Gistbook Backend - Browser Page
===============================

What:  Serves the single-page UI at `/`. Its script and stylesheet are
       mounted under `/static` by the app factory.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["Pages"])


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")
