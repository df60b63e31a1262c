"""
Static page routes and the static asset fallback.
"""
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from homepage.config import Settings
from homepage.dependencies.database import get_app_settings
from homepage.core.exceptions import NotFoundError

router = APIRouter(tags=["Pages"], include_in_schema=False)

INDEX_DOCUMENT = "index.html"


class SiteStaticFiles(StaticFiles):
    """
    Static assets mounted last, behind every API route.

    Anything it cannot serve (other methods, hidden files, missing files)
    is reported as the JSON 404 envelope.
    """

    async def get_response(self, path: str, scope):
        if scope["method"] not in ("GET", "HEAD"):
            raise NotFoundError()
        if any(part.startswith(".") for part in path.split("/")):
            raise NotFoundError()
        return await super().get_response(path, scope)


@router.get("/")
async def index(settings: Settings = Depends(get_app_settings)):
    """Homepage entry document."""
    index_path = settings.static_dir / INDEX_DOCUMENT
    if not index_path.is_file():
        raise NotFoundError()
    return FileResponse(index_path, media_type="text/html")


@router.get("/favicon.ico")
async def favicon():
    return Response(status_code=status.HTTP_204_NO_CONTENT)
