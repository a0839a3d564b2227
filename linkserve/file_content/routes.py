# linkserve/file_content/routes.py
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, Response
from starlette.responses import JSONResponse

from linkserve.config import settings
from .response import LinkAwareFileResponse
from .store import lookup

router = APIRouter(prefix="/files", tags=["files"])

@router.options("/{file_path:path}/content")
async def files_content_options(file_path: str) -> Response:
    resp = Response(status_code=204)
    resp.headers["Access-Control-Allow-Origin"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET, HEAD, OPTIONS"
    resp.headers["Access-Control-Allow-Headers"] = "Range, Accept"
    resp.headers["Access-Control-Max-Age"] = "86400"
    return resp

@router.api_route("/{file_path:path}/content", methods=["GET", "HEAD"])
async def files_content(
    request: Request,
    file_path: str,
    download: int = Query(0, ge=0, le=1, description="0=inline (default), 1=attachment"),
):
    if not settings.files_public:
        raise HTTPException(status_code=403, detail="Forbidden")

    result = await lookup(file_path)
    if result is None:
        return JSONResponse(status_code=404, content={"ok": False, "detail": "not found"})

    return LinkAwareFileResponse(
        result.path,
        range_header=request.headers.get("range"),
        headers={"Access-Control-Allow-Origin": "*"},
        media_type=result.media_type,
        filename=result.filename,
        download=bool(download),
        method=request.method,
    )

def register(app) -> None:
    """
    Attach this feature's router:
        from linkserve.file_content import register
        register(app)
    """
    app.include_router(router)
