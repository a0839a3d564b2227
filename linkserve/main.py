import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .file_content.routes import router as file_content_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI()

# CORS (tighten in prod)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "HEAD", "OPTIONS"],
    allow_headers=["Range", "Accept"],
    expose_headers=["Content-Range", "Content-Length", "Accept-Ranges"],
)

app.include_router(file_content_router)

@app.get("/healthz")
async def healthz():
    return {"ok": True, "env": settings.app_env}


def run() -> None:
    import uvicorn

    uvicorn.run("linkserve.main:app", host=settings.app_host, port=settings.app_port)
