"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from email.utils import formatdate
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.errors import register_error_handlers
from api.routes import frame, payments, render, transformations, users
from db import init_db
from settings import settings, validate_environment

logger = logging.getLogger(__name__)

# Create app
app = FastAPI(
    title="LetterCraft API",
    description="API for styling text into per-letter images, frames and widgets",
    version="0.1.0",
)

# The widget and frames are loaded from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Mount static files for media
media_path = Path(settings.MEDIA_ROOT)
media_path.mkdir(parents=True, exist_ok=True)
app.mount("/media", StaticFiles(directory=str(media_path)), name="media")

# Include routers
app.include_router(transformations.router, prefix="/api/transformations", tags=["transformations"])
app.include_router(render.router, prefix="/api", tags=["render"])
app.include_router(render.widget_router, tags=["widget"])
app.include_router(frame.router, prefix="/api/frame", tags=["frame"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])


@app.middleware("http")
async def media_cache_middleware(request: Request, call_next):
    """Add caching headers for media static responses and light ETag/Last-Modified.

    Rendered images are written once under a fresh id, so they can be cached
    as immutable.
    """
    response = await call_next(request)
    path = request.url.path
    if path.startswith("/media/") and response.status_code == 200:
        file_path = media_path.joinpath(path[len("/media/"):])
        try:
            stat = file_path.stat()
        except OSError:
            return response
        # Cache for one week
        response.headers["Cache-Control"] = "public, max-age=604800, immutable"
        response.headers.setdefault("Last-Modified", formatdate(stat.st_mtime, usegmt=True))
        # ETag (weak) based on mtime and size
        response.headers.setdefault("ETag", f'W/"{stat.st_mtime:.0f}-{stat.st_size}"')
    return response


@app.on_event("startup")
def startup_event():
    """Initialize database tables on startup."""
    problems = validate_environment()
    for problem in problems:
        logger.warning("[startup] %s", problem)
    init_db()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "LetterCraft API"}


@app.get("/health")
async def health():
    """Health check endpoint, including configuration problems."""
    problems = validate_environment()
    return {"status": "healthy" if not problems else "degraded", "problems": problems}
