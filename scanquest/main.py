"""
FastAPI main application
ScanQuest - multi-tenant QR scavenger-hunt server

Routers in scanquest/api/:
- pages.py: landing page and the guarded admin page
- auth.py: first-run setup, login, logout
- play.py: join, scan, task/score/event lookups for players
- admin.py: tenant-scoped administration
- master.py: user provisioning and cross-tenant backups (owners)

All routers access shared stores via the scanquest.state module.
"""
from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from scanquest import state
from scanquest.config import load_settings
from scanquest.errors import ScanQuestError

# Import all API routers
from scanquest.api import admin, auth, master, pages, play


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Settings are read once at import; the static mount below needs public_dir
settings = load_settings()
logging.getLogger().setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    try:
        state.configure(settings)
        logger.info(f"✅ Server started with data in {settings.data_dir} (locale {settings.locale})")
    except Exception as e:
        logger.error(f"❌ Failed to open data stores: {e}")
        raise

    yield

    logger.info("🛑 Server shutting down")


# Create FastAPI app
app = FastAPI(
    title="ScanQuest",
    description="Multi-tenant quiz and scavenger-hunt server with QR-code scanning",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== ERROR HANDLERS ====================

@app.exception_handler(ScanQuestError)
async def scanquest_error_handler(request: Request, exc: ScanQuestError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc):
    logger.info(f"⚠️ Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse({"error": "Invalid input"}, status_code=400)


# ==================== INCLUDE ROUTERS ====================

# GET /, /admin.html
app.include_router(pages.router)

# /api/auth/*, /login, /logout
app.include_router(auth.router)

# /join.html, /scan, /api/task/:id, /api/score, /api/event
app.include_router(play.router)

# /api/admin/*
app.include_router(admin.router)

# /api/master/*
app.include_router(master.router)

# Static html/css/js last, so API routes win
if os.path.isdir(settings.public_dir):
    app.mount("/", StaticFiles(directory=settings.public_dir), name="public")


# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
