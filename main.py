"""
NoRaveNoLife - electronic music events, giveaways and tickets
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware
import uvicorn

from noravenolife.core.config import settings
from noravenolife.core.db import engine, Base, SessionLocal
from noravenolife.api import routes_admin, routes_auth, routes_pages, routes_public, ws
from noravenolife.services.event_service import EventService
from noravenolife.services.repositories import use_sql
from noravenolife.utils.templating import TEMPLATES_DIR, render, templates

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

STATIC_DIR = TEMPLATES_DIR.parent / "static"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(f"Using {settings.STORAGE_BACKEND} storage backend")
    if use_sql():
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")

    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            EventService.seed_events(db)
        finally:
            db.close()
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="NoRaveNoLife",
    description="Discover electronic music events, enter ticket giveaways and keep your tickets in one place",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, same_site="lax")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_auth.router, tags=["auth"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])
app.include_router(routes_pages.router, tags=["pages"])

def _wants_html(request: Request) -> bool:
    path = request.url.path
    if path.startswith(("/api/", "/admin", "/ws", "/auth/")):
        return False
    return "text/html" in request.headers.get("accept", "")

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """404 page for browsers, JSON detail for API clients"""
    if exc.status_code == 404 and _wants_html(request):
        return render(request, "not_found.html", status_code=404)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    if _wants_html(request):
        # Runs outside the session middleware, so no session-backed context
        return templates.TemplateResponse(
            request,
            "error.html",
            {"current_user": None, "flashes": []},
            status_code=500
        )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
