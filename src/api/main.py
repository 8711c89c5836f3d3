"""
FastAPI main application.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.data.loaders import DeadlockApiError

from .config import settings
from .routes import heroes, charts, calculator, page_views

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Deadlock Numbers API",
    description="Hero growth, ability metrics and damage calculator for Deadlock",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(heroes.router, prefix="/api/heroes", tags=["Heroes"])
app.include_router(charts.router, prefix="/api/charts", tags=["Charts"])
app.include_router(calculator.router, prefix="/api/calculator", tags=["Calculator"])
app.include_router(page_views.router, prefix="/api/page-views", tags=["Page Views"])


@app.exception_handler(DeadlockApiError)
async def deadlock_api_error_handler(request: Request, exc: DeadlockApiError):
    """Upstream asset API failures surface as 502."""
    logger.error("Asset API unavailable for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.get("/")
async def root():
    """API status check."""
    return {
        "status": "ok",
        "name": "Deadlock Numbers API",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
