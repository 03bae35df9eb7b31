"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- Logging
- API routes
- Middleware (logging, CORS, rate limiting)
- Startup/shutdown of database access and the blocklist cache

Run with:
    uvicorn shortener.main:app
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shortener.api import endpoints
from shortener.core.lifecycle import initialize_services, shutdown_services
from shortener.core.logging_config import setup_logging
from shortener.core.rate_limit import limiter
from shortener.core.setting import settings
from shortener.middleware.logging import add_logging_middleware

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="URL Shortener Service",
    description="Shortens URLs, redirects visitors and keeps visit statistics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health endpoints defined before router to match before catch-all route
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint for health checks."""
    return {
        "message": "URL Shortener Service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy"}


app.include_router(endpoints.router, tags=["URL Shortener"])


@app.on_event("startup")
async def startup_event():
    """Connect to the database and load the blocklist."""
    await initialize_services(app, settings)


@app.on_event("shutdown")
async def shutdown_event():
    await shutdown_services(app)
