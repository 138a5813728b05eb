"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import auth, offers
from src.config import get_settings
from src.errors import error_response, register_error_handlers
from src.services.image_upload import ImageUploadService

logger = logging.getLogger(__name__)

settings = get_settings()

CATCH_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the image host client once per process and close it on shutdown."""
    client = httpx.AsyncClient(timeout=settings.upload_timeout_seconds)
    app.state.image_uploader = ImageUploadService(settings, client)
    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(
    title="Marketplace API",
    description="Classifieds marketplace: user accounts, offer publishing and search",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/")
async def root():
    """Greeting."""
    return "Hello marketplace app"


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}


# Register routers
app.include_router(auth.router)
app.include_router(offers.publish_router)
app.include_router(offers.router)


# Must stay last: matches every path and method left over
@app.api_route("/{path:path}", methods=CATCH_ALL_METHODS, include_in_schema=False)
async def route_not_found(path: str):
    return error_response(400, "Route not found")


def run() -> None:
    """Create tables and serve the API with uvicorn."""
    from src.database import init_db

    init_db()
    logger.info(f"Marketplace API starting on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
