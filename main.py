from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from qrlink_app.config import settings
from qrlink_app.logging_config import setup_logging
from qrlink_app.database.connection import engine, Base
from qrlink_app.cache.background import drain_pending_writes
from qrlink_app.api.v1 import links, redirect

# Import models to ensure they're registered with Base
from qrlink_app.models import ShortLink  # noqa: F401

logger = setup_logging(settings.log_level, json_format=settings.log_json)

# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let in-flight cache warm-ups finish before the loop goes away
    await drain_pending_writes()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener with QR codes built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan,
)

# The web UI is served separately and calls the API from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400), like every other input problem"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(links.router, prefix="/api")
# Catch-all /{short_code}, must stay last
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
