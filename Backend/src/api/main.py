"""Main FastAPI application for the Deepfake Upload Relay API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from api.errors import NoFileError
from api.routers import user_data
from api.services.service_registry import ServiceRegistry

# Setup logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - [%(levelname)s] - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build collaborators at startup, close them at shutdown."""
    logger.info("Starting upload relay services...")
    await ServiceRegistry.load_all()
    yield
    logger.info("Shutting down services...")
    await ServiceRegistry.unload_all()


app = FastAPI(
    title="Deepfake Upload Relay API",
    description=(
        "Accepts user-uploaded videos and images, normalizes them, forwards them "
        "to deepfake detection services, archives them to cloud storage, and "
        "records the verdict against the uploading user."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Include Routers ────────────────────────────────────────────────────
app.include_router(user_data.router, prefix="/user/data", tags=["User Data"])


@app.exception_handler(RequestValidationError)
async def upload_field_handler(request: Request, exc: RequestValidationError):
    """A `file` form field that is not a file is the same as no file."""
    if any(tuple(err.get("loc", ()))[:2] == ("body", "file") for err in exc.errors()):
        error = NoFileError()
        return JSONResponse(status_code=error.status_code, content={"detail": error.message})
    return await request_validation_exception_handler(request, exc)


# ── Health Check ────────────────────────────────────────────────────────
@app.get("/health", tags=["Health"], summary="Service health check")
async def health():
    """
    Check API health and registered services.

    Returns:
        - status: "ok" if running
        - services: collaborators built at startup
    """
    return {
        "status": "ok",
        "services": ServiceRegistry.loaded_services(),
    }


# ── API Info ────────────────────────────────────────────────────────────
@app.get("/", tags=["Info"], summary="API information")
async def root():
    """Get API metadata."""
    return {
        "name": "Deepfake Upload Relay API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "upload":     "/user/data/upload",
            "list_files": "/user/data/",
            "profile":    "/user/data/profile",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=True,
        log_level="info",
    )
