"""
Vision OCR to PAGE XML API - FastAPI Application

Converts uploaded images to PAGE XML using Google Cloud Vision.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.core import config, init_logger, get_logger, generate_request_id, set_request_id
from api.routes import operations_router, documents_router, clear_output_store
from api.schemas import ErrorResponse
from api.services import initialize_processor, shutdown_processor


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: initialize on startup, cleanup on shutdown."""
    logger = init_logger()

    logger.info("=" * 60)
    logger.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")
    logger.info(f"Environment: {config.ENVIRONMENT}")
    logger.info(f"Debug: {config.DEBUG}")
    logger.info(f"Log level: {config.LOG_LEVEL}")
    logger.info("=" * 60)

    await initialize_processor()
    logger.info("API ready")

    yield

    logger.info("Shutting down...")
    await shutdown_processor()
    clear_output_store()
    logger.info("Shutdown complete")


app = FastAPI(
    title=config.APP_NAME,
    description="""
## Vision OCR to PAGE XML API

Sends document images to Google Cloud Vision and returns the layout as PAGE XML.

### Endpoints
| Endpoint | Description |
|----------|-------------|
| `POST /v1/process/image` | Convert one image (mode `ocr` or `object`) |
| `GET /v1/download/{key}` | Download the generated PAGE XML |
| `GET /health` | Liveness check |
| `GET /ready` | Readiness check |
| `GET /metrics` | Prometheus metrics |
| `GET /info` | API metadata |
    """,
    version=config.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_middleware(request: Request, call_next: Callable) -> Response:
    """Add correlation ID, timing, and logging to all requests."""
    request_id = request.headers.get("X-Request-ID", generate_request_id())
    set_request_id(request_id)

    logger = get_logger("vision2page.http")
    logger.debug(f"→ {request.method} {request.url.path}", extra={"extra_data": {"client": request.client.host if request.client else "unknown"}})

    start = datetime.now(timezone.utc)
    response = await call_next(request)
    duration = (datetime.now(timezone.utc) - start).total_seconds() * 1000

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Processing-Time-Ms"] = f"{duration:.1f}"

    logger.debug(f"← {response.status_code} ({duration:.1f}ms)", extra={"extra_data": {"status": response.status_code}})

    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger = get_logger("vision2page")
    logger.exception(f"Unhandled exception: {exc}")
    body = ErrorResponse(
        error="internal_server_error",
        detail=str(exc) if config.DEBUG else "Internal error",
        request_id=request.headers.get("X-Request-ID"),
    )
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


app.include_router(operations_router)
app.include_router(documents_router)


@app.get("/", tags=["Root"])
async def root():
    """API root with navigation links."""
    return {
        "name": config.APP_NAME,
        "version": config.APP_VERSION,
        "environment": config.ENVIRONMENT,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
        "info": "/info"
    }


def run():
    import uvicorn
    uvicorn.run("server:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)


if __name__ == "__main__":
    run()
