import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bagofholding.api import decklist_router, health_router, helvault_router
from bagofholding.config import settings
from bagofholding.models.failure import KnownError, create_unknown_failure
from bagofholding.worker.client import create_helvault_client
from bagofholding.worker.rpc import WorkerRequestError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the Helvault worker on startup and terminate it on shutdown."""
    client = create_helvault_client()
    app.state.helvault_client = client
    try:
        yield
    finally:
        client.terminate()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("bagofholding"),
    lifespan=lifespan,
)

app.include_router(decklist_router)
app.include_router(health_router)
app.include_router(helvault_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Classified failures go out through the response envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


@app.exception_handler(WorkerRequestError)
async def worker_error_handler(_request: Request, exc: WorkerRequestError) -> JSONResponse:
    """Unclassified worker failures are reported without internals."""
    logger.error("Request %s failed: %r", exc.request_id, exc.cause)
    return JSONResponse(
        status_code=500,
        content=create_unknown_failure(exc.cause, request_id=exc.request_id).model_dump(
            mode="json"
        ),
    )
