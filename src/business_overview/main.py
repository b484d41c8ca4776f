"""Business overview service entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from business_overview import __version__
from business_overview.errors import CollaboratorUnavailableError, OverviewFetchError
from business_overview.observability import configure_logging, get_logger
from business_overview.settings import Settings

logger = get_logger(__name__)
settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    configure_logging(settings)
    logger.info(
        "business-overview starting",
        service=settings.service_name,
        analytics_enabled=settings.analytics_enabled,
        workflow_enabled=settings.workflow_enabled,
    )
    yield
    logger.info("business-overview shutting down")


app = FastAPI(title="business-overview", version=__version__, lifespan=lifespan)


@app.exception_handler(OverviewFetchError)
async def _overview_fetch_error_handler(request: Request, exc: OverviewFetchError) -> JSONResponse:
    logger.error("overview_fetch_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(CollaboratorUnavailableError)
async def _collaborator_unavailable_handler(request: Request, exc: CollaboratorUnavailableError) -> JSONResponse:
    logger.warning("collaborator_unavailable", path=request.url.path, collaborator=exc.collaborator)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(httpx.HTTPError)
async def _upstream_http_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    logger.error("upstream_http_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"detail": f"Upstream request failed: {exc}"})


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    return {"status": "ok", "service": settings.service_name}


from business_overview.api.router import router  # noqa: E402

app.include_router(router, prefix="/api/v1")
