"""tokenlens - Main application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tokenlens.api.middleware.request_context import RequestContextMiddleware
from tokenlens.api.routes import health, tokens
from tokenlens.config import get_settings
from tokenlens.config.logging import configure_logging, get_logger
from tokenlens.core.exceptions import ValidationError
from tokenlens.services.ave.service import AveMarketService

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle.

    On startup: Configure logging and build the market service.
    On shutdown: Close the upstream HTTP client.
    """
    configure_logging()
    settings = get_settings()

    app.state.market_service = AveMarketService.from_settings(settings)
    if not settings.upstream_configured:
        log.warning("startup_api_key_missing", hint="set AVE_API_KEY")
    log.info("startup_complete", base_url=settings.ave_base_url)

    yield

    await app.state.market_service.close()
    log.info("shutdown_complete")


async def validation_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Answer missing or malformed caller input with 400."""
    return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="Token market data proxy for Ave.ai",
        version=settings.app_version,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    application.add_middleware(RequestContextMiddleware)
    application.add_exception_handler(ValidationError, validation_error_handler)

    # Register API routes
    application.include_router(health.router, prefix="/api")
    application.include_router(tokens.router, prefix="/api")

    return application


# Create the app instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "tokenlens.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
