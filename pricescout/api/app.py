# pricescout/api/app.py

"""HTTP boundary: JSON search API in front of the SearchAggregator."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pricescout.config.settings import Settings
from pricescout.errors import InvalidRequest
from pricescout.services.health_checker import HealthChecker
from pricescout.services.search_aggregator import SearchAggregator

logger = logging.getLogger("pricescout.api")

_PLACEHOLDER_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" '
    'viewBox="0 0 {w} {h}"><rect width="100%" height="100%" '
    'fill="#e5e7eb"/><text x="50%" y="50%" font-size="10" '
    'text-anchor="middle" dominant-baseline="middle" '
    'fill="#6b7280">No image</text></svg>'
)
_MAX_PLACEHOLDER_SIDE = 1000


def _log_loop_exception(
    loop: asyncio.AbstractEventLoop, context: dict[str, Any],
) -> None:
    """Log failures of tasks nobody awaited instead of dropping them."""
    exc = context.get("exception")
    logger.error(
        "Unhandled async error: %s",
        context.get("message", "unknown"),
        exc_info=exc,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Install the loop error hook; close the browser on shutdown."""
    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
    logger.info(
        "Server running on port %d in %s mode",
        Settings.PORT,
        Settings.ENV,
    )
    try:
        yield
    finally:
        await app.state.aggregator.browser_manager.close()


def create_app(aggregator: SearchAggregator | None = None) -> FastAPI:
    """Build the FastAPI application around one aggregator."""
    app = FastAPI(
        title="pricescout API",
        description="Product search across Indian e-commerce platforms",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.aggregator = aggregator or SearchAggregator()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Settings.ALLOWED_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(
            "%s %s - %d - %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s: %s",
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Server error occurred"},
        )

    @app.get("/api/search", tags=["Search"])
    async def search_products(
        request: Request,
        query: str | None = Query(default=None),
        platforms: str | None = Query(default=None),
    ) -> JSONResponse:
        """Search the requested platforms (default: all)."""
        aggregator: SearchAggregator = request.app.state.aggregator
        try:
            records = await aggregator.search(
                query or "", aggregator.parse_platforms(platforms)
            )
        except InvalidRequest as exc:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": str(exc)},
            )
        except Exception as exc:
            logger.error("Search API error: %s", exc, exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": (
                        "An error occurred while searching for products"
                    )
                },
            )
        return JSONResponse(content=[r.to_dict() for r in records])

    @app.get("/api/health", tags=["General"])
    async def health() -> list[dict[str, Any]]:
        """Connectivity probe of every platform homepage."""
        results = await HealthChecker().check_all()
        return [asdict(r) for r in results]

    @app.get("/api/placeholder/{width}/{height}", tags=["General"])
    async def placeholder(width: int, height: int) -> Response:
        """Grey SVG used as the image of records without one."""
        w = min(max(width, 1), _MAX_PLACEHOLDER_SIDE)
        h = min(max(height, 1), _MAX_PLACEHOLDER_SIDE)
        return Response(
            content=_PLACEHOLDER_SVG.format(w=w, h=h),
            media_type="image/svg+xml",
        )

    return app


app = create_app()
