"""
svg2png Main Application
========================

FastAPI entry point for the SVG to PNG conversion service.

Endpoints:
    GET  /                   - Service information
    GET  /health             - Liveness probe
    POST /svg-to-png         - Convert SVG body to PNG (optional ?dpi=)
    POST /remove-background  - Flood-fill the PNG background to transparent

Conversions are CPU-bound and run in the threadpool, so concurrent
requests are processed in parallel without blocking the event loop.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from svg2png.background import BackgroundRemover
from svg2png.config import settings
from svg2png.errors import ConversionError, ServerFault
from svg2png.pipeline import SvgConverter
from svg2png.resolution import BASELINE_DPI


logger = logging.getLogger(__name__)


PNG_CONTENT_TYPE = "image/png"


# =============================================================================
# Global State
# =============================================================================

_converter: Optional[SvgConverter] = None
_background_remover: Optional[BackgroundRemover] = None
_startup_time: float = 0.0


def get_converter() -> Optional[SvgConverter]:
    return _converter

def get_background_remover() -> Optional[BackgroundRemover]:
    return _background_remover


# =============================================================================
# Collaborator Factories
# =============================================================================

def create_svg_backend():
    """
    Create the SVG parser/rasterizer backend.

    Imported here so the native cairo library is only loaded at startup.
    """
    from svg2png.render.cairo_backend import CairoSvgBackend

    return CairoSvgBackend(
        font_family=settings.conversion.font_family,
        unsafe=settings.conversion.unsafe,
    )


def create_converter() -> SvgConverter:
    """Create the conversion pipeline from settings."""
    backend = create_svg_backend()
    return SvgConverter(
        parser=backend,
        rasterizer=backend,
        max_canvas_pixels=settings.conversion.max_canvas_pixels,
        compression_level=settings.conversion.compression_level,
    )


def create_background_remover() -> BackgroundRemover:
    """Create the ImageMagick background remover from settings."""
    return BackgroundRemover(
        binary=settings.background.binary,
        fuzz_percent=settings.background.fuzz_percent,
        timeout_seconds=settings.background.timeout_seconds,
    )


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _converter, _background_remover, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.service.name} v{settings.service.version}")

    _converter = create_converter()
    _background_remover = create_background_remover()

    logger.info(
        f"Server ready on {settings.server.host}:{settings.server.port}"
    )

    yield

    logger.info("Shutting down...")
    _converter = None
    _background_remover = None
    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="svg2png",
    description="Converts SVG images to PNG with adjustable DPI",
    version=settings.service.version,
    lifespan=lifespan,
)


@app.exception_handler(ConversionError)
async def conversion_error_handler(request: Request, exc: ConversionError) -> JSONResponse:
    """Map classified conversion errors to HTTP responses."""
    if isinstance(exc, ServerFault):
        logger.error(
            f"{type(exc).__name__} on {request.url.path}: {exc.message}",
            exc_info=exc,
        )
    else:
        logger.warning(f"Rejected request to {request.url.path}: {exc.message}")

    return JSONResponse(
        {"error": exc.public_message},
        status_code=exc.status_code,
    )


def _not_ready() -> JSONResponse:
    return JSONResponse({"error": "Service not ready"}, status_code=503)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": settings.service.name,
        "version": settings.service.version,
        "status": "running",
        "baseline_dpi": BASELINE_DPI,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.post("/svg-to-png")
async def svg_to_png(request: Request) -> Response:
    """
    Convert the SVG request body to PNG.

    The optional ``dpi`` query parameter sets the output resolution;
    missing, invalid or non-positive values fall back to 96 DPI. The
    PNG carries a pHYs chunk describing the requested DPI.

    Returns:
        200 image/png on success
        400 for empty bodies, invalid SVG, or zero-sized results
        500 for rendering or encoding failures
    """
    converter = get_converter()
    if converter is None:
        return _not_ready()

    query = request.url.query
    logger.debug(f"Processing svg_to_png request: query={query!r}")

    body = await request.body()
    result = await run_in_threadpool(converter.convert, body, query)

    logger.info(
        f"Converted SVG: {result.plan.canvas} at {result.plan.dpi:g} DPI, "
        f"{len(result.png)} bytes"
    )
    return Response(content=result.png, media_type=PNG_CONTENT_TYPE)


@app.post("/remove-background")
async def remove_background(request: Request) -> Response:
    """
    Make the PNG background transparent.

    The region connected to the top-left pixel, within the configured
    colour tolerance, is flood-filled with transparency.
    """
    remover = get_background_remover()
    if remover is None:
        return _not_ready()

    body = await request.body()
    png = await run_in_threadpool(remover.remove, body)

    logger.info(f"Removed background: {len(body)} -> {len(png)} bytes")
    return Response(content=png, media_type=PNG_CONTENT_TYPE)


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "svg2png.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )
