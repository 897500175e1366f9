# src/main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from errors import ProviderNotConfigured, UpstreamUnavailable
from routes import ALL_ROUTERS
from settings import get_settings


settings = get_settings()

LOG_LEVEL = (settings.log_level or "INFO").upper()
HOST = settings.host
PORT = int(settings.port)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("main")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Starting application...")
        logger.info("History log: %s", Path(settings.history_file).resolve())
        if settings.use_mock_data:
            logger.warning("USE_MOCK_DATA is enabled: membership metrics are synthetic")
        logger.info("Application startup complete")
        yield
    finally:
        logger.info("Application shutdown complete")


app = FastAPI(
    title="SaaS Metrics Dashboard",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins or ["*"],
    allow_credentials=bool(settings.cors_allow_credentials),
    allow_methods=settings.cors_allow_methods or ["*"],
    allow_headers=settings.cors_allow_headers or ["*"],
)


@app.middleware("http")
async def disable_caching(request: Request, call_next):
    # API responses and dashboard assets are never cached.
    response = await call_next(request)
    response.headers.update(NO_CACHE_HEADERS)
    return response


@app.exception_handler(ProviderNotConfigured)
async def provider_not_configured_handler(request: Request, exc: ProviderNotConfigured):
    logger.error("%s not configured: %s", exc.source, exc)
    return JSONResponse(status_code=503, content={"error": str(exc)})


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    logger.error("%s API error: %s", exc.source, exc)
    return JSONResponse(status_code=502, content={"error": str(exc)})


for router in ALL_ROUTERS:
    app.include_router(router)
    logger.debug("Registered routes: %s", [route.path for route in router.routes])


@app.get("/health", response_class=JSONResponse)
async def health():
    """
    Lightweight health endpoint. Upstream reachability is reported by the
    individual /api endpoints.
    """
    try:
        return JSONResponse({"ok": True, "service": settings.app_name})
    except Exception as exc:
        logger.exception("Health check failed: %s", exc)
        raise HTTPException(status_code=500, detail="health check failed")


if Path(settings.static_dir).is_dir():
    # Registered last so /api and /health take precedence over the dashboard files.
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
else:

    @app.get("/", response_class=JSONResponse)
    async def root():
        return JSONResponse({"ok": True, "service": settings.app_name})


if __name__ == "__main__":
    logger.info("Dashboard running on %s:%d", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
