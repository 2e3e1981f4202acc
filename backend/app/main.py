"""Main application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

# Configure logging FIRST, before any other imports
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

# Reduce noise from third-party libraries (must be set before importing them)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from app.api.routes import API_VERSION
from app.config import get_settings
from app.scanner_profile import load_scanner_profile
from app.services import MarketScanner, build_market_scanner

logger = logging.getLogger(__name__)


def create_app(scanner: MarketScanner | None = None) -> FastAPI:
    """Create the API application.

    Args:
        scanner: Pre-built scanner to serve; when omitted, one wired to the
            live market data clients is created on startup and closed on
            shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level.upper())

        owned = scanner is None
        if owned:
            profile_path = Path(settings.profile_path) if settings.profile_path else None
            app.state.scanner = build_market_scanner(
                settings, load_scanner_profile(profile_path)
            )
        else:
            app.state.scanner = scanner
        logger.info(
            "Scanner ready: universe=%d interval=%s concurrency=%d",
            app.state.scanner.universe_limit,
            app.state.scanner.candle_interval,
            app.state.scanner.max_concurrency,
        )

        yield

        logger.info("Shutting down...")
        if owned:
            await app.state.scanner.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Sniper Scanner",
        description="Ranked trade-readiness signals for top crypto assets",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


def main():
    """Run the application."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
