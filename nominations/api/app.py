"""FastAPI application factory for the nominations API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nominations import __version__
from nominations.api.registry import SessionRegistry
from nominations.clients.feedback import FeedbackClient
from nominations.clients.trades import TradeDirectoryClient
from nominations.config import NominationsConfig, get_config
from nominations.session import Submitter

logger = logging.getLogger("nominations.api")


def create_app(
    config: NominationsConfig | None = None,
    trade_client: TradeDirectoryClient | None = None,
    feedback_client: FeedbackClient | None = None,
    submitter: Submitter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    All dependencies are injectable for testing. When called with no
    arguments, clients are built from the environment configuration.

    Args:
        config: Injected configuration (uses the global config if None).
        trade_client: Injected trade-directory client.
        feedback_client: Injected feedback client.
        submitter: Injected submission backend (logs only if None).

    Returns:
        Configured FastAPI instance.
    """
    config = config or get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    trade_client = trade_client or TradeDirectoryClient(config.trades)
    feedback_client = feedback_client or FeedbackClient(config.feedback)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan -- close sessions and clients on exit."""
        logger.info("Nominations API v%s starting", __version__)
        if not feedback_client.is_remote:
            logger.warning("FEEDBACK_API_URL not set, justification feedback uses the local heuristic")
        yield
        logger.info("Shutting down nominations API")
        await app.state.registry.close_all()
        await trade_client.close()
        await feedback_client.close()

    app = FastAPI(
        title="Nominations API",
        description="Session backend for the multi-step award nomination form.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Shared state ──────────────────────────────────────────────────
    app.state.config = config
    app.state.registry = SessionRegistry(trade_client, feedback_client, config, submitter=submitter)

    # ── CORS ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────
    from nominations.api.routes.health import router as health_router
    from nominations.api.routes.sessions import router as sessions_router
    from nominations.api.routes.nominee import router as nominee_router
    from nominations.api.routes.justification import router as justification_router
    from nominations.api.routes.media import router as media_router

    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(nominee_router)
    app.include_router(justification_router)
    app.include_router(media_router)

    return app
