"""FastAPI application."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import health, ws
from .bridge import ProcessLauncher, SessionBridge, TmuxBridge
from .config import Config, LoggingConfig, load_config
from .dispatcher import CommandDispatcher
from .manager import ClientRegistry
from .monitor import HealthSampler

logger = logging.getLogger(__name__)


def setup_logging(logging_config: LoggingConfig) -> None:
    """Apply the configured level to the root logger, adding a handler if none exists."""
    logging.basicConfig(format=logging_config.format)
    logging.getLogger().setLevel(logging_config.level.upper())


def create_app(
    config: Config | None = None,
    *,
    bridge: SessionBridge | None = None,
    sampler: HealthSampler | None = None,
    launcher: ProcessLauncher | None = None,
) -> FastAPI:
    """
    Build the application around a read-only config snapshot.

    bridge, sampler and launcher may be supplied to replace the real
    tmux/psutil/subprocess collaborators.
    """
    if config is None:
        config = load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(config.logging)
        logger.info(f"Managing {len(config.sessions)} session(s): {', '.join(s.name for s in config.sessions)}")
        if config.auth.enabled:
            logger.info("API key authentication enabled")
        else:
            logger.warning("API key authentication disabled; all operators may run RESTART, SHELL and CMD")

        sampler_task = asyncio.create_task(
            app.state.sampler.run(config.health.sample_interval_seconds),
            name="health-sampler",
        )
        try:
            yield
        finally:
            sampler_task.cancel()
            try:
                await sampler_task
            except asyncio.CancelledError:
                pass

    app = FastAPI(title="Console Server", lifespan=lifespan)

    launcher = launcher or ProcessLauncher()
    sampler = sampler or HealthSampler()
    bridge = bridge or TmuxBridge(config.sessions, launcher, tmux=config.bridge.tmux)

    app.state.config = config
    app.state.registry = ClientRegistry()
    app.state.sampler = sampler
    app.state.launcher = launcher
    app.state.dispatcher = CommandDispatcher(config, bridge, sampler, launcher)

    app.include_router(health.router)
    app.include_router(ws.router)
    return app


app = create_app()
