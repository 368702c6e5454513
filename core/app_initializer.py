"""Application initialization orchestrator."""

from __future__ import annotations

import asyncio
import os
from contextlib import suppress
from typing import Optional

from aiohttp import web as aiohttp_web
from aiohttp_wsgi import WSGIHandler

from config import Config, load_config
from core.logger import get_logger
from database import close_db_pool, init_db_pool, run_migrations
from services.registry import ServiceRegistry
from utils.performance import PerformanceMonitor

logger = get_logger(__name__)


class ApplicationInitializer:
    """Orchestrates application initialization and lifecycle."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        self.db_pool = None
        self.services: Optional[ServiceRegistry] = None
        self.web_runner = None
        self.monitor = PerformanceMonitor()

    async def initialize(self) -> None:
        """Initialize all application components."""
        await self._init_database()
        self._init_services()
        await self._init_web_server()

    async def run(self) -> None:
        """Run the application until cancelled."""
        if self.config.auto_draw_enabled:
            await self.services.auto_draw.start()
            logger.info("Automatic half-slot draws enabled")
        else:
            logger.info("Automatic draws disabled; draws are manual only")

        try:
            while True:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            logger.info("Shutting down...")
        finally:
            await self.cleanup()

    async def cleanup(self) -> None:
        """Cleanup resources."""
        with suppress(Exception):
            if self.services:
                await self.services.auto_draw.stop()
        with suppress(Exception):
            if self.web_runner:
                await self.web_runner.cleanup()
        with suppress(Exception):
            await close_db_pool()

    async def _init_database(self) -> None:
        """Initialize database pool and run migrations."""
        db_dir = os.path.dirname(self.config.database_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self.db_pool = await init_db_pool(
            database_path=self.config.database_path,
            pool_size=self.config.db_pool_size,
            busy_timeout_ms=self.config.db_busy_timeout,
        )
        await run_migrations(self.db_pool)
        self.monitor.record_db_pool(self.db_pool.size)
        logger.info("✅ Database initialized")

    def _init_services(self) -> None:
        self.services = ServiceRegistry.build(self.db_pool, self.config, monitor=self.monitor)
        logger.info("✅ Services wired")

    async def _init_web_server(self) -> None:
        """Initialize web server."""
        from web.app import create_app

        flask_app = create_app(self.config, self.services)

        # Flask views block their worker thread while the loop runs the coroutine
        wsgi_handler = WSGIHandler(flask_app)

        aio_app = aiohttp_web.Application()
        aio_app.router.add_route("*", "/{path_info:.*}", wsgi_handler)

        self.web_runner = aiohttp_web.AppRunner(aio_app)
        await self.web_runner.setup()

        # Bind to PORT env var if present (Render/Heroku)
        effective_port = int(os.getenv("PORT", str(self.config.web_port)))
        effective_host = "0.0.0.0" if os.getenv("PORT") else self.config.web_host

        site = aiohttp_web.TCPSite(self.web_runner, effective_host, effective_port)
        await site.start()

        logger.info(f"🚀 Web server started on http://{effective_host}:{effective_port}")
        logger.info(f"🔗 API: http://{effective_host}:{effective_port}/api")
