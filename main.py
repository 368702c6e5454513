"""Application entry point."""

from __future__ import annotations

import asyncio
import os

from config import load_config
from core import setup_logger, ApplicationInitializer
from services import set_main_loop


async def main() -> None:
    """Main application entry point."""
    config = load_config()

    # Set event loop for the Flask request threads
    loop = asyncio.get_running_loop()
    set_main_loop(loop)

    app = ApplicationInitializer(config)
    await app.initialize()
    await app.run()


if __name__ == "__main__":
    logger = setup_logger(
        level=os.getenv("LOG_LEVEL", "INFO"),
        log_file="logs/app.log",
        colored=True,
    )
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
