"""Entry point for the token supply API."""

import asyncio

from loguru import logger

from config.settings import settings
from src.api.server import run_api_server
from src.utils.logger import setup_logger


async def main() -> None:
    setup_logger(json_logs=settings.json_logs, level=settings.log_level)
    logger.info("Starting token supply API...")
    await run_api_server(settings)
    logger.info("Shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
