import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(
    *,
    json_logs: bool = False,
    level: str = "INFO",
    log_dir: str | None = "logs",
) -> None:
    """Configure loguru sinks.

    The LOG_LEVEL env var wins over ``level`` for the console sink.
    With ``log_dir`` set, a DEBUG file sink keeps every fallback the
    resolver and estimator took; the CLI passes ``None`` to stay
    console-only (stderr, so stdout carries just the report).
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    stream = sys.stdout if log_dir else sys.stderr
    if json_logs:
        logger.add(stream, serialize=True, level=console_level)
    else:
        logger.add(stream, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    if log_dir:
        logger.add(
            os.path.join(log_dir, "supply_api_{time:YYYY-MM-DD}.log"),
            rotation="20 MB",
            retention="7 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
