import sys
import logging
from typing import Any

from loguru import logger

from goalwatch.config.settings import settings

SENSITIVE_KEYS = ["key", "token", "password", "secret", "cookie"]


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "****" + value[-4:]
    return "********"


def sensitive_data_filter(record: dict[str, Any]) -> bool:
    """Filter function to mask sensitive data in log records."""

    def mask_value(value: Any) -> Any:
        if isinstance(value, dict):
            masked = {}
            for k, v in value.items():
                if isinstance(v, str) and any(sk in str(k).lower() for sk in SENSITIVE_KEYS):
                    masked[k] = _mask(v)
                else:
                    masked[k] = mask_value(v)
            return masked
        elif isinstance(value, list):
            return [mask_value(item) for item in value]
        return value

    # Apply masking to the 'extra' dictionary
    if "extra" in record and isinstance(record["extra"], dict):
        record["extra"].update(mask_value(record["extra"]))

    # The public test key is not a secret; a personal key ends up in request URLs
    if not settings.uses_public_sportsdb_key:
        api_key = settings.sportsdb_api_key
        if api_key and api_key in record["message"]:
            record["message"] = record["message"].replace(api_key, "********")

    return True  # Keep the record after filtering/masking


class InterceptHandler(logging.Handler):
    """Routes standard logging records (uvicorn, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging() -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    # Basic console logging
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=sensitive_data_filter,
    )

    logger.info(f"Logging initialized with level: {settings.log_level}")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # uvicorn installs its own handlers; send them through loguru as well
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
    logger.info("Standard logging intercepted.")
