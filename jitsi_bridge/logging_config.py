import sys

from loguru import logger

from jitsi_bridge.constants import LOG_LEVEL, SERIALIZE_LOG_OUTPUT


def setup_logging(level: str = LOG_LEVEL, serialize: bool = SERIALIZE_LOG_OUTPUT) -> None:
    """Replace loguru's default sink with one honouring the env settings."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        serialize=serialize,
        backtrace=False,
        diagnose=False,
    )
    logger.debug(f"Logging configured: level={level} serialize={serialize}")
