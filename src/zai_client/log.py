import logging
from typing import Optional

from .config import Config, get_config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger("zai-client")


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT
    )


def debug_log(message: str, *args, config: Optional[Config] = None) -> None:
    """Log a diagnostic line when ``debug_logging`` is on.

    The flag is read from ``config`` when given, else from the process config.
    """
    if (config or get_config()).debug_logging:
        logger.debug(message, *args)
