import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger.

    Args:
        level (str | int): Logging level name or number.

    Notes:
        1. Uses `logging.basicConfig`, so an already configured root logger
           (pytest, uvicorn) is left alone.
        2. Level names are accepted in any case.

    """
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
