import logging

from courtside.config import config


def create_logger(level: int | str) -> logging.Logger:
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    logger = logging.getLogger("courtside")
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(stream_handler)

    return logger


logger = create_logger(config.log_level.upper())
