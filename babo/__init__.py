# babo/__init__.py
import logging

__version__ = "0.0.1"

logger = logging.getLogger("babo")


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a stream handler to the package logger (for scripts and demos)."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(level)
