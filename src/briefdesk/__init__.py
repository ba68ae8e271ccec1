# BriefDesk package init
import logging
import os


def _configure_logging() -> None:
    level_name = (os.getenv("BRIEFDESK_LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logger = logging.getLogger("briefdesk")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[BRIEFDESK][%(levelname)s] %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


_configure_logging()
