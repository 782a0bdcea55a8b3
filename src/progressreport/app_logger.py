import logging

from progressreport.config.settings import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging() -> logging.Logger:
    level = getattr(logging, settings.log_level, logging.INFO)
    logger = logging.getLogger("progressreport")
    logger.setLevel(level)

    # Avoid duplicate console handlers on reload
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(level)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("progressreport")
    if not name:
        return base
    if name.startswith("progressreport."):
        name = name[len("progressreport."):]
    return base.getChild(name)
