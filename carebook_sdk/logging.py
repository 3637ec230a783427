import logging

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_ROOT = "carebook"


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the ``carebook`` namespace with a single stream handler.

    Handlers are attached once per logger, so calling this repeatedly
    from different runs never duplicates output lines.
    """
    qualified = name if name.startswith(_ROOT) else f"{_ROOT}.{name}"
    logger = logging.getLogger(qualified)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def configure_logging(level: str = "INFO") -> None:
    """
    Set up logging for an entry point.

    Module loggers (``logging.getLogger(__name__)``) go through the root
    logger; the ``carebook`` loggers keep their own handler.
    """
    level = level.upper()
    logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger().setLevel(level)
    logging.getLogger(_ROOT).setLevel(level)
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith(_ROOT) and isinstance(logger, logging.Logger):
            logger.setLevel(level)
