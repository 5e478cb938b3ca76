import logging
import os
from pathlib import Path


def get_logger(name: str, level=None) -> logging.Logger:
    """Get a named logger with the gateway's standard formatting.

    Example:
        logger = get_logger(__name__)
        logger.info("publishing to %s", topic)

    The level defaults to ``KAFKAGATE_LOG_LEVEL`` (INFO when unset). Records are
    also written to ``<KAFKAGATE_LOG_DIR>/<name>.log``; an empty
    ``KAFKAGATE_LOG_DIR`` keeps logging on the stream handler only.

    Returns:
        logging.Logger: Configured logger instance.
    """
    if level is None:
        level = logging.getLevelName(os.environ.get("KAFKAGATE_LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger = logging.getLogger(name)

    # avoid adding duplicate handlers if called repeatedly (common in tests)
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logs_dir = None
    log_dir_setting = os.environ.get("KAFKAGATE_LOG_DIR", "log")
    if log_dir_setting:
        logs_dir = Path(log_dir_setting)
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            # read-only filesystem: stream only
            logs_dir = None

    formatter = logging.Formatter(
        '%(asctime)s     || %(name)s \n%(levelname)s   || %(message)s \n',
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    if logs_dir is not None:
        filehandler = logging.FileHandler(str(logs_dir / f"{name}.log"), encoding="utf-8")
        filehandler.setFormatter(formatter)
        logger.addHandler(filehandler)

    logger.setLevel(level)
    # stop passing records to the root logger (avoid duplicated messages)
    logger.propagate = False

    logger.debug("'%s' initialized with level %s", name, logging.getLevelName(level))
    return logger
