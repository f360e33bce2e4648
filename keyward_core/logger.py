import logging, json, sys, time, os


def _json_formatter():
    formatter = logging.Formatter(
        fmt=json.dumps({
            "ts": "%(asctime)s",
            "level": "%(levelname)s",
            "name": "%(name)s",
            "msg": "%(message)s"
        }),
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    formatter.converter = time.gmtime  # UTC
    return formatter


def get_logger(name="keyward", level=None, to_file=None):
    """Structured JSON logger shared by all keyward components.

    ``level`` defaults to ``KEYWARD_LOG_LEVEL`` (INFO when unset). A logger
    gets exactly one stdout handler; ``to_file`` adds a file handler once per
    path, even to a logger that was already configured.
    """
    logger = logging.getLogger(name)
    if level is None:
        level = os.getenv("KEYWARD_LOG_LEVEL", "INFO").upper()
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_json_formatter())
        logger.addHandler(handler)

    if to_file:
        path = os.path.abspath(to_file)
        attached = {
            h.baseFilename for h in logger.handlers if isinstance(h, logging.FileHandler)
        }
        if path not in attached:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            file_handler = logging.FileHandler(path)
            file_handler.setFormatter(_json_formatter())
            logger.addHandler(file_handler)

    return logger
