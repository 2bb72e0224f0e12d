# logger.py
import copy
import logging
import logging.config

from codechat.util.file_utils import from_json_or_yaml

DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console_handler": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    },
    "root": {
        "level": "INFO",
        "handlers": ["console_handler"],
    },
}


def setup_logging(
    config_file_path=None,
    log_file_path=None,
    verbose=False,
):
    """
    Loads logging config from 'config_file_path' (YAML or JSON) and sets up logging.
    Falls back to DEFAULT_LOGGING_CONFIG when no file is given.
    Optionally routes records to 'log_file_path', and sets root logger to DEBUG if 'verbose'.
    """
    if config_file_path:
        config = from_json_or_yaml(config_file_path)
    else:
        config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)

    # A custom log file path overrides the configured one, or adds a file handler.
    if log_file_path:
        handlers = config.setdefault("handlers", {})
        if "file_handler" in handlers:
            handlers["file_handler"]["filename"] = str(log_file_path)
        else:
            file_handler = {
                "class": "logging.FileHandler",
                "level": "DEBUG",
                "filename": str(log_file_path),
                "encoding": "utf-8",
            }
            if "standard" in config.get("formatters", {}):
                file_handler["formatter"] = "standard"
            handlers["file_handler"] = file_handler
            root = config.setdefault("root", {"level": "INFO", "handlers": []})
            root.setdefault("handlers", []).append("file_handler")

    logging.config.dictConfig(config)

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    return logging.getLogger(__name__)
