import logging.config

FAILURE_LOGGER = "docpress.failures"


def configure_logging(error_log_file: str = "error.log", level: str = "INFO") -> None:
    """Install the JSON console handler and the per-document failure log."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
                "failure": {
                    "format": "[%(asctime)s] | File: %(file_name)s | Error: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
                "failure_file": {
                    "class": "logging.FileHandler",
                    "formatter": "failure",
                    "filename": error_log_file,
                    "encoding": "utf-8",
                    "delay": True,
                },
            },
            "loggers": {
                FAILURE_LOGGER: {
                    "level": "ERROR",
                    "handlers": ["console", "failure_file"],
                    "propagate": False,
                },
            },
            "root": {"level": level.upper(), "handlers": ["console"]},
        }
    )
