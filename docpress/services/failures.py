import logging

from docpress.logging_config import FAILURE_LOGGER

_failure_logger = logging.getLogger(FAILURE_LOGGER)


def report_failure(file_name: str, message: str) -> None:
    """Record that *file_name* could not be published; processing continues."""
    _failure_logger.error(message, extra={"file_name": file_name})
