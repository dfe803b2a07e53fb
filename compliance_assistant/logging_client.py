"""
Logging client configuration.

Console output always; records are also shipped to the centralized logging
service when LOGGING_HOST is configured.
"""
import logging
import logging.handlers

from compliance_assistant.config import settings


class ServiceFilter(logging.Filter):
    """Filter that adds service attribute to log records."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record):
        if not hasattr(record, 'service'):
            record.service = self.service_name
        return True


def setup_logger(service_name: str = None) -> logging.Logger:
    """
    Setup the service logger.

    Module loggers (``logging.getLogger(__name__)``) inside the package are
    children of this logger, so configuring it once covers the whole service.
    Calling it again replaces (and closes) the handlers from the previous call.

    Args:
        service_name: Logger name, defaults to the configured SERVICE_NAME

    Returns:
        Configured logger
    """
    service_name = service_name or settings.SERVICE_NAME

    logger = logging.getLogger(service_name)
    logger.setLevel(settings.LOG_LEVEL)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Handler filters also see records propagated from child loggers
    service_filter = ServiceFilter(service_name)

    if settings.LOGGING_HOST:
        socket_handler = logging.handlers.SocketHandler(
            settings.LOGGING_HOST, settings.LOGGING_PORT
        )
        socket_handler.addFilter(service_filter)
        logger.addHandler(socket_handler)

    console_handler = logging.StreamHandler()
    console_formatter = logging.Formatter(
        '%(asctime)s - [%(service)s] - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    console_handler.addFilter(service_filter)
    logger.addHandler(console_handler)

    for name in settings.NOISY_LOGGERS.split(','):
        name = name.strip()
        if name:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logger
