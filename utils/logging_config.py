import logging
from pythonjsonlogger.json import JsonFormatter


SERVICE_NAME = "intelliq-backend"


class ServiceContextFilter(logging.Filter):
    def filter(self, record):
        record.service = SERVICE_NAME
        return True


def setup_logging(level: str = "INFO"):
    """Send structured JSON logs to the console through the root logger."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(lineno)d %(message)s %(service)s'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ServiceContextFilter())
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level.upper())

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging initialized at level {level.upper()}")
