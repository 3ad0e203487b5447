import logging
import os

logger = logging.getLogger("notero")
trace_logger = logging.getLogger("notero.trace")

DEFAULT_LOG_LEVEL = "WARNING"

# Create a custom logging level
DETAIL = 15
logging.addLevelName(DETAIL, "DETAIL")


# Create a custom log method for the "DETAIL" level
def detail(self, message, *args, **kws):
    if self.isEnabledFor(DETAIL):
        self._log(DETAIL, message, args, **kws)


# Add the custom log method to the logging.Logger class
logging.Logger.detail = detail  # type: ignore


def get_logger() -> logging.Logger:
    """The package logger with its level taken from the `LOG_LEVEL` environment variable."""
    level_name = os.environ.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL
    logger.setLevel(getattr(logging, level_name.upper(), logging.WARNING))
    return logger
