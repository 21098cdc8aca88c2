import logging
from logging.handlers import RotatingFileHandler
import os

from .internal.logger import DBTraceFormatter
from .settings import config


DEFAULT_FILE_SIZE_BYTES = 15 << 20  # 15 MB


def configure_dbtrace_logger():
    # type: () -> None
    """Configure the ``dbtrace`` logger from the environment.

    ``DBTRACE_TRACE_DEBUG`` enables debug logs, sent to stderr or to the rotating file
    given by ``DBTRACE_TRACE_LOG_FILE``. Without it only warnings and errors go
    through the default handlers.
    """
    debug_enabled = config._debug_mode
    dbtrace_logger = logging.getLogger("dbtrace")

    if not debug_enabled:
        dbtrace_logger.setLevel(logging.WARN)
        return

    log_path = os.environ.get("DBTRACE_TRACE_LOG_FILE", None)
    max_file_bytes = int(os.environ.get("DBTRACE_TRACE_FILE_SIZE_BYTES", DEFAULT_FILE_SIZE_BYTES))
    log_format = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s:%(lineno)d] - %(message)s"
    log_formatter = DBTraceFormatter(log_format)

    dbtrace_logger.setLevel(logging.DEBUG)
    dbtrace_logger.propagate = False

    if log_path is not None:
        handler = RotatingFileHandler(filename=log_path, mode="a", maxBytes=max_file_bytes, backupCount=1)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(log_formatter)
    dbtrace_logger.addHandler(handler)
    dbtrace_logger.debug("Debug mode has been enabled with debug logs logging to %s", log_path or "stderr")
