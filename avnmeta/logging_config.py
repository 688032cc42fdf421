import logging
import os
import sys

from logging.handlers import RotatingFileHandler

DEFAULT_LOG_PATH = os.path.join(os.getcwd(), "logs", "avnmeta.log")
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", DEFAULT_LOG_PATH)
LOGGER_NAME = "AVNMeta"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(module)s - %(message)s'


class LazyRotatingFileHandler(RotatingFileHandler):
    """Rotating file handler that creates its directory on the first write."""

    def __init__(self, filename, **kwargs):
        kwargs['delay'] = True
        super().__init__(filename, **kwargs)

    def _open(self):
        os.makedirs(os.path.dirname(self.baseFilename), exist_ok=True)
        return super()._open()


def _console_handler(logger):
    for handler in logger.handlers:
        if type(handler) is logging.StreamHandler:
            return handler
    return None


def setup_logging(log_file_path=None, level=logging.INFO, stream=None):
    """
    Configures the package logger with a rotating file and a console handler.

    Console output goes to stderr so stdout stays free for command output.
    Passing `stream` points the console handler somewhere else, also on a
    logger that is already configured.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        file_handler = LazyRotatingFileHandler(
            log_file_path or LOG_FILE_PATH,
            maxBytes=5*1024*1024, # 5 MB
            backupCount=5,
            encoding='utf-8',
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    elif stream is not None:
        console_handler = _console_handler(logger)
        if console_handler is not None:
            console_handler.setStream(stream)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger

logger = setup_logging()
