import logging
from pathlib import Path
from typing import Optional

from concurrent_log_handler import ConcurrentRotatingFileHandler

from coursewatcher.config import Settings

LOGGER_NAME = "coursewatcher"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 10


class LogConfig:
    """
    Logging for the opened course.

    Everything under the `coursewatcher` logger goes to the console and to a
    rotating file in the course's own data folder, so the log travels with the course.
    """

    def __init__(self):
        self.logger = logging.getLogger(LOGGER_NAME)
        self.log_path: Optional[Path] = None

    def setup_logging(self, settings: Settings) -> logging.Logger:
        # Another course may have been opened earlier in this process
        self.close()

        settings.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = settings.log_dir / settings.log_file
        self.logger.setLevel(settings.log_level.upper())

        formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        handlers = [
            ConcurrentRotatingFileHandler(
                filename=str(self.log_path),
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUPS,
                encoding="utf-8",
                use_gzip=True
            ),
            logging.StreamHandler(),
        ]
        for handler in handlers:
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

        self.logger.debug(f"Logging to {self.log_path}")
        return self.logger

    def update_log_level(self, log_level: str):
        self.logger.setLevel(log_level.upper())
        self.logger.info(f"Log level updated to {log_level}")

    def close(self):
        """Detach and close all handlers"""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()


log_config = LogConfig()
