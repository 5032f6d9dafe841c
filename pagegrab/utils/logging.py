import os
import logging
import sys
import json
from datetime import datetime
from typing import Dict, Any, Optional

from ..constants import LOGGER_NAME


class StructuredLogFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def __init__(self, include_timestamp: bool = True, include_level: bool = True):
        """
        Initialize the structured log formatter.

        Args:
            include_timestamp (bool): Whether to include timestamp in logs
            include_level (bool): Whether to include log level in logs
        """
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        log_data = {}

        if self.include_timestamp:
            log_data['timestamp'] = datetime.fromtimestamp(record.created).isoformat()

        if self.include_level:
            log_data['level'] = record.levelname

        log_data['logger'] = record.name
        log_data['message'] = record.getMessage()

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Context attached by log_with_context
        if hasattr(record, 'data') and isinstance(record.data, dict):
            log_data.update(record.data)

        return json.dumps(log_data, default=str)


class LoggerFactory:
    """Factory class for creating configured loggers."""

    @staticmethod
    def create_logger(name: str = LOGGER_NAME,
                      level: int = logging.INFO,
                      output_file: Optional[str] = None,
                      console_output: bool = True,
                      structured: bool = False,
                      log_dir: str = "logs") -> logging.Logger:
        """
        Create and configure a logger.

        Console output goes to stderr so that page HTML printed on stdout
        stays clean.

        Args:
            name (str): Logger name
            level (int): Logging level
            output_file (str, optional): File to write logs to
            console_output (bool): Whether to output logs to console
            structured (bool): Whether to use structured JSON logging
            log_dir (str): Directory for log files

        Returns:
            logging.Logger: Configured logger
        """
        logger = logging.getLogger(name)
        logger.setLevel(level)

        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        if structured:
            formatter = StructuredLogFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if output_file:
            os.makedirs(log_dir, exist_ok=True)

            file_path = os.path.join(log_dir, output_file)
            file_handler = logging.FileHandler(file_path)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, context: Dict[str, Any]) -> None:
    """
    Log a message with additional context data.

    Args:
        logger (logging.Logger): Logger to use
        level (int): Logging level (e.g. logging.INFO)
        msg (str): Log message
        context (dict): Additional context data
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, msg, extra={'data': context})
