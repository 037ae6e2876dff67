# ========================
# src/utils/logging_setup.py
# ========================

"""
Logging Configuration

Centralized logging setup for the lexicon viewer.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

def setup_logging(log_level: str = "INFO",
                 log_file: Optional[str] = None,
                 log_dir: str = "logs") -> None:
    """
    Set up logging configuration for the viewer.

    Args:
        log_level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file (str): Optional log file name
        log_dir (str): Directory for log files
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, date_format)
    level = getattr(logging, log_level.upper())

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_path = log_path / log_file
        file_handler = logging.FileHandler(file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # File gets all messages
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        logging.info(f"Logging to file: {file_path}")

    # Quieten chatty libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)

    logging.info(f"Logging initialized - Level: {log_level}")

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name (str): Logger name

    Returns:
        logging.Logger: Configured logger
    """
    return logging.getLogger(name)
