"""
Utility functions for Batch Insert.
"""
import os
import sys
import logging

from batch_insert.config import CONSOLE_LOG_FORMAT, LOGGER_NAME, VERBOSE_LOG_FORMAT


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        verbose: Log at DEBUG level with timestamps and logger names

    Returns:
        Logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Replace handlers so repeated calls don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        logging.Formatter(VERBOSE_LOG_FORMAT if verbose else CONSOLE_LOG_FORMAT)
    )
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger


def validate_csv_file(file_path: str) -> bool:
    """
    Validate a CSV file.

    Args:
        file_path: Path to the CSV file

    Returns:
        True if the file exists, is readable and not empty
    """
    logger = logging.getLogger(LOGGER_NAME)

    if not os.path.exists(file_path):
        logger.error(f"File not found: {file_path}")
        return False

    if not os.access(file_path, os.R_OK):
        logger.error(f"File is not readable: {file_path}")
        return False

    if os.path.getsize(file_path) == 0:
        logger.error(f"File is empty: {file_path}")
        return False

    if not file_path.lower().endswith('.csv'):
        logger.warning(f"File does not have .csv extension: {file_path}")

    return True
