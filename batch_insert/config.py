"""
Configuration settings for Batch Insert.

This module contains default settings used by the library and the CLI.
"""

# Default batching settings
DEFAULT_CHUNK_SIZE = 1000

# Database connection
DATABASE_URL_ENV = "BATCH_INSERT_DATABASE_URL"

# Default CSV settings
DEFAULT_DELIMITER = ","
DEFAULT_QUOTE_CHAR = '"'
CSV_NULL_VALUES = ["", "NULL", "null", "NA", "N/A", "None"]

# Logging
LOGGER_NAME = "batch_insert"
CONSOLE_LOG_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
