"""Logger configuration with file and console handlers."""

import logging
import os
from datetime import datetime
from pathlib import Path

# Create logs directory if it doesn't exist
logs_dir = Path(os.environ.get("PLANT_SUGGEST_LOG_DIR", "logs"))
logs_dir.mkdir(parents=True, exist_ok=True)

# Configure root logger
root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)

# Create formatters
file_formatter = logging.Formatter(
    '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
)
console_formatter = logging.Formatter(
    '%(levelname)-8s | %(message)s'
)

# One log file per day
current_date = datetime.now().strftime("%Y-%m-%d")
log_file = logs_dir / f"plant_suggest_{current_date}.log"
file_handler = logging.FileHandler(log_file, encoding='utf-8')
file_handler.setLevel(logging.DEBUG)
file_handler.setFormatter(file_formatter)

# Console only gets INFO and above
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(console_formatter)

root_logger.addHandler(file_handler)
root_logger.addHandler(console_handler)


def get_logger(name):
    """Get a logger with the specified name."""
    logger = logging.getLogger(name)

    if os.environ.get("DEBUG_PLANT_SUGGEST", "0") == "1":
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    return logger


# Specialized loggers for different components
def get_app_logger():
    """Get the main application logger."""
    return get_logger("app")


def get_flow_logger():
    """Get logger for the edit/identify processing flow."""
    return get_logger("flow")


def get_gemini_logger():
    """Get logger for Gemini AI operations."""
    return get_logger("gemini")


def get_file_logger():
    """Get logger for upload decoding and encoding."""
    return get_logger("file")
