# utils.py
"""
Utility functions for the arena application.

This module provides helper functions, such as logging setup and config
loading, that are used across different parts of the application but do
not belong to the physics or the rendering code.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Side Effects: Configures the root Python logger with a console handler
#     and a rotating file handler. Creates the log directory if needed.
#     Caps chatty third-party loggers (numba, PIL) at WARNING.
#
# load_config(path: str, defaults: Optional[Dict]) -> Dict[str, Any]:
#   - Outputs: the parsed JSON with each top-level section merged over the
#     matching section of `defaults`.
#   - Raises: FileNotFoundError, json.JSONDecodeError (after logging).

NOISY_LOGGERS = ('numba', 'PIL')


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/arena.log')

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # The JIT compiler logs every compilation pass at DEBUG.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}, writing to {log_file_path}.")


def merge_sections(config: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Overlays each config section on the matching default section."""
    merged = {key: dict(value) if isinstance(value, dict) else value
              for key, value in defaults.items()}
    for key, value in config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_config(path: str, defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    logging.info("Configuration loaded successfully.")
    return merge_sections(config, defaults or {})
