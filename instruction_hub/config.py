#!/usr/bin/env python3

import os
from pathlib import Path

import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("instruction_hub")

_env_level = os.environ.get('INSTRUCTION_HUB_LOG_LEVEL')
if _env_level:
    try:
        logger.setLevel(_env_level.upper())
    except ValueError:
        logger.warning(f"Ignoring invalid INSTRUCTION_HUB_LOG_LEVEL: {_env_level}")

CONFIG_DIR_NAME = '.instruction-hub'
CONFIG_FILE_NAME = 'config.json'

INSTRUCTIONS_DIR = Path('.github') / 'instructions'
MANIFEST_FILE_NAME = '.instruction-hub.json'

DEFAULT_HTTP_TIMEOUT = 30.0


def get_config_dir() -> Path:
    """Directory holding the global configuration (~/.instruction-hub)."""
    return Path.home() / CONFIG_DIR_NAME


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Checks in order:
    1. INSTRUCTION_HUB_CONFIG environment variable
    2. ~/.instruction-hub/config.json
    """
    if os.environ.get('INSTRUCTION_HUB_CONFIG'):
        return Path(os.environ['INSTRUCTION_HUB_CONFIG']).expanduser()

    return get_config_dir() / CONFIG_FILE_NAME


def get_default_config():
    """Get default configuration."""
    return {
        "repos": []
    }


def get_instructions_dir(project_dir=None) -> Path:
    """Directory instructions are installed into for a project."""
    return Path(project_dir or Path.cwd()) / INSTRUCTIONS_DIR


def get_manifest_path(project_dir=None) -> Path:
    """Path to the installation manifest for a project."""
    return get_instructions_dir(project_dir) / MANIFEST_FILE_NAME


def get_http_timeout() -> float:
    """
    HTTP timeout in seconds for GitHub requests.

    INSTRUCTION_HUB_HTTP_TIMEOUT overrides the default; invalid values
    are ignored.
    """
    value = os.environ.get('INSTRUCTION_HUB_HTTP_TIMEOUT')
    if value:
        try:
            return float(value)
        except ValueError:
            logger.warning(f"Ignoring invalid INSTRUCTION_HUB_HTTP_TIMEOUT: {value}")
    return DEFAULT_HTTP_TIMEOUT
