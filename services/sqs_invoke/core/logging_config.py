from typing import Optional

from services.common.core.logging_config import setup_logging as common_setup_logging

from ..config import config


def setup_logging(config_path: Optional[str] = None):
    """
    Load the YAML config (LOG_CONFIG_PATH by default) and initialize logging.
    """
    common_setup_logging(config_path or config.LOG_CONFIG_PATH)
