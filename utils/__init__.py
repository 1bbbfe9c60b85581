"""
utils/
------
Logging and configuration helpers shared by every layer.

    from utils import get_logger, load_app_config, Preferences
"""

from utils.logger        import get_logger
from utils.config_loader import (
    AppConfig,
    Preferences,
    load_app_config,
    load_config,
)

__all__ = [
    "get_logger",
    "AppConfig",
    "Preferences",
    "load_app_config",
    "load_config",
]
