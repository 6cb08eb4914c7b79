"""
Development environment configuration overrides
"""

from dataclasses import dataclass
from config.app_config import AppConfig


@dataclass
class DevelopmentConfig(AppConfig):
    """Development environment configuration"""

    def __post_init__(self):

        # Development-specific overrides
        self.environment = "development"
        self.debug = True

        # More verbose logging in development
        self.logging.level = "DEBUG"
        self.logging.log_file = "logs/dev-app.log"

        self.ui.app_title = "Data Structures Assistant (DEV)"

        # Auto-reload the API server on code changes
        self.server.reload = True


def get_development_config() -> DevelopmentConfig:
    """Get development-specific configuration"""
    return DevelopmentConfig()
