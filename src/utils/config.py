# ========================
# src/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the lexicon viewer with environment support.
"""

import os
from typing import Dict, Any, Optional

# Column roles are fixed by the dataset layout and are not configurable.
EXCLUDED_HEADERS = frozenset({'Proto-Toda-Truku', 'Proto-Truku'})
SORTABLE_HEADERS = frozenset({'Gloss', 'Proto-Seediq'})
GLOSS_HEADER = 'Gloss'

class Config:
    """
    Configuration class for the lexicon viewer.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Data Source
        self.DATA_SOURCE = os.getenv('LEXICON_DATA_SOURCE', 'data/data.csv')
        self.FETCH_TIMEOUT = float(os.getenv('LEXICON_FETCH_TIMEOUT', '10'))

        # Viewer Behaviour
        self.SEARCH_DEBOUNCE_MS = int(os.getenv('SEARCH_DEBOUNCE_MS', '300'))
        self.NOTIFICATION_HISTORY = int(os.getenv('NOTIFICATION_HISTORY', '50'))

        # Server Settings
        self.API_HOST = os.getenv('API_HOST', '0.0.0.0')
        self.API_PORT = int(os.getenv('API_PORT', '8000'))

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_DIR = os.getenv('LOG_DIR', 'logs')

        # Override with provided config
        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    @property
    def search_debounce_seconds(self) -> float:
        return self.SEARCH_DEBOUNCE_MS / 1000.0

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['data_source'] = bool(str(self.DATA_SOURCE).strip())
        validations['fetch_timeout'] = self.FETCH_TIMEOUT > 0
        validations['search_debounce'] = self.SEARCH_DEBOUNCE_MS >= 0
        validations['notification_history'] = self.NOTIFICATION_HISTORY > 0
        validations['api_port'] = 1000 <= self.API_PORT <= 65535

        # Validate log level
        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if attr.isupper() and not callable(getattr(self, attr))
        }

    def __str__(self) -> str:
        """String representation of configuration."""
        lines = ["Configuration Settings:"]
        config_dict = self.to_dict()
        for key, value in sorted(config_dict.items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
