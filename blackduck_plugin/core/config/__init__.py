"""Configuration management module for the Black Duck plugin."""

from .config_manager import ConfigManager
from .config_validator import ConfigValidator

__all__ = ['ConfigManager', 'ConfigValidator']
