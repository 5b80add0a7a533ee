"""
Configuration module for the StockChart API.

Centralizes all configurable values with environment variable overrides.
"""

from .app_config import AppConfig, get_app_config, reset_app_config, read_api_key

__all__ = ['AppConfig', 'get_app_config', 'reset_app_config', 'read_api_key']
