"""
Application Configuration
Centralized configuration for the StockChart API and chart view.

All values can be overridden via environment variables with the STOCKCHART_ prefix.
Example: STOCKCHART_HTTP_TIMEOUT_SECONDS=10 overrides http_timeout_seconds

The Alpha Vantage API key is not part of this object. It is read per request
with read_api_key() and handed to the quote proxy as an explicit argument.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

API_KEY_ENV = "ALPHA_VANTAGE_API_KEY"


def _get_env_str(key: str, default: str) -> str:
    """Get string from environment variable with fallback to default."""
    env_key = f"STOCKCHART_{key.upper()}"
    value = os.getenv(env_key)
    if value is not None and value.strip():
        logger.info(f"Config override: {key} = {value} (from {env_key})")
        return value.strip()
    return default


def _get_env_float(key: str, default: float) -> float:
    """Get float from environment variable with fallback to default."""
    env_key = f"STOCKCHART_{key.upper()}"
    value = os.getenv(env_key)
    if value is not None:
        try:
            result = float(value)
            logger.info(f"Config override: {key} = {result} (from {env_key})")
            return result
        except ValueError:
            logger.warning(f"Invalid float for {env_key}: {value}, using default {default}")
    return default


def _get_env_list(key: str, default: List[str]) -> List[str]:
    """Get comma-separated list from environment variable, appended to default."""
    env_key = f"STOCKCHART_{key.upper()}"
    value = os.getenv(env_key, "")
    extra = [item.strip() for item in value.split(",") if item.strip()]
    if extra:
        logger.info(f"Config override: {key} += {extra} (from {env_key})")
    return list(default) + extra


def read_api_key() -> Optional[str]:
    """Read the Alpha Vantage API key from the environment; None when unset or blank."""
    value = os.getenv(API_KEY_ENV, "").strip()
    return value or None


@dataclass
class AppConfig:
    """
    Centralized application configuration.

    Values can be overridden via environment variables with STOCKCHART_ prefix.
    """

    # ===== Upstream Settings =====
    # Alpha Vantage query endpoint
    alpha_vantage_base_url: str = field(
        default_factory=lambda: _get_env_str('alpha_vantage_base_url', "https://www.alphavantage.co/query"))

    # HTTP request timeout in seconds (upstream call and chart view fetch)
    http_timeout_seconds: float = field(default_factory=lambda: _get_env_float('http_timeout_seconds', 30.0))

    # ===== Server Settings =====
    # CORS origins allowed to call the proxy
    allowed_origins: List[str] = field(default_factory=lambda: _get_env_list('allowed_origins', [
        "http://localhost:5173",
        "http://localhost:3000",
    ]))

    # "console" or "json"; STOCKCHART_LOG_FORMAT wins over plain LOG_FORMAT
    log_format: str = field(default_factory=lambda: _get_env_str('log_format', os.getenv("LOG_FORMAT") or "console").lower())

    # ===== Chart View Settings =====
    # Base URL of the quote proxy used by the chart view
    proxy_base_url: str = field(default_factory=lambda: _get_env_str('proxy_base_url', "http://localhost:8000"))

    def __post_init__(self):
        """Validate configuration values."""
        self._validate()

    def _validate(self):
        """Validate that all values are within reasonable ranges."""
        errors = []

        if self.http_timeout_seconds <= 0:
            errors.append(f"http_timeout_seconds must be positive, got {self.http_timeout_seconds}")

        if self.log_format not in ("console", "json"):
            errors.append(f"log_format must be 'console' or 'json', got {self.log_format}")

        for name in ("alpha_vantage_base_url", "proxy_base_url"):
            url = getattr(self, name)
            if not url.startswith(("http://", "https://")):
                errors.append(f"{name} must be an http(s) URL, got {url}")

        if errors:
            for error in errors:
                logger.error(f"Config validation error: {error}")
            raise ValueError(f"Invalid app configuration: {'; '.join(errors)}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            'alpha_vantage_base_url': self.alpha_vantage_base_url,
            'http_timeout_seconds': self.http_timeout_seconds,
            'allowed_origins': self.allowed_origins,
            'log_format': self.log_format,
            'proxy_base_url': self.proxy_base_url,
        }


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_app_config() -> AppConfig:
    """Get the singleton AppConfig instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig()
        logger.info(f"Initialized AppConfig: {_config_instance.to_dict()}")
    return _config_instance


def reset_app_config():
    """Reset config instance (useful for testing)."""
    global _config_instance
    _config_instance = None
