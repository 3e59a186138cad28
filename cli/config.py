"""Configuration management for the chunk uploader."""

import os
from pathlib import Path
from typing import Mapping, Optional

import httpx
from dotenv import find_dotenv, load_dotenv

from common.constants import BUFFER_SIZE_BYTES
from common.exceptions import ConfigurationError


class Config:
    """Holds the webhook endpoint and upload tuning read once at startup."""

    DEFAULT_CONFIG = {
        "buffer_size": BUFFER_SIZE_BYTES,
        "timeout": None,
        "max_retries": None,
        "max_wait": None,
    }

    ENV_KEYS = {
        "buffer_size": "UPLOAD_BUFFER_SIZE",
        "timeout": "UPLOAD_TIMEOUT",
        "max_retries": "UPLOAD_MAX_RETRIES",
        "max_wait": "UPLOAD_MAX_WAIT",
    }

    def __init__(self, webhook_url: str, data: Optional[dict] = None):
        """
        Initialize configuration.

        Args:
            webhook_url: Destination endpoint for every chunk upload
            data: Optional overrides for DEFAULT_CONFIG keys

        Raises:
            ConfigurationError: If the URL or an override is invalid
        """
        self.webhook_url = self._validate_url(webhook_url)
        self.data = self.DEFAULT_CONFIG.copy()
        if data:
            self.data.update(data)
        self._validate()

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> "Config":
        """
        Build configuration from the process environment.

        A local .env file is loaded first; a missing file is ignored and
        variables already set in the environment take precedence.

        Args:
            env_file: Explicit .env path (defaults to the nearest .env from the working directory)
            environ: Mapping to read instead of os.environ

        Returns:
            Config instance

        Raises:
            ConfigurationError: If WEBHOOK_URL is missing or a value is malformed
        """
        if environ is None:
            load_dotenv(dotenv_path=env_file if env_file is not None else find_dotenv(usecwd=True))
            environ = os.environ

        webhook_url = environ.get("WEBHOOK_URL")
        if not webhook_url:
            raise ConfigurationError("WEBHOOK_URL not set")

        data = {}
        for key, env_name in cls.ENV_KEYS.items():
            raw = environ.get(env_name)
            if raw is None or raw.strip() == "":
                continue
            data[key] = cls._parse_number(env_name, raw, float if key in ("timeout", "max_wait") else int)

        return cls(webhook_url, data)

    @staticmethod
    def _parse_number(env_name: str, raw: str, kind: type):
        """
        Parse a numeric environment value.

        Args:
            env_name: Variable name (for the error message)
            raw: Raw string value
            kind: int or float

        Returns:
            Parsed number

        Raises:
            ConfigurationError: If the value is not a number of that kind
        """
        try:
            return kind(raw.strip())
        except ValueError:
            raise ConfigurationError(f"{env_name} must be a number, got {raw!r}") from None

    @staticmethod
    def _validate_url(webhook_url: str) -> str:
        """
        Check that the webhook URL is an absolute http(s) URL.

        Args:
            webhook_url: Raw URL string

        Returns:
            Normalized URL string

        Raises:
            ConfigurationError: If the URL is malformed or not http(s)
        """
        try:
            url = httpx.URL(webhook_url.strip())
        except (httpx.InvalidURL, TypeError) as e:
            raise ConfigurationError(f"WEBHOOK_URL is not a valid URL: {e}") from None
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError("WEBHOOK_URL must be an absolute http(s) URL")
        return str(url)

    def _validate(self) -> None:
        if self.data["buffer_size"] <= 0:
            raise ConfigurationError("buffer_size must be positive")
        if self.data["timeout"] is not None and self.data["timeout"] <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.data["max_wait"] is not None and self.data["max_wait"] < 0:
            raise ConfigurationError("max_wait must not be negative")
        if self.data["max_retries"] is not None and self.data["max_retries"] < 0:
            raise ConfigurationError("max_retries must not be negative")

    def get_webhook_url(self) -> str:
        """
        Get the webhook endpoint.

        Returns:
            Absolute URL string
        """
        return self.webhook_url

    def get_buffer_size(self) -> int:
        """
        Get chunk size in bytes.

        Returns:
            Buffer size (24 MiB unless overridden)
        """
        return self.data["buffer_size"]

    def get_timeout(self) -> Optional[float]:
        """
        Get explicit request timeout in seconds.

        Returns:
            Timeout value, or None to size the timeout from each chunk
        """
        return self.data["timeout"]

    def get_retry_config(self) -> dict:
        """
        Get rate-limit retry ceilings.

        Returns:
            Dictionary with 'max_retries' and 'max_wait'; None means unbounded
        """
        return {
            "max_retries": self.data["max_retries"],
            "max_wait": self.data["max_wait"],
        }
