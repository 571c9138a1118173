"""
Credential providers.

The session only needs to know whether an API key is present. Where the key
comes from (config file, .env, environment, a UI prompt) is decided once at
startup by choosing a provider.
"""

from typing import Optional

from .config import AppConfig


class CredentialProvider:
    """Supplies the API key for the active LLM provider."""

    def get_api_key(self) -> Optional[str]:
        raise NotImplementedError

    @property
    def has_key(self) -> bool:
        return bool(self.get_api_key())


class StaticCredentialProvider(CredentialProvider):
    """Key supplied directly, e.g. typed into the CLI or a settings form."""

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = (api_key or "").strip() or None

    def get_api_key(self) -> Optional[str]:
        return self._api_key


class ConfigCredentialProvider(CredentialProvider):
    """Reads the key of the configured provider from a loaded AppConfig."""

    def __init__(self, config: AppConfig):
        self._config = config

    def get_api_key(self) -> Optional[str]:
        return self._config.llm.api_key.strip() or None
