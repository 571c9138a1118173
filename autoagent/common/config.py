"""
Configuration Management for Auto Agent

Loads configuration from ~/.autoagent/config.json, .env files and
environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger("autoagent.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".autoagent"
CONFIG_PATH = CONFIG_DIR / "config.json"
ENV_PATH = CONFIG_DIR / ".env"

SUPPORTED_PROVIDERS = ("groq", "openai", "anthropic", "google")


@dataclass
class LLMConfig:
    """LLM provider configuration shared by analysis and chat"""
    provider: str = "groq"
    groq_api_key: str = ""
    groq_model: str = "llama3-8b-8192"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    google_api_key: str = ""
    google_model: str = "gemini-2.0-flash-exp"

    @property
    def api_key(self) -> str:
        """API key of the active provider"""
        return getattr(self, f"{self.provider}_api_key", "") or ""

    @property
    def model(self) -> str:
        """Model of the active provider"""
        return getattr(self, f"{self.provider}_model", "") or ""


@dataclass
class ChatConfig:
    """Sampling parameters for the final-answer call"""
    temperature: float = 1.0
    max_tokens: int = 1024
    top_p: float = 1.0
    timeout: float = 60.0
    welcome_message: str = (
        "Welcome to the Auto Agent interface! "
        "How can I help you explore the digital universe today?"
    )


@dataclass
class IndexConfig:
    """Indexer and retriever configuration"""
    analysis_timeout: float = 30.0
    analysis_max_tokens: int = 512
    analysis_temperature: float = 0.3
    max_results: int = 5
    snippet_chars: int = 200
    notify_on_fallback: bool = False


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class AppConfig:
    """Main Auto Agent configuration"""
    llm: LLMConfig = field(default_factory=LLMConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    index: IndexConfig = field(default_factory=IndexConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    _env_sourced_keys: set = field(default_factory=set, repr=False)


def _parse_llm_config(data: dict) -> LLMConfig:
    """Parse llm section from config dict"""
    llm_data = data.get("llm", {})
    defaults = LLMConfig()
    return LLMConfig(
        provider=str(llm_data.get("provider", defaults.provider)).lower(),
        groq_api_key=llm_data.get("groq_api_key", ""),
        groq_model=llm_data.get("groq_model", defaults.groq_model),
        openai_api_key=llm_data.get("openai_api_key", ""),
        openai_model=llm_data.get("openai_model", defaults.openai_model),
        anthropic_api_key=llm_data.get("anthropic_api_key", ""),
        anthropic_model=llm_data.get("anthropic_model", defaults.anthropic_model),
        google_api_key=llm_data.get("google_api_key", ""),
        google_model=llm_data.get("google_model", defaults.google_model),
    )


def _parse_chat_config(data: dict) -> ChatConfig:
    """Parse chat section from config dict"""
    chat_data = data.get("chat", {})
    defaults = ChatConfig()
    return ChatConfig(
        temperature=float(chat_data.get("temperature", defaults.temperature)),
        max_tokens=int(chat_data.get("max_tokens", defaults.max_tokens)),
        top_p=float(chat_data.get("top_p", defaults.top_p)),
        timeout=float(chat_data.get("timeout", defaults.timeout)),
        welcome_message=chat_data.get("welcome_message", defaults.welcome_message),
    )


def _parse_index_config(data: dict) -> IndexConfig:
    """Parse index section from config dict"""
    index_data = data.get("index", {})
    defaults = IndexConfig()
    return IndexConfig(
        analysis_timeout=float(index_data.get("analysis_timeout", defaults.analysis_timeout)),
        analysis_max_tokens=int(index_data.get("analysis_max_tokens", defaults.analysis_max_tokens)),
        analysis_temperature=float(index_data.get("analysis_temperature", defaults.analysis_temperature)),
        max_results=int(index_data.get("max_results", defaults.max_results)),
        snippet_chars=int(index_data.get("snippet_chars", defaults.snippet_chars)),
        notify_on_fallback=bool(index_data.get("notify_on_fallback", defaults.notify_on_fallback)),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server section from config dict"""
    server_data = data.get("server", {})
    return ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=int(server_data.get("port", 8000)),
    )


def load_config(config_path: Path = None, env_path: Path = None) -> AppConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (including values loaded from .env)
    2. Config file (~/.autoagent/config.json)
    3. Default values
    """
    config = AppConfig()
    config_path = config_path or CONFIG_PATH
    env_path = env_path or ENV_PATH

    if config_path.exists():
        try:
            with open(config_path) as f:
                data = json.load(f)

            config.llm = _parse_llm_config(data)
            config.chat = _parse_chat_config(data)
            config.index = _parse_index_config(data)
            config.server = _parse_server_config(data)
        except (json.JSONDecodeError, IOError, ValueError) as e:
            logger.warning("Failed to load config file %s: %s", config_path, e)

    # .env in the app data dir, then the working directory; never overrides real env
    if env_path.exists():
        load_dotenv(env_path, override=False)
    load_dotenv(override=False)

    _env_llm_map = {
        "GROQ_API_KEY": "groq_api_key",
        "VITE_GROQ_API_KEY": "groq_api_key",
        "OPENAI_API_KEY": "openai_api_key",
        "ANTHROPIC_API_KEY": "anthropic_api_key",
        "GOOGLE_API_KEY": "google_api_key",
        "GEMINI_API_KEY": "google_api_key",
        "AUTOAGENT_LLM_PROVIDER": "provider",
    }
    for env_var, attr in _env_llm_map.items():
        val = os.getenv(env_var)
        if val:
            setattr(config.llm, attr, val.lower() if attr == "provider" else val)
            config._env_sourced_keys.add(attr)

    model_override = os.getenv("AUTOAGENT_MODEL")
    if model_override and config.llm.provider in SUPPORTED_PROVIDERS:
        setattr(config.llm, f"{config.llm.provider}_model", model_override)

    if os.getenv("AUTOAGENT_HOST"):
        config.server.host = os.getenv("AUTOAGENT_HOST")
    if os.getenv("AUTOAGENT_PORT"):
        config.server.port = int(os.getenv("AUTOAGENT_PORT"))

    return config


def save_config(config: AppConfig, config_path: Path = None) -> None:
    """Save configuration to file.

    API key fields that were sourced from environment variables are written
    as empty strings so that secrets are not persisted to disk.
    """
    config_path = config_path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    env_sourced = getattr(config, "_env_sourced_keys", set())

    llm_section = {
        "provider": config.llm.provider,
        "groq_api_key": config.llm.groq_api_key,
        "groq_model": config.llm.groq_model,
        "openai_api_key": config.llm.openai_api_key,
        "openai_model": config.llm.openai_model,
        "anthropic_api_key": config.llm.anthropic_api_key,
        "anthropic_model": config.llm.anthropic_model,
        "google_api_key": config.llm.google_api_key,
        "google_model": config.llm.google_model,
    }
    for key in ("groq_api_key", "openai_api_key", "anthropic_api_key", "google_api_key"):
        if key in env_sourced:
            llm_section[key] = ""

    data = {
        "llm": llm_section,
        "chat": {
            "temperature": config.chat.temperature,
            "max_tokens": config.chat.max_tokens,
            "top_p": config.chat.top_p,
            "timeout": config.chat.timeout,
            "welcome_message": config.chat.welcome_message,
        },
        "index": {
            "analysis_timeout": config.index.analysis_timeout,
            "analysis_max_tokens": config.index.analysis_max_tokens,
            "analysis_temperature": config.index.analysis_temperature,
            "max_results": config.index.max_results,
            "snippet_chars": config.index.snippet_chars,
            "notify_on_fallback": config.index.notify_on_fallback,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
        },
    }

    with open(config_path, "w") as f:
        json.dump(data, f, indent=2)

    # Set secure permissions
    config_path.chmod(0o600)
