"""
Auto Agent Common Module

Shared infrastructure for the indexer, retriever and chat session.
"""

from .config import AppConfig, load_config, save_config
from .credentials import CredentialProvider, ConfigCredentialProvider, StaticCredentialProvider
from .errors import AutoAgentError, MissingCredential, IndexingInProgress, CompletionError
from .llm_client import LLMClient
from .llm_utils import parse_llm_json

__all__ = [
    "AppConfig",
    "load_config",
    "save_config",
    "CredentialProvider",
    "ConfigCredentialProvider",
    "StaticCredentialProvider",
    "AutoAgentError",
    "MissingCredential",
    "IndexingInProgress",
    "CompletionError",
    "LLMClient",
    "parse_llm_json",
]
