"""Exceptions raised at the session boundary."""


class AutoAgentError(Exception):
    """Base class for Auto Agent errors."""


class MissingCredential(AutoAgentError):
    """No API key is configured, so the LLM cannot be called."""


class IndexingInProgress(AutoAgentError):
    """An index request arrived while another one is still running."""


class CompletionError(AutoAgentError):
    """The final-answer completion call failed."""
