"""
Provider-agnostic LLM client for Auto Agent.

Supports Groq (through its OpenAI-compatible endpoint), OpenAI, Anthropic and
Google Gemini with a shared interface: ``generate`` for single completions
and ``stream_chat`` for incremental replies.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger("autoagent.common.llm_client")

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class LLMClient:
    """Unified text generation client across LLM providers."""

    def __init__(
        self,
        provider: str = "groq",
        model: str = "",
        api_key: Optional[str] = None,
    ) -> None:
        self.provider = (provider or "groq").lower()
        self.model = model
        self._client = None
        self._google_models = {}

        if not api_key:
            logger.info("%s API key not provided, LLM client unavailable", self.provider)
            return

        if self.provider in ("groq", "openai"):
            try:
                from openai import OpenAI

                if self.provider == "groq":
                    self._client = OpenAI(api_key=api_key, base_url=GROQ_BASE_URL)
                else:
                    self._client = OpenAI(api_key=api_key)
            except ImportError:
                logger.warning("openai package not installed")
            except Exception as e:
                logger.warning("Failed to initialize %s client: %s", self.provider, e)
            return

        if self.provider == "anthropic":
            try:
                import anthropic

                self._client = anthropic.Anthropic(api_key=api_key)
            except ImportError:
                logger.warning("anthropic package not installed")
            except Exception as e:
                logger.warning("Failed to initialize Anthropic client: %s", e)
            return

        if self.provider == "google":
            try:
                import google.generativeai as genai

                genai.configure(api_key=api_key)
                self._client = genai  # Store the module, not a model instance
            except ImportError:
                logger.warning("google-generativeai package not installed")
            except Exception as e:
                logger.warning("Failed to initialize Gemini client: %s", e)
            return

        logger.warning("Unsupported LLM provider: %s", self.provider)

    @classmethod
    def from_config(cls, llm_config, api_key: Optional[str]) -> "LLMClient":
        return cls(provider=llm_config.provider, model=llm_config.model, api_key=api_key)

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        max_tokens: int = 512,
        temperature: Optional[float] = None,
        timeout: float = 30.0,
    ) -> str:
        """Single completion for ``prompt``. Raises on provider errors."""
        if not self.is_available:
            raise RuntimeError("LLM client is not available")

        if self.provider in ("groq", "openai"):
            messages = []
            if system:
                messages.append({"role": "system", "content": system})
            messages.append({"role": "user", "content": prompt})
            kwargs = {}
            if temperature is not None:
                kwargs["temperature"] = temperature
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=messages,
                timeout=timeout,
                **kwargs,
            )
            return (response.choices[0].message.content or "").strip()

        if self.provider == "anthropic":
            kwargs = {}
            if system:
                kwargs["system"] = system
            if temperature is not None:
                kwargs["temperature"] = temperature
            response = self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
                timeout=timeout,
                **kwargs,
            )
            return response.content[0].text.strip()

        if self.provider == "google":
            generation_config = {"max_output_tokens": max_tokens}
            if temperature is not None:
                generation_config["temperature"] = temperature
            response = self._google_model(system).generate_content(
                prompt,
                generation_config=generation_config,
                request_options={"timeout": timeout},
            )
            return response.text.strip()

        raise RuntimeError(f"Unsupported LLM provider: {self.provider}")

    def stream_chat(
        self,
        messages: List[Dict[str, str]],
        *,
        max_tokens: int = 1024,
        temperature: float = 1.0,
        top_p: float = 1.0,
        timeout: float = 60.0,
    ) -> Iterator[str]:
        """Yield reply chunks for a list of role-tagged messages, in arrival order."""
        if not self.is_available:
            raise RuntimeError("LLM client is not available")

        if self.provider in ("groq", "openai"):
            stream = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                top_p=top_p,
                stream=True,
                timeout=timeout,
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
            return

        if self.provider == "anthropic":
            system, turns = _split_system(messages)
            kwargs = {"temperature": temperature}
            if system:
                kwargs["system"] = system
            # Newer Claude models reject temperature and top_p together
            if top_p < 1.0:
                kwargs["top_p"] = top_p
            with self._client.messages.stream(
                model=self.model,
                max_tokens=max_tokens,
                messages=turns,
                timeout=timeout,
                **kwargs,
            ) as stream:
                for text in stream.text_stream:
                    if text:
                        yield text
            return

        if self.provider == "google":
            system, turns = _split_system(messages)
            contents = [
                {"role": "model" if m["role"] == "assistant" else "user", "parts": [m["content"]]}
                for m in turns
            ]
            # Chat system prompts embed the query, so the model is not cached
            response = self._build_google_model(system).generate_content(
                contents,
                generation_config={
                    "max_output_tokens": max_tokens,
                    "temperature": temperature,
                    "top_p": top_p,
                },
                request_options={"timeout": timeout},
                stream=True,
            )
            for chunk in response:
                if chunk.parts:
                    yield chunk.text
            return

        raise RuntimeError(f"Unsupported LLM provider: {self.provider}")

    def _google_model(self, system: Optional[str]):
        """Cached model for fixed system prompts (analysis)."""
        cache_key = hashlib.md5((system or "").encode()).hexdigest()
        if cache_key not in self._google_models:
            self._google_models[cache_key] = self._build_google_model(system)
        return self._google_models[cache_key]

    def _build_google_model(self, system: Optional[str]):
        kwargs = {"model_name": self.model}
        if system:
            kwargs["system_instruction"] = system
        return self._client.GenerativeModel(**kwargs)


def _split_system(messages: List[Dict[str, str]]) -> Tuple[Optional[str], List[Dict[str, str]]]:
    """Separate system messages from conversation turns (Anthropic/Gemini take system apart)."""
    system_parts = [m["content"] for m in messages if m["role"] == "system"]
    turns = [m for m in messages if m["role"] != "system"]
    return ("\n\n".join(system_parts) or None), turns
