"""Shared fixtures: a scripted stand-in for LLMClient."""

import pytest


class FakeLLM:
    """Records calls and replays scripted responses."""

    def __init__(self, analysis="", chunks=(), available=True, generate_error=None, stream_error=None):
        self.analysis = analysis
        self.chunks = list(chunks)
        self.available = available
        self.generate_error = generate_error
        self.stream_error = stream_error
        self.generate_calls = []
        self.stream_calls = []

    @property
    def is_available(self):
        return self.available

    def generate(self, prompt, **kwargs):
        self.generate_calls.append((prompt, kwargs))
        if self.generate_error:
            raise self.generate_error
        return self.analysis

    def stream_chat(self, messages, **kwargs):
        self.stream_calls.append((messages, kwargs))
        for chunk in self.chunks:
            yield chunk
        if self.stream_error:
            raise self.stream_error


@pytest.fixture
def fake_llm():
    """Factory: fake_llm(analysis=..., chunks=[...], ...)"""
    return FakeLLM


@pytest.fixture
def make_record():
    from autoagent.common.schemas import IndexRecord, generate_record_id

    def _make(content="", keywords=()):
        return IndexRecord(id=generate_record_id(), content=content, keywords=list(keywords))

    return _make
