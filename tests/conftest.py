# tests/conftest.py

import asyncio

import pytest

from ai.gemini import GeminiClient


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Stands in for genai.GenerativeModel."""

    def __init__(self, text="[]", delay=0.0, error=None):
        self.text = text
        self.delay = delay
        self.error = error
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return FakeResponse(self.text)


@pytest.fixture
def make_client():
    def _make(text="[]", delay=0.0, error=None, timeout_s=1.0):
        return GeminiClient(model=FakeModel(text, delay, error), timeout_s=timeout_s)
    return _make
