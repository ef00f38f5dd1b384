# ai/gemini.py
# ------------------------------------------------------------------------------
from __future__ import annotations
import asyncio
import json
import logging
import re
import textwrap
from typing import Any, Optional

import google.generativeai as genai

from core import config
from core.models import TripContext
from core.trip import suggestion_count

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Base class for failures of the Gemini call."""


class GenerationTimeout(GenerationError):
    pass


class GenerationParseError(GenerationError):
    def __init__(self, message: str, *, response: str):
        super().__init__(message)
        self.response = response


class GenerationTransportError(GenerationError):
    pass


# ──────────────────────────────────────────────────────────────────────────────
# Prompt template – seasonal activity suggestions
# ──────────────────────────────────────────────────────────────────────────────
_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    Generate {count} activity suggestions for a trip to {location} during {season} ({month}).

    Trip details:
    - Duration: {days} days
    - Season: {season}
    - Location: {location}

    Please provide diverse activities that are:
    1. Seasonally appropriate for {season} weather
    2. Popular attractions and experiences in {location}
    3. Mix of indoor/outdoor activities suitable for {season}
    4. Include cultural, recreational, and dining experiences
    5. Consider local events or seasonal attractions for {month}

    Format as a JSON array with this exact structure:
    [
      {{
        "activity": "Activity name",
        "description": "Brief description (2-3 sentences)",
        "category": "Cultural|Recreation|Dining|Nature|Entertainment|Shopping",
        "seasonalNote": "Why this is good for {season}"
      }}
    ]

    Return only valid JSON, no additional text.
    """
)


def build_prompt(ctx: TripContext) -> str:
    """Return the activity prompt string for Gemini."""
    return _PROMPT_TEMPLATE.format(
        count=suggestion_count(ctx.trip_days),
        location=ctx.location,
        season=ctx.season,
        month=ctx.month_name,
        days=ctx.trip_days,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Response parsing
# ──────────────────────────────────────────────────────────────────────────────
_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def extract_json_array(text: str) -> Any:
    """
    Parse the span from the first '[' to the last ']' of the model answer.
    Gemini often wraps the array in ```json fences or adds a sentence
    around it, so the whole text cannot be fed to json.loads.
    """
    match = _JSON_ARRAY_RE.search(text or "")
    if not match:
        raise GenerationParseError("No JSON array found in response", response=text)
    try:
        return json.loads(match.group(0))
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integers, or nesting deeper than the parser allows
        raise GenerationParseError(f"Invalid JSON in response: {e}", response=text) from e


# ──────────────────────────────────────────────────────────────────────────────
# Client
# ──────────────────────────────────────────────────────────────────────────────
class GeminiClient:
    """
    One Gemini model, configured once at startup.

    `model` may be any object exposing an async ``generate_content_async``
    whose result has a ``.text`` attribute (tests pass a fake).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = config.GEMINI_MODEL,
        timeout_s: float = config.AI_TIMEOUT_S,
        model: Any = None,
    ):
        self.timeout_s = timeout_s
        if model is None:
            # A missing key is only noticed when the first request fails.
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self._model = model

    async def generate(self, prompt: str) -> str:
        """Send the prompt and return the raw answer text."""
        call = asyncio.ensure_future(self._model.generate_content_async(prompt))
        done, _ = await asyncio.wait({call}, timeout=self.timeout_s)
        if not done:
            call.cancel()
            raise GenerationTimeout("AI request timeout")

        # a TimeoutError raised by the call itself is a transport failure
        try:
            return call.result().text
        except Exception as e:
            raise GenerationTransportError(str(e)) from e
