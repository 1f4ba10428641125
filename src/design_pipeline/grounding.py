"""Best-effort real-world grounding via Gemini with Google Search."""

import logging
import re
from typing import Any, List, Optional

from google.genai import types

from config import DEFAULT_TEMPERATURE_F
from exceptions import GroundingUnavailable
from util.gemini import GeminiAPI, generate_content_async

from .models import GroundingContext
from .stages import StagePolicy, run_stage

logger = logging.getLogger(__name__)

_FAHRENHEIT = re.compile(r"(-?\d{1,3}(?:\.\d+)?)\s*°?\s*(?:F\b|degrees Fahrenheit|Fahrenheit)", re.IGNORECASE)


def build_conditions_query(location: str) -> str:
    return (
        f"What is the current typical weather in {location} this time of year? "
        "Return temperature in Fahrenheit and condition."
    )


def extract_sources(response: Any) -> List[str]:
    """Collect web source URIs from the first candidate's grounding metadata."""
    sources: List[str] = []
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return sources
    metadata = getattr(candidates[0], "grounding_metadata", None)
    for chunk in getattr(metadata, "grounding_chunks", None) or []:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if uri:
            sources.append(uri)
    return sources


def approximate_temperature(text: str) -> Optional[float]:
    """Pull the first Fahrenheit reading out of free text, if there is one."""
    match = _FAHRENHEIT.search(text)
    return float(match.group(1)) if match else None


class ContextGatherer:
    """Looks up conditions at a filming location; never fails the pipeline by default."""

    def __init__(self, api: GeminiAPI, model: str, policy: StagePolicy = StagePolicy.BEST_EFFORT):
        self.api = api
        self.model = model
        self.policy = policy

    async def gather(self, location: str) -> GroundingContext:
        """
        Get grounding for ``location``.

        Under the default BEST_EFFORT policy any failure (network, empty
        answer, malformed metadata) yields GroundingContext.default().
        """
        logger.info(f"Gathering location conditions for: {location}")
        return await run_stage(
            "grounding",
            self.policy,
            self._search(location),
            fallback=GroundingContext.default(location),
        )

    async def _search(self, location: str) -> GroundingContext:
        response = await generate_content_async(
            self.api.client,
            model=self.model,
            contents=build_conditions_query(location),
            config=types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
            ),
        )

        text = (response.text or "").strip()
        if not text:
            raise GroundingUnavailable(f"Empty search answer for {location}")

        sources = extract_sources(response)
        temperature = approximate_temperature(text)
        logger.debug(f"Grounding answer ({len(sources)} sources): {text}")

        # The raw answer is passed on as the condition; the design
        # conversation resolves it into typed weather fields.
        return GroundingContext(
            temperature=temperature if temperature is not None else DEFAULT_TEMPERATURE_F,
            condition=text,
            location=location,
            sources=sources,
        )
