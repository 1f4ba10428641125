"""Safety & comfort analysis of a fitted costume image."""

import logging
import mimetypes

from google.genai import types

from config import DEFAULT_OUTPUT_LANGUAGE
from design_pipeline.models import FIT_ANALYSIS_SCHEMA, FitAnalysisResult
from design_pipeline.prompts import build_fit_analysis_prompt
from design_pipeline.validate import validate_response
from util.data_url import is_data_url, parse_data_url
from util.gemini import GeminiAPI, generate_content_async

logger = logging.getLogger(__name__)


def image_part_from_locator(locator: str) -> types.Part:
    """
    Build an image part from a data URL or a remote URI.

    Raises:
        ValueError: If a data URL cannot be decoded
    """
    if is_data_url(locator):
        mime_type, data = parse_data_url(locator)
        return types.Part.from_bytes(data=data, mime_type=mime_type)
    mime_type = mimetypes.guess_type(locator.split("?", 1)[0])[0] or "image/png"
    return types.Part.from_uri(file_uri=locator, mime_type=mime_type)


class FitAnalyzer:
    """Scores a fitted image against actor constraints."""

    def __init__(self, api: GeminiAPI, model: str, output_language: str = DEFAULT_OUTPUT_LANGUAGE):
        self.api = api
        self.model = model
        self.output_language = output_language

    async def analyze(self, image_locator: str, constraints: str = "None") -> FitAnalysisResult:
        """
        Produce a safety report for a fitted image.

        Args:
            image_locator: Data URL (from generate_virtual_fit) or remote URI
            constraints: Actor constraints to check against

        Returns:
            Validated FitAnalysisResult

        Raises:
            MalformedOutput: If the report fails validation
            TransportError: On API failure
        """
        logger.info(f"Analyzing fit compatibility with {self.model}")
        response = await generate_content_async(
            self.api.client,
            model=self.model,
            contents=[types.Content(role="user", parts=[
                types.Part.from_text(text=build_fit_analysis_prompt(constraints or "None", self.output_language)),
                image_part_from_locator(image_locator),
            ])],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=FIT_ANALYSIS_SCHEMA,
            ),
        )
        result = validate_response(response.text or "", FitAnalysisResult)
        logger.info(f"Fit compatibility score: {result.compatibility_score:g}")
        return result
