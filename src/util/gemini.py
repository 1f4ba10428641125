"""
Gemini API utilities for the costume studio pipeline.

Centralized module for all Google GenAI (Gemini, Veo) interactions.
GeminiAPI owns the single credentialed client handle; it is built once
at process start and shared read-only by every pipeline component.
"""

import asyncio
import logging
from typing import Optional, Any

import httpx
from google import genai
from google.genai import errors as genai_errors

from config import get_gemini_api_key
from exceptions import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (genai_errors.APIError, httpx.HTTPError)


class GeminiAPI:
    """Wrapper holding the credentialed Gemini client."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[Any] = None):
        """
        Initialize Gemini API client.

        Args:
            api_key: API key (if None, loads from environment)
            client: Pre-built client (tests inject a fake here); requires api_key
                only when authorized download links are needed
        """
        self._api_key = api_key
        if client is not None:
            self.client = client
        elif api_key:
            self._configure_with_key(api_key)
        else:
            self._configure_from_env()

    def _configure_from_env(self):
        """Load API key from environment (.env already loaded by config)."""
        try:
            api_key = get_gemini_api_key()
        except KeyError as e:
            raise ConfigurationError(
                "Gemini API key not found. Set GEMINI_API_KEY in .env file or pass api_key parameter."
            ) from e
        self._configure_with_key(api_key)

    def _configure_with_key(self, api_key: str):
        """Configure Gemini with provided API key."""
        self._api_key = api_key
        self.client = genai.Client(api_key=api_key)

    @property
    def api_key(self) -> str:
        """API key used to authorize file downloads."""
        if not self._api_key:
            raise ConfigurationError("No API key available to authorize downloads.")
        return self._api_key


async def _call(stage: str, fn, *args, **kwargs) -> Any:
    """Run a blocking SDK call in a worker thread, translating transport failures."""
    try:
        return await asyncio.to_thread(fn, *args, **kwargs)
    except _TRANSPORT_ERRORS as e:
        logger.error(f"{stage} call failed: {e}")
        raise TransportError(f"{stage} call failed: {e}") from e


async def generate_content_async(
    client: genai.Client,
    model: str,
    contents: Any,
    config: Optional[Any] = None
) -> Any:
    """
    Async wrapper for generate_content using asyncio.to_thread.

    Args:
        client: genai.Client instance
        model: Model name (e.g., "gemini-3-pro-preview")
        contents: Content to send to the model
        config: Optional types.GenerateContentConfig

    Returns:
        GenerateContentResponse

    Raises:
        TransportError: On API or network failure
    """
    return await _call(
        f"generate_content[{model}]",
        client.models.generate_content,
        model=model,
        contents=contents,
        config=config
    )


async def generate_videos_async(
    client: genai.Client,
    model: str,
    prompt: str,
    image: Any,
    config: Optional[Any] = None
) -> Any:
    """Start a long-running video generation operation."""
    return await _call(
        f"generate_videos[{model}]",
        client.models.generate_videos,
        model=model,
        prompt=prompt,
        image=image,
        config=config
    )


async def get_operation_async(client: genai.Client, operation: Any) -> Any:
    """Fetch the latest state of a long-running operation."""
    return await _call("operations.get", client.operations.get, operation)
