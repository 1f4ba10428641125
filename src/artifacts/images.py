"""Image synthesis and editing with Gemini image models."""

import logging
from typing import Any, Optional, Sequence

from google.genai import types

from exceptions import NoArtifactProduced
from util.gemini import GeminiAPI, generate_content_async

from .models import GeneratedArtifact, ImageSize, ReferenceImage

logger = logging.getLogger(__name__)

MAX_REFERENCE_IMAGES = 2


def extract_first_image(response: Any) -> Optional[GeneratedArtifact]:
    """Return the first inline image across all candidates, or None."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return GeneratedArtifact(data=inline.data, mime_type=inline.mime_type or "image/png")
    return None


def _image_part(image: ReferenceImage) -> types.Part:
    return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


class ImageSynthesizer:
    """Single request/response image generation.

    Every method either returns an artifact or raises NoArtifactProduced;
    an empty result is never handed back.
    """

    def __init__(self, api: GeminiAPI):
        self.api = api

    async def generate(
        self,
        directive: str,
        model: str,
        references: Sequence[ReferenceImage] = (),
        image_size: Optional[ImageSize] = None
    ) -> GeneratedArtifact:
        """
        Generate an image from a directive, optionally conditioned on references.

        Args:
            directive: Composed prompt text
            model: Image model identifier
            references: Up to two reference images (e.g. actor + garment)
            image_size: Optional resolution tier ("1K", "2K", "4K")

        Returns:
            GeneratedArtifact with the first image returned

        Raises:
            ValueError: If more than two reference images are given
            NoArtifactProduced: If the response carries no image
            TransportError: On API failure
        """
        if len(references) > MAX_REFERENCE_IMAGES:
            raise ValueError(f"At most {MAX_REFERENCE_IMAGES} reference images are supported, got {len(references)}")

        parts = [types.Part.from_text(text=directive)]
        parts.extend(_image_part(ref) for ref in references)

        config = types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=types.ImageConfig(image_size=image_size) if image_size else None,
        )
        logger.info(f"Generating image with {model} ({len(references)} reference images)")
        logger.debug(f"Image directive: {directive}")

        response = await generate_content_async(
            self.api.client,
            model=model,
            contents=[types.Content(role="user", parts=parts)],
            config=config,
        )
        return self._require_image(response, model)

    async def edit(self, image: ReferenceImage, directive: str, model: str) -> GeneratedArtifact:
        """
        Edit an existing image according to a text directive.

        Raises:
            NoArtifactProduced: If the response carries no image
            TransportError: On API failure
        """
        logger.info(f"Editing image with {model}")
        response = await generate_content_async(
            self.api.client,
            model=model,
            contents=[types.Content(role="user", parts=[_image_part(image), types.Part.from_text(text=directive)])],
            config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
        )
        return self._require_image(response, model)

    @staticmethod
    def _require_image(response: Any, model: str) -> GeneratedArtifact:
        artifact = extract_first_image(response)
        if artifact is None:
            raise NoArtifactProduced(f"{model} returned no image")
        logger.info(f"Received {artifact.mime_type} image ({len(artifact.data)} bytes)")
        return artifact
