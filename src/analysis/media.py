"""Audio transcription and reference-video analysis."""

import logging

from google.genai import types

from design_pipeline.prompts import TRANSCRIPTION_PROMPT, VIDEO_ANALYSIS_PROMPT
from util.gemini import GeminiAPI, generate_content_async

logger = logging.getLogger(__name__)


class MediaAnalyzer:
    """Turns uploaded audio/video into text for the design brief."""

    def __init__(self, api: GeminiAPI, transcription_model: str, video_model: str):
        self.api = api
        self.transcription_model = transcription_model
        self.video_model = video_model

    async def _describe(self, model: str, data: bytes, mime_type: str, instruction: str) -> str:
        response = await generate_content_async(
            self.api.client,
            model=model,
            contents=[types.Content(role="user", parts=[
                types.Part.from_bytes(data=data, mime_type=mime_type),
                types.Part.from_text(text=instruction),
            ])],
        )
        return response.text or ""

    async def transcribe_audio(self, data: bytes, mime_type: str = "audio/mpeg") -> str:
        """Transcribe speech verbatim; returns "" when the model gives no text."""
        logger.info(f"Transcribing {len(data)} bytes of {mime_type}")
        return await self._describe(self.transcription_model, data, mime_type, TRANSCRIPTION_PROMPT)

    async def analyze_video(self, data: bytes, mime_type: str = "video/mp4") -> str:
        """Describe visual style, costume era and mood of a reference video."""
        logger.info(f"Analyzing {len(data)} bytes of {mime_type}")
        return await self._describe(self.video_model, data, mime_type, VIDEO_ANALYSIS_PROMPT)
