"""
Public API for the costume studio pipeline.

This module provides the official interface for external applications
(the studio UI, CLI tools, etc.). Each operation is an independent,
stateless async call; the only shared state is the credentialed
GeminiAPI handle, built once and never mutated.

Stage failure policy:
- Grounding and concept art are best-effort (logged, defaults used)
- Everything else is fatal and raises a CostumePipelineError subclass

Example usage:
    from api import CostumePipeline
    from design_pipeline.models import DesignBrief

    pipeline = CostumePipeline.from_env()
    design = await pipeline.generate_design(DesignBrief(
        project_type="Feature film",
        scene_context="EXT. ALLEY - NIGHT. Chase through heavy rain.",
        character_profile="Disgraced detective, 50s",
        psychological_state="Guilt turning into resolve",
        filming_location="London",
    ))
    print(design.title, design.concept_art_url is not None)
"""

import asyncio
import logging
from typing import Optional

from config import DEFAULT_OUTPUT_LANGUAGE, ModelSelection
from analysis.fit import FitAnalyzer
from analysis.media import MediaAnalyzer
from artifacts.images import ImageSynthesizer
from artifacts.models import ImageSize, ReferenceImage, VideoJobConfig
from artifacts.video import Sleep, VideoJobClient
from design_pipeline.grounding import ContextGatherer
from design_pipeline.models import DesignBrief, FitAnalysisResult, SimulationConfig, StructuredDesignResult
from design_pipeline.prompts import build_garment_prompt, build_stress_test_prompt, build_virtual_fit_prompt
from design_pipeline.stages import StagePolicies
from design_pipeline.synthesize import DesignSynthesizer
from exceptions import CostumePipelineError, DesignGenerationFailed
from tools.location_conditions import LocationConditionsTool
from tools.registry import ToolRegistry
from util.data_url import is_data_url, parse_data_url
from util.gemini import GeminiAPI

logger = logging.getLogger(__name__)

GARMENT_SIZES = ("1K", "2K", "4K")


class CostumePipeline:
    """Composes grounding, conversation, artifact and analysis stages."""

    def __init__(
        self,
        api: GeminiAPI,
        models: Optional[ModelSelection] = None,
        policies: Optional[StagePolicies] = None,
        sleep: Sleep = asyncio.sleep,
        max_poll_attempts: Optional[int] = None,
        registry: Optional[ToolRegistry] = None,
        output_language: str = DEFAULT_OUTPUT_LANGUAGE
    ):
        """
        Args:
            api: Shared credentialed client handle
            models: Model per stage (defaults to ModelSelection())
            policies: Failure policy for the optional stages
            sleep: Awaitable sleep used between video polls
            max_poll_attempts: Optional bound on video polls (None = unbounded)
            registry: Tools for the design conversation (defaults to the
                location-conditions lookup backed by the grounding stage)
            output_language: Language for narrative fields of designs and fit reports
        """
        self.api = api
        self.models = models or ModelSelection()
        self.policies = policies or StagePolicies()

        self.gatherer = ContextGatherer(api, self.models.grounding, policy=self.policies.grounding)
        self.images = ImageSynthesizer(api)
        self.registry = registry or ToolRegistry([LocationConditionsTool(self.gatherer.gather)])
        self.synthesizer = DesignSynthesizer(
            api,
            registry=self.registry,
            images=self.images,
            models=self.models,
            concept_art_policy=self.policies.concept_art,
            output_language=output_language,
        )
        self.videos = VideoJobClient(api, self.models.video, sleep=sleep, max_attempts=max_poll_attempts)
        self.fit_analyzer = FitAnalyzer(api, self.models.fit_analysis, output_language=output_language)
        self.media = MediaAnalyzer(api, self.models.transcription, self.models.video_analysis)

    @classmethod
    def from_env(cls, **kwargs) -> "CostumePipeline":
        """Build a pipeline from GEMINI_API_KEY and COSTUME_*_MODEL variables."""
        kwargs.setdefault("models", ModelSelection.from_env())
        return cls(GeminiAPI(), **kwargs)

    async def generate_design(self, brief: DesignBrief) -> StructuredDesignResult:
        """
        Generate a full costume design for a brief.

        Raises:
            DesignGenerationFailed: If the conversation or validation fails,
                or grounding fails under a FATAL grounding policy
        """
        logger.info(f"Generating design: {brief.project_type} @ {brief.filming_location}")
        try:
            grounding = await self.gatherer.gather(brief.filming_location)
        except CostumePipelineError as e:
            logger.error(f"Grounding failed: {e}")
            raise DesignGenerationFailed(f"Grounding failed: {e}") from e
        return await self.synthesizer.synthesize(brief, grounding)

    async def generate_garment_asset(self, description: str, size: ImageSize = "1K") -> str:
        """
        Generate an isolated product shot of a garment.

        Returns:
            Data URL of the generated image

        Raises:
            ValueError: If ``size`` is not one of 1K, 2K, 4K
            NoArtifactProduced: If no image came back
        """
        if size not in GARMENT_SIZES:
            raise ValueError(f"Unsupported image size: {size}")
        artifact = await self.images.generate(
            build_garment_prompt(description),
            model=self.models.garment_asset,
            image_size=size,
        )
        return artifact.locator

    async def edit_garment_image(self, image: bytes, directive: str, mime_type: str = "image/png") -> str:
        """Apply a text edit to a garment image; returns a data URL."""
        artifact = await self.images.edit(
            ReferenceImage(data=image, mime_type=mime_type),
            directive,
            model=self.models.image_edit,
        )
        return artifact.locator

    async def generate_virtual_fit(
        self,
        model_image: bytes,
        garment_image: bytes,
        garment_description: str,
        context: Optional[str] = None,
        sim_config: Optional[SimulationConfig] = None
    ) -> str:
        """
        Composite the garment onto the actor.

        Returns:
            Data URL of the fitted image

        Raises:
            NoArtifactProduced: If no image came back
        """
        directive = build_virtual_fit_prompt(garment_description, context, sim_config)
        artifact = await self.images.generate(
            directive,
            model=self.models.virtual_fit,
            references=[ReferenceImage(data=model_image), ReferenceImage(data=garment_image)],
        )
        return artifact.locator

    async def analyze_fit_compatibility(self, image_locator: str, constraints: str = "None") -> FitAnalysisResult:
        """Safety and comfort report for a fitted image."""
        return await self.fit_analyzer.analyze(image_locator, constraints)

    async def generate_stress_test_video(self, image_locator: str, action_label: str) -> str:
        """
        Render a short portrait video of the fitted character performing an action.

        Polls every few seconds until the job reports done; there is no
        timeout unless ``max_poll_attempts`` was set.

        Returns:
            Download URL including the key parameter required to fetch it

        Raises:
            ValueError: If ``image_locator`` is not a data URL
            VideoGenerationFailed: If the job finished without a video
        """
        if not is_data_url(image_locator):
            raise ValueError("Stress test video needs an inline (data URL) image")
        mime_type, image = parse_data_url(image_locator)
        action = "walking" if action_label == "idle" else action_label
        return await self.videos.generate(
            image,
            mime_type,
            build_stress_test_prompt(action),
            VideoJobConfig(),
        )

    async def transcribe_audio(self, audio: bytes, mime_type: str = "audio/mpeg") -> str:
        return await self.media.transcribe_audio(audio, mime_type)

    async def analyze_video(self, video: bytes, mime_type: str = "video/mp4") -> str:
        return await self.media.analyze_video(video, mime_type)
