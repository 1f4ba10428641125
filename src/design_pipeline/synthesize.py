"""Costume design generation through a tool-calling Gemini conversation.

Protocol for one design:
1. Send the brief under a system directive with schema-constrained JSON output.
2. If the model asks for a tool, run it and reply with the result keyed by
   the call id; the next response is the candidate answer. Only one such
   round trip is allowed.
3. Validate the answer (all-or-nothing).
4. Render concept art from the validated image prompt (best-effort by default).
"""

import logging
from typing import Any, List, Optional

from google.genai import types

from config import DEFAULT_OUTPUT_LANGUAGE, ModelSelection
from exceptions import CostumePipelineError, DesignGenerationFailed, UnexpectedToolCall
from tools.registry import ToolRegistry
from artifacts.images import ImageSynthesizer
from util.gemini import GeminiAPI, generate_content_async

from .models import DESIGN_RESPONSE_SCHEMA, DesignBrief, GroundingContext, StructuredDesignResult
from .prompts import build_concept_art_prompt, build_design_request, build_design_system_instruction
from .stages import StagePolicy, run_stage
from .validate import validate_response

logger = logging.getLogger(__name__)

CONCEPT_ART_SIZE = "2K"


class DesignSynthesizer:
    """Produces one StructuredDesignResult per brief."""

    def __init__(
        self,
        api: GeminiAPI,
        registry: ToolRegistry,
        images: ImageSynthesizer,
        models: Optional[ModelSelection] = None,
        concept_art_policy: StagePolicy = StagePolicy.BEST_EFFORT,
        output_language: str = DEFAULT_OUTPUT_LANGUAGE
    ):
        """
        Args:
            api: Shared Gemini client handle
            registry: Tools the model may call during the conversation
            images: Image synthesizer used for concept art
            models: Model per stage (defaults to ModelSelection())
            concept_art_policy: BEST_EFFORT leaves concept_art_url empty on
                failure; FATAL propagates the error
            output_language: Language for narrative fields
        """
        self.api = api
        self.registry = registry
        self.images = images
        self.models = models or ModelSelection()
        self.concept_art_policy = concept_art_policy
        self.output_language = output_language

    async def synthesize(self, brief: DesignBrief, grounding: GroundingContext) -> StructuredDesignResult:
        """
        Run the design conversation and attach concept art.

        Raises:
            DesignGenerationFailed: If the conversation or validation fails
                (the specific error is kept as __cause__)
        """
        try:
            design = await self._converse(brief, grounding)
        except CostumePipelineError as e:
            logger.error(f"Design generation failed: {e}")
            raise DesignGenerationFailed(f"Design generation failed: {e}") from e

        design = self._attach_grounding(design, grounding)

        artifact = await run_stage(
            "concept_art",
            self.concept_art_policy,
            self.images.generate(
                build_concept_art_prompt(design.image_prompt),
                model=self.models.concept_art,
                image_size=CONCEPT_ART_SIZE,
            ),
            fallback=None,
        )
        concept_art_url = artifact.locator if artifact is not None else None
        logger.info(f"Design complete: {design.title} (concept art: {'yes' if concept_art_url else 'no'})")
        return design.model_copy(update={"concept_art_url": concept_art_url})

    def _config(self, grounding: GroundingContext) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=build_design_system_instruction(grounding, self.output_language),
            thinking_config=types.ThinkingConfig(thinking_budget=self.models.design_thinking_budget),
            response_mime_type="application/json",
            response_schema=DESIGN_RESPONSE_SCHEMA,
            tools=self.registry.as_gemini_tools() or None,
        )

    async def _converse(self, brief: DesignBrief, grounding: GroundingContext) -> StructuredDesignResult:
        config = self._config(grounding)
        history: List[types.Content] = [
            types.Content(role="user", parts=[types.Part.from_text(text=build_design_request(brief, grounding))])
        ]

        logger.info(f"Requesting design for location {brief.filming_location} with {self.models.design}")
        response = await self._send(history, config)

        calls = response.function_calls or []
        if calls:
            history.append(self._model_turn(response))
            history.append(await self._resolve_tool_calls(calls))
            response = await self._send(history, config)
            if response.function_calls:
                names = ", ".join(call.name or "?" for call in response.function_calls)
                raise UnexpectedToolCall(f"Second tool call after resolution: {names}")

        return validate_response(response.text or "", StructuredDesignResult)

    async def _send(self, history: List[types.Content], config: types.GenerateContentConfig) -> Any:
        return await generate_content_async(
            self.api.client,
            model=self.models.design,
            contents=list(history),
            config=config,
        )

    @staticmethod
    def _model_turn(response: Any) -> types.Content:
        """The model's tool-call turn, echoed back into the history."""
        candidates = response.candidates or []
        if candidates and candidates[0].content is not None:
            return candidates[0].content
        return types.Content(
            role="model",
            parts=[types.Part(function_call=call) for call in response.function_calls],
        )

    async def _resolve_tool_calls(self, calls: List[types.FunctionCall]) -> types.Content:
        """Execute every call of the model turn and build one reply turn."""
        parts = []
        for call in calls:
            logger.info(f"Model requested tool {call.name} (call id {call.id})")
            result = await self.registry.execute_tool(call.name or "", **(call.args or {}))
            parts.append(result.to_part(call))
        return types.Content(role="user", parts=parts)

    @staticmethod
    def _attach_grounding(design: StructuredDesignResult, grounding: GroundingContext) -> StructuredDesignResult:
        """
        Reconcile model-resolved weather with the grounding stage.

        A default (fallback) grounding replaces whatever the model guessed;
        otherwise the model's typed weather is kept and the search sources
        are attached.
        """
        if grounding.is_default:
            weather = grounding
        else:
            weather = design.real_weather.model_copy(update={"sources": list(grounding.sources)})
        return design.model_copy(update={"real_weather": weather})
