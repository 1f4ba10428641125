"""Tests for public API facade."""
import base64
import json

import httpx
import pytest

from api import CostumePipeline
from config import ModelSelection
from design_pipeline.models import SimulationConfig, StructuredDesignResult
from design_pipeline.stages import StagePolicies, StagePolicy
from design_pipeline.validate import validate_response
from exceptions import (
    CostumePipelineError,
    DesignGenerationFailed,
    NoArtifactProduced,
    TransportError,
    UnexpectedToolCall,
    VideoGenerationFailed,
)
from util.data_url import to_data_url

VIDEO_URI = "https://generativelanguage.googleapis.com/v1beta/files/vid:download?alt=media"


async def no_sleep(_seconds):
    return None


@pytest.fixture
def pipeline(gemini_api):
    return CostumePipeline(gemini_api, sleep=no_sleep)


@pytest.mark.smoke
@pytest.mark.asyncio
async def test_design_with_grounding_outage(pipeline, fake_client, responses, design_json, sample_brief):
    """Smoke test: a search outage still yields a complete design on default weather."""
    fake_client.models.generate_content.side_effect = [
        httpx.ConnectError("search unavailable"),
        responses.text(design_json),
        responses.image(b"concept"),
    ]

    design = await pipeline.generate_design(sample_brief)

    assert isinstance(design, StructuredDesignResult)
    assert design.real_weather.temperature == 72
    assert design.real_weather.condition == "Sunny (Default)"
    assert design.real_weather.location == "London"
    assert design.concept_art_url == to_data_url("image/png", b"concept")

    calls = fake_client.models.generate_content.call_args_list
    assert len(calls) == 3
    assert [c.kwargs["model"] for c in calls] == [
        ModelSelection().grounding,
        ModelSelection().design,
        ModelSelection().concept_art,
    ]
    # The design conversation finished without a tool round trip
    assert len(calls[1].kwargs["contents"]) == 1
    assert validate_response(design.model_dump_json(by_alias=True), StructuredDesignResult) == design


@pytest.mark.asyncio
async def test_design_with_tool_round_trip(pipeline, fake_client, responses, design_json, sample_brief):
    """The built-in conditions tool re-runs grounding for the model."""
    fake_client.models.generate_content.side_effect = [
        responses.text("Around 50F and foggy", sources=["https://w.example/london"]),
        responses.function_call("get_location_conditions", {"location": "London"}),
        responses.text("Still 50F and foggy"),
        responses.text(design_json),
        responses.image(),
    ]

    design = await pipeline.generate_design(sample_brief)

    assert design.real_weather.sources == ["https://w.example/london"]
    tool_turn = fake_client.models.generate_content.call_args_list[3].kwargs["contents"][2]
    result = tool_turn.parts[0].function_response.response["result"]
    assert result["data"]["condition"] == "Still 50F and foggy"
    assert result["data"]["temp"] == 50


@pytest.mark.asyncio
async def test_design_with_unregistered_tool(pipeline, fake_client, responses, sample_brief):
    fake_client.models.generate_content.side_effect = [
        responses.text("Around 50F"),
        responses.function_call("order_fabric", {"meters": 12}),
    ]

    with pytest.raises(DesignGenerationFailed) as exc_info:
        await pipeline.generate_design(sample_brief)

    assert isinstance(exc_info.value.__cause__, UnexpectedToolCall)


@pytest.mark.asyncio
async def test_design_fatal_grounding_outage(gemini_api, fake_client, sample_brief):
    pipeline = CostumePipeline(gemini_api, policies=StagePolicies(grounding=StagePolicy.FATAL), sleep=no_sleep)
    fake_client.models.generate_content.side_effect = [httpx.ConnectError("search unavailable")]

    with pytest.raises(DesignGenerationFailed, match="Grounding failed") as exc_info:
        await pipeline.generate_design(sample_brief)

    assert isinstance(exc_info.value.__cause__, TransportError)
    assert fake_client.models.generate_content.call_count == 1


@pytest.mark.asyncio
async def test_design_concept_art_failure_is_not_fatal(pipeline, fake_client, responses, design_json, sample_brief):
    fake_client.models.generate_content.side_effect = [
        responses.text("Around 50F"),
        responses.text(design_json),
        httpx.ReadTimeout("image model timed out"),
    ]

    design = await pipeline.generate_design(sample_brief)

    assert design.concept_art_url is None


@pytest.mark.asyncio
async def test_generate_garment_asset(pipeline, fake_client, responses):
    fake_client.models.generate_content.side_effect = [responses.image(b"coat", "image/png")]

    locator = await pipeline.generate_garment_asset("Charcoal wool trench coat", size="2K")

    assert locator == "data:image/png;base64," + base64.b64encode(b"coat").decode()
    kwargs = fake_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == ModelSelection().garment_asset
    assert kwargs["config"].image_config.image_size == "2K"
    assert "Charcoal wool trench coat" in kwargs["contents"][0].parts[0].text


@pytest.mark.asyncio
async def test_generate_garment_asset_rejects_unknown_size(pipeline, fake_client):
    with pytest.raises(ValueError, match="Unsupported image size"):
        await pipeline.generate_garment_asset("Coat", size="8K")

    fake_client.models.generate_content.assert_not_called()


@pytest.mark.asyncio
async def test_edit_garment_image(pipeline, fake_client, responses):
    fake_client.models.generate_content.side_effect = [responses.image(b"blue-coat")]

    locator = await pipeline.edit_garment_image(b"coat", "Make it navy blue", mime_type="image/jpeg")

    assert locator == to_data_url("image/png", b"blue-coat")
    kwargs = fake_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == ModelSelection().image_edit
    assert kwargs["contents"][0].parts[0].inline_data.mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_generate_virtual_fit(pipeline, fake_client, responses):
    fake_client.models.generate_content.side_effect = [responses.image(b"fitted")]

    locator = await pipeline.generate_virtual_fit(
        b"actor",
        b"gown",
        "Red velvet gown",
        context="Ballroom at night",
        sim_config=SimulationConfig(physics="wet", lighting="neon", actor_constraints="Knee brace"),
    )

    assert locator == to_data_url("image/png", b"fitted")
    kwargs = fake_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == ModelSelection().virtual_fit
    parts = kwargs["contents"][0].parts
    assert len(parts) == 3
    assert [parts[1].inline_data.data, parts[2].inline_data.data] == [b"actor", b"gown"]
    directive = parts[0].text
    assert directive.index("Ballroom at night") < directive.index("damp")
    assert "Knee brace" in directive


@pytest.mark.asyncio
async def test_generate_virtual_fit_without_image(pipeline, fake_client, responses):
    fake_client.models.generate_content.side_effect = [responses.text("Cannot composite")]

    with pytest.raises(NoArtifactProduced):
        await pipeline.generate_virtual_fit(b"actor", b"gown", "Red velvet gown")


@pytest.mark.asyncio
async def test_analyze_fit_compatibility(pipeline, fake_client, responses):
    fake_client.models.generate_content.side_effect = [responses.text(json.dumps({
        "compatibilityScore": 90,
        "safetyIssues": [],
        "fabricNotes": "Light and breathable",
        "movementPrediction": "Full range",
    }))]

    report = await pipeline.analyze_fit_compatibility(to_data_url("image/png", b"fitted"), "None")

    assert report.compatibility_score == 90
    assert fake_client.models.generate_content.call_args.kwargs["model"] == ModelSelection().fit_analysis


@pytest.mark.asyncio
async def test_stress_test_video_maps_idle_to_walking(pipeline, fake_client, responses):
    fake_client.models.generate_videos.return_value = responses.video(done=False)
    fake_client.operations.get.side_effect = [
        responses.video(done=False),
        responses.video(done=True, uri=VIDEO_URI),
    ]

    locator = await pipeline.generate_stress_test_video(to_data_url("image/jpeg", b"fitted"), "idle")

    assert locator == VIDEO_URI + "&key=test-key"
    kwargs = fake_client.models.generate_videos.call_args.kwargs
    assert kwargs["model"] == ModelSelection().video
    assert "character walking" in kwargs["prompt"]
    assert kwargs["image"].mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_stress_test_video_keeps_other_actions(pipeline, fake_client, responses):
    fake_client.models.generate_videos.return_value = responses.video(done=True, uri=VIDEO_URI)

    await pipeline.generate_stress_test_video(to_data_url("image/png", b"fitted"), "fighting")

    assert "character fighting" in fake_client.models.generate_videos.call_args.kwargs["prompt"]


@pytest.mark.asyncio
async def test_stress_test_video_requires_inline_image(pipeline, fake_client):
    with pytest.raises(ValueError, match="data URL"):
        await pipeline.generate_stress_test_video("https://cdn.example/fit.png", "running")

    fake_client.models.generate_videos.assert_not_called()


@pytest.mark.asyncio
async def test_stress_test_video_failure(pipeline, fake_client, responses):
    fake_client.models.generate_videos.return_value = responses.video(done=True)

    with pytest.raises(VideoGenerationFailed):
        await pipeline.generate_stress_test_video(to_data_url("image/png", b"fitted"), "running")


@pytest.mark.asyncio
async def test_transcribe_and_analyze(pipeline, fake_client, responses):
    fake_client.models.generate_content.side_effect = [
        responses.text("EXT. DOCKS - DAWN"),
        responses.text("Victorian, damp, grey"),
    ]

    assert await pipeline.transcribe_audio(b"mp3") == "EXT. DOCKS - DAWN"
    assert await pipeline.analyze_video(b"mp4") == "Victorian, damp, grey"
    models = [c.kwargs["model"] for c in fake_client.models.generate_content.call_args_list]
    assert models == [ModelSelection().transcription, ModelSelection().video_analysis]


def test_from_env_uses_model_overrides(monkeypatch):
    monkeypatch.setattr("util.gemini.get_gemini_api_key", lambda: "AIza-from-env")
    monkeypatch.setenv("COSTUME_DESIGN_MODEL", "gemini-exp-design")

    pipeline = CostumePipeline.from_env()

    assert pipeline.models.design == "gemini-exp-design"
    assert pipeline.synthesizer.models.design == "gemini-exp-design"


def test_all_errors_share_base():
    assert issubclass(DesignGenerationFailed, CostumePipelineError)
