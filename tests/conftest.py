"""
Shared pytest fixtures for costume studio tests.

Fake Gemini responses are built from real google.genai types so the
code under test reads .text, .function_calls and .candidates exactly
as it would from the live API.
"""

import os
import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from google.genai import types

DEFAULT_MARKEXPR = "smoke or (not integration and not slow)"

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def pytest_addoption(parser):
    """Add --full flag to run entire test suite"""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite (including integration and slow tests)"
    )


def pytest_configure(config):
    """Configure test run based on flags"""
    if config.getoption("--full"):
        # Only clear default marker if no explicit -m flag was provided
        if config.option.markexpr == DEFAULT_MARKEXPR:
            config.option.markexpr = ""


# ---------------------------------------------------------------------------
# Fake response builders
# ---------------------------------------------------------------------------

def text_response(text, sources=None):
    """Response with one text part and optional grounding sources."""
    metadata = None
    if sources is not None:
        metadata = types.GroundingMetadata(grounding_chunks=[
            types.GroundingChunk(web=types.GroundingChunkWeb(uri=uri, title=f"source {i}"))
            for i, uri in enumerate(sources)
        ])
    return types.GenerateContentResponse(candidates=[
        types.Candidate(
            content=types.Content(role="model", parts=[types.Part(text=text)]),
            grounding_metadata=metadata,
        )
    ])


def function_call_response(name, args, call_id="call-1"):
    """Response in which the model requests a tool call."""
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role="model", parts=[
            types.Part(function_call=types.FunctionCall(id=call_id, name=name, args=args))
        ]))
    ])


def image_response(data=b"\x89PNG fake image", mime_type="image/png"):
    """Response carrying one inline image."""
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role="model", parts=[
            types.Part(text="Here is your image."),
            types.Part(inline_data=types.Blob(data=data, mime_type=mime_type)),
        ]))
    ])


def empty_response():
    """Response with no candidates at all."""
    return types.GenerateContentResponse(candidates=[])


def video_operation(name="operations/video-1", done=False, uri=None):
    """Long-running video operation snapshot."""
    response = None
    if done:
        videos = [types.GeneratedVideo(video=types.Video(uri=uri))] if uri else []
        response = types.GenerateVideosResponse(generated_videos=videos)
    return types.GenerateVideosOperation(name=name, done=done, response=response)


@pytest.fixture
def responses():
    """Namespace of fake response builders."""
    return SimpleNamespace(
        text=text_response,
        function_call=function_call_response,
        image=image_response,
        empty=empty_response,
        video=video_operation,
    )


@pytest.fixture
def fake_client():
    """Stand-in for google.genai.Client; tests script its side effects."""
    return MagicMock(name="genai.Client")


@pytest.fixture
def gemini_api(fake_client):
    """GeminiAPI wired to the fake client."""
    from util.gemini import GeminiAPI

    return GeminiAPI(api_key="test-key", client=fake_client)


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_brief():
    from design_pipeline.models import DesignBrief

    return DesignBrief(
        project_type="Feature film",
        scene_context="EXT. ALLEY - NIGHT. Chasing the suspect through heavy rain.",
        character_profile="Disgraced detective in his 50s",
        psychological_state="Guilt slowly turning into resolve",
        filming_location="London",
        production_constraints="Stunt double needs identical copies",
    )


@pytest.fixture
def design_payload():
    """A complete design as the model would return it."""
    return {
        "lookTitle": "The Drowned Coat",
        "dramaticDescription": "A heavy coat that soaks up the rain like the guilt he carries.",
        "breakdown": {
            "basics": "Grey wool trousers, white shirt",
            "layers": "Oversized charcoal trench coat",
            "shoes": "Rubber-soled leather boots",
            "accessories": "Loose tie, dented wristwatch",
            "materials": "Waxed cotton, wool",
            "colorPalette": "Charcoal, slate, rust",
        },
        "rationale": [
            "The oversized coat hides him from the world.",
            "The loosened tie shows control slipping.",
        ],
        "productionNotes": {
            "copies": "4 copies for rain and stunts",
            "distressing": "Mud at hems, water staining",
            "cameraWarnings": "Avoid white shirt burnout under street lights",
            "weatherAlt": "Add thermal base layer below 45F",
            "budgetAlt": "Thrifted trench with waxing",
        },
        "imagePrompt": "Middle-aged detective in a soaked charcoal trench coat in a rainy alley",
        "realWeather": {"temp": 52, "condition": "Light rain", "location": "London"},
    }


@pytest.fixture
def design_json(design_payload):
    return json.dumps(design_payload)


@pytest.fixture(scope="session")
def check_api_key():
    """Check if Gemini API key is available."""
    from dotenv import load_dotenv
    load_dotenv(PROJECT_ROOT / ".env")
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        pytest.skip("Gemini API key not found. Set GEMINI_API_KEY in .env file.")
    return api_key
