"""Centralized configuration for the costume studio pipeline.

This module provides:
- PROJECT_ROOT and SRC_DIR paths
- Environment variable access with get_env()
- Automatic .env loading
- ModelSelection: which Gemini model serves each pipeline stage

Usage:
    from config import get_gemini_api_key, ModelSelection

    api_key = get_gemini_api_key()
    models = ModelSelection.from_env()
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Calculate paths once at import time
SRC_DIR = Path(__file__).parent.resolve()
PROJECT_ROOT = SRC_DIR.parent.resolve()

# Load .env from project root
_env_path = PROJECT_ROOT / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

API_KEY_ENV = "GEMINI_API_KEY"
MODEL_ENV_PREFIX = "COSTUME_"

# Video job polling
POLL_INTERVAL_SECONDS = 5.0

# Grounding fallback used whenever the location search is unavailable
DEFAULT_TEMPERATURE_F = 72
DEFAULT_CONDITION = "Sunny (Default)"

DEFAULT_OUTPUT_LANGUAGE = "Professional Egyptian Arabic"


def get_env(key: str, default: Optional[str] = None) -> str:
    """Get environment variable value.

    Args:
        key: Environment variable name
        default: Default value if not set. If None and key not found, raises KeyError.

    Returns:
        Environment variable value or default

    Raises:
        KeyError: If key not found and no default provided
    """
    value = os.environ.get(key)
    if value is not None:
        return value
    if default is not None:
        return default
    raise KeyError(f"Environment variable '{key}' not set and no default provided")


def get_gemini_api_key() -> str:
    """Get Gemini API key from environment."""
    return get_env(API_KEY_ENV)


@dataclass(frozen=True)
class ModelSelection:
    """Model identifier per pipeline stage.

    One pipeline serves every backend generation; swapping generations
    means swapping this object, not the pipeline.
    """

    grounding: str = "gemini-3-flash-preview"
    design: str = "gemini-3-pro-preview"
    concept_art: str = "gemini-3-pro-image-preview"
    garment_asset: str = "gemini-3-pro-image-preview"
    image_edit: str = "gemini-2.5-flash-image"
    virtual_fit: str = "gemini-2.5-flash-image"
    fit_analysis: str = "gemini-3-pro-preview"
    transcription: str = "gemini-3-flash-preview"
    video_analysis: str = "gemini-3-pro-preview"
    video: str = "veo-3.1-fast-generate-preview"
    design_thinking_budget: int = 32768

    @classmethod
    def legacy(cls) -> "ModelSelection":
        """Previous backend generation (2.5 text models, Veo 3.0)."""
        return cls(
            grounding="gemini-2.5-flash",
            design="gemini-2.5-pro",
            concept_art="gemini-2.5-flash-image",
            garment_asset="gemini-2.5-flash-image",
            fit_analysis="gemini-2.5-pro",
            transcription="gemini-2.5-flash",
            video_analysis="gemini-2.5-pro",
            video="veo-3.0-fast-generate-001",
            design_thinking_budget=24576,
        )

    @classmethod
    def from_env(cls, base: Optional["ModelSelection"] = None) -> "ModelSelection":
        """Apply COSTUME_<STAGE>_MODEL overrides on top of ``base`` (defaults if None)."""
        base = base or cls()
        overrides = {}
        for f in fields(cls):
            if f.name == "design_thinking_budget":
                budget = os.environ.get(f"{MODEL_ENV_PREFIX}THINKING_BUDGET")
                if budget:
                    overrides[f.name] = int(budget)
                continue
            value = os.environ.get(f"{MODEL_ENV_PREFIX}{f.name.upper()}_MODEL")
            if value:
                overrides[f.name] = value
        return replace(base, **overrides)
