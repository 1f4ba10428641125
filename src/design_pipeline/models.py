"""Data models for the costume design pipeline.

Models that carry model-produced JSON use the camelCase keys the
generative backend emits (as aliases) and reject blank strings, so
anything that passes validation is complete.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import DEFAULT_CONDITION, DEFAULT_TEMPERATURE_F


class _TextRecord(BaseModel):
    """Base for records whose string fields must be non-empty."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator('*')
    @classmethod
    def validate_text_not_empty(cls, v):
        """Ensure strings (and strings inside lists) are not blank."""
        if isinstance(v, str) and not v.strip():
            raise ValueError("Text fields cannot be empty")
        if isinstance(v, list) and any(isinstance(item, str) and not item.strip() for item in v):
            raise ValueError("List entries cannot be empty")
        return v


class DesignBrief(BaseModel):
    """Input brief for one design generation."""

    model_config = ConfigDict(frozen=True)

    project_type: str  # e.g., "Feature film", "TV series"
    scene_context: str  # e.g., "EXT. ALLEY - NIGHT. Chase through heavy rain."
    character_profile: str
    psychological_state: str
    filming_location: str
    production_constraints: str = ""

    @field_validator('filming_location')
    @classmethod
    def validate_location_not_empty(cls, v: str) -> str:
        """Ensure the location can be searched."""
        if not v or not v.strip():
            raise ValueError("Filming location cannot be empty")
        return v


class GroundingContext(_TextRecord):
    """Real-world conditions at the filming location."""

    temperature: float = Field(alias="temp")  # Fahrenheit
    condition: str
    location: str
    sources: List[str] = []

    @classmethod
    def default(cls, location: str) -> "GroundingContext":
        """Fallback used when grounding is unavailable."""
        return cls(
            temperature=DEFAULT_TEMPERATURE_F,
            condition=DEFAULT_CONDITION,
            location=location,
            sources=[],
        )

    @property
    def is_default(self) -> bool:
        """True when this is the fallback context rather than a search result."""
        return self == GroundingContext.default(self.location)


class DesignBreakdown(_TextRecord):
    basics: str
    layers: str
    shoes: str
    accessories: str
    materials: str
    color_palette: str = Field(alias="colorPalette")


class ProductionNotes(_TextRecord):
    copies: str
    distressing: str
    camera_warnings: str = Field(alias="cameraWarnings")
    weather_alternative: str = Field(alias="weatherAlt")
    budget_alternative: str = Field(alias="budgetAlt")


class StructuredDesignResult(_TextRecord):
    """Validated output of the design conversation."""

    title: str = Field(alias="lookTitle")
    description: str = Field(alias="dramaticDescription")
    breakdown: DesignBreakdown
    rationale: List[str] = Field(min_length=1)
    production_notes: ProductionNotes = Field(alias="productionNotes")
    image_prompt: str = Field(alias="imagePrompt")
    real_weather: GroundingContext = Field(alias="realWeather")
    concept_art_url: Optional[str] = Field(default=None, alias="conceptArtUrl")


class FitAnalysisResult(_TextRecord):
    """Safety and comfort report for a fitted costume image."""

    compatibility_score: float = Field(alias="compatibilityScore", ge=0, le=100)
    safety_issues: List[str] = Field(alias="safetyIssues")
    fabric_notes: str = Field(alias="fabricNotes")
    movement_prediction: str = Field(alias="movementPrediction")


class SimulationConfig(BaseModel):
    """Physics, lighting and pose settings for virtual fitting.

    Unknown values are rejected at construction.
    """

    model_config = ConfigDict(frozen=True, extra='forbid', populate_by_name=True)

    physics: Literal["static", "flow", "heavy", "wet"] = "static"
    lighting: Literal["natural", "studio", "dramatic", "neon"] = "natural"
    action: Literal["idle", "walking", "running", "fighting"] = "idle"
    actor_constraints: Optional[str] = Field(default=None, alias="actorConstraints")


# Response schemas for schema-constrained generation (Gemini OpenAPI subset).
_STRING = {"type": "STRING"}

DESIGN_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "lookTitle": _STRING,
        "dramaticDescription": _STRING,
        "breakdown": {
            "type": "OBJECT",
            "properties": {
                key: _STRING
                for key in ("basics", "layers", "shoes", "accessories", "materials", "colorPalette")
            },
            "required": ["basics", "layers", "shoes", "accessories", "materials", "colorPalette"],
        },
        "rationale": {"type": "ARRAY", "items": _STRING},
        "productionNotes": {
            "type": "OBJECT",
            "properties": {
                key: _STRING
                for key in ("copies", "distressing", "cameraWarnings", "weatherAlt", "budgetAlt")
            },
            "required": ["copies", "distressing", "cameraWarnings", "weatherAlt", "budgetAlt"],
        },
        "imagePrompt": _STRING,
        "realWeather": {
            "type": "OBJECT",
            "properties": {
                "temp": {"type": "NUMBER"},
                "condition": _STRING,
                "location": _STRING,
            },
            "required": ["temp", "condition", "location"],
        },
    },
    "required": [
        "lookTitle", "dramaticDescription", "breakdown", "rationale",
        "productionNotes", "imagePrompt", "realWeather",
    ],
}

FIT_ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "compatibilityScore": {"type": "NUMBER"},
        "safetyIssues": {"type": "ARRAY", "items": _STRING},
        "fabricNotes": _STRING,
        "movementPrediction": _STRING,
    },
    "required": ["compatibilityScore", "safetyIssues", "fabricNotes", "movementPrediction"],
}
