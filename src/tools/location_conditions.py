"""Tool that lets the design conversation look up conditions at a location."""
import logging
from typing import Awaitable, Callable

from design_pipeline.models import GroundingContext
from .base import BaseTool, ToolSchema, ToolResponse

logger = logging.getLogger(__name__)

ConditionsLookup = Callable[[str], Awaitable[GroundingContext]]


class LocationConditionsTool(BaseTool):
    """Answers get_location_conditions calls with a GroundingContext lookup."""

    def __init__(self, lookup: ConditionsLookup):
        """
        Initialize tool.

        Args:
            lookup: Async callable returning conditions for a location
                (ContextGatherer.gather in production, a fixed table in tests)
        """
        self.lookup = lookup

    @property
    def name(self) -> str:
        """Return tool name."""
        return "get_location_conditions"

    def get_schema(self) -> ToolSchema:
        """Return tool schema for Gemini function calling."""
        return ToolSchema(
            name="get_location_conditions",
            description="Fetch current typical weather conditions (temperature in Fahrenheit and a short condition) for a filming location.",
            parameters={
                "type": "object",
                "properties": {
                    "location": {
                        "type": "string",
                        "description": "City or place name of the filming location"
                    }
                },
                "required": ["location"]
            }
        )

    async def execute(self, location: str) -> ToolResponse:
        """
        Look up conditions.

        Args:
            location: Location name from the model's call

        Returns:
            ToolResponse with the conditions in ``data``
        """
        conditions = await self.lookup(location)
        logger.debug(f"Conditions for {location}: {conditions.condition}")
        return ToolResponse(
            type="conditions",
            message=f"Conditions for {conditions.location}: {conditions.condition}",
            data=conditions.model_dump(by_alias=True),
        )
