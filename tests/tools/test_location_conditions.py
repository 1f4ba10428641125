"""Tests for LocationConditionsTool."""
import pytest

from design_pipeline.models import GroundingContext
from tools.location_conditions import LocationConditionsTool


async def fake_lookup(location):
    return GroundingContext(temperature=95, condition="Clear and hot", location=location, sources=["https://w.example"])


def test_tool_schema():
    """Test tool has correct schema."""
    tool = LocationConditionsTool(fake_lookup)
    schema = tool.get_schema()

    assert schema.name == "get_location_conditions"
    assert "location" in schema.parameters["properties"]
    assert schema.parameters["required"] == ["location"]
    assert tool.name == schema.name


@pytest.mark.asyncio
async def test_execute_returns_conditions():
    tool = LocationConditionsTool(fake_lookup)

    response = await tool.execute(location="Cairo")

    assert response.type == "conditions"
    assert response.message == "Conditions for Cairo: Clear and hot"
    assert response.data == {
        "temp": 95,
        "condition": "Clear and hot",
        "location": "Cairo",
        "sources": ["https://w.example"],
    }


@pytest.mark.asyncio
async def test_default_conditions_pass_through():
    async def unavailable(location):
        return GroundingContext.default(location)

    response = await LocationConditionsTool(unavailable).execute(location="Oslo")

    assert response.data["condition"] == "Sunny (Default)"
    assert response.data["temp"] == 72
