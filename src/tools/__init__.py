"""Function-calling tools available to the design conversation."""
from .base import BaseTool, ToolSchema, ToolResponse
from .registry import ToolRegistry
from .location_conditions import LocationConditionsTool

__all__ = [
    'BaseTool',
    'ToolSchema',
    'ToolResponse',
    'ToolRegistry',
    'LocationConditionsTool',
]
