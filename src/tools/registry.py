"""Registry of tools the design conversation may call."""
import inspect
import logging
from typing import Any, Dict, List, Optional

from google.genai import types

from exceptions import UnexpectedToolCall
from .base import BaseTool, ToolSchema, ToolResponse

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Name -> tool mapping, built once and read-only afterwards."""

    def __init__(self, tools: Optional[List[BaseTool]] = None):
        """
        Initialize registry.

        Args:
            tools: Tools to register up front
        """
        self.tools: Dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool):
        """
        Register a tool.

        Args:
            tool: Tool instance to register
        """
        self.tools[tool.name] = tool

    def get_schemas(self) -> List[ToolSchema]:
        """
        Get all tool schemas for Gemini.

        Returns:
            List of tool schemas
        """
        return [tool.get_schema() for tool in self.tools.values()]

    def as_gemini_tools(self) -> List[types.Tool]:
        """Function declarations wrapped for GenerateContentConfig.tools (empty if none)."""
        schemas = self.get_schemas()
        if not schemas:
            return []
        return [types.Tool(function_declarations=[s.to_declaration() for s in schemas])]

    async def execute_tool(self, tool_name: str, **kwargs: Any) -> ToolResponse:
        """
        Execute a tool by name.

        Args:
            tool_name: Name of tool to execute
            **kwargs: Tool parameters

        Returns:
            Tool response

        Raises:
            UnexpectedToolCall: If the tool is not registered or the
                arguments do not fit its signature
        """
        if tool_name not in self.tools:
            raise UnexpectedToolCall(f"Unknown tool: {tool_name}")
        tool = self.tools[tool_name]
        try:
            inspect.signature(tool.execute).bind(**kwargs)
        except TypeError as e:
            raise UnexpectedToolCall(f"Bad arguments for tool {tool_name}: {e}") from e
        logger.info(f"Executing tool {tool_name} with {kwargs}")
        return await tool.execute(**kwargs)
