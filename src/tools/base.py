"""Tool contracts for the design conversation's function calls."""
from abc import ABC, abstractmethod
from typing import Dict, Any
from pydantic import BaseModel

from google.genai import types


class ToolSchema(BaseModel):
    """Declaration the design model sees for one callable tool."""
    name: str
    description: str
    parameters: Dict[str, Any]  # JSON Schema object for the call arguments

    def to_declaration(self) -> types.FunctionDeclaration:
        return types.FunctionDeclaration(
            name=self.name,
            description=self.description,
            parameters_json_schema=self.parameters,
        )


class ToolResponse(BaseModel):
    """Result handed back to the model in the function-response turn."""
    type: str  # "conditions" for location weather lookups
    message: str
    data: Dict[str, Any] | None = None

    def to_part(self, call: types.FunctionCall) -> types.Part:
        """Wrap this result as the answer to ``call``, echoing its id and name."""
        return types.Part(
            function_response=types.FunctionResponse(
                id=call.id,
                name=call.name,
                response={"result": self.model_dump()},
            )
        )


class BaseTool(ABC):
    """A function the design model may call once per conversation."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Declared function name; the registry routes calls by it."""

    @abstractmethod
    def get_schema(self) -> ToolSchema:
        pass

    @abstractmethod
    async def execute(self, **kwargs) -> ToolResponse:
        """Run the tool with the model's call arguments."""
