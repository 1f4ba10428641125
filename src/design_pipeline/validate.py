"""Validation of structured (JSON) model responses.

Validation is all-or-nothing: a response either yields a complete,
fully typed model instance or raises MalformedOutput.
"""

import json
import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from exceptions import MalformedOutput

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def strip_code_fences(text: str) -> str:
    """
    Remove a markdown code fence wrapped around a response.

    Handles ```json on the opening line, "json" on its own line after the
    fence, and bare ``` fences. Text without a fence is returned stripped.
    """
    response_text = text.strip()
    if not response_text.startswith("```"):
        return response_text

    lines = response_text.split("\n")
    # Opening fence, possibly carrying the language tag
    lines = lines[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    elif lines and lines[-1].rstrip().endswith("```"):
        lines[-1] = lines[-1].rstrip()[:-3]
    if lines and lines[0].strip().lower() == "json":
        lines = lines[1:]
    return "\n".join(lines).strip()


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse a response that must hold exactly one JSON object.

    Raises:
        MalformedOutput: If the text is empty, not JSON, or not an object
    """
    if not text or not text.strip():
        raise MalformedOutput("Empty response where a JSON object was expected")

    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse response as JSON: {cleaned[:500]}")
        raise MalformedOutput(f"Failed to parse response as JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedOutput(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _describe_errors(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def validate_response(text: str, shape: Type[ModelT]) -> ModelT:
    """
    Validate a raw model response against an expected shape.

    Strict mode is used, so values of the wrong kind are rejected rather
    than coerced (a number where a string is required fails).

    Args:
        text: Raw response text, optionally wrapped in a code fence
        shape: Pydantic model describing the required keys and kinds

    Returns:
        Validated instance of ``shape``

    Raises:
        MalformedOutput: On any parse or validation failure
    """
    data = parse_json_object(text)
    try:
        result = shape.model_validate_json(json.dumps(data), strict=True)
    except ValidationError as e:
        details = _describe_errors(e)
        logger.error(f"{shape.__name__} validation failed: {details}")
        raise MalformedOutput(f"{shape.__name__} validation failed: {details}") from e

    logger.debug(f"Validated {shape.__name__}")
    return result
