"""Centralized exception hierarchy for the costume studio pipeline.

Every failure a public operation can surface derives from
CostumePipelineError. Wrapping always uses ``raise ... from e`` so the
underlying cause stays available for debugging.

Usage:
    from exceptions import MalformedOutput, NoArtifactProduced

    raise MalformedOutput("Missing required key: lookTitle")
    raise NoArtifactProduced("Image model returned no inline image")
"""


class CostumePipelineError(Exception):
    """Base exception for all costume studio pipeline errors."""
    pass


class ConfigurationError(CostumePipelineError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Missing GEMINI_API_KEY
        - Download locator requested from a client built without a key
    """
    pass


class GroundingUnavailable(CostumePipelineError):
    """Raised inside the grounding stage when no usable answer came back.

    Never reaches callers: the grounding stage is best-effort and falls
    back to the default context.
    """
    pass


class MalformedOutput(CostumePipelineError):
    """Raised when a structured model response fails validation.

    Examples:
        - Response is not parseable JSON
        - Required key missing
        - Value of the wrong kind (string vs array vs number)
    """
    pass


class UnexpectedToolCall(CostumePipelineError):
    """Raised when the conversation breaks the tool-calling protocol.

    Examples:
        - A second tool call after the first one was resolved
        - A call naming a tool that is not registered
    """
    pass


class NoArtifactProduced(CostumePipelineError):
    """Raised when an image call returns no inline image payload."""
    pass


class VideoGenerationFailed(CostumePipelineError):
    """Raised when a video job finishes without a result locator."""
    pass


class JobPollingExhausted(VideoGenerationFailed):
    """Raised when a configured poll attempt bound is reached before the job finishes."""
    pass


class TransportError(CostumePipelineError):
    """Raised when a call to the generative backend fails at the network or API level."""
    pass


class DesignGenerationFailed(CostumePipelineError):
    """Raised when the design conversation cannot produce a valid design.

    The specific reason (MalformedOutput, UnexpectedToolCall,
    TransportError) is preserved as __cause__.
    """
    pass
