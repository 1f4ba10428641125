"""Per-stage failure policies.

Each pipeline stage runs under an explicit policy:
- FATAL: any error propagates and aborts the operation
- BEST_EFFORT: errors are logged and a fallback value is returned

The defaults live in StagePolicies; only grounding and concept art are
best-effort.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StagePolicy(str, Enum):
    BEST_EFFORT = "best_effort"
    FATAL = "fatal"


@dataclass(frozen=True)
class StagePolicies:
    """Policy attached to each optional stage of the pipeline."""

    grounding: StagePolicy = StagePolicy.BEST_EFFORT
    concept_art: StagePolicy = StagePolicy.BEST_EFFORT


async def run_stage(stage: str, policy: StagePolicy, work: Awaitable[T], fallback: T) -> T:
    """
    Await one stage under its failure policy.

    Args:
        stage: Stage name used in log messages
        policy: How to treat a failure
        work: Awaitable producing the stage result
        fallback: Value returned when a BEST_EFFORT stage fails

    Returns:
        The stage result, or ``fallback`` after a best-effort failure
    """
    try:
        return await work
    except Exception as e:
        if policy is StagePolicy.FATAL:
            raise
        logger.warning(f"Stage '{stage}' failed, continuing with fallback: {e}")
        return fallback
