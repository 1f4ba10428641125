"""Costume design pipeline: brief -> grounding -> conversation -> validated design."""

from .models import (
    DesignBrief,
    GroundingContext,
    DesignBreakdown,
    ProductionNotes,
    StructuredDesignResult,
    FitAnalysisResult,
    SimulationConfig,
)
from .prompts import compose_simulation_directives, compose_directive_block
from .validate import validate_response, strip_code_fences
from .stages import StagePolicy, StagePolicies, run_stage
from .grounding import ContextGatherer
from .synthesize import DesignSynthesizer

__all__ = [
    'DesignBrief',
    'GroundingContext',
    'DesignBreakdown',
    'ProductionNotes',
    'StructuredDesignResult',
    'FitAnalysisResult',
    'SimulationConfig',
    'compose_simulation_directives',
    'compose_directive_block',
    'validate_response',
    'strip_code_fences',
    'StagePolicy',
    'StagePolicies',
    'run_stage',
    'ContextGatherer',
    'DesignSynthesizer',
]
