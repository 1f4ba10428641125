"""Tests for per-stage failure policies."""

import pytest

from design_pipeline.stages import StagePolicies, StagePolicy, run_stage
from exceptions import TransportError


async def _succeed():
    return "result"


async def _fail():
    raise TransportError("connection reset")


@pytest.mark.unit
class TestRunStage:

    @pytest.mark.asyncio
    async def test_returns_result_on_success(self):
        assert await run_stage("demo", StagePolicy.FATAL, _succeed(), fallback="fallback") == "result"

    @pytest.mark.asyncio
    async def test_best_effort_returns_fallback(self, caplog):
        result = await run_stage("demo", StagePolicy.BEST_EFFORT, _fail(), fallback="fallback")

        assert result == "fallback"
        assert "Stage 'demo' failed" in caplog.text

    @pytest.mark.asyncio
    async def test_fatal_propagates(self):
        with pytest.raises(TransportError, match="connection reset"):
            await run_stage("demo", StagePolicy.FATAL, _fail(), fallback="fallback")

    def test_default_policies(self):
        policies = StagePolicies()

        assert policies.grounding is StagePolicy.BEST_EFFORT
        assert policies.concept_art is StagePolicy.BEST_EFFORT
