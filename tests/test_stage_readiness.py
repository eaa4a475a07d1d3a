"""Tests for stage readiness gates."""

from dataclasses import replace

import pytest

from qualification.pillars import StageRequirement
from qualification.stage_readiness import StageReadinessEvaluator, evaluate_readiness


@pytest.fixture
def evaluator(config):
    return StageReadinessEvaluator(config)


def _scores(config, value):
    return {pid: value for pid in config.pillar_ids}


class TestStageReadiness:
    def test_every_stage_reported(self, evaluator, config):
        result = evaluator.evaluate({}, 0)
        assert list(result) == config.stages
        assert not any(result.values())

    def test_total_gate(self, evaluator, config):
        scores = _scores(config, 25)
        result = evaluator.evaluate(scores, 200)
        assert result["prospect"] is True
        assert result["engage"] is True
        assert result["acquire"] is False
        assert result["keep"] is False

    def test_required_pillar_gate(self, evaluator, config):
        scores = _scores(config, 40)
        scores["champion"] = 19
        result = evaluator.evaluate(scores, 300)
        assert result["prospect"] is True
        assert result["engage"] is False
        assert result["keep"] is False

    def test_pillar_floor_is_inclusive(self, evaluator, config):
        scores = _scores(config, 20)
        assert evaluator.evaluate(scores, 80)["prospect"] is True

    def test_readiness_never_lost_as_total_rises(self, evaluator, config):
        for pillar_value in (0, 19, 20, 40):
            scores = _scores(config, pillar_value)
            reached = set()
            for total in range(0, config.max_weighted_score + 1):
                result = evaluator.evaluate(scores, total)
                ready = {stage for stage, ok in result.items() if ok}
                assert reached <= ready, (pillar_value, total)
                reached = ready

    def test_readiness_never_lost_as_pillar_rises(self, evaluator, config):
        for pillar in config.pillar_ids:
            scores = _scores(config, 20)
            reached = set()
            for value in range(0, 41):
                scores[pillar] = value
                result = evaluator.evaluate(scores, 300)
                ready = {stage for stage, ok in result.items() if ok}
                assert reached <= ready, (pillar, value)
                reached = ready

    def test_blockers_explain_failures(self, evaluator, config):
        scores = _scores(config, 40)
        scores["metrics"] = 5
        blockers = evaluator.blockers(scores, 90)
        assert blockers["prospect"] == ["metrics score 5 below 20"]
        assert any("below 160" in reason for reason in blockers["engage"])

    def test_custom_stage(self, config):
        custom = replace(
            config,
            stage_requirements=(StageRequirement("pilot", 50, ("competition",), pillar_min_score=10),),
        )
        result = evaluate_readiness({"competition": 10}, 50, custom)
        assert result == {"pilot": True}

    def test_default_config_helper(self, config):
        assert evaluate_readiness(_scores(config, 40), 352) == {
            "prospect": True, "engage": True, "acquire": True, "keep": True,
        }
