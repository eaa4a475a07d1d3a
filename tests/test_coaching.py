"""Tests for coaching actions, insights and competitive position."""

import pytest

from qualification.coaching import (
    CoachingGenerator,
    InsightPriority,
    InsightType,
    VALIDATION_SESSION_ACTION,
)
from qualification.models import RiskLevel


@pytest.fixture
def coaching(config):
    return CoachingGenerator(config)


def _scores(config, value):
    return {pid: value for pid in config.pillar_ids}


# ── Coaching actions ─────────────────────────────────

class TestCoachingActions:
    def test_strong_pillars_need_nothing(self, coaching, config):
        assert coaching.generate_coaching(_scores(config, 40), []) == []

    def test_critical_gap_uses_pillar_order(self, coaching, config):
        actions = coaching.generate_coaching(_scores(config, 0), [])
        assert len(actions) == config.max_coaching_actions
        assert actions[:3] == list(config.pillar("metrics").critical_actions)
        assert actions[3] == config.pillar("economic_buyer").critical_actions[0]

    def test_improvement_band(self, coaching, config):
        scores = _scores(config, 40)
        scores["paper_process"] = 16  # 40%: between critical and improvement
        actions = coaching.generate_coaching(scores, [])
        assert actions == list(config.pillar("paper_process").improvement_actions)

    def test_validation_session_needs_more_than_three_low(self, coaching, config, make_answer):
        scores = _scores(config, 40)
        low = [
            make_answer("metrics", f"q_metrics_{i}", confidence="low") for i in range(2, 5)
        ]
        assert VALIDATION_SESSION_ACTION not in coaching.generate_coaching(scores, low)

        low.append(make_answer("champion", "q_ch_5", confidence="low"))
        assert coaching.generate_coaching(scores, low) == [VALIDATION_SESSION_ACTION]

    def test_superseded_low_answers_not_counted(self, coaching, config, make_answer):
        scores = _scores(config, 40)
        answers = [
            make_answer("metrics", "q_metrics_5", confidence="low", minutes=i) for i in range(5)
        ]
        assert coaching.generate_coaching(scores, answers) == []


# ── Competitive position ─────────────────────────────────

class TestCompetitivePosition:
    def test_strengths_and_concerns(self, coaching, config):
        scores = _scores(config, 24)
        scores["champion"] = 40
        scores["competition"] = 8
        strengths, concerns = coaching.analyze_competitive_position(scores, [])
        assert strengths == [config.pillar("champion").strength_message]
        assert concerns == [config.pillar("competition").concern_message]

    def test_low_confidence_concern_lists_pillars_once(self, coaching, config, make_answer):
        answers = [
            make_answer("metrics", "q_metrics_4", confidence="low"),
            make_answer("metrics", "q_metrics_5", confidence="low"),
            make_answer("champion", "q_ch_5", confidence="low"),
        ]
        _, concerns = coaching.analyze_competitive_position(_scores(config, 24), answers)
        assert concerns == ["Low confidence in: Metrics, Champion"]


# ── Insights ─────────────────────────────────

class TestInsights:
    def test_two_pillar_example(self, scorer, two_pillar_answers):
        assessment = scorer.compute_assessment(None, two_pillar_answers, opportunity_id="opp-1")
        insights = scorer.coaching.generate_insights(assessment)

        ranks = [i.priority.rank for i in insights]
        assert ranks == sorted(ranks, reverse=True)

        critical = [i for i in insights if i.priority == InsightPriority.CRITICAL]
        assert len(critical) == 7  # six empty pillars plus overall
        assert critical[-1].pillar == "overall"

        weakness = [i for i in insights if i.type == InsightType.WEAKNESS]
        assert len(weakness) == 1
        assert weakness[0].priority == InsightPriority.HIGH

        strengths = [i.pillar for i in insights if i.type == InsightType.STRENGTH]
        assert strengths == ["metrics", "economic_buyer"]

    def test_full_marks_only_strengths(self, scorer, full_marks):
        assessment = scorer.compute_assessment(None, full_marks, opportunity_id="opp-1")
        insights = scorer.coaching.generate_insights(assessment)
        assert assessment.risk_level == RiskLevel.LOW
        assert {i.type for i in insights} == {InsightType.STRENGTH}
        assert len(insights) == 8


# ── Coaching prompts ─────────────────────────────────

class TestCoachingPrompts:
    def test_unanswered_pillars_fire(self, coaching, config):
        matched = coaching.match_coaching_prompts([])
        assert [r.id for r in matched] == [r.id for r in config.coaching_prompts]

    def test_trigger_value(self, coaching, make_answer):
        answers = [
            make_answer("economic_buyer", "q_eb_2", "no"),
            make_answer("implicate_the_pain", "q_ip_5", "yes"),
            make_answer("champion", "q_ch_5", "yes"),
            make_answer("metrics", "q_metrics_3", "partial"),
            make_answer("competition", "q_co_5", "yes"),
            make_answer("decision_criteria", "q_dc_5", "yes"),
        ]
        matched = [r.id for r in coaching.match_coaching_prompts(answers)]
        assert matched == ["eb_no_contact", "weak_metrics"]
