"""Tests for the qualification service facade."""

import asyncio
import csv
import io
import json
from dataclasses import replace

import pytest

from qualification.assessment_store import InMemoryAssessmentStore, InMemoryConfigurationStore
from qualification.errors import ConfigurationError
from qualification.models import RiskLevel
from qualification.service import QualificationService


# ── Create / update ─────────────────────────────────

class TestAssessmentLifecycle:
    @pytest.mark.asyncio
    async def test_create(self, service, raw_answer):
        assessment = await service.create_assessment(
            "opp-1",
            [raw_answer("metrics", "q_metrics_4"), raw_answer("economic_buyer", "q_eb_5")],
            created_by="rep@example.com",
        )
        assert assessment.version == 1
        assert assessment.total_score == 88
        assert assessment.risk_level == RiskLevel.CRITICAL
        assert assessment.created_by == "rep@example.com"
        assert (await service.get_assessment(assessment.id)).total_score == 88

    @pytest.mark.asyncio
    async def test_create_drops_invalid_answers(self, service, raw_answer):
        assessment = await service.create_assessment(
            "opp-1",
            [raw_answer("metrics", "q_metrics_4"), raw_answer("budget", "q_x")],
        )
        assert len(assessment.answers) == 1
        assert assessment.created_by == "system"

    @pytest.mark.asyncio
    async def test_update_increments_version(self, service, raw_answer):
        created = await service.create_assessment("opp-1", [raw_answer("metrics", "q_metrics_4")])
        updated = await service.update_assessment(
            created.id, [raw_answer("economic_buyer", "q_eb_5")]
        )
        assert updated.version == 2
        assert updated.total_score == 88
        assert updated.last_updated >= created.last_updated

    @pytest.mark.asyncio
    async def test_update_keeps_history(self, service, raw_answer):
        created = await service.create_assessment(
            "opp-1", [raw_answer("champion", "q_ch_5", timestamp="2024-03-01T09:00:00Z")]
        )
        updated = await service.update_assessment(
            created.id, [raw_answer("champion", "q_ch_5", "no", timestamp="2024-03-02T09:00:00Z")]
        )
        assert len(updated.answers) == 2
        assert updated.pillar_scores["champion"] == 0

    @pytest.mark.asyncio
    async def test_older_answer_does_not_override(self, service, raw_answer):
        created = await service.create_assessment(
            "opp-1", [raw_answer("champion", "q_ch_5", timestamp="2024-03-02T09:00:00Z")]
        )
        updated = await service.update_assessment(
            created.id, [raw_answer("champion", "q_ch_5", "no", timestamp="2024-03-01T09:00:00Z")]
        )
        assert updated.pillar_scores["champion"] == 44

    @pytest.mark.asyncio
    async def test_update_without_valid_answers_is_noop(self, service, raw_answer):
        created = await service.create_assessment("opp-1", [raw_answer("metrics", "q_metrics_4")])
        result = await service.update_assessment(created.id, [raw_answer("metrics", "q_nope")])
        assert result.version == 1
        assert result.to_dict() == created.to_dict()

    @pytest.mark.asyncio
    async def test_unknown_id(self, service, raw_answer):
        assert await service.get_assessment("missing") is None
        assert await service.update_assessment("missing", [raw_answer("metrics", "q_metrics_4")]) is None
        assert await service.delete_assessment("missing") is False
        assert await service.get_insights("missing") is None
        assert await service.export_assessment("missing", "csv") is None

    @pytest.mark.asyncio
    async def test_delete(self, service):
        created = await service.create_assessment("opp-1", [])
        assert await service.delete_assessment(created.id) is True
        assert await service.get_assessment(created.id) is None

    @pytest.mark.asyncio
    async def test_get_by_opportunity_returns_latest(self, service, raw_answer):
        await service.create_assessment("opp-1", [])
        second = await service.create_assessment("opp-1", [raw_answer("metrics", "q_metrics_4")])
        await service.create_assessment("opp-2", [])
        found = await service.get_assessment_by_opportunity("opp-1")
        assert found.id == second.id
        assert await service.get_assessment_by_opportunity("opp-9") is None

    @pytest.mark.asyncio
    async def test_unknown_ids_leave_no_locks_behind(self, service, raw_answer):
        for i in range(500):
            assert await service.update_assessment(f"missing-{i}", [raw_answer("metrics", "q_metrics_1")]) is None
        assert await service.delete_assessment("missing-0") is False
        assert len(service._locks) == 0

    @pytest.mark.asyncio
    async def test_locks_released_after_concurrent_updates(self, service, raw_answer):
        created = await service.create_assessment("opp-1", [])
        await asyncio.gather(*[
            service.update_assessment(created.id, [raw_answer("metrics", f"q_metrics_{i}")])
            for i in range(1, 6)
        ])
        assert (await service.get_assessment(created.id)).version == 6
        assert service._locks == {}

    @pytest.mark.asyncio
    async def test_get_by_opportunity_uses_last_updated(self, service, scorer):
        older = scorer.compute_assessment(None, [], assessment_id="b-older", opportunity_id="opp-1")
        newer = scorer.compute_assessment(None, [], assessment_id="a-newer", opportunity_id="opp-1")
        older = replace(older, last_updated=newer.last_updated.replace(year=2020))
        # stored last, but updated earlier
        await service.store.put(newer.id, newer)
        await service.store.put(older.id, older)
        assert (await service.get_assessment_by_opportunity("opp-1")).id == "a-newer"

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_serialized(self, service, raw_answer):
        created = await service.create_assessment("opp-1", [])
        pillars = [("metrics", "q_metrics_5"), ("champion", "q_ch_5"), ("competition", "q_co_5")]
        await asyncio.gather(*[
            service.update_assessment(created.id, [raw_answer(p, q)]) for p, q in pillars
        ])
        final = await service.get_assessment(created.id)
        assert final.version == 4
        assert len(final.answers) == 3


# ── Configuration ─────────────────────────────────

class TestConfiguration:
    @pytest.mark.asyncio
    async def test_update_configuration_applies_to_next_update(self, service, raw_answer):
        created = await service.create_assessment("opp-1", [raw_answer("metrics", "q_metrics_4")])
        config = await service.get_configuration()
        await service.update_configuration(
            replace(config.with_weights({"metrics": 2.0}), version="1.1.0")
        )

        stale = await service.get_assessment(created.id)
        assert stale.pillar_scores["metrics"] == 36

        updated = await service.update_assessment(created.id, [raw_answer("champion", "q_ch_2", "no")])
        assert updated.pillar_scores["metrics"] == 60
        assert updated.config_version == "1.1.0"

    @pytest.mark.asyncio
    async def test_invalid_configuration_rejected(self, service):
        config = await service.get_configuration()
        with pytest.raises(ConfigurationError):
            await service.update_configuration(config.with_weights({"metrics": -1.0}))
        assert (await service.get_configuration()).pillar("metrics").weight == 1.2

    @pytest.mark.asyncio
    async def test_load_configuration_from_store(self, config):
        stored = replace(config.with_weights({"champion": 1.5}), version="2.0.0")
        service = QualificationService(
            InMemoryAssessmentStore(), config_store=InMemoryConfigurationStore(stored)
        )
        assert (await service.get_configuration()).version == "1.0.0"
        loaded = await service.load_configuration()
        assert loaded.version == "2.0.0"
        assert (await service.get_configuration()).pillar("champion").weight == 1.5

    @pytest.mark.asyncio
    async def test_load_configuration_without_stored(self):
        service = QualificationService(
            InMemoryAssessmentStore(), config_store=InMemoryConfigurationStore()
        )
        assert (await service.load_configuration()).version == "1.0.0"


# ── Analytics and export ─────────────────────────────────

class TestExport:
    @pytest.mark.asyncio
    async def test_export_document(self, service, raw_answer):
        await service.create_assessment("opp-1", [raw_answer("metrics", "q_metrics_4")])
        await service.create_assessment("opp-2", [])
        document = await service.export_assessments()

        assert document["schema_version"] == "1.0"
        assert document["methodology"] == "MEDDPICC"
        assert "exported_at" in document
        assert len(document["assessments"]) == 2
        assert document["analytics"]["total_assessments"] == 2
        json.dumps(document)

    @pytest.mark.asyncio
    async def test_export_round_trip_reproduces_scores(self, service, raw_answer):
        await service.create_assessment(
            "opp-1",
            [
                raw_answer("metrics", "q_metrics_4"),
                raw_answer("economic_buyer", "q_eb_5", confidence="low"),
                raw_answer("champion", "q_ch_3", "partial", confidence="medium"),
            ],
        )
        await service.create_assessment("opp-2", [raw_answer("paper_process", "q_pp_2", "partial")])
        document = await service.export_assessments()

        for exported in document["assessments"]:
            updated = await service.update_assessment(exported["id"], exported["answers"])
            assert updated.pillar_scores == exported["pillar_scores"]
            assert updated.total_score == exported["total_score"]

    @pytest.mark.asyncio
    async def test_single_assessment_formats(self, service, raw_answer):
        created = await service.create_assessment("opp-1", [raw_answer("metrics", "q_metrics_4")])

        as_json = json.loads(await service.export_assessment(created.id, "json"))
        assert as_json["total_score"] == 36

        rows = list(csv.reader(io.StringIO(await service.export_assessment(created.id, "csv"))))
        assert rows[0] == ["Pillar", "Score", "Max Score", "Percentage", "Level"]
        assert rows[1] == ["metrics", "36", "40", "90.0%", "strong"]
        assert len(rows) == 9

        summary = await service.export_assessment(created.id, "summary")
        assert "Opportunity ID: opp-1" in summary
        assert "Overall Score: 36/352 (WEAK)" in summary

        with pytest.raises(ValueError):
            await service.export_assessment(created.id, "xml")

    @pytest.mark.asyncio
    async def test_portfolio_and_views(self, service, raw_answer):
        created = await service.create_assessment("opp-1", [raw_answer("economic_buyer", "q_eb_2", "no")])
        analytics = await service.get_portfolio_analytics()
        assert analytics.total_assessments == 1

        prompts = await service.get_coaching_prompts(created.id)
        assert "eb_no_contact" in [p.id for p in prompts]

        comparison = await service.compare_to_benchmark(created.id, "saas", "large")
        assert comparison.variance["economic_buyer"] == -100

        trend = await service.get_trend(created.id, "prospect", 10.0)
        assert trend.total_score == created.total_score
