"""Shared fixtures for MEDDPICC qualification tests."""

import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Ensure tests run against in-memory stores
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from qualification.answers import Answer, ConfidenceLevel
from qualification.assessment_store import InMemoryAssessmentStore
from qualification.pillars import default_config
from qualification.scoring_model import QualificationScorer
from qualification.service import QualificationService

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

# Question that scores the full 40 raw points per pillar on "yes"
TOP_QUESTION = {
    "metrics": "q_metrics_5",
    "economic_buyer": "q_eb_5",
    "decision_criteria": "q_dc_5",
    "decision_process": "q_dp_5",
    "paper_process": "q_pp_5",
    "implicate_the_pain": "q_ip_5",
    "champion": "q_ch_5",
    "competition": "q_co_5",
}


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def scorer(config):
    return QualificationScorer(config)


@pytest.fixture
def make_answer(config):
    """Build a scored Answer; minutes offsets the timestamp from BASE_TIME."""
    def _make(pillar, question_id, value="yes", confidence="high", minutes=0, notes=None):
        question = config.question(pillar, question_id)
        return Answer(
            pillar=pillar,
            question_id=question_id,
            value=value,
            score=question.option_score(value),
            timestamp=BASE_TIME + timedelta(minutes=minutes),
            confidence_level=ConfidenceLevel(confidence),
            evidence_notes=notes,
        )
    return _make


@pytest.fixture
def full_marks(make_answer):
    """One top-rung 'yes' per pillar: every pillar at its 40 raw cap."""
    return [make_answer(pillar, qid) for pillar, qid in TOP_QUESTION.items()]


@pytest.fixture
def two_pillar_answers(make_answer):
    """Metrics raw 30 and Economic Buyer raw 40, nothing else."""
    return [
        make_answer("metrics", "q_metrics_4", "yes"),
        make_answer("economic_buyer", "q_eb_5", "yes"),
    ]


@pytest.fixture
def raw_answer():
    """Answer payload as accepted at the service boundary."""
    def _raw(pillar, question_id, value="yes", confidence="high", timestamp=None):
        data = {
            "pillar": pillar,
            "question_id": question_id,
            "value": value,
            "confidence_level": confidence,
        }
        if timestamp is not None:
            data["timestamp"] = timestamp
        return data
    return _raw


@pytest.fixture
def service(config):
    return QualificationService(InMemoryAssessmentStore(), config=config)


@pytest.fixture
def client():
    """Create a FastAPI test client with fresh in-memory services."""
    from api.main import create_app
    from api.services import reset_services

    reset_services()
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_services()
