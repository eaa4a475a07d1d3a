"""Tests for the qualification API endpoints."""

import pytest

TWO_PILLARS = [
    {"pillar": "metrics", "question_id": "q_metrics_4", "value": "yes", "confidence_level": "high"},
    {"pillar": "economic_buyer", "question_id": "q_eb_5", "value": "yes", "confidence_level": "high"},
]


@pytest.fixture
def created(client):
    resp = client.post(
        "/api/v1/assessments",
        json={"opportunity_id": "opp-1", "answers": TWO_PILLARS, "created_by": "rep"},
    )
    assert resp.status_code == 201
    return resp.json()


def test_root_endpoint(client):
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["service"] == "MEDDPICC Qualification API"
    assert "version" in data


def test_health_endpoint(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["services"]["storage"] == "memory"


def test_metrics_endpoint(client, created):
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "meddpicc_assessment_total_score" in resp.text


# ── Assessments ─────────────────────────────────

def test_create_assessment(created):
    assert created["total_score"] == 88
    assert created["risk_level"] == "critical"
    assert created["version"] == 1
    assert created["created_by"] == "rep"


def test_create_requires_opportunity(client):
    resp = client.post("/api/v1/assessments", json={"answers": TWO_PILLARS})
    assert resp.status_code == 422


def test_get_assessment(client, created):
    resp = client.get(f"/api/v1/assessments/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]


def test_get_missing_assessment(client):
    assert client.get("/api/v1/assessments/nope").status_code == 404
    assert client.delete("/api/v1/assessments/nope").status_code == 404
    assert client.get("/api/v1/assessments/nope/insights").status_code == 404


def test_update_answers(client, created):
    resp = client.put(
        f"/api/v1/assessments/{created['id']}/answers",
        json={"answers": [{"pillar": "champion", "question_id": "q_ch_5", "value": "yes"}]},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["version"] == 2
    assert data["total_score"] == 132


def test_update_with_only_invalid_answers(client, created):
    resp = client.put(
        f"/api/v1/assessments/{created['id']}/answers",
        json={"answers": [{"pillar": "budget", "question_id": "q_1", "value": "yes"}]},
    )
    assert resp.status_code == 200
    assert resp.json()["version"] == 1


def test_opportunity_lookup(client, created):
    resp = client.get("/api/v1/opportunities/opp-1/assessment")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]
    assert client.get("/api/v1/opportunities/opp-404/assessment").status_code == 404


def test_delete_assessment(client, created):
    resp = client.delete(f"/api/v1/assessments/{created['id']}")
    assert resp.status_code == 200
    assert client.get(f"/api/v1/assessments/{created['id']}").status_code == 404


# ── Derived views ─────────────────────────────────

def test_insights(client, created):
    resp = client.get(f"/api/v1/assessments/{created['id']}/insights")
    assert resp.status_code == 200
    insights = resp.json()["insights"]
    assert insights[0]["priority"] == "critical"


def test_benchmark(client, created):
    resp = client.get(
        f"/api/v1/assessments/{created['id']}/benchmark",
        params={"industry": "saas", "deal_size": "large"},
    )
    assert resp.status_code == 200
    assert resp.json()["variance"]["metrics"] == 13


def test_coaching_prompts(client, created):
    resp = client.get(f"/api/v1/assessments/{created['id']}/coaching-prompts")
    assert resp.status_code == 200
    ids = [p["id"] for p in resp.json()["prompts"]]
    assert "no_champion" in ids
    assert "eb_no_contact" not in ids


def test_trend(client, created):
    resp = client.get(
        f"/api/v1/assessments/{created['id']}/trend",
        params={"stage": "engage", "probability": 35},
    )
    assert resp.status_code == 200
    assert resp.json()["total_score"] == 88


def test_single_export(client, created):
    resp = client.get(f"/api/v1/assessments/{created['id']}/export", params={"format": "csv"})
    assert resp.status_code == 200
    assert resp.text.startswith("Pillar,Score,Max Score,Percentage,Level")

    resp = client.get(f"/api/v1/assessments/{created['id']}/export", params={"format": "pdf"})
    assert resp.status_code == 422


def test_export_all(client, created):
    resp = client.get("/api/v1/assessments/export")
    assert resp.status_code == 200
    data = resp.json()
    assert data["schema_version"] == "1.0"
    assert [a["id"] for a in data["assessments"]] == [created["id"]]


def test_portfolio(client, created):
    resp = client.get("/api/v1/analytics/portfolio")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_assessments"] == 1
    assert data["risk_distribution"]["critical"] == 1
    assert data["common_gaps"]["metrics"] == []
    assert len(data["common_gaps"]["champion"]) == 1


# ── Configuration ─────────────────────────────────

def test_get_configuration(client):
    resp = client.get("/api/v1/configuration")
    assert resp.status_code == 200
    data = resp.json()
    assert data["version"] == "1.0.0"
    assert len(data["pillars"]) == 8


def test_update_weights(client, created):
    resp = client.put("/api/v1/configuration", json={"version": "1.1.0", "weights": {"metrics": 2.0}})
    assert resp.status_code == 200
    assert resp.json()["version"] == "1.1.0"

    resp = client.put(
        f"/api/v1/assessments/{created['id']}/answers",
        json={"answers": [{"pillar": "competition", "question_id": "q_co_2", "value": "no"}]},
    )
    assert resp.json()["pillar_scores"]["metrics"] == 60


def test_invalid_configuration_is_422(client):
    resp = client.put("/api/v1/configuration", json={"version": "bad", "weights": {"metrics": 0}})
    assert resp.status_code == 422
    assert client.get("/api/v1/configuration").json()["version"] == "1.0.0"


def test_unknown_pillar_weight(client):
    resp = client.put("/api/v1/configuration", json={"version": "x", "weights": {"budget": 1.0}})
    assert resp.status_code == 400


def test_full_configuration_document(client):
    config = client.get("/api/v1/configuration").json()
    config["pillars"][0]["weight"] = 1.5
    resp = client.put("/api/v1/configuration", json={"version": "2.0.0", "config": config})
    assert resp.status_code == 200
    assert resp.json()["pillars"][0]["weight"] == 1.5


def test_fractional_config_values_are_422(client):
    config = client.get("/api/v1/configuration").json()
    config["pillars"][0]["max_score"] = 40.9
    config["stage_requirements"][0]["min_score"] = 80.9
    config["pillars"][0]["questions"][4]["options"][2]["score"] = 39.99
    resp = client.put("/api/v1/configuration", json={"version": "2.0.0", "config": config})
    assert resp.status_code == 422
    current = client.get("/api/v1/configuration").json()
    assert current["version"] == "1.0.0"
    assert current["pillars"][0]["max_score"] == 40
