"""
Assessment API Routes for the MEDDPICC qualification engine.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from qualification.answers import ConfidenceLevel
from qualification.models import Assessment
from qualification.service import QualificationService
from ..middleware.metrics import record_assessment_score, record_risk_level
from ..services import get_qualification_service

logger = logging.getLogger(__name__)

router = APIRouter()


# Models
class AnswerIn(BaseModel):
    """A single answer to a MEDDPICC question."""
    pillar: str
    question_id: str
    value: str
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    timestamp: Optional[datetime] = None
    evidence_notes: Optional[str] = None

    def to_raw(self) -> Dict[str, Any]:
        return {
            "pillar": self.pillar,
            "question_id": self.question_id,
            "value": self.value,
            "confidence_level": self.confidence_level.value,
            "timestamp": self.timestamp,
            "evidence_notes": self.evidence_notes,
        }


class AssessmentCreate(BaseModel):
    """Assessment creation request."""
    opportunity_id: str = Field(..., min_length=1)
    answers: List[AnswerIn] = []
    created_by: Optional[str] = None


class AnswersUpdate(BaseModel):
    """Answers to append to an assessment."""
    answers: List[AnswerIn] = Field(..., min_length=1)


def _record(assessment: Assessment):
    record_assessment_score(assessment.total_score)
    record_risk_level(assessment.risk_level.value)


async def _require(service: QualificationService, assessment_id: str) -> Assessment:
    assessment = await service.get_assessment(assessment_id)
    if assessment is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return assessment


# --- Collection ---

@router.post("/assessments", status_code=201)
async def create_assessment(
    request: AssessmentCreate,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    """Score and store a new assessment."""
    assessment = await service.create_assessment(
        request.opportunity_id,
        [a.to_raw() for a in request.answers],
        created_by=request.created_by,
    )
    _record(assessment)
    return assessment.to_dict()


@router.get("/assessments/export")
async def export_assessments(
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    """Export every assessment with portfolio analytics."""
    return await service.export_assessments()


# --- Single assessment ---

@router.get("/assessments/{assessment_id}")
async def get_assessment(
    assessment_id: str,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    assessment = await _require(service, assessment_id)
    return assessment.to_dict()


@router.put("/assessments/{assessment_id}/answers")
async def update_answers(
    assessment_id: str,
    request: AnswersUpdate,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    """Append answers and recompute the assessment."""
    assessment = await service.update_assessment(
        assessment_id, [a.to_raw() for a in request.answers]
    )
    if assessment is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    _record(assessment)
    return assessment.to_dict()


@router.delete("/assessments/{assessment_id}")
async def delete_assessment(
    assessment_id: str,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    if not await service.delete_assessment(assessment_id):
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return {"deleted": True, "id": assessment_id}


@router.get("/opportunities/{opportunity_id}/assessment")
async def get_opportunity_assessment(
    opportunity_id: str,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    """Most recently updated assessment for an opportunity."""
    assessment = await service.get_assessment_by_opportunity(opportunity_id)
    if assessment is None:
        raise HTTPException(
            status_code=404, detail=f"No assessment for opportunity {opportunity_id}"
        )
    return assessment.to_dict()


# --- Derived views ---

@router.get("/assessments/{assessment_id}/insights")
async def get_insights(
    assessment_id: str,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    insights = await service.get_insights(assessment_id)
    if insights is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return {"assessment_id": assessment_id, "insights": [i.to_dict() for i in insights]}


@router.get("/assessments/{assessment_id}/benchmark")
async def get_benchmark_comparison(
    assessment_id: str,
    industry: Optional[str] = Query(None),
    deal_size: Optional[str] = Query(None),
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    comparison = await service.compare_to_benchmark(assessment_id, industry, deal_size)
    if comparison is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return {"assessment_id": assessment_id, **comparison.to_dict()}


@router.get("/assessments/{assessment_id}/coaching-prompts")
async def get_coaching_prompts(
    assessment_id: str,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    prompts = await service.get_coaching_prompts(assessment_id)
    if prompts is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return {"assessment_id": assessment_id, "prompts": [p.to_dict() for p in prompts]}


@router.get("/assessments/{assessment_id}/trend")
async def get_trend(
    assessment_id: str,
    stage: str = Query(..., min_length=1),
    probability: float = Query(..., ge=0, le=100),
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    point = await service.get_trend(assessment_id, stage, probability)
    if point is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return point.to_dict()


@router.get("/assessments/{assessment_id}/export")
async def export_assessment(
    assessment_id: str,
    fmt: str = Query("summary", alias="format", pattern="^(json|csv|summary)$"),
    service: QualificationService = Depends(get_qualification_service),
):
    content = await service.export_assessment(assessment_id, fmt)
    if content is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    media_type = {"json": "application/json", "csv": "text/csv"}.get(fmt, "text/plain")
    return PlainTextResponse(content, media_type=media_type)
