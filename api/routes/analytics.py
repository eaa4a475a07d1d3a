"""
Portfolio Analytics API Routes.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from qualification.service import QualificationService
from ..services import get_qualification_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/analytics/portfolio")
async def portfolio_analytics(
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    """Score and risk distributions, pillar averages and systemic risks."""
    analytics = await service.get_portfolio_analytics()
    return analytics.to_dict()
