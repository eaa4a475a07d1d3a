"""
Qualification Configuration API Routes.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from qualification.config_schema import ConfigurationDocument
from qualification.service import QualificationService
from ..services import get_qualification_service

logger = logging.getLogger(__name__)

router = APIRouter()


class ConfigurationUpdate(BaseModel):
    """
    Configuration change.

    Either a complete configuration document, or new pillar weights
    applied on top of the active configuration.
    """
    version: str = Field(..., min_length=1)
    config: Optional[ConfigurationDocument] = None
    weights: Optional[Dict[str, float]] = None


@router.get("/configuration")
async def get_configuration(
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    config = await service.get_configuration()
    return config.to_dict()


@router.put("/configuration")
async def update_configuration(
    request: ConfigurationUpdate,
    service: QualificationService = Depends(get_qualification_service),
) -> Dict[str, Any]:
    """Replace the active configuration. Invalid configurations return 422."""
    if request.config is None and request.weights is None:
        raise HTTPException(status_code=400, detail="Provide either 'config' or 'weights'")

    if request.config is not None:
        config = request.config.to_config()
    else:
        current = await service.get_configuration()
        unknown = set(request.weights) - set(current.pillar_ids)
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown pillars: {sorted(unknown)}")
        config = current.with_weights(request.weights)

    config = replace(config, version=request.version, updated_at=datetime.now(timezone.utc))
    updated = await service.update_configuration(config)
    logger.info(f"Configuration updated to {updated.version}")
    return updated.to_dict()
