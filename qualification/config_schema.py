"""
Pydantic schema for qualification configuration documents.

Validates configuration coming from the API or from storage before it
is turned into the frozen QualificationConfig dataclasses. Missing
optional sections fall back to the stock MEDDPICC defaults.
"""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .pillars import (
    DEFAULT_PILLAR_MAX_SCORE,
    DEFAULT_PILLAR_MIN_FOR_STAGE,
    CoachingPromptRule,
    PillarDefinition,
    QualificationConfig,
    QuestionDefinition,
    RiskRule,
    ScoreThresholds,
    ScoringOption,
    StageRequirement,
    default_config,
)

RiskLevelName = Literal["critical", "high", "medium", "low"]


class OptionSchema(BaseModel):
    """A selectable answer and its raw score."""
    value: str = Field(..., min_length=1)
    score: int = Field(..., ge=0)
    label: Optional[str] = None


class QuestionSchema(BaseModel):
    id: str = Field(..., min_length=1)
    text: str = ""
    options: List[OptionSchema] = Field(..., min_length=1)
    answer_type: str = "single-select"
    tooltip: str = ""


class PillarSchema(BaseModel):
    id: str = Field(..., min_length=1)
    title: Optional[str] = None
    description: str = ""
    weight: float = Field(default=1.0, gt=0)
    questions: List[QuestionSchema] = []
    success_criteria: List[str] = []
    coaching_tips: List[str] = []
    critical_actions: List[str] = []
    improvement_actions: List[str] = []
    strength_message: str = ""
    concern_message: str = ""
    primer: str = ""
    max_score: int = Field(default=DEFAULT_PILLAR_MAX_SCORE, gt=0)

    def to_definition(self) -> PillarDefinition:
        return PillarDefinition(
            id=self.id,
            title=self.title or self.id,
            description=self.description,
            weight=self.weight,
            questions=tuple(
                QuestionDefinition(
                    id=q.id,
                    text=q.text,
                    options=tuple(
                        ScoringOption(label=o.label or o.value, value=o.value, score=o.score)
                        for o in q.options
                    ),
                    answer_type=q.answer_type,
                    tooltip=q.tooltip,
                )
                for q in self.questions
            ),
            success_criteria=tuple(self.success_criteria),
            coaching_tips=tuple(self.coaching_tips),
            critical_actions=tuple(self.critical_actions),
            improvement_actions=tuple(self.improvement_actions),
            strength_message=self.strength_message,
            concern_message=self.concern_message,
            primer=self.primer,
            max_score=self.max_score,
        )


class StageSchema(BaseModel):
    stage: str = Field(..., min_length=1)
    min_score: int = Field(..., ge=0)
    required_pillars: List[str] = []
    pillar_min_score: int = Field(default=DEFAULT_PILLAR_MIN_FOR_STAGE, ge=0)


class RiskRuleSchema(BaseModel):
    level: RiskLevelName
    total_below: float = Field(..., ge=0)
    critical_ratio_below: float = Field(..., ge=0)
    confidence_below: float = Field(..., ge=0, le=100)


class CoachingPromptSchema(BaseModel):
    id: str = Field(..., min_length=1)
    pillar: str
    trigger_value: str
    prompt: str
    priority: RiskLevelName = "medium"
    action_items: List[str] = []


class ScoreThresholdsSchema(BaseModel):
    strong: int = Field(default=256, ge=0)
    moderate: int = Field(default=192, ge=0)


class ConfigurationDocument(BaseModel):
    """Complete configuration document as accepted by PUT /configuration."""
    version: Optional[str] = None
    pillars: List[PillarSchema] = Field(..., min_length=1)
    stage_requirements: Optional[List[StageSchema]] = None
    risk_rules: Optional[List[RiskRuleSchema]] = None
    critical_pillars: Optional[List[str]] = None
    confidence_weights: Optional[Dict[str, float]] = None
    coaching_prompts: List[CoachingPromptSchema] = []
    score_thresholds: Optional[ScoreThresholdsSchema] = None
    strength_ratio: Optional[float] = Field(default=None, ge=0)
    critical_ratio: Optional[float] = Field(default=None, ge=0)
    improvement_ratio: Optional[float] = Field(default=None, ge=0)
    concern_ratio: Optional[float] = Field(default=None, ge=0)
    low_confidence_action_threshold: Optional[int] = Field(default=None, ge=0)
    max_coaching_actions: Optional[int] = Field(default=None, ge=0)
    portfolio_risk_ratio: Optional[float] = Field(default=None, ge=0)
    portfolio_improvement_ratio: Optional[float] = Field(default=None, ge=0)
    portfolio_top_n: Optional[int] = Field(default=None, ge=0)
    cap_pillar_scores: Optional[bool] = None
    updated_at: Optional[datetime] = None

    def to_config(self) -> QualificationConfig:
        """Build the immutable configuration. Cross-field checks are left to validate()."""
        defaults = default_config()

        def pick(name: str):
            value = getattr(self, name)
            return getattr(defaults, name) if value is None else value

        if self.stage_requirements is None:
            stages = defaults.stage_requirements
        else:
            stages = tuple(
                StageRequirement(
                    stage=s.stage,
                    min_score=s.min_score,
                    required_pillars=tuple(s.required_pillars),
                    pillar_min_score=s.pillar_min_score,
                )
                for s in self.stage_requirements
            )

        if self.risk_rules is None:
            risk_rules = defaults.risk_rules
        else:
            risk_rules = tuple(
                RiskRule(
                    level=r.level,
                    total_below=r.total_below,
                    critical_ratio_below=r.critical_ratio_below,
                    confidence_below=r.confidence_below,
                )
                for r in self.risk_rules
            )

        thresholds = self.score_thresholds
        updated_at = self.updated_at or datetime.now(timezone.utc)
        if updated_at.tzinfo is None:
            updated_at = updated_at.replace(tzinfo=timezone.utc)

        return QualificationConfig(
            version=self.version or defaults.version,
            pillars=tuple(p.to_definition() for p in self.pillars),
            stage_requirements=stages,
            risk_rules=risk_rules,
            critical_pillars=tuple(pick("critical_pillars")),
            confidence_weights=dict(pick("confidence_weights")),
            coaching_prompts=tuple(
                CoachingPromptRule(
                    id=c.id,
                    pillar=c.pillar,
                    trigger_value=c.trigger_value,
                    prompt=c.prompt,
                    priority=c.priority,
                    action_items=tuple(c.action_items),
                )
                for c in self.coaching_prompts
            ),
            score_thresholds=(
                ScoreThresholds(strong=thresholds.strong, moderate=thresholds.moderate)
                if thresholds else defaults.score_thresholds
            ),
            strength_ratio=pick("strength_ratio"),
            critical_ratio=pick("critical_ratio"),
            improvement_ratio=pick("improvement_ratio"),
            concern_ratio=pick("concern_ratio"),
            low_confidence_action_threshold=pick("low_confidence_action_threshold"),
            max_coaching_actions=pick("max_coaching_actions"),
            portfolio_risk_ratio=pick("portfolio_risk_ratio"),
            portfolio_improvement_ratio=pick("portfolio_improvement_ratio"),
            portfolio_top_n=pick("portfolio_top_n"),
            cap_pillar_scores=pick("cap_pillar_scores"),
            updated_at=updated_at,
        )
