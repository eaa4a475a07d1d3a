"""
Coaching and insight generation for the MEDDPICC engine.

Turns pillar performance into remediation actions and prioritized
insights. All text comes from configured templates.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from .answers import Answer, ConfidenceLevel, latest_answers
from .models import Assessment, RiskLevel
from .pillars import CoachingPromptRule, PillarDefinition, QualificationConfig

logger = logging.getLogger(__name__)

VALIDATION_SESSION_ACTION = (
    "Schedule discovery sessions to validate assumptions and increase confidence"
)
CONFIDENCE_INSIGHT_THRESHOLD = 60


class InsightType(Enum):
    STRENGTH = "strength"
    WEAKNESS = "weakness"
    OPPORTUNITY = "opportunity"
    RISK = "risk"


class InsightPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3, "critical": 4}[self.value]


@dataclass
class Insight:
    """A single strength / weakness / risk observation."""
    type: InsightType
    pillar: str
    description: str
    recommendation: str
    priority: InsightPriority
    impact: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "pillar": self.pillar,
            "description": self.description,
            "recommendation": self.recommendation,
            "priority": self.priority.value,
            "impact": self.impact,
        }


def sort_insights(insights: Iterable[Insight]) -> List[Insight]:
    """Sort by priority, most severe first. Equal priorities keep their order."""
    return sorted(insights, key=lambda i: i.priority.rank, reverse=True)


class CoachingGenerator:
    """
    Produces coaching actions, insights and competitive position.

    Pillars are always walked in configuration order, which doubles as
    sales-process priority; truncation keeps the earliest pillars.
    """

    def __init__(self, config: QualificationConfig):
        self.config = config

    def _percentage(self, pillar: PillarDefinition, pillar_scores: Dict[str, int]) -> float:
        return pillar_scores.get(pillar.id, 0) / pillar.max_score

    def critical_actions(self, pillar: PillarDefinition) -> List[str]:
        if pillar.critical_actions:
            return list(pillar.critical_actions)
        return [f"Address critical gaps in {pillar.title} pillar"]

    def improvement_actions(self, pillar: PillarDefinition) -> List[str]:
        if pillar.improvement_actions:
            return list(pillar.improvement_actions)
        return [f"Strengthen {pillar.title} pillar positioning"]

    def generate_coaching(self, pillar_scores: Dict[str, int], answers: List[Answer]) -> List[str]:
        """
        Build the prioritized remediation list.

        Args:
            pillar_scores: Weighted (rounded) score per pillar id
            answers: Answers behind the scores

        Returns:
            At most ``max_coaching_actions`` actions
        """
        actions: List[str] = []
        for pillar in self.config.pillars:
            percentage = self._percentage(pillar, pillar_scores)
            if percentage < self.config.critical_ratio:
                actions.extend(self.critical_actions(pillar))
            elif percentage < self.config.improvement_ratio:
                actions.extend(self.improvement_actions(pillar))

        low = [
            a for a in latest_answers(answers)
            if a.confidence_level == ConfidenceLevel.LOW
        ]
        if len(low) > self.config.low_confidence_action_threshold:
            actions.append(VALIDATION_SESSION_ACTION)

        return actions[: self.config.max_coaching_actions]

    def analyze_competitive_position(
        self,
        pillar_scores: Dict[str, int],
        answers: List[Answer],
    ) -> Tuple[List[str], List[str]]:
        """Return (competitive strengths, areas of concern)."""
        strengths: List[str] = []
        concerns: List[str] = []

        for pillar in self.config.pillars:
            percentage = self._percentage(pillar, pillar_scores)
            if percentage >= self.config.strength_ratio:
                strengths.append(pillar.strength_message or f"Strong {pillar.title} positioning")
            elif percentage < self.config.concern_ratio:
                concerns.append(pillar.concern_message or f"Concerns in {pillar.title} area")

        low_pillars: List[str] = []
        for answer in latest_answers(answers):
            if answer.confidence_level != ConfidenceLevel.LOW:
                continue
            pillar = self.config.pillar(answer.pillar)
            title = pillar.title if pillar else answer.pillar
            if title not in low_pillars:
                low_pillars.append(title)
        if low_pillars:
            concerns.append(f"Low confidence in: {', '.join(low_pillars)}")

        return strengths, concerns

    def generate_insights(self, assessment: Assessment) -> List[Insight]:
        """Derive prioritized insights from a scored assessment."""
        insights: List[Insight] = []

        for pillar in self.config.pillars:
            if pillar.id not in assessment.pillar_scores:
                continue
            percentage = self._percentage(pillar, assessment.pillar_scores)
            if percentage >= self.config.strength_ratio:
                insights.append(Insight(
                    type=InsightType.STRENGTH,
                    pillar=pillar.id,
                    description=f"Excellent {pillar.title} qualification",
                    recommendation=f"Leverage strong {pillar.title} position in proposal",
                    priority=InsightPriority.MEDIUM,
                    impact="Competitive advantage in this area",
                ))
            elif percentage < self.config.critical_ratio:
                insights.append(Insight(
                    type=InsightType.RISK,
                    pillar=pillar.id,
                    description=f"Critical gap in {pillar.title}",
                    recommendation=self.critical_actions(pillar)[0],
                    priority=InsightPriority.CRITICAL,
                    impact="Deal at risk without immediate action",
                ))

        if assessment.risk_level == RiskLevel.CRITICAL:
            insights.append(Insight(
                type=InsightType.RISK,
                pillar="overall",
                description="Deal at critical risk",
                recommendation="Immediate intervention required across multiple pillars",
                priority=InsightPriority.CRITICAL,
                impact="High probability of deal loss",
            ))

        if assessment.confidence_score < CONFIDENCE_INSIGHT_THRESHOLD:
            insights.append(Insight(
                type=InsightType.WEAKNESS,
                pillar="confidence",
                description="Low confidence in assessment data",
                recommendation="Conduct validation sessions to verify assumptions",
                priority=InsightPriority.HIGH,
                impact="Forecasting accuracy at risk",
            ))

        return sort_insights(insights)

    def match_coaching_prompts(self, answers: List[Answer]) -> List[CoachingPromptRule]:
        """
        Select configured coaching prompts for the current answers.

        A prompt fires when its pillar is unanswered, or when any current
        answer in the pillar has the prompt's trigger value.
        """
        values_by_pillar: Dict[str, List[str]] = {}
        for answer in latest_answers(answers):
            values_by_pillar.setdefault(answer.pillar, []).append(answer.value)

        matched = []
        for rule in self.config.coaching_prompts:
            values = values_by_pillar.get(rule.pillar)
            if not values or rule.trigger_value in values:
                matched.append(rule)
        return matched
