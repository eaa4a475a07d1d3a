"""
Portfolio analytics across many MEDDPICC assessments.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .coaching import CoachingGenerator, Insight, sort_insights
from .models import Assessment, QualificationLevel, RiskLevel, round_half_up
from .pillars import QualificationConfig, default_config

logger = logging.getLogger(__name__)

TOP_INSIGHTS_LIMIT = 10
COMMON_GAPS_LIMIT = 3


@dataclass
class PillarSignal:
    """A pillar whose portfolio-wide mean score needs attention."""
    pillar: str
    average_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"pillar": self.pillar, "average_score": round(self.average_score, 2)}


@dataclass
class PortfolioAnalytics:
    """Summary of a set of assessments."""
    total_assessments: int = 0
    average_score: int = 0
    average_confidence: int = 0
    score_distribution: Dict[str, int] = field(default_factory=dict)
    risk_distribution: Dict[str, int] = field(default_factory=dict)
    pillar_averages: Dict[str, float] = field(default_factory=dict)
    stage_readiness: Dict[str, int] = field(default_factory=dict)
    top_risks: List[PillarSignal] = field(default_factory=list)
    improvement_opportunities: List[PillarSignal] = field(default_factory=list)
    top_insights: List[Insight] = field(default_factory=list)
    common_gaps: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_assessments": self.total_assessments,
            "average_score": self.average_score,
            "average_confidence": self.average_confidence,
            "score_distribution": dict(self.score_distribution),
            "risk_distribution": dict(self.risk_distribution),
            "pillar_averages": {k: round(v, 2) for k, v in self.pillar_averages.items()},
            "stage_readiness": dict(self.stage_readiness),
            "top_risks": [s.to_dict() for s in self.top_risks],
            "improvement_opportunities": [s.to_dict() for s in self.improvement_opportunities],
            "top_insights": [i.to_dict() for i in self.top_insights],
            "common_gaps": {k: list(v) for k, v in self.common_gaps.items()},
        }


class PortfolioAggregator:
    """
    Aggregates assessments into distributions and systemic risk signals.

    Score bands come from the configured thresholds (strong >= 256,
    moderate 192-255, weak < 192 by default). A pillar is a top risk when
    its mean is under 40% of the pillar max and an improvement opportunity
    between 40% and 60%.
    """

    def __init__(self, config: Optional[QualificationConfig] = None):
        self.config = config or default_config()
        self.coaching = CoachingGenerator(self.config)

    def _empty(self) -> PortfolioAnalytics:
        return PortfolioAnalytics(
            score_distribution={level.value: 0 for level in QualificationLevel},
            risk_distribution={level.value: 0 for level in reversed(list(RiskLevel))},
            pillar_averages={pid: 0.0 for pid in self.config.pillar_ids},
            stage_readiness={stage: 0 for stage in self.config.stages},
            common_gaps={pid: [] for pid in self.config.pillar_ids},
        )

    def aggregate(self, assessments: List[Assessment]) -> PortfolioAnalytics:
        """
        Summarize assessments.

        Args:
            assessments: Assessments to include; may be empty

        Returns:
            PortfolioAnalytics (zero-valued for an empty input)
        """
        analytics = self._empty()
        count = len(assessments)
        if not count:
            return analytics

        thresholds = self.config.score_thresholds
        analytics.total_assessments = count
        analytics.average_score = round_half_up(sum(a.total_score for a in assessments) / count)
        analytics.average_confidence = round_half_up(sum(a.confidence_score for a in assessments) / count)

        for a in assessments:
            if a.total_score >= thresholds.strong:
                band = QualificationLevel.STRONG
            elif a.total_score >= thresholds.moderate:
                band = QualificationLevel.MODERATE
            else:
                band = QualificationLevel.WEAK
            analytics.score_distribution[band.value] += 1
            analytics.risk_distribution[a.risk_level.value] += 1
            for stage, ready in a.stage_readiness.items():
                if ready and stage in analytics.stage_readiness:
                    analytics.stage_readiness[stage] += 1

        for pillar in self.config.pillars:
            mean = sum(a.pillar_scores.get(pillar.id, 0) for a in assessments) / count
            analytics.pillar_averages[pillar.id] = mean

            risk_floor = pillar.max_score * self.config.portfolio_risk_ratio
            improvement_ceiling = pillar.max_score * self.config.portfolio_improvement_ratio
            if mean < risk_floor:
                analytics.top_risks.append(PillarSignal(pillar.id, mean))
            elif mean < improvement_ceiling:
                analytics.improvement_opportunities.append(PillarSignal(pillar.id, mean))

        top_n = self.config.portfolio_top_n
        analytics.top_risks = sorted(analytics.top_risks, key=lambda s: s.average_score)[:top_n]
        analytics.improvement_opportunities = sorted(
            analytics.improvement_opportunities, key=lambda s: s.average_score
        )[:top_n]

        insights: List[Insight] = []
        for a in assessments:
            insights.extend(self.coaching.generate_insights(a))
        analytics.top_insights = sort_insights(insights)[:TOP_INSIGHTS_LIMIT]
        analytics.common_gaps = self.common_gaps(assessments)

        logger.debug(
            f"Aggregated {count} assessments: avg={analytics.average_score} "
            f"risks={[s.pillar for s in analytics.top_risks]}"
        )
        return analytics

    def common_gaps(self, assessments: List[Assessment]) -> Dict[str, List[str]]:
        """
        Most frequent coaching prompts per pillar among deals weak in that pillar.

        A deal counts as weak in a pillar when its pillar score is under
        improvement_ratio of the pillar max. Up to three prompt texts are
        kept per pillar, most frequent first.
        """
        gaps: Dict[str, List[str]] = {}
        for pillar in self.config.pillars:
            ceiling = pillar.max_score * self.config.improvement_ratio
            frequency: Counter = Counter()
            for a in assessments:
                if a.pillar_scores.get(pillar.id, 0) >= ceiling:
                    continue
                for rule in self.coaching.match_coaching_prompts(a.answers):
                    if rule.pillar == pillar.id:
                        frequency[rule.prompt] += 1
            gaps[pillar.id] = [prompt for prompt, _ in frequency.most_common(COMMON_GAPS_LIMIT)]
        return gaps
