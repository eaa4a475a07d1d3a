"""
Benchmark comparison for MEDDPICC assessments.

Benchmarks are reference pillar scores per industry / deal-size
segment. They are read-only inputs and never touched by scoring.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigurationError
from .models import Assessment, round_half_up

logger = logging.getLogger(__name__)

VARIANCE_ALERT_PERCENT = 20
ANY_DEAL_SIZE = "*"


@dataclass(frozen=True)
class Benchmark:
    """Reference pillar scores for one market segment."""
    industry: str
    deal_size: str
    pillar_scores: Dict[str, int]
    stage: str = ""
    typical_weaknesses: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "industry": self.industry,
            "deal_size": self.deal_size,
            "stage": self.stage,
            "pillar_scores": dict(self.pillar_scores),
            "typical_weaknesses": list(self.typical_weaknesses),
        }


@dataclass
class BenchmarkComparison:
    """Per-pillar percentage variance against a benchmark."""
    variance: Dict[str, int] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    benchmark: Optional[Benchmark] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variance": dict(self.variance),
            "recommendations": list(self.recommendations),
            "benchmark": self.benchmark.to_dict() if self.benchmark else None,
        }


def compare_to_benchmark(assessment: Assessment, benchmark: Benchmark) -> BenchmarkComparison:
    """
    Compare an assessment's pillar scores to a benchmark.

    Variance per pillar is round((score - benchmark) / benchmark * 100).
    Pillars more than 20% below get an attention recommendation, more
    than 20% above a leverage recommendation.

    Raises:
        ConfigurationError: benchmark score missing or not positive for a scored pillar
    """
    comparison = BenchmarkComparison(benchmark=benchmark)

    for pillar, score in assessment.pillar_scores.items():
        reference = benchmark.pillar_scores.get(pillar)
        if reference is None or reference <= 0:
            raise ConfigurationError(
                f"Benchmark {benchmark.industry}/{benchmark.deal_size} has no positive "
                f"score for pillar '{pillar}' (got {reference})"
            )

        variance = (score - reference) / reference * 100
        comparison.variance[pillar] = round_half_up(variance)

        if variance < -VARIANCE_ALERT_PERCENT:
            comparison.recommendations.append(
                f"{pillar}: Significantly below industry average - immediate attention needed"
            )
        elif variance > VARIANCE_ALERT_PERCENT:
            comparison.recommendations.append(
                f"{pillar}: Above industry average - leverage this strength"
            )

    return comparison


DEFAULT_BENCHMARK = Benchmark(
    industry="general",
    deal_size=ANY_DEAL_SIZE,
    pillar_scores={
        "metrics": 32,
        "economic_buyer": 28,
        "decision_criteria": 30,
        "decision_process": 26,
        "paper_process": 24,
        "implicate_the_pain": 35,
        "champion": 30,
        "competition": 28,
    },
    typical_weaknesses=("paper_process", "decision_process"),
)


class BenchmarkCatalog:
    """
    Benchmarks keyed by (industry, deal size).

    Lookup falls back from the exact segment to the industry-wide
    segment and then to the general default.
    """

    def __init__(self, benchmarks: Optional[List[Benchmark]] = None, default: Benchmark = DEFAULT_BENCHMARK):
        self.default = default
        self._benchmarks: Dict[Tuple[str, str], Benchmark] = {}
        for benchmark in benchmarks or []:
            self.add(benchmark)

    def add(self, benchmark: Benchmark) -> None:
        key = (benchmark.industry.lower(), benchmark.deal_size.lower())
        self._benchmarks[key] = benchmark

    def get(self, industry: Optional[str] = None, deal_size: Optional[str] = None) -> Benchmark:
        industry_key = (industry or "").lower()
        size_key = (deal_size or ANY_DEAL_SIZE).lower()
        for key in ((industry_key, size_key), (industry_key, ANY_DEAL_SIZE)):
            if key in self._benchmarks:
                return self._benchmarks[key]
        logger.debug(f"No benchmark for {industry}/{deal_size}, using default")
        return self.default

    def __len__(self) -> int:
        return len(self._benchmarks)
