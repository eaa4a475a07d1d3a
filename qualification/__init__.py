"""
MEDDPICC Qualification Module.

This module turns answers about a sales opportunity into:
- Weighted pillar scores and a total score (0-352 by default)
- A confidence score and a risk level (low, medium, high, critical)
- Stage-readiness gates (prospect, engage, acquire, keep)
- Coaching actions, insights, benchmark variance and portfolio analytics
"""

from .answers import Answer, AnswerValidator, ConfidenceLevel, latest_answers
from .assessment_store import (
    AssessmentStore,
    ConfigurationStore,
    InMemoryAssessmentStore,
    InMemoryConfigurationStore,
)
from .benchmarks import Benchmark, BenchmarkCatalog, BenchmarkComparison, compare_to_benchmark
from .coaching import CoachingGenerator, Insight, InsightPriority, InsightType
from .config_schema import ConfigurationDocument
from .errors import ConfigurationError, QualificationError, StorageError, ValidationError
from .models import Assessment, QualificationLevel, RiskLevel
from .pillars import PillarDefinition, QualificationConfig, default_config
from .portfolio import PortfolioAggregator, PortfolioAnalytics
from .scoring_model import QualificationScorer, TrendPoint, compute_assessment, track_trend
from .service import QualificationService
from .stage_readiness import StageReadinessEvaluator, evaluate_readiness

__all__ = [
    "Answer",
    "AnswerValidator",
    "ConfidenceLevel",
    "latest_answers",
    "AssessmentStore",
    "ConfigurationStore",
    "InMemoryAssessmentStore",
    "InMemoryConfigurationStore",
    "Benchmark",
    "BenchmarkCatalog",
    "BenchmarkComparison",
    "compare_to_benchmark",
    "CoachingGenerator",
    "Insight",
    "InsightPriority",
    "InsightType",
    "ConfigurationDocument",
    "ConfigurationError",
    "QualificationError",
    "StorageError",
    "ValidationError",
    "Assessment",
    "QualificationLevel",
    "RiskLevel",
    "PillarDefinition",
    "QualificationConfig",
    "default_config",
    "PortfolioAggregator",
    "PortfolioAnalytics",
    "QualificationScorer",
    "TrendPoint",
    "compute_assessment",
    "track_trend",
    "QualificationService",
    "StageReadinessEvaluator",
    "evaluate_readiness",
]
