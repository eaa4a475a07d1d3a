"""
MEDDPICC Qualification Service.

Facade over the scoring engine and the stores: create / update /
read / delete assessments, portfolio analytics, configuration
management and export.
"""

import asyncio
import csv
import io
import json
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .answers import AnswerValidator, RawAnswer
from .assessment_store import AssessmentStore, ConfigurationStore, InMemoryConfigurationStore
from .benchmarks import BenchmarkCatalog, BenchmarkComparison, compare_to_benchmark
from .coaching import CoachingGenerator, Insight
from .errors import ConfigurationError
from .models import Assessment, QualificationLevel
from .pillars import CoachingPromptRule, QualificationConfig, default_config
from .portfolio import PortfolioAggregator, PortfolioAnalytics
from .scoring_model import QualificationScorer, TrendPoint, track_trend

logger = logging.getLogger(__name__)

EXPORT_SCHEMA_VERSION = "1.0"
EXPORT_FORMATS = ("json", "csv", "summary")
METHODOLOGY = "MEDDPICC"


class QualificationService:
    """
    Async entry point for MEDDPICC qualification.

    Every computation captures the active configuration once, so a
    configuration swap either fully precedes or fully follows it.
    Read-modify-write cycles on one assessment are serialized by a
    per-id lock.
    """

    def __init__(
        self,
        store: AssessmentStore,
        config_store: Optional[ConfigurationStore] = None,
        config: Optional[QualificationConfig] = None,
        default_created_by: str = "system",
        benchmarks: Optional[BenchmarkCatalog] = None,
        export_schema_version: str = EXPORT_SCHEMA_VERSION,
    ):
        """
        Initialize the service.

        Args:
            store: Assessment store
            config_store: Configuration store (in-memory if omitted)
            config: Initial configuration (stock MEDDPICC if omitted)
            default_created_by: Creator recorded when none is given
            benchmarks: Benchmark catalog for comparisons
            export_schema_version: Schema version written into exports
        """
        self.store = store
        self._config = (config or default_config()).validate()
        self.config_store = config_store or InMemoryConfigurationStore(self._config)
        self.default_created_by = default_created_by
        self.benchmarks = benchmarks or BenchmarkCatalog()
        self.export_schema_version = export_schema_version

        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self._config_lock = asyncio.Lock()

    @asynccontextmanager
    async def _assessment_lock(self, assessment_id: str):
        """Hold the per-id lock. The entry is dropped once nobody holds or awaits it."""
        lock = self._locks.get(assessment_id)
        if lock is None:
            lock = self._locks[assessment_id] = asyncio.Lock()
            self._lock_users[assessment_id] = 0
        self._lock_users[assessment_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[assessment_id] -= 1
            if not self._lock_users[assessment_id]:
                del self._lock_users[assessment_id]
                del self._locks[assessment_id]

    # --- Assessments ---

    async def create_assessment(
        self,
        opportunity_id: str,
        answers: Iterable[RawAnswer],
        created_by: Optional[str] = None,
    ) -> Assessment:
        """
        Score a new assessment and store it.

        Invalid answers are dropped; an empty batch yields an all-zero
        assessment.
        """
        config = self._config
        valid = AnswerValidator(config).validate(answers)
        assessment_id = str(uuid.uuid4())

        async with self._assessment_lock(assessment_id):
            assessment = QualificationScorer(config).compute_assessment(
                None,
                valid,
                assessment_id=assessment_id,
                opportunity_id=opportunity_id,
                created_by=created_by or self.default_created_by,
            )
            await self.store.put(assessment.id, assessment)

        logger.info(
            f"Created assessment {assessment.id} for opportunity {opportunity_id}: "
            f"score={assessment.total_score} risk={assessment.risk_level.value}"
        )
        return assessment

    async def update_assessment(
        self,
        assessment_id: str,
        answers: Iterable[RawAnswer],
    ) -> Optional[Assessment]:
        """
        Append answers to an assessment's history and recompute it.

        Returns:
            The updated assessment; the stored one unchanged if no answer
            in the batch is valid; None if the id is unknown
        """
        config = self._config
        validator = AnswerValidator(config)
        valid = validator.validate(answers)

        async with self._assessment_lock(assessment_id):
            existing = await self.store.get(assessment_id)
            if existing is None:
                return None
            if not valid:
                logger.info(f"No valid answers for assessment {assessment_id}, leaving it unchanged")
                return existing

            history = validator.rescore(existing.answers) + valid
            assessment = QualificationScorer(config).compute_assessment(existing, history)
            await self.store.put(assessment_id, assessment)

        logger.info(
            f"Updated assessment {assessment_id} to v{assessment.version}: "
            f"score={assessment.total_score} risk={assessment.risk_level.value}"
        )
        return assessment

    async def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        return await self.store.get(assessment_id)

    async def get_assessment_by_opportunity(self, opportunity_id: str) -> Optional[Assessment]:
        """Most recently updated assessment for an opportunity, or None."""
        return await self.store.get_latest_for_opportunity(opportunity_id)

    async def delete_assessment(self, assessment_id: str) -> bool:
        async with self._assessment_lock(assessment_id):
            deleted = await self.store.delete(assessment_id)
        if deleted:
            logger.info(f"Deleted assessment {assessment_id}")
        return deleted

    # --- Derived views ---

    async def get_insights(self, assessment_id: str) -> Optional[List[Insight]]:
        assessment = await self.store.get(assessment_id)
        if assessment is None:
            return None
        return CoachingGenerator(self._config).generate_insights(assessment)

    async def compare_to_benchmark(
        self,
        assessment_id: str,
        industry: Optional[str] = None,
        deal_size: Optional[str] = None,
    ) -> Optional[BenchmarkComparison]:
        """
        Compare an assessment with the benchmark for a segment.

        Raises:
            ConfigurationError: benchmark has a missing or non-positive pillar score
        """
        assessment = await self.store.get(assessment_id)
        if assessment is None:
            return None
        return compare_to_benchmark(assessment, self.benchmarks.get(industry, deal_size))

    async def get_coaching_prompts(self, assessment_id: str) -> Optional[List[CoachingPromptRule]]:
        assessment = await self.store.get(assessment_id)
        if assessment is None:
            return None
        return CoachingGenerator(self._config).match_coaching_prompts(assessment.answers)

    async def get_trend(
        self,
        assessment_id: str,
        stage: str,
        probability: float,
    ) -> Optional[TrendPoint]:
        assessment = await self.store.get(assessment_id)
        if assessment is None:
            return None
        return track_trend(assessment, stage, probability)

    async def get_portfolio_analytics(self) -> PortfolioAnalytics:
        assessments = await self.store.list_all()
        return PortfolioAggregator(self._config).aggregate(assessments)

    # --- Configuration ---

    async def get_configuration(self) -> QualificationConfig:
        return self._config

    async def update_configuration(self, config: QualificationConfig) -> QualificationConfig:
        """
        Validate, persist and activate a new configuration.

        Existing assessments keep their scores until their next update.

        Raises:
            ConfigurationError: the configuration is invalid
        """
        try:
            config.validate()
        except ConfigurationError as e:
            logger.warning(f"Rejected configuration {config.version}: {e}")
            raise

        async with self._config_lock:
            await self.config_store.save(config)
            self._config = config

        logger.info(f"Activated qualification configuration {config.version}")
        return config

    async def load_configuration(self) -> QualificationConfig:
        """Activate the stored configuration, if one has been saved."""
        stored = await self.config_store.load()
        if stored is None:
            logger.info(f"No stored configuration, using {self._config.version}")
            return self._config

        stored.validate()
        async with self._config_lock:
            self._config = stored
        logger.info(f"Loaded qualification configuration {stored.version}")
        return stored

    # --- Export ---

    async def export_assessments(self) -> Dict[str, Any]:
        """Serialize all assessments with portfolio analytics."""
        config = self._config
        assessments = await self.store.list_all()
        return {
            "schema_version": self.export_schema_version,
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "methodology": METHODOLOGY,
            "config_version": config.version,
            "assessments": [a.to_dict() for a in assessments],
            "analytics": PortfolioAggregator(config).aggregate(assessments).to_dict(),
        }

    async def export_assessment(self, assessment_id: str, fmt: str = "summary") -> Optional[str]:
        """
        Render one assessment as json, csv or a plain-text summary.

        Raises:
            ValueError: unknown format
        """
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format '{fmt}', expected one of {EXPORT_FORMATS}")

        assessment = await self.store.get(assessment_id)
        if assessment is None:
            return None

        if fmt == "json":
            return json.dumps(assessment.to_dict(), indent=2)
        if fmt == "csv":
            return self._csv_export(assessment, self._config)
        return self._summary_export(assessment, self._config)

    def _pillar_rows(self, assessment: Assessment, config: QualificationConfig) -> List[Dict[str, Any]]:
        rows = []
        for pillar in config.pillars:
            score = assessment.pillar_scores.get(pillar.id, 0)
            percentage = score / pillar.max_score * 100 if pillar.max_score else 0.0
            if percentage >= config.strength_ratio * 100:
                level = QualificationLevel.STRONG.value
            elif percentage >= config.improvement_ratio * 100:
                level = QualificationLevel.MODERATE.value
            else:
                level = QualificationLevel.WEAK.value
            rows.append({
                "pillar": pillar.id,
                "title": pillar.title,
                "score": score,
                "max_score": pillar.max_score,
                "percentage": percentage,
                "level": level,
            })
        return rows

    def _csv_export(self, assessment: Assessment, config: QualificationConfig) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Pillar", "Score", "Max Score", "Percentage", "Level"])
        for row in self._pillar_rows(assessment, config):
            writer.writerow([
                row["pillar"], row["score"], row["max_score"], f"{row['percentage']:.1f}%", row["level"],
            ])
        return buffer.getvalue().rstrip("\n")

    def _summary_export(self, assessment: Assessment, config: QualificationConfig) -> str:
        prompts = CoachingGenerator(config).match_coaching_prompts(assessment.answers)
        lines = [
            "MEDDPICC Assessment Summary",
            f"Opportunity ID: {assessment.opportunity_id}",
            f"Overall Score: {assessment.total_score}/{config.max_weighted_score} "
            f"({assessment.qualification_level.value.upper()})",
            f"Risk Level: {assessment.risk_level.value.upper()}",
            f"Confidence: {assessment.confidence_score}%",
            f"Completion: {assessment.completion_percentage:.1f}%",
            f"Last Updated: {assessment.last_updated.date().isoformat()}",
            "",
            "Pillar Breakdown:",
        ]
        for row in self._pillar_rows(assessment, config):
            lines.append(
                f"  {row['title']}: {row['score']}/{row['max_score']} "
                f"({row['percentage']:.1f}% - {row['level']})"
            )
        lines += ["", "Coaching Recommendations:"]
        lines += [f"  - {action}" for action in assessment.coaching_actions]
        lines += [f"  - {prompt.prompt}" for prompt in prompts]
        return "\n".join(lines)
