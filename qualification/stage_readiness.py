"""
Stage readiness gates for the MEDDPICC engine.

A stage is ready when the total score meets the stage floor and every
required pillar meets the per-pillar floor. Evaluation is pure and is
always done from scratch.
"""

from typing import Dict, List, Optional

from .pillars import QualificationConfig, default_config


class StageReadinessEvaluator:
    """Evaluates pipeline-stage gates against scored pillars."""

    def __init__(self, config: QualificationConfig):
        self.config = config

    def evaluate(self, pillar_scores: Dict[str, int], total_score: float) -> Dict[str, bool]:
        """
        Evaluate every configured stage.

        Args:
            pillar_scores: Weighted (rounded) score per pillar id
            total_score: Aggregate score

        Returns:
            Mapping of stage name to readiness, one key per configured stage
        """
        return {
            stage: not reasons
            for stage, reasons in self.blockers(pillar_scores, total_score).items()
        }

    def blockers(self, pillar_scores: Dict[str, int], total_score: float) -> Dict[str, List[str]]:
        """Explain which gates each stage fails. Empty list means ready."""
        result: Dict[str, List[str]] = {}
        for req in self.config.stage_requirements:
            reasons: List[str] = []
            if total_score < req.min_score:
                reasons.append(f"total score {total_score} below {req.min_score}")
            for pillar_id in req.required_pillars:
                score = pillar_scores.get(pillar_id, 0)
                if score < req.pillar_min_score:
                    reasons.append(f"{pillar_id} score {score} below {req.pillar_min_score}")
            result[req.stage] = reasons
        return result


def evaluate_readiness(
    pillar_scores: Dict[str, int],
    total_score: float,
    config: Optional[QualificationConfig] = None,
) -> Dict[str, bool]:
    """Evaluate stage readiness with the given (or default) configuration."""
    return StageReadinessEvaluator(config or default_config()).evaluate(pillar_scores, total_score)
