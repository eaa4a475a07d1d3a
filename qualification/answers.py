"""
Answer model and boundary validation for the MEDDPICC engine.

Answers are validated once, when they are accepted. Anything the
configuration does not know about is logged and dropped so the scoring
core only ever sees well-typed input.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .errors import ValidationError
from .pillars import QualificationConfig

logger = logging.getLogger(__name__)


class ConfidenceLevel(Enum):
    """How sure the seller is about an answer."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Answer:
    """A recorded answer to one qualification question."""
    pillar: str
    question_id: str
    value: str
    score: int
    timestamp: datetime
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    evidence_notes: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.pillar, self.question_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pillar": self.pillar,
            "question_id": self.question_id,
            "value": self.value,
            "score": self.score,
            "timestamp": self.timestamp.isoformat(),
            "confidence_level": self.confidence_level.value,
            "evidence_notes": self.evidence_notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Answer":
        return cls(
            pillar=data["pillar"],
            question_id=data["question_id"],
            value=str(data["value"]),
            score=int(data.get("score", 0)),
            timestamp=_parse_timestamp(data.get("timestamp")),
            confidence_level=ConfidenceLevel(data.get("confidence_level", "medium")),
            evidence_notes=data.get("evidence_notes"),
        )


RawAnswer = Union[Answer, Dict[str, Any]]


def _parse_timestamp(value: Any) -> datetime:
    """Parse a timestamp, treating naive values as UTC."""
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise ValueError(f"Unsupported timestamp: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _recency_key(answer: Answer) -> Tuple:
    return (
        answer.timestamp,
        answer.score,
        answer.value,
        answer.confidence_level.value,
        answer.evidence_notes or "",
    )


def latest_answers(answers: Iterable[Answer]) -> List[Answer]:
    """
    Keep the latest answer per (pillar, question).

    The later timestamp wins. Equal timestamps are broken by the higher
    score and then by the remaining fields, so the result does not
    depend on input order. Output keeps first-seen key order.
    """
    latest: Dict[Tuple[str, str], Answer] = {}
    for answer in answers:
        current = latest.get(answer.key)
        if current is None or _recency_key(answer) > _recency_key(current):
            latest[answer.key] = answer
    return list(latest.values())


class AnswerValidator:
    """
    Validates raw answers against a configuration.

    Resolves each answer's score from the question's options, so a
    caller-supplied score is never trusted.
    """

    def __init__(self, config: QualificationConfig):
        self.config = config

    def validate_one(self, raw: RawAnswer) -> Answer:
        """
        Validate a single answer.

        Raises:
            ValidationError: unknown pillar / question / option or bad fields
        """
        data = raw.to_dict() if isinstance(raw, Answer) else dict(raw)
        pillar_id = str(data.get("pillar", ""))
        question_id = str(data.get("question_id", ""))

        pillar = self.config.pillar(pillar_id)
        if pillar is None:
            raise ValidationError(f"Unknown pillar '{pillar_id}'", pillar_id, question_id)

        question = pillar.question(question_id)
        if question is None:
            raise ValidationError(
                f"Unknown question '{question_id}' in pillar '{pillar_id}'", pillar_id, question_id
            )

        value = data.get("value", data.get("answer_value"))
        score = question.option_score(str(value)) if value is not None else None
        if score is None:
            raise ValidationError(
                f"Unknown option '{value}' for question '{question_id}'", pillar_id, question_id
            )

        confidence = data.get("confidence_level") or ConfidenceLevel.MEDIUM.value
        try:
            confidence_level = (
                confidence if isinstance(confidence, ConfidenceLevel) else ConfidenceLevel(str(confidence).lower())
            )
            timestamp = _parse_timestamp(data.get("timestamp"))
        except ValueError as e:
            raise ValidationError(str(e), pillar_id, question_id) from e

        return Answer(
            pillar=pillar_id,
            question_id=question_id,
            value=str(value),
            score=score,
            timestamp=timestamp,
            confidence_level=confidence_level,
            evidence_notes=data.get("evidence_notes"),
        )

    def validate(self, raw_answers: Iterable[RawAnswer]) -> List[Answer]:
        """
        Validate a batch, dropping invalid answers.

        Args:
            raw_answers: Answer objects or dicts with pillar, question_id,
                value, confidence_level, optional timestamp / evidence_notes

        Returns:
            Valid answers in input order
        """
        valid: List[Answer] = []
        for raw in raw_answers:
            try:
                valid.append(self.validate_one(raw))
            except ValidationError as e:
                logger.warning(f"Ignoring answer: {e}")
        return valid

    def rescore(self, answers: Iterable[Answer]) -> List[Answer]:
        """Re-resolve option scores against the current configuration."""
        rescored: List[Answer] = []
        for answer in answers:
            question = self.config.question(answer.pillar, answer.question_id)
            score = question.option_score(answer.value) if question else None
            if score is None:
                logger.warning(
                    f"Dropping answer {answer.pillar}/{answer.question_id}: "
                    f"no longer valid under config {self.config.version}"
                )
                continue
            rescored.append(answer if score == answer.score else replace(answer, score=score))
        return rescored
