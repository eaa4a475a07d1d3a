"""
Qualification configuration model for the MEDDPICC engine.

Holds the pillar definitions, question ladders, weights, stage gates,
risk ladder and coaching templates. A QualificationConfig is immutable;
reconfiguration builds a new object and swaps it in.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError


DEFAULT_PILLAR_MAX_SCORE = 40
DEFAULT_PILLAR_MIN_FOR_STAGE = 20


@dataclass(frozen=True)
class ScoringOption:
    """One selectable answer for a question."""
    label: str
    value: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "value": self.value, "score": self.score}


@dataclass(frozen=True)
class QuestionDefinition:
    """A single-select qualification question."""
    id: str
    text: str
    options: Tuple[ScoringOption, ...]
    answer_type: str = "single-select"
    tooltip: str = ""

    def option_score(self, value: str) -> Optional[int]:
        """Score for an option value, or None if the value is not offered."""
        for option in self.options:
            if option.value == value:
                return option.score
        return None

    def has_option(self, value: str) -> bool:
        return self.option_score(value) is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "answer_type": self.answer_type,
            "tooltip": self.tooltip,
            "options": [o.to_dict() for o in self.options],
        }


@dataclass(frozen=True)
class PillarDefinition:
    """One of the MEDDPICC qualification dimensions."""
    id: str
    title: str
    description: str
    weight: float = 1.0
    questions: Tuple[QuestionDefinition, ...] = ()
    success_criteria: Tuple[str, ...] = ()
    coaching_tips: Tuple[str, ...] = ()
    critical_actions: Tuple[str, ...] = ()
    improvement_actions: Tuple[str, ...] = ()
    strength_message: str = ""
    concern_message: str = ""
    primer: str = ""
    max_score: int = DEFAULT_PILLAR_MAX_SCORE

    def question(self, question_id: str) -> Optional[QuestionDefinition]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "weight": self.weight,
            "questions": [q.to_dict() for q in self.questions],
            "success_criteria": list(self.success_criteria),
            "coaching_tips": list(self.coaching_tips),
            "critical_actions": list(self.critical_actions),
            "improvement_actions": list(self.improvement_actions),
            "strength_message": self.strength_message,
            "concern_message": self.concern_message,
            "primer": self.primer,
            "max_score": self.max_score,
        }


@dataclass(frozen=True)
class StageRequirement:
    """Gate for advancing an opportunity to a pipeline stage."""
    stage: str
    min_score: int
    required_pillars: Tuple[str, ...]
    pillar_min_score: int = DEFAULT_PILLAR_MIN_FOR_STAGE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "min_score": self.min_score,
            "required_pillars": list(self.required_pillars),
            "pillar_min_score": self.pillar_min_score,
        }


@dataclass(frozen=True)
class RiskRule:
    """
    One rung of the risk ladder.

    The rule fires when ANY of its clauses holds. Rules are evaluated in
    order and the first match wins; no match means low risk.
    """
    level: str
    total_below: float
    critical_ratio_below: float
    confidence_below: float

    def matches(self, total_score: float, critical_ratio: float, confidence: float) -> bool:
        return (
            total_score < self.total_below
            or critical_ratio < self.critical_ratio_below
            or confidence < self.confidence_below
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "total_below": self.total_below,
            "critical_ratio_below": self.critical_ratio_below,
            "confidence_below": self.confidence_below,
        }


@dataclass(frozen=True)
class CoachingPromptRule:
    """Answer-conditioned coaching prompt."""
    id: str
    pillar: str
    trigger_value: str
    prompt: str
    priority: str = "medium"
    action_items: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pillar": self.pillar,
            "trigger_value": self.trigger_value,
            "prompt": self.prompt,
            "priority": self.priority,
            "action_items": list(self.action_items),
        }


@dataclass(frozen=True)
class ScoreThresholds:
    """Total-score bands for the strong / moderate / weak qualification level."""
    strong: int = 256
    moderate: int = 192

    def to_dict(self) -> Dict[str, Any]:
        return {"strong": self.strong, "moderate": self.moderate}


RISK_LEVELS = ("critical", "high", "medium", "low")
PROMPT_PRIORITIES = ("critical", "high", "medium", "low")


@dataclass(frozen=True)
class QualificationConfig:
    """
    Complete, versioned configuration injected into every engine component.

    Ratios are fractions of a pillar's max score.
    """
    version: str
    pillars: Tuple[PillarDefinition, ...]
    stage_requirements: Tuple[StageRequirement, ...]
    risk_rules: Tuple[RiskRule, ...]
    critical_pillars: Tuple[str, ...]
    confidence_weights: Dict[str, float] = field(
        default_factory=lambda: {"high": 1.0, "medium": 0.8, "low": 0.6}
    )
    coaching_prompts: Tuple[CoachingPromptRule, ...] = ()
    score_thresholds: ScoreThresholds = field(default_factory=ScoreThresholds)
    strength_ratio: float = 0.8
    critical_ratio: float = 0.3
    improvement_ratio: float = 0.6
    concern_ratio: float = 0.4
    low_confidence_action_threshold: int = 3
    max_coaching_actions: int = 5
    portfolio_risk_ratio: float = 0.4
    portfolio_improvement_ratio: float = 0.6
    portfolio_top_n: int = 5
    # raw pillar sums above max_score are clamped before weighting
    cap_pillar_scores: bool = True
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Lookups ---

    @property
    def pillar_ids(self) -> List[str]:
        return [p.id for p in self.pillars]

    @property
    def stages(self) -> List[str]:
        return [s.stage for s in self.stage_requirements]

    @property
    def max_total_score(self) -> int:
        return sum(p.max_score for p in self.pillars)

    @property
    def max_weighted_score(self) -> int:
        return round(sum(p.max_score * p.weight for p in self.pillars))

    @property
    def total_questions(self) -> int:
        return sum(len(p.questions) for p in self.pillars)

    def pillar(self, pillar_id: str) -> Optional[PillarDefinition]:
        for p in self.pillars:
            if p.id == pillar_id:
                return p
        return None

    def question(self, pillar_id: str, question_id: str) -> Optional[QuestionDefinition]:
        pillar = self.pillar(pillar_id)
        return pillar.question(question_id) if pillar else None

    def with_weights(self, weights: Dict[str, float]) -> "QualificationConfig":
        """Return a copy with the given pillar weights replaced."""
        pillars = tuple(
            replace(p, weight=weights[p.id]) if p.id in weights else p
            for p in self.pillars
        )
        return replace(self, pillars=pillars)

    # --- Validation ---

    def validate(self) -> "QualificationConfig":
        """
        Check internal consistency.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigurationError: on the first problem found
        """
        if not self.pillars:
            raise ConfigurationError("Configuration defines no pillars")

        seen = set()
        for pillar in self.pillars:
            if pillar.id in seen:
                raise ConfigurationError(f"Duplicate pillar id: {pillar.id}")
            seen.add(pillar.id)
            if not pillar.weight or pillar.weight <= 0:
                raise ConfigurationError(f"Pillar {pillar.id} weight must be positive, got {pillar.weight}")
            if pillar.max_score <= 0:
                raise ConfigurationError(f"Pillar {pillar.id} max_score must be positive")
            question_ids = [q.id for q in pillar.questions]
            if len(question_ids) != len(set(question_ids)):
                raise ConfigurationError(f"Duplicate question id in pillar {pillar.id}")
            for q in pillar.questions:
                if not q.options:
                    raise ConfigurationError(f"Question {q.id} has no options")

        for req in self.stage_requirements:
            for pillar_id in req.required_pillars:
                if pillar_id not in seen:
                    raise ConfigurationError(
                        f"Stage {req.stage} requires unknown pillar {pillar_id}"
                    )
        if len(set(self.stages)) != len(self.stages):
            raise ConfigurationError("Duplicate stage in stage requirements")

        if not self.critical_pillars:
            raise ConfigurationError("At least one critical pillar is required")
        for pillar_id in self.critical_pillars:
            if pillar_id not in seen:
                raise ConfigurationError(f"Unknown critical pillar: {pillar_id}")

        if not self.risk_rules:
            raise ConfigurationError("Risk ladder is empty")
        previous = None
        for rule in self.risk_rules:
            if rule.level not in RISK_LEVELS:
                raise ConfigurationError(f"Unknown risk level in ladder: {rule.level}")
            # most severe rung first, thresholds never decreasing
            if previous is not None and (
                RISK_LEVELS.index(rule.level) <= RISK_LEVELS.index(previous.level)
                or rule.total_below < previous.total_below
            ):
                raise ConfigurationError(f"Risk ladder out of order at {rule.level}")
            previous = rule

        for prompt in self.coaching_prompts:
            if prompt.pillar not in seen:
                raise ConfigurationError(f"Coaching prompt {prompt.id} targets unknown pillar {prompt.pillar}")
            if prompt.priority not in PROMPT_PRIORITIES:
                raise ConfigurationError(f"Coaching prompt {prompt.id} has invalid priority {prompt.priority}")

        for level in ("high", "medium", "low"):
            if self.confidence_weights.get(level) is None:
                raise ConfigurationError(f"Missing confidence weight for '{level}'")

        if self.score_thresholds.moderate > self.score_thresholds.strong:
            raise ConfigurationError("Moderate threshold must not exceed strong threshold")

        return self

    # --- Serialization ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "pillars": [p.to_dict() for p in self.pillars],
            "stage_requirements": [s.to_dict() for s in self.stage_requirements],
            "risk_rules": [r.to_dict() for r in self.risk_rules],
            "critical_pillars": list(self.critical_pillars),
            "confidence_weights": dict(self.confidence_weights),
            "coaching_prompts": [c.to_dict() for c in self.coaching_prompts],
            "score_thresholds": self.score_thresholds.to_dict(),
            "strength_ratio": self.strength_ratio,
            "critical_ratio": self.critical_ratio,
            "improvement_ratio": self.improvement_ratio,
            "concern_ratio": self.concern_ratio,
            "low_confidence_action_threshold": self.low_confidence_action_threshold,
            "max_coaching_actions": self.max_coaching_actions,
            "portfolio_risk_ratio": self.portfolio_risk_ratio,
            "portfolio_improvement_ratio": self.portfolio_improvement_ratio,
            "portfolio_top_n": self.portfolio_top_n,
            "cap_pillar_scores": self.cap_pillar_scores,
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QualificationConfig":
        """
        Build a configuration from its dict form.

        The document is validated through ConfigurationDocument, so a
        fractional value for an integer field is rejected instead of being
        truncated. Missing optional sections fall back to the defaults.

        Raises:
            ConfigurationError: if required keys are missing or malformed
        """
        from .config_schema import ConfigurationDocument

        try:
            document = ConfigurationDocument.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Malformed configuration: {e}") from e
        return document.to_config()


# ---------------------------------------------------------------------------
# Default MEDDPICC configuration
# ---------------------------------------------------------------------------

# Option scores for the five rungs of each pillar's question ladder:
# (partial, yes). "No" always scores 0.
_LADDER_SCORES = ((0, 0), (5, 10), (10, 20), (15, 30), (20, 40))


def _ladder(prefix: str, texts: List[str]) -> Tuple[QuestionDefinition, ...]:
    questions = []
    for i, (text, (partial, yes)) in enumerate(zip(texts, _LADDER_SCORES), start=1):
        questions.append(QuestionDefinition(
            id=f"{prefix}_{i}",
            text=text,
            options=(
                ScoringOption("No", "no", 0),
                ScoringOption("Partial", "partial", partial),
                ScoringOption("Yes", "yes", yes),
            ),
            tooltip=f"Expected score: {yes}",
        ))
    return tuple(questions)


DEFAULT_WEIGHTS = {
    "metrics": 1.2,
    "economic_buyer": 1.3,
    "decision_criteria": 1.1,
    "decision_process": 1.0,
    "paper_process": 0.9,
    "implicate_the_pain": 1.2,
    "champion": 1.1,
    "competition": 1.0,
}


def default_pillars() -> Tuple[PillarDefinition, ...]:
    """The eight MEDDPICC pillars in sales-process priority order."""
    return (
        PillarDefinition(
            id="metrics",
            title="Metrics",
            description="Economic impact and quantifiable business value",
            primer="Understanding the measurable business impact that drives the customer's decision.",
            weight=DEFAULT_WEIGHTS["metrics"],
            questions=_ladder("q_metrics", [
                "No customer metric identified",
                "Assumption of the Metrics based on outside information or initial conversations",
                "Reasonably good understanding of the Metrics based on conversations",
                "We strongly understand the Metrics driving the project",
                "We have influenced the metrics",
            ]),
            success_criteria=("Quantified business case agreed with the customer",),
            coaching_tips=("Ask how success will be measured twelve months after go-live",),
            critical_actions=(
                "Schedule business case development session with economic buyer",
                "Request access to current performance metrics and KPIs",
                "Prepare ROI calculator with finance team",
            ),
            improvement_actions=(
                "Validate business case assumptions with stakeholders",
                "Refine ROI calculations with more precise data",
            ),
            strength_message="Strong business case with quantified ROI",
            concern_message="Weak business case - needs quantification",
        ),
        PillarDefinition(
            id="economic_buyer",
            title="Economic Buyer",
            description="The person with budget authority and final decision power",
            primer="Identifying and engaging the person with ultimate budget authority.",
            weight=DEFAULT_WEIGHTS["economic_buyer"],
            questions=_ladder("q_eb", [
                "No economic buyer is identified",
                "We have an assumption of who the Economic Buyer is",
                "We have confirmation of the Economic Buyer from our Champion/Coach",
                "The EB is aware of our organization and our core value propositions",
                "We have had direct engagement with the Economic Buyer",
            ]),
            success_criteria=("Direct meeting held with the economic buyer",),
            coaching_tips=("Ask the champion who signs off on budget of this size",),
            critical_actions=(
                "Identify and map all budget decision makers",
                "Request champion to facilitate economic buyer introduction",
                "Prepare executive summary for C-level presentation",
            ),
            improvement_actions=(
                "Strengthen relationship with economic buyer",
                "Present tailored value proposition to budget holder",
            ),
            strength_message="Excellent access to decision makers",
            concern_message="Limited access to budget decision makers",
        ),
        PillarDefinition(
            id="decision_criteria",
            title="Decision Criteria",
            description="The formal and informal criteria used to make the decision",
            primer="Understanding both formal RFP criteria and informal decision factors.",
            weight=DEFAULT_WEIGHTS["decision_criteria"],
            questions=_ladder("q_dc", [
                "No decision criteria identified",
                "Basic understanding of decision criteria from public sources",
                "Good understanding of decision criteria from stakeholder conversations",
                "We understand both formal and informal decision criteria",
                "We have influenced the decision criteria in our favor",
            ]),
            success_criteria=("Written evaluation criteria shared by the customer",),
            coaching_tips=("Ask which requirement would disqualify a vendor outright",),
            critical_actions=(
                "Request formal evaluation criteria and requirements",
                "Understand technical and business evaluation process",
                "Align solution positioning with stated criteria",
            ),
            improvement_actions=(
                "Influence evaluation criteria in our favor",
                "Provide additional proof points for key requirements",
            ),
            strength_message="Strong alignment with evaluation criteria",
            concern_message="Poor fit with evaluation requirements",
        ),
        PillarDefinition(
            id="decision_process",
            title="Decision Process",
            description="The formal process and timeline for making the decision",
            primer="Understanding the steps, timeline and stakeholders in the final decision.",
            weight=DEFAULT_WEIGHTS["decision_process"],
            questions=_ladder("q_dp", [
                "No decision process identified",
                "Basic assumptions about the decision process",
                "Good understanding of decision process from stakeholders",
                "We understand timeline, steps, and all stakeholders involved",
                "We have influenced or optimized the decision process",
            ]),
            success_criteria=("Mutual close plan agreed with dates and owners",),
            coaching_tips=("Ask what happened the last time they bought something similar",),
            critical_actions=(
                "Map complete decision-making committee and timeline",
                "Understand approval workflows and sign-off requirements",
                "Schedule meetings with all decision stakeholders",
            ),
            improvement_actions=(
                "Optimize engagement strategy for decision timeline",
                "Ensure all stakeholders are properly engaged",
            ),
            strength_message="Well-mapped decision process",
            concern_message="Unclear decision-making process",
        ),
        PillarDefinition(
            id="paper_process",
            title="Paper Process",
            description="The procurement, legal, and administrative requirements",
            primer="Understanding procurement, legal and contract steps needed to close.",
            weight=DEFAULT_WEIGHTS["paper_process"],
            questions=_ladder("q_pp", [
                "No paper process identified",
                "Basic understanding of procurement requirements",
                "Good understanding of legal, procurement, and approval requirements",
                "We understand timeline and have contacts in procurement/legal",
                "We have pre-qualified terms and accelerated the paper process",
            ]),
            success_criteria=("Procurement and legal contacts engaged before proposal",),
            coaching_tips=("Ask for the vendor onboarding checklist early",),
            critical_actions=(
                "Connect with procurement and legal teams early",
                "Review contracting requirements and potential blockers",
                "Prepare necessary compliance and security documentation",
            ),
            improvement_actions=(
                "Accelerate procurement discussions",
                "Address any outstanding legal or compliance issues",
            ),
            strength_message="Smooth procurement and legal path",
            concern_message="Potential procurement/legal obstacles",
        ),
        PillarDefinition(
            id="implicate_the_pain",
            title="Implicate the Pain",
            description="Understanding and quantifying the cost of inaction",
            primer="Identifying and quantifying business pain, urgency and consequences of inaction.",
            weight=DEFAULT_WEIGHTS["implicate_the_pain"],
            questions=_ladder("q_ip", [
                "No pain or business impact identified",
                "Basic understanding of business challenges",
                "Good understanding of pain and some quantification",
                "Strong understanding of pain with cost of inaction quantified",
                "Customer actively articulates urgency and cost of delay",
            ]),
            success_criteria=("Cost of inaction quantified and acknowledged",),
            coaching_tips=("Ask what happens if nothing changes this year",),
            critical_actions=(
                "Conduct cost of inaction analysis workshop",
                "Document business impact of current state problems",
                "Quantify opportunity cost with stakeholders",
            ),
            improvement_actions=(
                "Strengthen urgency messaging with additional stakeholders",
                "Gather more compelling pain point evidence",
            ),
            strength_message="Clear urgency and compelling event",
            concern_message="Low urgency - no compelling event",
        ),
        PillarDefinition(
            id="champion",
            title="Champion",
            description="Internal advocate who sells for you when you're not there",
            primer="Developing an internal champion who advocates throughout the decision.",
            weight=DEFAULT_WEIGHTS["champion"],
            questions=_ladder("q_ch", [
                "No champion identified",
                "Potential champion identified but relationship not developed",
                "Champion relationship developing, provides some insider information",
                "Strong champion who actively advocates and coaches us",
                "Champion has influence with EB and actively sells for us",
            ]),
            success_criteria=("Champion has tested access to the economic buyer",),
            coaching_tips=("Test the champion by asking for something that costs them effort",),
            critical_actions=(
                "Identify potential internal advocates in each department",
                "Schedule relationship building meetings with influencers",
                "Develop champion enablement materials and talking points",
            ),
            improvement_actions=(
                "Enhance champion enablement and support",
                "Expand champion network within organization",
            ),
            strength_message="Powerful internal advocacy network",
            concern_message="Insufficient internal support network",
        ),
        PillarDefinition(
            id="competition",
            title="Competition",
            description="Understanding competitive landscape and positioning",
            primer="Identifying direct, indirect and status-quo competitors and our position against them.",
            weight=DEFAULT_WEIGHTS["competition"],
            questions=_ladder("q_co", [
                "No competition identified or understood",
                "Basic awareness of potential competitors",
                "Good understanding of competitive landscape and positioning",
                "Strong competitive intelligence and differentiation strategy",
                "We have competitive advantage and customer acknowledges our superiority",
            ]),
            success_criteria=("Customer can articulate why we are different",),
            coaching_tips=("Ask who else they are talking to, including doing nothing",),
            critical_actions=(
                "Conduct comprehensive competitive landscape analysis",
                "Develop differentiation strategy and proof points",
                "Prepare competitive battle cards for sales team",
            ),
            improvement_actions=(
                "Reinforce competitive advantages with new proof points",
                "Address any emerging competitive threats",
            ),
            strength_message="Clear competitive differentiation",
            concern_message="Weak competitive position",
        ),
    )


def default_stage_requirements() -> Tuple[StageRequirement, ...]:
    return (
        StageRequirement("prospect", 80, ("implicate_the_pain", "metrics")),
        StageRequirement("engage", 160, ("champion", "economic_buyer", "implicate_the_pain")),
        StageRequirement("acquire", 240, ("decision_criteria", "decision_process", "paper_process")),
        StageRequirement("keep", 280, ("metrics", "champion")),
    )


def default_risk_rules() -> Tuple[RiskRule, ...]:
    return (
        RiskRule("critical", total_below=100, critical_ratio_below=0.3, confidence_below=50),
        RiskRule("high", total_below=180, critical_ratio_below=0.5, confidence_below=65),
        RiskRule("medium", total_below=240, critical_ratio_below=0.7, confidence_below=80),
    )


def default_coaching_prompts() -> Tuple[CoachingPromptRule, ...]:
    return (
        CoachingPromptRule(
            id="eb_no_contact",
            pillar="economic_buyer",
            trigger_value="no",
            prompt="Identify Economic Buyer; request introduction via Champion this week",
            priority="high",
            action_items=(
                "Ask Champion to identify Economic Buyer",
                "Request introduction meeting",
                "Prepare EB-specific value proposition",
            ),
        ),
        CoachingPromptRule(
            id="pain_not_quantified",
            pillar="implicate_the_pain",
            trigger_value="no",
            prompt="Run a 30-min ROI workshop; attach cost-of-inaction calculation to notes",
            priority="high",
            action_items=(
                "Schedule ROI discovery workshop",
                "Prepare cost-of-inaction calculator",
                "Document quantified business impact",
            ),
        ),
        CoachingPromptRule(
            id="no_champion",
            pillar="champion",
            trigger_value="no",
            prompt="Identify and develop internal champion who can provide insider information",
            priority="high",
            action_items=(
                "Map stakeholder relationships",
                "Identify potential champions",
                "Begin champion development strategy",
            ),
        ),
        CoachingPromptRule(
            id="weak_metrics",
            pillar="metrics",
            trigger_value="partial",
            prompt="Conduct deeper discovery to understand and quantify business metrics",
            priority="medium",
            action_items=(
                "Schedule metrics discovery session",
                "Prepare business case template",
                "Validate assumptions with stakeholders",
            ),
        ),
        CoachingPromptRule(
            id="unknown_competition",
            pillar="competition",
            trigger_value="no",
            prompt="Research competitive landscape and develop differentiation strategy",
            priority="medium",
            action_items=(
                "Conduct competitive analysis",
                "Identify key differentiators",
                "Prepare competitive positioning",
            ),
        ),
        CoachingPromptRule(
            id="unclear_criteria",
            pillar="decision_criteria",
            trigger_value="partial",
            prompt="Clarify both formal and informal decision criteria with stakeholders",
            priority="medium",
            action_items=(
                "Review formal RFP criteria",
                "Discover informal decision factors",
                "Align solution to criteria",
            ),
        ),
    )


def default_config() -> QualificationConfig:
    """Build the stock MEDDPICC configuration."""
    return QualificationConfig(
        version="1.0.0",
        pillars=default_pillars(),
        stage_requirements=default_stage_requirements(),
        risk_rules=default_risk_rules(),
        critical_pillars=("economic_buyer", "champion", "implicate_the_pain"),
        coaching_prompts=default_coaching_prompts(),
    )
