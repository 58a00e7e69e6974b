"""Confidence scoring for proposed prompt optimizations.

The confidence describes how trustworthy a rewrite looks from its change-set
and the explanation that accompanies it. It does not measure whether the
rewritten prompt actually performs better.
"""

from prompt_autotuner.types import (
    ConfidenceExplanation,
    ConfidenceFactors,
    OptimizationResult,
)

POSITIVE_INDICATORS = (
    "specific improvement",
    "clear benefit",
    "best practice",
    "recommended",
    "will improve",
    "enhances",
    "optimizes",
    "follows convention",
)

UNCERTAINTY_INDICATORS = (
    "might",
    "could",
    "possibly",
    "perhaps",
    "may",
    "unclear",
    "unsure",
    "depends",
    "consider",
)

STRUCTURAL_KEYWORDS = (
    "clarity",
    "structure",
    "organization",
    "format",
    "consistency",
    "readability",
    "maintainability",
    "standard",
)

STRUCTURAL_PHRASES = ("added context", "improved formatting", "clearer instructions")

COMPLEX_CHANGE_MARKERS = ("refactor", "restructure", "significant")

HIGH_RISK_PATTERNS = (
    "delete",
    "remove",
    "significant change",
    "major modification",
    "refactor",
    "restructure",
)

SYSTEM_SCOPE_MARKERS = ("system", "configuration", "global")

FACTOR_WEIGHTS = {
    "change_complexity": 0.25,
    "response_quality": 0.25,
    "validation_results": 0.25,
    "structural_improvements": 0.15,
    "risk_factors": 0.10,
}


def _clamp(value: float) -> float:
    return max(0.1, min(1.0, value))


def analyze_change_complexity(result: OptimizationResult) -> float:
    """Fewer, simpler changes score higher. An empty change-set is neutral (0.5)."""
    changes = result.changes
    if not changes:
        return 0.5

    additions = sum(1 for c in changes if c.type == "addition")
    deletions = sum(1 for c in changes if c.type == "deletion")
    modifications = sum(1 for c in changes if c.type == "modification")

    score = 0.9
    if len(changes) > 20:
        score -= 0.3
    elif len(changes) > 10:
        score -= 0.2
    elif len(changes) > 5:
        score -= 0.1

    if deletions > 3:
        score -= 0.2
    if modifications > additions:
        score -= 0.1

    if any(
        marker in change.description for change in changes for marker in COMPLEX_CHANGE_MARKERS
    ):
        score -= 0.15

    return _clamp(score)


def analyze_response_quality(explanation: str) -> float:
    """Confident, detailed, reasoned explanations score higher."""
    lowered = explanation.lower()
    score = 0.5
    score += 0.1 * sum(1 for phrase in POSITIVE_INDICATORS if phrase in lowered)
    score -= 0.15 * sum(1 for phrase in UNCERTAINTY_INDICATORS if phrase in lowered)

    if len(explanation) > 500:
        score += 0.1
    if len(explanation) < 100:
        score -= 0.2

    if "because" in explanation or "reason" in explanation:
        score += 0.1

    return _clamp(score)


def analyze_structural_improvements(result: OptimizationResult) -> float:
    """Explanations that describe structural and clarity work score higher."""
    explanation = result.explanation
    lowered = explanation.lower()
    score = 0.5
    score += 0.1 * sum(1 for keyword in STRUCTURAL_KEYWORDS if keyword in lowered)
    score += 0.1 * sum(1 for phrase in STRUCTURAL_PHRASES if phrase in explanation)
    return _clamp(score)


def analyze_risk_factors(result: OptimizationResult) -> float:
    """Destructive or wide-reaching changes lower the score."""
    score = 0.9
    for change in result.changes:
        description = change.description.lower()
        score -= 0.1 * sum(1 for pattern in HIGH_RISK_PATTERNS if pattern in description)

    if any(
        marker in change.description for change in result.changes for marker in SYSTEM_SCOPE_MARKERS
    ):
        score -= 0.15

    return _clamp(score)


def weighted_score(factors: ConfidenceFactors) -> float:
    """Combine the factors into a score rounded to two decimals."""
    total = sum(getattr(factors, name) * weight for name, weight in FACTOR_WEIGHTS.items())
    return round(total, 2)


def generate_reasoning(factors: ConfidenceFactors) -> list[str]:
    """Fixed-template sentences describing notable factors, in factor order."""
    reasoning = []

    if factors.change_complexity > 0.8:
        reasoning.append("Simple, well-defined changes with low complexity")
    elif factors.change_complexity < 0.5:
        reasoning.append("Complex changes requiring careful review")

    if factors.response_quality > 0.7:
        reasoning.append("High-quality AI analysis with clear explanations")
    elif factors.response_quality < 0.5:
        reasoning.append("AI response shows some uncertainty or lacks detail")

    if factors.validation_results > 0.9:
        reasoning.append("All validation checks passed successfully")
    elif factors.validation_results < 0.5:
        reasoning.append("Some validation issues detected")

    if factors.structural_improvements > 0.7:
        reasoning.append("Significant structural and clarity improvements")

    if factors.risk_factors < 0.6:
        reasoning.append("Higher risk changes detected - review recommended")

    return reasoning


def determine_risk_level(score: float, factors: ConfidenceFactors) -> str:
    if score < 0.5 or factors.risk_factors < 0.5:
        return "high"
    if score < 0.75 or factors.change_complexity < 0.6:
        return "medium"
    return "low"


def calculate_confidence(
    optimization_result: OptimizationResult,
    explanation_text: str,
    validation_passed: bool = True,
) -> ConfidenceExplanation:
    """
    Score how trustworthy a proposed optimization is.

    Args:
        optimization_result: The proposed rewrite and its change-set
        explanation_text: Natural-language justification from the optimizer
        validation_passed: Outcome of external validation of the rewrite

    Returns:
        Confidence score with its factors, reasoning and risk level
    """
    factors = ConfidenceFactors(
        change_complexity=analyze_change_complexity(optimization_result),
        response_quality=analyze_response_quality(explanation_text),
        validation_results=1.0 if validation_passed else 0.3,
        structural_improvements=analyze_structural_improvements(optimization_result),
        risk_factors=analyze_risk_factors(optimization_result),
    )
    score = weighted_score(factors)
    return ConfidenceExplanation(
        score=score,
        factors=factors,
        reasoning=generate_reasoning(factors),
        risk_level=determine_risk_level(score, factors),
    )
