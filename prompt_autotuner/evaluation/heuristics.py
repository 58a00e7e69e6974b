"""Text heuristics that turn raw completions into quality metrics."""

import re
from itertools import combinations

UNCERTAINTY = re.compile(r"maybe|probably|might|could be|i think|possibly", re.IGNORECASE)
ABSOLUTE_CERTAINTY = re.compile(r"definitely|always|never|must|absolutely", re.IGNORECASE)
SPECIFIC_DETAILS = re.compile(r"\d{4}|\d{2}/\d{2}/\d{4}|\$\d+|\d+%")

BULLETS = re.compile(r"^\s*(?:[-*•]|\d+\.)\s+\S", re.MULTILINE)
HEADINGS = re.compile(r"^#+\s+\w+", re.MULTILINE)
CODE_BLOCK = re.compile(r"```[\s\S]*?```")
SENTENCE_SPLIT = re.compile(r"[.!?]+")
COMPLEX_OPENER = re.compile(r"^(if|when|while|because|although)\b", re.IGNORECASE)

OPPOSITE_PAIRS = (
    ("always", "never"),
    ("must", "must not"),
    ("is", "is not"),
    ("can", "cannot"),
    ("will", "will not"),
    ("should", "should not"),
)


def _sentences(text: str) -> list[str]:
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


def _contains_phrase(sentence: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase)}\b", sentence) is not None


def _asserts_only(sentence: str, positive: str, negative: str) -> bool:
    """Whether a sentence uses the positive form and not its negation."""
    return _contains_phrase(sentence, positive) and not _contains_phrase(sentence, negative)


def has_contradictions(text: str) -> bool:
    """
    Detect two sentences that state opposite things about the same subject.

    Sentences are compared pairwise. A pair contradicts when one uses a
    positive form ("always", "can", ...) and the other its opposite, and the
    two sentences share more than two words.
    """
    sentences = [s.lower() for s in _sentences(text)]
    for first, second in combinations(sentences, 2):
        for positive, negative in OPPOSITE_PAIRS:
            opposite = (
                _asserts_only(first, positive, negative) and _contains_phrase(second, negative)
            ) or (_asserts_only(second, positive, negative) and _contains_phrase(first, negative))
            if not opposite:
                continue
            common_words = set(first.split()) & set(second.split())
            if len(common_words) > 2:
                return True
    return False


def has_sentence_variety(text: str) -> bool:
    """Whether sentences vary in both length and type."""
    sentences = _sentences(text)
    if len(sentences) < 2:
        return False

    lengths = [len(s) for s in sentences]
    avg_length = sum(lengths) / len(lengths)
    varied_length = any(abs(length - avg_length) > avg_length * 0.5 for length in lengths)

    kinds = set()
    for match in re.finditer(r"[^.!?]+([.!?]+|$)", text):
        sentence = match.group(0).strip()
        if not sentence:
            continue
        if sentence.endswith("?"):
            kinds.add("question")
        elif sentence.endswith("!"):
            kinds.add("exclamation")
        elif COMPLEX_OPENER.match(sentence):
            kinds.add("complex")
        else:
            kinds.add("simple")

    return varied_length and len(kinds) > 1


def hallucination_rate(responses: list[str]) -> float:
    """
    Estimate the fraction of responses that look ungrounded.

    Args:
        responses: Completion texts

    Returns:
        Rate in [0, 1]; 0 for no responses
    """
    if not responses:
        return 0.0

    total = 0.0
    for response in responses:
        uncertain = UNCERTAINTY.search(response) is not None
        if uncertain and ABSOLUTE_CERTAINTY.search(response):
            total += 0.2
        if has_contradictions(response):
            total += 0.3
        if uncertain and SPECIFIC_DETAILS.search(response):
            total += 0.2

    return min(1.0, total / len(responses))


def structure_score(responses: list[str]) -> float:
    """
    Score how well responses are organized.

    Args:
        responses: Completion texts

    Returns:
        Score in [0, 1]; 0 for no responses
    """
    if not responses:
        return 0.0

    total = 0.0
    for response in responses:
        if len(response.split("\n\n")) > 1:
            total += 0.2
        if BULLETS.search(response):
            total += 0.2
        if HEADINGS.search(response):
            total += 0.2
        if CODE_BLOCK.search(response):
            total += 0.2
        if has_sentence_variety(response):
            total += 0.2

    return min(1.0, total / len(responses))


def consistency_score(responses: list[str]) -> float:
    """
    Mean pairwise Jaccard similarity of the responses' word sets.

    Args:
        responses: Completion texts

    Returns:
        Score in [0, 1]; 1 when there are fewer than two responses
    """
    if len(responses) < 2:
        return 1.0

    word_sets = [set(response.lower().split()) for response in responses]
    similarities = []
    for first, second in combinations(word_sets, 2):
        union = first | second
        similarities.append(len(first & second) / len(union) if union else 1.0)

    return sum(similarities) / len(similarities)
