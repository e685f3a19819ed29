from __future__ import annotations

import logging
from typing import List, Sequence, Set, Tuple

import numpy as np

from dataset_curator.core.schemas import Grade, Pair, QualityReport, QualityScores
from dataset_curator.core.utils import percentage, word_count

logger = logging.getLogger(__name__)


MIN_PROMPT_CHARS = 10
MIN_COMPLETION_CHARS = 20
LENGTH_QUALITY_TARGET = 80.0

# (minimum score, letter, label), highest band first.
GRADE_BANDS: List[Tuple[float, str, str]] = [
    (90.0, "A+", "Excellent!"),
    (80.0, "A", "Great!"),
    (70.0, "B", "Good"),
    (60.0, "C", "Fair"),
]
FALLBACK_GRADE = ("D", "Needs Work")


def completeness_score(pairs: Sequence[Pair]) -> float:
    return percentage(sum(1 for pair in pairs if pair.is_complete), len(pairs))


def consistency_score(pairs: Sequence[Pair]) -> float:
    """100 minus the coefficient of variation of prompt word counts, floored at 0."""
    counts = np.array([word_count(pair.prompt) for pair in pairs], dtype=float)
    mean = float(counts.mean())
    if mean == 0:
        return 0.0
    return max(0.0, 100.0 - float(counts.std()) / mean * 100.0)


def uniqueness_score(pairs: Sequence[Pair]) -> float:
    seen: Set[Tuple[str, str]] = set()
    for pair in pairs:
        seen.add((pair.prompt, pair.completion))
    return percentage(len(seen), len(pairs))


def length_quality_score(pairs: Sequence[Pair]) -> float:
    adequate = sum(
        1 for pair in pairs if len(pair.prompt) >= MIN_PROMPT_CHARS and len(pair.completion) >= MIN_COMPLETION_CHARS
    )
    return percentage(adequate, len(pairs))


def get_grade(score: float) -> Grade:
    for minimum, letter, label in GRADE_BANDS:
        if score >= minimum:
            return Grade(letter=letter, label=label)
    letter, label = FALLBACK_GRADE
    return Grade(letter=letter, label=label)


def identify_quality_issues(scores: QualityScores) -> List[str]:
    issues: List[str] = []
    if scores.completeness < 100:
        issues.append("Some pairs have empty fields")
    if scores.uniqueness < 100:
        issues.append("Dataset contains duplicates")
    if scores.length_quality < LENGTH_QUALITY_TARGET:
        issues.append("Some responses are too short")
    return issues


def assess_quality(pairs: Sequence[Pair]) -> QualityReport:
    """Score a non-empty dataset; callers handle the empty case."""
    if not pairs:
        raise ValueError("Quality assessment requires at least one pair")
    scores = QualityScores(
        completeness=completeness_score(pairs),
        consistency=consistency_score(pairs),
        uniqueness=uniqueness_score(pairs),
        length_quality=length_quality_score(pairs),
    )
    overall = (scores.completeness + scores.consistency + scores.uniqueness + scores.length_quality) / 4
    logger.debug("Quality scores for %d pairs: %s (overall %.2f)", len(pairs), scores.model_dump(), overall)
    return QualityReport(
        scores=scores,
        overall_score=round(overall, 2),
        grade=get_grade(overall),
        issues=identify_quality_issues(scores),
    )
