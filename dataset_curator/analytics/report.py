from __future__ import annotations

import logging
from typing import Optional, Sequence

from dataset_curator.core.config import AnalyticsSettings
from dataset_curator.core.schemas import AnalysisReport, Pair

from .insights import generate_insights, generate_recommendations
from .metrics import (
    analyze_balance,
    analyze_distribution,
    analyze_diversity,
    analyze_readability,
    analyze_trends,
    get_overview,
)
from .quality import assess_quality

logger = logging.getLogger(__name__)


def analyze_dataset(
    pairs: Sequence[Pair],
    settings: Optional[AnalyticsSettings] = None,
) -> Optional[AnalysisReport]:
    """Build a fresh report for ``pairs``; an empty dataset has no report."""
    if not pairs:
        logger.info("No data to analyze.")
        return None
    settings = settings or AnalyticsSettings()
    snapshot = list(pairs)

    overview = get_overview(snapshot)
    quality = assess_quality(snapshot)
    diversity = analyze_diversity(snapshot, top_words=settings.top_words)
    report = AnalysisReport(
        overview=overview,
        quality=quality,
        diversity=diversity,
        distribution=analyze_distribution(snapshot, bins=settings.histogram_bins),
        readability=analyze_readability(snapshot),
        balance=analyze_balance(snapshot),
        trends=analyze_trends(snapshot, batches=settings.trend_batches),
        insights=generate_insights(overview, quality, diversity, settings),
        recommendations=generate_recommendations(overview, quality, settings),
    )
    logger.info(
        "Analyzed %d pairs: overall quality %.2f (%s).",
        overview.total_pairs,
        quality.overall_score,
        quality.grade.letter,
    )
    return report
