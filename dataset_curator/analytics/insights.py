from __future__ import annotations

import logging
from typing import List, Optional

from dataset_curator.core.config import AnalyticsSettings
from dataset_curator.core.schemas import DiversityReport, Insight, Overview, QualityReport, Recommendation

logger = logging.getLogger(__name__)


def generate_insights(
    overview: Overview,
    quality: QualityReport,
    diversity: DiversityReport,
    settings: Optional[AnalyticsSettings] = None,
) -> List[Insight]:
    """Each rule contributes at most one insight; a clean dataset gets a single success note."""
    settings = settings or AnalyticsSettings()
    insights: List[Insight] = []

    if overview.total_pairs < settings.min_dataset_size:
        insights.append(
            Insight(
                type="warning",
                message=(
                    f"Your dataset has only {overview.total_pairs} pairs. Consider adding at least "
                    f"{settings.min_dataset_size}-{settings.target_dataset_size} pairs for better model training."
                ),
            )
        )
    if quality.scores.uniqueness < settings.min_uniqueness:
        insights.append(Insight(type="info", message="Found duplicate pairs. Run the cleaning tool to remove them."))
    if diversity.lexical_diversity < settings.min_lexical_diversity:
        insights.append(
            Insight(
                type="warning",
                message=(
                    f"Low vocabulary diversity ({diversity.lexical_diversity:.2f}%). "
                    "Try adding more varied examples."
                ),
            )
        )
    if overview.avg_completion_length < settings.min_avg_completion_length:
        insights.append(
            Insight(
                type="warning",
                message="Average completion length is quite short. Consider adding more detailed responses.",
            )
        )

    if not insights:
        insights.append(
            Insight(type="success", message="Your dataset looks great! It's well-balanced and ready for training.")
        )
    return insights


def generate_recommendations(
    overview: Overview,
    quality: QualityReport,
    settings: Optional[AnalyticsSettings] = None,
) -> List[Recommendation]:
    settings = settings or AnalyticsSettings()
    recommendations: List[Recommendation] = []

    if overview.total_pairs < settings.target_dataset_size:
        recommendations.append(
            Recommendation(
                priority="high",
                title="Increase Dataset Size",
                description=(
                    f"Add {settings.target_dataset_size - overview.total_pairs} more training pairs "
                    "for better model performance."
                ),
                action="Extract pairs from more source documents or import an existing dataset.",
            )
        )
    if quality.overall_score < settings.min_quality_score:
        recommendations.append(
            Recommendation(
                priority="high",
                title="Improve Data Quality",
                description=(
                    f"Your quality score is {quality.overall_score:.0f}%. Focus on completeness and consistency."
                ),
                action="Run the cleaning tool and review flagged pairs.",
            )
        )
    if overview.unique_tags < settings.min_unique_tags:
        recommendations.append(
            Recommendation(
                priority="medium",
                title="Add More Tags",
                description="Tags help organize and analyze your dataset.",
                action="Edit pairs and add relevant category tags.",
            )
        )

    logger.debug("Generated %d recommendations", len(recommendations))
    return recommendations
