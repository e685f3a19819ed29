from .insights import generate_insights, generate_recommendations
from .metrics import (
    analyze_balance,
    analyze_distribution,
    analyze_diversity,
    analyze_readability,
    analyze_trends,
    create_histogram,
    distribution_stats,
    get_overview,
)
from .quality import assess_quality, get_grade
from .report import analyze_dataset

__all__ = [
    "analyze_balance",
    "analyze_dataset",
    "analyze_distribution",
    "analyze_diversity",
    "analyze_readability",
    "analyze_trends",
    "assess_quality",
    "create_histogram",
    "distribution_stats",
    "generate_insights",
    "generate_recommendations",
    "get_grade",
    "get_overview",
]
