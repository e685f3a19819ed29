"""Descriptive statistics over a pair collection.

All functions expect a non-empty dataset; ``analyze_dataset`` guards the
empty case before calling any of them.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, List, Sequence

import numpy as np

from dataset_curator.core.schemas import (
    BalanceReport,
    DistributionReport,
    DistributionStats,
    DiversityReport,
    HistogramBin,
    Overview,
    Pair,
    ReadabilityReport,
    TrendBatch,
    WordCount,
)
from dataset_curator.core.utils import percentage, word_count

logger = logging.getLogger(__name__)


MIN_TOKEN_LENGTH = 4
CHARS_PER_TOKEN = 4
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

# Flesch Reading Ease with a fixed syllables-per-word estimate instead of
# counting syllables.
FLESCH_BASE = 206.835
FLESCH_SENTENCE_WEIGHT = 1.015
FLESCH_SYLLABLE_WEIGHT = 84.6
AVG_SYLLABLES_PER_WORD = 1.5
READABILITY_LEVELS = [
    (90.0, "Very Easy"),
    (80.0, "Easy"),
    (70.0, "Fairly Easy"),
    (60.0, "Standard"),
    (50.0, "Fairly Difficult"),
]
COMPLEX_SENTENCE_LENGTH = 20
MODERATE_SENTENCE_LENGTH = 15

# (low, high, score): completion/prompt ratio bands, tightest first.
BALANCE_BANDS = [(3.0, 7.0, 100), (2.0, 10.0, 80), (1.5, 15.0, 60)]
FALLBACK_BALANCE_SCORE = 40
SHORT_RATIO = 2.0
LONG_RATIO = 10.0


def get_overview(pairs: Sequence[Pair]) -> Overview:
    total = len(pairs)
    prompt_chars = sum(len(pair.prompt) for pair in pairs)
    completion_chars = sum(len(pair.completion) for pair in pairs)
    valid = sum(1 for pair in pairs if pair.is_complete)
    return Overview(
        total_pairs=total,
        valid_pairs=valid,
        incomplete_pairs=total - valid,
        total_words=sum(word_count(pair.prompt) + word_count(pair.completion) for pair in pairs),
        avg_prompt_length=round(prompt_chars / total, 2),
        avg_completion_length=round(completion_chars / total, 2),
        total_characters=prompt_chars + completion_chars,
        estimated_tokens=round((prompt_chars + completion_chars) / CHARS_PER_TOKEN),
        unique_tags=len({tag for pair in pairs for tag in pair.tags}),
    )


def tokenize(text: str) -> List[str]:
    return [token for token in text.lower().split() if len(token) >= MIN_TOKEN_LENGTH]


def get_top_words(tokens: Sequence[str], limit: int = 10) -> List[WordCount]:
    # Counter keeps first-seen order, and most_common is stable on ties.
    return [WordCount(word=word, count=count) for word, count in Counter(tokens).most_common(limit)]


def analyze_diversity(pairs: Sequence[Pair], top_words: int = 10) -> DiversityReport:
    prompt_tokens = [token for pair in pairs for token in tokenize(pair.prompt)]
    completion_tokens = [token for pair in pairs for token in tokenize(pair.completion)]
    all_tokens = prompt_tokens + completion_tokens
    vocabulary = set(all_tokens)

    tag_counts: Dict[str, int] = {}
    for pair in pairs:
        for tag in pair.tags:
            tag_counts[tag] = tag_counts.get(tag, 0) + 1

    return DiversityReport(
        vocabulary_size=len(vocabulary),
        unique_prompt_words=len(set(prompt_tokens)),
        unique_completion_words=len(set(completion_tokens)),
        lexical_diversity=round(percentage(len(vocabulary), len(all_tokens)), 2),
        tag_distribution=tag_counts,
        top_words=get_top_words(all_tokens, top_words),
    )


def distribution_stats(values: Sequence[int]) -> DistributionStats:
    ordered = sorted(values)
    counts = Counter(ordered)
    # Most frequent value; ties go to the smallest.
    mode = max(counts.items(), key=lambda item: (item[1], -item[0]))[0]
    return DistributionStats(
        min=ordered[0],
        max=ordered[-1],
        mean=round(sum(ordered) / len(ordered), 2),
        median=ordered[len(ordered) // 2],
        mode=mode,
        range=ordered[-1] - ordered[0],
    )


def create_histogram(values: Sequence[int], bins: int = 5) -> List[HistogramBin]:
    """Equal-width bins over ``values``; every value lands in exactly one bin."""
    if not values:
        return []
    counts, edges = np.histogram(np.asarray(values, dtype=float), bins=bins)
    return [
        HistogramBin(
            range=f"{round(edges[index])}-{round(edges[index + 1])}",
            start=float(edges[index]),
            end=float(edges[index + 1]),
            count=int(count),
        )
        for index, count in enumerate(counts)
    ]


def analyze_distribution(pairs: Sequence[Pair], bins: int = 5) -> DistributionReport:
    prompt_lengths = [len(pair.prompt) for pair in pairs]
    completion_lengths = [len(pair.completion) for pair in pairs]
    return DistributionReport(
        prompt=distribution_stats(prompt_lengths),
        completion=distribution_stats(completion_lengths),
        histogram=create_histogram(completion_lengths, bins=bins),
    )


def words_per_sentence(text: str) -> float:
    sentences = [sentence for sentence in SENTENCE_SPLIT_RE.split(text) if sentence.strip()]
    if not sentences:
        return 0.0
    return word_count(text) / len(sentences)


def flesch_reading_ease(avg_sentence_length: float) -> float:
    return FLESCH_BASE - FLESCH_SENTENCE_WEIGHT * avg_sentence_length - FLESCH_SYLLABLE_WEIGHT * AVG_SYLLABLES_PER_WORD


def readability_level(score: float) -> str:
    for minimum, level in READABILITY_LEVELS:
        if score >= minimum:
            return level
    return "Difficult"


def analyze_readability(pairs: Sequence[Pair]) -> ReadabilityReport:
    avg_sentence_length = sum(words_per_sentence(pair.completion) for pair in pairs) / len(pairs)
    flesch = flesch_reading_ease(avg_sentence_length)
    if avg_sentence_length > COMPLEX_SENTENCE_LENGTH:
        complexity = "Complex"
    elif avg_sentence_length > MODERATE_SENTENCE_LENGTH:
        complexity = "Moderate"
    else:
        complexity = "Simple"
    return ReadabilityReport(
        avg_sentence_length=round(avg_sentence_length, 2),
        flesch_score=round(flesch, 2),
        readability_level=readability_level(flesch),
        complexity=complexity,
    )


def balance_score(ratio: float) -> int:
    for low, high, score in BALANCE_BANDS:
        if low <= ratio <= high:
            return score
    return FALLBACK_BALANCE_SCORE


def analyze_balance(pairs: Sequence[Pair]) -> BalanceReport:
    # Empty fields count as length 1 so the ratio stays defined.
    ratios = [(len(pair.completion) or 1) / (len(pair.prompt) or 1) for pair in pairs]
    avg_ratio = sum(ratios) / len(ratios)
    if avg_ratio < SHORT_RATIO:
        recommendation = "Completions are too short"
    elif avg_ratio > LONG_RATIO:
        recommendation = "Completions might be too long"
    else:
        recommendation = "Well balanced"
    return BalanceReport(
        avg_completion_to_prompt_ratio=round(avg_ratio, 2),
        balance_score=balance_score(avg_ratio),
        recommendation=recommendation,
    )


def analyze_trends(pairs: Sequence[Pair], batches: int = 5) -> List[TrendBatch]:
    """Split the dataset into contiguous batches; assumes insertion order is chronological."""
    size = math.ceil(len(pairs) / batches)
    trends: List[TrendBatch] = []
    for index in range(batches):
        chunk = pairs[index * size : (index + 1) * size]
        if not chunk:
            break
        trends.append(
            TrendBatch(
                period=f"Batch {index + 1}",
                avg_length=round(sum(len(pair.completion) for pair in chunk) / len(chunk), 2),
                count=len(chunk),
            )
        )
    return trends
