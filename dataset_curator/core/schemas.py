from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class FormatLabel(str, Enum):
    """Closed set of source formats recognised by the extractor."""

    CV = "cv"
    FAQ = "faq"
    CONVERSATION = "conversation"
    JSON = "json"
    EMAIL = "email"
    GENERIC = "generic"


class Pair(BaseModel):
    """Prompt/completion training example."""

    prompt: str = ""
    completion: str = ""
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        if isinstance(value, (list, tuple, set)):
            return [str(tag) for tag in value]
        return [str(value)]

    @property
    def is_complete(self) -> bool:
        return bool(self.prompt.strip() and self.completion.strip())


# Strategies emit pairs that have not been de-duplicated yet.
Candidate = Pair


class StoredPair(Pair):
    """Pair as persisted by the dataset store."""

    timestamp: Optional[datetime] = None


class ExtractionResult(BaseModel):
    """Outcome of a single extraction run."""

    format: FormatLabel
    detected: bool = True
    candidate_count: int = 0
    pairs: List[Pair] = Field(default_factory=list)


class CleaningIssue(BaseModel):
    """Problem found by the cleaning scan, with the indices it affects."""

    type: Literal["duplicates", "short-text", "empty-fields"]
    description: str
    affected_pairs: List[int] = Field(default_factory=list)
    can_fix: bool = True


class Overview(BaseModel):
    total_pairs: int
    valid_pairs: int
    incomplete_pairs: int
    total_words: int
    avg_prompt_length: float
    avg_completion_length: float
    total_characters: int
    estimated_tokens: int
    unique_tags: int


class QualityScores(BaseModel):
    completeness: float
    consistency: float
    uniqueness: float
    length_quality: float


class Grade(BaseModel):
    letter: str
    label: str


class QualityReport(BaseModel):
    scores: QualityScores
    overall_score: float
    grade: Grade
    issues: List[str] = Field(default_factory=list)


class WordCount(BaseModel):
    word: str
    count: int


class DiversityReport(BaseModel):
    vocabulary_size: int
    unique_prompt_words: int
    unique_completion_words: int
    lexical_diversity: float
    tag_distribution: Dict[str, int] = Field(default_factory=dict)
    top_words: List[WordCount] = Field(default_factory=list)


class DistributionStats(BaseModel):
    min: int
    max: int
    mean: float
    median: int
    mode: int
    range: int


class HistogramBin(BaseModel):
    range: str
    start: float
    end: float
    count: int


class DistributionReport(BaseModel):
    prompt: DistributionStats
    completion: DistributionStats
    histogram: List[HistogramBin] = Field(default_factory=list)


class ReadabilityReport(BaseModel):
    avg_sentence_length: float
    flesch_score: float
    readability_level: str
    complexity: Literal["Simple", "Moderate", "Complex"]


class BalanceReport(BaseModel):
    avg_completion_to_prompt_ratio: float
    balance_score: int
    recommendation: str


class TrendBatch(BaseModel):
    period: str
    avg_length: float
    count: int


class Insight(BaseModel):
    type: Literal["warning", "info", "success"]
    message: str


class Recommendation(BaseModel):
    priority: Literal["high", "medium", "low"]
    title: str
    description: str
    action: str


class AnalysisReport(BaseModel):
    """Read-only snapshot of dataset statistics, rebuilt on every request."""

    overview: Overview
    quality: QualityReport
    diversity: DiversityReport
    distribution: DistributionReport
    readability: ReadabilityReport
    balance: BalanceReport
    trends: List[TrendBatch] = Field(default_factory=list)
    insights: List[Insight] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
