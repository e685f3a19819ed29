from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ExtractionSettings(BaseModel):
    dedupe_prefix_length: int = Field(default=50, ge=1)


class AnalyticsSettings(BaseModel):
    histogram_bins: int = Field(default=5, ge=1)
    top_words: int = Field(default=10, ge=0)
    trend_batches: int = Field(default=5, ge=1)
    min_dataset_size: int = Field(default=50, ge=0)
    target_dataset_size: int = Field(default=100, ge=0)
    min_uniqueness: float = Field(default=95.0, ge=0, le=100)
    min_lexical_diversity: float = Field(default=30.0, ge=0, le=100)
    min_avg_completion_length: float = Field(default=50.0, ge=0)
    min_quality_score: float = Field(default=70.0, ge=0, le=100)
    min_unique_tags: int = Field(default=3, ge=0)


class CuratorSettings(BaseModel):
    """Tunable thresholds for extraction and analytics."""

    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)


def load_settings(config_path: Optional[str] = None) -> CuratorSettings:
    """Loads settings from a YAML file; keys missing from the file keep their defaults."""
    if config_path is None:
        return CuratorSettings()
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found at {config_path}")
    with open(config_path, "r", encoding="utf-8") as f:
        payload: Dict[str, Any] = yaml.safe_load(f) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping, got {type(payload).__name__}")
    logger.debug("Loaded settings from %s", config_path)
    return CuratorSettings.model_validate(payload)


def dump_settings(settings: CuratorSettings, config_path: str) -> None:
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(settings.model_dump(), f, allow_unicode=True, default_flow_style=False)
