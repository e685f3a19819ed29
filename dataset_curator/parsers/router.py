from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from dataset_curator.core.config import ExtractionSettings
from dataset_curator.core.schemas import Candidate, ExtractionResult, FormatLabel, Pair
from dataset_curator.processing.cleaning import dedupe_candidates, normalise_text

from .generic import extract_generic
from .rule_based import extract_conversation, extract_cv, extract_email, extract_faq, extract_json

logger = logging.getLogger(__name__)


CV_MARKER_RE = re.compile(r"EDUCATION|WORK EXPERIENCE|RESEARCH EXPERIENCE|SKILLS", re.IGNORECASE)
FAQ_MARKER_RE = re.compile(r"(?<!\w)Q:\s*.+?\s*(?<!\w)A:", re.IGNORECASE)
SPEAKER_MARKER_RE = re.compile(r"(?<!\w)(?:User|Human|Customer|Assistant|AI|Agent):", re.IGNORECASE)
EMAIL_MARKER_RE = re.compile(r"(?<!\w)(?:From|To|Subject):", re.IGNORECASE)


@dataclass(frozen=True)
class FormatRule:
    label: FormatLabel
    matches: Callable[[str], bool]


# Evaluated top to bottom, first match wins: a resume quoting "User:" is still a CV.
FORMAT_RULES: List[FormatRule] = [
    FormatRule(FormatLabel.CV, lambda text: CV_MARKER_RE.search(text) is not None),
    FormatRule(FormatLabel.FAQ, lambda text: FAQ_MARKER_RE.search(text) is not None),
    FormatRule(FormatLabel.CONVERSATION, lambda text: SPEAKER_MARKER_RE.search(text) is not None),
    FormatRule(FormatLabel.JSON, lambda text: text.strip().startswith(("{", "["))),
    FormatRule(FormatLabel.EMAIL, lambda text: EMAIL_MARKER_RE.search(text) is not None),
]
DEFAULT_FORMAT = FormatLabel.GENERIC

STRATEGIES: Dict[FormatLabel, Callable[[str], List[Candidate]]] = {
    FormatLabel.CV: extract_cv,
    FormatLabel.FAQ: extract_faq,
    FormatLabel.CONVERSATION: extract_conversation,
    FormatLabel.JSON: extract_json,
    FormatLabel.EMAIL: extract_email,
    FormatLabel.GENERIC: extract_generic,
}

AUTO_FORMAT = "auto"


def classify(text: str) -> FormatLabel:
    for rule in FORMAT_RULES:
        if rule.matches(text):
            return rule.label
    return DEFAULT_FORMAT


def resolve_format(format_override: Union[FormatLabel, str, None]) -> Optional[FormatLabel]:
    """Map a caller-supplied override to a label; ``None``/``"auto"`` means detect."""
    if format_override is None or isinstance(format_override, FormatLabel):
        return format_override
    value = format_override.strip().lower()
    if value == AUTO_FORMAT:
        return None
    try:
        return FormatLabel(value)
    except ValueError as exc:
        choices = ", ".join([AUTO_FORMAT] + [label.value for label in FormatLabel])
        raise ValueError(f"Unsupported format: {format_override} (expected one of {choices})") from exc


def extract(
    text: str,
    format_override: Union[FormatLabel, str, None] = None,
    settings: Optional[ExtractionSettings] = None,
) -> ExtractionResult:
    settings = settings or ExtractionSettings()
    override = resolve_format(format_override)
    normalised = normalise_text(text)
    label = override or classify(normalised)

    candidates = STRATEGIES[label](normalised)
    pairs = dedupe_candidates(candidates, prefix_length=settings.dedupe_prefix_length)
    logger.info(
        "Extracted %d pairs (%d candidates) using %s format%s.",
        len(pairs),
        len(candidates),
        label.value,
        "" if override is None else " (override)",
    )
    return ExtractionResult(
        format=label,
        detected=override is None,
        candidate_count=len(candidates),
        pairs=pairs,
    )


def extract_pairs(
    text: str,
    format_override: Union[FormatLabel, str, None] = None,
    settings: Optional[ExtractionSettings] = None,
) -> List[Pair]:
    return extract(text, format_override=format_override, settings=settings).pairs
