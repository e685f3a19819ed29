from .config import AnalyticsSettings, CuratorSettings, ExtractionSettings, dump_settings, load_settings
from .schemas import (
    AnalysisReport,
    Candidate,
    CleaningIssue,
    ExtractionResult,
    FormatLabel,
    Pair,
    StoredPair,
)
from .utils import (
    collapse_whitespace,
    detect_encoding,
    ensure_directory,
    iter_source_files,
    percentage,
    safe_read_text,
    split_paragraphs,
    split_sentences,
    word_count,
)
from .validators import drop_incomplete, incomplete_indices, is_valid_pair

__all__ = [
    "AnalysisReport",
    "AnalyticsSettings",
    "Candidate",
    "CleaningIssue",
    "CuratorSettings",
    "ExtractionResult",
    "ExtractionSettings",
    "FormatLabel",
    "Pair",
    "StoredPair",
    "collapse_whitespace",
    "detect_encoding",
    "drop_incomplete",
    "dump_settings",
    "ensure_directory",
    "incomplete_indices",
    "is_valid_pair",
    "iter_source_files",
    "load_settings",
    "percentage",
    "safe_read_text",
    "split_paragraphs",
    "split_sentences",
    "word_count",
]
