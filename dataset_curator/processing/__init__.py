from .cleaning import (
    dedupe_candidates,
    dedupe_key,
    duplicate_indices,
    find_cleaning_issues,
    normalise_text,
    remove_exact_duplicates,
)
from .formatting import EXPORT_FORMATS, IMPORT_FORMATS, export_pairs, import_pairs

__all__ = [
    "EXPORT_FORMATS",
    "IMPORT_FORMATS",
    "dedupe_candidates",
    "dedupe_key",
    "duplicate_indices",
    "export_pairs",
    "find_cleaning_issues",
    "import_pairs",
    "normalise_text",
    "remove_exact_duplicates",
]
