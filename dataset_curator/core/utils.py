from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterator, List

logger = logging.getLogger(__name__)

SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def iter_source_files(root: Path) -> Iterator[Path]:
    """Yield files from the input directory, ignoring hidden/system entries."""
    for path in sorted(root.rglob("*")):
        if path.is_file() and not path.name.startswith("."):
            yield path


def collapse_whitespace(text: str) -> str:
    """Single-line form of ``text``: every whitespace run becomes one space."""
    return re.sub(r"\s+", " ", text).strip()


def split_paragraphs(text: str) -> List[str]:
    return [block.strip() for block in re.split(r"\n\s*\n", text) if block.strip()]


def split_sentences(text: str) -> List[str]:
    flat = collapse_whitespace(text)
    if not flat:
        return []
    return [sentence.strip() for sentence in SENTENCE_BOUNDARY_RE.split(flat) if sentence.strip()]


def word_count(text: str) -> int:
    return len(text.split())


def detect_encoding(path: Path) -> str:
    """Heuristic charset detection: default to UTF-8, fallback to cp1251."""
    for encoding in ("utf-8", "utf-16", "cp1251"):
        try:
            with path.open("r", encoding=encoding) as fh:
                fh.read()
                return encoding
        except UnicodeError:
            continue
    return "utf-8"


def safe_read_text(path: Path) -> str:
    encoding = detect_encoding(path)
    with path.open("r", encoding=encoding, errors="ignore") as fh:
        return fh.read()


def ensure_directory(path: Path) -> None:
    os.makedirs(path, exist_ok=True)


def percentage(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return part / whole * 100
