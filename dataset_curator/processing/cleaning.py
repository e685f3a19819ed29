from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence, Set, Tuple

from dataset_curator.core.schemas import Candidate, CleaningIssue, Pair
from dataset_curator.core.validators import incomplete_indices

logger = logging.getLogger(__name__)


DEFAULT_PREFIX_LENGTH = 50
DEFAULT_MIN_TEXT_LENGTH = 20

MOJIBAKE_BULLET = "â€¢"
HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")
EXCESS_NEWLINES_RE = re.compile(r"\n(?:[^\S\n]*\n){2,}")
PAGE_NUMBER_RE = re.compile(
    r"-?\s*(?:page\s*)?\d{1,3}(?:\s*(?:/|of)\s*\d{1,3})?\s*-?",
    re.IGNORECASE,
)
HYPHEN_BREAK_RE = re.compile(r"([^\W\d_])-\n([^\W\d_])")
# Decorative glyphs left behind by PDF/Word exports. The bullets the
# extractors understand (•, -, *) and list numbers are not in this set.
STRAY_BULLET_RE = re.compile(r"^(?:[▪▫◦●○■□►▸‣⁃·∙➢➤✓✔❖◆◇]\s*)+")
WORD_CHAR_RE = re.compile(r"\w")


def _line_key(line: str) -> str:
    return STRAY_BULLET_RE.sub("", line.strip()).strip()


def _is_page_number(line: str) -> bool:
    key = _line_key(line)
    return bool(key) and PAGE_NUMBER_RE.fullmatch(key) is not None


def _drop_repeated_lines(lines: Sequence[str]) -> List[str]:
    kept: List[str] = []
    for index, line in enumerate(lines):
        key = _line_key(line)
        # Bracket-only lines such as nested "}" closers are structure, not headers.
        if WORD_CHAR_RE.search(key) and index + 1 < len(lines) and key == _line_key(lines[index + 1]):
            continue
        kept.append(line)
    return kept


def _is_structured(text: str) -> bool:
    return text.lstrip().startswith(("{", "["))


def _normalise_pass(text: str) -> str:
    text = re.sub(r"\r\n?", "\n", text).replace(MOJIBAKE_BULLET, "•")
    text = HORIZONTAL_WS_RE.sub(" ", text)
    text = EXCESS_NEWLINES_RE.sub("\n\n", text)
    lines = text.split("\n")
    # JSON closers repeat and bare array numbers look like page numbers.
    if not _is_structured(text):
        lines = _drop_repeated_lines([line for line in lines if not _is_page_number(line)])
    text = HYPHEN_BREAK_RE.sub(r"\1\2", "\n".join(lines))
    lines = [STRAY_BULLET_RE.sub("", line.strip()).strip() for line in text.split("\n")]
    text = EXCESS_NEWLINES_RE.sub("\n\n", "\n".join(lines))
    return text.strip()


def normalise_text(text: str) -> str:
    """Clean raw input before any pattern matching.

    Line order is never changed. A single pass can expose new artifacts
    (two header lines becoming adjacent once a page number between them is
    dropped, for example), so passes repeat until the text is stable. Each
    pass only ever shortens the text, which bounds the loop.
    """
    if not text:
        return ""
    current = text
    while True:
        cleaned = _normalise_pass(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def dedupe_key(candidate: Candidate, prefix_length: int = DEFAULT_PREFIX_LENGTH) -> str:
    return f"{candidate.prompt[:prefix_length]}|{candidate.completion[:prefix_length]}"


def dedupe_candidates(
    candidates: Iterable[Candidate],
    prefix_length: int = DEFAULT_PREFIX_LENGTH,
) -> List[Candidate]:
    """Collapse near-duplicates on a fixed-prefix key; the first occurrence wins."""
    seen: Set[str] = set()
    unique: List[Candidate] = []
    for candidate in candidates:
        key = dedupe_key(candidate, prefix_length)
        if key in seen:
            logger.debug("Dropping near-duplicate candidate %r", candidate.prompt[:40])
            continue
        seen.add(key)
        unique.append(candidate)
    return unique


def _exact_key(pair: Pair) -> Tuple[str, str]:
    return pair.prompt, pair.completion


def duplicate_indices(pairs: Sequence[Pair]) -> List[int]:
    """Indices of pairs whose exact prompt/completion already appeared earlier."""
    seen: Set[Tuple[str, str]] = set()
    duplicates: List[int] = []
    for index, pair in enumerate(pairs):
        key = _exact_key(pair)
        if key in seen:
            duplicates.append(index)
        else:
            seen.add(key)
    return duplicates


def remove_exact_duplicates(pairs: Iterable[Pair]) -> List[Pair]:
    seen: Set[Tuple[str, str]] = set()
    unique: List[Pair] = []
    for pair in pairs:
        key = _exact_key(pair)
        if key in seen:
            continue
        seen.add(key)
        unique.append(pair)
    return unique


def find_cleaning_issues(
    pairs: Sequence[Pair],
    check_duplicates: bool = True,
    check_length: bool = True,
    min_length: int = DEFAULT_MIN_TEXT_LENGTH,
) -> List[CleaningIssue]:
    issues: List[CleaningIssue] = []

    if check_duplicates:
        duplicates = duplicate_indices(pairs)
        if duplicates:
            issues.append(
                CleaningIssue(
                    type="duplicates",
                    description=f"Found {len(duplicates)} duplicate pair(s)",
                    affected_pairs=duplicates,
                )
            )

    if check_length:
        short = [
            index
            for index, pair in enumerate(pairs)
            if (pair.prompt and len(pair.prompt) < min_length)
            or (pair.completion and len(pair.completion) < min_length)
        ]
        if short:
            issues.append(
                CleaningIssue(
                    type="short-text",
                    description=f"Found {len(short)} pair(s) with short text (<{min_length} chars)",
                    affected_pairs=short,
                )
            )

    empty = incomplete_indices(pairs)
    if empty:
        issues.append(
            CleaningIssue(
                type="empty-fields",
                description=f"Found {len(empty)} pair(s) with empty fields",
                affected_pairs=empty,
            )
        )

    if not issues:
        logger.info("No cleaning issues found in %d pairs.", len(pairs))
    return issues
