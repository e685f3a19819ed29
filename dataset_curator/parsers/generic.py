"""Fallback extraction for prose without a recognisable structure.

Every sub-strategy runs against the same normalised text and the results are
concatenated in a fixed order; overlapping candidates are left for the
de-duplication step.
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence

from dataset_curator.core.schemas import Candidate
from dataset_curator.core.utils import collapse_whitespace, split_paragraphs, split_sentences

logger = logging.getLogger(__name__)


MIN_PARAGRAPH_LENGTH = 20
MIN_SECTION_BODY_LENGTH = 30
MIN_SENTENCE_PROMPT_LENGTH = 20
MIN_SENTENCE_COMPLETION_LENGTH = 30
SENTENCE_CHAIN_CANDIDATE_LIMIT = 3
SENTENCE_CHAIN_MIN_SENTENCES = 5
MIN_LIST_ITEM_LENGTH = 15
MIN_ANSWER_LENGTH = 20
MAX_ANSWER_LENGTH = 500
MAX_HEADING_LENGTH = 80
MAX_HEADING_WORDS = 10

NUMBERED_HEADING_RE = re.compile(r"(?P<number>\d+(?:\.\d+)*)\.?[ ]+(?P<heading>\S.{0,99})")
LIST_ITEM_RE = re.compile(r"[•\-*][ ]*(?P<item>.+)")
NUMERIC_BODY_RE = re.compile(r"[\d\s.,:;%/()+\-]+")
TITLE_SMALL_WORDS = {"a", "an", "and", "as", "at", "by", "for", "in", "of", "on", "or", "the", "to", "vs", "with"}
QUESTION_WORDS = (
    "what", "why", "how", "when", "where", "who", "whom", "whose", "which",
    "is", "are", "was", "were", "am", "can", "could", "should", "would", "will",
    "do", "does", "did", "has", "have", "had", "may", "might", "shall",
)
QUESTION_RE = re.compile(
    rf"(?:^|(?<=[.!?] ))(?P<question>(?:{'|'.join(QUESTION_WORDS)})\b[^.!?\n]*\?)",
    re.IGNORECASE | re.MULTILINE,
)


def _generic(prompt: str, completion: str, subtag: str) -> Candidate:
    return Candidate(prompt=prompt.strip(), completion=completion.strip(), tags=["generic", subtag])


def pair_paragraphs(text: str) -> List[Candidate]:
    paragraphs = split_paragraphs(text)
    candidates: List[Candidate] = []
    for current, following in zip(paragraphs, paragraphs[1:]):
        if len(current) > MIN_PARAGRAPH_LENGTH and len(following) > MIN_PARAGRAPH_LENGTH:
            candidates.append(_generic(current, following, "paragraph"))
    return candidates


def _sections(lines: Sequence[str], heading_indices: Sequence[int]):
    """Yield (heading line, body) for each heading, body running to the next heading."""
    bounds = list(heading_indices) + [len(lines)]
    for start, end in zip(bounds, bounds[1:]):
        yield lines[start], "\n".join(lines[start + 1 : end]).strip()


def pair_numbered_sections(text: str) -> List[Candidate]:
    lines = text.split("\n")
    headings = [index for index, line in enumerate(lines) if NUMBERED_HEADING_RE.fullmatch(line.strip())]
    candidates: List[Candidate] = []
    for line, body in _sections(lines, headings):
        if len(body) <= MIN_SECTION_BODY_LENGTH:
            continue
        heading = NUMBERED_HEADING_RE.fullmatch(line.strip()).group("heading").rstrip(" :")
        candidates.append(_generic(f'Explain about "{heading}"', body, "numbered-section"))
    return candidates


def is_heading_line(line: str) -> bool:
    """Standalone ALL-CAPS or Title Case line."""
    line = line.strip().rstrip(":")
    if not line or len(line) > MAX_HEADING_LENGTH or not line[0].isalpha():
        return False
    if line[-1] in ".!?,;":
        return False
    words = line.split()
    if len(words) > MAX_HEADING_WORDS:
        return False
    letters = [char for char in line if char.isalpha()]
    if len(letters) < 3:
        return False
    if all(char.isupper() for char in letters):
        return True
    for position, word in enumerate(words):
        if not word[0].isalpha():
            continue
        if position > 0 and word.lower() in TITLE_SMALL_WORDS:
            continue
        if not word[0].isupper():
            return False
    return True


def pair_headings(text: str) -> List[Candidate]:
    lines = text.split("\n")
    headings = [index for index, line in enumerate(lines) if is_heading_line(line)]
    candidates: List[Candidate] = []
    for line, body in _sections(lines, headings):
        if len(body) <= MIN_SECTION_BODY_LENGTH or NUMERIC_BODY_RE.fullmatch(body):
            continue
        heading = line.strip().rstrip(":")
        candidates.append(_generic(f"What about {heading.lower()}?", body, "section"))
    return candidates


def chain_sentences(text: str) -> List[Candidate]:
    sentences = split_sentences(text)
    if len(sentences) < SENTENCE_CHAIN_MIN_SENTENCES:
        return []
    candidates: List[Candidate] = []
    for index in range(len(sentences) - 2):
        prompt = sentences[index]
        completion = f"{sentences[index + 1]} {sentences[index + 2]}"
        if len(prompt) < MIN_SENTENCE_PROMPT_LENGTH or len(completion) < MIN_SENTENCE_COMPLETION_LENGTH:
            continue
        candidates.append(_generic(prompt, completion, "sentence"))
    return candidates


def pair_list_items(text: str) -> List[Candidate]:
    candidates: List[Candidate] = []
    previous = None
    for line in text.split("\n"):
        match = LIST_ITEM_RE.fullmatch(line.strip())
        if not match:
            previous = None
            continue
        item = match.group("item").strip()
        if previous is not None and len(previous) > MIN_LIST_ITEM_LENGTH and len(item) > MIN_LIST_ITEM_LENGTH:
            candidates.append(_generic(previous, item, "list"))
        previous = item
    return candidates


def _bounded_answer(segment: str) -> str:
    if len(segment) <= MAX_ANSWER_LENGTH:
        return segment
    cut = max(segment.rfind(mark, 0, MAX_ANSWER_LENGTH) for mark in ".!?")
    if cut + 1 >= MIN_ANSWER_LENGTH:
        return segment[: cut + 1]
    return segment[:MAX_ANSWER_LENGTH].rstrip()


def pair_implicit_questions(text: str) -> List[Candidate]:
    candidates: List[Candidate] = []
    for match in QUESTION_RE.finditer(text):
        paragraph_end = text.find("\n\n", match.end())
        following = text[match.end() : paragraph_end if paragraph_end != -1 else len(text)]
        answer = _bounded_answer(collapse_whitespace(following))
        if not MIN_ANSWER_LENGTH <= len(answer) <= MAX_ANSWER_LENGTH:
            continue
        candidates.append(_generic(collapse_whitespace(match.group("question")), answer, "question"))
    return candidates


def extract_generic(text: str) -> List[Candidate]:
    candidates: List[Candidate] = []
    candidates.extend(pair_paragraphs(text))
    candidates.extend(pair_numbered_sections(text))
    candidates.extend(pair_headings(text))
    if len(candidates) < SENTENCE_CHAIN_CANDIDATE_LIMIT:
        candidates.extend(chain_sentences(text))
    candidates.extend(pair_list_items(text))
    candidates.extend(pair_implicit_questions(text))
    logger.debug("Generic extraction produced %d candidates", len(candidates))
    return candidates
