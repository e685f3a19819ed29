from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from dataset_curator.core.schemas import Candidate

logger = logging.getLogger(__name__)


CV_SECTION_HEADERS = r"EDUCATION|WORK\s+EXPERIENCE|RESEARCH\s+EXPERIENCE|RESEARCH|SKILLS"
# Headers are recognised at the start of a line in any case, or anywhere when
# written in capitals ("... 2019 WORK EXPERIENCE Acme ...").
CV_HEADER_RE = re.compile(
    rf"(?:^[ \t]*(?i:{CV_SECTION_HEADERS})|\b(?:{CV_SECTION_HEADERS}))\b[ \t]*:?",
    re.MULTILINE,
)
CV_SECTIONS: Dict[str, tuple] = {
    "EDUCATION": ("What is the candidate's educational background?", "education"),
    "WORK EXPERIENCE": ("What is the candidate's work experience?", "experience"),
    "RESEARCH EXPERIENCE": ("What research experience does the candidate have?", "research"),
    "SKILLS": ("What skills does the candidate have?", "skills"),
}
NAME_LINE_RE = re.compile(r"[A-Z][A-Za-z.'\-]*(?:[ ]+[A-Z][A-Za-z.'\-]*){0,4}")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(?<![\w+])\+?\d(?:[ .-]?\d){9,14}(?!\d)")

FAQ_RE = re.compile(
    r"(?<!\w)Q:\s*(?P<prompt>.+?)\s*(?<!\w)A:\s*(?P<completion>.+?)(?=(?<!\w)Q:|\Z)",
    re.IGNORECASE | re.DOTALL,
)

USER_SPEAKERS = r"User|Human|Customer"
ASSISTANT_SPEAKERS = r"Assistant|AI|Agent"
CONVERSATION_RE = re.compile(
    rf"(?<!\w)(?:{USER_SPEAKERS}):\s*(?P<prompt>.+?)\s*"
    rf"(?<!\w)(?:{ASSISTANT_SPEAKERS}):\s*(?P<completion>.+?)"
    rf"(?=(?<!\w)(?:{USER_SPEAKERS}):|\Z)",
    re.IGNORECASE | re.DOTALL,
)

PROMPT_FIELDS = ("prompt", "question", "input")
COMPLETION_FIELDS = ("completion", "answer", "output", "response")

SUBJECT_RE = re.compile(r"^[ \t]*Subject:[ \t]*(.+)$", re.IGNORECASE | re.MULTILINE)


def make_candidate(prompt: str, completion: str, tags: Any) -> Optional[Candidate]:
    prompt = prompt.strip()
    completion = completion.strip()
    if not prompt or not completion:
        return None
    return Candidate(prompt=prompt, completion=completion, tags=tags)


def _section_name(header: str) -> str:
    return re.sub(r"[\s:]+", " ", header).strip().upper()


def _extract_contact(text: str) -> Optional[Candidate]:
    first_line = next((line.strip() for line in text.splitlines() if line.strip()), "")
    if not first_line or CV_HEADER_RE.match(first_line) or not NAME_LINE_RE.fullmatch(first_line):
        return None
    details = [f"Name: {first_line}"]
    email = EMAIL_RE.search(text)
    if email:
        details.append(f"Email: {email.group(0)}")
    phone = PHONE_RE.search(text)
    if phone:
        details.append(f"Phone: {phone.group(0)}")
    return make_candidate("What are the candidate's contact details?", "\n".join(details), ["cv", "contact"])


def extract_cv(text: str) -> List[Candidate]:
    """Resume sections, each running to the next recognised header."""
    headers = list(CV_HEADER_RE.finditer(text))
    candidates: List[Candidate] = []
    captured = set()
    for index, match in enumerate(headers):
        name = _section_name(match.group(0))
        if name not in CV_SECTIONS or name in captured:
            continue
        end = headers[index + 1].start() if index + 1 < len(headers) else len(text)
        prompt, subtag = CV_SECTIONS[name]
        candidate = make_candidate(prompt, text[match.end() : end], ["cv", subtag])
        if candidate:
            captured.add(name)
            candidates.append(candidate)

    contact = _extract_contact(text)
    if contact:
        candidates.append(contact)
    logger.debug("CV extraction produced %d candidates", len(candidates))
    return candidates


def extract_faq(text: str) -> List[Candidate]:
    candidates = (
        make_candidate(match.group("prompt"), match.group("completion"), ["faq"])
        for match in FAQ_RE.finditer(text)
    )
    return [candidate for candidate in candidates if candidate]


def extract_conversation(text: str) -> List[Candidate]:
    candidates = (
        make_candidate(match.group("prompt"), match.group("completion"), ["conversation"])
        for match in CONVERSATION_RE.finditer(text)
    )
    return [candidate for candidate in candidates if candidate]


def _first_present(record: Dict[str, Any], fields: Iterable[str]) -> str:
    for field in fields:
        value = record.get(field)
        if value is None or isinstance(value, (dict, list)):
            continue
        value = value if isinstance(value, str) else str(value)
        if value.strip():
            return value
    return ""


def _load_json_records(text: str) -> List[Any]:
    stripped = text.strip()
    if stripped.startswith("["):
        payload = json.loads(stripped)
        return payload if isinstance(payload, list) else []
    try:
        return [json.loads(line) for line in stripped.splitlines() if line.strip()]
    except json.JSONDecodeError:
        # A single pretty-printed object spans several lines.
        payload = json.loads(stripped)
        return [payload] if isinstance(payload, dict) else []


def extract_json(text: str) -> List[Candidate]:
    """JSON array, JSON-Lines, or a single object mapped through field synonyms."""
    try:
        records = _load_json_records(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.warning("Could not parse JSON input: %s", exc)
        return []

    candidates: List[Candidate] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.debug("Skipping non-object JSON record %d", index)
            continue
        tags = record.get("tags")
        if not isinstance(tags, (list, str)):
            tags = ["json"]
        candidate = make_candidate(
            _first_present(record, PROMPT_FIELDS),
            _first_present(record, COMPLETION_FIELDS),
            tags,
        )
        if candidate is None:
            logger.debug("Skipping JSON record %d without prompt/completion", index)
            continue
        candidates.append(candidate)
    return candidates


def extract_email(text: str) -> List[Candidate]:
    subject = SUBJECT_RE.search(text)
    if not subject or "\n\n" not in text:
        return []
    body = text.split("\n\n", 1)[1]
    candidate = make_candidate(f"Email about: {subject.group(1).strip()}", body, ["email"])
    return [candidate] if candidate else []
