from __future__ import annotations

import csv
import io
import json
import logging
from typing import Callable, Dict, Iterable, List, Sequence

from dataset_curator.core.schemas import Pair
from dataset_curator.core.validators import drop_incomplete

from .cleaning import remove_exact_duplicates

logger = logging.getLogger(__name__)


EXPORT_FORMATS = ("json", "jsonl", "csv")
IMPORT_FORMATS = ("json", "jsonl", "csv", "text")
CSV_HEADER = "prompt,completion"
CSV_PROMPT_COLUMNS = ("prompt", "input")
CSV_COMPLETION_COLUMNS = ("completion", "output", "response")


def export_pairs(
    pairs: Sequence[Pair],
    target_format: str = "json",
    remove_duplicates: bool = False,
    validate: bool = True,
) -> str:
    formatter = target_format.lower()
    if formatter not in EXPORTERS:
        raise ValueError(f"Unsupported format: {target_format}")
    data: List[Pair] = list(pairs)
    if remove_duplicates:
        data = remove_exact_duplicates(data)
    if validate:
        data = drop_incomplete(data)
    logger.debug("Exporting %d of %d pairs as %s", len(data), len(pairs), formatter)
    return EXPORTERS[formatter](data)


def _to_json(pairs: Iterable[Pair]) -> str:
    records = [{"prompt": pair.prompt, "completion": pair.completion, "tags": pair.tags} for pair in pairs]
    return json.dumps(records, ensure_ascii=False, indent=2)


def _to_jsonl(pairs: Iterable[Pair]) -> str:
    return "\n".join(
        json.dumps({"prompt": pair.prompt, "completion": pair.completion}, ensure_ascii=False) for pair in pairs
    )


def _to_csv(pairs: Iterable[Pair]) -> str:
    buffer = io.StringIO()
    buffer.write(CSV_HEADER + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for pair in pairs:
        writer.writerow([pair.prompt, pair.completion])
    return buffer.getvalue().rstrip("\n")


EXPORTERS: Dict[str, Callable[[List[Pair]], str]] = {
    "json": _to_json,
    "jsonl": _to_jsonl,
    "csv": _to_csv,
}


def import_pairs(content: str, source_format: str) -> List[Pair]:
    """Parse previously exported or hand-written pairs.

    Unlike extraction, import expects the canonical ``prompt``/``completion``
    field names (CSV headers may use ``input``/``output``/``response``).
    Malformed JSON raises ``json.JSONDecodeError``; a CSV without usable
    columns raises ``ValueError``.
    """
    formatter = source_format.lower()
    if formatter not in IMPORTERS:
        raise ValueError(f"Unsupported format: {source_format}")
    pairs = IMPORTERS[formatter](content)
    logger.info("Imported %d pairs from %s content.", len(pairs), formatter)
    return pairs


def _records_to_pairs(records: Iterable) -> List[Pair]:
    pairs: List[Pair] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        prompt = record.get("prompt")
        completion = record.get("completion")
        if not prompt or not completion:
            continue
        pairs.append(Pair(prompt=str(prompt), completion=str(completion), tags=record.get("tags")))
    return pairs


def _from_json(content: str) -> List[Pair]:
    stripped = content.strip()
    if stripped.startswith("["):
        return _records_to_pairs(json.loads(stripped))
    return _from_jsonl(content)


def _from_jsonl(content: str) -> List[Pair]:
    return _records_to_pairs(json.loads(line) for line in content.splitlines() if line.strip())


def _find_column(headers: Sequence[str], candidates: Sequence[str]) -> int:
    for index, header in enumerate(headers):
        name = header.strip().lower()
        if any(candidate in name for candidate in candidates):
            return index
    return -1


def _from_csv(content: str) -> List[Pair]:
    rows = [row for row in csv.reader(io.StringIO(content.strip())) if any(cell.strip() for cell in row)]
    if not rows:
        return []
    headers = rows[0]
    prompt_index = _find_column(headers, CSV_PROMPT_COLUMNS)
    completion_index = _find_column(headers, CSV_COMPLETION_COLUMNS)
    if prompt_index == -1 or completion_index == -1:
        raise ValueError("CSV must have prompt/input and completion/output/response columns")

    pairs: List[Pair] = []
    for row in rows[1:]:
        if len(row) <= max(prompt_index, completion_index):
            logger.debug("Skipping short CSV row: %r", row)
            continue
        pairs.append(Pair(prompt=row[prompt_index].strip(), completion=row[completion_index].strip()))
    return pairs


def _from_text(content: str) -> List[Pair]:
    pairs: List[Pair] = []
    for block in content.strip().split("\n\n"):
        lines = [line.strip() for line in block.split("\n") if line.strip()]
        if len(lines) >= 2:
            pairs.append(Pair(prompt=lines[0], completion=" ".join(lines[1:])))
    return pairs


IMPORTERS: Dict[str, Callable[[str], List[Pair]]] = {
    "json": _from_json,
    "jsonl": _from_jsonl,
    "csv": _from_csv,
    "text": _from_text,
}
