from __future__ import annotations

import logging
from pathlib import Path

from dataset_curator.core.utils import safe_read_text

logger = logging.getLogger(__name__)


TEXT_EXTENSIONS = {".txt", ".log", ".md", ".markdown", ".json", ".jsonl", ".csv", ".eml", ""}
PDF_EXTENSIONS = {".pdf"}
DOCX_EXTENSIONS = {".docx"}
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | PDF_EXTENSIONS | DOCX_EXTENSIONS


def read_document(path: Path) -> str:
    """Return the text content of ``path``; unreadable documents yield an empty string."""
    suffix = path.suffix.lower()
    if suffix in PDF_EXTENSIONS:
        return _extract_pdf(path)
    if suffix in DOCX_EXTENSIONS:
        return _extract_docx(path)
    if suffix not in TEXT_EXTENSIONS:
        logger.debug("Reading %s as plain text (unrecognised extension)", path)
    return safe_read_text(path)


def _extract_docx(path: Path) -> str:
    try:
        import docx2txt  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        logger.warning("docx2txt not installed; cannot parse %s: %s", path, exc)
        return ""
    try:
        return docx2txt.process(str(path)) or ""
    except Exception as exc:  # pragma: no cover
        logger.warning("docx2txt failed for %s: %s", path, exc)
        return ""


def _extract_pdf(path: Path) -> str:
    try:
        from pdfminer.high_level import extract_text  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        logger.warning("pdfminer.six not installed; cannot parse %s: %s", path, exc)
        return ""
    try:
        # Page breaks become blank lines so paragraph splitting still works.
        return extract_text(str(path)).replace("\f", "\n\n")
    except Exception as exc:  # pragma: no cover
        logger.warning("Failed to parse PDF %s: %s", path, exc)
        return ""
