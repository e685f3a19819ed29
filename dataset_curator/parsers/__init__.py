from .documents import read_document
from .generic import extract_generic
from .router import FORMAT_RULES, STRATEGIES, classify, extract, extract_pairs, resolve_format
from .rule_based import extract_conversation, extract_cv, extract_email, extract_faq, extract_json

__all__ = [
    "FORMAT_RULES",
    "STRATEGIES",
    "classify",
    "extract",
    "extract_conversation",
    "extract_cv",
    "extract_email",
    "extract_faq",
    "extract_generic",
    "extract_json",
    "extract_pairs",
    "read_document",
    "resolve_format",
]
