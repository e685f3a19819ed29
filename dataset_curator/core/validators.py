from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .schemas import Pair

logger = logging.getLogger(__name__)


def is_valid_pair(pair: Pair) -> bool:
    return pair.is_complete


def drop_incomplete(pairs: Iterable[Pair]) -> List[Pair]:
    validated: List[Pair] = []
    for index, pair in enumerate(pairs):
        if not is_valid_pair(pair):
            logger.debug("Dropping incomplete pair at index %d", index)
            continue
        validated.append(pair)
    return validated


def incomplete_indices(pairs: Sequence[Pair]) -> List[int]:
    return [index for index, pair in enumerate(pairs) if not is_valid_pair(pair)]
