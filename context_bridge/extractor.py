"""Intent metadata extraction and naive keyword tokenization."""

from __future__ import annotations

import re
from typing import Callable, List

from .models import IntentMetadata
from .utils import timestamp_ms

_NON_WORD = re.compile(r"\W+")


def tokenize(text: str, *, min_length: int = 4) -> List[str]:
    """Lower-case ``text`` and split it into query keywords.

    Tokens shorter than ``min_length`` are dropped, so with the default only
    words of four or more characters survive.
    """

    if not text:
        return []
    return [token for token in _NON_WORD.split(text.lower()) if len(token) >= min_length]


def extract_intent_metadata(
    selected_text: str,
    file_name: str,
    file_language: str,
    line_number: int,
    *,
    clock: Callable[[], int] = timestamp_ms,
) -> IntentMetadata:
    return IntentMetadata(
        selected_text=selected_text,
        file_name=file_name,
        file_language=file_language,
        line_number=line_number,
        timestamp=clock(),
    )
