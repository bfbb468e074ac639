"""Catalog sources supplying context records to the retrieval stage."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Protocol, Sequence

from .models import ContextRecord, Source

logger = logging.getLogger(__name__)

_SIMILAR_PREFIX = 30


class CatalogSource(Protocol):
    def load(self) -> List[ContextRecord]:
        ...


class StaticCatalog:
    """Serves an in-memory list of records."""

    def __init__(self, records: Iterable[ContextRecord] = ()) -> None:
        self._records = list(records)

    def load(self) -> List[ContextRecord]:
        return list(self._records)


class JsonFileCatalog:
    """Reads a ``{"contexts": [...]}`` document, degrading to an empty catalog."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> List[ContextRecord]:
        if not self.path.exists():
            logger.debug("Context catalog %s not found; using empty catalog", self.path)
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load context catalog %s: %s", self.path, exc)
            return []
        if not isinstance(payload, dict):
            logger.warning("Context catalog %s is not a JSON object", self.path)
            return []
        return records_from_payload(payload.get("contexts") or [])


def records_from_payload(entries: Any) -> List[ContextRecord]:
    if not isinstance(entries, list):
        logger.warning("Catalog 'contexts' must be a list, got %s", type(entries).__name__)
        return []
    records: List[ContextRecord] = []
    for position, entry in enumerate(entries):
        try:
            records.append(record_from_dict(entry))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed catalog entry #%d: %s", position, exc)
    return records


def record_from_dict(payload: Mapping[str, Any]) -> ContextRecord:
    """Helper to construct a record from a catalog entry."""

    if not isinstance(payload, Mapping):
        raise TypeError(f"catalog entry must be an object, got {type(payload).__name__}")
    keywords = payload.get("keywords", [])
    if isinstance(keywords, str) or not isinstance(keywords, (list, tuple)):
        raise TypeError("keywords must be a list of strings")
    return ContextRecord(
        id=str(payload["id"]),
        source=Source(payload["source"]),
        title=str(payload.get("title", "")),
        content=str(payload.get("content", "")),
        keywords=tuple(str(keyword) for keyword in keywords),
        timestamp=str(payload.get("timestamp", "")),
        author=str(payload.get("author", "")),
        url=str(payload.get("url", "")),
        relevance_score=_relevance_score(payload.get("relevanceScore")),
    )


def _relevance_score(raw: Any) -> float:
    # Informational field; a missing or non-numeric value never drops the record.
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


@dataclass(slots=True)
class DuplicatePair:
    first_id: str
    second_id: str
    value: str


@dataclass(slots=True)
class DuplicateReport:
    total_records: int
    duplicate_titles: List[DuplicatePair] = field(default_factory=list)
    duplicate_urls: List[DuplicatePair] = field(default_factory=list)
    similar_content: List[DuplicatePair] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        """Similar content is informational; titles and URLs must be unique."""

        return bool(self.duplicate_titles or self.duplicate_urls)

    def render_text(self) -> str:
        lines = [f"Records checked: {self.total_records}"]
        for label, pairs in (
            ("Duplicate titles", self.duplicate_titles),
            ("Duplicate URLs", self.duplicate_urls),
            ("Similar content", self.similar_content),
        ):
            if not pairs:
                continue
            lines.append(f"{label} ({len(pairs)}):")
            for pair in pairs:
                lines.append(f"  - {pair.value!r}: {pair.first_id}, {pair.second_id}")
        if not self.has_issues:
            lines.append("No duplicate titles or URLs detected.")
        return "\n".join(lines)


def find_duplicates(records: Sequence[ContextRecord]) -> DuplicateReport:
    """Compare every pair of records for repeated titles, URLs and content."""

    report = DuplicateReport(total_records=len(records))
    for i, first in enumerate(records):
        for second in records[i + 1 :]:
            title = first.title.lower()
            if title and title == second.title.lower():
                report.duplicate_titles.append(DuplicatePair(first.id, second.id, title))
            if first.url and first.url == second.url:
                report.duplicate_urls.append(DuplicatePair(first.id, second.id, first.url))
            if _contents_overlap(first.content.lower(), second.content.lower()):
                report.similar_content.append(DuplicatePair(first.id, second.id, first.title or first.id))
    return report


def _contents_overlap(content_a: str, content_b: str) -> bool:
    if len(content_a) <= _SIMILAR_PREFIX or len(content_b) <= _SIMILAR_PREFIX:
        return False
    return content_b[:_SIMILAR_PREFIX] in content_a or content_a[:_SIMILAR_PREFIX] in content_b
