"""Keyword and recency relevance scoring plus top-N ranking."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Sequence

import numpy as np

from .config import PipelineConfig
from .extractor import tokenize
from .models import ContextRecord, IntentMetadata, ScoredRecord
from .utils import parse_timestamp

logger = logging.getLogger(__name__)


class RelevanceScorer:
    """Scores catalog records against the keywords of a selection.

    ``score = match_score * match_weight + recency_score * recency_weight`` where
    ``match_score`` is the share of a record's keywords that overlap a query
    token (substring in either direction) and ``recency_score`` is 1.0 inside
    the recency window and ``stale_recency`` outside it.
    """

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self.config = config or PipelineConfig()

    def score(
        self,
        metadata: IntentMetadata,
        catalog: Iterable[ContextRecord],
        *,
        now: datetime | None = None,
    ) -> List[ScoredRecord]:
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=self.config.recency_days)
        query = set(tokenize(metadata.selected_text, min_length=self.config.min_token_length))

        records: list[ContextRecord] = []
        match_counts: list[int] = []
        match_scores: list[float] = []
        recency_scores: list[float] = []
        for record in catalog:
            try:
                keywords = self._keywords(record)
                matches = self._count_matches(keywords, query)
                recency = self._recency(record.timestamp, cutoff)
            except (AttributeError, TypeError) as exc:
                logger.warning("Skipping malformed context record %s: %s", getattr(record, "id", "<unknown>"), exc)
                continue
            records.append(record)
            match_counts.append(matches)
            match_scores.append(matches / max(len(keywords), 1))
            recency_scores.append(recency)

        if not records:
            return []
        combined = (
            np.asarray(match_scores, dtype=float) * self.config.match_weight
            + np.asarray(recency_scores, dtype=float) * self.config.recency_weight
        )
        return [
            ScoredRecord(record=record, calculated_score=float(score), matches=matches)
            for record, score, matches in zip(records, combined, match_counts)
        ]

    @staticmethod
    def _keywords(record: ContextRecord) -> list[str]:
        raw = record.keywords
        if isinstance(raw, (str, bytes)):
            raise TypeError("keywords must be a sequence of strings")
        return [keyword.lower() for keyword in raw]

    @staticmethod
    def _count_matches(keywords: Sequence[str], query: set[str]) -> int:
        return sum(
            1
            for keyword in keywords
            if any(token in keyword or keyword in token for token in query)
        )

    def _recency(self, raw_timestamp: str, cutoff: datetime) -> float:
        parsed = parse_timestamp(raw_timestamp)
        if parsed is None:
            logger.debug("Unparseable record timestamp %r treated as stale", raw_timestamp)
            return self.config.stale_recency
        return 1.0 if parsed > cutoff else self.config.stale_recency


def rank_records(scored: Sequence[ScoredRecord], *, limit: int = 3) -> List[ContextRecord]:
    """Return the best ``limit`` records, highest score first.

    Records without any keyword match are dropped along with non-positive
    scores. Equal scores keep their catalog order.
    """

    candidates = [item for item in scored if item.calculated_score > 0 and item.matches > 0]
    if not candidates or limit <= 0:
        return []
    scores = np.fromiter((item.calculated_score for item in candidates), dtype=float, count=len(candidates))
    order = np.argsort(-scores, kind="stable")
    return [candidates[int(idx)].record for idx in order[:limit]]
