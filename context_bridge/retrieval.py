"""Retrieval stage glue: catalog loading, scoring and ranking."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Sequence

from .catalog import CatalogSource, JsonFileCatalog
from .config import PipelineConfig
from .models import ContextRecord, IntentMetadata
from .scoring import RelevanceScorer, rank_records

logger = logging.getLogger(__name__)


class RetrievalEngine:
    """Turns intent metadata into the top context nuggets of the catalog."""

    def __init__(
        self,
        catalog: CatalogSource | None = None,
        *,
        scorer: RelevanceScorer | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.catalog = catalog or JsonFileCatalog(self.config.catalog_path)
        self.scorer = scorer or RelevanceScorer(self.config)

    def retrieve(
        self,
        metadata: IntentMetadata,
        catalog: Sequence[ContextRecord] | None = None,
        *,
        now: datetime | None = None,
    ) -> List[ContextRecord]:
        """Rank ``catalog`` (or the injected source) and never raise.

        Any unexpected failure is logged and reported as an empty result.
        """

        try:
            records = list(catalog) if catalog is not None else self.catalog.load()
            scored = self.scorer.score(metadata, records, now=now)
            return rank_records(scored, limit=self.config.top_n)
        except Exception:  # runtime safeguard
            logger.exception("Error retrieving context nuggets")
            return []
