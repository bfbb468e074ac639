"""Context Bridge state machine.

Orchestrates the four-state flow ``Idle -> Trigger -> Retrieval -> Display ->
Idle`` for every processed selection, keeps the full transition history and
caches each run's :class:`ContextMap` by session id.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from .catalog import CatalogSource
from .config import PipelineConfig
from .extractor import extract_intent_metadata
from .models import AppState, ContextMap, ContextRecord, IntentMetadata, StateTransition
from .retrieval import RetrievalEngine
from .utils import from_timestamp_ms, generate_id, timestamp_ms

logger = logging.getLogger(__name__)

# Each state maps to the state it advances to and the label recorded for it.
TRANSITIONS: Dict[AppState, Tuple[AppState, str]] = {
    AppState.IDLE: (AppState.TRIGGER, "text-selected"),
    AppState.TRIGGER: (AppState.RETRIEVAL, "metadata-extracted"),
    AppState.RETRIEVAL: (AppState.DISPLAY, "context-retrieved"),
    AppState.DISPLAY: (AppState.IDLE, "context-displayed"),
}


class ContextBridgeStateMachine:
    """Owns the current state, the transition history and the session cache.

    Runs are synchronous and not guarded by a lock: callers must not invoke
    :meth:`process_selection` concurrently on the same instance. The session
    cache grows until :meth:`clear_session_cache` is called.
    """

    def __init__(
        self,
        catalog: CatalogSource | None = None,
        *,
        config: PipelineConfig | None = None,
        retrieval: RetrievalEngine | None = None,
        clock: Callable[[], int] = timestamp_ms,
    ) -> None:
        self.config = config or PipelineConfig()
        self.retrieval = retrieval or RetrievalEngine(catalog, config=self.config)
        self._clock = clock
        self._current_state = AppState.IDLE
        self._history: List[StateTransition] = []
        self._session_cache: Dict[str, ContextMap] = {}

    def process_selection(
        self,
        selected_text: str,
        file_name: str,
        file_language: str,
        line_number: int,
        *,
        catalog: Sequence[ContextRecord] | None = None,
    ) -> ContextMap:
        """Run one selection through all four stages and cache the result."""

        self._advance()  # Idle -> Trigger
        metadata = extract_intent_metadata(
            selected_text,
            file_name,
            file_language,
            line_number,
            clock=self._clock,
        )

        self._advance()  # Trigger -> Retrieval
        try:
            nuggets = self.retrieval.retrieve(
                metadata,
                catalog,
                now=from_timestamp_ms(self._clock()),
            )
        except Exception:  # runtime safeguard
            logger.exception("Retrieval failed for %s; showing no context", metadata.file_name)
            nuggets = []

        self._advance()  # Retrieval -> Display
        context_map = self.generate_context_map(metadata, nuggets)
        self._session_cache[context_map.session_id] = context_map
        logger.debug(
            "Cached %d nuggets for %s (session %s)",
            len(context_map.nuggets),
            metadata.file_name,
            context_map.session_id,
        )

        self._advance()  # Display -> Idle
        return context_map

    def generate_context_map(self, metadata: IntentMetadata, nuggets: Sequence[ContextRecord]) -> ContextMap:
        return ContextMap(
            metadata=metadata,
            nuggets=tuple(nuggets),
            cached_at=self._clock(),
            session_id=self._new_session_id(),
        )

    def get_state(self) -> AppState:
        return self._current_state

    def get_state_history(self) -> List[StateTransition]:
        return list(self._history)

    @property
    def session_cache(self) -> Mapping[str, ContextMap]:
        return MappingProxyType(self._session_cache)

    def get_cached(self, session_id: str) -> ContextMap | None:
        return self._session_cache.get(session_id)

    def clear_session_cache(self) -> None:
        self._session_cache.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _advance(self) -> StateTransition:
        from_state = self._current_state
        to_state, trigger = TRANSITIONS[from_state]
        self._current_state = to_state
        transition = StateTransition(
            from_state=from_state,
            to_state=to_state,
            trigger=trigger,
            data={"timestamp": self._clock()},
        )
        self._history.append(transition)
        return transition

    def _new_session_id(self) -> str:
        session_id = generate_id("session")
        while session_id in self._session_cache:
            session_id = generate_id("session")
        return session_id
