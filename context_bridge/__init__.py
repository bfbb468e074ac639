"""Context Bridge core package surfacing ranked team knowledge for editor selections."""

from .catalog import JsonFileCatalog, StaticCatalog, find_duplicates
from .config import PipelineConfig
from .extractor import extract_intent_metadata, tokenize
from .models import (
    AppState,
    ContextMap,
    ContextRecord,
    IntentMetadata,
    SelectionEvent,
    Source,
    StateTransition,
)
from .pipeline import ContextBridge
from .scoring import RelevanceScorer, rank_records
from .state_machine import ContextBridgeStateMachine

__all__ = [
    "ContextBridge",
    "ContextBridgeStateMachine",
    "PipelineConfig",
    "RelevanceScorer",
    "rank_records",
    "extract_intent_metadata",
    "tokenize",
    "JsonFileCatalog",
    "StaticCatalog",
    "find_duplicates",
    "AppState",
    "ContextMap",
    "ContextRecord",
    "IntentMetadata",
    "SelectionEvent",
    "Source",
    "StateTransition",
]
