"""Data models flowing through the Context Bridge state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class Source(str, Enum):
    """Systems a context record can originate from."""

    TEAMS = "Teams"
    SHAREPOINT = "SharePoint"
    GITHUB_PR = "GitHub PR"
    GITHUB_ISSUE = "GitHub Issue"

    @classmethod
    def _missing_(cls, value: object) -> "Source | None":
        # Accept "GitHub-PR", "github pr" and similar spellings.
        if isinstance(value, str):
            normalized = value.replace("-", " ").replace("_", " ").strip().lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None


class AppState(str, Enum):
    IDLE = "State_Idle"
    TRIGGER = "State_Trigger"
    RETRIEVAL = "State_Retrieval"
    DISPLAY = "State_Display"
    # Declared for later stages; no transition enters them yet.
    VALIDATION = "State_Validation"
    PERSISTENCE = "State_Persistence"


@dataclass(frozen=True, slots=True)
class IntentMetadata:
    """What the user selected and where, stamped when the run started."""

    selected_text: str
    file_name: str
    file_language: str
    line_number: int
    timestamp: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "selectedText": self.selected_text,
            "fileName": self.file_name,
            "fileLanguage": self.file_language,
            "lineNumber": self.line_number,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class ContextRecord:
    """A single retrievable unit of prior team knowledge."""

    id: str
    source: Source
    title: str
    content: str
    keywords: Tuple[str, ...]
    timestamp: str
    author: str
    url: str
    relevance_score: float = 0.0

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source.value,
            "title": self.title,
            "content": self.content,
            "keywords": list(self.keywords),
            "timestamp": self.timestamp,
            "author": self.author,
            "relevanceScore": self.relevance_score,
            "url": self.url,
        }


@dataclass(slots=True)
class ScoredRecord:
    """Catalog record paired with the transient score used for ranking."""

    record: ContextRecord
    calculated_score: float
    matches: int = 0


@dataclass(frozen=True, slots=True)
class ContextMap:
    """Result of one pipeline run, as cached and sent to the display surface."""

    metadata: IntentMetadata
    nuggets: Tuple[ContextRecord, ...]
    cached_at: int
    session_id: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_payload(),
            "nuggets": [nugget.to_payload() for nugget in self.nuggets],
            "cachedAt": self.cached_at,
            "sessionId": self.session_id,
        }


@dataclass(frozen=True, slots=True)
class StateTransition:
    from_state: AppState
    to_state: AppState
    trigger: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SelectionEvent:
    """Selection reported by the host editor."""

    selected_text: str
    file_name: str
    file_language: str
    line_number: int


@dataclass(frozen=True, slots=True)
class LinkNavigated:
    nugget_id: str
    source: str
    url: str
    timestamp: int


@dataclass(frozen=True, slots=True)
class MetricLogged:
    label: str
    value: float
