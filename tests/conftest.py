from __future__ import annotations

from datetime import timedelta

import pytest

from context_bridge.models import ContextRecord, IntentMetadata, Source
from context_bridge.utils import from_timestamp_ms

# 2026-01-01T00:00:00Z
NOW_MS = 1_767_225_600_000
NOW = from_timestamp_ms(NOW_MS)


def iso_days_ago(days: float) -> str:
    return (NOW - timedelta(days=days)).isoformat().replace("+00:00", "Z")


def make_record(
    record_id: str,
    keywords=("misc",),
    *,
    days_ago: float = 1,
    source: Source = Source.TEAMS,
    title: str | None = None,
    content: str = "",
    url: str | None = None,
    timestamp: str | None = None,
) -> ContextRecord:
    return ContextRecord(
        id=record_id,
        source=source,
        title=title if title is not None else f"Record {record_id}",
        content=content,
        keywords=tuple(keywords),
        timestamp=timestamp if timestamp is not None else iso_days_ago(days_ago),
        author="alice",
        url=url if url is not None else f"https://example.com/{record_id}",
    )


def make_metadata(text: str) -> IntentMetadata:
    return IntentMetadata(
        selected_text=text,
        file_name="build.ts",
        file_language="typescript",
        line_number=1,
        timestamp=NOW_MS,
    )


@pytest.fixture
def clock():
    return lambda: NOW_MS


@pytest.fixture
def build_catalog():
    return [
        make_record("x1", ["build", "ci"], days_ago=0, source=Source.GITHUB_PR),
        make_record("x2", ["build", "legacy"], days_ago=400, source=Source.GITHUB_PR),
        make_record("x3", ["patterns"], days_ago=0),
    ]
