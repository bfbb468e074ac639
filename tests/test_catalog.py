from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import make_record
from context_bridge.catalog import JsonFileCatalog, StaticCatalog, find_duplicates, record_from_dict
from context_bridge.models import Source

SAMPLE_CATALOG = Path(__file__).resolve().parent.parent / "data" / "contextDatabase.json"


def _entry(record_id: str, **overrides):
    entry = {
        "id": record_id,
        "source": "Teams",
        "title": f"Title {record_id}",
        "content": "Some content",
        "keywords": ["build"],
        "timestamp": "2025-12-20T10:00:00Z",
        "author": "alice",
        "relevanceScore": 0.4,
        "url": f"https://example.com/{record_id}",
    }
    entry.update(overrides)
    return entry


def test_missing_file_yields_empty_catalog(tmp_path):
    assert JsonFileCatalog(tmp_path / "absent.json").load() == []


def test_corrupt_file_yields_empty_catalog(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level("WARNING"):
        assert JsonFileCatalog(path).load() == []
    assert "Failed to load context catalog" in caplog.text


def test_non_object_document_yields_empty_catalog(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")

    assert JsonFileCatalog(path).load() == []


def test_contexts_must_be_a_list(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"contexts": {"id": "x"}}), encoding="utf-8")

    assert JsonFileCatalog(path).load() == []


def test_malformed_entries_are_skipped(tmp_path, caplog):
    path = tmp_path / "catalog.json"
    missing_id = _entry("ignored")
    del missing_id["id"]
    payload = {
        "contexts": [
            _entry("ok"),
            missing_id,
            _entry("bad-source", source="Slack"),
            _entry("bad-keywords", keywords="build"),
            "not an object",
            _entry("pr", source="GitHub-PR"),
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")

    with caplog.at_level("WARNING"):
        records = JsonFileCatalog(path).load()

    assert [record.id for record in records] == ["ok", "pr"]
    assert records[1].source is Source.GITHUB_PR
    assert caplog.text.count("Skipping malformed catalog entry") == 4


def test_record_from_dict_maps_fields():
    record = record_from_dict(_entry("a", keywords=["Build", "CI"], source="GitHub Issue"))

    assert record.id == "a"
    assert record.source is Source.GITHUB_ISSUE
    assert record.keywords == ("Build", "CI")
    assert record.relevance_score == 0.4
    assert record.to_payload()["relevanceScore"] == 0.4


def test_sample_catalog_loads():
    records = JsonFileCatalog(SAMPLE_CATALOG).load()

    assert len(records) == 6
    assert len({record.id for record in records}) == 6
    assert not find_duplicates(records).has_issues


def test_static_catalog_returns_a_copy():
    catalog = StaticCatalog([make_record("a")])

    first = catalog.load()
    first.clear()

    assert [record.id for record in catalog.load()] == ["a"]


def test_find_duplicates_reports_titles_urls_and_content():
    shared = "The deployment pipeline runs on every merge to main and publishes artifacts."
    records = [
        make_record("a", title="Build Notes", url="https://example.com/same", content=shared),
        make_record("b", title="build notes", url="https://example.com/other"),
        make_record("c", title="Unrelated", url="https://example.com/same"),
        make_record("d", title="Copy", content="Summary: " + shared),
    ]

    report = find_duplicates(records)

    assert [(pair.first_id, pair.second_id) for pair in report.duplicate_titles] == [("a", "b")]
    assert [(pair.first_id, pair.second_id) for pair in report.duplicate_urls] == [("a", "c")]
    assert [(pair.first_id, pair.second_id) for pair in report.similar_content] == [("a", "d")]
    assert report.has_issues
    assert "Duplicate titles (1)" in report.render_text()


def test_similar_content_alone_is_not_an_issue():
    text = "Rate limits are enforced with a sliding window per user and per IP address."
    report = find_duplicates([make_record("a", content=text), make_record("b", content=text)])

    assert len(report.similar_content) == 1
    assert not report.has_issues
    assert "No duplicate titles or URLs detected." in report.render_text()


def test_short_content_is_not_compared():
    report = find_duplicates([make_record("a", content="short"), make_record("b", content="short")])
    assert report.similar_content == []


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 0.0), ("high", 0.0), ([0.9], 0.0), (True, 0.0), ("0.4", 0.4), (0.75, 0.75), (float("nan"), 0.0)],
)
def test_unusable_relevance_score_keeps_record(raw, expected):
    record = record_from_dict(_entry("a", relevanceScore=raw))

    assert record.id == "a"
    assert record.relevance_score == expected


def test_null_relevance_score_loads_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"contexts": [_entry("a", relevanceScore=None)]}), encoding="utf-8")

    assert [record.id for record in JsonFileCatalog(path).load()] == ["a"]
