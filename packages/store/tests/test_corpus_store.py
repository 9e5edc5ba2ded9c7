"""Tests for loading the NDJSON corpus."""

from __future__ import annotations

import json

import pytest

from prrecall_core.errors import CorpusLoadError
from prrecall_core.models import PRRecord, PrComment, PrFileDiff, Scope
from prrecall_store.corpus import CorpusStore
from prrecall_store.writer import CorpusWriter


def _record(pr_id=1, embedding=(0.1, 0.2, 0.3), org="acme", repo="widgets"):
    return PRRecord(
        domain="github.com",
        org=org,
        repo=repo,
        pr_id=pr_id,
        title=f"PR {pr_id}",
        body="Body",
        author="octocat",
        created_at="2024-03-01T10:00:00Z",
        merged=True,
        merged_at="2024-03-02T09:30:00Z",
        state="closed",
        comments=[
            PrComment(
                domain="github.com",
                org=org,
                repo=repo,
                pr_id=pr_id,
                body="nit",
                author="reviewer",
                created_at="2024-03-01T11:00:00Z",
                line=4,
                filename="a.ts",
            )
        ],
        files=[PrFileDiff(filename="a.ts", status="modified", additions=1, deletions=1, changes=2, patch="-a\n+b")],
        embedding=list(embedding),
        text="Title: PR\nBody: Body\na.ts",
    )


def _write_lines(path, lines):
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")


def _line(record):
    return json.dumps(record.to_dict())


class TestLoad:
    def test_loads_records_in_file_order(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [_line(_record(2)), _line(_record(1))])

        store = CorpusStore.load(path)

        assert len(store) == 2
        assert [r.pr_id for r in store] == [2, 1]
        assert store.dimensions == 3

    def test_blank_lines_are_ignored(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        _write_lines(path, ["", _line(_record(1)), "   ", _line(_record(2)), ""])
        assert len(CorpusStore.load(path)) == 2

    def test_empty_file(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        path.write_text("", encoding="utf-8")
        store = CorpusStore.load(path)
        assert len(store) == 0
        assert store.dimensions is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(CorpusLoadError):
            CorpusStore.load(tmp_path / "nope.jsonl")

    def test_invalid_json_names_the_line(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [_line(_record(1)), "{not json"])
        with pytest.raises(CorpusLoadError) as exc_info:
            CorpusStore.load(path)
        assert ":2:" in exc_info.value.message

    def test_missing_field_is_fatal(self, tmp_path):
        data = _record(1).to_dict()
        del data["title"]
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [json.dumps(data)])
        with pytest.raises(CorpusLoadError):
            CorpusStore.load(path)

    def test_duplicate_key_is_fatal(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [_line(_record(1)), _line(_record(1))])
        with pytest.raises(CorpusLoadError) as exc_info:
            CorpusStore.load(path)
        assert "duplicate" in exc_info.value.message

    def test_same_pr_number_in_other_repository_is_not_a_duplicate(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [_line(_record(1)), _line(_record(1, repo="gadgets"))])
        assert len(CorpusStore.load(path)) == 2

    def test_mixed_dimensions_is_fatal(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [_line(_record(1)), _line(_record(2, embedding=(0.1, 0.2)))])
        with pytest.raises(CorpusLoadError) as exc_info:
            CorpusStore.load(path)
        assert "dimensions" in exc_info.value.message

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite_embedding_is_fatal(self, tmp_path, value):
        data = _record(1).to_dict()
        data["embedding"][1] = float(value)
        line = json.dumps(data)
        assert "NaN" in line or "Infinity" in line
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [line])
        with pytest.raises(CorpusLoadError) as exc_info:
            CorpusStore.load(path)
        assert ":1:" in exc_info.value.message

    def test_records_without_embedding_are_kept(self, tmp_path):
        path = tmp_path / "prs.jsonl"
        _write_lines(path, [_line(_record(1, embedding=())), _line(_record(2))])
        store = CorpusStore.load(path)
        assert len(store) == 2
        assert store.dimensions == 3


class TestInMemory:
    def test_scopes_counts_per_repository(self):
        store = CorpusStore([_record(1), _record(2), _record(1, org="other")])
        assert store.scopes() == {
            Scope("github.com", "acme", "widgets"): 2,
            Scope("github.com", "other", "widgets"): 1,
        }

    def test_mixed_dimensions_rejected(self):
        with pytest.raises(CorpusLoadError):
            CorpusStore([_record(1), _record(2, embedding=(1.0,))])

    def test_records_is_a_snapshot(self):
        source = [_record(1)]
        store = CorpusStore(source)
        source.append(_record(2))
        assert len(store.records) == 1


def test_written_corpus_loads_back_unchanged(tmp_path):
    path = tmp_path / "prs.jsonl"
    records = [_record(1), _record(2, embedding=(0.4, 0.5, 0.6))]

    with CorpusWriter(path) as writer:
        for record in records:
            writer.append(record)

    assert list(CorpusStore.load(path)) == records
