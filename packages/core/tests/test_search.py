"""Tests for the shared search operation."""

import json

import pytest

from prrecall_core.errors import ErrorKind
from prrecall_core.models import PRRecord, PrComment, PrFileDiff
from prrecall_core.providers.base import BaseEmbedder
from prrecall_core.search import SearchQuery, SearchService, split_files, to_view


class _FixedEmbedder(BaseEmbedder):
    def __init__(self, vector=None, error=None):
        super().__init__(model="fixed")
        self.vector = vector if vector is not None else [1.0, 0.0]
        self.error = error
        self.texts = []

    def _call_api(self, text: str) -> list[float]:
        self.texts.append(text)
        if self.error is not None:
            raise self.error
        return self.vector


def _record(pr_id, embedding, org="a", repo="b"):
    return PRRecord(
        domain="github.com",
        org=org,
        repo=repo,
        pr_id=pr_id,
        title=f"PR {pr_id}",
        body=f"Body {pr_id}",
        author="dev",
        created_at="2024-01-01T00:00:00Z",
        merged=False,
        merged_at=None,
        state="open",
        comments=[
            PrComment(
                domain="github.com",
                org=org,
                repo=repo,
                pr_id=pr_id,
                body="Consider a guard here",
                author="reviewer",
                created_at="2024-01-01T01:00:00Z",
                line=3,
                filename="src/app.ts",
            )
        ],
        files=[PrFileDiff(filename="src/app.ts", status="modified", additions=1, deletions=0, changes=1, patch="+x")],
        embedding=embedding,
        text="irrelevant",
    )


@pytest.fixture
def corpus():
    return (
        _record(1, [1.0, 0.0]),
        _record(2, [0.0, 1.0]),
        _record(3, [1.0, 0.0], org="x", repo="y"),
    )


def _query(url="https://github.com/a/b/pull/99", files=("a.ts", "b.ts")):
    return SearchQuery(url=url, title="T", body="B", files=list(files))


def test_success_returns_ranked_views(corpus):
    embedder = _FixedEmbedder([1.0, 0.0])
    result = SearchService(corpus, embedder).search(_query())

    assert result.ok
    assert [m["url"] for m in result.matches] == [
        "https://github.com/a/b/pull/1",
        "https://github.com/a/b/pull/2",
    ]
    assert embedder.texts == ["Title: T\nBody: B\na.ts\nb.ts"]


def test_view_never_echoes_files_or_embedding(corpus):
    view = to_view(corpus[0])
    assert set(view) == {"url", "title", "body", "comments"}
    assert view["comments"] == [
        {
            "body": "Consider a guard here",
            "author": "reviewer",
            "created_at": "2024-01-01T01:00:00Z",
            "filename": "src/app.ts",
        }
    ]


def test_payload_is_json_array(corpus):
    result = SearchService(corpus, _FixedEmbedder([0.0, 1.0])).search(_query())
    payload = json.loads(result.payload())
    assert [p["title"] for p in payload] == ["PR 2", "PR 1"]


def test_top_k_respected(corpus):
    result = SearchService(corpus, _FixedEmbedder(), top_k=1).search(_query())
    assert len(result.matches) == 1


def test_invalid_url_is_a_result_not_an_exception(corpus):
    embedder = _FixedEmbedder()
    result = SearchService(corpus, embedder).search(_query(url="not-a-url"))

    assert not result.ok
    assert result.error_kind is ErrorKind.MALFORMED_INPUT
    assert result.payload().startswith("Invalid url format")
    assert embedder.texts == []


def test_embedding_failure_is_a_result_not_an_exception(corpus):
    result = SearchService(corpus, _FixedEmbedder(error=RuntimeError("503 unavailable"))).search(_query())

    assert not result.ok
    assert result.error_kind is ErrorKind.EMBEDDING
    assert result.payload().startswith("Search failed")
    assert "503 unavailable" in result.payload()


def test_dimension_mismatch_is_a_search_failure(corpus):
    result = SearchService(corpus, _FixedEmbedder([1.0, 0.0, 0.0])).search(_query())
    assert not result.ok
    assert result.payload().startswith("Search failed")


def test_zero_query_vector_returns_empty_list(corpus):
    result = SearchService(corpus, _FixedEmbedder([0.0, 0.0])).search(_query())
    assert result.ok
    assert result.matches == []
    assert result.payload() == "[]"


def test_unknown_repository_returns_empty_list(corpus):
    result = SearchService(corpus, _FixedEmbedder()).search(_query(url="https://github.com/other/repo"))
    assert result.ok
    assert result.matches == []


def test_failure_does_not_affect_later_queries(corpus):
    embedder = _FixedEmbedder(error=RuntimeError("timeout"))
    service = SearchService(corpus, embedder)
    assert not service.search(_query()).ok

    embedder.error = None
    assert service.search(_query()).ok


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("a.ts,b.ts", ["a.ts", "b.ts"]),
        (" a.ts , b.ts ", ["a.ts", "b.ts"]),
        ("a.ts,,b.ts,", ["a.ts", "b.ts"]),
        ("", []),
        (None, []),
    ],
)
def test_split_files(raw, expected):
    assert split_files(raw) == expected
