"""The single search operation behind every transport binding.

search() never raises for classified failures: an invalid URL or a failed
embedding comes back as a SearchResult carrying the error, so a tool call
always returns a well-formed answer the calling agent can react to.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from prrecall_core.errors import EmbeddingFailure, ErrorKind, MalformedInput, PrRecallError, attempt
from prrecall_core.models import PRRecord
from prrecall_core.providers.base import BaseEmbedder
from prrecall_core.ranking import DEFAULT_TOP_K, rank
from prrecall_core.utils.text import build_pr_text
from prrecall_core.utils.url import parse_repo_url, pr_url

logger = logging.getLogger(__name__)


@dataclass
class SearchQuery:
    url: str
    title: str
    body: str = ""
    files: list[str] = field(default_factory=list)


@dataclass
class SearchResult:
    matches: list[dict] = field(default_factory=list)
    error: PrRecallError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def payload(self) -> str:
        """Render the result as the text body of a tool response."""
        if self.error is not None:
            return self.error.message
        return json.dumps(self.matches, indent=2, ensure_ascii=False)


def to_view(record: PRRecord) -> dict:
    """Map a record to the fields returned to callers.

    File diffs and the raw embedding are never echoed back.
    """
    return {
        "url": pr_url(record),
        "title": record.title,
        "body": record.body,
        "comments": [
            {
                "body": c.body,
                "author": c.author,
                "created_at": c.created_at,
                "filename": c.filename,
            }
            for c in record.comments
        ],
    }


def split_files(files: str) -> list[str]:
    """Split a comma-separated file list, dropping blanks."""
    return [f.strip() for f in (files or "").split(",") if f.strip()]


class SearchService:
    """Binds an immutable corpus to an embedder.

    Holds no mutable state, so one instance serves concurrent queries.
    """

    def __init__(self, corpus: Iterable[PRRecord], embedder: BaseEmbedder, top_k: int = DEFAULT_TOP_K):
        self.corpus = corpus
        self.embedder = embedder
        self.top_k = top_k

    def search(self, query: SearchQuery) -> SearchResult:
        scope = parse_repo_url(query.url)
        if scope is None:
            return SearchResult(error=MalformedInput(f"Invalid url format: {query.url}"))

        text = build_pr_text(query.title, query.body or "", query.files)

        outcome = attempt(self.embedder.embed, text)
        if not outcome.ok:
            logger.warning("Search for %s failed: %s", scope, outcome.error)
            return SearchResult(error=EmbeddingFailure(f"Search failed: {outcome.error}"))

        try:
            records = rank(self.corpus, outcome.value, scope, self.top_k)
        except ValueError as e:
            # Query vector dimensionality differs from the corpus: the service
            # is configured with a different embedding model than the build.
            logger.error("Search for %s failed: %s", scope, e)
            return SearchResult(error=EmbeddingFailure(f"Search failed: {e}"))

        logger.info("Search for %s returned %d match(es)", scope, len(records))
        return SearchResult(matches=[to_view(r) for r in records])
