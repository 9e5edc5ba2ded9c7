"""Scope-filtered cosine-similarity ranking over an in-memory corpus.

A flat linear scan: O(n) filtering plus O(n·d) scoring per query, with
vector norms recomputed on every call. The ranker holds no state, so
queries can run concurrently.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from prrecall_core.models import PRRecord, Scope

DEFAULT_TOP_K = 3


@dataclass(frozen=True)
class ScoredRecord:
    record: PRRecord
    score: float


def _norm(v: Sequence[float]) -> float:
    return math.sqrt(sum(x * x for x in v))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float | None:
    """Return the cosine of the angle between a and b.

    Returns None when the similarity is undefined: either vector has zero
    norm or contains a non-finite component. Raises ValueError when the
    lengths differ.
    """
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")
    norm_a = _norm(a)
    norm_b = _norm(b)
    if norm_a == 0 or norm_b == 0:
        return None
    dot = sum(x * y for x, y in zip(a, b))
    score = dot / (norm_a * norm_b)
    # NaN or Inf components make the similarity undefined.
    if not math.isfinite(score):
        return None
    # Clamp rounding noise so identical vectors score exactly within [-1, 1].
    return max(-1.0, min(1.0, score))


def rank_scored(
    corpus: Iterable[PRRecord],
    query_embedding: Sequence[float],
    scope: Scope,
    k: int = DEFAULT_TOP_K,
) -> list[ScoredRecord]:
    """Return up to k records of ``scope`` ordered by similarity to the query.

    Records without an embedding, and records whose similarity is undefined,
    are never ranked. A zero-norm query yields an empty list rather than an
    arbitrary pick. Ties keep corpus order (sorted() is stable, including
    with reverse=True).
    """
    if k <= 0 or not query_embedding or _norm(query_embedding) == 0:
        return []

    scope = Scope(*scope)
    scored: list[ScoredRecord] = []
    for record in corpus:
        if record.scope != scope or not record.embedding:
            continue
        score = cosine_similarity(query_embedding, record.embedding)
        if score is None:
            continue
        scored.append(ScoredRecord(record=record, score=score))

    scored = sorted(scored, key=lambda s: s.score, reverse=True)
    return scored[:k]


def rank(
    corpus: Iterable[PRRecord],
    query_embedding: Sequence[float],
    scope: Scope,
    k: int = DEFAULT_TOP_K,
) -> list[PRRecord]:
    return [s.record for s in rank_scored(corpus, query_embedding, scope, k)]
