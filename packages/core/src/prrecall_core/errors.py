"""Error taxonomy shared by ingestion and the query path.

Every failure is a PrRecallError tagged with an ErrorKind. The same error
means different things at different call sites: an EmbeddingFailure aborts
a corpus build but only fails a single search. Callers wrap risky calls
with attempt() and decide what a failed Outcome means for them:

    outcome = attempt(embedder.embed, text)
    if not outcome.ok:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    PRECONDITION = "precondition"
    UPSTREAM_FETCH = "upstream_fetch"
    EMBEDDING = "embedding"
    MALFORMED_INPUT = "malformed_input"
    CORPUS_LOAD = "corpus_load"


class PrRecallError(Exception):
    """Base class for every failure the core knows how to classify."""

    kind: ErrorKind = ErrorKind.PRECONDITION

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class PreconditionError(PrRecallError):
    """Invalid repository URL or missing credential. Raised before any network call."""

    kind = ErrorKind.PRECONDITION


class UpstreamFetchError(PrRecallError):
    """A GitHub API call failed (auth, rate limit, not found)."""

    kind = ErrorKind.UPSTREAM_FETCH


class EmbeddingFailure(PrRecallError):
    """The embedding provider could not produce a vector."""

    kind = ErrorKind.EMBEDDING


class MalformedInput(PrRecallError):
    """A query argument does not have the expected shape."""

    kind = ErrorKind.MALFORMED_INPUT


class CorpusLoadError(PrRecallError):
    """The corpus file is missing or contains a line that cannot be used."""

    kind = ErrorKind.CORPUS_LOAD


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Success/failure value: exactly one of ``value`` or ``error`` is meaningful."""

    value: T | None = None
    error: PrRecallError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: PrRecallError) -> Outcome[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def attempt(fn: Callable[..., T], *args, **kwargs) -> Outcome[T]:
    """Call fn and capture a PrRecallError as a failed Outcome.

    Anything that is not a PrRecallError propagates unchanged: only
    classified failures are turned into values.
    """
    try:
        return Outcome.success(fn(*args, **kwargs))
    except PrRecallError as e:
        return Outcome.failure(e)
