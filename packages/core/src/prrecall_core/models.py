"""Pull request corpus data models.

One PRRecord per historical pull request. The JSON mapping produced by
to_dict() is the corpus file format: field order matches the order the
records are written in, and from_dict() is its exact inverse.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import NamedTuple


class Scope(NamedTuple):
    """The (domain, org, repo) triple that restricts a search to one repository."""

    domain: str
    org: str
    repo: str

    def __str__(self) -> str:
        return f"{self.domain}/{self.org}/{self.repo}"


def _require(d: dict, key: str, types: type | tuple[type, ...], nullable: bool = False):
    if not isinstance(d, dict):
        raise ValueError(f"expected a JSON object, got {type(d).__name__}")
    if key not in d:
        raise ValueError(f"missing field {key!r}")
    value = d[key]
    if value is None and nullable:
        return None
    # bool is an int subclass; never accept it where a number is expected.
    if isinstance(value, bool) and bool not in (types if isinstance(types, tuple) else (types,)):
        raise ValueError(f"field {key!r} has type bool")
    if not isinstance(value, types):
        raise ValueError(f"field {key!r} has type {type(value).__name__}")
    return value


@dataclass
class PrComment:
    """A comment on a pull request.

    ``line`` and ``filename`` are set only for review comments anchored to a
    diff line; general conversation comments leave both as None.
    """

    domain: str
    org: str
    repo: str
    pr_id: int
    body: str
    author: str | None
    created_at: str  # ISO-8601 UTC, GitHub format
    line: int | None = None
    filename: str | None = None

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "org": self.org,
            "repo": self.repo,
            "pr_id": self.pr_id,
            "body": self.body,
            "author": self.author,
            "created_at": self.created_at,
            "line": self.line,
            "filename": self.filename,
        }

    @classmethod
    def from_dict(cls, d: dict) -> PrComment:
        return cls(
            domain=_require(d, "domain", str),
            org=_require(d, "org", str),
            repo=_require(d, "repo", str),
            pr_id=_require(d, "pr_id", int),
            body=_require(d, "body", str),
            author=_require(d, "author", str, nullable=True),
            created_at=_require(d, "created_at", str),
            line=_require(d, "line", int, nullable=True),
            filename=_require(d, "filename", str, nullable=True),
        )


@dataclass
class PrFileDiff:
    """One changed file of a pull request as reported by the files endpoint."""

    filename: str
    status: str
    additions: int
    deletions: int
    changes: int
    patch: str | None = None  # absent for binary or very large diffs

    def to_dict(self) -> dict:
        d = {
            "filename": self.filename,
            "status": self.status,
            "additions": self.additions,
            "deletions": self.deletions,
            "changes": self.changes,
        }
        if self.patch is not None:
            d["patch"] = self.patch
        return d

    @classmethod
    def from_dict(cls, d: dict) -> PrFileDiff:
        filename = _require(d, "filename", str)
        patch = d.get("patch")
        if patch is not None and not isinstance(patch, str):
            raise ValueError("field 'patch' has type " + type(patch).__name__)
        return cls(
            filename=filename,
            status=_require(d, "status", str),
            additions=_require(d, "additions", int),
            deletions=_require(d, "deletions", int),
            changes=_require(d, "changes", int),
            patch=patch,
        )


@dataclass
class PRRecord:
    """A historical pull request with the embedding of its canonical text.

    (domain, org, repo, pr_id) identifies the record. ``embedding`` may be
    empty, in which case the record is never ranked. ``text`` is the exact
    string the embedding was generated from.
    """

    domain: str
    org: str
    repo: str
    pr_id: int
    title: str
    body: str
    author: str | None
    created_at: str
    merged: bool
    merged_at: str | None
    state: str
    comments: list[PrComment] = field(default_factory=list)
    files: list[PrFileDiff] = field(default_factory=list)
    embedding: list[float] = field(default_factory=list)
    text: str = ""

    @property
    def scope(self) -> Scope:
        return Scope(self.domain, self.org, self.repo)

    @property
    def key(self) -> tuple[str, str, str, int]:
        return (self.domain, self.org, self.repo, self.pr_id)

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "org": self.org,
            "repo": self.repo,
            "pr_id": self.pr_id,
            "title": self.title,
            "body": self.body,
            "author": self.author,
            "created_at": self.created_at,
            "merged": self.merged,
            "merged_at": self.merged_at,
            "state": self.state,
            "comments": [c.to_dict() for c in self.comments],
            "files": [f.to_dict() for f in self.files],
            "embedding": list(self.embedding),
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, d: dict) -> PRRecord:
        comments = _require(d, "comments", list)
        files = _require(d, "files", list)
        embedding = _require(d, "embedding", list)
        for value in embedding:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError("field 'embedding' must contain only numbers")
            if not math.isfinite(value):
                raise ValueError("field 'embedding' must contain only finite numbers")
        return cls(
            domain=_require(d, "domain", str),
            org=_require(d, "org", str),
            repo=_require(d, "repo", str),
            pr_id=_require(d, "pr_id", int),
            title=_require(d, "title", str),
            body=_require(d, "body", str),
            author=_require(d, "author", str, nullable=True),
            created_at=_require(d, "created_at", str),
            merged=_require(d, "merged", bool),
            merged_at=_require(d, "merged_at", str, nullable=True),
            state=_require(d, "state", str),
            comments=[PrComment.from_dict(c) for c in comments],
            files=[PrFileDiff.from_dict(f) for f in files],
            embedding=[float(v) for v in embedding],
            text=_require(d, "text", str),
        )
