"""PR corpus ingestion: GitHub pull requests to embedded PRRecords.

The pipeline is strictly sequential. It lists a page, then for each PR
fetches files, review comments and issue comments, embeds, and yields.
Records come out in fetch order. Persistence is not this module's concern:
callers consume iter_pr_records() and append each record to a corpus
writer as it arrives.

Every failure is fatal; no record is ever written without its vector.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import timezone

from rich.console import Console

from prrecall_core.errors import EmbeddingFailure, PreconditionError, attempt
from prrecall_core.gh.pull_request import get_diff, get_issue_comments, get_review_comments, iter_pull_request_pages
from prrecall_core.models import PRRecord, PrComment, PrFileDiff, Scope
from prrecall_core.providers.base import BaseEmbedder
from prrecall_core.utils.text import build_pr_text
from prrecall_core.utils.url import parse_repo_url

console = Console(stderr=True)
logger = logging.getLogger(__name__)

DEFAULT_MAX_PR = 300


@dataclass
class IngestSummary:
    """Result of a completed corpus build, as reported by the CLI."""

    scope: Scope
    output_path: str
    total: int


def resolve_scope(url: str, token: str | None) -> Scope:
    """Validate ingestion inputs before any network call is made."""
    scope = parse_repo_url(url)
    if scope is None:
        raise PreconditionError(f"Invalid GitHub repository URL: {url!r}")
    if not token:
        raise PreconditionError(
            "A GitHub token is required to fetch pull requests. Set GITHUB_TOKEN or pass --token."
        )
    return scope


def format_timestamp(value) -> str | None:
    """Render a PyGithub datetime in GitHub's own ISO-8601 form."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _login(obj) -> str | None:
    user = getattr(obj, "user", None)
    return user.login if user is not None else None


def build_file_diffs(files) -> list[PrFileDiff]:
    return [
        PrFileDiff(
            filename=f.filename,
            status=f.status,
            additions=f.additions,
            deletions=f.deletions,
            changes=f.changes,
            patch=f.patch,
        )
        for f in files
    ]


def build_comments(scope: Scope, pr_id: int, review_comments, issue_comments) -> list[PrComment]:
    """Merge line-anchored review comments and conversation comments, in that order."""
    comments = [
        PrComment(
            domain=scope.domain,
            org=scope.org,
            repo=scope.repo,
            pr_id=pr_id,
            body=c.body or "",
            author=_login(c),
            created_at=format_timestamp(c.created_at),
            line=c.line if isinstance(c.line, int) else None,
            filename=c.path or None,
        )
        for c in review_comments
    ]
    comments.extend(
        PrComment(
            domain=scope.domain,
            org=scope.org,
            repo=scope.repo,
            pr_id=pr_id,
            body=c.body or "",
            author=_login(c),
            created_at=format_timestamp(c.created_at),
        )
        for c in issue_comments
    )
    return comments


def fetch_pr_record(scope: Scope, pr, embedder: BaseEmbedder) -> PRRecord:
    """Fetch everything for one PR and return its embedded record.

    Only title, body and changed filenames go into the embedded text; diff
    content and comments are stored but kept out of the vector.
    """
    files = build_file_diffs(get_diff(pr))
    comments = build_comments(scope, pr.number, get_review_comments(pr), get_issue_comments(pr))

    body = pr.body or ""
    text = build_pr_text(pr.title, body, [f.filename for f in files])

    outcome = attempt(embedder.embed, text)
    if not outcome.ok:
        raise EmbeddingFailure(f"Failed to generate embedding for PR #{pr.number}: {outcome.error}") from outcome.error

    merged_at = format_timestamp(pr.merged_at)
    return PRRecord(
        domain=scope.domain,
        org=scope.org,
        repo=scope.repo,
        pr_id=pr.number,
        title=pr.title,
        body=body,
        author=_login(pr),
        created_at=format_timestamp(pr.created_at),
        merged=merged_at is not None,
        merged_at=merged_at,
        state=pr.state,
        comments=comments,
        files=files,
        embedding=outcome.value,
        text=text,
    )


def iter_pr_records(repo, scope: Scope, embedder: BaseEmbedder, max_pr: int = DEFAULT_MAX_PR) -> Iterator[PRRecord]:
    """Yield embedded records for up to max_pr pull requests, newest pages first.

    Stops as soon as the cap is reached, without requesting another page.
    """
    if max_pr < 1:
        raise PreconditionError(f"max_pr must be at least 1, got {max_pr}")

    fetched = 0
    for page in iter_pull_request_pages(repo):
        for pr in page:
            if fetched >= max_pr:
                return
            record = fetch_pr_record(scope, pr, embedder)
            fetched += 1
            console.print(f"Progress: {fetched} PRs processed")
            logger.debug("Embedded PR #%d (%d files, %d comments)", pr.number, len(record.files), len(record.comments))
            yield record
        if fetched >= max_pr:
            return
