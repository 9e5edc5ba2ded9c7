from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import requests
from github import Auth, Github, GithubException

from prrecall_core.errors import UpstreamFetchError
from prrecall_core.models import Scope
from prrecall_core.utils.url import api_base_url

# GitHub's maximum page size; fewer round trips per PR listing.
_PER_PAGE = 100


@contextmanager
def upstream_call(what: str):
    """Re-raise GitHub API and transport failures as UpstreamFetchError."""
    try:
        yield
    except GithubException as e:
        raise UpstreamFetchError(f"GitHub API error while {what}: {e.status} {e.data}") from e
    except requests.RequestException as e:
        raise UpstreamFetchError(f"Network error while {what}: {e}") from e


def get_repo(scope: Scope, token: str):
    kwargs = {"auth": Auth.Token(token), "per_page": _PER_PAGE}
    base_url = api_base_url(scope.domain)
    if base_url:
        kwargs["base_url"] = base_url
    with upstream_call(f"opening {scope.org}/{scope.repo}"):
        return Github(**kwargs).get_repo(f"{scope.org}/{scope.repo}")


def iter_pull_request_pages(repo, state: str = "all") -> Iterator[list]:
    """Yield pages of pull requests in the API's default order until a page is empty."""
    pulls = repo.get_pulls(state=state)
    page = 0
    while True:
        with upstream_call(f"listing pull requests (page {page + 1})"):
            batch = list(pulls.get_page(page))
        if not batch:
            return
        yield batch
        page += 1


def get_diff(pr) -> list:
    with upstream_call(f"fetching files of PR #{pr.number}"):
        return list(pr.get_files())


def get_review_comments(pr) -> list:
    """Return comments anchored to diff lines."""
    with upstream_call(f"fetching review comments of PR #{pr.number}"):
        return list(pr.get_review_comments())


def get_issue_comments(pr) -> list:
    """Return the PR's general conversation comments."""
    with upstream_call(f"fetching issue comments of PR #{pr.number}"):
        return list(pr.get_issue_comments())
