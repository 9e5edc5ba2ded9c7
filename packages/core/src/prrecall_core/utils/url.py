from __future__ import annotations

import re
from typing import TYPE_CHECKING

from prrecall_core.models import Scope

if TYPE_CHECKING:
    from prrecall_core.models import PRRecord

# scheme://host/org/repo[.git][/...]; anything after the repo segment
# (a path, query string or fragment) is ignored.
_REPO_URL_RE = re.compile(r"^https?://([^/]+)/([^/]+)/([^/]+?)(?:\.git)?(?:[/?#]|$)")

_PUBLIC_GITHUB = "github.com"


def parse_repo_url(url: str) -> Scope | None:
    """Return the (domain, org, repo) scope of a repository or PR URL, or None."""
    match = _REPO_URL_RE.match(url or "")
    if match is None:
        return None
    return Scope(domain=match.group(1), org=match.group(2), repo=match.group(3))


def pr_url(record: PRRecord) -> str:
    return f"https://{record.domain}/{record.org}/{record.repo}/pull/{record.pr_id}"


def api_base_url(domain: str) -> str | None:
    """Return the REST API root for a GitHub Enterprise host, None for github.com."""
    if domain == _PUBLIC_GITHUB:
        return None
    return f"https://{domain}/api/v3"
