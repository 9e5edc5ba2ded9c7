"""GitHub token resolution with gh CLI fallback.

Resolution order (stops at first success):
  1. An explicit --token value
  2. GITHUB_TOKEN environment variable (CI / explicit override)
  3. `gh auth token --hostname <host>` (GitHub CLI session; works for
     GitHub Enterprise hosts the user has logged into with gh)
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token(explicit: str | None = None, host: str = "github.com") -> str | None:
    """Return a GitHub token or None if no valid source is available.

    Never raises. Ingestion turns a None into a PreconditionError before
    any network call is made.
    """
    if explicit:
        return explicit

    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token", "--hostname", host],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token for %s via gh CLI session.", host)
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or timed out.
        logger.debug("gh CLI unavailable; no token for %s.", host)

    return None
