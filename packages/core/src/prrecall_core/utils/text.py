from __future__ import annotations

from collections.abc import Iterable


def build_pr_text(title: str, body: str, filenames: Iterable[str]) -> str:
    """Return the canonical text embedded for a pull request.

    Ingestion and live queries must call this with the same inputs to get
    byte-identical output; changing the layout changes what "similar" means
    and invalidates every corpus built before the change.
    """
    return "\n".join([f"Title: {title}", f"Body: {body}", *filenames])
