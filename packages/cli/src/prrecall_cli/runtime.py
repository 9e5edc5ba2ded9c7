"""Shared start-up helpers for commands that load a corpus or an embedder.

Both turn classified failures into click errors so the CLI exits non-zero
with a one-line message instead of a traceback.
"""

from __future__ import annotations

import click

from prrecall_core.errors import PrRecallError
from prrecall_core.providers.base import BaseEmbedder
from prrecall_core.providers.factory import get_embedder
from prrecall_store.corpus import CorpusStore


def load_corpus(path: str) -> CorpusStore:
    try:
        return CorpusStore.load(path)
    except PrRecallError as e:
        raise click.ClickException(e.message)


def build_embedder(config: dict) -> BaseEmbedder:
    try:
        return get_embedder(config)
    except PrRecallError as e:
        raise click.UsageError(e.message)
    except (ValueError, ImportError) as e:
        raise click.UsageError(str(e))
