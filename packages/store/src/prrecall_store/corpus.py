"""In-memory, read-only PR corpus used for serving.

The whole file is read once at startup, before any query is answered.
Ranking scans every record, so the full set lives in memory.

Any line that cannot be used is fatal: a bad line, a duplicate PR key or an
embedding whose length differs from the rest aborts the load.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from pathlib import Path

from prrecall_core.errors import CorpusLoadError
from prrecall_core.models import PRRecord, Scope

logger = logging.getLogger(__name__)


class CorpusStore:
    """Immutable snapshot of a corpus.

    Construct with CorpusStore.load(path) during service start-up and pass
    the instance to whatever serves queries; several independent stores can
    coexist in one process.
    """

    def __init__(self, records: Iterable[PRRecord] = ()):
        self._records: tuple[PRRecord, ...] = tuple(records)
        dims = {len(r.embedding) for r in self._records if r.embedding}
        if len(dims) > 1:
            raise CorpusLoadError(f"Corpus mixes embedding dimensionalities: {sorted(dims)}")
        self._dimensions = dims.pop() if dims else None

    @classmethod
    def load(cls, path: str | Path) -> CorpusStore:
        """Read an NDJSON corpus file. Blank lines are ignored."""
        path = Path(path)
        records: list[PRRecord] = []
        seen: dict[tuple, int] = {}
        dimensions: int | None = None

        try:
            f = open(path, encoding="utf-8")
        except OSError as e:
            raise CorpusLoadError(f"Cannot open corpus file {path}: {e}") from e

        with f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    record = PRRecord.from_dict(json.loads(line))
                except (json.JSONDecodeError, ValueError) as e:
                    raise CorpusLoadError(f"{path}:{lineno}: unparseable corpus record: {e}") from e

                if record.key in seen:
                    raise CorpusLoadError(
                        f"{path}:{lineno}: duplicate record for PR #{record.pr_id} in {record.scope} "
                        f"(first seen on line {seen[record.key]})"
                    )
                seen[record.key] = lineno

                if record.embedding:
                    if dimensions is None:
                        dimensions = len(record.embedding)
                    elif len(record.embedding) != dimensions:
                        raise CorpusLoadError(
                            f"{path}:{lineno}: embedding has {len(record.embedding)} dimensions, "
                            f"expected {dimensions}"
                        )
                records.append(record)

        logger.info("Loaded %d PR record(s) from %s", len(records), path)
        return cls(records)

    @property
    def records(self) -> tuple[PRRecord, ...]:
        return self._records

    @property
    def dimensions(self) -> int | None:
        """Shared embedding length, or None when no record has an embedding."""
        return self._dimensions

    def scopes(self) -> dict[Scope, int]:
        """Record counts per repository, in first-seen order."""
        return dict(Counter(r.scope for r in self._records))

    def __iter__(self) -> Iterator[PRRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
