"""Append-only NDJSON corpus output with all-or-nothing publication.

Records are appended one per line, in the order they are produced, to a
temporary file next to the destination. Only a successful close renames
it over the destination; any failure deletes it. A corpus from an earlier
successful build stays in place when a later build fails.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from prrecall_core.models import PRRecord

logger = logging.getLogger(__name__)


class CorpusWriter:
    """Use as a context manager:

        with CorpusWriter("prs.jsonl") as writer:
            for record in records:
                writer.append(record)

    Leaving the block normally commits; leaving it with an exception aborts.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.count = 0
        self._tmp_path: Path | None = None
        self._file = None

    def __enter__(self) -> CorpusWriter:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.abort()

    def open(self) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".partial", dir=directory)
        self._tmp_path = Path(tmp)
        self._file = os.fdopen(fd, "w", encoding="utf-8", newline="\n")

    def append(self, record: PRRecord) -> None:
        if self._file is None:
            raise RuntimeError("CorpusWriter is not open")
        self._file.write(json.dumps(record.to_dict(), ensure_ascii=False, allow_nan=False) + "\n")
        self.count += 1

    def commit(self) -> None:
        """Flush to disk and atomically publish the file at its destination."""
        if self._file is None:
            raise RuntimeError("CorpusWriter is not open")
        self._file.flush()
        os.fsync(self._file.fileno())
        self._file.close()
        self._file = None
        os.replace(self._tmp_path, self.path)
        logger.info("Wrote %d record(s) to %s", self.count, self.path)
        self._tmp_path = None

    def abort(self) -> None:
        """Discard everything written so far."""
        if self._file is not None:
            self._file.close()
            self._file = None
        if self._tmp_path is not None:
            self._tmp_path.unlink(missing_ok=True)
            logger.info("Discarded partial corpus (%d record(s)) for %s", self.count, self.path)
            self._tmp_path = None
