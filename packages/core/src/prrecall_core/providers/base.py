"""Base embedder implementing the Template Method pattern.

All providers share the same embedding contract:
    embed() → _call_api()   ← only this differs per provider
            → validate vector / classify failure as EmbeddingFailure

Subclasses implement two things only:
  - __init__: validate and store the SDK client (built with a bounded timeout)
  - _call_api: make one raw API call and return the vector

No retries: a failed call surfaces once, as EmbeddingFailure. Ingestion
treats it as fatal and the query path reports it to the caller.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod

from prrecall_core.errors import EmbeddingFailure

logger = logging.getLogger(__name__)

# Shared defaults; subclasses may override as class attributes if needed.
_DIMENSIONS = 512
_TIMEOUT_SECONDS = 30.0


class BaseEmbedder(ABC):
    MODEL: str = ""
    DIMENSIONS: int = _DIMENSIONS
    TIMEOUT: float = _TIMEOUT_SECONDS

    def __init__(self, model: str | None = None, dimensions: int | None = None, timeout: float | None = None):
        self.model = model or self.MODEL
        self.dimensions = dimensions or self.DIMENSIONS
        self.timeout = float(timeout or self.TIMEOUT)

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def embed(self, text: str) -> list[float]:
        """Return the embedding vector for text.

        Raises EmbeddingFailure for every provider-side problem (transport
        errors, auth, quota, timeouts and empty responses), so callers
        only ever have to handle one exception type.
        """
        try:
            vector = self._call_api(text)
        except Exception as e:
            logger.warning("%s embedding request failed: %s", self.__class__.__name__, e)
            raise EmbeddingFailure(f"{self.__class__.__name__} embedding request failed: {e}") from e

        if not vector:
            raise EmbeddingFailure(f"{self.__class__.__name__} returned an empty embedding")
        vector = [float(v) for v in vector]
        if not all(math.isfinite(v) for v in vector):
            raise EmbeddingFailure(f"{self.__class__.__name__} returned a non-finite embedding value")
        return vector

    def describe(self) -> str:
        return f"{self.__class__.__name__} ({self.model}, dim={self.dimensions})"

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, text: str) -> list[float]:
        """Make a single embedding call and return the raw vector.

        This is the only method subclasses must implement. It should raise
        on failure; embed() classifies and logs the error.
        """
