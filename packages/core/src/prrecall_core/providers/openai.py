from __future__ import annotations

try:
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]

from prrecall_core.providers.base import BaseEmbedder

_SHORTENABLE_PREFIX = "text-embedding-3-"


class OpenAIEmbedder(BaseEmbedder):
    MODEL = "text-embedding-3-small"

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        dimensions: int | None = None,
        timeout: float | None = None,
    ):
        if _OpenAI is None:
            raise ImportError(
                "The 'openai' package is required for this provider. " "Install it with: pip install 'prrecall[openai]'"
            )
        super().__init__(model=model, dimensions=dimensions, timeout=timeout)
        # max_retries=0: a failed call surfaces immediately as EmbeddingFailure.
        self.client = _OpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)

    def _call_api(self, text: str) -> list[float]:
        kwargs = {"model": self.model, "input": text}
        # Older models such as text-embedding-ada-002 reject the dimensions parameter.
        if self.model.startswith(_SHORTENABLE_PREFIX):
            kwargs["dimensions"] = self.dimensions
        response = self.client.embeddings.create(**kwargs)
        return response.data[0].embedding
