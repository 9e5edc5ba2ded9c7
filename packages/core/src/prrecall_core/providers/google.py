from __future__ import annotations

from prrecall_core.providers.base import BaseEmbedder


class GoogleEmbedder(BaseEmbedder):
    MODEL = "gemini-embedding-001"
    # SEMANTIC_SIMILARITY rather than RETRIEVAL_DOCUMENT/QUERY: corpus records
    # and live queries are the same kind of text and must share one space.
    TASK_TYPE = "SEMANTIC_SIMILARITY"

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        dimensions: int | None = None,
        timeout: float | None = None,
    ):
        try:
            from google import genai
            from google.genai import types
        except ImportError:
            raise ImportError(
                "The 'google-genai' package is required for this provider. "
                "Install it with: pip install 'prrecall[google]'"
            )
        super().__init__(model=model, dimensions=dimensions, timeout=timeout)
        # HttpOptions.timeout is in milliseconds.
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    def _call_api(self, text: str) -> list[float]:
        # Imported inside the method because google-genai is optional;
        # __init__ already validated it is installed before we reach here.
        from google.genai import types

        response = self.client.models.embed_content(
            model=self.model,
            contents=text,
            config=types.EmbedContentConfig(
                task_type=self.TASK_TYPE,
                output_dimensionality=self.dimensions,
            ),
        )
        if not response.embeddings:
            return []
        return list(response.embeddings[0].values or [])
