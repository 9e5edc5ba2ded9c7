from __future__ import annotations

from prrecall_core.errors import PreconditionError
from prrecall_core.providers.base import BaseEmbedder

_API_KEY_ENV = {
    "google": "GOOGLE_GENERATIVE_AI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def get_embedder(config: dict) -> BaseEmbedder:
    """Build the embedder selected by ``config["provider"]``.

    The corpus and every query must use the same provider, model and
    dimensionality; the config is the single place that pins all three.
    """
    provider = config["provider"]
    if provider not in _API_KEY_ENV:
        raise ValueError(f"Unknown embedding provider: {provider!r}. Choose 'google' or 'openai'.")

    api_key = config.get(f"{provider}_api_key")
    if not api_key:
        raise PreconditionError(f"{_API_KEY_ENV[provider]} environment variable is not set.")

    kwargs = {
        "model": config.get("embedding_model"),
        "dimensions": config.get("embedding_dimensions"),
        "timeout": config.get("embedding_timeout"),
    }
    if provider == "google":
        from prrecall_core.providers.google import GoogleEmbedder

        return GoogleEmbedder(api_key=api_key, **kwargs)

    from prrecall_core.providers.openai import OpenAIEmbedder

    return OpenAIEmbedder(api_key=api_key, **kwargs)
