import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "provider": "google",
    "embedding_model": None,  # None = provider default
    "embedding_dimensions": 512,
    "embedding_timeout": 30,  # seconds; bounds every embedding request
    "corpus_path": "prs.jsonl",
    "max_pr": 300,
    "top_k": 3,
    "transport": "stdio",
    "host": "127.0.0.1",
    "port": 3001,
    "http_path": "/mcp",
}


def load_config(config_path: str = ".prrecall.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prrecall.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a YAML mapping")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve embedding credentials from environment variables. The GitHub
    # token is resolved separately by prrecall_cli.auth.
    config["google_api_key"] = os.environ.get("GOOGLE_GENERATIVE_AI_API_KEY") or os.environ.get("GEMINI_API_KEY")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")

    return config
