"""serve: expose PR semantic search as an MCP tool."""

from __future__ import annotations

import click
from rich.console import Console

console = Console(stderr=True)


@click.command("serve")
@click.option("--corpus", "corpus_path", default=None, help="Corpus file to serve.  [default: prs.jsonl]")
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="MCP transport.  [default: stdio]",
)
@click.option("--host", default=None, help="Bind address for --transport http.  [default: 127.0.0.1]")
@click.option("--port", type=int, default=None, help="Port for --transport http.  [default: 3001]")
@click.option(
    "--provider",
    type=click.Choice(["google", "openai"]),
    default=None,
    help="Embedding provider. Must match the one the corpus was built with.",
)
@click.pass_context
def serve_cmd(
    ctx,
    corpus_path: str | None,
    transport: str | None,
    host: str | None,
    port: int | None,
    provider: str | None,
):
    """Load a corpus and serve the pr-semantic-search tool.

    The corpus is read completely before the server starts; a missing or
    corrupt corpus file stops the command instead of serving partial data.
    """
    from prrecall_core.config import load_config
    from prrecall_core.search import SearchService
    from prrecall_cli.runtime import build_embedder, load_corpus
    from prrecall_server.app import run_server

    config = load_config(
        ctx.obj["config_path"],
        cli_overrides={
            "corpus_path": corpus_path,
            "transport": transport,
            "host": host,
            "port": port,
            "provider": provider,
        },
    )

    corpus = load_corpus(config["corpus_path"])
    embedder = build_embedder(config)
    console.print(
        f"[dim]Loaded {len(corpus)} PR record(s) from {config['corpus_path']}; "
        f"embedding with {embedder.describe()}.[/dim]"
    )

    service = SearchService(corpus, embedder, top_k=int(config["top_k"]))
    run_server(service, config)
