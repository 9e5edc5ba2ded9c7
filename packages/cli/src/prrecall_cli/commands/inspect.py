"""inspect: summarise a corpus file."""

from __future__ import annotations

from collections import Counter

import click
from rich.console import Console
from rich.table import Table

console = Console()


@click.command("inspect")
@click.option("--corpus", "corpus_path", default=None, help="Corpus file to inspect.  [default: prs.jsonl]")
@click.pass_context
def inspect_cmd(ctx, corpus_path: str | None):
    """Show per-repository record counts and the embedding dimensionality.

    Loading uses the same validation as `serve`, so a corpus that inspects
    cleanly will also serve.
    """
    from prrecall_core.config import load_config
    from prrecall_cli.runtime import load_corpus

    config = load_config(ctx.obj["config_path"], cli_overrides={"corpus_path": corpus_path})
    corpus = load_corpus(config["corpus_path"])

    if not len(corpus):
        console.print("[yellow]Corpus is empty.[/yellow]")
        return

    embedded: Counter[str] = Counter()
    merged: Counter[str] = Counter()
    for record in corpus:
        if record.embedding:
            embedded[str(record.scope)] += 1
        if record.merged:
            merged[str(record.scope)] += 1

    console.print(f"\n[bold]Corpus [cyan]{config['corpus_path']}[/cyan][/bold]")
    console.print(f"  Records:    {len(corpus)}")
    console.print(f"  Dimensions: {corpus.dimensions if corpus.dimensions is not None else '-'}")

    table = Table(title="Repositories", show_header=True)
    table.add_column("Repository")
    table.add_column("PRs", justify="right")
    table.add_column("Embedded", justify="right")
    table.add_column("Merged", justify="right")
    for scope, count in corpus.scopes().items():
        key = str(scope)
        table.add_row(key, str(count), str(embedded.get(key, 0)), str(merged.get(key, 0)))
    console.print(table)
