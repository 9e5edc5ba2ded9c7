"""search: run one semantic search from the terminal."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

console = Console()


@click.command("search")
@click.option("--url", required=True, help="URL of the repository or pull request being searched for.")
@click.option("--title", required=True, help="Title of the candidate pull request.")
@click.option("--body", default="", help="Body of the candidate pull request.")
@click.option("--file", "files", multiple=True, help="Changed file path. Repeat for several files.")
@click.option("--corpus", "corpus_path", default=None, help="Corpus file to search.  [default: prs.jsonl]")
@click.option("--top-k", type=click.IntRange(min=1), default=None, help="Number of results.  [default: 3]")
@click.option(
    "--provider",
    type=click.Choice(["google", "openai"]),
    default=None,
    help="Embedding provider. Must match the one the corpus was built with.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON payload the MCP tool would return.")
@click.pass_context
def search_cmd(
    ctx,
    url: str,
    title: str,
    body: str,
    files: tuple[str, ...],
    corpus_path: str | None,
    top_k: int | None,
    provider: str | None,
    as_json: bool,
):
    """Show the past pull requests most similar to the one described."""
    from prrecall_core.config import load_config
    from prrecall_core.search import SearchQuery, SearchService
    from prrecall_cli.runtime import build_embedder, load_corpus

    config = load_config(
        ctx.obj["config_path"],
        cli_overrides={"corpus_path": corpus_path, "top_k": top_k, "provider": provider},
    )
    corpus = load_corpus(config["corpus_path"])
    embedder = build_embedder(config)

    service = SearchService(corpus, embedder, top_k=int(config["top_k"]))
    result = service.search(SearchQuery(url=url, title=title, body=body, files=list(files)))

    if not result.ok:
        raise click.ClickException(result.payload())

    if as_json:
        click.echo(result.payload())
        return

    if not result.matches:
        console.print("[yellow]No similar pull requests found.[/yellow]")
        return

    table = Table(title=f"Similar pull requests for {url}", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", width=3)
    table.add_column("Pull request")
    table.add_column("Title", max_width=50)
    table.add_column("Comments", justify="right", width=10)

    for i, match in enumerate(result.matches, 1):
        table.add_row(str(i), match["url"], match["title"], str(len(match["comments"])))

    console.print(table)
