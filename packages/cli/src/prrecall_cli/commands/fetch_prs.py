"""fetch-prs: build a corpus file from a repository's PR history."""

from __future__ import annotations

import click
from rich.console import Console

from prrecall_core.errors import PrRecallError
from prrecall_core.gh.pull_request import get_repo
from prrecall_core.ingest import IngestSummary, iter_pr_records, resolve_scope
from prrecall_core.providers.base import BaseEmbedder
from prrecall_core.utils.url import parse_repo_url
from prrecall_store.writer import CorpusWriter

console = Console(stderr=True)


def run_ingest(
    url: str,
    token: str | None,
    output_path: str,
    max_pr: int,
    embedder: BaseEmbedder,
    repo_obj=None,
) -> IngestSummary:
    """Fetch, embed and persist up to max_pr pull requests.

    The CLI owns this wiring: prrecall_core produces records and knows
    nothing about files, prrecall_store writes records and knows nothing
    about GitHub. Any failure propagates after the writer has discarded
    its temporary file, so the output path is only ever replaced by a
    complete corpus.
    """
    scope = resolve_scope(url, token)
    repo = repo_obj if repo_obj is not None else get_repo(scope, token)

    with CorpusWriter(output_path) as writer:
        for record in iter_pr_records(repo, scope, embedder, max_pr):
            writer.append(record)

    return IngestSummary(scope=scope, output_path=str(output_path), total=writer.count)


@click.command("fetch-prs")
@click.option("--url", required=True, help="GitHub repository URL (e.g. https://github.com/org/repo).")
@click.option("--token", default=None, help="GitHub API token. Defaults to GITHUB_TOKEN or the gh CLI session.")
@click.option("--output", "output_path", default=None, help="Output file path.  [default: prs.jsonl]")
@click.option(
    "--max-pr",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of PRs to fetch.  [default: 300]",
)
@click.option(
    "--provider",
    type=click.Choice(["google", "openai"]),
    default=None,
    help="Embedding provider. Overrides config file.",
)
@click.pass_context
def fetch_prs_cmd(
    ctx,
    url: str,
    token: str | None,
    output_path: str | None,
    max_pr: int | None,
    provider: str | None,
):
    """Fetch PR metadata, diffs and comments from a GitHub repository,
    embed each PR and save the corpus as JSONL.

    \b
    Required environment variables:
      GOOGLE_GENERATIVE_AI_API_KEY   When using --provider google
      OPENAI_API_KEY                 When using --provider openai
    """
    from prrecall_core.config import load_config
    from prrecall_cli.auth import resolve_github_token
    from prrecall_cli.runtime import build_embedder

    config = load_config(
        ctx.obj["config_path"],
        cli_overrides={"corpus_path": output_path, "max_pr": max_pr, "provider": provider},
    )
    output_path = config["corpus_path"]
    max_pr = int(config["max_pr"])

    scope = parse_repo_url(url)
    token = resolve_github_token(token, host=scope.domain if scope else "github.com")

    console.print(f"Fetching PRs from {url}")
    console.print(f"Output will be saved to: {output_path}")
    console.print(f"Maximum PRs to fetch: {max_pr}")

    try:
        # Validate URL and token before building a provider client.
        resolve_scope(url, token)
        embedder = build_embedder(config)
        summary = run_ingest(url, token, output_path, max_pr, embedder)
    except PrRecallError as e:
        raise click.ClickException(e.message)

    console.print(f"[green]Saved {summary.total} PR metadata entries to {summary.output_path}[/green]")
