"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from LitFetch.cli.runner import CommandRunner
from LitFetch.config import load_config, parse_named_query


@click.group(help="LitFetch: search MEDLINE/PubMed and export bibliographic records.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env (for the NCBI API key) before
    reading the config.
    """
    load_dotenv()
    try:
        ctx.obj = load_config(config_path)
    except (OSError, TypeError, ValueError) as e:
        raise click.UsageError(f"Invalid config {config_path}: {e}") from e


@cli.command("search")
@click.option(
    "--query",
    "query_texts",
    multiple=True,
    help="Ad-hoc query, e.g. 'author:Smith AND year:2020'. Replaces configured queries.",
)
@click.pass_context
def search_cmd(ctx: click.Context, query_texts: tuple[str, ...]) -> None:
    """Search records and write them to the configured outputs."""
    cfg = ctx.obj
    if query_texts:
        try:
            queries = [parse_named_query(text, f"--query[{idx}]") for idx, text in enumerate(query_texts)]
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--query") from e
    else:
        queries = list(cfg.search.queries)
    CommandRunner(cfg).run_search(action=ctx.command.name, queries=queries)


@cli.command("fetch")
@click.argument("identifiers", nargs=-1, required=True)
@click.pass_context
def fetch_cmd(ctx: click.Context, identifiers: tuple[str, ...]) -> None:
    """Fetch records by PubMed identifier, skipping the search step."""
    CommandRunner(ctx.obj).run_fetch(action=ctx.command.name, identifiers=list(identifiers))
