"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

from typing import Sequence

import click

from LitFetch.cli.commands import FetchCommand, SearchCommand
from LitFetch.config import AppConfig
from LitFetch.core.errors import FetcherError
from LitFetch.core.query import NamedQuery
from LitFetch.renderers import create_output_writer
from LitFetch.services import create_search_service
from LitFetch.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_search(self, action: str, queries: Sequence[NamedQuery]) -> None:
        """Execute the search command.

        Args:
            action: The CLI command name (e.g., 'search').
            queries: Queries to run.

        Raises:
            click.Abort: When the search fails.
        """
        self._configure_logging(action)
        if not queries:
            log.error("No queries configured; add 'queries' to the config or pass --query")
            raise click.Abort
        self._run(
            action,
            lambda service, writer: SearchCommand(
                queries=queries, search_service=service, output_writer=writer
            ),
        )

    def run_fetch(self, action: str, identifiers: Sequence[str]) -> None:
        """Execute the fetch command.

        Args:
            action: The CLI command name (e.g., 'fetch').
            identifiers: Provider-native identifiers to look up.

        Raises:
            click.Abort: When the fetch fails.
        """
        self._configure_logging(action)
        self._run(
            action,
            lambda service, writer: FetchCommand(
                identifiers=identifiers, search_service=service, output_writer=writer
            ),
        )

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )

    def _run(self, action: str, build_command) -> None:
        service = None
        try:
            service = create_search_service(self.config)
            output_writer = create_output_writer(self.config)
            command = build_command(service, output_writer)
            count = command.execute()
            output_writer.finalize(action)
            log.info("Done: %d records", count)
        except FetcherError as e:
            log.debug("%s failed: %s", action, e.message)
            log.error("%s failed: %s", action.capitalize(), e.user_message)
            raise click.Abort from e
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action.capitalize(), e)
            raise click.Abort from e
        finally:
            if service is not None:
                service.close()
