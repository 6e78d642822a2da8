"""Diff command: compare two data dictionaries produced by ``create``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast

import click
from rich.console import Console

from ...application.models import DiffRequest
from ...config import ConfigLoader
from ...infrastructure.container import DependencyContainer
from ..presenters.diff_presenter import DiffPresenter

console = Console()


@dataclass(frozen=True)
class DiffCommandOptions:
    left_path: Path
    right_path: Path
    output_dir: Path
    settings_path: Path | None
    config_file: Path | None
    details: bool
    verbose: int

    @classmethod
    def from_kwargs(cls, options: dict[str, object]) -> DiffCommandOptions:
        return cls(
            left_path=cast("Path", options["left_path"]),
            right_path=cast("Path", options["right_path"]),
            output_dir=cast("Path", options["output_dir"]),
            settings_path=cast("Path | None", options.get("settings_path")),
            config_file=cast("Path | None", options.get("config_file")),
            details=cast("bool", options.get("details", False)),
            verbose=cast("int", options.get("verbose", 0)),
        )


@click.command()
@click.option(
    "--a",
    "left_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Older data dictionary (.json output of the create command)",
)
@click.option(
    "--b",
    "right_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Newer data dictionary (.json output of the create command)",
)
@click.option(
    "--output",
    "-o",
    "output_dir",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Folder where the diff workbook will be written",
)
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a diff settings .yaml file",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to an ig_summary.toml config file (default: ./ig_summary.toml)",
)
@click.option(
    "--details/--no-details",
    default=False,
    show_default=True,
    help="Print a before/after table for every changed element",
)
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def diff_command(**options: object) -> None:
    """Compare ("diff") the output of two runs of the create command.

    Examples:

    \b
        ig-summary diff --a v1/ig-summary-my-ig.json --b v2/ig-summary-my-ig.json -o diffs/
    """
    command_options = DiffCommandOptions.from_kwargs(dict(options))
    runtime_config = ConfigLoader.load(config_file=command_options.config_file)

    request = DiffRequest(
        left_path=command_options.left_path,
        right_path=command_options.right_path,
        output_dir=command_options.output_dir,
        settings_path=command_options.settings_path,
    )

    container = DependencyContainer(
        verbose=command_options.verbose, console=console, config=runtime_config
    )
    response = container.create_diff_use_case().execute(request)

    if response.differ is not None:
        DiffPresenter(console, truncate=runtime_config.truncate_length).present(
            response.differ,
            details=command_options.details,
            workbook_path=response.workbook_path,
        )

    if not response.success:
        raise click.ClickException(response.error or "Diff failed")
