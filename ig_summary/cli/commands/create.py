"""Create command: summarize an Implementation Guide into a data dictionary.

A thin adapter between click and ``SummaryUseCase``: parse the options,
build the request, run the use case and present the response.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast

import click
from rich.console import Console

from ...application.models import CreateSummaryRequest
from ...config import ConfigLoader
from ...domain.entities.settings import DataDictionaryMode
from ...domain.services.value_set_expander import IncludedValueSetBehavior
from ...infrastructure.container import DependencyContainer
from ..presenters.summary import SummaryPresenter

console = Console()


@dataclass(frozen=True)
class CreateCommandOptions:
    output_dir: Path
    settings_path: Path | None
    config_file: Path | None
    mode: DataDictionaryMode | None
    comparison_path: Path | None
    expand_included_value_sets: bool
    verbose: int

    @classmethod
    def from_kwargs(cls, options: dict[str, object]) -> CreateCommandOptions:
        mode = cast("str | None", options.get("mode"))
        return cls(
            output_dir=cast("Path", options["output_dir"]),
            settings_path=cast("Path | None", options.get("settings_path")),
            config_file=cast("Path | None", options.get("config_file")),
            mode=DataDictionaryMode.parse(mode) if mode else None,
            comparison_path=cast("Path | None", options.get("comparison_path")),
            expand_included_value_sets=cast(
                "bool", options.get("expand_included_value_sets", False)
            ),
            verbose=cast("int", options.get("verbose", 0)),
        )


@click.command()
@click.option(
    "--input",
    "-i",
    "ig_dir",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Path to the FHIR Implementation Guide root folder",
)
@click.option(
    "--output",
    "-o",
    "output_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Folder where the summary will be written",
)
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to a settings .yaml file",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to an ig_summary.toml config file (default: ./ig_summary.toml)",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in DataDictionaryMode], case_sensitive=False),
    help='Include all elements ("all") or MustSupport elements only ("ms")',
)
@click.option(
    "--comparison",
    "comparison_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON output of a previous run to compare with",
)
@click.option(
    "--expand-included-value-sets",
    is_flag=True,
    help="List the codes of included value sets instead of a reference row",
)
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def create_command(ig_dir: Path, **options: object) -> None:
    """Create a summary of the IG in Excel and JSON format.

    Examples:

    \b
        # MustSupport elements only
        ig-summary create -i my-ig/ -o summaries/

    \b
        # Every element, compared with an earlier summary
        ig-summary create -i my-ig/ -o summaries/ --mode all \\
            --comparison summaries/ig-summary-my-ig-1.0.json
    """
    command_options = CreateCommandOptions.from_kwargs(dict(options))
    runtime_config = ConfigLoader.load(config_file=command_options.config_file)

    request = CreateSummaryRequest(
        ig_dir=ig_dir,
        output_dir=command_options.output_dir,
        mode=command_options.mode,
        settings_path=command_options.settings_path,
        comparison_path=command_options.comparison_path,
        included_value_sets=(
            IncludedValueSetBehavior.EXPAND
            if command_options.expand_included_value_sets
            else IncludedValueSetBehavior.REFERENCE
        ),
    )

    container = DependencyContainer(
        verbose=command_options.verbose, console=console, config=runtime_config
    )
    response = container.create_summary_use_case().execute(request)

    SummaryPresenter(console, truncate=runtime_config.truncate_length).present(response)

    if not response.success:
        raise click.ClickException(response.error or "Summary failed")
