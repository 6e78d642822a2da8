from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from ...constants import Defaults
from .diff_presenter import DiffPresenter

if TYPE_CHECKING:
    from rich.console import Console

    from ...application.models import CreateSummaryResponse
    from ...domain.entities.data_dictionary import DataDictionaryDocument


class SummaryPresenter:
    pass

    def __init__(self, console: Console, truncate: int = Defaults.TRUNCATE_LENGTH) -> None:
        super().__init__()
        self.console = console
        self.truncate = truncate

    def present(self, response: CreateSummaryResponse) -> None:
        if response.document is not None:
            self.console.print()
            self.console.print(self.build_counts_table(response.document))

        for label, path in (
            ("JSON", response.json_path),
            ("Excel", response.workbook_path),
        ):
            if path is not None:
                self.console.print(f"[bold]{label}:[/bold] {escape(str(path))}")

        if response.comparison is not None:
            DiffPresenter(self.console, truncate=self.truncate).present(
                response.comparison
            )

        if not response.success:
            self.console.print()
            self.console.print(
                f"[bold red]Summary failed:[/bold red] {escape(response.error or '')}"
            )

    @staticmethod
    def build_counts_table(document: DataDictionaryDocument) -> Table:
        title = document.metadata.title or "IG Summary"
        if document.metadata.version:
            title = f"{title} ({document.metadata.version})"
        table = Table(
            title=escape(title),
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
            title_style="bold magenta",
        )
        table.add_column("Sheet", style="cyan", no_wrap=True)
        table.add_column("Rows", justify="right", style="yellow", no_wrap=True)
        for label, count in (
            ("Profiles", len(document.profiles)),
            ("Data elements", len(document.profile_elements)),
            ("Value sets", len(document.value_sets)),
            ("Value set codes", len(document.value_set_elements)),
            ("Extensions", len(document.extensions)),
            ("Code systems", len(document.code_systems)),
        ):
            table.add_row(label, f"{count:,}")
        return table
