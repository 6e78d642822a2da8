from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from ...constants import Defaults

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from ...domain.services.differ import ChangeDetail, Differ, DiffSummary


def truncate(value: str | None, width: int) -> str:
    if value is None:
        return ""
    text = " ".join(str(value).split())
    if len(text) <= width:
        return text
    return f"{text[: width - 3]}..."


def summary_lines(summary: DiffSummary) -> list[tuple[str, int]]:
    return [
        ("Added profiles", summary.added_profiles),
        ("Removed profiles", summary.removed_profiles),
        ("Added elements", summary.added_elements),
        ("Removed elements", summary.removed_elements),
        ("Changed elements", summary.changed_elements),
        ("Added value sets", summary.added_value_sets),
        ("Removed value sets", summary.removed_value_sets),
        ("Added codes", summary.added_value_set_values),
        ("Removed codes", summary.removed_value_set_values),
        ("Changed codes", summary.changed_value_set_values),
    ]


class DiffPresenter:
    pass

    def __init__(self, console: Console, truncate: int = Defaults.TRUNCATE_LENGTH) -> None:
        super().__init__()
        self.console = console
        self.width = truncate

    def present(
        self,
        differ: Differ,
        *,
        details: bool = False,
        workbook_path: Path | None = None,
    ) -> None:
        self.console.print()
        self.console.print(self.build_summary_table(differ.summary()))
        if details:
            for detail in differ.details():
                self.console.print()
                self.console.print(self.build_detail_table(detail))
        if workbook_path is not None:
            self.console.print()
            self.console.print(f"[bold]Diff workbook:[/bold] {escape(str(workbook_path))}")

    def build_summary_table(self, summary: DiffSummary) -> Table:
        table = Table(
            title="Data Dictionary Diff",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_blue",
            title_style="bold magenta",
        )
        table.add_column("Change", style="cyan", no_wrap=True)
        table.add_column("Count", justify="right", no_wrap=True)
        for label, count in summary_lines(summary):
            style = "yellow" if count else "dim"
            table.add_row(label, f"[{style}]{count:,}[/{style}]")
        return table

    def build_detail_table(self, detail: ChangeDetail) -> Table:
        table = Table(
            title=escape(detail.label),
            show_header=True,
            header_style="bold",
            title_justify="left",
        )
        table.add_column("Field", style="cyan", no_wrap=True)
        table.add_column("Old", style="red")
        table.add_column("New", style="green")
        for change in detail.changes:
            table.add_row(
                escape(change.field),
                escape(truncate(change.old, self.width)),
                escape(truncate(change.new, self.width)),
            )
        return table
