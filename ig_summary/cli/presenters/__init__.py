"""Rich presenters for CLI output."""

from .diff_presenter import DiffPresenter
from .summary import SummaryPresenter

__all__ = ["DiffPresenter", "SummaryPresenter"]
