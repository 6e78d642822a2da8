"""Port interfaces implemented by infrastructure adapters."""

from .repositories import (
    DataDictionaryRepositoryPort,
    ImplementationGuideRepositoryPort,
    SettingsRepositoryPort,
)
from .services import DiffWorkbookWriterPort, LoggerPort, SummaryWorkbookWriterPort

__all__ = [
    "DataDictionaryRepositoryPort",
    "DiffWorkbookWriterPort",
    "ImplementationGuideRepositoryPort",
    "LoggerPort",
    "SettingsRepositoryPort",
    "SummaryWorkbookWriterPort",
]
