"""FHIR Implementation Guide summaries.

Flattens the profiles of an Implementation Guide into a data dictionary
(JSON and Excel) and compares two data dictionaries across IG versions.
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("ig-summary")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from ig_summary.domain.entities.data_dictionary import DataDictionaryDocument
from ig_summary.domain.services.differ import Differ
from ig_summary.domain.services.summary_assembler import SummaryAssembler

__all__ = [
    "DataDictionaryDocument",
    "Differ",
    "SummaryAssembler",
    "__version__",
]
