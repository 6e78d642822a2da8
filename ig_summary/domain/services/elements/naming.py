"""Display-name helpers shared by the element variants."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from titlecase import titlecase

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEGMENT_SEPARATOR = " > "


def join_with_or(items: Iterable[object]) -> str:
    """Join as "a or b" / "a, b, or c"."""
    values = [str(item) for item in items]
    if len(values) < 3:
        return " or ".join(values)
    head, _, tail = ", ".join(values).rpartition(", ")
    return f"{head}, or {tail}"


def humanize_element_name(
    name: str, touch_ups: Mapping[str, str] | None = None
) -> str:
    text = name.replace(".", _SEGMENT_SEPARATOR).replace("[x]", "", 1)
    text = titlecase(_CAMEL_BOUNDARY.sub(r"\1 \2", text))
    for find, replacement in (touch_ups or {}).items():
        text = text.replace(find, replacement, 1)
    return text
