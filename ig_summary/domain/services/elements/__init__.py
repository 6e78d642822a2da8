"""Element resolver: plain, backbone and extension variants."""

from .backbone import BackboneProfileElement
from .base import ProfileElement
from .extension import ExtensionProfileElement
from .factory import ELEMENT_VARIANTS, ElementResolver
from .naming import humanize_element_name, join_with_or

__all__ = [
    "ELEMENT_VARIANTS",
    "BackboneProfileElement",
    "ElementResolver",
    "ExtensionProfileElement",
    "ProfileElement",
    "humanize_element_name",
    "join_with_or",
]
