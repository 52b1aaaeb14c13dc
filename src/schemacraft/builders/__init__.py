"""Fragment builders and document assembly."""

from schemacraft.builders.base import COMMON_OPTIONS, BaseBuilder, OptionSpec
from schemacraft.builders.document import BuildContext, build_document, build_fragment

__all__ = [
    "COMMON_OPTIONS",
    "BaseBuilder",
    "BuildContext",
    "OptionSpec",
    "build_document",
    "build_fragment",
]
