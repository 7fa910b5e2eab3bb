"""
Parser settings and format constants.

Exports:
    MAX_TAGS (int): Largest tag list an element record may carry.
    MAX_NAME_LENGTH (int): Longest physical region name accepted.
    SUPPORTED_VERSIONS (tuple): (major, minor) format versions read without a warning.
    ParserSettings: Frozen bundle of the above plus the element schema table.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from .elements import ELEMENT_SCHEMA, ElementKind


MAX_TAGS: int = 10
# 32-byte name field, terminator included
MAX_NAME_LENGTH: int = 31
SUPPORTED_VERSIONS: Tuple[Tuple[int, int], ...] = ((2, 0), (2, 1), (2, 2))

# Section keywords
MESH_FORMAT = "$MeshFormat"
END_MESH_FORMAT = "$EndMeshFormat"
PHYSICAL_NAMES = "$PhysicalNames"
END_PHYSICAL_NAMES = "$EndPhysicalNames"
NODES = "$Nodes"
END_NODES = "$EndNodes"
ELEMENTS = "$Elements"
END_ELEMENTS = "$EndElements"

# File-type flag in the $MeshFormat header
ASCII_FILE_TYPE: int = 0


@dataclass(frozen=True)
class ParserSettings:
    """
    Limits and lookup tables applied by `meshparser.io.MshParser`.

    Attributes:
        max_tags: maximum number of tags per element record
        max_name_length: maximum physical region name length (quotes excluded)
        supported_versions: (major, minor) pairs accepted without a warning
        element_schema: element-type code -> ElementKind table
    """
    max_tags: int = MAX_TAGS
    max_name_length: int = MAX_NAME_LENGTH
    supported_versions: Tuple[Tuple[int, int], ...] = SUPPORTED_VERSIONS
    element_schema: Mapping[int, ElementKind] = field(
        default_factory=lambda: MappingProxyType(dict(ELEMENT_SCHEMA)))

    def __post_init__(self):
        # Read-only copy; settings are shared between parsers.
        object.__setattr__(self, "element_schema",
                           MappingProxyType(dict(self.element_schema)))


DEFAULT_SETTINGS = ParserSettings()
