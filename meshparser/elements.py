"""
Element schema table for MSH element records.

Maps the integer element-type code found in an `$Elements` record to an
`ElementKind`, which fixes how many node ids follow the record's tag list.

Two numberings are provided:

- `ELEMENT_SCHEMA`: the default table used by `meshparser.io`
  (5 = 5-node pyramid, 7 = 8-node hexahedron).
- `GMSH_ELEMENT_SCHEMA`: the numbering Gmsh itself writes
  (5 = 8-node hexahedron, 7 = 5-node pyramid).
"""
from enum import Enum
from typing import Dict, Mapping, Optional


class ElementKind(Enum):
    """Linear element shapes. Value is (name, node arity, topological dimension)."""

    LINE2 = ("Line2", 2, 1)
    TRIANGLE3 = ("Triangle3", 3, 2)
    QUAD4 = ("Quad4", 4, 2)
    TETRA4 = ("Tetra4", 4, 3)
    PYRAMID5 = ("Pyramid5", 5, 3)
    PRISM6 = ("Prism6", 6, 3)
    HEXA8 = ("Hexa8", 8, 3)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def arity(self) -> int:
        """Number of node ids an element of this kind carries."""
        return self.value[1]

    @property
    def dimension(self) -> int:
        return self.value[2]

    def __str__(self) -> str:
        return self.label


ELEMENT_SCHEMA: Dict[int, ElementKind] = {
    1: ElementKind.LINE2,
    2: ElementKind.TRIANGLE3,
    3: ElementKind.QUAD4,
    4: ElementKind.TETRA4,
    5: ElementKind.PYRAMID5,
    6: ElementKind.PRISM6,
    7: ElementKind.HEXA8,
}

GMSH_ELEMENT_SCHEMA: Dict[int, ElementKind] = {
    1: ElementKind.LINE2,
    2: ElementKind.TRIANGLE3,
    3: ElementKind.QUAD4,
    4: ElementKind.TETRA4,
    5: ElementKind.HEXA8,
    6: ElementKind.PRISM6,
    7: ElementKind.PYRAMID5,
}


def lookup(type_code: int,
           schema: Optional[Mapping[int, ElementKind]] = None) -> Optional[ElementKind]:
    """
    Resolve an element-type code.

    Args:
        type_code: integer code read from an element record
        schema: code -> kind table (defaults to ELEMENT_SCHEMA)

    Returns:
        The matching ElementKind, or None when the code is not in the table.
        The caller decides how to fail.
    """
    if schema is None:
        schema = ELEMENT_SCHEMA
    return schema.get(type_code)
