"""
Array views of parsed MSH data for downstream FEM code.

Node ids in an MSH file are arbitrary labels (not necessarily contiguous or
1-based). `to_arrays` builds a dense 0-based index and returns coordinate
and connectivity arrays that refer to rows of the coordinate array.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List
import numpy as np
from .elements import ElementKind
from .io import Node, ParseResult


@dataclass
class MeshArrays:
    """
    Attributes:
        node_ids: shape (nnm,) int array of node ids in file order
        coordinates: shape (nnm, 3) float array of x, y, z
        connectivity: kind -> (nem_kind, arity) int array of 0-based rows
            into `coordinates`
        element_ids: kind -> (nem_kind,) element ids, same order as connectivity
        physical_tags: kind -> (nem_kind,) first element tag, -1 if untagged
    """
    node_ids: np.ndarray
    coordinates: np.ndarray
    connectivity: Dict[ElementKind, np.ndarray] = field(default_factory=dict)
    element_ids: Dict[ElementKind, np.ndarray] = field(default_factory=dict)
    physical_tags: Dict[ElementKind, np.ndarray] = field(default_factory=dict)

    @property
    def n_nodes(self) -> int:
        return int(self.node_ids.shape[0])

    @property
    def n_elements(self) -> int:
        return sum(int(a.shape[0]) for a in self.connectivity.values())

    def elements_of_dimension(self, dim: int) -> Dict[ElementKind, np.ndarray]:
        """Connectivity blocks whose element kind has topological dimension `dim`."""
        return {k: v for k, v in self.connectivity.items() if k.dimension == dim}


def build_node_index(nodes: Iterable[Node]) -> Dict[int, int]:
    """
    Map node id -> 0-based position in file order.

    Raises:
        ValueError: If a node id appears more than once
    """
    index: Dict[int, int] = {}
    for pos, node in enumerate(nodes):
        if node.id in index:
            raise ValueError(f"Duplicate node id {node.id}")
        index[node.id] = pos
    return index


def to_arrays(result: ParseResult) -> MeshArrays:
    """
    Convert a ParseResult into numpy arrays grouped by element kind.

    Raises:
        ValueError: If node ids are duplicated or an element references a
            node id that is not defined in $Nodes
    """
    index = build_node_index(result.nodes)

    node_ids = np.array([n.id for n in result.nodes], dtype=int)
    coordinates = np.zeros((len(result.nodes), 3), dtype=float)
    for i, n in enumerate(result.nodes):
        coordinates[i, 0] = n.x
        coordinates[i, 1] = n.y
        coordinates[i, 2] = n.z

    rows: Dict[ElementKind, List[List[int]]] = {}
    ids: Dict[ElementKind, List[int]] = {}
    tags: Dict[ElementKind, List[int]] = {}
    for e in result.elements:
        try:
            row = [index[n] for n in e.node_ids]
        except KeyError as exc:
            raise ValueError(f"Element {e.id} references undefined node {exc.args[0]}") from None
        rows.setdefault(e.kind, []).append(row)
        ids.setdefault(e.kind, []).append(e.id)
        tags.setdefault(e.kind, []).append(e.physical_tag if e.physical_tag is not None else -1)

    arrays = MeshArrays(node_ids=node_ids, coordinates=coordinates)
    for kind, conn in rows.items():
        arrays.connectivity[kind] = np.array(conn, dtype=int).reshape(-1, kind.arity)
        arrays.element_ids[kind] = np.array(ids[kind], dtype=int)
        arrays.physical_tags[kind] = np.array(tags[kind], dtype=int)
    return arrays
