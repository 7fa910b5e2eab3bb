import sys
import os
import io

# Make local `meshparser` package importable when running this example from the repository root
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from meshparser import io as msh_io
from meshparser import mesh, post
from meshparser.elements import ElementKind


SQUARE = """$MeshFormat
2.2 0 8
$EndMeshFormat
$PhysicalNames
2
1 1 "wall"
2 2 "fluid"
$EndPhysicalNames
$Nodes
4
1 0.0 0.0 0.0
2 1.0 0.0 0.0
3 1.0 1.0 0.0
4 0.0 1.0 0.0
$EndNodes
$Elements
6
1 1 2 1 1 1 2
2 1 2 1 2 2 3
3 1 2 1 3 3 4
4 1 2 1 4 4 1
5 2 2 2 1 1 2 3
6 2 2 2 1 1 3 4
$EndElements
"""


def main():
    result = msh_io.parse(io.StringIO(SQUARE))
    print(post.format_summary(result, title="Unit square"))

    # Dense arrays for an FEM assembly loop
    arrays = mesh.to_arrays(result)
    tris = arrays.connectivity[ElementKind.TRIANGLE3]
    names = result.region_names()
    for row, tag in zip(tris, arrays.physical_tags[ElementKind.TRIANGLE3]):
        xy = arrays.coordinates[row, :2]
        print(f"{names.get(int(tag), '?'):>6}: {xy.tolist()}")


if __name__ == "__main__":
    main()
