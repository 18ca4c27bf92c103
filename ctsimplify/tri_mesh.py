"""
Triangle Mesh Topology
======================

Scalar field on a triangulated surface, prepared as input for contour
tree construction: per-vertex scalar values, vertex adjacency and a
total order over vertices.
"""

from typing import List, Optional

import numpy as np
import trimesh


class TriMesh:
    """
    Vertex adjacency and scalar values of a triangle mesh.

    The text format read by load_data is whitespace delimited:
        <header token>
        <vertex count> <triangle count>
        x y z scalar            (one line per vertex)
        partition v1 v2 v3      (one line per triangle, 0-based indices)
    """

    def __init__(self):
        self.fn_vals: Optional[np.ndarray] = None
        self.mesh: Optional[trimesh.Trimesh] = None
        self._adjacency: List[List[int]] = []
        self._max_star = 0

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, scalars: np.ndarray) -> "TriMesh":
        """
        Build the topology from an existing mesh and per-vertex scalars.

        Args:
            mesh: Triangle mesh
            scalars: (N,) scalar value per vertex
        """
        scalars = np.asarray(scalars, dtype=np.float64)
        if scalars.shape != (len(mesh.vertices),):
            raise ValueError(
                f"Expected {len(mesh.vertices)} scalars, got shape {scalars.shape}"
            )
        tri_mesh = cls()
        tri_mesh._set_mesh(mesh, scalars)
        return tri_mesh

    def load_data(self, file_name: str):
        """
        Load a mesh with scalar values from a text file.

        Raises:
            ValueError: If the file is truncated or indices are out of range
        """
        with open(file_name) as f:
            tokens = f.read().split()

        if len(tokens) < 3:
            raise ValueError(f"Missing mesh header in {file_name}")
        nv, nt = int(tokens[1]), int(tokens[2])

        body = tokens[3:]
        if len(body) < 4 * nv + 4 * nt:
            raise ValueError(
                f"{file_name} declares {nv} vertices and {nt} triangles "
                f"but holds only {len(body)} values"
            )
        vertex_data = np.array(body[:4 * nv], dtype=np.float64).reshape(nv, 4)
        tri_data = np.array(body[4 * nv:4 * nv + 4 * nt], dtype=np.int64).reshape(nt, 4)

        faces = tri_data[:, 1:]
        if nt > 0 and (faces.min() < 0 or faces.max() >= nv):
            raise ValueError(f"Triangle vertex index out of range [0, {nv})")

        # process=False keeps vertex ids aligned with the file
        mesh = trimesh.Trimesh(vertices=vertex_data[:, :3], faces=faces, process=False)
        self._set_mesh(mesh, vertex_data[:, 3])
        print(f"Loaded {file_name}: {nv} vertices, {nt} triangles, "
              f"max degree {self._max_star}")

    def _set_mesh(self, mesh: trimesh.Trimesh, scalars: np.ndarray):
        self.mesh = mesh
        self.fn_vals = scalars
        self._adjacency = [sorted(int(u) for u in adj if u != v)
                           for v, adj in enumerate(mesh.vertex_neighbors)]
        self._max_star = max((len(adj) for adj in self._adjacency), default=0)

    def get_max_degree(self) -> int:
        return self._max_star

    def get_vertex_count(self) -> int:
        return 0 if self.fn_vals is None else len(self.fn_vals)

    def get_star(self, v: int) -> List[int]:
        """Vertices sharing an edge with v, in ascending index order."""
        return list(self._adjacency[v])

    def less_than(self, v1: int, v2: int) -> bool:
        """Total order on vertices: scalar value, ties broken by index."""
        if self.fn_vals[v1] < self.fn_vals[v2]:
            return True
        if self.fn_vals[v1] == self.fn_vals[v2]:
            return v1 < v2
        return False

    def get_function_value(self, v: int) -> float:
        return float(self.fn_vals[v])

    def vertex_order(self) -> np.ndarray:
        """Vertex indices sorted ascending by less_than."""
        return np.lexsort((np.arange(len(self.fn_vals)), self.fn_vals))
