"""
Contour Tree Data
=================

Input container for the branch decomposition: arcs between critical
points and the scalar value of every node.
"""

import numpy as np
from typing import Sequence, Tuple


class ContourTreeData:
    """
    A contour tree given as monotone arcs over nodes with scalar values.

    Every arc (from, to) is directed upwards, i.e. fn_vals[from] <= fn_vals[to].
    The data is treated as read-only once constructed.
    """

    def __init__(self, arcs: Sequence[Tuple[int, int]], fn_vals: Sequence[float]):
        """
        Build and validate a contour tree.

        Args:
            arcs: (M, 2) sequence of (from, to) node indices
            fn_vals: Scalar value for each of the N nodes

        Raises:
            ValueError: If the tree is empty or an arc is out of range
                        or points downwards
        """
        fn_vals = np.array(fn_vals, dtype=np.float64)
        arcs = np.array(arcs, dtype=np.int64)

        if fn_vals.ndim != 1 or len(fn_vals) == 0:
            raise ValueError("Contour tree must have at least one node")
        if arcs.size == 0:
            raise ValueError("Contour tree must have at least one arc")
        if arcs.ndim != 2 or arcs.shape[1] != 2:
            raise ValueError(f"Arcs must have shape (M, 2), got {arcs.shape}")

        no_nodes = len(fn_vals)
        if arcs.min() < 0 or arcs.max() >= no_nodes:
            raise ValueError(f"Arc endpoint out of range [0, {no_nodes})")

        downward = fn_vals[arcs[:, 0]] > fn_vals[arcs[:, 1]]
        if np.any(downward):
            bad = int(np.flatnonzero(downward)[0])
            raise ValueError(
                f"Arc {bad} {tuple(arcs[bad])} is not monotone: "
                f"{fn_vals[arcs[bad, 0]]} > {fn_vals[arcs[bad, 1]]}"
            )

        self.arcs = arcs
        self.fn_vals = fn_vals
        self.arcs.setflags(write=False)
        self.fn_vals.setflags(write=False)

    @property
    def no_arcs(self) -> int:
        return len(self.arcs)

    @property
    def no_nodes(self) -> int:
        return len(self.fn_vals)

    def __repr__(self) -> str:
        return f"ContourTreeData(no_nodes={self.no_nodes}, no_arcs={self.no_arcs})"
