"""
Utility Functions
=================

Mesh loading and sample contour tree creation utilities.
"""

from typing import List, Optional, Tuple

import numpy as np
import trimesh

from .contour_tree import ContourTreeData


def load_mesh(path: str) -> trimesh.Trimesh:
    """
    Load a triangulated surface to carry a scalar field.

    Vertex ids are kept exactly as stored in the file, since scalar values
    and the contour tree nodes built from them refer to vertices by index.
    Multi-part files are flattened into one surface.

    Args:
        path: Any mesh file trimesh can read (OBJ, PLY, STL, OFF, ...)

    Returns:
        Unprocessed trimesh object
    """
    surface = trimesh.load(path, force='mesh', process=False)

    if isinstance(surface, trimesh.Scene):
        parts = [geom for geom in surface.geometry.values()
                 if isinstance(geom, trimesh.Trimesh)]
        if not parts:
            raise ValueError(f"{path} holds no triangle surface to attach scalars to")
        surface = trimesh.util.concatenate(parts)

    return surface


def create_sample_tree(tree_type: str = "mixed",
                       seed: Optional[int] = None,
                       n_leaves: int = 8) -> ContourTreeData:
    """
    Create a sample contour tree for testing.

    Args:
        tree_type: Type of tree to create:
            - "y": two minima joining below one maximum
            - "tie": join tree whose leaf branches tie on weight
            - "mixed": one split and one join saddle
            - "random": random join tree glued to a random split tree
        seed: Random seed for "random"
        n_leaves: Number of minima (and maxima) for "random"

    Returns:
        Generated contour tree
    """
    if tree_type == "y":
        arcs = [(0, 2), (1, 2), (2, 3)]
        fn_vals = [0.0, 1.0, 2.0, 5.0]
    elif tree_type == "tie":
        arcs = [(0, 2), (1, 2), (2, 4), (3, 4), (4, 5)]
        fn_vals = [0.0, 1.0, 3.0, 3.0, 5.0, 9.0]
    elif tree_type == "mixed":
        arcs = [(1, 2), (2, 4), (2, 3), (0, 4), (4, 5)]
        fn_vals = [0.0, 5.0, 9.0, 9.5, 10.0, 11.0]
    elif tree_type == "random":
        rng = np.random.default_rng(seed)
        return create_random_tree(n_leaves, n_leaves, rng)
    else:
        raise ValueError(f"Unknown sample tree type: {tree_type}")

    return ContourTreeData(arcs, fn_vals)


def _random_merge_tree(n_leaves: int,
                       rng: np.random.Generator) -> Tuple[List[float], List[Tuple[int, int]], int]:
    """
    Random binary merge tree grown bottom-up.

    Returns:
        Tuple of (heights, child->parent arcs, root node); heights strictly
        increase along every arc
    """
    heights = list(rng.uniform(0.0, 1.0, size=n_leaves))
    arcs = []
    components = list(range(n_leaves))

    while len(components) > 1:
        i, j = sorted(rng.choice(len(components), size=2, replace=False))
        a, b = components[i], components[j]
        saddle = len(heights)
        heights.append(max(heights[a], heights[b]) + rng.uniform(0.1, 1.0))
        arcs.append((a, saddle))
        arcs.append((b, saddle))
        del components[j]
        components[i] = saddle

    return heights, arcs, components[0]


def create_random_tree(n_minima: int, n_maxima: int,
                       rng: Optional[np.random.Generator] = None) -> ContourTreeData:
    """
    Random contour tree: a join tree over the minima connected by one arc
    to a split tree over the maxima.

    Every interior node has degree three, so no node needs collapsing
    before simplification starts.
    """
    if n_minima < 1 or n_maxima < 1:
        raise ValueError("Need at least one minimum and one maximum")
    if rng is None:
        rng = np.random.default_rng()

    join_h, join_arcs, join_root = _random_merge_tree(n_minima, rng)
    split_h, split_arcs, split_root = _random_merge_tree(n_maxima, rng)

    # split tree is mirrored above the join tree
    top = max(join_h) + max(split_h) + 1.0
    offset = len(join_h)
    fn_vals = join_h + [top - h for h in split_h]
    arcs = list(join_arcs)
    arcs.extend((offset + parent, offset + child) for child, parent in split_arcs)
    arcs.append((join_root, offset + split_root))

    return ContourTreeData(arcs, fn_vals)
