"""
Contour Tree Branch Decomposition
=================================

Progressive simplification of contour trees: branches are pruned from
least to most important, producing a removal order that can be replayed
to any level of detail (top-k branches or a weight threshold).
"""

from .contour_tree import ContourTreeData
from .importance import ImportanceFunction, Persistence
from .simplify import SimplifyCT, Branch, Node, ConsistencyError
from .tri_mesh import TriMesh

__version__ = "1.0.0"
__all__ = ["ContourTreeData", "ImportanceFunction", "Persistence", "SimplifyCT",
           "Branch", "Node", "ConsistencyError", "TriMesh"]
