"""
Importance Functions
====================

Pluggable measures that rank branches during simplification.

The simplifier owns the weight array; an importance function fills it
at initialization, recomputes single entries when a branch changes shape,
and may flag other branches as stale whenever a branch is removed.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np


class ImportanceFunction(ABC):
    """
    Interface between the simplifier and a branch weight measure.

    Lower weights are removed first. Implementations must be deterministic
    so that repeated simplification of the same tree yields the same order.
    """

    @abstractmethod
    def init(self, fn: np.ndarray, branches: list):
        """
        Populate the initial weight of every branch.

        Args:
            fn: Weight array to fill in place, one entry per branch
            branches: All branches, indexed by original arc id
        """

    @abstractmethod
    def update(self, branches: list, branch_id: int) -> float:
        """
        Recompute the weight of a branch whose endpoints have changed.

        Returns:
            The new weight of branch_id
        """

    @abstractmethod
    def branch_removed(self, branches: list, branch_id: int,
                       invalid: List[bool]):
        """
        Notification that branch_id has been removed from the live tree.

        Implementations set invalid[j] = True for every branch j whose
        weight depends on the removed branch.
        """

    @abstractmethod
    def get_branch_weight(self, branch_id: int) -> float:
        """Current weight of a branch, used when writing the order."""


class Persistence(ImportanceFunction):
    """
    Weight of a branch is its persistence: the scalar span it covers.

    persistence(b) = fn_vals[b.to_node] - fn_vals[b.from_node]
    """

    def __init__(self, fn_vals: np.ndarray):
        """
        Args:
            fn_vals: Scalar value per contour tree node
        """
        self.fn_vals = np.asarray(fn_vals, dtype=np.float64)
        self._fn: Optional[np.ndarray] = None

    def persistence(self, branch) -> float:
        return float(self.fn_vals[branch.to_node] - self.fn_vals[branch.from_node])

    def init(self, fn, branches):
        self._fn = fn
        for i, br in enumerate(branches):
            fn[i] = self.persistence(br)

    def update(self, branches, branch_id):
        weight = self.persistence(branches[branch_id])
        self._fn[branch_id] = weight
        return weight

    def branch_removed(self, branches, branch_id, invalid):
        # persistence of the remaining branches does not depend on removals
        pass

    def get_branch_weight(self, branch_id):
        if self._fn is None:
            raise ValueError("Persistence weights are not initialized, call init first")
        return float(self._fn[branch_id])
