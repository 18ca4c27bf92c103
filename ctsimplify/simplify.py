"""
Contour Tree Simplification
===========================

Branch decomposition of a contour tree by iterative leaf pruning.

The least important leaf branch is repeatedly removed with a priority
queue. Whenever a removal leaves a node with a single incoming and a
single outgoing branch, the two are merged into one, and the removed
branches parked at that node become its children in the branch hierarchy.
"""

import heapq
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from .contour_tree import ContourTreeData
from .importance import ImportanceFunction
from . import order_io

# parent sentinels
NO_PARENT = -1
CONSUMED = -2


class ConsistencyError(RuntimeError):
    """The decomposition reached a state that a valid input cannot produce."""


@dataclass
class Branch:
    """A monotone path of the contour tree, identified by its first arc id."""
    from_node: int
    to_node: int
    parent: int = NO_PARENT
    children: List[int] = field(default_factory=list)
    arcs: List[int] = field(default_factory=list)


@dataclass
class Node:
    prev: List[int] = field(default_factory=list)
    next: List[int] = field(default_factory=list)


class _QueueEntry:
    """Heap entry ordered by the simplifier's current state of the branch."""

    __slots__ = ("branch_id", "_sim")

    def __init__(self, branch_id: int, sim: "SimplifyCT"):
        self.branch_id = branch_id
        self._sim = sim

    def __lt__(self, other: "_QueueEntry") -> bool:
        return self._sim.compare(self.branch_id, other.branch_id)


class SimplifyCT:
    """
    Branch decomposition and simplification of a contour tree.

    Two drivers are provided:
    - simplify(): priority-driven, computes the full removal order
    - simplify_order(): replays a precomputed order up to top-k branches
      or a weight threshold

    Branches and nodes are stored in flat lists indexed by id and are never
    deleted; the removed flag and the CONSUMED parent mark dead branches.
    """

    def __init__(self, data: Optional[ContourTreeData] = None):
        """
        Args:
            data: Contour tree to simplify (can also be set with set_input)
        """
        self.data = data

        # State variables (initialized per simplification)
        self.branches: List[Branch] = []
        self.nodes: List[Node] = []
        self.fn: Optional[np.ndarray] = None
        self.removed: List[bool] = []
        self.invalid: List[bool] = []
        self.inq: List[bool] = []
        self.v_array: List[List[int]] = []
        self.order: List[int] = []
        self.replay_removed: List[int] = []
        self.sim_fn: Optional[ImportanceFunction] = None
        self._queue: List[_QueueEntry] = []

    def set_input(self, data: ContourTreeData):
        self.data = data

    def init_simplification(self, sim_fn: Optional[ImportanceFunction]):
        """
        Build one branch per arc and fill the queue with the initial candidates.

        With sim_fn set to None only the topology is built; this is the
        starting state for replaying an existing order.
        """
        if self.data is None:
            raise ValueError("No contour tree set, call set_input first")

        no_arcs = self.data.no_arcs
        self.branches = []
        self.nodes = [Node() for _ in range(self.data.no_nodes)]
        for i, (a_from, a_to) in enumerate(self.data.arcs.tolist()):
            self.branches.append(Branch(from_node=a_from, to_node=a_to, arcs=[i]))
            self.nodes[a_from].next.append(i)
            self.nodes[a_to].prev.append(i)

        self.fn = np.zeros(no_arcs, dtype=np.float64)
        self.removed = [False] * no_arcs
        self.invalid = [False] * no_arcs
        self.inq = [False] * no_arcs
        self.v_array = [[] for _ in range(self.data.no_nodes)]
        self.order = []
        self.replay_removed = []
        self._queue = []

        self.sim_fn = sim_fn
        if sim_fn is not None:
            sim_fn.init(self.fn, self.branches)
            for i in range(no_arcs):
                self.add_to_queue(i)

    def add_to_queue(self, ano: int):
        if self.is_candidate(self.branches[ano]):
            heapq.heappush(self._queue, _QueueEntry(ano, self))
            self.inq[ano] = True

    def is_candidate(self, br: Branch) -> bool:
        """
        Check whether a branch is a leaf that can be pruned.

        A branch from a minimum can go if its upper node still has other
        incoming branches; symmetrically for a branch to a maximum.
        """
        if len(self.nodes[br.from_node].prev) == 0:
            return len(self.nodes[br.to_node].prev) > 1
        if len(self.nodes[br.to_node].next) == 0:
            return len(self.nodes[br.from_node].next) > 1
        return False

    def persistence(self, ano: int) -> float:
        br = self.branches[ano]
        return float(self.data.fn_vals[br.to_node] - self.data.fn_vals[br.from_node])

    def compare(self, b1: int, b2: int) -> bool:
        """
        Return True if b1 is removed before b2.

        Ordered by weight, then persistence, then node index span,
        then lower from node, then branch id.
        """
        if self.fn[b1] != self.fn[b2]:
            return self.fn[b1] < self.fn[b2]
        p1 = self.persistence(b1)
        p2 = self.persistence(b2)
        if p1 != p2:
            return p1 < p2
        br1 = self.branches[b1]
        br2 = self.branches[b2]
        diff1 = br1.to_node - br1.from_node
        diff2 = br2.to_node - br2.from_node
        if diff1 != diff2:
            return diff1 < diff2
        if br1.from_node != br2.from_node:
            return br1.from_node < br2.from_node
        return b1 < b2

    def remove_arc(self, ano: int):
        """Prune candidate branch ano and collapse its merge vertex if needed."""
        br = self.branches[ano]
        from_node = br.from_node
        to_node = br.to_node

        merged_vertex = -1
        if len(self.nodes[from_node].prev) == 0:
            merged_vertex = to_node
        if len(self.nodes[to_node].next) == 0:
            merged_vertex = from_node
        if merged_vertex < 0:
            raise ConsistencyError(f"Branch {ano} is not a leaf branch")

        self.nodes[from_node].next.remove(ano)
        self.nodes[to_node].prev.remove(ano)
        self.removed[ano] = True

        self.v_array[merged_vertex].append(ano)
        node = self.nodes[merged_vertex]
        if len(node.prev) == 1 and len(node.next) == 1:
            self.merge_vertex(merged_vertex)

        if self.sim_fn is not None:
            self.sim_fn.branch_removed(self.branches, ano, self.invalid)

    def merge_vertex(self, v: int):
        """
        Collapse node v, which has exactly one incoming and one outgoing branch.

        The queued branch survives; if the incoming one is not queued, the
        outgoing one absorbs it.
        """
        prev = self.nodes[v].prev[0]
        nxt = self.nodes[v].next[0]

        if self.inq[prev]:
            keep, rem = prev, nxt
            self.branches[keep].to_node = self.branches[rem].to_node
            upper = self.nodes[self.branches[keep].to_node].prev
            upper[:] = [keep if b == rem else b for b in upper]
        else:
            keep, rem = nxt, prev
            self.branches[keep].from_node = self.branches[rem].from_node
            lower = self.nodes[self.branches[keep].from_node].next
            lower[:] = [keep if b == rem else b for b in lower]
        self.invalid[keep] = True
        self.removed[rem] = True
        if keep == nxt and self.sim_fn is not None and not self.inq[keep]:
            self.add_to_queue(keep)

        survivor = self.branches[keep]
        consumed = self.branches[rem]
        for ch in consumed.children:
            if self.branches[ch].parent != rem:
                raise ConsistencyError(
                    f"Branch {ch} is listed as child of {rem} "
                    f"but has parent {self.branches[ch].parent}"
                )
            survivor.children.append(ch)
            self.branches[ch].parent = keep
        consumed.children = []
        survivor.arcs.extend(consumed.arcs)
        for ch in self.v_array[v]:
            survivor.children.append(ch)
            self.branches[ch].parent = keep
        consumed.parent = CONSUMED

    def simplify(self, sim_fn: ImportanceFunction) -> List[int]:
        """
        Compute the full removal order using an importance function.

        Args:
            sim_fn: Importance function ranking the branches

        Returns:
            Removal order of branch ids, root last
        """
        if sim_fn is None:
            raise ValueError("Priority simplification requires an importance function")

        self.init_simplification(sim_fn)
        print(f"Starting simplification: {self.data.no_arcs} arcs, "
              f"{self.data.no_nodes} nodes, {len(self._queue)} initial candidates")

        while self._queue:
            ano = heapq.heappop(self._queue).branch_id
            self.inq[ano] = False
            if self.removed[ano]:
                continue
            if self.invalid[ano]:
                self.fn[ano] = sim_fn.update(self.branches, ano)
                self.invalid[ano] = False
                self.add_to_queue(ano)
            elif self.is_candidate(self.branches[ano]):
                self.remove_arc(ano)
                self.order.append(ano)

        remaining = self.live_branches()
        if len(remaining) != 1:
            raise ConsistencyError(
                f"Expected a single root branch after simplification, "
                f"found {len(remaining)}: {remaining[:10]}"
            )
        root = remaining[0]
        if self.invalid[root]:
            self.fn[root] = sim_fn.update(self.branches, root)
            self.invalid[root] = False
        self.order.append(root)

        print(f"Simplification complete: {len(self.order)} branches, root {root}")
        return list(self.order)

    def simplify_order(self, order: Sequence[int], topk: int = 0,
                       threshold: Optional[float] = None,
                       weights: Optional[Sequence[float]] = None) -> List[int]:
        """
        Replay a precomputed removal order.

        Args:
            order: Removal order as produced by simplify(), root last
            topk: Keep the k most important branches (0 = use threshold)
            threshold: Remove branches whose weight is <= threshold
            weights: Weight of every order entry, required with threshold

        Returns:
            Branch ids removed by the replay, in removal order

        Raises:
            ConsistencyError: If an entry is not removable at its turn
        """
        order = [int(b) for b in order]
        if topk < 0:
            raise ValueError(f"topk must be non-negative, got {topk}")
        if topk == 0 and threshold is not None:
            if weights is None:
                raise ValueError("Threshold replay requires the order weights")
            if len(weights) != len(order):
                raise ValueError(
                    f"Got {len(weights)} weights for {len(order)} order entries"
                )

        self.init_simplification(None)
        for ano in order:
            if ano < 0 or ano >= len(self.branches):
                raise ValueError(f"Branch id {ano} out of range")
            self.inq[ano] = True

        if topk > 0:
            to_remove = order[:max(0, len(order) - topk)]
        elif threshold is not None:
            to_remove = []
            for ano, wt in zip(order[:-1], weights):
                if wt > threshold:
                    break
                to_remove.append(ano)
        else:
            to_remove = []

        print(f"Replaying order: removing {len(to_remove)} of {len(order)} branches")
        for ano in to_remove:
            if not self.is_candidate(self.branches[ano]):
                raise ConsistencyError(
                    f"Branch {ano} fails the candidate test during replay; "
                    f"the order is stale or corrupted"
                )
            self.inq[ano] = False
            self.remove_arc(ano)
            self.replay_removed.append(ano)

        return list(self.replay_removed)

    def live_branches(self) -> List[int]:
        """Branch ids still part of the simplified tree."""
        return [i for i, r in enumerate(self.removed) if not r]

    @property
    def root(self) -> Optional[int]:
        return self.order[-1] if self.order else None

    def get_branch(self, ano: int) -> Branch:
        return self.branches[ano]

    def order_weights(self) -> np.ndarray:
        """
        Weights of the order entries from the importance function.

        Raises:
            ConsistencyError: If weights decrease along the order
        """
        if self.sim_fn is None:
            raise ValueError("No importance function, run simplify first")

        wts = np.array([self.sim_fn.get_branch_weight(ano) for ano in self.order],
                       dtype=np.float64)
        decreasing = np.flatnonzero(np.diff(wts) < 0)
        if len(decreasing) > 0:
            i = int(decreasing[0])
            raise ConsistencyError(
                f"Weights are not monotonic at order position {i + 1}: "
                f"{wts[i]} > {wts[i + 1]}"
            )
        return wts

    def output_order(self, file_name: str):
        """
        Write the removal order and normalized weights.

        Creates <file_name>.order.dat (entry count) and <file_name>.order.bin.
        """
        wts = self.order_weights()
        order_io.write_order(file_name, self.order, order_io.normalize_weights(wts))
