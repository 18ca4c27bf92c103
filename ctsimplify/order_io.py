"""
Order Files
===========

Reading and writing of simplification orders.

An order is stored as two files sharing a prefix:
- <prefix>.order.dat: text file holding the number of entries N
- <prefix>.order.bin: N little-endian uint32 branch ids (root last)
  followed by N little-endian float32 normalized weights
"""

from pathlib import Path
from typing import Sequence, Tuple, Union

import numpy as np

ID_DTYPE = np.dtype("<u4")
WEIGHT_DTYPE = np.dtype("<f4")


def _paths(prefix: Union[str, Path]) -> Tuple[Path, Path]:
    prefix = str(prefix)
    return Path(prefix + ".order.dat"), Path(prefix + ".order.bin")


def normalize_weights(weights: Sequence[float]) -> np.ndarray:
    """
    Divide all weights by the last (largest) one.

    A largest weight of zero is treated as one, so all-zero weights stay zero.
    """
    wts = np.asarray(weights, dtype=np.float64)
    if len(wts) == 0:
        return wts
    max_wt = wts[-1]
    if max_wt == 0:
        max_wt = 1.0
    return wts / max_wt


def write_order(prefix: Union[str, Path], order: Sequence[int],
                weights: Sequence[float]):
    """
    Write an order and its weights.

    Args:
        prefix: Output path prefix
        order: Branch ids in removal order
        weights: One (already normalized) weight per entry
    """
    if len(order) != len(weights):
        raise ValueError(f"Got {len(weights)} weights for {len(order)} order entries")

    dat_path, bin_path = _paths(prefix)
    dat_path.parent.mkdir(parents=True, exist_ok=True)

    dat_path.write_text(f"{len(order)}\n")
    with open(bin_path, "wb") as f:
        f.write(np.asarray(order, dtype=ID_DTYPE).tobytes())
        f.write(np.asarray(weights, dtype=WEIGHT_DTYPE).tobytes())

    print(f"Saved order ({len(order)} entries) to: {bin_path}")


def read_order(prefix: Union[str, Path]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Read an order written by write_order.

    Returns:
        Tuple of (order, weights) arrays
    """
    dat_path, bin_path = _paths(prefix)
    tokens = dat_path.read_text().split()
    if not tokens:
        raise ValueError(f"Empty order count file: {dat_path}")
    count = int(tokens[0])

    raw = np.fromfile(bin_path, dtype=np.uint8)
    expected = count * (ID_DTYPE.itemsize + WEIGHT_DTYPE.itemsize)
    if len(raw) != expected:
        raise ValueError(
            f"{bin_path} holds {len(raw)} bytes, expected {expected} for {count} entries"
        )

    split = count * ID_DTYPE.itemsize
    order = raw[:split].view(ID_DTYPE).astype(np.int64)
    weights = raw[split:].view(WEIGHT_DTYPE).astype(np.float64)
    return order, weights


def threshold_for_topk(weights: Sequence[float], k: int) -> float:
    """
    Weight threshold that keeps the k most important branches.

    Ties in the weights can make the threshold keep fewer than k branches.
    """
    wts = np.asarray(weights, dtype=np.float64)
    if k <= 0 or k > len(wts):
        raise ValueError(f"k must be in [1, {len(wts)}], got {k}")
    if k == len(wts):
        return float(np.nextafter(wts[0], -np.inf))
    return float(wts[len(wts) - k - 1])


def count_above(weights: Sequence[float], threshold: float) -> int:
    """Number of branches a threshold replay keeps."""
    wts = np.asarray(weights, dtype=np.float64)
    if len(wts) == 0:
        return 0
    # the root is never removed
    return int(np.count_nonzero(wts[:-1] > threshold)) + 1
