"""Smoke tests for the simplification plots."""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ctsimplify import Persistence, SimplifyCT
from ctsimplify.order_io import normalize_weights
from ctsimplify.utils import create_sample_tree
from ctsimplify.visualization import SimplificationVisualizer


def test_weight_curve(tmp_path):
    data = create_sample_tree("random", seed=2, n_leaves=5)
    sim = SimplifyCT(data)
    sim.simplify(Persistence(data.fn_vals))
    weights = normalize_weights(sim.order_weights())

    save_path = tmp_path / "weights.png"
    fig = SimplificationVisualizer().plot_weight_curve(
        weights, threshold=0.2, topk=3, save_path=str(save_path)
    )
    assert save_path.exists()
    assert len(fig.axes[0].lines) == 3
    plt.close(fig)


def test_persistence_diagram(tmp_path):
    data = create_sample_tree("mixed")
    sim = SimplifyCT(data)
    sim.simplify(Persistence(data.fn_vals))

    save_path = tmp_path / "diagram.png"
    fig = SimplificationVisualizer(figsize=(8, 4)).plot_persistence_diagram(
        data, sim, save_path=str(save_path)
    )
    assert save_path.exists()
    offsets = fig.axes[0].collections[0].get_offsets()
    assert len(offsets) == len(sim.order)
    plt.close(fig)
