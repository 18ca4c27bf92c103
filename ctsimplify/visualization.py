"""
Simplification Plots
====================

Plots for inspecting a computed branch order: how weights grow along the
order, and where removed branches sit in a persistence diagram.
"""

from typing import Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib import cm

from .contour_tree import ContourTreeData


class SimplificationVisualizer:
    """
    Visualization tools for simplification orders.

    Provides:
    - Normalized weight curve along the removal order
    - Persistence diagram of branch endpoints at removal time
    """

    def __init__(self, figsize: Tuple[int, int] = (12, 5)):
        """
        Args:
            figsize: Default figure size for plots
        """
        self.figsize = figsize
        self.colormap = cm.viridis

    def plot_weight_curve(self, weights: Sequence[float],
                          threshold: Optional[float] = None,
                          topk: Optional[int] = None,
                          title: str = "Branch Weights",
                          save_path: Optional[str] = None) -> plt.Figure:
        """
        Plot weights in removal order, with optional cut markers.

        Args:
            weights: Weight per order entry (root last)
            threshold: Optional weight threshold to mark
            topk: Optional number of kept branches to mark
            title: Plot title
            save_path: Optional path to save the figure

        Returns:
            Matplotlib figure object
        """
        weights = np.asarray(weights, dtype=np.float64)
        fig, ax = plt.subplots(figsize=self.figsize)

        ranks = np.arange(len(weights))
        ax.plot(ranks, weights, 'o-', color='steelblue', markersize=3)

        if threshold is not None:
            ax.axhline(y=threshold, color='red', linestyle='--',
                       label=f'Threshold ({threshold:.3g})')
        if topk is not None and 0 < topk <= len(weights):
            ax.axvline(x=len(weights) - topk - 0.5, color='crimson', linestyle=':',
                       label=f'Top {topk}')

        ax.set_xlabel('Removal Order')
        ax.set_ylabel('Weight')
        ax.set_title(title)
        if threshold is not None or topk is not None:
            ax.legend()

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Saved weight curve to {save_path}")

        return fig

    def plot_persistence_diagram(self, data: ContourTreeData,
                                 simplifier,
                                 title: str = "Persistence Diagram",
                                 save_path: Optional[str] = None) -> plt.Figure:
        """
        Scatter the (from, to) scalar values of every ordered branch.

        Branch endpoints are read from the simplifier after simplify(),
        i.e. the extent each branch had when it was removed.
        """
        order = simplifier.order
        births = np.array([data.fn_vals[simplifier.branches[b].from_node] for b in order])
        deaths = np.array([data.fn_vals[simplifier.branches[b].to_node] for b in order])

        fig, ax = plt.subplots(figsize=(self.figsize[1], self.figsize[1]))
        colors = self.colormap(np.linspace(0, 1, max(1, len(order))))
        ax.scatter(births, deaths, c=colors, s=20, edgecolors='black', linewidths=0.3)

        lo = float(data.fn_vals.min())
        hi = float(data.fn_vals.max())
        ax.plot([lo, hi], [lo, hi], color='gray', linestyle='--', linewidth=1)

        ax.set_xlabel('Lower scalar value')
        ax.set_ylabel('Upper scalar value')
        ax.set_title(title)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Saved persistence diagram to {save_path}")

        return fig
