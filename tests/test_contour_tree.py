"""Tests for contour tree input validation and sample trees."""

import numpy as np
import pytest

from ctsimplify import ContourTreeData
from ctsimplify.utils import create_sample_tree, create_random_tree


class TestValidation:
    def test_counts(self):
        data = ContourTreeData([(0, 2), (1, 2)], [0.0, 1.0, 2.0])
        assert data.no_arcs == 2
        assert data.no_nodes == 3

    def test_input_is_copied_and_frozen(self):
        arcs = np.array([[0, 1]])
        data = ContourTreeData(arcs, [0.0, 1.0])
        arcs[0, 1] = 0
        assert data.arcs[0, 1] == 1
        with pytest.raises(ValueError):
            data.fn_vals[0] = 3.0

    def test_no_nodes(self):
        with pytest.raises(ValueError, match="node"):
            ContourTreeData([(0, 1)], [])

    def test_no_arcs(self):
        with pytest.raises(ValueError, match="arc"):
            ContourTreeData([], [0.0])

    def test_bad_shape(self):
        with pytest.raises(ValueError, match="shape"):
            ContourTreeData([(0, 1, 2)], [0.0, 1.0, 2.0])

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            ContourTreeData([(0, 3)], [0.0, 1.0])

    def test_downward_arc(self):
        with pytest.raises(ValueError, match="not monotone"):
            ContourTreeData([(1, 0)], [0.0, 1.0])


class TestSampleTrees:
    @pytest.mark.parametrize("kind", ["y", "tie", "mixed"])
    def test_fixed_samples(self, kind):
        data = create_sample_tree(kind)
        assert data.no_nodes == data.no_arcs + 1

    def test_unknown_sample(self):
        with pytest.raises(ValueError):
            create_sample_tree("spiral")

    @pytest.mark.parametrize("n_min,n_max", [(1, 1), (2, 5), (6, 3)])
    def test_random_tree_shape(self, n_min, n_max):
        data = create_random_tree(n_min, n_max, np.random.default_rng(1))

        degree_in = np.bincount(data.arcs[:, 1], minlength=data.no_nodes)
        degree_out = np.bincount(data.arcs[:, 0], minlength=data.no_nodes)

        assert data.no_nodes == data.no_arcs + 1
        assert np.count_nonzero(degree_in == 0) == n_min
        assert np.count_nonzero(degree_out == 0) == n_max
        assert not np.any((degree_in == 1) & (degree_out == 1))

    def test_random_tree_seeded(self):
        a = create_sample_tree("random", seed=5, n_leaves=4)
        b = create_sample_tree("random", seed=5, n_leaves=4)
        np.testing.assert_array_equal(a.arcs, b.arcs)
        np.testing.assert_array_equal(a.fn_vals, b.fn_vals)
