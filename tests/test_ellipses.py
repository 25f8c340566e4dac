"""Tests for confidence ellipses."""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest
from matplotlib.path import Path

from umap_scatter.visualization.ellipses import (
    add_group_ellipses,
    confidence_ellipse,
    robust_covariance,
)


class TestConfidenceEllipse:
    def test_too_few_points(self):
        assert confidence_ellipse([0.0, 1.0], [0.0, 1.0]) is None

    def test_collinear_points(self):
        assert confidence_ellipse([0.0, 1.0, 2.0], [0.0, 1.0, 2.0]) is None

    def test_centred_on_mean(self):
        rng = np.random.default_rng(1)
        x = rng.normal(loc=5.0, size=200)
        y = rng.normal(loc=-3.0, size=200)
        outline = confidence_ellipse(x, y, segments=200, kind="norm")
        assert outline.shape == (201, 2)
        np.testing.assert_allclose(outline[:-1].mean(axis=0), [x.mean(), y.mean()], atol=1e-6)

    def test_covers_most_points(self):
        rng = np.random.default_rng(2)
        pts = rng.multivariate_normal([0, 0], [[2.0, 0.8], [0.8, 1.0]], size=500)
        outline = confidence_ellipse(pts[:, 0], pts[:, 1], kind="norm")
        inside = Path(outline).contains_points(pts).mean()
        assert 0.9 < inside < 0.99

    def test_larger_level_is_larger(self):
        rng = np.random.default_rng(3)
        x, y = rng.normal(size=(2, 30))
        small = confidence_ellipse(x, y, level=0.5)
        big = confidence_ellipse(x, y, level=0.99)
        assert np.ptp(big[:, 0]) > np.ptp(small[:, 0])


def test_add_group_ellipses_skips_small_groups(caplog):
    rng = np.random.default_rng(4)
    data = pd.DataFrame(
        {
            "X1": rng.normal(size=12),
            "X2": rng.normal(size=12),
            "site": ["a"] * 10 + ["b"] * 2,
        }
    )
    fig, ax = plt.subplots()
    with caplog.at_level("WARNING"):
        patches = add_group_ellipses(ax, data, "site", {"a": "#FFA500", "b": "#FFFF00"})
    assert len(patches) == 1
    assert patches[0].get_label() == "a"
    assert patches[0].get_zorder() == 1
    assert "site='b'" in caplog.text


class TestRobustEllipse:
    @pytest.fixture
    def with_outlier(self):
        rng = np.random.default_rng(5)
        pts = rng.normal(size=(30, 2))
        return np.vstack([pts, [[50.0, 50.0]]])

    def test_outlier_downweighted(self, with_outlier):
        centre, cov = robust_covariance(with_outlier)
        assert np.abs(centre).max() < 1.0
        assert cov[0, 0] < np.cov(with_outlier, rowvar=False)[0, 0] / 10

    def test_t_ellipse_resists_outlier(self, with_outlier):
        x, y = with_outlier.T
        robust = confidence_ellipse(x, y)
        plain = confidence_ellipse(x, y, kind="norm")
        assert np.ptp(robust[:, 0]) < np.ptp(plain[:, 0]) / 3

    def test_closed_outline(self, with_outlier):
        outline = confidence_ellipse(*with_outlier.T, segments=51)
        assert outline.shape == (52, 2)
        np.testing.assert_allclose(outline[0], outline[-1])

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="kind"):
            confidence_ellipse([0.0, 1.0, 2.0], [1.0, 0.0, 2.0], kind="euclid")
