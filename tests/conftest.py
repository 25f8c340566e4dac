"""Shared pytest fixtures for umap_scatter tests.

UMAP, HDBSCAN and the text repeller are replaced by small deterministic
stand-ins injected through :class:`umap_scatter.Capabilities`.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from umap_scatter import Capabilities

SAMPLE_IDS = [f"S{i}" for i in range(1, 13)]


class StubUMAP:
    """Records its parameters and returns fixed, well separated coordinates."""

    instances: list = []

    def __init__(self, n_components=2, **kwargs):
        self.n_components = n_components
        self.kwargs = dict(kwargs, n_components=n_components)
        StubUMAP.instances.append(self)

    def fit_transform(self, X):
        X = np.asarray(X, dtype=float)
        n = X.shape[0]
        rng = np.random.default_rng(0)
        centres = np.array([[0.0, 0.0], [6.0, 0.0], [0.0, 6.0]])
        base = centres[np.arange(n) % 3] + rng.normal(scale=0.8, size=(n, 2))
        extra = rng.normal(size=(n, max(self.n_components - 2, 0)))
        self.embedding_ = np.hstack([base, extra])[:, : self.n_components]
        self.n_samples_seen_ = n
        return self.embedding_


class StubHDBSCAN:
    """Assigns clusters by position: 0,1,0,1,... with the last sample as noise."""

    instances: list = []

    def __init__(self, min_cluster_size=5, min_samples=None):
        self.min_cluster_size = min_cluster_size
        self.min_samples = min_samples
        StubHDBSCAN.instances.append(self)

    def fit_predict(self, X):
        n = np.asarray(X).shape[0]
        labels = np.arange(n) % 2
        labels[-1] = -1
        self.labels_ = labels
        return labels


class RecordingRepel:
    """Stands in for adjustText.adjust_text."""

    def __init__(self):
        self.calls = []

    def __call__(self, texts, **kwargs):
        self.calls.append((texts, kwargs))


@pytest.fixture(autouse=True)
def _close_figures():
    StubUMAP.instances.clear()
    StubHDBSCAN.instances.clear()
    yield
    plt.close("all")


@pytest.fixture
def matrix() -> pd.DataFrame:
    """20 features x 12 samples of non-negative counts."""
    rng = np.random.default_rng(42)
    values = rng.poisson(lam=10, size=(20, len(SAMPLE_IDS))).astype(float)
    return pd.DataFrame(
        values,
        index=[f"gene{i}" for i in range(20)],
        columns=SAMPLE_IDS,
    )


@pytest.fixture
def annotations() -> pd.DataFrame:
    """Annotations for every sample, in reverse order."""
    ids = SAMPLE_IDS[::-1]
    n = len(ids)
    return pd.DataFrame(
        {
            "id": ids,
            "group": ["A", "B", "C"] * (n // 3),
            "batch": ["b1", "b2"] * (n // 2),
            "site": ["north", "south", "east"] * (n // 3),
            "score": np.linspace(-2.0, 3.0, n),
            "patient": [f"P{i}" for i in range(n)],
        }
    )


@pytest.fixture
def repel() -> RecordingRepel:
    return RecordingRepel()


@pytest.fixture
def capabilities(repel) -> Capabilities:
    return Capabilities(umap_class=StubUMAP, hdbscan_class=StubHDBSCAN, repel=repel)
