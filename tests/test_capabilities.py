"""Tests for optional engine detection and injection."""

import sys

import pytest

from umap_scatter._compat import (
    Capabilities,
    get_hdbscan_class,
    get_text_repeller,
    get_umap_class,
    resolve_capabilities,
)
from umap_scatter.exceptions import MissingDependencyError

from .conftest import RecordingRepel, StubHDBSCAN, StubUMAP


def _hide(monkeypatch, *modules):
    # A None entry in sys.modules makes the import raise ImportError.
    for name in modules:
        monkeypatch.setitem(sys.modules, name, None)


class TestDetection:
    def test_missing_umap(self, monkeypatch):
        _hide(monkeypatch, "umap")
        with pytest.raises(MissingDependencyError, match="umap-learn"):
            get_umap_class()

    def test_gpu_falls_back_to_cpu(self, monkeypatch):
        umap = pytest.importorskip("umap")
        _hide(monkeypatch, "cuml")
        assert get_umap_class(prefer_gpu=True) is umap.UMAP

    def test_missing_hdbscan(self, monkeypatch):
        _hide(monkeypatch, "hdbscan", "sklearn.cluster")
        with pytest.raises(MissingDependencyError, match="hdbscan"):
            get_hdbscan_class()

    def test_missing_repeller(self, monkeypatch):
        _hide(monkeypatch, "adjustText")
        with pytest.raises(MissingDependencyError, match="adjustText"):
            get_text_repeller()


class TestResolveCapabilities:
    def test_provided_engines_kept(self):
        repel = RecordingRepel()
        caps = Capabilities(umap_class=StubUMAP, hdbscan_class=StubHDBSCAN, repel=repel)
        resolved = resolve_capabilities(caps, clustering=True, name_tags=True)
        assert resolved == caps

    def test_unneeded_engines_not_resolved(self, monkeypatch):
        _hide(monkeypatch, "hdbscan", "sklearn.cluster", "adjustText")
        resolved = resolve_capabilities(Capabilities(umap_class=StubUMAP))
        assert resolved.umap_class is StubUMAP
        assert resolved.hdbscan_class is None
        assert resolved.repel is None

    def test_needed_engine_missing_fails_fast(self, monkeypatch):
        _hide(monkeypatch, "adjustText")
        with pytest.raises(MissingDependencyError):
            resolve_capabilities(Capabilities(umap_class=StubUMAP), name_tags=True)

