"""Tests for the run_umap command-line entry point."""

import pandas as pd
import pytest

import run_umap

from .conftest import StubUMAP


@pytest.fixture(autouse=True)
def stub_umap(monkeypatch):
    monkeypatch.setattr(
        "umap_scatter._compat.get_umap_class", lambda prefer_gpu=False: StubUMAP
    )


@pytest.fixture
def inputs(tmp_path, matrix, annotations):
    matrix_path = tmp_path / "counts.csv"
    ann_path = tmp_path / "samples.csv"
    matrix.to_csv(matrix_path)
    annotations.to_csv(ann_path, index=False)
    return str(matrix_path), str(ann_path)


def test_writes_layout_csv(tmp_path, inputs):
    matrix_path, _ = inputs
    out = tmp_path / "layout.csv"
    run_umap.main(["--matrix", matrix_path, "--return-data", "--output", str(out)])
    layout = pd.read_csv(out, index_col=0)
    assert list(layout.columns) == ["X1", "X2"]
    assert len(layout) == 12


def test_writes_plot(tmp_path, inputs, capsys):
    matrix_path, ann_path = inputs
    out = tmp_path / "umap.png"
    run_umap.main([
        "--matrix", matrix_path, "--annotations", ann_path,
        "--variables", "group", "batch", "--labels", "3",
        "--output", str(out), "--dpi", "50",
    ])
    assert out.exists() and out.stat().st_size > 0
    assert "Wrote plot" in capsys.readouterr().out


def test_user_error_exits_with_message(tmp_path, inputs, capsys):
    matrix_path, _ = inputs
    with pytest.raises(SystemExit) as excinfo:
        run_umap.main(["--matrix", matrix_path, "--output", str(tmp_path / "x.png")])
    assert excinfo.value.code == 1
    assert "must be supplied" in capsys.readouterr().err
