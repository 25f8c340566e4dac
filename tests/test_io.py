"""Tests for loading, preprocessing and joining tables."""

import numpy as np
import pandas as pd
import pytest

from umap_scatter.exceptions import AnnotationError
from umap_scatter.io import (
    join_annotations,
    load_annotations,
    load_matrix,
    log2_transform,
    require_annotations,
)


class TestLog2Transform:
    def test_transform_applies_offset(self):
        m = pd.DataFrame({"a": [0.0, 1.0], "b": [3.0, 7.999]})
        out = log2_transform(m, transform=True)
        np.testing.assert_allclose(out.to_numpy(), np.log2(m.to_numpy() + 0.001))

    def test_zero_is_finite(self):
        out = log2_transform(pd.DataFrame({"a": [0.0]}))
        assert np.isfinite(out.iloc[0, 0])
        assert out.iloc[0, 0] == pytest.approx(np.log2(0.001))

    def test_no_transform_returns_input(self, matrix):
        assert log2_transform(matrix, transform=False) is matrix

    def test_input_not_mutated(self, matrix):
        before = matrix.copy()
        log2_transform(matrix, transform=True)
        pd.testing.assert_frame_equal(matrix, before)


class TestLoaders:
    def test_load_matrix_csv(self, tmp_path, matrix):
        path = tmp_path / "counts.csv"
        matrix.to_csv(path)
        loaded = load_matrix(str(path))
        assert list(loaded.columns) == list(matrix.columns)
        np.testing.assert_allclose(loaded.to_numpy(), matrix.to_numpy())

    def test_load_matrix_tsv_numeric_headers(self, tmp_path):
        path = tmp_path / "counts.tsv"
        path.write_text("gene\t101\t102\ng1\t1\t2\ng2\t3\t4\n")
        loaded = load_matrix(str(path))
        assert list(loaded.columns) == ["101", "102"]
        assert loaded.loc["g2", "102"] == 4

    def test_load_annotations_ids_are_strings(self, tmp_path):
        path = tmp_path / "ann.csv"
        path.write_text("id,group\n101,A\n102,B\n")
        ann = load_annotations(str(path))
        assert ann["id"].tolist() == ["101", "102"]

    def test_load_annotations_renames_id_column(self, tmp_path):
        path = tmp_path / "ann.csv"
        path.write_text("sample,group\nS1,A\n")
        ann = load_annotations(str(path), id_column="sample")
        assert "id" in ann.columns
        assert ann.loc[0, "id"] == "S1"

    def test_load_annotations_missing_id(self, tmp_path):
        path = tmp_path / "ann.csv"
        path.write_text("sample,group\nS1,A\n")
        with pytest.raises(AnnotationError, match="'id'"):
            load_annotations(str(path))


class TestRequireAnnotations:
    def test_none_raises(self):
        with pytest.raises(AnnotationError, match="must be supplied"):
            require_annotations(None)

    def test_missing_id_column_raises(self):
        with pytest.raises(AnnotationError, match="'id' column"):
            require_annotations(pd.DataFrame({"sample": ["S1"]}))


class TestJoinAnnotations:
    @pytest.fixture
    def layout(self):
        return pd.DataFrame(
            {"X1": [1.0, 2.0, 3.0], "X2": [4.0, 5.0, 6.0]},
            index=pd.Index(["A", "B", "C"], name="id"),
        )

    def test_inner_join_keeps_shared_ids(self, layout):
        ann = pd.DataFrame({"id": ["B", "C", "D"], "group": ["g1", "g2", "g3"]})
        joined = join_annotations(layout, ann)
        assert joined["id"].tolist() == ["B", "C"]

    def test_rows_paired_by_id(self, layout):
        ann = pd.DataFrame({"id": ["C", "D", "B"], "group": ["gc", "gd", "gb"]})
        joined = join_annotations(layout, ann).set_index("id")
        assert joined.loc["B", "X1"] == 2.0
        assert joined.loc["B", "group"] == "gb"
        assert joined.loc["C", "X2"] == 6.0
        assert joined.loc["C", "group"] == "gc"

    def test_order_follows_embedding(self, layout):
        ann = pd.DataFrame({"id": ["C", "A", "B"], "group": [1, 2, 3]})
        joined = join_annotations(layout, ann)
        assert joined["id"].tolist() == ["A", "B", "C"]

    def test_empty_join_raises(self, layout):
        ann = pd.DataFrame({"id": ["X", "Y"], "group": [1, 2]})
        with pytest.raises(AnnotationError, match="No sample IDs"):
            join_annotations(layout, ann)
