import numpy as np
import pandas as pd
import pytest

from sc_flow.core.exceptions import GenomeMismatchError, UnknownGeneError
from sc_flow.core.expression_matrix import ExpressionMatrix


def _series(values, genes=("g1", "g2", "g3")):
    return pd.Series(values, index=list(genes), dtype=float)


def _make_matrix():
    """
    Three genes, two samples:
    A: g1=1, g2=2, g3=3
    B: g1=4, g2=5, g3=6
    """
    m = ExpressionMatrix()
    m.add_cell("A", _series([1, 2, 3]))
    m.add_cell("B", _series([4, 5, 6]))
    return m


def test_first_sample_establishes_genome_and_matrix_is_gene_major():
    m = _make_matrix()

    assert m.genome_order == ("g1", "g2", "g3")

    frame = m.as_matrix()
    assert list(frame.index) == ["g1", "g2", "g3"]
    assert frame.index.name == "gene_id"
    assert list(frame.columns) == ["A", "B"]
    assert frame.loc["g2"].tolist() == [2.0, 5.0]
    assert frame.shape == (m.n_genes, m.n_samples)


@pytest.mark.parametrize(
    "genes, position, expected, found",
    [
        (("g2", "g1", "g3"), 0, "g1", "g2"),
        (("g1", "g3", "g2"), 1, "g2", "g3"),
        (("g1", "g2"), 2, "g3", None),
        (("g1", "g2", "g3", "g4"), 3, None, "g4"),
    ],
)
def test_genome_mismatch_raises_and_leaves_matrix_unchanged(genes, position, expected, found):
    m = _make_matrix()
    before = m.as_matrix().copy()

    with pytest.raises(GenomeMismatchError) as exc_info:
        m.add_cell("C", _series(range(len(genes)), genes=genes))

    err = exc_info.value
    assert err.sample_id == "C"
    assert err.position == position
    assert err.expected == expected
    assert err.found == found

    assert m.genome_order == ("g1", "g2", "g3")
    assert m.sample_ids == ["A", "B"]
    pd.testing.assert_frame_equal(m.as_matrix(), before)


def test_mismatch_on_replacement_keeps_previous_values():
    m = _make_matrix()

    with pytest.raises(GenomeMismatchError):
        m.add_cell("A", _series([9, 9, 9], genes=("x", "y", "z")))

    assert m.get_gene_row("g1") == {"A": 1.0, "B": 4.0}


def test_remove_cell_keeps_genome_and_readding_restores_values():
    m = _make_matrix()
    m.add_cell("C", _series([7, 8, 9]))
    original = m.as_matrix().copy()

    m.remove_cell("A")
    frame = m.as_matrix()
    assert list(frame.columns) == ["B", "C"]
    assert m.genome_order == ("g1", "g2", "g3")

    m.add_cell("A", _series([1, 2, 3]))
    frame = m.as_matrix()
    assert list(frame.columns) == ["B", "C", "A"]
    pd.testing.assert_frame_equal(frame[["A", "B", "C"]], original)


def test_removing_every_sample_keeps_genome_order():
    m = _make_matrix()
    m.remove_cell("A")
    m.remove_cell("B")

    assert m.n_samples == 0
    assert m.genome_order == ("g1", "g2", "g3")

    with pytest.raises(GenomeMismatchError):
        m.add_cell("D", _series([1, 2], genes=("g1", "g2")))


def test_remove_missing_sample_is_noop():
    m = _make_matrix()
    m.remove_cell("nope")
    assert m.sample_ids == ["A", "B"]


def test_readding_existing_sample_replaces_values_in_place():
    m = _make_matrix()
    m.add_cell("A", _series([10, 20, 30]))

    frame = m.as_matrix()
    assert list(frame.columns) == ["A", "B"]
    assert frame["A"].tolist() == [10.0, 20.0, 30.0]


def test_reset_clears_samples_and_genome():
    m = _make_matrix()
    m.reset()

    assert m.genome_order is None
    assert len(m) == 0
    assert m.as_matrix().empty

    m.add_cell("X", _series([1, 2], genes=("a", "b")))
    assert m.genome_order == ("a", "b")


def test_get_gene_row():
    m = _make_matrix()

    assert m.get_gene_row("g3") == {"A": 3.0, "B": 6.0}

    with pytest.raises(UnknownGeneError):
        m.get_gene_row("g999")

    # Also a KeyError for callers using dict-style handling
    with pytest.raises(KeyError):
        m.get_gene_row("g999")


def test_get_gene_row_without_genome_raises():
    with pytest.raises(UnknownGeneError):
        ExpressionMatrix().get_gene_row("g1")


def test_as_matrix_with_genome_but_no_samples():
    m = _make_matrix()
    m.remove_cell("A")
    m.remove_cell("B")

    frame = m.as_matrix()
    assert list(frame.index) == ["g1", "g2", "g3"]
    assert frame.shape[1] == 0


def test_stored_vectors_are_float_and_read_only():
    m = ExpressionMatrix()
    m.add_cell("A", pd.Series([1, 2], index=["g1", "g2"]))

    frame = m.as_matrix()
    assert frame["A"].dtype == np.float64
    assert "A" in m
    assert "B" not in m


def test_to_anndata_has_samples_as_observations():
    m = _make_matrix()
    adata = m.to_anndata()

    assert adata.n_obs == 2
    assert adata.n_vars == 3
    assert list(adata.obs_names) == ["A", "B"]
    assert list(adata.var_names) == ["g1", "g2", "g3"]
    assert float(adata.X[1, 2]) == 6.0


def test_reorder_moves_listed_samples_to_the_end_in_order():
    m = _make_matrix()
    m.add_cell("C", _series([7, 8, 9]))

    m.reorder(["C", "missing", "A"])

    assert m.sample_ids == ["B", "C", "A"]
    assert m.get_gene_row("g1") == {"B": 4.0, "C": 7.0, "A": 1.0}
    assert m.genome_order == ("g1", "g2", "g3")


def test_to_anndata_restricted_to_genes_keeps_genome_order():
    m = _make_matrix()

    adata = m.to_anndata(gene_ids=["g3", "g1"])

    assert list(adata.var_names) == ["g1", "g3"]
    assert adata.X[:, 1].tolist() == [3.0, 6.0]
