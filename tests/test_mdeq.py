"""Tests for mdeq stores, dimensions and indexing."""
import numpy as np
import pytest

import mdeq
from mdeq import (
    Dimension, SparseStore, DenseStore, define_vars, define_arrays, get_safe,
    ArityMismatch, IndexOutOfRange, NotFound, KeyNotFound, ValueUnset,
)
from mdeq.store import PositionIndex
from mdeq.store.dense import storage_dtype


def test_version():
    assert mdeq.__version__ == "0.3.0"


# === Dimensions ===

def test_dimension_labels():
    reg = Dimension("reg", ["us", "eu"])
    assert reg.cardinality == 2
    assert reg.position("eu") == 2
    assert reg.label(1) == "us"
    assert not reg.is_ordinal


def test_dimension_ordinal():
    year = Dimension("year", size=4)
    assert year.is_ordinal
    assert year.values == (1, 2, 3, 4)
    assert year.position(3) == 3
    with pytest.raises(KeyError):
        year.position(5)
    with pytest.raises(TypeError):
        year.extend(5)


def test_dimension_extend_keeps_first_occurrence():
    d = Dimension("prod")
    for label in ["banana", "apples", "banana", "juice"]:
        d.extend(label)
    assert d.values == ("banana", "apples", "juice")


def test_infer_dimensions_first_occurrence():
    table = {"reg": ["eu", "us", "eu", "us"],
             "prod": ["juice", "banana", "banana", "apples"],
             "value": [1.0, 2.0, 3.0, 4.0]}
    dims = mdeq.infer_dimensions(table, ["reg", "prod"])
    assert [d.name for d in dims] == ["reg", "prod"]
    assert dims[0].values == ("eu", "us")
    assert dims[1].values == ("juice", "banana", "apples")
    # Deterministic across calls
    assert dims == mdeq.infer_dimensions(table, ["reg", "prod"])


def test_infer_dimensions_errors():
    table = {"reg": ["us", None], "value": [1.0, 2.0]}
    with pytest.raises(ValueError):
        mdeq.infer_dimensions(table, ["reg"])
    with pytest.raises(KeyError):
        mdeq.infer_dimensions(table, ["nope"])


def test_declare_dimensions_length_mismatch():
    with pytest.raises(ValueError):
        mdeq.declare_dimensions(["a", "b"], [str])


# === PositionIndex ===

def test_position_index_row_major():
    idx = PositionIndex((2, 3))
    assert idx.total == 6
    assert idx.offset((1, 1)) == 0
    assert idx.offset((1, 3)) == 2
    assert idx.offset((2, 1)) == 3
    assert idx.unravel(5) == (2, 3)
    assert list(idx.positions()) == [
        (1, 1), (1, 2), (1, 3), (2, 1), (2, 2), (2, 3)]


def test_position_index_checks():
    idx = PositionIndex((2, 3))
    with pytest.raises(ArityMismatch):
        idx.check((1,))
    with pytest.raises(IndexOutOfRange):
        idx.check((0, 1))
    with pytest.raises(IndexOutOfRange):
        idx.check((1, 4))
    with pytest.raises(TypeError):
        idx.check((1, "a"))
    assert idx.check((np.int64(2), 3)) == (1, 2)


def test_position_index_vectorized_offsets():
    idx = PositionIndex((2, 3))
    flat = idx.offsets([np.array([0, 1, 1]), np.array([2, 0, 2])])
    assert flat.tolist() == [2, 3, 5]


# === SparseStore ===

def test_sparse_round_trip():
    price = SparseStore(["region", "item", "class"])
    price["US", "apple", 1] = 3.2
    price.set(("EU", "pear", 2), 1.5)
    assert price["US", "apple", 1] == 3.2
    assert price.get(("EU", "pear", 2)) == 1.5
    assert len(price) == 2


def test_sparse_upsert():
    s = SparseStore(["a", "b"])
    s["x", 1] = 1.0
    s["x", 1] = 2.0
    assert len(s) == 1
    assert s["x", 1] == 2.0


def test_sparse_not_found():
    s = SparseStore(["a", "b"])
    s["x", 1] = 1.0
    with pytest.raises(KeyNotFound):
        s.get(("y", 1))
    with pytest.raises(NotFound):
        s["y", 1]
    with pytest.raises(KeyError):
        s["y", 1]
    assert s.get_safe(("y", 1), 0.0) == 0.0
    assert s.get_safe(("y", 1)) is None
    assert get_safe(s, ("x", 1), 0.0) == 1.0


def test_sparse_arity_mismatch():
    s = SparseStore(["a", "b"])
    with pytest.raises(ArityMismatch):
        s.set(("x",), 1.0)
    with pytest.raises(ArityMismatch):
        s.get(("x", 1, 2))
    # get_safe only absorbs NotFound
    with pytest.raises(ArityMismatch):
        s.get_safe(("x",), 0.0)


def test_sparse_missing_value_is_present():
    s = SparseStore(["a"])
    s["x"] = np.nan
    assert ("x",) in s
    assert np.isnan(s["x"])
    assert s.get_safe("y", -1.0) == -1.0


def test_sparse_size_grows_with_labels():
    s = SparseStore([Dimension("reg", ["us", "eu"]), Dimension("prod")])
    assert s.size() == (2, 0)
    s["cn", "rice"] = 1.0
    s["us", "rice"] = 2.0
    assert s.size() == (3, 1)
    assert s.dimensions[0].values == ("us", "eu", "cn")


def test_sparse_store_owns_dimensions():
    reg = Dimension("reg", ["us"])
    s = SparseStore([reg])
    s["eu"] = 1.0
    assert reg.values == ("us",)


def test_sparse_ordinal_dimension_range():
    s = SparseStore([Dimension("year", size=3)])
    s[2] = 1.0
    with pytest.raises(IndexOutOfRange):
        s[4] = 1.0


def test_sparse_failed_set_leaves_catalogs_unchanged():
    s = SparseStore([Dimension("reg"), Dimension("year", size=3)])
    with pytest.raises(IndexOutOfRange):
        s["cn", 9] = 1.0
    assert s.size() == (0, 3)
    assert len(s) == 0
    assert s.dimensions[0].values == ()


class TestSparseSelect:
    @pytest.fixture
    def price(self):
        s = SparseStore(["region", "item"])
        s["US", "apple"] = 3.2
        s["US", "pear"] = 1.1
        s["EU", "apple"] = 2.5
        return s

    def test_wildcard_keeps_free_dimension(self, price):
        us = price["US", :]
        assert isinstance(us, SparseStore)
        assert us.names == ["item"]
        assert dict(us.items()) == {("apple",): 3.2, ("pear",): 1.1}
        assert us["pear"] == 1.1

    def test_all_wildcards_copy_everything(self, price):
        everything = price[:, :]
        assert len(everything) == 3
        assert everything.size() == price.size()
        everything["CN", "rice"] = 1.0
        assert ("CN", "rice") not in price

    def test_no_match_is_empty(self, price):
        apples = price[:, "apple"]
        assert dict(apples.items()) == {("US",): 3.2, ("EU",): 2.5}
        assert len(price["CN", :]) == 0

    def test_get_safe_with_wildcard(self, price):
        assert len(price.get_safe(("EU", slice(None)), 0.0)) == 1
        assert len(get_safe(price, (slice(None), "pear"), 0.0)) == 1

    def test_bounded_slice_rejected(self, price):
        with pytest.raises(TypeError):
            price["US", 0:2]

    def test_set_with_wildcard_rejected(self, price):
        with pytest.raises(TypeError):
            price["US", :] = 0.0
        assert len(price) == 3


def test_sparse_copy_is_independent():
    s = SparseStore(["a"])
    s["x"] = 1.0
    c = s.copy()
    c["x"] = 2.0
    assert s["x"] == 1.0


# === DenseStore ===

def test_dense_round_trip():
    d = DenseStore((3, 2, 5))
    d[2, 1, 5] = 2
    assert d[2, 1, 5] + 1 == 3
    assert d.size() == (3, 2, 5)
    assert len(d) == 1


def test_dense_unset():
    d = DenseStore((2, 2))
    with pytest.raises(ValueUnset):
        d.get((1, 1))
    with pytest.raises(NotFound):
        d[1, 1]
    assert d.get_safe((1, 1), 0.0) == 0.0
    assert d.is_unset((1, 1))
    d[1, 1] = 0.0
    assert d.get_safe((1, 1), -1.0) == 0.0
    assert (1, 1) in d


def test_dense_errors():
    d = DenseStore((2, 3))
    with pytest.raises(IndexOutOfRange):
        d.set((3, 1), 1.0)
    with pytest.raises(IndexOutOfRange):
        d.set((1, 0), 1.0)
    with pytest.raises(ArityMismatch):
        d.set((1, 1, 1), 1.0)
    with pytest.raises(IndexOutOfRange):
        d.get_safe((5, 1), 0.0)


def test_dense_object_sentinel():
    d = DenseStore((2,), value_type=str, unset=None)
    assert d.data.dtype == object
    d[1] = "apple"
    assert d[1] == "apple"
    assert d.get_safe(2, "none") == "none"


def test_dense_int_sentinel():
    d = DenseStore((2, 2), value_type=int, unset=-1)
    assert d.data.dtype == np.int64
    d[1, 2] = 7
    assert d[1, 2] == 7
    assert isinstance(d[1, 2], int)
    assert len(d) == 1


def test_dense_fill_values_widen_dtype():
    assert storage_dtype(int, -1) == np.int64
    assert storage_dtype(int, -1, np.nan) == np.float64
    assert storage_dtype(float, np.nan, None) == object
    d = DenseStore((2,), value_type=int, unset=-1, fill_values=(np.nan,))
    d[1] = np.nan
    assert np.isnan(d[1])
    assert d.get_safe(2, 0) == 0


def test_dense_labels_and_positions():
    d = DenseStore([Dimension("reg", ["us", "eu"]),
                    Dimension("prod", ["banana", "apples", "juice"])])
    assert d.positions(("eu", "juice")) == (2, 3)
    assert d.labels((1, 2)) == ("us", "apples")
    with pytest.raises(KeyNotFound):
        d.positions(("cn", "juice"))


def test_dense_data_is_read_only():
    d = DenseStore((2,))
    with pytest.raises(ValueError):
        d.data[0] = 1.0


def test_dense_items_row_major():
    d = DenseStore((2, 2))
    d[2, 1] = 3.0
    d[1, 2] = 2.0
    assert list(d.items()) == [((1, 2), 2.0), ((2, 1), 3.0)]


# === define_vars / define_arrays ===

def test_define_vars():
    exp, consumption = define_vars(["product", "regions", "years"],
                                   [str, str, int], n=2)
    exp["banana", "Canada", 2010] = 2
    assert exp["banana", "Canada", 2010] + 1 == 3
    assert len(consumption) == 0


def test_define_vars_are_independent():
    a, b, c = define_vars(["x"], n=3)
    a["k"] = 1.0
    assert len(b) == 0 and len(c) == 0
    assert b.size() == (0,)


def test_define_arrays():
    exp2, consumption2 = define_arrays((3, 2, 5), n=2)
    consumption2[2, 1, 5] = 2
    assert consumption2[2, 1, 5] + 1 == 3
    assert exp2.is_unset((2, 1, 5))
    assert np.isnan(exp2.data).all()


def test_define_arrays_single():
    d = define_arrays((4,), missing_value=0.0, names=["t"])
    assert isinstance(d, DenseStore)
    assert d.names == ["t"]
    assert d.get_safe(1, -1.0) == -1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
