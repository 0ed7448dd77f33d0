"""
Dense Store: Variables backed by a fixed-shape numpy array.

Cells are addressed by 1-based positions, first dimension slowest.
Every cell starts out holding the `unset` sentinel (NaN by default);
get() on such a cell raises ValueUnset.

The storage dtype follows the value type where the sentinel fits in it
(float values with a NaN sentinel -> float64) and falls back to object
arrays otherwise (strings, None sentinels).
"""

import numpy as np

from mdeq.dimensions import Dimension, ordinal_dimensions
from mdeq.errors import ArityMismatch, KeyNotFound, NotFound, ValueUnset
from mdeq.store.indexing import PositionIndex
from mdeq.store.sparse import as_index


def _is_nan(x):
    return isinstance(x, (float, np.floating)) and bool(np.isnan(x))


def is_sentinel(value, sentinel):
    """True if `value` is the sentinel (NaN matches NaN)."""
    if value is sentinel:
        return True
    if sentinel is None or value is None:
        return False
    if _is_nan(sentinel):
        return _is_nan(value)
    result = value == sentinel
    return isinstance(result, (bool, np.bool_)) and bool(result)


def storage_dtype(value_type, *sentinels):
    """numpy dtype able to hold `value_type` values and every sentinel."""
    try:
        dtype = np.dtype(value_type)
    except TypeError:
        return np.dtype(object)
    if dtype.kind not in "biuf":
        return np.dtype(object)
    for sentinel in sentinels:
        if sentinel is None:
            return np.dtype(object)
        if isinstance(sentinel, (bool, np.bool_)):
            if dtype.kind != "b":
                return np.dtype(object)
        elif isinstance(sentinel, (int, float, np.integer, np.floating)):
            dtype = np.result_type(dtype, np.asarray(sentinel).dtype)
        else:
            return np.dtype(object)
    return dtype


def _native(v):
    return v.item() if isinstance(v, np.generic) else v


class DenseStore:
    """
    A multi-dimensional variable stored as a positional numpy array.

    Parameters
    ----------
    dimensions : sequence of Dimension or tuple of int
        Dimension descriptors, or a plain shape for ordinal dimensions.
    value_type : type or numpy.dtype
        Semantic type of the stored values.
    unset : object
        Sentinel filling every cell at creation. Default NaN.
    fill_values : sequence, optional
        Other non-domain values the array must be able to hold, such as
        a loader's missing value when it differs from `unset`.

    Examples
    --------
    >>> demand = DenseStore((3, 2))
    >>> demand.size()
    (3, 2)
    >>> demand[2, 1] = 4.5
    >>> demand.get((2, 1))
    4.5
    >>> demand.get_safe((1, 1), 0.0)
    0.0
    """

    def __init__(self, dimensions, value_type=float, unset=np.nan,
                 fill_values=()):
        dimensions = list(dimensions)
        if all(isinstance(d, (int, np.integer)) for d in dimensions):
            dimensions = ordinal_dimensions(dimensions)
        self.dimensions = [d.copy() for d in dimensions]
        self.value_type = value_type
        self.unset = unset
        self._index = PositionIndex(d.cardinality for d in self.dimensions)
        self._data = np.full(self._index.shape, unset,
                             dtype=storage_dtype(value_type, unset, *fill_values))

    @property
    def ndim(self):
        return len(self.dimensions)

    @property
    def names(self):
        return [d.name for d in self.dimensions]

    @property
    def data(self):
        """Read-only view of the backing array."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def get(self, index):
        """Value at 1-based `index`. Raises ValueUnset on unset cells."""
        index = as_index(index)
        value = self._data[self._index.check(index)]
        if is_sentinel(value, self.unset):
            raise ValueUnset(f"Cell {index!r} is unset")
        return _native(value)

    def get_safe(self, index, default=None):
        """Value at `index`, or `default` if the cell is unset."""
        try:
            return self.get(index)
        except NotFound:
            return default

    def set(self, index, value):
        """Write the cell at 1-based `index`."""
        self._data[self._index.check(as_index(index))] = value

    def put_flat(self, offsets, values):
        """Write cells by flat row-major offsets (bulk loading)."""
        self._data.reshape(-1)[np.asarray(offsets, dtype=np.int64)] = values

    def is_unset(self, index):
        return is_sentinel(self._data[self._index.check(as_index(index))],
                           self.unset)

    def size(self):
        return self._index.shape

    def positions(self, labels):
        """
        Map a tuple of dimension labels to 1-based positions.

        Raises
        ------
        KeyNotFound
            If a label is not part of its dimension.
        """
        labels = as_index(labels)
        if len(labels) != self.ndim:
            raise ArityMismatch(labels, self.ndim)
        try:
            return tuple(d.position(l) for d, l in zip(self.dimensions, labels))
        except (KeyError, TypeError):
            raise KeyNotFound(f"Labels {labels!r} not in store dimensions") from None

    def labels(self, index):
        """Map 1-based positions back to dimension labels."""
        index = as_index(index)
        self._index.check(index)
        return tuple(d.label(i) for d, i in zip(self.dimensions, index))

    def unset_mask(self):
        """Boolean array, True where the cell holds the sentinel."""
        if self._data.dtype != object:
            if _is_nan(self.unset):
                return np.isnan(self._data)
            return self._data == self.unset
        flags = np.fromiter(
            (is_sentinel(v, self.unset) for v in self._data.flat),
            dtype=bool, count=self._data.size)
        return flags.reshape(self._data.shape)

    def items(self):
        """(positions, value) for every set cell, row-major."""
        mask = self.unset_mask()
        for offset in np.flatnonzero(~mask.ravel()):
            pos = self._index.unravel(int(offset))
            yield pos, _native(self._data.flat[offset])

    def keys(self):
        return (pos for pos, _ in self.items())

    def copy(self):
        other = DenseStore(self.dimensions, value_type=self.value_type,
                           unset=self.unset)
        other._data = self._data.copy()
        return other

    def __getitem__(self, index):
        return self.get(index)

    def __setitem__(self, index, value):
        self.set(index, value)

    def __contains__(self, index):
        return not self.is_unset(index)

    def __len__(self):
        return int(self._data.size - np.count_nonzero(self.unset_mask()))

    def __iter__(self):
        return self.keys()

    def __repr__(self):
        shape = " x ".join(str(s) for s in self.size())
        return (f"DenseStore(dims={self.names}, size={shape}, "
                f"dtype={self._data.dtype}, set={len(self):,})")
