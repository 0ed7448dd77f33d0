"""
Sparse Store: Variables keyed by tuples of dimension labels.

Only populated combinations take memory. A key that was never written
has no value (get() raises KeyNotFound); a key written with a missing
value is present and returns that value.
"""

from mdeq.dimensions import Dimension
from mdeq.errors import ArityMismatch, IndexOutOfRange, KeyNotFound, NotFound


def as_index(index):
    """Normalize a store index to a tuple (scalars are 1-d indices)."""
    if isinstance(index, tuple):
        return index
    if isinstance(index, list):
        return tuple(index)
    return (index,)


class SparseStore:
    """
    A multi-dimensional variable stored as a dict of label tuples.

    Parameters
    ----------
    dimensions : sequence of Dimension or str
        Dimension descriptors in index order. Plain strings declare empty
        labelled dimensions. The store keeps its own copies.
    value_type : type
        Semantic type of the stored values.

    Examples
    --------
    >>> price = SparseStore(["region", "item"])
    >>> price["US", "apple"] = 3.2
    >>> price.get(("US", "apple"))
    3.2
    >>> price.get_safe(("EU", "apple"), 0.0)
    0.0
    """

    def __init__(self, dimensions, value_type=float):
        self.dimensions = [
            d.copy() if isinstance(d, Dimension) else Dimension(d, values=())
            for d in dimensions
        ]
        self.value_type = value_type
        self._data = {}

    @property
    def ndim(self):
        return len(self.dimensions)

    @property
    def names(self):
        return [d.name for d in self.dimensions]

    def _key(self, index):
        key = as_index(index)
        if len(key) != self.ndim:
            raise ArityMismatch(key, self.ndim)
        return key

    def get(self, index):
        """
        Value at `index`. Raises KeyNotFound if the key was never set.

        A `:` component (slice(None)) turns the lookup into select().
        """
        key = self._key(index)
        if any(isinstance(c, slice) for c in key):
            return self.select(key)
        try:
            return self._data[key]
        except KeyError:
            raise KeyNotFound(f"No value for key {key!r}") from None

    def select(self, index):
        """
        Entries matching the fixed components of `index`.

        Parameters
        ----------
        index : tuple
            One component per dimension: a label, or `:` to keep the
            dimension.

        Returns
        -------
        SparseStore
            Store over the `:` dimensions only, keyed by their labels.
            Empty if nothing matches.

        Examples
        --------
        >>> price.select(("US", slice(None)))   # price["US", :]
        SparseStore(dims=['item'], size=1, entries=1)
        """
        key = self._key(index)
        free = []
        for d, c in enumerate(key):
            if isinstance(c, slice):
                if c != slice(None):
                    raise TypeError(f"Only ':' slices are supported, got {c!r}")
                free.append(d)
        fixed = [(d, c) for d, c in enumerate(key) if d not in free]

        result = SparseStore([self.dimensions[d] for d in free],
                             value_type=self.value_type)
        for k, v in self._data.items():
            if all(k[d] == c for d, c in fixed):
                result._data[tuple(k[d] for d in free)] = v
        return result

    def get_safe(self, index, default=None):
        """Value at `index`, or `default` if the key was never set."""
        try:
            return self.get(index)
        except NotFound:
            return default

    def set(self, index, value):
        """Insert or overwrite the value at `index`."""
        key = self._key(index)
        if key not in self._data:
            # Validate every component before any catalog grows
            for d, (label, dim) in enumerate(zip(key, self.dimensions)):
                if isinstance(label, slice):
                    raise TypeError(f"Cannot set a ':' component in {key!r}")
                if dim.is_ordinal:
                    try:
                        dim.position(label)
                    except (KeyError, TypeError):
                        raise IndexOutOfRange(key, d, dim.cardinality) from None
            for label, dim in zip(key, self.dimensions):
                if not dim.is_ordinal:
                    dim.extend(label)
        self._data[key] = value

    def size(self):
        """Cardinality of each dimension (declared and observed labels)."""
        return tuple(d.cardinality for d in self.dimensions)

    def keys(self):
        return self._data.keys()

    def items(self):
        return self._data.items()

    def copy(self):
        other = SparseStore(self.dimensions, value_type=self.value_type)
        other._data = dict(self._data)
        return other

    def __getitem__(self, index):
        return self.get(index)

    def __setitem__(self, index, value):
        self.set(index, value)

    def __contains__(self, index):
        return self._key(index) in self._data

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __repr__(self):
        shape = " x ".join(str(s) for s in self.size())
        return (f"SparseStore(dims={self.names}, size={shape}, "
                f"entries={len(self._data):,})")
