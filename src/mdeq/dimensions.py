"""
MDEQ Dimensions: Named axes of a multi-dimensional variable.

A dimension is either labelled (an ordered list of admissible values,
e.g. regions or products) or ordinal (plain positions 1..size).
Catalogs are built three ways:

  - declare_dimensions(names, types)  -> empty labelled axes
  - ordinal_dimensions(size)          -> integer ranges
  - infer_dimensions(table, cols)     -> distinct values per column,
                                         in first-occurrence order

Usage:
    dims = infer_dimensions(df, ["reg", "prod"])
    [d.cardinality for d in dims]   # (2, 3)
"""

import pandas as pd


def as_frame(table):
    """Return `table` as a pandas DataFrame (no copy if it already is one)."""
    if isinstance(table, pd.DataFrame):
        return table
    return pd.DataFrame(table)


class Dimension:
    """
    One axis of a variable.

    Parameters
    ----------
    name : str
        Dimension name (column name when loaded from a table).
    values : sequence, optional
        Ordered labels. Omit for an ordinal dimension.
    size : int, optional
        Extent of an ordinal dimension (positions 1..size).
    dtype : type or numpy.dtype, optional
        Declared type of the labels. Informational only.

    Examples
    --------
    >>> reg = Dimension("reg", ["us", "eu"])
    >>> reg.position("eu")
    2
    >>> Dimension("year", size=5).cardinality
    5
    """

    def __init__(self, name, values=None, size=None, dtype=None):
        if values is not None and size is not None:
            raise ValueError("Give either values or size, not both")
        self.name = name
        self.dtype = dtype
        if values is None and size is not None:
            if size < 0:
                raise ValueError(f"Negative size {size} for dimension {name!r}")
            self._labels = None
            self._size = int(size)
            self._positions = None
        else:
            self._labels = []
            self._positions = {}
            for v in (values if values is not None else ()):
                self.extend(v)
            self._size = None

    @property
    def is_ordinal(self):
        return self._labels is None

    @property
    def values(self):
        """Labels as a tuple (positions 1..size for ordinal dimensions)."""
        if self.is_ordinal:
            return tuple(range(1, self._size + 1))
        return tuple(self._labels)

    @property
    def cardinality(self):
        if self.is_ordinal:
            return self._size
        return len(self._labels)

    def extend(self, label):
        """Append `label` if unseen. Returns its 1-based position."""
        if self.is_ordinal:
            raise TypeError(f"Ordinal dimension {self.name!r} has a fixed extent")
        pos = self._positions.get(label)
        if pos is None:
            self._labels.append(label)
            pos = len(self._labels)
            self._positions[label] = pos
        return pos

    def position(self, label):
        """1-based position of `label`."""
        if self.is_ordinal:
            if isinstance(label, bool) or not 1 <= label <= self._size:
                raise KeyError(label)
            return int(label)
        return self._positions[label]

    def label(self, position):
        """Label at 1-based `position`."""
        if not 1 <= position <= self.cardinality:
            raise IndexError(
                f"Position {position} outside [1, {self.cardinality}] "
                f"for dimension {self.name!r}")
        if self.is_ordinal:
            return int(position)
        return self._labels[position - 1]

    def copy(self):
        if self.is_ordinal:
            return Dimension(self.name, size=self._size, dtype=self.dtype)
        return Dimension(self.name, values=self._labels, dtype=self.dtype)

    def __eq__(self, other):
        if not isinstance(other, Dimension):
            return NotImplemented
        return (self.name == other.name
                and self.is_ordinal == other.is_ordinal
                and self.values == other.values)

    def __len__(self):
        return self.cardinality

    def __repr__(self):
        if self.is_ordinal:
            return f"Dimension({self.name!r}, size={self._size})"
        return f"Dimension({self.name!r}, {self._labels!r})"


def declare_dimensions(names, types=None):
    """
    Declare empty labelled dimensions from names and label types.

    Parameters
    ----------
    names : sequence of str
    types : sequence of type, optional
        One per name.

    Returns
    -------
    list of Dimension
    """
    names = list(names)
    if types is None:
        types = [None] * len(names)
    types = list(types)
    if len(types) != len(names):
        raise ValueError(
            f"{len(names)} dimension names but {len(types)} dimension types")
    return [Dimension(n, values=(), dtype=t) for n, t in zip(names, types)]


def ordinal_dimensions(size, names=None):
    """Ordinal dimensions for a shape tuple, named dim1, dim2, ... by default."""
    size = tuple(int(s) for s in size)
    if names is None:
        names = [f"dim{k + 1}" for k in range(len(size))]
    names = list(names)
    if len(names) != len(size):
        raise ValueError(f"{len(names)} names for a {len(size)}-d shape")
    return [Dimension(n, size=s) for n, s in zip(names, size)]


def infer_dimensions(table, dim_cols):
    """
    Infer dimension labels from the columns of a long-format table.

    Each dimension holds the distinct values of its column, in order of
    first occurrence, so identical tables always give identical catalogs.

    Parameters
    ----------
    table : pandas.DataFrame or DataFrame-like
    dim_cols : sequence of str
        Names of the dimension columns, in dimension order.

    Returns
    -------
    list of Dimension

    Raises
    ------
    KeyError
        If a column is not in the table.
    ValueError
        If a dimension column holds missing values.
    """
    table = as_frame(table)
    dims = []
    for col in dim_cols:
        column = table[col]
        if column.isna().any():
            raise ValueError(f"Dimension column {col!r} contains missing values")
        dims.append(Dimension(
            col,
            values=column.drop_duplicates().tolist(),
            dtype=column.dtype,
        ))
    return dims
