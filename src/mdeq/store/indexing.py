"""
Store Indexing: Row-major arithmetic for 1-based dense positions.

Converts an N-dimensional position tuple (1-based, first dimension
slowest) to a flat offset into the backing array and back, validating
arity and extents on the way.
"""

from itertools import product

import numpy as np

from mdeq.errors import ArityMismatch, IndexOutOfRange


class PositionIndex:
    """
    Positional indexing over a fixed shape.

    Parameters
    ----------
    shape : tuple of int
        Cardinality of each dimension.

    Examples
    --------
    >>> idx = PositionIndex((2, 3))
    >>> idx.offset((1, 1))
    0
    >>> idx.offset((2, 3))
    5
    >>> idx.unravel(4)
    (2, 2)
    """

    def __init__(self, shape):
        self.shape = tuple(int(s) for s in shape)
        self.ndim = len(self.shape)
        # Row-major strides, last dimension fastest
        strides = []
        step = 1
        for s in reversed(self.shape):
            strides.append(step)
            step *= s
        self.strides = tuple(reversed(strides))
        self.total = step

    def check(self, index):
        """
        Validate `index` and return its 0-based tuple.

        Raises
        ------
        ArityMismatch
            Wrong number of components.
        TypeError
            A component is not an integer.
        IndexOutOfRange
            A component is outside [1, cardinality].
        """
        if len(index) != self.ndim:
            raise ArityMismatch(index, self.ndim)
        zero_based = []
        for d, (i, extent) in enumerate(zip(index, self.shape)):
            if isinstance(i, bool) or not isinstance(i, (int, np.integer)):
                raise TypeError(
                    f"Dense positions must be integers, got {i!r} "
                    f"in dimension {d}")
            if not 1 <= i <= extent:
                raise IndexOutOfRange(index, d, extent)
            zero_based.append(int(i) - 1)
        return tuple(zero_based)

    def offset(self, index):
        """Flat row-major offset of a 1-based position tuple."""
        return sum(i * s for i, s in zip(self.check(index), self.strides))

    def unravel(self, offset):
        """1-based position tuple of a flat offset."""
        if not 0 <= offset < self.total:
            raise IndexError(f"Offset {offset} outside [0, {self.total})")
        return tuple(int(i) + 1 for i in np.unravel_index(offset, self.shape))

    def offsets(self, codes):
        """
        Vectorized flat offsets.

        Parameters
        ----------
        codes : list of numpy.ndarray of int
            0-based positions, one array per dimension, all the same length.

        Returns
        -------
        numpy.ndarray of int64
        """
        if not codes:
            return np.zeros(0, dtype=np.int64)
        flat = np.zeros(len(codes[0]), dtype=np.int64)
        for c, s in zip(codes, self.strides):
            flat += np.asarray(c, dtype=np.int64) * s
        return flat

    def positions(self):
        """Iterate every 1-based position tuple in row-major order."""
        return product(*(range(1, s + 1) for s in self.shape))

    def __repr__(self):
        return f"PositionIndex(shape={self.shape}, cells={self.total:,})"
