"""
MDEQ Errors: Failure kinds raised by stores, loaders and equations.

  - ArityMismatch    : index tuple length != number of dimensions
  - IndexOutOfRange  : dense position outside [1, cardinality]
  - NotFound         : sparse key absent (KeyNotFound) or dense cell
                       unset (ValueUnset); recoverable with get_safe()
  - DuplicateKeyDetected : dense load found >1 row for one cell
                       (only raised with on_duplicate="raise")

Duplicate rows are reported by default with DuplicateKeyWarning.
"""


class StoreError(Exception):
    """Base class for all mdeq errors."""
    pass


class ArityMismatch(StoreError, ValueError):
    """Raised when an index tuple has the wrong number of components."""

    def __init__(self, index, ndims):
        self.index = index
        self.ndims = ndims
        super().__init__(
            f"Index {index!r} has {len(index)} components, "
            f"store has {ndims} dimensions")


class IndexOutOfRange(StoreError, IndexError):
    """Raised when a dense position falls outside its dimension extent."""

    def __init__(self, index, dim, extent):
        self.index = index
        self.dim = dim
        self.extent = extent
        super().__init__(
            f"Position {index[dim]!r} of index {index!r} is outside "
            f"[1, {extent}] for dimension {dim}")


class NotFound(StoreError, KeyError):
    """A lookup found no value. Caught by get_safe()."""

    def __str__(self):
        # KeyError repr()s its argument, keep the plain message
        return str(self.args[0]) if self.args else ""


class KeyNotFound(NotFound):
    """Sparse store has no entry for the key."""
    pass


class ValueUnset(NotFound):
    """Dense store cell still holds the unset sentinel."""
    pass


class DuplicateKeyDetected(StoreError):
    """More than one source row maps to the same dense cell."""

    def __init__(self, variable, keys):
        self.variable = variable
        self.keys = list(keys)
        super().__init__(
            f"Variable {variable!r}: {len(self.keys)} cell(s) with more "
            f"than one record for the same keys, e.g. {self.keys[:3]!r}")


class DuplicateKeyWarning(UserWarning):
    """Duplicate source rows were found; the cells were set to missing."""
    pass
