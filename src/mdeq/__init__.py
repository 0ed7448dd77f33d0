"""
MDEQ - Multi-Dimensional EQuations
==================================

Named N-dimensional variables loaded from long-format tables, and model
equations written as bulk assignments instead of nested loops.

Quick start:
    import mdeq
    from mdeq import over

    # Load several variables from one long table (reg|prod|var|value)
    production, trValues = mdeq.load_vars(
        ["production", "trValues"], df, ["reg", "prod"], var_name_col="var")

    # Empty variable over the same dimensions
    consumption = mdeq.define_vars(["reg", "prod"], [str, str])

    # consumption[r in reg, p in prods] = production[r, p] - trValues[r, p]
    mdeq.assign(consumption, [over("r", reg), over("p", prods)],
                lambda r, p: production[r, p] - trValues[r, p])

Sparse stores (default) are indexed by label; dense stores (sparse=False)
are numpy arrays indexed by 1-based position.
"""

__version__ = "0.3.0"

from mdeq.errors import (
    StoreError, ArityMismatch, IndexOutOfRange, NotFound, KeyNotFound,
    ValueUnset, DuplicateKeyDetected, DuplicateKeyWarning,
)
from mdeq.dimensions import (
    Dimension, declare_dimensions, ordinal_dimensions, infer_dimensions,
)
from mdeq.store import (
    SparseStore, DenseStore, define_vars, define_arrays, get_safe,
)
from mdeq.loader import load_var, load_vars
from mdeq.equations import Over, over, assign, Equation
from mdeq.detector import detect_store
from mdeq.convert import to_dense, to_sparse, to_frame, to_matrix

__all__ = [
    "StoreError", "ArityMismatch", "IndexOutOfRange", "NotFound",
    "KeyNotFound", "ValueUnset", "DuplicateKeyDetected", "DuplicateKeyWarning",
    "Dimension", "declare_dimensions", "ordinal_dimensions", "infer_dimensions",
    "SparseStore", "DenseStore", "define_vars", "define_arrays", "get_safe",
    "load_var", "load_vars",
    "Over", "over", "assign", "Equation",
    "detect_store",
    "to_dense", "to_sparse", "to_frame", "to_matrix",
]
