"""
MDEQ Convert: Move variables between representations.

  - to_dense(sparse)   -> DenseStore over the sparse store's labels
  - to_sparse(dense)   -> SparseStore of the set cells, keyed by labels
  - to_frame(store)    -> long-format pandas DataFrame (inverse of loading)
  - to_matrix(store)   -> scipy.sparse CSR matrix for 2-d stores
"""

import numpy as np
import pandas as pd
from scipy import sparse

from mdeq.store import DenseStore, SparseStore


def to_dense(store, missing_value=np.nan):
    """
    Copy a SparseStore into a DenseStore shaped by its dimension labels.

    Keys that were never set hold `missing_value`, which is also the
    unset sentinel of the result.
    """
    dense = DenseStore(store.dimensions, value_type=store.value_type,
                       unset=missing_value)
    for key, value in store.items():
        dense.set(dense.positions(key), value)
    return dense


def to_sparse(store):
    """Copy the set cells of a DenseStore into a SparseStore keyed by labels."""
    result = SparseStore(store.dimensions, value_type=store.value_type)
    for pos, value in store.items():
        result.set(store.labels(pos), value)
    return result


def _labelled_items(store):
    if isinstance(store, DenseStore):
        return ((store.labels(pos), v) for pos, v in store.items())
    return store.items()


def to_frame(store, value_col="value"):
    """
    Export the populated entries as a long-format DataFrame.

    Columns are the dimension names, in store order, followed by
    `value_col`. Rows follow insertion order (sparse) or row-major order
    (dense).
    """
    columns = list(store.names) + [value_col]
    records = [key + (value,) for key, value in _labelled_items(store)]
    return pd.DataFrame.from_records(records, columns=columns)


def to_matrix(store, dtype=np.float64):
    """
    Export a 2-d store as a scipy.sparse CSR matrix.

    Rows and columns follow the dimension positions; missing values are
    left out of the matrix.
    """
    if store.ndim != 2:
        raise ValueError(f"to_matrix needs a 2-d store, got {store.ndim} dims")

    rows, cols, vals = [], [], []
    if isinstance(store, DenseStore):
        entries = store.items()
    else:
        d0, d1 = store.dimensions
        entries = (((d0.position(k[0]), d1.position(k[1])), v)
                   for k, v in store.items())
    for (i, j), value in entries:
        if np.ndim(value) == 0 and pd.isna(value):
            continue
        rows.append(i - 1)
        cols.append(j - 1)
        vals.append(value)

    return sparse.csr_matrix(
        (np.asarray(vals, dtype=dtype),
         (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64))),
        shape=store.size(),
        dtype=dtype,
    )
