"""
MDEQ Detector: Structure report for a variable store.

Analyzes a store and returns a report with:
  - Shape, number of cells, populated entries, density
  - Memory estimates for both representations
  - Recommended representation (sparse or dense)

Usage:
    import mdeq
    report = mdeq.detect_store(production)
    print(report["recommended"], report["reason"])
"""

import numpy as np

from mdeq.store import DenseStore, SparseStore

# Rough per-entry cost of a dict item keyed by a tuple, plus 8 bytes
# per key component
SPARSE_ENTRY_BYTES = 120
SPARSE_KEY_BYTES = 8
DENSE_THRESHOLD = 0.3


def detect_store(store):
    """
    Analyze store structure and recommend a representation.

    Parameters
    ----------
    store : SparseStore or DenseStore

    Returns
    -------
    dict
        Structure report with shape, cells, populated, density,
        representation, recommended, reason and memory estimates.
    """
    if isinstance(store, SparseStore):
        representation = "sparse"
        itemsize = 8
    elif isinstance(store, DenseStore):
        representation = "dense"
        itemsize = store.data.itemsize
    else:
        raise TypeError(f"Not a store: {type(store).__name__}")

    shape = tuple(store.size())
    cells = int(np.prod(shape, dtype=np.int64))
    populated = len(store)
    density = populated / cells if cells > 0 else 0

    ram_dense = cells * itemsize
    ram_sparse = populated * (SPARSE_ENTRY_BYTES + SPARSE_KEY_BYTES * len(shape))

    if cells == 0:
        recommended = "sparse"
        reason = "Empty shape, nothing to allocate"
    elif density >= DENSE_THRESHOLD:
        recommended = "dense"
        reason = f"Dense ({density:.1%}), positional array"
    elif ram_dense <= ram_sparse:
        recommended = "dense"
        reason = f"Sparse ({density:.2%}) but array is smaller than the map"
    else:
        recommended = "sparse"
        reason = f"Sparse ({density:.2%}), label-keyed map"

    return {
        "shape": shape,
        "dims": list(store.names),
        "cells": cells,
        "populated": populated,
        "density": round(density, 6),
        "representation": representation,
        "recommended": recommended,
        "reason": reason,
        "ram_dense_mb": round(ram_dense / 1e6, 3),
        "ram_sparse_mb": round(ram_sparse / 1e6, 3),
    }
