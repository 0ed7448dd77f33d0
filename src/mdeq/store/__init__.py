"""
MDEQ Store: Sparse and dense representations of N-dimensional variables.

Two interchangeable representations with the same get/get_safe/set/size
interface:

  - SparseStore: dict keyed by label tuples, e.g. price["US", "apple"].
    Accessed by name, only populated keys take memory.
  - DenseStore: numpy array addressed by 1-based positions, e.g.
    price[1, 3]. Accessed by position, O(1) and vectorizable.

Example:
    from mdeq.store import define_vars, define_arrays

    price, demand = define_vars(["region", "item"], [str, str], n=2)
    price["US", "apple"] = 3.2

    supply = define_arrays((3, 4))
    supply[2, 3] = 1.5
"""

import numpy as np

from mdeq.dimensions import declare_dimensions, ordinal_dimensions
from mdeq.errors import NotFound
from mdeq.store.dense import DenseStore
from mdeq.store.indexing import PositionIndex
from mdeq.store.sparse import SparseStore


def define_vars(dim_names, dim_types=None, value_type=float, n=1):
    """
    Define empty sparse variable(s) over the named dimensions.

    Parameters
    ----------
    dim_names : sequence of str
        Names of the dimensions, in index order.
    dim_types : sequence of type, optional
        Label type of each dimension.
    value_type : type
        Type of the stored values (default float).
    n : int
        Number of independent stores to return.

    Returns
    -------
    SparseStore, or tuple of n SparseStore when n > 1.

    Examples
    --------
    >>> price, demand = define_vars(["region", "item"], [str, str], n=2)
    >>> price["US", "apple"] = 3.2
    """
    stores = tuple(
        SparseStore(declare_dimensions(dim_names, dim_types), value_type=value_type)
        for _ in range(n)
    )
    return stores[0] if n == 1 else stores


def define_arrays(size, value_type=float, n=1, missing_value=np.nan, names=None):
    """
    Define dense variable(s) of the given shape, every cell `missing_value`.

    Parameters
    ----------
    size : tuple of int
        Shape of the array.
    value_type : type
        Type of the stored values (default float).
    n : int
        Number of independent stores to return.
    missing_value : object
        Unset sentinel filling the cells (default NaN).
    names : sequence of str, optional
        Dimension names (default dim1, dim2, ...).

    Returns
    -------
    DenseStore, or tuple of n DenseStore when n > 1.
    """
    stores = tuple(
        DenseStore(ordinal_dimensions(size, names), value_type=value_type,
                   unset=missing_value)
        for _ in range(n)
    )
    return stores[0] if n == 1 else stores


def get_safe(store, index, default=None):
    """
    Return the value of `store` at `index`, or `default` if there is none.

    Only the not-found case is absorbed; arity and range errors propagate.

    Examples
    --------
    >>> vol = get_safe(forest_volumes, ("BlackForest", 2014), 0.0)
    """
    try:
        return store.get(index)
    except NotFound:
        return default


__all__ = [
    "SparseStore", "DenseStore", "PositionIndex",
    "define_vars", "define_arrays", "get_safe",
]
