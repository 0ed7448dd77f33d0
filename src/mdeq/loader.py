"""
MDEQ Loader: Build variables from long-format tables.

A long-format table has one row per (dimension combination, value):

    reg  prod    var         value
    us   banana  production  10
    us   banana  transfCoef  0.6
    ...

load_vars() splits the table by the variable-name column and builds one
store per requested name:

  - sparse=True  -> SparseStore keyed by label tuples, rows inserted in
                    order (a repeated key keeps the last row's value).
  - sparse=False -> DenseStore shaped by the distinct labels of each
                    dimension column. Cells with no row, or with more
                    than one row, get `missing_value`; duplicates are
                    reported with DuplicateKeyWarning.

Usage:
    production, trade = load_vars(["production", "trade"], df,
                                  ["reg", "prod"], var_name_col="var")
"""

import sys
import warnings

import numpy as np
import pandas as pd

from mdeq.dimensions import Dimension, as_frame, infer_dimensions
from mdeq.errors import DuplicateKeyDetected, DuplicateKeyWarning
from mdeq.store import DenseStore, PositionIndex, SparseStore

DEFAULT_VALUE_COL = "value"
DEFAULT_VAR_NAME_COL = "varName"
DUPLICATE_POLICIES = ("warn", "raise")


def _check_columns(table, columns):
    missing = [c for c in columns if c not in table.columns]
    if missing:
        raise KeyError(
            f"Columns {missing} not in table (has {list(table.columns)})")


def _check_policy(on_duplicate):
    if on_duplicate not in DUPLICATE_POLICIES:
        raise ValueError(
            f"on_duplicate must be one of {DUPLICATE_POLICIES}, "
            f"got {on_duplicate!r}")


def _check_labels(table, dim_cols):
    for col in dim_cols:
        if table[col].isna().any():
            raise ValueError(f"Dimension column {col!r} contains missing values")


def _load_sparse(table, dim_cols, value_col, missing_value):
    column = table[value_col]
    _check_labels(table, dim_cols)
    dims = [Dimension(c, values=(), dtype=table[c].dtype) for c in dim_cols]
    store = SparseStore(dims, value_type=column.dtype)

    if dim_cols:
        keys = zip(*(table[c].tolist() for c in dim_cols))
    else:
        keys = [()] * len(table)
    for key, value, is_na in zip(keys, column.tolist(), column.isna().tolist()):
        store.set(key, missing_value if is_na else value)
    return store


def _load_dense(table, dim_cols, value_col, missing_value, unset,
                on_duplicate, name, stacklevel):
    column = table[value_col]
    dims = infer_dimensions(table, dim_cols)
    store = DenseStore(dims, value_type=column.dtype,
                       unset=missing_value if unset is None else unset,
                       fill_values=(missing_value,))
    if len(table) == 0:
        return store, 0

    index = PositionIndex(store.size())
    codes = [pd.Index(d.values).get_indexer(table[d.name]) for d in dims]
    flat = index.offsets(codes)
    counts = np.bincount(flat, minlength=index.total)

    dup_cells = np.flatnonzero(counts > 1)
    if len(dup_cells):
        keys = [store.labels(index.unravel(int(c))) for c in dup_cells]
        if on_duplicate == "raise":
            raise DuplicateKeyDetected(name, keys)
        warnings.warn(
            f"Variable {name!r}: found more than one record with the same "
            f"keys for {len(keys)} cell(s), set to missing: {keys[:5]!r}",
            DuplicateKeyWarning, stacklevel=stacklevel)

    single = counts[flat] == 1
    is_na = column.isna().to_numpy()
    empty = np.flatnonzero(counts != 1)
    store.put_flat(np.concatenate([empty, flat[single & is_na]]), missing_value)

    rows = np.flatnonzero(single & ~is_na)
    store.put_flat(flat[rows], column.to_numpy()[rows])
    return store, len(dup_cells)


def load_var(table, dim_cols, value_col=DEFAULT_VALUE_COL, sparse=True,
             missing_value=np.nan, unset=None, on_duplicate="warn",
             name=None, verbose=False):
    """
    Define a variable and load it from a long-format table.

    Parameters
    ----------
    table : pandas.DataFrame or DataFrame-like
        Source in the format dim1|dim2|...|value.
    dim_cols : sequence of str
        Columns holding the dimensions (the keys), in index order.
    value_col : str
        Column holding the values (default "value").
    sparse : bool
        Return a SparseStore (True, default) or a DenseStore.
    missing_value : object
        Value for missing records, duplicate cells and NA values.
    unset : object, optional
        Dense unset sentinel. Defaults to `missing_value`.
    on_duplicate : {"warn", "raise"}
        Dense loads: warn and set the cell to `missing_value`, or raise
        DuplicateKeyDetected.
    name : str, optional
        Variable name used in messages.
    verbose : bool
        Print a summary line.

    Returns
    -------
    SparseStore or DenseStore

    Notes
    -----
    Sparse stores are accessed by label and cost O(rows) to load. Dense
    stores are accessed by position in O(1) but allocate one cell per
    combination of labels.

    Examples
    --------
    >>> vol = load_var(volume_data, ["region", "treeSpecie", "year"])
    """
    _check_policy(on_duplicate)
    table = as_frame(table)
    dim_cols = list(dim_cols)
    _check_columns(table, dim_cols + [value_col])
    return _load_one(table, dim_cols, value_col, sparse, missing_value,
                     unset, on_duplicate, name, verbose)


def _load_one(table, dim_cols, value_col, sparse, missing_value, unset,
              on_duplicate, name, verbose):
    # Only called from load_var/load_vars; stacklevel=4 is the user's frame
    if sparse:
        store = _load_sparse(table, dim_cols, value_col, missing_value)
        if verbose:
            print(f"  [mdeq] {name or value_col!r}: sparse, "
                  f"{len(store):,} entries from {len(table):,} rows")
            sys.stdout.flush()
        return store

    store, n_dup = _load_dense(table, dim_cols, value_col, missing_value,
                               unset, on_duplicate, name or value_col,
                               stacklevel=4)
    if verbose:
        shape = " x ".join(str(s) for s in store.size())
        print(f"  [mdeq] {name or value_col!r}: dense {shape} from "
              f"{len(table):,} rows, {n_dup} duplicate cell(s)")
        sys.stdout.flush()
    return store


def load_vars(var_names, table, dim_cols, var_name_col=DEFAULT_VAR_NAME_COL,
              value_col=DEFAULT_VALUE_COL, sparse=True, missing_value=np.nan,
              unset=None, on_duplicate="warn", verbose=False):
    """
    Define several variables and load them from one long-format table.

    Like load_var(), but the table holds many variables, told apart by
    the `var_name_col` column (format dim1|dim2|...|varName|value).

    Parameters
    ----------
    var_names : sequence of str
        Variables to extract, in the order they are returned.
    table : pandas.DataFrame or DataFrame-like
    dim_cols : sequence of str
        Columns holding the dimensions.
    var_name_col : str or None
        Column holding the variable names (default "varName"). None
        treats the whole table as every requested variable's data.
    value_col : str
        Column holding the values (default "value").
    sparse, missing_value, unset, on_duplicate, verbose
        As in load_var().

    Returns
    -------
    SparseStore or DenseStore if a single name is requested, else a tuple
    of stores in `var_names` order.

    Examples
    --------
    >>> vol, trees = load_vars(["vol", "numberOfTrees"], forest_data,
    ...                        ["region", "treeSpecie", "year"],
    ...                        var_name_col="parName")
    """
    _check_policy(on_duplicate)
    if isinstance(var_names, str):
        var_names = [var_names]
    var_names = list(var_names)
    table = as_frame(table)
    dim_cols = list(dim_cols)
    required = dim_cols + [value_col]
    if var_name_col is not None:
        required.append(var_name_col)
    _check_columns(table, required)

    stores = []
    for var in var_names:
        if var_name_col is None:
            part = table
        else:
            part = table[table[var_name_col] == var]
        stores.append(_load_one(
            part, dim_cols, value_col, sparse, missing_value, unset,
            on_duplicate, var, verbose))

    if len(stores) == 1:
        return stores[0]
    return tuple(stores)
