"""
MDEQ Equations: Bulk assignment over Cartesian products of index sets.

Writes a "model equation" such as

    production[r in reg, sp in secPr] = sum(trValues[r, p] * transfCoef[r, p]
                                            for p in primPr)

as a single call instead of nested loops:

    assign(production, [over("r", reg), over("sp", secPr)],
           lambda r, sp: sum(trValues[r, p] * transfCoef[r, p]
                             for p in primPr))

Components of the index template are either fixed values, passed through
unchanged, or range variables created with over(). The right-hand side is
called once per combination with the range variables bound by keyword,
leftmost range outermost.
"""

import sys
from itertools import product

from mdeq.store.sparse import as_index


class Over:
    """
    A range variable of an index template: `name` takes every value in `values`.

    Parameters
    ----------
    name : str
        Keyword under which the current value is passed to the right-hand side.
    values : iterable
        Labels (sparse targets) or 1-based positions (dense targets).
    """

    def __init__(self, name, values):
        self.name = name
        self.values = list(values)

    def __len__(self):
        return len(self.values)

    def __repr__(self):
        return f"Over({self.name!r}, {self.values!r})"


def over(name, values):
    """Shorthand for Over(name, values)."""
    return Over(name, values)


def assign(target, index, rhs, verbose=False):
    """
    Evaluate `rhs` for every combination of the range variables in `index`
    and write each result into `target`.

    Parameters
    ----------
    target : SparseStore or DenseStore
        Store written with target.set().
    index : sequence
        One component per target dimension: a fixed value or an Over.
    rhs : callable
        Called as rhs(**bindings), bindings mapping each range name to its
        current value.
    verbose : bool
        Print the number of writes.

    Raises
    ------
    ValueError
        Two range variables share a name (raised before any write).

    Notes
    -----
    A failing set() stops the assignment; cells written by earlier
    combinations keep their new values. Copy the target first if the
    equation must apply atomically.

    Examples
    --------
    >>> assign(a, [over("d1", ["a", "b"]), 2], lambda d1: a[d1, 1] + 3)
    """
    template = as_index(index)
    slots = [i for i, c in enumerate(template) if isinstance(c, Over)]
    ranges = [template[i] for i in slots]
    names = [r.name for r in ranges]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate range variable names in {names}")

    key = list(template)
    writes = 0
    for combo in product(*(r.values for r in ranges)):
        value = rhs(**dict(zip(names, combo)))
        for slot, v in zip(slots, combo):
            key[slot] = v
        target.set(tuple(key), value)
        writes += 1

    if verbose:
        print(f"  [mdeq] assign {names or 'scalar'}: {writes:,} writes")
        sys.stdout.flush()


class Equation:
    """
    Builder form of assign(): `Equation(store)[template] = rhs`.

    Examples
    --------
    >>> eq = Equation(consumption)
    >>> eq[over("r", reg), over("p", primPr)] = (
    ...     lambda r, p: production[r, p] - trValues[r, p])
    """

    def __init__(self, target, verbose=False):
        self.target = target
        self.verbose = verbose

    def __setitem__(self, index, rhs):
        assign(self.target, index, rhs, verbose=self.verbose)

    def __repr__(self):
        return f"Equation({self.target!r})"
