import itertools
from typing import Iterator, List, Sequence, Tuple


def as_ltuple(ll: Sequence[int]) -> Tuple[int, ...]:
    ll = tuple(int(l) for l in ll)
    if len(ll) == 0:
        raise ValueError("an angular tuple needs at least one entry")
    if any(l < 0 for l in ll):
        raise ValueError(f"angular momenta must be non-negative, got {ll}")
    return ll


def mrange(ll: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    r"""Iterate over all the magnetic tuples ``mm`` compatible with ``ll``.

    The tuples satisfy ``|mm[i]| <= ll[i]`` and ``sum(mm) == 0``. The last
    entry is never chosen freely, it is minus the sum of the others.

    Args:
        ll: tuple of angular momenta

    Yields:
        tuple of int

    Examples:
        >>> list(mrange((1, 1)))
        [(-1, 1), (0, 0), (1, -1)]
        >>> len(list(mrange((1, 1, 0))))
        3
    """
    ll = as_ltuple(ll)
    for mpre in itertools.product(*(range(-l, l + 1) for l in ll[:-1])):
        mlast = -sum(mpre)
        if abs(mlast) <= ll[-1]:
            yield mpre + (mlast,)


def collect_m(ll: Sequence[int], k: Sequence[int]) -> List[Tuple[int, ...]]:
    r"""All tuples ``mm`` with ``|mm[i]| <= ll[i]`` whose sum cancels one of the ``k``.

    Contrary to :func:`mrange` the sum of ``mm`` is not constrained to zero,
    a tuple is kept as soon as ``sum(mm) + k[i] == 0`` for some ``i``.
    """
    ll = as_ltuple(ll)
    targets = {-int(x) for x in k}
    return [
        mm
        for mm in itertools.product(*(range(-l, l + 1) for l in ll))
        if sum(mm) in targets
    ]
