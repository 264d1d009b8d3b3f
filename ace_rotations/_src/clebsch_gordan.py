import logging
import math
from fractions import Fraction
from math import comb, factorial
from typing import Dict, Tuple

import sympy

logger = logging.getLogger(__name__)


def cg_l_condition(j1: int, j2: int, J: int) -> bool:
    return abs(j1 - j2) <= J <= j1 + j2


def cg_m_condition(m1: int, m2: int, M: int) -> bool:
    return M == m1 + m2


def cg_conditions(j1: int, m1: int, j2: int, m2: int, J: int, M: int) -> bool:
    r"""Selection rules of :math:`C^{JM}_{j_1 m_1 j_2 m_2}`.

    ``False`` means the coefficient vanishes identically.
    """
    return (
        cg_l_condition(j1, j2, J)
        and cg_m_condition(m1, m2, M)
        and abs(m1) <= j1
        and abs(m2) <= j2
        and abs(M) <= J
    )


def _cg_fraction(j1: int, m1: int, j2: int, m2: int, J: int, M: int) -> Tuple[Fraction, int]:
    # C = sqrt(N) * G with N rational and G an integer
    N = Fraction(
        (2 * J + 1)
        * factorial(j1 + m1)
        * factorial(j1 - m1)
        * factorial(j2 + m2)
        * factorial(j2 - m2)
        * factorial(J + M)
        * factorial(J - M),
        factorial(j1 + j2 - J)
        * factorial(j1 - j2 + J)
        * factorial(-j1 + j2 + J)
        * factorial(j1 + j2 + J + 1),
    )

    # 0 <= k <= j1 + j2 - J
    # 0 <= j1 - m1 - k <= j1 - j2 + J
    # 0 <= j2 + m2 - k <= -j1 + j2 + J
    kmin = max(0, j2 - J - m1, j1 - J + m2)
    kmax = min(j1 + j2 - J, j1 - m1, j2 + m2)

    G = 0
    for k in range(kmin, kmax + 1):
        G += (
            (-1) ** k
            * comb(j1 + j2 - J, k)
            * comb(j1 - j2 + J, j1 - m1 - k)
            * comb(-j1 + j2 + J, j2 + m2 - k)
        )
    return N, G


def clebschgordan(j1: int, m1: int, j2: int, m2: int, J: int, M: int, exact: bool = False):
    r"""Clebsch-Gordan coefficient :math:`C^{JM}_{j_1 m_1 j_2 m_2}` of :math:`SO(3)`.

    Reference implementation based on https://hal.inria.fr/hal-01851097/document
    equations (4-6). The factorials and the alternating sum are evaluated with
    python integers and :class:`fractions.Fraction`, the result is converted to
    a float only at the very end. Use it for precomputation, not in hot loops.

    The phase convention is the one of Condon and Shortley, such that

    .. math::

        D^{l_1}_{m_1 k_1} D^{l_2}_{m_2 k_2} =
        \sum_j C^{j (m_1+m_2)}_{l_1 m_1 l_2 m_2} C^{j (k_1+k_2)}_{l_1 k_1 l_2 k_2} D^j_{(m_1+m_2)(k_1+k_2)}

    Args:
        j1, m1 (int): first angular momentum and its projection
        j2, m2 (int): second angular momentum and its projection
        J, M (int): coupled angular momentum and its projection
        exact (bool): if ``True`` return a ``sympy`` expression instead of a float

    Returns:
        float or sympy.Expr: the coefficient, exactly zero when the selection rules fail

    Examples:
        >>> clebschgordan(1, 0, 1, 0, 0, 0, exact=True)
        -sqrt(3)/3
        >>> clebschgordan(1, 1, 1, -1, 3, 0)
        0.0
    """
    args = (j1, m1, j2, m2, J, M)
    if any(int(x) != x for x in args):
        raise ValueError(f"only integer angular momenta are supported, got {args}")
    j1, m1, j2, m2, J, M = (int(x) for x in args)

    if not cg_conditions(j1, m1, j2, m2, J, M):
        return sympy.Integer(0) if exact else 0.0

    N, G = _cg_fraction(j1, m1, j2, m2, J, M)

    if exact:
        return G * sympy.sqrt(sympy.Rational(N.numerator, N.denominator))

    if G == 0:
        return 0.0
    return math.copysign(math.sqrt(float(N * G**2)), G)


class ClebschGordan:
    r"""Clebsch-Gordan coefficients computed on demand and stored.

    See :func:`clebschgordan` for the convention. Keys are the literal
    6-tuples of arguments, coefficients violating the selection rules are
    returned as zero and never stored.

    Examples:
        >>> cg = ClebschGordan()
        >>> cg(1, 1, 1, -1, 2, 0) == clebschgordan(1, 1, 1, -1, 2, 0)
        True
        >>> len(cg)
        1
    """

    def __init__(self):
        self.vals: Dict[Tuple[int, int, int, int, int, int], float] = {}

    def __call__(self, j1, m1, j2, m2, J, M) -> float:
        if not cg_conditions(j1, m1, j2, m2, J, M):
            logger.debug("selection rules fail for (%s, %s, %s, %s, %s, %s)", j1, m1, j2, m2, J, M)
            return 0.0
        key = (j1, m1, j2, m2, J, M)
        try:
            return self.vals[key]
        except KeyError:
            val = clebschgordan(j1, m1, j2, m2, J, M)
            self.vals[key] = val
            return val

    def __len__(self):
        return len(self.vals)

    def __repr__(self):
        return f"{self.__class__.__name__}({len(self)} coefficients)"
