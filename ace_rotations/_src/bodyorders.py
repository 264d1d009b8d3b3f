from typing import Any, Sequence, Tuple

from ace_rotations._src.clebsch_gordan import ClebschGordan
from ace_rotations._src.mrange import as_ltuple, mrange
from ace_rotations._src.rotations3d import Rot3DCoeffs


def b_coeff(ll: Tuple[int, ...], mm: Tuple[int, ...], cg: ClebschGordan) -> float:
    r"""Closed form coefficients guaranteeing the rotation invariance of a product basis function.

    Available for body orders ``N <= 5``. For ``N = 3``

    .. math::

        B_{\mathbf{l} \mathbf{m}} = (-1)^{m_3} C^{l_3 (-m_3)}_{l_1 m_1 l_2 m_2}

    the higher orders couple the legs pairwise.

    Args:
        ll: tuple of angular momenta
        mm: tuple of magnetic numbers with ``sum(mm) == 0``
        cg (ClebschGordan): Clebsch-Gordan coefficients

    Returns:
        float
    """
    N = len(ll)
    assert len(mm) == N
    assert sum(mm) == 0, mm

    if N == 1:
        return 1.0

    if N == 2:
        return float((-1) ** mm[0])

    if N == 3:
        return (-1) ** mm[2] * cg(ll[0], mm[0], ll[1], mm[1], ll[2], -mm[2])

    if N == 4:
        M = mm[0] + mm[1]  # == -(mm[2] + mm[3])
        c = 0.0
        for J in range(max(abs(ll[0] - ll[1]), abs(ll[2] - ll[3])), min(ll[0] + ll[1], ll[2] + ll[3]) + 1):
            if abs(M) > J:
                continue
            c += (-1) ** M * cg(ll[0], mm[0], ll[1], mm[1], J, M) * cg(ll[2], mm[2], ll[3], mm[3], J, -M)
        return c

    if N == 5:
        c = 0.0
        M1 = mm[0] + mm[1]
        M2 = mm[0] + mm[1] + mm[2]
        for J1 in range(abs(ll[0] - ll[1]), ll[0] + ll[1] + 1):
            for J2 in range(max(abs(J1 - ll[2]), abs(ll[3] - ll[4])), min(J1 + ll[2], ll[3] + ll[4]) + 1):
                if abs(M2) > J2 or abs(M1) > J1:
                    continue
                c += (
                    (-1) ** M2
                    * cg(ll[0], mm[0], ll[1], mm[1], J1, M1)
                    * cg(J1, M1, ll[2], mm[2], J2, M2)
                    * cg(ll[3], mm[3], ll[4], mm[4], J2, -M2)
                )
        return c

    raise NotImplementedError(f"closed form invariance coefficients are not implemented for body order {N}")


def admissible(ll: Sequence[int], A: Rot3DCoeffs) -> bool:
    r"""Check whether the angular tuple ``ll`` can carry a reflection and rotation invariant.

    Cheap necessary conditions (parity, triangle inequalities) are checked
    first, for larger body orders the tuple is kept only if a non zero
    coefficient is found.

    Args:
        ll: tuple of angular momenta
        A (Rot3DCoeffs): coupling coefficients, ``A.cg`` is used for the closed forms

    Returns:
        bool

    Examples:
        >>> A = Rot3DCoeffs()
        >>> admissible((1, 1, 0), A), admissible((1, 1, 1), A)
        (True, False)
    """
    ll = as_ltuple(ll)
    N = len(ll)

    if N == 1:
        return ll[0] == 0

    if N == 2:
        return ll[0] == ll[1]

    if N == 3:
        l1, l2, l3 = ll
        return abs(l1 - l2) <= l3 <= l1 + l2 and (l1 + l2 + l3) % 2 == 0

    # invariance under reflections
    if sum(ll) % 2 != 0:
        return False

    if N == 4:
        # requirement to define the CG coefficients
        if max(abs(ll[0] - ll[1]), abs(ll[2] - ll[3])) > min(ll[0] + ll[1], ll[2] + ll[3]):
            return False

        # the conditions above are sufficient, a retained tuple must have a non zero coefficient
        found_nonzero = any(b_coeff(ll, mm, A.cg) != 0.0 for mm in mrange(ll))
        assert found_nonzero, f"no non zero coefficient for the admissible tuple {ll}"
        return True

    if N == 5:
        return any(b_coeff(ll, mm, A.cg) != 0.0 for mm in mrange(ll))

    # the coupling matrix is positive semi-definite, it vanishes iff its diagonal does
    return any(A(ll, mm, mm) != 0.0 for mm in mrange(ll))


def filter_tuples(kl: Sequence[Any], nu: Sequence[int], A: Rot3DCoeffs) -> bool:
    r"""Admissibility of a tuple ``nu`` of one-particle basis indices.

    Args:
        kl: one-particle basis specification, ``kl[i].l`` is the angular momentum of function ``i``
        nu: indices into ``kl``
        A (Rot3DCoeffs): coupling coefficients
    """
    return admissible(tuple(kl[i].l for i in nu), A)
