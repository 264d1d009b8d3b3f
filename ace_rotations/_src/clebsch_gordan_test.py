import itertools
import logging
import math

import numpy as np
import pytest
import sympy
from sympy.physics.quantum.cg import CG

from ace_rotations import ClebschGordan, cg_conditions, clebschgordan


def triplets(lmax):
    for j1 in range(lmax + 1):
        for j2 in range(lmax + 1):
            for J in range(abs(j1 - j2), j1 + j2 + 1):
                yield j1, j2, J


def test_triangle_condition():
    assert clebschgordan(1, 0, 1, 0, 3, 0) == 0.0
    assert clebschgordan(3, 0, 1, 0, 1, 0) == 0.0
    assert clebschgordan(2, 1, 5, -1, 2, 0) == 0.0


def test_magnetic_sum_condition():
    assert clebschgordan(1, 1, 1, 0, 2, 0) == 0.0
    assert clebschgordan(2, -1, 1, -1, 2, -1) == 0.0
    assert clebschgordan(1, 0, 1, 0, 2, 1) == 0.0


def test_bound_conditions():
    assert clebschgordan(1, 2, 1, -2, 2, 0) == 0.0
    assert clebschgordan(1, -1, 1, 3, 2, 2) == 0.0
    assert clebschgordan(2, 2, 2, 1, 2, 3) == 0.0


def test_zero_on_random_violations():
    rng = np.random.default_rng(0)
    for _ in range(200):
        j1, j2, J = (int(x) for x in rng.integers(0, 5, 3))
        m1, m2, M = (int(x) for x in rng.integers(-6, 7, 3))
        if not cg_conditions(j1, m1, j2, m2, J, M):
            assert clebschgordan(j1, m1, j2, m2, J, M) == 0.0
            assert clebschgordan(j1, m1, j2, m2, J, M, exact=True) == 0


@pytest.mark.parametrize("j1,j2,J", triplets(3))
def test_sympy(j1, j2, J):
    for m1 in range(-j1, j1 + 1):
        for m2 in range(-j2, j2 + 1):
            M = m1 + m2
            expected = CG(j1, m1, j2, m2, J, M).doit()
            got = clebschgordan(j1, m1, j2, m2, J, M, exact=True)
            assert sympy.simplify(got - expected) == 0
            assert math.isclose(clebschgordan(j1, m1, j2, m2, J, M), float(expected), abs_tol=1e-14)


def test_known_values():
    assert math.isclose(clebschgordan(1, 0, 1, 0, 0, 0), -1 / math.sqrt(3))
    assert math.isclose(clebschgordan(1, 1, 1, -1, 0, 0), 1 / math.sqrt(3))
    assert math.isclose(clebschgordan(1, 1, 1, 0, 2, 1), 1 / math.sqrt(2))
    assert clebschgordan(2, 2, 3, 3, 5, 5) == 1.0
    assert clebschgordan(1, 0, 1, 0, 1, 0) == 0.0


@pytest.mark.parametrize("j1,j2", [(1, 1), (2, 3), (4, 2), (6, 7)])
def test_orthogonality(j1, j2):
    Js = list(range(abs(j1 - j2), j1 + j2 + 1))
    for M in range(-(j1 + j2), j1 + j2 + 1):
        for J1, J2 in itertools.product(Js, Js):
            if abs(M) > J1 or abs(M) > J2:
                continue
            s = sum(
                clebschgordan(j1, m1, j2, M - m1, J1, M) * clebschgordan(j1, m1, j2, M - m1, J2, M)
                for m1 in range(-j1, j1 + 1)
            )
            assert math.isclose(s, float(J1 == J2), abs_tol=1e-12)


def test_large_angular_momenta():
    # naive floating point factorials lose all precision here
    j1, j2, J = 40, 35, 30
    s = sum(clebschgordan(j1, m1, j2, -m1, J, 0) ** 2 for m1 in range(-j2, j2 + 1))
    assert math.isclose(s, 1.0, rel_tol=1e-12)


def test_cache():
    cg = ClebschGordan()
    assert len(cg) == 0

    assert cg(1, 1, 1, 0, 2, 0) == 0.0
    assert cg(1, 2, 1, -2, 2, 0) == 0.0
    assert len(cg) == 0

    a = cg(2, 1, 1, -1, 2, 0)
    assert len(cg) == 1
    assert (2, 1, 1, -1, 2, 0) in cg.vals

    b = cg(2, 1, 1, -1, 2, 0)
    assert len(cg) == 1
    assert a == b
    assert a == clebschgordan(2, 1, 1, -1, 2, 0)


def test_no_key_reduction():
    cg = ClebschGordan()
    cg(1, 1, 2, -1, 2, 0)
    cg(2, -1, 1, 1, 2, 0)
    assert len(cg) == 2


def test_skipped_coefficients_are_logged(caplog):
    cg = ClebschGordan()
    with caplog.at_level(logging.DEBUG, logger="ace_rotations._src.clebsch_gordan"):
        cg(1, 1, 1, 0, 2, 0)
    assert "selection rules fail" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.DEBUG, logger="ace_rotations._src.clebsch_gordan"):
        cg(1, 1, 1, 0, 2, 1)
    assert caplog.text == ""


@pytest.mark.parametrize("args", [(0.5, 0.5, 0.5, -0.5, 1, 0), (1, 0, 1.5, 0.5, 1, 0.5), (1, 0, 1, 0, 2.0001, 0)])
def test_half_integers_rejected(args):
    with pytest.raises(ValueError):
        clebschgordan(*args)


def test_integral_floats_accepted():
    assert clebschgordan(1.0, 0.0, 1.0, 0.0, 0.0, 0.0) == clebschgordan(1, 0, 1, 0, 0, 0)
