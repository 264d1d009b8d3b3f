import collections
import itertools

import pytest

import ace_rotations as ace
from ace_rotations import Rot3DCoeffs, admissible, b_coeff, filter_tuples, mrange, ri_basis


@pytest.fixture
def A():
    return Rot3DCoeffs()


def test_one_and_two_bodies(A):
    assert admissible((0,), A)
    assert not admissible((1,), A)
    assert admissible((1, 1), A)
    assert not admissible((1, 2), A)


def test_three_bodies(A):
    assert admissible((1, 1, 0), A)
    assert admissible((1, 1, 2), A)
    assert not admissible((1, 1, 1), A)  # odd parity
    assert not admissible((1, 1, 3), A)  # triangle
    assert admissible((2, 3, 3), A)


def test_four_bodies(A):
    assert admissible((1, 1, 1, 1), A)
    assert not admissible((1, 1, 1, 2), A)
    assert admissible((1, 1, 3, 3), A)
    assert not admissible((0, 0, 1, 3), A)
    assert not admissible((0, 1, 0, 3), A)


def test_four_bodies_health_check(A, monkeypatch):
    monkeypatch.setattr(ace._src.bodyorders, "b_coeff", lambda ll, mm, cg: 0.0)
    with pytest.raises(AssertionError):
        admissible((1, 1, 1, 1), A)
    # rejected before the health check
    assert not admissible((1, 1, 1, 2), A)


def test_five_bodies(A):
    assert admissible((1, 1, 1, 1, 0), A)
    assert admissible((1, 1, 1, 1, 2), A)
    assert not admissible((1, 1, 1, 1, 1), A)
    assert not admissible((0, 0, 0, 0, 2), A)


def test_six_bodies(A):
    assert admissible((1, 1, 1, 1, 1, 1), A)
    assert admissible((1, 1, 1, 1, 1, 3), A)
    assert not admissible((1, 1, 1, 1, 1, 2), A)
    assert not admissible((0, 0, 0, 0, 0, 2), A)


@pytest.mark.parametrize("N", [3, 4])
def test_admissible_has_invariant(A, N):
    for ll in itertools.product(range(3), repeat=N):
        if admissible(ll, A):
            assert ri_basis(A, ll).shape[0] > 0


def test_b_coeff_two_bodies(A):
    for mm in mrange((2, 2)):
        assert b_coeff((2, 2), mm, A.cg) == (-1) ** mm[0]


def test_b_coeff_errors(A):
    with pytest.raises(AssertionError):
        b_coeff((1, 1, 0), (1, 0, 0), A.cg)
    with pytest.raises(NotImplementedError):
        b_coeff((1, 1, 1, 1, 1, 1), (0, 0, 0, 0, 0, 0), A.cg)


def test_filter_tuples(A):
    KL = collections.namedtuple("KL", ["k", "l"])
    kl = [KL(0, 0), KL(0, 1), KL(1, 1), KL(0, 2)]
    assert filter_tuples(kl, [0], A)
    assert not filter_tuples(kl, [1], A)
    assert filter_tuples(kl, [1, 2], A)
    assert not filter_tuples(kl, [1, 3], A)
    assert filter_tuples(kl, [1, 2, 3], A)
    assert not filter_tuples(kl, [1, 2, 2], A)
