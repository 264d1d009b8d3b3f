r"""Covariant couplings: the cluster transforms like a fixed irreducible representation.

The construction mirrors :func:`ace_rotations.ri_basis` and
:func:`ace_rotations.rpi_basis`, the target representation of angular
momentum ``L`` is coupled as one additional leg of the cluster. Only the
vector case ``L = 1`` is exercised in practice. This interface is provisional.
"""
import itertools
import warnings
from typing import Hashable, List, Optional, Sequence, Tuple

import numpy as np
from attr import attrib, attrs

from ace_rotations._src.config import config
from ace_rotations._src.mrange import as_ltuple, collect_m
from ace_rotations._src.rotations3d import Rot3DCoeffs, numerical_rank


@attrs(frozen=True)
class SphericalVector:
    r"""Target representation of angular momentum ``L``.

    Examples:
        >>> SphericalVector(1).dim
        3
    """
    L: int = attrib(converter=int)

    @property
    def dim(self) -> int:
        return 2 * self.L + 1


@attrs(frozen=True)
class DIndex:
    r"""Index :math:`(l, \mu, m)` of an entry :math:`D^l_{\mu m}` of a Wigner matrix."""
    l: int = attrib()
    mu: int = attrib()
    m: int = attrib()


def rotation_D_matrix(phi: SphericalVector) -> List[List[DIndex]]:
    r"""Indices of the Wigner matrix :math:`D^L(Q)` acting on ``phi``.

    Returns:
        list of list of DIndex: ``D[i][j] = DIndex(L, i - L, j - L)``
    """
    L = phi.L
    if L < 0:
        raise ValueError(f"the angular momentum of the representation must be non-negative, got {L}")
    return [[DIndex(L, i - L, j - L) for j in range(2 * L + 1)] for i in range(2 * L + 1)]


def _column(phi: SphericalVector, t: int) -> Tuple[List[int], List[int]]:
    D = rotation_D_matrix(phi)
    if not 0 <= t < phi.dim:
        raise ValueError(f"the rotation matrix has no column {t}, it has {phi.dim} columns")
    Dt = [row[t] for row in D]
    return [d.mu for d in Dt], [d.m for d in Dt]


def local_cou_coe(
    A: Rot3DCoeffs,
    ll: Sequence[int],
    mm: Sequence[int],
    kk: Sequence[int],
    phi: SphericalVector,
    t: int,
) -> np.ndarray:
    r"""Vector valued coupling coefficient for column ``t`` of :math:`D^L`.

    .. math::

        Z_i = A_{(\mathbf{l}, L) (\mathbf{m}, m_t) (\mathbf{k}, \mu_i)}

    Returns:
        np.ndarray: complex array of shape ``(2L + 1,)``
    """
    mut, mt = _column(phi, t)
    LL = tuple(ll) + (phi.L,)
    Z = np.zeros((phi.dim,), dtype=np.complex128)
    for i in range(phi.dim):
        Z[i] = A(LL, tuple(mm) + (mt[i],), tuple(kk) + (mut[i],))
    return Z


def covariant_gramian(
    A: Rot3DCoeffs, ll: Sequence[int], phi: SphericalVector, t: int
) -> Tuple[np.ndarray, np.ndarray]:
    r"""Gramian of the vector valued coefficients of column ``t``.

    Returns:
        (tuple): tuple containing:

            np.ndarray: ``G`` of shape ``(len(m_list), len(m_list))``
            np.ndarray: ``Z`` of shape ``(len(mu_list), len(m_list), 2L + 1)``
    """
    ll = as_ltuple(ll)
    mut, mt = _column(phi, t)
    m_list = collect_m(ll, mt)
    mu_list = collect_m(ll, mut)

    Z = np.zeros((len(mu_list), len(m_list), phi.dim), dtype=np.complex128)
    for im, mm in enumerate(m_list):
        for imu, mumu in enumerate(mu_list):
            Z[imu, im] = local_cou_coe(A, ll, mm, mumu, phi, t)

    G = np.einsum("uia,uja->ij", np.conj(Z), Z)
    return G, Z


def rc_basis(
    A: Rot3DCoeffs,
    ll: Sequence[int],
    phi: SphericalVector,
    t: int,
    *,
    rtol: Optional[float] = None,
) -> Tuple[np.ndarray, List[Tuple[int, ...]]]:
    r"""Linearly independent covariant couplings of ``ll`` for column ``t``.

    Returns:
        (tuple): tuple containing:

            np.ndarray: complex array of shape ``(rank, len(mu_list), 2L + 1)``
            list of tuple: ``mu_list``
    """
    if rtol is None:
        rtol = config("rc_basis_rtol")
    ll = as_ltuple(ll)

    G, Z = covariant_gramian(A, ll, phi, t)
    mut, _ = _column(phi, t)
    mu_list = collect_m(ll, mut)

    if G.shape[0] == 0:
        return np.zeros((0, len(mu_list), phi.dim), dtype=np.complex128), mu_list

    U, S, _ = np.linalg.svd(G)
    rk = numerical_rank(S, rtol)
    Urc = np.einsum("uma,mr->rua", Z, U[:, :rk]) / np.sqrt(S[:rk])[:, None, None]
    return np.conj(Urc), mu_list


def rcpi_basis_all(
    A: Rot3DCoeffs, ll: Sequence[int], phi: SphericalVector
) -> Tuple[np.ndarray, List[Tuple[int, ...]]]:
    r"""Covariant couplings of all the columns of :math:`D^L`, stacked along the first axis."""
    rotation_D_matrix(phi)
    bases = []
    mu_list = None
    for t in range(phi.dim):
        U, mu_list = rc_basis(A, ll, phi, t)
        bases.append(U)
    return np.concatenate(bases, axis=0), mu_list


def rcpi_gramian(
    A: Rot3DCoeffs, nn: Sequence[Hashable], ll: Sequence[int], phi: SphericalVector
) -> Tuple[np.ndarray, np.ndarray]:
    r"""Gramian of the stacked covariant basis over the permutations leaving ``(nn, ll)`` unchanged.

    Returns:
        (tuple): tuple containing:

            np.ndarray: complex ``G`` of shape ``(n, n)``
            np.ndarray: the stacked basis of :func:`rcpi_basis_all`, shape ``(n, len(mu_list), 2L + 1)``
    """
    ll = as_ltuple(ll)
    nn = tuple(nn)
    if len(nn) != len(ll):
        raise ValueError(f"nn and ll must have the same length, got {nn} and {ll}")

    Uri, Mri = rcpi_basis_all(A, ll, phi)
    N = len(ll)
    index = {mm: i for i, mm in enumerate(Mri)}

    G = np.zeros((Uri.shape[0], Uri.shape[0]), dtype=np.complex128)
    for sigma in itertools.permutations(range(N)):
        if any(nn[s] != nn[i] or ll[s] != ll[i] for i, s in enumerate(sigma)):
            continue
        i1, i2 = [], []
        for iU1, mm1 in enumerate(Mri):
            iU2 = index.get(tuple(mm1[s] for s in sigma))
            if iU2 is not None:
                i1.append(iU1)
                i2.append(iU2)
        G += np.einsum("ipa,jpa->ij", Uri[:, i1], np.conj(Uri[:, i2]))
    return G, Uri


def yvec_symm_basis(
    A: Rot3DCoeffs,
    nn: Sequence[Hashable],
    ll: Sequence[int],
    phi: SphericalVector,
    *,
    rtol: Optional[float] = None,
) -> Tuple[np.ndarray, List[Tuple[int, ...]]]:
    r"""Rotation covariant and permutation invariant basis for the representation ``phi``.

    Emits a warning when ``sum(ll) + L`` is odd, the basis has then no
    definite parity under reflections.

    Returns:
        (tuple): tuple containing:

            np.ndarray: complex array of shape ``(rank, len(mu_list), 2L + 1)``
            list of tuple: ``mu_list``
    """
    ll = as_ltuple(ll)
    if rtol is None:
        rtol = config("rc_basis_rtol")

    if (sum(ll) + phi.L) % 2 != 0:
        if sum(ll) % 2 != 0:
            warnings.warn("To gain reflection covariance, the sum of `ll` shall be even")
        else:
            warnings.warn("To gain reflection covariance, the sum of `ll` shall be odd")

    G, C = rcpi_gramian(A, nn, ll, phi)
    mut, _ = _column(phi, 0)
    mu_list = collect_m(ll, mut)

    if G.shape[0] == 0:
        return np.zeros((0, len(mu_list), phi.dim), dtype=np.complex128), mu_list

    U, S, _ = np.linalg.svd(G)
    rk = numerical_rank(S, rtol)
    Urcpi = np.einsum("rua,rk->kua", C, np.conj(U[:, :rk])) / np.sqrt(S[:rk])[:, None, None]
    return Urcpi, mu_list
