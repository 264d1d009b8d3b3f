import itertools
import logging
import math
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from ace_rotations._src.clebsch_gordan import ClebschGordan
from ace_rotations._src.config import config
from ace_rotations._src.mrange import as_ltuple, mrange

logger = logging.getLogger(__name__)

CouplingKey = Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]]


class Rot3DCoeffs:
    r"""Generalized Clebsch-Gordan coefficients of a cluster of ``N`` bodies.

    The coefficient of angular momenta ``ll`` and magnetic numbers ``mm``, ``kk`` is

    .. math::

        A_{\mathbf{l} \mathbf{m} \mathbf{k}} = \int_{SO(3)} \prod_{i=1}^N D^{l_i}_{m_i k_i}(Q) dQ

    It is computed by coupling the two last legs into an intermediate angular
    momentum, which reduces the ``N``-body coefficient to a sum of ``N-1``-body
    coefficients. The values for ``N >= 3`` are stored per body order, the
    Clebsch-Gordan coefficients in :attr:`cg`. Both caches live as long as the
    object, create a new one to release the memory.

    Note: in this class ``kk`` is a tuple of magnetic numbers, it has nothing
    to do with the radial index ``k`` of the one-particle basis.

    Examples:
        >>> A = Rot3DCoeffs()
        >>> A((0,), (0,), (0,))
        1.0
        >>> A((1, 1), (1, 2), (0, 0))
        0.0
    """

    def __init__(self, cg: Optional[ClebschGordan] = None):
        self.vals: Dict[int, Dict[CouplingKey, float]] = {}
        self.cg = ClebschGordan() if cg is None else cg

    def get_vals(self, N: int) -> Dict[CouplingKey, float]:
        if N not in self.vals:
            self.vals[N] = {}
        return self.vals[N]

    def __call__(self, ll: Sequence[int], mm: Sequence[int], kk: Sequence[int]) -> float:
        ll = tuple(ll)
        mm = tuple(mm)
        kk = tuple(kk)
        N = len(ll)
        assert len(mm) == N and len(kk) == N, (ll, mm, kk)

        if (
            sum(mm) != 0
            or sum(kk) != 0
            or any(abs(m) > l for m, l in zip(mm, ll))
            or any(abs(k) > l for k, l in zip(kk, ll))
        ):
            return 0.0

        if N == 1:
            return 1.0 if ll[0] == 0 else 0.0

        if N == 2:
            if ll[0] != ll[1]:
                return 0.0
            return 8 * math.pi**2 / (2 * ll[0] + 1) * (-1) ** (mm[0] - kk[0])

        vals = self.get_vals(N)
        key = (ll, mm, kk)
        if key not in vals:
            vals[key] = self._compute_val(ll, mm, kk)
        return vals[key]

    def _compute_val(self, ll, mm, kk) -> float:
        val = 0.0
        llp, mmp, kkp = ll[:-2], mm[:-2], kk[:-2]
        l1, l2 = ll[-2:]
        m1, m2 = mm[-2:]
        k1, k2 = kk[-2:]

        for j in range(abs(l1 - l2), l1 + l2 + 1):
            if abs(k1 + k2) > j or abs(m1 + m2) > j:
                continue
            cgk = self.cg(l1, k1, l2, k2, j, k1 + k2)
            cgm = self.cg(l1, m1, l2, m2, j, m1 + m2)
            if cgk * cgm != 0:
                val += cgk * cgm * self(llp + (j,), mmp + (m1 + m2,), kkp + (k1 + k2,))
        return val

    def __repr__(self):
        sizes = ", ".join(f"{N}: {len(v)}" for N, v in sorted(self.vals.items()))
        return f"{self.__class__.__name__}(cg={len(self.cg)}, vals={{{sizes}}})"


def numerical_rank(S: np.ndarray, rtol: float, ref: Optional[float] = None) -> int:
    r"""Number of singular values larger than ``rtol * ref``, ``ref`` defaults to the largest singular value."""
    S = np.asarray(S)
    if S.size == 0:
        return 0
    if ref is None:
        ref = S.max()
    if ref <= 0.0:
        return 0
    return int(np.sum(S > rtol * ref))


def compute_Al(A: Rot3DCoeffs, ll: Sequence[int]) -> np.ndarray:
    r"""Matrix of coupling coefficients ``CC[ik, im] = A(ll, mm, kk)`` over ``mrange(ll)``."""
    ll = as_ltuple(ll)
    Ml = list(mrange(ll))
    CC = np.zeros((len(Ml), len(Ml)), dtype=np.float64)
    for im, mm in enumerate(Ml):
        for ik, kk in enumerate(Ml):
            CC[ik, im] = A(ll, mm, kk)
    return CC


def ri_basis(
    A: Rot3DCoeffs,
    ll: Sequence[int],
    *,
    ordered: bool = False,
    rtol: Optional[float] = None,
) -> np.ndarray:
    r"""Orthonormal basis of rotation invariant couplings of ``ll``.

    Args:
        A (Rot3DCoeffs): coupling coefficients
        ll: tuple of angular momenta
        ordered (bool): only the unordered construction is available
        rtol (float): relative cutoff on the singular values. Default: ``config("ri_basis_rtol")``

    Returns:
        np.ndarray: array of shape ``(rank, len(list(mrange(ll))))``, the columns follow ``mrange(ll)``

    Examples:
        >>> ri_basis(Rot3DCoeffs(), (1, 1, 0)).shape
        (1, 3)
        >>> ri_basis(Rot3DCoeffs(), (1, 1, 1)).shape
        (1, 7)
    """
    if ordered:
        raise NotImplementedError("ri_basis is only implemented for unordered tuples")
    if rtol is None:
        rtol = config("ri_basis_rtol")

    CC = compute_Al(A, ll)
    U, S, _ = np.linalg.svd(CC)
    rk = numerical_rank(S, rtol)
    logger.debug("ri_basis %s: rank %d of %d", ll, rk, len(S))
    return U[:, :rk].T


def gramian(
    nn: Sequence[Hashable],
    ll: Sequence[int],
    Uri: np.ndarray,
    Mri: List[Tuple[int, ...]],
) -> np.ndarray:
    r"""Gramian of ``Uri`` summed over the permutations of the particles that leave ``(nn, ll)`` unchanged.

    .. math::

        G_{ij} = \sum_\sigma \sum_{\mathbf{m}_1 \circ \sigma = \mathbf{m}_2} \overline{U_{i \mathbf{m}_1}} U_{j \mathbf{m}_2}
    """
    N = len(nn)
    nri = Uri.shape[0]
    assert Uri.shape[1] == len(Mri)

    index = {mm: i for i, mm in enumerate(Mri)}
    G = np.zeros((nri, nri), dtype=Uri.dtype)
    for sigma in itertools.permutations(range(N)):
        if any(nn[s] != nn[i] or ll[s] != ll[i] for i, s in enumerate(sigma)):
            continue
        i1, i2 = [], []
        for iU1, mm1 in enumerate(Mri):
            iU2 = index.get(tuple(mm1[s] for s in sigma))
            if iU2 is not None:
                i1.append(iU1)
                i2.append(iU2)
        G += np.conj(Uri[:, i1]) @ Uri[:, i2].T
    return G


def rpi_basis(
    A: Rot3DCoeffs,
    nn: Sequence[Hashable],
    ll: Sequence[int],
    *,
    rtol: Optional[float] = None,
) -> Tuple[np.ndarray, List[Tuple[int, ...]]]:
    r"""Rotation and permutation invariant basis.

    Particles carrying the same label ``(nn[i], ll[i])`` are indistinguishable,
    the couplings related by such permutations are merged.

    Args:
        A (Rot3DCoeffs): coupling coefficients
        nn: labels of the particles (radial indices, or any hashable such as ``(species, n)``)
        ll: tuple of angular momenta, same length as ``nn``
        rtol (float): relative cutoff on the singular values. Default: ``config("rpi_basis_rtol")``

    Returns:
        (tuple): tuple containing:

            np.ndarray: the basis, shape ``(rank, len(Mri))``
            list of tuple: ``Mri``, the magnetic tuples indexing the columns
    """
    ll = as_ltuple(ll)
    nn = tuple(nn)
    if len(nn) != len(ll):
        raise ValueError(f"nn and ll must have the same length, got {nn} and {ll}")
    if rtol is None:
        rtol = config("rpi_basis_rtol")

    Uri = ri_basis(A, ll)
    Mri = list(mrange(ll))
    if Uri.shape[0] == 0:
        return Uri, Mri

    G = gramian(nn, ll, Uri, Mri)
    U, S, _ = np.linalg.svd(G)
    # the non zero eigenvalues of G are the number of permutations leaving (nn, ll) unchanged
    rk = numerical_rank(S, rtol, ref=max(S.max(), 1.0))
    logger.debug("rpi_basis %s %s: rank %d of %d", nn, ll, rk, len(S))
    Urpi = U[:, :rk].T
    return np.diag(np.sqrt(S[:rk])) @ Urpi @ Uri, Mri
