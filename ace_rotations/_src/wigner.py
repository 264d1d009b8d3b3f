from typing import List, Sequence, Tuple

import jax
import jax.numpy as jnp
import jax.scipy.linalg
import numpy as np


def naive_broadcast_decorator(func):
    def wrapper(*args):
        args = [jnp.asarray(a) for a in args]
        shape = jnp.broadcast_shapes(*(arg.shape for arg in args))
        args = [jnp.broadcast_to(arg, shape) for arg in args]
        f = func
        for _ in range(len(shape)):
            f = jax.vmap(f)
        return f(*args)

    return wrapper


def angular_momentum_generators(l: int) -> np.ndarray:
    r"""Angular momentum operators :math:`(J_x, J_y, J_z)` in the basis :math:`|l, m\rangle`, :math:`m = -l, \dots, l`.

    Returns:
        np.ndarray: complex array of shape ``(3, 2l + 1, 2l + 1)``
    """
    m = np.arange(-l, l)
    raising = np.diag(np.sqrt(l * (l + 1) - m * (m + 1)), k=-1).astype(np.complex128)
    lowering = raising.T
    return np.stack(
        [
            0.5 * (raising + lowering),
            -0.5j * (raising - lowering),
            np.diag(np.arange(-l, l + 1)).astype(np.complex128),
        ],
        axis=0,
    )


def wigner_D(l: int, alpha: jnp.ndarray, beta: jnp.ndarray, gamma: jnp.ndarray) -> jnp.ndarray:
    r"""Complex Wigner matrix :math:`D^l_{m k}(\alpha, \beta, \gamma) = e^{-i m \alpha} d^l_{m k}(\beta) e^{-i k \gamma}`.

    The rows and columns are ordered as :math:`m = -l, \dots, l`. This is the
    convention of :func:`ace_rotations.clebschgordan` and of the coupling
    coefficients of :class:`ace_rotations.Rot3DCoeffs`.

    Args:
        l (int): the angular momentum
        alpha (`jax.numpy.ndarray`): array of shape :math:`(...)`
        beta (`jax.numpy.ndarray`): array of shape :math:`(...)`
        gamma (`jax.numpy.ndarray`): array of shape :math:`(...)`

    Returns:
        `jax.numpy.ndarray`: array of shape :math:`(..., 2l+1, 2l+1)`
    """
    # -i J_y is real
    K = np.real(-1j * angular_momentum_generators(l)[1])
    m = jnp.arange(-l, l + 1)

    def f(a, b, c):
        d = jax.scipy.linalg.expm(b * K)
        return jnp.exp(-1j * m * a)[:, None] * d * jnp.exp(-1j * m * c)[None, :]

    return naive_broadcast_decorator(f)(alpha, beta, gamma)


def mlist_wigner_D(
    ll: Sequence[int],
    Ml: List[Tuple[int, ...]],
    alpha: jnp.ndarray,
    beta: jnp.ndarray,
    gamma: jnp.ndarray,
) -> jnp.ndarray:
    r"""Tensor product of Wigner matrices restricted to a list of magnetic tuples.

    .. math::

        D_{\mathbf{m} \mathbf{k}} = \prod_i D^{l_i}_{m_i k_i}

    A basis returned together with ``Ml`` is rotation invariant when
    ``basis @ mlist_wigner_D(ll, Ml, *abc) == basis``.

    Args:
        ll: tuple of angular momenta
        Ml: list of magnetic tuples, for instance ``list(mrange(ll))``
        alpha, beta, gamma: scalar angles

    Returns:
        `jax.numpy.ndarray`: array of shape ``(len(Ml), len(Ml))``
    """
    ll = tuple(int(l) for l in ll)
    idx = np.array(Ml, dtype=np.int32).reshape(-1, len(ll)) + np.array(ll, dtype=np.int32)[None, :]

    out = jnp.ones((idx.shape[0], idx.shape[0]))
    for i, l in enumerate(ll):
        D = wigner_D(l, alpha, beta, gamma)
        out = out * D[idx[:, i][:, None], idx[:, i][None, :]]
    return out
