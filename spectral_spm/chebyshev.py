"""
Chebyshev collocation operators.

The differentiation matrices follow the construction of Weideman and Reddy,
"A MATLAB differentiation matrix suite", ACM TOMS 26 (2000) 465-519:

    - nodes are placed with ``sin`` instead of ``cos`` so that they are exactly
      symmetric about zero,
    - the differences x_i - x_j are built from trigonometric identities and the
      lower half of the matrix is obtained by flipping the upper half,
    - the diagonal is set with the negative sum trick (rows of a
      differentiation matrix sum to zero),
    - higher derivatives follow from a recurrence instead of powers of D1.

All of this keeps the round-off low at high orders, where the textbook
formulas lose several digits.
"""
import logging
from dataclasses import dataclass

import numpy as np
from scipy.linalg import toeplitz

from .errors import DiscretizationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChebyshevOperators:
    """Chebyshev-Gauss-Lobatto nodes and differentiation matrices for order M."""
    M: int
    nodes: np.ndarray
    D1: np.ndarray
    D2: np.ndarray


def _check_order(M, minimum=1):
    if isinstance(M, (bool, np.bool_)) or not isinstance(M, (int, np.integer)):
        raise DiscretizationError(f"Order must be an integer, got {M!r}")
    if M < minimum:
        raise DiscretizationError(f"Order must be at least {minimum}, got {M}")
    return int(M)


def chebdif(n_points, n_derivatives):
    """
    Chebyshev differentiation matrices on ``n_points`` Gauss-Lobatto nodes.

    Parameters:
    n_points (int): Number of nodes (polynomial degree + 1), at least 2.
    n_derivatives (int): Highest derivative order, between 1 and n_points - 1.

    Returns:
    tuple:
        - x: nodes on [-1, 1], ordered from +1 down to -1.
        - DM: array of shape (n_derivatives, n_points, n_points); DM[l-1] is
          the l-th derivative matrix.
    """
    N = _check_order(n_points, minimum=2)
    M = _check_order(n_derivatives)
    if M >= N:
        raise DiscretizationError(
            f"Derivative order {M} must be lower than the number of nodes {N}")

    identity = np.eye(N, dtype=bool)
    n1 = N // 2
    n2 = int(np.ceil(N / 2))

    k = np.arange(N)
    th = k * np.pi / (N - 1)
    x = np.sin(np.pi * np.arange(N - 1, -N, -2) / (2 * (N - 1)))

    # DX[i, j] = x_i - x_j via trig identities, lower half by flipping
    T = np.tile(th[:, None] / 2, (1, N))
    DX = 2 * np.sin(T.T + T) * np.sin(T.T - T)
    DX = np.vstack([DX[:n1], -np.flipud(np.fliplr(DX[:n2]))])
    DX[identity] = 1.0

    # C[i, j] = (-1)^(i+j) c_i / c_j
    C = toeplitz((-1.0) ** k)
    C[0, :] *= 2
    C[-1, :] *= 2
    C[:, 0] /= 2
    C[:, -1] /= 2

    Z = 1.0 / DX
    Z[identity] = 0.0

    D = np.eye(N)
    DM = np.zeros((M, N, N))
    for ell in range(1, M + 1):
        D = ell * Z * (C * np.tile(np.diag(D)[:, None], (1, N)) - D)
        D[identity] = -np.sum(D, axis=1)
        DM[ell - 1] = D
    return x, DM


def chebyshev_operators(M, max_order=2):
    """
    Nodes and first/second differentiation matrices for polynomial order M.

    Parameters:
    M (int): Polynomial order, giving M + 1 nodes. Must be >= 1.
    max_order (int): Highest derivative to build (1 or 2). With M == 1 only the
        first derivative exists and D2 is returned as zeros.

    Returns:
    ChebyshevOperators: Frozen record with ``nodes``, ``D1`` and ``D2``.
    """
    M = _check_order(M)
    if max_order not in (1, 2):
        raise DiscretizationError(f"max_order must be 1 or 2, got {max_order!r}")
    order = min(max_order, M)
    x, DM = chebdif(M + 1, order)
    D1 = DM[0]
    D2 = DM[1] if order == 2 else np.zeros_like(D1)
    for array in (x, D1, D2):
        array.setflags(write=False)
    logger.debug("Built Chebyshev operators of order %d (%d nodes)", M, M + 1)
    return ChebyshevOperators(M=M, nodes=x, D1=D1, D2=D2)


def clenshaw_curtis_weights(M):
    """
    Clenshaw-Curtis quadrature weights on the M + 1 Chebyshev nodes.

    The weights are ordered like the nodes of ``chebdif`` (from +1 to -1) and
    integrate polynomials of degree <= M exactly over [-1, 1].
    """
    M = _check_order(M)
    theta = np.pi * np.arange(M + 1) / M
    w = np.zeros(M + 1)
    interior = np.arange(1, M)
    v = np.ones(M - 1)
    if M % 2 == 0:
        w[0] = w[M] = 1.0 / (M**2 - 1)
        for k in range(1, M // 2):
            v -= 2 * np.cos(2 * k * theta[interior]) / (4 * k**2 - 1)
        v -= np.cos(M * theta[interior]) / (M**2 - 1)
    else:
        w[0] = w[M] = 1.0 / M**2
        for k in range(1, (M - 1) // 2 + 1):
            v -= 2 * np.cos(2 * k * theta[interior]) / (4 * k**2 - 1)
    w[interior] = 2 * v / M
    return w
