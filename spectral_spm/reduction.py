"""
Reduction of the spherical diffusion equation to a linear state-space model.

With u = r c and x = r / R the particle diffusion equation becomes

    du/dt = D_s / R^2 * d2u/dx2,    du/dx(1) - u(1) = -R^2 j / D_s

on x in [-1, 1], with u odd in x and u(0) = 0. Collocating on the 2N + 1
Chebyshev nodes, folding the odd symmetry and eliminating the surface node
through the boundary condition leaves the N - 1 inner nodes as states:

    du_inner/dt = D_s A u_inner + B j
    c_(surface, inner) = C u_inner + D j / D_s

The centre concentration is recovered separately from the inner and surface
concentrations (see ``ReducedParticle.centre_concentration``).
"""
import logging
from dataclasses import dataclass

import numpy as np

from .chebyshev import chebyshev_operators, clenshaw_curtis_weights
from .errors import ConfigurationError, DiscretizationError

logger = logging.getLogger(__name__)


def exchange_matrix(n):
    """Backward identity (ones on the anti-diagonal), its own inverse."""
    return np.fliplr(np.eye(n))


def fold_odd(D, N):
    """
    Fold a (2N+1) x (2N+1) operator acting on an odd function onto the
    first N nodes: D[:N, :N] - D[:N, N+1:] P.
    """
    return D[:N, :N] - D[:N, N + 1:] @ exchange_matrix(N)


def fold_even(D, N):
    """Same as ``fold_odd`` for an even function: D[:N, :N] + D[:N, N+1:] P."""
    return D[:N, :N] + D[:N, N + 1:] @ exchange_matrix(N)


@dataclass(frozen=True)
class ReducedParticle:
    """
    Reduced diffusion model of one spherical particle.

    Attributes:
    N (int): Truncation order; the half particle has N + 1 nodes.
    R_s (float): Particle radius [m].
    x (np.ndarray): Half-particle nodes, from the surface (1) to the centre (0).
    A (np.ndarray): (N-1, N-1) state matrix, to be multiplied by D_s(T).
    B (np.ndarray): (N-1,) input vector for the molar flux j.
    C (np.ndarray): (N, N-1) output map to the surface and inner concentrations.
    D (np.ndarray): (N,) flux feed-through, to be divided by D_s(T).
    surface_weights (np.ndarray): (N-1,) weights of u_inner in u_surface.
    surface_flux (float): Coefficient of R^2 j / D_s in u_surface.
    centre_weights (np.ndarray): (N,) weights of c_(surface, inner) in c_centre.
    centre_flux (float): Coefficient of R j / D_s in c_centre.
    volume_weights (np.ndarray): (N,) weights of u on the surface and inner
        nodes giving the volume-averaged concentration.
    """
    N: int
    R_s: float
    x: np.ndarray
    A: np.ndarray
    B: np.ndarray
    C: np.ndarray
    D: np.ndarray
    surface_weights: np.ndarray
    surface_flux: float
    centre_weights: np.ndarray
    centre_flux: float
    volume_weights: np.ndarray

    @property
    def n_states(self):
        return self.N - 1

    @property
    def r(self):
        """Physical radial coordinate of the half-particle nodes [m]."""
        return self.R_s * self.x

    def derivative(self, u_inner, j, D_s):
        """Time derivative of the reduced state for flux ``j`` and diffusivity ``D_s``."""
        return D_s * (self.A @ u_inner) + self.B * j

    def surface_u(self, u_inner, j, D_s):
        """Transformed variable u = r c at the surface node."""
        return self.surface_weights @ u_inner + self.surface_flux * self.R_s**2 * j / D_s

    def concentrations(self, u_inner, j, D_s):
        """Concentration at the surface and inner nodes (surface first)."""
        return self.C @ u_inner + self.D * j / D_s

    def centre_concentration(self, c_outer, j, D_s):
        """Concentration at the particle centre from the surface and inner values."""
        return self.centre_weights @ c_outer + self.centre_flux * self.R_s * j / D_s

    def profile(self, u_inner, j, D_s):
        """Concentration at all N + 1 half-particle nodes, surface to centre."""
        c_outer = self.concentrations(u_inner, j, D_s)
        return np.append(c_outer, self.centre_concentration(c_outer, j, D_s))

    def full_u(self, u_inner, j, D_s):
        """u on the N + 1 half-particle nodes, surface to centre (centre is 0)."""
        return np.concatenate([[self.surface_u(u_inner, j, D_s)], u_inner, [0.0]])

    def average_concentration(self, u_inner, j, D_s):
        """
        Volume-averaged concentration 3 / R^3 * int_0^R c r^2 dr.

        Evaluated as (3 / R) * int_0^1 u x dx with Clenshaw-Curtis weights,
        which is exact because u x is a polynomial of degree <= 2N.

        The surface value carries the flux term R^2 j / D_s, so switching the
        current on shifts the average by a term linear in ``j`` before any
        charge has passed. The shift vanishes as N grows.
        """
        u_outer = self.full_u(u_inner, j, D_s)[:self.N]
        return self.volume_weights @ u_outer

    def uniform_state(self, concentration):
        """Reduced state of a particle at uniform ``concentration`` (u = c R x)."""
        return concentration * self.R_s * self.x[1:self.N]


def reduce_particle(R_s, operators):
    """
    Build the reduced state-space model of a particle of radius ``R_s``.

    Parameters:
    R_s (float): Particle radius [m].
    operators (ChebyshevOperators): Operators of order M = 2N.

    Returns:
    ReducedParticle: Matrices A, B, C, D and the surface / centre helpers.

    Raises:
    ConfigurationError: if the radius is not a positive number.
    DiscretizationError: if M is odd, N < 2, or the surface boundary
        coefficient 1 - D1~[0, 0] vanishes.
    """
    if not np.isfinite(R_s) or R_s <= 0:
        raise ConfigurationError(f"Particle radius must be positive, got {R_s!r}")
    M = operators.M
    if M % 2:
        raise DiscretizationError(f"Operators must have an even order M = 2N, got M = {M}")
    N = M // 2
    if N < 2:
        raise DiscretizationError(f"N must be at least 2 to leave an inner node, got N = {N}")

    x = operators.nodes[:N + 1]
    D1_t = fold_odd(operators.D1, N)
    D2_t = fold_odd(operators.D2, N)

    # u_surface = (D1~[0, 1:] u_inner + R^2 j / D_s) / (1 - D1~[0, 0])
    boundary = 1.0 - D1_t[0, 0]
    if not np.isfinite(boundary) or abs(boundary) < np.finfo(float).eps:
        raise DiscretizationError(
            f"Degenerate discretization: 1 - D1~[0, 0] = {boundary!r} for N = {N}")
    surface_weights = D1_t[0, 1:] / boundary
    surface_flux = 1.0 / boundary

    A = (D2_t[1:, 1:] + np.outer(D2_t[1:, 0], surface_weights)) / R_s**2
    B = D2_t[1:, 0] / boundary

    C = np.zeros((N, N - 1))
    C[0, :] = surface_weights / R_s
    C[1:, :] = np.diag(1.0 / (R_s * x[1:N]))
    D = np.zeros(N)
    D[0] = R_s / boundary

    # dc/dx(1) = -R j / D_s with c even; solve the surface row for c_centre
    D1 = operators.D1
    pivot = D1[0, N]
    if abs(pivot) < np.finfo(float).eps:
        raise DiscretizationError(f"Degenerate discretization: D1[0, N] = {pivot!r}")
    centre_weights = -fold_even(D1, N)[0] / pivot
    centre_flux = -1.0 / pivot

    # u x is even, so the integral over [0, 1] is half the one over [-1, 1]
    volume_weights = 3.0 / R_s * clenshaw_curtis_weights(M)[:N] * x[:N]

    for array in (x, A, B, C, D, surface_weights, centre_weights, volume_weights):
        array.setflags(write=False)
    logger.debug("Reduced particle of radius %.3g m to %d states", R_s, N - 1)
    return ReducedParticle(
        N=N, R_s=float(R_s), x=x, A=A, B=B, C=C, D=D,
        surface_weights=surface_weights, surface_flux=surface_flux,
        centre_weights=centre_weights, centre_flux=centre_flux,
        volume_weights=volume_weights,
    )


def build_particles(N, radii):
    """
    Reduce several particles with shared Chebyshev operators of order 2N.

    Parameters:
    N (int): Truncation order (N + 1 nodes on the half particle), N >= 2.
    radii (dict): ``{name: radius}``.

    Returns:
    tuple: (ChebyshevOperators, dict of ReducedParticle keyed like ``radii``).
    """
    if isinstance(N, (bool, np.bool_)) or not isinstance(N, (int, np.integer)):
        raise DiscretizationError(f"N must be an integer, got {N!r}")
    if N < 2:
        raise DiscretizationError(f"N must be at least 2 to leave an inner node, got N = {N}")
    operators = chebyshev_operators(2 * int(N))
    return operators, {name: reduce_particle(R_s, operators) for name, R_s in radii.items()}
