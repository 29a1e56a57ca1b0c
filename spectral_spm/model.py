import copy
import logging

import numpy as np

from .current import ConstantCurrent
from .errors import InitialConditionError, NumericalDomainError
from .ocp import GRAPHITE_OCP, LCO_OCP
from .parameters import SPMParams
from .reduction import build_particles

logger = logging.getLogger(__name__)

ELECTRODE_NAMES = {'neg': 'anode', 'pos': 'cathode'}


class SPM:
    """
    Thermal Single Particle Model discretised with Chebyshev collocation.

    - Solid diffusion in each electrode particle is reduced to
        du/dt = D_s(T) A u + B j
      on the N - 1 inner collocation nodes (see ``reduction.py``).
    - Reaction fluxes follow from the applied current by charge conservation:
        j_neg = +I / (a_neg F A L_neg),   j_pos = -I / (a_pos F A L_pos)
    - Overpotentials invert a symmetric Butler-Volmer relation:
        eta = 2RT/F * asinh(F j / (2 i0)),   i0 = k(T) F sqrt(c_e c_s (c_max - c_s))
      The closed form only holds for anodic and cathodic transfer coefficients
      both equal to 0.5, which is a constraint of this model.
    - Terminal voltage:
        V = (U_pos + eta_pos) - (U_neg + eta_neg) - R_c i_app
    - Lumped thermal balance:
        rho c_p dT/dt = q_rev + q_rx + q_c + q_conv

    The state vector is [u_neg (N-1), u_pos (N-1), T]. Current is positive on
    discharge. ``rhs``, ``voltage`` and ``evaluate`` are pure functions of
    (t, y) and can be called on trial states the solver later rejects.
    """

    def __init__(self, params=None, N=6, current=None, ocp_neg=None, ocp_pos=None):
        self.p = (params if params is not None else SPMParams()).validate()
        self.N = N
        self.current = current if current is not None else ConstantCurrent(0.0)
        # default fits are expanded about the parameter set's reference temperature
        T_ref = self.p.thermal.T_ref
        self.ocp = {
            'neg': ocp_neg if ocp_neg is not None else GRAPHITE_OCP.at_reference(T_ref),
            'pos': ocp_pos if ocp_pos is not None else LCO_OCP.at_reference(T_ref),
        }
        self.operators, self.particles = build_particles(
            N, {'neg': self.p.neg.R_s, 'pos': self.p.pos.R_s})
        self.n_particle_states = N - 1
        self.n_states = 2 * (N - 1) + 1
        logger.debug("SPM built with N = %d (%d states)", N, self.n_states)

    def with_current(self, current):
        """Copy of the model driven by another current profile; operators are shared."""
        model = copy.copy(self)
        model.current = current
        return model

    def electrode(self, name):
        return getattr(self.p, name)

    # ------------------------------------------------------------------
    # State handling
    # ------------------------------------------------------------------
    def split_state(self, y):
        n = self.n_particle_states
        y = np.asarray(y, dtype=float)
        return y[:n], y[n:2 * n], y[2 * n]

    def initial_state(self, theta_neg0=None, theta_pos0=None, T0=None):
        """
        State vector of a cell at rest with uniform stoichiometry in each particle.

        Parameters:
        theta_neg0 (float): Anode stoichiometry; defaults to its 100 % SOC value.
        theta_pos0 (float): Cathode stoichiometry; defaults to its 100 % SOC value.
        T0 (float): Cell temperature [K]; defaults to the ambient temperature.

        Returns:
        np.ndarray: y0 = [u_neg, u_pos, T0].

        Raises:
        InitialConditionError: if a stoichiometry is not in (0, 1) or T0 <= 0.
        """
        theta0 = {
            'neg': self.p.neg.stoich_soc100 if theta_neg0 is None else theta_neg0,
            'pos': self.p.pos.stoich_soc100 if theta_pos0 is None else theta_pos0,
        }
        T0 = self.p.thermal.T_amb if T0 is None else T0
        for name, theta in theta0.items():
            if not np.isfinite(theta) or not 0 < theta < 1:
                raise InitialConditionError(
                    f"Initial {ELECTRODE_NAMES[name]} stoichiometry must lie in (0, 1), got {theta!r}")
        if not np.isfinite(T0) or T0 <= 0:
            raise InitialConditionError(f"Initial temperature must be positive, got {T0!r} K")
        u = [self.particles[name].uniform_state(theta0[name] * self.electrode(name).c_s_max)
             for name in ('neg', 'pos')]
        return np.concatenate(u + [[float(T0)]])

    # ------------------------------------------------------------------
    # Electrochemistry
    # ------------------------------------------------------------------
    def reaction_fluxes(self, I):
        """Molar reaction fluxes [mol/(m^2 s)] at the particle surfaces."""
        F, A = self.p.const.F, self.p.cell.A
        j_neg = I / (self.p.neg.a_s * F * A * self.p.neg.L)
        j_pos = -I / (self.p.pos.a_s * F * A * self.p.pos.L)
        return j_neg, j_pos

    def diffusivity(self, name, T):
        e = self.electrode(name)
        return self.p.arrhenius(e.D_s_ref, e.E_D, T)

    def rate_constant(self, name, T):
        e = self.electrode(name)
        return self.p.arrhenius(e.k_ref, e.E_k, T)

    def exchange_current_density(self, name, c_surf, T):
        """i0 = k(T) F sqrt(c_e) sqrt(c_surf) sqrt(c_max - c_surf) [A/m^2]."""
        c_max = self.electrode(name).c_s_max
        _check_open_interval(name, 'surface concentration', c_surf, 0.0, c_max)
        return (self.rate_constant(name, T) * self.p.const.F * np.sqrt(self.p.cell.c_e)
                * np.sqrt(c_surf) * np.sqrt(c_max - c_surf))

    def overpotential(self, name, j, i0, T):
        """Closed-form inverse of the symmetric (alpha = 0.5) Butler-Volmer equation."""
        F, R = self.p.const.F, self.p.const.R
        arg = F * j / (2 * i0)
        if not np.isfinite(arg):
            raise NumericalDomainError(ELECTRODE_NAMES[name], 'asinh argument', arg)
        return 2 * R * T / F * np.arcsinh(arg)

    def _algebra(self, t, y):
        """Everything the dynamics, events and post-processing share."""
        y = np.asarray(y, dtype=float)
        if not np.all(np.isfinite(y)):
            raise NumericalDomainError('cell', 'state vector', y, 'non-finite entries')
        u_neg, u_pos, T = self.split_state(y)
        if T <= 0:
            raise NumericalDomainError('cell', 'temperature', T)

        I = float(self.current(t))
        j = dict(zip(('neg', 'pos'), self.reaction_fluxes(I)))
        u = {'neg': u_neg, 'pos': u_pos}
        out = {'t': float(t), 'I': I, 'i_app': I / self.p.cell.A, 'T': float(T)}
        for name in ('neg', 'pos'):
            particle = self.particles[name]
            c_max = self.electrode(name).c_s_max
            D_s = self.diffusivity(name, T)
            c_surf = particle.concentrations(u[name], j[name], D_s)[0]
            i0 = self.exchange_current_density(name, c_surf, T)
            theta = c_surf / c_max
            U, dUdT = self.ocp[name](theta, T)
            eta = self.overpotential(name, j[name], i0, T)
            out.update({
                f'j_{name}': j[name],
                f'D_s_{name}': D_s,
                f'c_surf_{name}': c_surf,
                f'theta_surf_{name}': theta,
                f'U_{name}': U,
                f'dUdT_{name}': dUdT,
                f'i0_{name}': i0,
                f'eta_{name}': eta,
            })

        out['V'] = ((out['U_pos'] + out['eta_pos']) - (out['U_neg'] + out['eta_neg'])
                    - self.p.cell.R_c * out['i_app'])

        th, L, V_cell = self.p.thermal, self.p.L_cell, self.p.V_cell
        i_app = out['i_app']
        out['q_rev'] = -i_app / L * T * (out['dUdT_pos'] - out['dUdT_neg'])
        out['q_rx'] = i_app / L * (out['eta_neg'] - out['eta_pos'])
        out['q_c'] = self.p.cell.R_c * self.p.cell.A * i_app**2 / V_cell
        out['q_conv'] = -th.h * th.A_cool * (T - th.T_amb) / V_cell
        out['dTdt'] = (out['q_rev'] + out['q_rx'] + out['q_c'] + out['q_conv']) / (th.rho * th.c_p)
        return out, u

    def voltage(self, t, y):
        """Terminal voltage [V] at time ``t`` and state ``y``."""
        out, _ = self._algebra(t, y)
        return out['V']

    def rhs(self, t, y):
        """Time derivative of the state vector."""
        out, u = self._algebra(t, y)
        du = [self.particles[name].derivative(u[name], out[f'j_{name}'], out[f'D_s_{name}'])
              for name in ('neg', 'pos')]
        return np.concatenate(du + [[out['dTdt']]])

    def evaluate(self, t, y):
        """
        All derived quantities at one sample, using the same algebra as ``rhs``.

        Returns:
        dict: scalars (voltage, temperature, fluxes, OCPs, overpotentials, heat
        terms, average stoichiometries, SOC) plus the concentration profiles
        ``c_neg`` / ``c_pos`` on the half-particle nodes, surface to centre.
        """
        out, u = self._algebra(t, y)
        for name in ('neg', 'pos'):
            particle = self.particles[name]
            j, D_s = out[f'j_{name}'], out[f'D_s_{name}']
            out[f'c_{name}'] = particle.profile(u[name], j, D_s)
            out[f'theta_avg_{name}'] = particle.average_concentration(u[name], j, D_s) / self.electrode(name).c_s_max
        neg = self.p.neg
        out['soc'] = (out['theta_avg_neg'] - neg.stoich_soc0) / (neg.stoich_soc100 - neg.stoich_soc0)
        return out


def _check_open_interval(name, quantity, value, lower, upper):
    if not (np.isfinite(value) and lower < value < upper):
        raise NumericalDomainError(
            ELECTRODE_NAMES.get(name, name), quantity, value,
            f"expected a value in ({lower:g}, {upper:g})")
