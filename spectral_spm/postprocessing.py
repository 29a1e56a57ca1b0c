from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy.integrate import trapezoid

SCALAR_FIELDS = (
    ('I', 'current'),
    ('V', 'voltage'),
    ('T', 'temperature'),
    ('soc', 'soc'),
    ('j_neg', 'flux_neg'),
    ('j_pos', 'flux_pos'),
    ('theta_surf_neg', 'theta_surf_neg'),
    ('theta_surf_pos', 'theta_surf_pos'),
    ('theta_avg_neg', 'theta_avg_neg'),
    ('theta_avg_pos', 'theta_avg_pos'),
    ('U_neg', 'ocp_neg'),
    ('U_pos', 'ocp_pos'),
    ('eta_neg', 'eta_neg'),
    ('eta_pos', 'eta_pos'),
    ('q_rev', 'q_rev'),
    ('q_rx', 'q_rx'),
    ('q_c', 'q_contact'),
    ('q_conv', 'q_conv'),
)


@dataclass(frozen=True)
class ResultSeries:
    """
    Engineering quantities recomputed from a trajectory, one row per sample.

    Concentration profiles ``c_neg`` / ``c_pos`` have shape
    (n_samples, N + 1) with columns ordered from the particle surface to the
    centre at radii ``r_neg`` / ``r_pos`` [m].
    """
    time: np.ndarray
    current: np.ndarray
    voltage: np.ndarray
    temperature: np.ndarray
    soc: np.ndarray
    flux_neg: np.ndarray
    flux_pos: np.ndarray
    theta_surf_neg: np.ndarray
    theta_surf_pos: np.ndarray
    theta_avg_neg: np.ndarray
    theta_avg_pos: np.ndarray
    ocp_neg: np.ndarray
    ocp_pos: np.ndarray
    eta_neg: np.ndarray
    eta_pos: np.ndarray
    q_rev: np.ndarray
    q_rx: np.ndarray
    q_contact: np.ndarray
    q_conv: np.ndarray
    c_neg: np.ndarray
    c_pos: np.ndarray
    r_neg: np.ndarray
    r_pos: np.ndarray

    def __len__(self):
        return len(self.time)

    def to_dataframe(self, profiles=False):
        """
        Scalar series as a DataFrame indexed by time [s].

        Parameters:
        profiles (bool): Also add one column per concentration node,
            named ``c_neg_0`` (surface) ... ``c_neg_N`` (centre).
        """
        data = {name: getattr(self, name) for _, name in SCALAR_FIELDS}
        df = pd.DataFrame(data, index=pd.Index(self.time, name='time'))
        if profiles:
            for electrode in ('neg', 'pos'):
                c = getattr(self, f'c_{electrode}')
                for k in range(c.shape[1]):
                    df[f'c_{electrode}_{k}'] = c[:, k]
        return df

    def summary(self):
        """Start / end values used by the CLI report."""
        return {
            'n_samples': int(len(self)),
            't_end': float(self.time[-1]),
            'V_start': float(self.voltage[0]),
            'V_end': float(self.voltage[-1]),
            'V_min': float(np.min(self.voltage)),
            'T_max': float(np.max(self.temperature)),
            'soc_start': float(self.soc[0]),
            'soc_end': float(self.soc[-1]),
            'charge_Ah': float(trapezoid(self.current, self.time) / 3600.0) if len(self) > 1 else 0.0,
        }


def postprocess(model, t, y):
    """
    Recompute every derived quantity along a trajectory.

    Each sample goes through ``model.evaluate``, i.e. the same formulas the
    dynamics and the voltage events use.

    Parameters:
    model (SPM): The model that produced the trajectory.
    t (array-like): Sample times, shape (n_samples,).
    y (array-like): States, shape (n_states, n_samples) as returned by
        ``solve_ivp``.

    Returns:
    ResultSeries: One entry per sample.
    """
    t = np.atleast_1d(np.asarray(t, dtype=float))
    y = np.asarray(y, dtype=float)
    if y.ndim == 1:
        y = y[:, None]
    if y.shape != (model.n_states, len(t)):
        raise ValueError(
            f"Expected states of shape ({model.n_states}, {len(t)}), got {y.shape}")

    rows = [model.evaluate(t[k], y[:, k]) for k in range(len(t))]
    series = {name: np.array([row[key] for row in rows]) for key, name in SCALAR_FIELDS}
    n_nodes = model.N + 1
    for electrode in ('neg', 'pos'):
        key = f'c_{electrode}'
        series[key] = np.array([row[key] for row in rows]).reshape(len(t), n_nodes)
        series[f'r_{electrode}'] = np.asarray(model.particles[electrode].r)
    return ResultSeries(time=t, **series)
