import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.integrate import solve_ivp

from .current import c_rate_current
from .errors import IntegrationError
from .events import voltage_limit_events
from .model import SPM
from .postprocessing import ResultSeries, postprocess

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    t: np.ndarray
    y: np.ndarray
    status: int
    message: str
    terminated_by: Optional[str]
    series: Optional[ResultSeries]

    @property
    def V(self):
        return self.series.voltage if self.series is not None else None

    @property
    def T(self):
        return self.series.temperature if self.series is not None else None


def simulate(model, t_span=None, t_eval=None, y0=None, method='BDF', rtol=1e-6, atol=1e-9,
             max_step=None, V_min=None, V_max=None, with_postprocessing=True):
    """
    Integrate the model until the final time or the first voltage limit.

    Parameters:
    model (SPM): Model, including its current profile.
    t_span (tuple, optional): (t0, t_end) [s]. Defaults to the range of ``t_eval``.
    t_eval (array-like, optional): Sample times to report. If omitted the
        solver's own steps are returned.
    y0 (array-like, optional): Initial state, ``model.initial_state()`` by default.
    method (str): ``solve_ivp`` method, e.g. 'BDF', 'LSODA', 'Radau' or 'RK45'.
    rtol, atol (float): Solver tolerances.
    max_step (float, optional): Largest step; defaults to 1/500 of the span.
    V_min, V_max (float, optional): Cut-off voltages; default to the cell limits.
    with_postprocessing (bool): Attach a ``ResultSeries`` to the result.

    Returns:
    SimulationResult: Trajectory, solver status and the derived series. When a
    voltage limit stops the run, the event point is the last sample.

    Raises:
    IntegrationError: if the solver fails; the solver message is kept verbatim.
    NumericalDomainError: if the state leaves the physical domain.
    """
    if t_eval is not None:
        t_eval = np.asarray(t_eval, dtype=float)
        if t_span is None:
            t_span = (float(t_eval[0]), float(t_eval[-1]))
    if t_span is None:
        raise ValueError('Either t_span or t_eval must be given')
    t0, t_end = float(t_span[0]), float(t_span[1])
    if t_end <= t0:
        raise ValueError(f"Final time {t_end} must be after the initial time {t0}")
    if y0 is None:
        y0 = model.initial_state()
    y0 = np.asarray(y0, dtype=float)
    if max_step is None:
        max_step = (t_end - t0) / 500

    events = voltage_limit_events(model, V_min, V_max)
    V0 = model.voltage(t0, y0)
    for event in events:
        if not event.inside(V0):
            logger.warning("Initial voltage %.4f V is already past the %s limit %.3f V",
                           V0, event.kind, event.limit)

    logger.info("Integrating %s from %.1f s to %.1f s with %s", model.current, t0, t_end, method)
    sol = solve_ivp(model.rhs, (t0, t_end), y0, method=method, t_eval=t_eval, events=events,
                    rtol=rtol, atol=atol, max_step=max_step)
    if sol.status == -1:
        raise IntegrationError(sol.message)

    t, y = sol.t, sol.y
    terminated_by = None
    if sol.status == 1:
        for event, t_hit, y_hit in zip(events, sol.t_events, sol.y_events):
            if len(t_hit):
                terminated_by = event.kind
                if len(t) == 0 or t_hit[0] > t[-1]:
                    t = np.append(t, t_hit[0])
                    y = np.hstack([y, y_hit[0][:, None]])
                logger.warning("Stopped at t = %.1f s on the %s voltage limit (%.3f V)",
                               t_hit[0], event.kind, event.limit)
                break
    else:
        logger.info("Reached the final time %.1f s", t_end)

    series = postprocess(model, t, y) if with_postprocessing else None
    return SimulationResult(t=t, y=y, status=sol.status, message=sol.message,
                            terminated_by=terminated_by, series=series)


def simulate_constant_current(c_rate, t_end, model=None, dt=None, **kwargs):
    """
    Constant C-rate run from the model's default initial state.

    Parameters:
    c_rate (float): C-rate, positive for discharge.
    t_end (float): Final time [s].
    model (SPM, optional): Model to use; the default LCO cell with N = 6.
    dt (float, optional): Sampling interval of the reported trajectory [s].

    Returns:
    SimulationResult
    """
    if model is None:
        model = SPM()
    model = model.with_current(c_rate_current(c_rate, model.p.cell.C_nom))
    t_eval = None
    if dt is not None:
        t_eval = np.arange(0.0, t_end + 0.5 * dt, dt)
    return simulate(model, t_span=(0.0, t_end), t_eval=t_eval, **kwargs)
