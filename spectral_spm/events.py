"""
Terminal events for the time integration.

An event is any callable ``(t, y) -> float`` carrying the two attributes read
by ``scipy.integrate.solve_ivp``:

    terminal  - stop the integration at the first zero crossing,
    direction - only count crossings with this sign of slope
                (-1: from positive to negative, +1: from negative to positive,
                0: both).
"""
import numpy as np

from .errors import ConfigurationError

LOWER = 'lower'
UPPER = 'upper'


class VoltageLimitEvent:
    """
    Zero crossing of ``V(t, y) - limit``.

    A lower limit is reached when the voltage falls through it (direction -1),
    an upper limit when the voltage rises through it (direction +1). Crossings
    in the opposite direction, i.e. coming back into the operating window, are
    ignored. The voltage is always computed by ``model.voltage`` so the event
    and the reported voltage cannot disagree.
    """
    terminal = True

    def __init__(self, model, limit, kind):
        if kind not in (LOWER, UPPER):
            raise ValueError(f"kind must be {LOWER!r} or {UPPER!r}, got {kind!r}")
        self.model = model
        self.limit = float(limit)
        self.kind = kind
        self.direction = -1.0 if kind == LOWER else 1.0

    def __call__(self, t, y):
        return self.model.voltage(t, y) - self.limit

    def inside(self, voltage):
        """True if ``voltage`` lies on the valid side of this limit."""
        if self.kind == LOWER:
            return voltage > self.limit
        return voltage < self.limit

    def __repr__(self):
        return f"VoltageLimitEvent({self.kind}, {self.limit} V)"


def voltage_limit_events(model, V_min=None, V_max=None):
    """
    Lower and upper cut-off events; limits default to the cell parameters.

    Returns:
    list: [lower event, upper event]. A limit given as +/- inf is left out.
    """
    V_min = model.p.cell.V_min if V_min is None else V_min
    V_max = model.p.cell.V_max if V_max is None else V_max
    if V_min >= V_max:
        raise ConfigurationError(f"V_min ({V_min}) must be lower than V_max ({V_max})")
    events = []
    if np.isfinite(V_min):
        events.append(VoltageLimitEvent(model, V_min, LOWER))
    if np.isfinite(V_max):
        events.append(VoltageLimitEvent(model, V_max, UPPER))
    return events
