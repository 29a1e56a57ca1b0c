import numpy as np


class ConstantCurrent:
    """Constant applied current [A]; positive is discharge."""

    def __init__(self, current):
        self.current = float(current)

    def __call__(self, t):
        if np.ndim(t) == 0:
            return self.current
        return np.full(np.shape(t), self.current)

    def __repr__(self):
        return f"ConstantCurrent({self.current!r})"


class PiecewiseConstantCurrent:
    """
    Current held constant between breakpoints.

    Parameters:
    breakpoints (array-like): Increasing switching times [s].
    currents (array-like): len(breakpoints) + 1 current values [A]; the first
        applies before ``breakpoints[0]``, the last after ``breakpoints[-1]``.

    Example:
    A 1 A pulse between 100 s and 400 s is
    ``PiecewiseConstantCurrent([100, 400], [0, 1, 0])``.
    """

    def __init__(self, breakpoints, currents):
        breakpoints = np.asarray(breakpoints, dtype=float)
        currents = np.asarray(currents, dtype=float)
        if breakpoints.ndim != 1 or currents.ndim != 1:
            raise ValueError('breakpoints and currents must be one-dimensional')
        if len(currents) != len(breakpoints) + 1:
            raise ValueError(
                f"Expected {len(breakpoints) + 1} current values for {len(breakpoints)} breakpoints, "
                f"got {len(currents)}")
        if np.any(np.diff(breakpoints) <= 0):
            raise ValueError('breakpoints must be strictly increasing')
        self.breakpoints = breakpoints
        self.currents = currents

    def __call__(self, t):
        idx = np.searchsorted(self.breakpoints, t, side='right')
        value = self.currents[idx]
        return float(value) if np.ndim(t) == 0 else value

    def __repr__(self):
        return f"PiecewiseConstantCurrent({self.breakpoints.tolist()}, {self.currents.tolist()})"


def c_rate_current(c_rate, C_nom):
    """Constant current for a given C-rate and nominal capacity [Ah]."""
    return ConstantCurrent(c_rate * C_nom)
