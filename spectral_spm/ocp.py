import numpy as np


def U_p(theta):
    # LiCoO2 positive OCP fit at the reference temperature
    # valid for theta roughly in [0.49, 1]
    t2 = theta**2
    num = (-4.656 + 88.669*t2 - 401.119*t2**2 + 342.909*t2**3
           - 462.471*t2**4 + 433.434*t2**5)
    den = (-1.0 + 18.933*t2 - 79.532*t2**2 + 37.311*t2**3
           - 73.083*t2**4 + 95.96*t2**5)
    return num / den


def U_n(theta):
    # MCMB graphite negative OCP fit at the reference temperature
    return (0.7222 + 0.1387*theta + 0.029*theta**0.5 - 0.0172/theta
            + 0.0019/theta**1.5 + 0.2808*np.exp(0.9 - 15*theta)
            - 0.7984*np.exp(0.4465*theta - 0.4108))


def dUdT_p(theta):
    # LiCoO2 entropic coefficient [V/K]
    theta = 1.062 * theta
    return (-0.001 * (0.199521039 - 0.928373822*theta + 1.364550689000003*theta**2
                      - 0.6115448939999998*theta**3)
            / (1 - 5.661479886999997*theta + 11.47636191*theta**2
               - 9.82431213599998*theta**3 + 3.048755063*theta**4))


def dUdT_n(theta):
    # MCMB graphite entropic coefficient [V/K]
    return (0.001 * (0.005269056 + 3.299265709*theta - 91.79325798*theta**2
                     + 1004.911008*theta**3 - 5812.278127*theta**4
                     + 19329.7549*theta**5 - 37147.8947*theta**6
                     + 38379.18127*theta**7 - 16515.05308*theta**8)
            / (1 - 48.09287227*theta + 1017.234804*theta**2
               - 10481.80419*theta**3 + 59431.3*theta**4
               - 195881.6488*theta**5 + 374577.3152*theta**6
               - 385821.1607*theta**7 + 165705.8597*theta**8))


class OpenCircuitPotential:
    """
    Open-circuit potential of one electrode material.

    Wraps a fitted reference curve ``U_ref(theta)`` and its entropic
    coefficient ``dU/dT(theta)`` into the first-order temperature expansion

        U(theta, T) = U_ref(theta) + (T - T_ref) * dU/dT(theta)

    Calling the object returns ``(U, dU/dT)``. Any other object with the same
    call signature can be passed to the model instead, e.g. a lookup table.
    """

    def __init__(self, reference, entropic, T_ref=298.15, name=''):
        self.reference = reference
        self.entropic = entropic
        self.T_ref = T_ref
        self.name = name

    def __call__(self, stoichiometry, temperature):
        dUdT = self.entropic(stoichiometry)
        U = self.reference(stoichiometry) + (temperature - self.T_ref) * dUdT
        return U, dUdT

    def at_reference(self, T_ref):
        """Same curves expanded about another reference temperature."""
        return OpenCircuitPotential(self.reference, self.entropic, T_ref=T_ref, name=self.name)

    def __repr__(self):
        return f"OpenCircuitPotential({self.name or self.reference.__name__!r}, T_ref={self.T_ref})"


LCO_OCP = OpenCircuitPotential(U_p, dUdT_p, name='LiCoO2')
GRAPHITE_OCP = OpenCircuitPotential(U_n, dUdT_n, name='graphite')
