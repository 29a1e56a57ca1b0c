class SPMError(Exception):
    """Base class for all errors raised by the single particle model."""


class ConfigurationError(SPMError, ValueError):
    """Missing or out-of-range physical parameter."""


class DiscretizationError(SPMError, ValueError):
    """Invalid truncation order or degenerate collocation operator."""


class InitialConditionError(SPMError, ValueError):
    """Initial stoichiometry or temperature outside the valid range."""


class NumericalDomainError(SPMError, ArithmeticError):
    """
    The state drifted outside the physically valid range during evaluation.

    Raised instead of returning NaN or complex values, usually because the
    parameters are wrong or the C-rate exceeds what the SPM can represent.
    """

    def __init__(self, electrode, quantity, value, detail=''):
        self.electrode = electrode
        self.quantity = quantity
        self.value = value
        message = f"{electrode}: {quantity} = {value!r} is outside its valid domain"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class IntegrationError(SPMError, RuntimeError):
    """The ODE solver failed; the message is the solver's own."""
