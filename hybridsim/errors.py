"""
Exceptions and warnings raised by hybridsim.

Every fatal error derives from HybridSimError. When an error unwinds out of a running MotorSimulation, the
simulated time at which it happened is attached as 'time' before it is re-raised.
"""

class HybridSimError(Exception):
    """Base class for all hybridsim errors.

    Attributes:
        time (float): Simulated time at which the error occurred (s). None if it was not raised during a simulation.
    """
    def __init__(self, *args):
        super().__init__(*args)
        self.time = None

    def __str__(self):
        message = super().__str__()
        if self.time is None:
            return message
        return f"{message} (at t = {self.time} s)"

class ConfigurationError(HybridSimError, ValueError):
    """Raised when a MotorConfig is missing fields, has NaN values or has values that make no physical sense.

    Args:
        message (str): Description of the problem.
        fields (list, optional): Names of the offending fields. Defaults to an empty list.
    """
    def __init__(self, message, fields = None):
        super().__init__(message)
        self.fields = list(fields) if fields is not None else []

class OutOfRangeError(HybridSimError):
    """Raised when a table is queried outside of its data range.

    Args:
        kind (str): Which bound was violated. For the equilibrium table this is one of 'ratio_below', 'ratio_above', 'pressure_below' or 'pressure_above'. For the saturation table it is 'below' or 'above'.
        value (float): The value that was queried.
        bound (float): The table limit that was exceeded.
    """
    RATIO_BELOW = "ratio_below"
    RATIO_ABOVE = "ratio_above"
    PRESSURE_BELOW = "pressure_below"
    PRESSURE_ABOVE = "pressure_above"
    BELOW = "below"
    ABOVE = "above"

    def __init__(self, kind, value, bound):
        self.kind = kind
        self.value = value
        self.bound = bound

        if kind in (self.RATIO_BELOW, self.PRESSURE_BELOW, self.BELOW):
            relation = "below the minimum"
        else:
            relation = "above the maximum"

        super().__init__(f"Table query out of range ({kind}): {value} is {relation} of {bound}")

class PressureInversionError(HybridSimError):
    """Raised when the chamber pressure (plus the feed line pressure drop) is above the tank pressure, so the injector cannot flow.

    Args:
        p_tank (float): Tank pressure (Pa)
        p_cc (float): Combustion chamber pressure (Pa)
        p_feed (float): Feed line pressure drop (Pa)
    """
    def __init__(self, p_tank, p_cc, p_feed):
        self.p_tank = p_tank
        self.p_cc = p_cc
        self.p_feed = p_feed
        super().__init__(f"The combustion chamber pressure is too high (p_cc = {p_cc:.0f} Pa, p_tank = {p_tank:.0f} Pa, p_feed = {p_feed:.0f} Pa)")

class ConvergenceWarning(UserWarning):
    """Issued when an iterative solver stops at its iteration cap. The best available estimate is still used."""
