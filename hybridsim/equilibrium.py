"""
Combustion equilibrium property tables, as functions of oxidizer/fuel ratio and chamber pressure.

The table is expected to come from an external equilibrium chemistry tool (e.g. NASA CEA or ProPEP). Property names:
 - 'T': Adiabatic flame temperature (K)
 - 'rho': Density (kg/m^3)
 - 'cp': Isobaric specific heat capacity (J/kg/K)
 - 'gamma': Ratio of specific heats cp/cv
 - 'M': Molar mass of the products (kg/kmol)
"""

import numpy as np

from hybridsim.errors import OutOfRangeError

PROPERTIES = ("T", "rho", "cp", "gamma", "M")

class EquilibriumTable:
    """Grid of combustion product properties, indexed by (O/F ratio, pressure).

    Args:
        OF (array): Oxidizer/fuel mass ratios. Must be strictly ascending.
        p (array): Pressures (Pa). Must be strictly ascending.
        T (array): 2D array of flame temperatures (K), where T[i][j] corresponds to OF[i] and p[j].
        rho (array): 2D array of densities (kg/m^3)
        cp (array): 2D array of isobaric specific heat capacities (J/kg/K)
        gamma (array): 2D array of ratios of specific heats
        M (array): 2D array of molar masses (kg/kmol)
    """
    def __init__(self, OF, p, T, rho, cp, gamma, M):
        self.OF = np.asarray(OF, dtype = float)
        self.p = np.asarray(p, dtype = float)
        self.data = {"T": np.asarray(T, dtype = float),
                     "rho": np.asarray(rho, dtype = float),
                     "cp": np.asarray(cp, dtype = float),
                     "gamma": np.asarray(gamma, dtype = float),
                     "M": np.asarray(M, dtype = float)}

        for name, axis in (("OF", self.OF), ("p", self.p)):
            if axis.ndim != 1 or len(axis) < 2:
                raise ValueError(f"'{name}' must be a one dimensional array with at least 2 values.")
            if not np.all(np.diff(axis) > 0):
                raise ValueError(f"'{name}' values must be strictly ascending.")

        for name in PROPERTIES:
            if self.data[name].shape != (len(self.OF), len(self.p)):
                raise ValueError(f"'{name}' must have shape (len(OF), len(p)) = {(len(self.OF), len(self.p))}. It has shape {self.data[name].shape}.")

    def __repr__(self):
        return f"<hybridsim.EquilibriumTable> with O/F from {self.OF[0]} to {self.OF[-1]} ({len(self.OF)} points) and p from {self.p[0]} Pa to {self.p[-1]} Pa ({len(self.p)} points)"

    def interpolate(self, OF, p, outputs):
        """Bilinearly interpolate combustion properties.

        Args:
            OF (float): Oxidizer/fuel mass ratio
            p (float): Pressure (Pa)
            outputs (str or list): Name of the property to return, or a list of names.

        Returns:
            float or list: The property value, or a list of values in the same order as 'outputs'.
        """
        if not np.isfinite(OF) or not np.isfinite(p):
            raise ValueError(f"Equilibrium table queries must be finite. You gave OF = {OF} and p = {p} Pa.")

        if OF < self.OF[0]:
            raise OutOfRangeError(OutOfRangeError.RATIO_BELOW, OF, self.OF[0])
        elif OF > self.OF[-1]:
            raise OutOfRangeError(OutOfRangeError.RATIO_ABOVE, OF, self.OF[-1])
        elif p < self.p[0]:
            raise OutOfRangeError(OutOfRangeError.PRESSURE_BELOW, p, self.p[0])
        elif p > self.p[-1]:
            raise OutOfRangeError(OutOfRangeError.PRESSURE_ABOVE, p, self.p[-1])

        # First grid points strictly greater than the query (the last grid point if we're exactly on the upper bound)
        m = min(int(np.searchsorted(self.OF, OF, side = "right")), len(self.OF) - 1)
        n = min(int(np.searchsorted(self.p, p, side = "right")), len(self.p) - 1)

        OF_weights = np.array([self.OF[m] - OF, OF - self.OF[m-1]])
        p_weights = np.array([self.p[n] - p, p - self.p[n-1]])
        C = 1 / ((self.OF[m] - self.OF[m-1]) * (self.p[n] - self.p[n-1]))

        def get(name):
            try:
                corners = self.data[name][m-1:m+1, n-1:n+1]
            except KeyError:
                raise ValueError(f"Unrecognised equilibrium property '{name}'. Try one of {PROPERTIES}.")

            return float(C * OF_weights @ corners @ p_weights)

        if isinstance(outputs, str):
            return get(outputs)

        return [get(name) for name in outputs]
