"""
Saturated liquid-vapour property tables for the oxidizer, and linear interpolation within them.

The table is keyed on temperature, but any strictly ascending column (usually pressure) can be used as the
independent variable for a query.

Column names:
 - 'T': Saturation temperature (K)
 - 'p': Saturation pressure (Pa)
 - 'rho_liq', 'rho_vap': Saturated liquid and vapour density (kg/m^3)
 - 'u_liq', 'u_vap': Saturated liquid and vapour specific internal energy (J/kg)
 - 'h_liq', 'h_vap': Saturated liquid and vapour specific enthalpy (J/kg)
"""

import numpy as np

from hybridsim.errors import OutOfRangeError

COLUMNS = ("T", "p", "rho_liq", "rho_vap", "u_liq", "u_vap", "h_liq", "h_vap")

class SaturationTable:
    """Tabulated saturation properties of a single component fluid (e.g. from NIST).

    Args:
        T (array): Saturation temperature (K). Must be strictly ascending.
        p (array): Saturation pressure (Pa)
        rho_liq (array): Saturated liquid density (kg/m^3)
        rho_vap (array): Saturated vapour density (kg/m^3)
        u_liq (array): Saturated liquid specific internal energy (J/kg)
        u_vap (array): Saturated vapour specific internal energy (J/kg)
        h_liq (array): Saturated liquid specific enthalpy (J/kg)
        h_vap (array): Saturated vapour specific enthalpy (J/kg)
    """
    def __init__(self, T, p, rho_liq, rho_vap, u_liq, u_vap, h_liq, h_vap):
        self.data = {"T": np.asarray(T, dtype = float),
                     "p": np.asarray(p, dtype = float),
                     "rho_liq": np.asarray(rho_liq, dtype = float),
                     "rho_vap": np.asarray(rho_vap, dtype = float),
                     "u_liq": np.asarray(u_liq, dtype = float),
                     "u_vap": np.asarray(u_vap, dtype = float),
                     "h_liq": np.asarray(h_liq, dtype = float),
                     "h_vap": np.asarray(h_vap, dtype = float)}

        n = len(self.data["T"])
        for name in COLUMNS:
            if self.data[name].ndim != 1 or len(self.data[name]) != n:
                raise ValueError(f"Column '{name}' must be one dimensional with the same length as 'T' ({n}).")

        if n < 2:
            raise ValueError(f"The saturation table needs at least 2 rows. It has {n}.")

        if not np.all(np.diff(self.data["T"]) > 0):
            raise ValueError("Saturation table temperatures must be strictly ascending.")

    def __len__(self):
        return len(self.data["T"])

    def __repr__(self):
        return f"<hybridsim.SaturationTable> with {len(self)} rows from T = {self.data['T'][0]} K to T = {self.data['T'][-1]} K"

    def interpolate(self, value, by, outputs):
        """Linearly interpolate saturation properties at a given value of the independent variable.

        Finds the first row where the independent variable exceeds 'value', and interpolates between it and the previous row.

        Args:
            value (float): Value of the independent variable.
            by (str): Name of the independent variable column, usually 'T' or 'p'. Must be strictly ascending.
            outputs (str or list): Name of the property to return, or a list of names.

        Returns:
            float or list: The interpolated value, or a list of values in the same order as 'outputs'.
        """
        if by not in self.data:
            raise ValueError(f"'{by}' is not a saturation table column. Try one of {COLUMNS}.")

        x = self.data[by]

        if by != "T" and not np.all(np.diff(x) > 0):
            raise ValueError(f"Column '{by}' is not strictly ascending, so it cannot be used as the independent variable.")

        if not np.isfinite(value):
            raise ValueError(f"Saturation table queries must be finite. You gave {by} = {value}.")

        if value < x[0]:
            raise OutOfRangeError(OutOfRangeError.BELOW, value, x[0])
        if value > x[-1]:
            raise OutOfRangeError(OutOfRangeError.ABOVE, value, x[-1])

        # First row that is larger than the query. The last row counts when value == x[-1].
        i = min(int(np.searchsorted(x, value, side = "right")), len(x) - 1)
        weight = (value - x[i-1]) / (x[i] - x[i-1])

        if isinstance(outputs, str):
            return self._column(outputs)[i-1] + weight * (self._column(outputs)[i] - self._column(outputs)[i-1])

        return [self._column(name)[i-1] + weight * (self._column(name)[i] - self._column(name)[i-1]) for name in outputs]

    def _column(self, name):
        try:
            return self.data[name]
        except KeyError:
            raise ValueError(f"'{name}' is not a saturation table column. Try one of {COLUMNS}.")
