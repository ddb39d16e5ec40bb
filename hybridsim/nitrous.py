"""
Empirical saturation correlations for nitrous oxide, for building an approximate SaturationTable when no tabulated
data is to hand. Valid from -90 degC up to just below the critical point.

Enthalpies are shifted so that the saturated liquid has zero enthalpy at the normal boiling point, which is the
convention used by the NIST tables that the real gas equation of state offset (hybridsim.eos.ENTHALPY_OFFSET) was
matched to.

References:
 - [1] - ESDU 91022, Thermophysical properties of nitrous oxide (1991)
 - [2] - Rick Newlands, AspireSpace, Modelling the nitrous run tank emptying (http://www.aspirespace.org.uk/downloads/Modelling%20the%20nitrous%20run%20tank%20emptying.pdf)
"""

import numpy as np

from hybridsim.saturation import SaturationTable

P_CRIT = 72.51e5        # Critical pressure (Pa)
RHO_CRIT = 452.0        # Critical density (kg/m^3)
T_CRIT = 309.57         # Critical temperature (K)
T_NBP = 184.68          # Normal boiling point (K)
T_MIN = 183.15          # Lowest temperature the correlations are valid for (K)

def vapour_pressure(T):
    """Saturation pressure [1].

    Args:
        T (float or array): Temperature (K)

    Returns:
        float or array: Pressure (Pa)
    """
    Tr = np.asarray(T) / T_CRIT
    rab = 1 - Tr
    exponent = -6.71893*rab + 1.35966*rab**1.5 - 1.3779*rab**2.5 - 4.051*rab**5

    return P_CRIT * np.exp(exponent / Tr)

def liquid_density(T):
    """Saturated liquid density [1].

    Args:
        T (float or array): Temperature (K)

    Returns:
        float or array: Density (kg/m^3)
    """
    rab = 1 - np.asarray(T) / T_CRIT
    b = [1.72328, -0.8395, 0.5106, -0.10412]

    return RHO_CRIT * np.exp(sum(b[i] * rab**((i + 1)/3) for i in range(4)))

def vapour_density(T):
    """Saturated vapour density [1].

    Args:
        T (float or array): Temperature (K)

    Returns:
        float or array: Density (kg/m^3)
    """
    rab = T_CRIT / np.asarray(T) - 1
    b = [-1.009, -6.28792, 7.50332, -7.90463, 0.629427]

    return RHO_CRIT * np.exp(sum(b[i] * rab**((i + 1)/3) for i in range(5)))

def _enthalpy(T, b):
    rab = 1 - np.asarray(T) / T_CRIT
    return 1000 * (b[0] + sum(b[i] * rab**(i/3) for i in range(1, 5)))

def liquid_enthalpy(T):
    """Saturated liquid specific enthalpy, relative to the saturated liquid at the normal boiling point [1].

    Args:
        T (float or array): Temperature (K)

    Returns:
        float or array: Specific enthalpy (J/kg)
    """
    b = [-200.0, 116.043, -917.225, 794.779, -589.587]
    return _enthalpy(T, b) - _enthalpy(T_NBP, b)

def vapour_enthalpy(T):
    """Saturated vapour specific enthalpy, relative to the saturated liquid at the normal boiling point [1].

    Args:
        T (float or array): Temperature (K)

    Returns:
        float or array: Specific enthalpy (J/kg)
    """
    b = [-200.0, 440.055, -459.701, 434.081, -485.338]
    b_liq = [-200.0, 116.043, -917.225, 794.779, -589.587]
    return _enthalpy(T, b) - _enthalpy(T_NBP, b_liq)

def saturation_table(T_min = 200.0, T_max = 305.0, n = 106):
    """Build an approximate SaturationTable for nitrous oxide from the empirical correlations.

    Args:
        T_min (float, optional): Lowest table temperature (K). Defaults to 200.
        T_max (float, optional): Highest table temperature (K). Must be below the critical temperature. Defaults to 305.
        n (int, optional): Number of rows. Defaults to 106 (i.e. 1 K spacing with the default limits).

    Returns:
        SaturationTable: Saturation properties of nitrous oxide.
    """
    if not T_MIN <= T_min < T_max < T_CRIT:
        raise ValueError(f"Need {T_MIN} K <= T_min < T_max < {T_CRIT} K. You gave T_min = {T_min} K and T_max = {T_max} K.")

    T = np.linspace(T_min, T_max, n)
    p = vapour_pressure(T)
    rho_liq = liquid_density(T)
    rho_vap = vapour_density(T)
    h_liq = liquid_enthalpy(T)
    h_vap = vapour_enthalpy(T)

    return SaturationTable(T = T,
                           p = p,
                           rho_liq = rho_liq,
                           rho_vap = rho_vap,
                           u_liq = h_liq - p/rho_liq,
                           u_vap = h_vap - p/rho_vap,
                           h_liq = h_liq,
                           h_vap = h_vap)
