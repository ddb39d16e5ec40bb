"""
Real gas equation of state for nitrous oxide vapour, from an explicit Helmholtz free energy correlation.

References:
 - [1] - Span and Wagner, Equations of State for Technical Applications. II. Results for Nonpolar Fluids, International Journal of Thermophysics (2003)
 - [2] - Lemmon and Span, Short Fundamental Equations of State for 20 Industrial Fluids, J. Chem. Eng. Data (2006)

Notation:
 - 'delta': Reduced density, rho / RHO_CRIT
 - 'tau': Reduced inverse temperature, T_CRIT / T
 - 'ao', 'ar': Ideal gas and residual parts of the dimensionless Helmholtz energy
"""

import numpy as np

R_BAR = 8.3144598                   # Universal gas constant (J/K/mol)
MOLAR_MASS = 44.0128e-3             # Molar mass of N2O (kg/mol)
R = R_BAR / MOLAR_MASS              # Specific gas constant of N2O (J/kg/K)
T_CRIT = 309.52                     # Critical temperature (K)
RHO_CRIT = 452.0115                 # Critical density (kg/m^3)

# The saturation tables use the normal boiling point convention, whereas this correlation has its own reference state.
# Add this to u or h from this module to compare them with saturation table values. Found by matching the two at the phase boundary.
ENTHALPY_OFFSET = 730170.0          # J/kg

# Ideal gas part [1]
A1 = 10.7927224829
A2 = -8.2418318753
C0 = 3.5
V0 = np.array([2.1769, 1.6145, 0.48393])
U0 = np.array([879.0, 2372.0, 5447.0])      # K

# Residual part, 12 terms [1]. The first 5 are polynomial, the last 7 are exponential.
N = np.array([0.88045, -2.4235, 0.38237, 0.068917, 0.00020367, 0.13122, 0.46032, -0.0036985, -0.23263, -0.00042859, -0.042810, -0.023038])
T_EXP = np.array([0.25, 1.125, 1.5, 0.25, 0.875, 2.375, 2.0, 2.125, 3.5, 6.5, 4.75, 12.5])
D_EXP = np.array([1, 1, 1, 3, 7, 1, 2, 5, 1, 1, 4, 2], dtype = float)
P_EXP = np.array([1, 1, 1, 2, 2, 2, 3], dtype = float)
NUM_POLY = 5

OUTPUTS = ("p", "u", "s", "h", "cv", "cp", "a")

def helmholtz(delta, tau):
    """Dimensionless Helmholtz energy and its partial derivatives.

    Args:
        delta (float): Reduced density
        tau (float): Reduced inverse temperature

    Returns:
        dict: With keys 'ao', 'ar', 'ao_tau', 'ao_tautau', 'ar_tau', 'ar_tautau', 'ar_delta', 'ar_deltadelta' and 'ar_deltatau'.
    """
    n1, n2 = N[:NUM_POLY], N[NUM_POLY:]
    t1, t2 = T_EXP[:NUM_POLY], T_EXP[NUM_POLY:]
    d1, d2 = D_EXP[:NUM_POLY], D_EXP[NUM_POLY:]
    P = P_EXP

    e_u = np.exp(-U0 * tau / T_CRIT)
    e_d = np.exp(-delta**P)

    out = {}

    # Ideal gas part
    out["ao"] = A1 + A2*tau + np.log(delta) + (C0 - 1)*np.log(tau) + np.sum(V0 * np.log(1 - e_u))
    out["ao_tau"] = A2 + (C0 - 1)/tau + np.sum(V0 * U0/T_CRIT * e_u / (1 - e_u))
    out["ao_tautau"] = -(C0 - 1)/tau**2 - np.sum(V0 * (U0/T_CRIT)**2 * e_u / (1 - e_u)**2)

    # Residual part
    out["ar"] = np.sum(n1 * tau**t1 * delta**d1) + np.sum(n2 * tau**t2 * delta**d2 * e_d)

    out["ar_tau"] = np.sum(n1 * t1 * tau**(t1 - 1) * delta**d1) \
                  + np.sum(n2 * t2 * tau**(t2 - 1) * delta**d2 * e_d)

    out["ar_tautau"] = np.sum(n1 * t1 * (t1 - 1) * tau**(t1 - 2) * delta**d1) \
                     + np.sum(n2 * t2 * (t2 - 1) * tau**(t2 - 2) * delta**d2 * e_d)

    out["ar_delta"] = np.sum(n1 * d1 * delta**(d1 - 1) * tau**t1) \
                    + np.sum(n2 * tau**t2 * delta**(d2 - 1) * (d2 - P * delta**P) * e_d)

    out["ar_deltadelta"] = np.sum(n1 * d1 * (d1 - 1) * delta**(d1 - 2) * tau**t1) \
                         + np.sum(n2 * tau**t2 * delta**(d2 - 2) * ((d2 - P * delta**P) * (d2 - 1 - P * delta**P) - P**2 * delta**P) * e_d)

    out["ar_deltatau"] = np.sum(n1 * d1 * t1 * delta**(d1 - 1) * tau**(t1 - 1)) \
                       + np.sum(n2 * t2 * tau**(t2 - 1) * delta**(d2 - 1) * (d2 - P * delta**P) * e_d)

    return out

def properties(rho, T, outputs):
    """Get N2O vapour properties at a given density and temperature.

    Available outputs:
     - 'p': Pressure (Pa)
     - 'u': Specific internal energy (J/kg)
     - 's': Specific entropy (J/kg/K)
     - 'h': Specific enthalpy (J/kg)
     - 'cv': Isochoric specific heat capacity (J/kg/K)
     - 'cp': Isobaric specific heat capacity (J/kg/K)
     - 'a': Speed of sound (m/s)

    Note that 'u', 's' and 'h' use the reference state of the correlation. Add ENTHALPY_OFFSET to 'u' or 'h' to compare them with saturation table values.

    Args:
        rho (float): Density (kg/m^3)
        T (float): Temperature (K)
        outputs (str or list): Name of the property to return, or a list of names.

    Returns:
        float or list: The property value, or a list of values in the same order as 'outputs'.
    """
    delta = rho / RHO_CRIT
    tau = T_CRIT / T
    f = helmholtz(delta, tau)

    tau_sum = tau * (f["ao_tau"] + f["ar_tau"])
    tautau_sum = tau**2 * (f["ao_tautau"] + f["ar_tautau"])
    A = 1 + delta * f["ar_delta"]
    B = 1 + delta * f["ar_delta"] - delta * tau * f["ar_deltatau"]
    C = 1 + 2 * delta * f["ar_delta"] + delta**2 * f["ar_deltadelta"]

    def get(name):
        if name == "p":
            return rho * R * T * A
        elif name == "u":
            return R * T * tau_sum
        elif name == "s":
            return R * (tau_sum - f["ao"] - f["ar"])
        elif name == "h":
            return R * T * (tau_sum + A)
        elif name == "cv":
            return -R * tautau_sum
        elif name == "cp":
            return R * (-tautau_sum + B**2 / C)
        elif name == "a":
            return (R * T * (C - B**2 / tautau_sum))**0.5
        else:
            raise ValueError(f"Unrecognised equation of state output '{name}'. Try one of {OUTPUTS}.")

    if isinstance(outputs, str):
        return float(get(outputs))

    return [float(get(name)) for name in outputs]
