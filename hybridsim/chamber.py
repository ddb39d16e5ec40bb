"""
Hybrid motor combustion chamber: fuel grain regression, fuel mass flow, and chamber pressure and temperature.

References:
 - [1] - Sutton and Biblarz, Rocket Propulsion Elements, 7th Edition, Chapter 15
 - [2] - Heister et al., Rocket Propulsion (https://doi.org/10.1017/9781108381376)

Notation:
 - 'G': Mass flux through the fuel port (kg/m^2/s)
 - 'stag': Stagnation conditions, 'cc': Static combustion chamber conditions
"""

import warnings
import numpy as np

from hybridsim.errors import ConvergenceWarning

R_BAR = 8.3144598e3         # Universal gas constant (J/K/kmol)
FUEL_REL_TOL = 0.01         # Fuel mass flow convergence tolerance for the fixed point iteration
FUEL_MAXITER = 100          # Iteration cap for the fixed point iteration

def regression_rate(a, n, G):
    """Radial regression rate of the fuel grain surface, from the power law r_dot = a G^n [1].

    Args:
        a (float): Regression rate coefficient (SI units, so that r_dot is in m/s)
        n (float): Regression rate exponent
        G (float): Mass flux (kg/m^2/s)

    Returns:
        float: Regression rate (m/s)
    """
    return a * G**n

def fuel_mass_flow(r, L, rho_fuel, r_dot):
    """Fuel mass flow rate from the burning port surface.

    Args:
        r (float): Port radius (m)
        L (float): Grain length (m)
        rho_fuel (float): Fuel density (kg/m^3)
        r_dot (float): Regression rate (m/s)

    Returns:
        float: Fuel mass flow rate (kg/s)
    """
    return 2 * np.pi * r * L * rho_fuel * r_dot

def stagnation_pressure(mdot, A_th, zeta_d, T0, R, gamma):
    """Chamber stagnation pressure needed to pass a mass flow rate through a choked throat [2].

    Args:
        mdot (float): Mass flow rate through the throat (kg/s)
        A_th (float): Throat area (m^2)
        zeta_d (float): Discharge correction efficiency
        T0 (float): Stagnation temperature (K)
        R (float): Specific gas constant (J/kg/K)
        gamma (float): Ratio of specific heats cp/cv

    Returns:
        float: Stagnation pressure (Pa)
    """
    return mdot / (zeta_d * A_th) * (T0 * R / gamma * ((gamma + 1)/2)**((gamma + 1)/(gamma - 1)))**0.5

class CombustionChamber:
    """Cylindrical single port fuel grain and the combustion chamber gas inside it.

    Args:
        L (float): Grain length (m)
        rho_fuel (float): Fuel density (kg/m^3)
        a (float): Regression rate coefficient (SI units)
        n (float): Regression rate exponent
        A_th (float): Nozzle throat area (m^2)
        zeta_d (float): Discharge correction efficiency
        zeta_cstar (float): Characteristic velocity efficiency. The flame temperature from the equilibrium table is multiplied by zeta_cstar^2.
        equilibrium_table (EquilibriumTable): Combustion product properties.
    """
    def __init__(self, L, rho_fuel, a, n, A_th, zeta_d, zeta_cstar, equilibrium_table):
        self.L = L
        self.rho_fuel = rho_fuel
        self.a = a
        self.n = n
        self.A_th = A_th
        self.zeta_d = zeta_d
        self.zeta_cstar = zeta_cstar
        self.equilibrium_table = equilibrium_table

    def solve_fuel_flow(self, mdot_ox, r):
        """Find the fuel mass flow rate. The regression rate depends on the mass flux averaged along the port, which
        depends on the fuel mass flow itself, so this is iterated until the fuel mass flow changes by less than 1%.

        The first estimate uses the oxidizer flux at the port entrance alone. If 100 iterations are reached, the latest
        estimate is used and a ConvergenceWarning is issued.

        Args:
            mdot_ox (float): Oxidizer mass flow rate (kg/s)
            r (float): Port radius (m)

        Returns:
            dict: With keys 'r_dot', 'mdot_fuel', 'mdot_total', 'iterations' and 'converged'.
        """
        A_port = np.pi * r**2

        r_dot = regression_rate(self.a, self.n, mdot_ox / A_port)
        mdot_fuel = fuel_mass_flow(r, self.L, self.rho_fuel, r_dot)
        mdot_total = mdot_fuel + mdot_ox

        iterations = 0
        mdot_fuel_old = 0.0

        while abs(mdot_fuel_old - mdot_fuel) > FUEL_REL_TOL * mdot_fuel and iterations < FUEL_MAXITER:
            mdot_fuel_old = mdot_fuel
            mdot_total = mdot_fuel + mdot_ox

            # Average of the entrance (oxidizer only) and exit (everything) mass flux
            G = (mdot_ox + mdot_total) / (2 * A_port)
            r_dot = regression_rate(self.a, self.n, G)
            mdot_fuel = fuel_mass_flow(r, self.L, self.rho_fuel, r_dot)
            iterations += 1

        converged = abs(mdot_fuel_old - mdot_fuel) <= FUEL_REL_TOL * mdot_fuel

        if not converged:
            warnings.warn(f"Fuel mass flow did not converge after {iterations} iterations. Using the latest estimate mdot_fuel = {mdot_fuel} kg/s.", ConvergenceWarning, stacklevel = 2)

        return {"r_dot": r_dot,
                "mdot_fuel": mdot_fuel,
                "mdot_total": mdot_total,
                "iterations": iterations,
                "converged": converged}

    def solve(self, mdot_ox, r, gas, V_previous = None):
        """Get the combustion chamber conditions for this step, and the gas properties to use for the next step.

        Args:
            mdot_ox (float): Oxidizer mass flow rate (kg/s)
            r (float): Port radius (m)
            gas (dict): Chamber gas properties for this step, with keys 'T_stag' (K), 'rho' (kg/m^3), 'cp' (J/kg/K), 'gamma' and 'R' (J/kg/K).
            V_previous (float, optional): Chamber gas velocity from the previous step (m/s). If None, this is treated as the first step and the velocity correction is skipped. Defaults to None.

        Returns:
            dict: Chamber state, including 'next_gas' which holds the gas properties for the next step.
        """
        fuel = self.solve_fuel_flow(mdot_ox, r)
        mdot_total = fuel["mdot_total"]
        A_port = np.pi * r**2

        OF = mdot_ox / fuel["mdot_fuel"]
        T_stag = gas["T_stag"]
        gamma = gas["gamma"]

        p_stag = stagnation_pressure(mdot_total, self.A_th, self.zeta_d, T_stag, gas["R"], gamma)

        if V_previous is None:
            # Too cold and unstable at ignition for a velocity correction
            V = 0.0
            T_cc = T_stag

        else:
            V = mdot_total / (gas["rho"] * A_port)
            V = 0.5 * V + 0.5 * V_previous
            T_cc = T_stag - V**2 / (2 * gas["cp"])

        p_cc = p_stag * (T_cc / T_stag)**(gamma / (gamma - 1))

        T_next, rho_next, cp_next, gamma_next, M_next = self.equilibrium_table.interpolate(OF, p_cc, ["T", "rho", "cp", "gamma", "M"])

        next_gas = {"T_stag": T_next * self.zeta_cstar**2,
                    "rho": rho_next,
                    "cp": cp_next,
                    "gamma": gamma_next,
                    "R": R_BAR / M_next}

        return {"r_dot": fuel["r_dot"],
                "mdot_fuel": fuel["mdot_fuel"],
                "mdot_total": mdot_total,
                "OF": OF,
                "p_stag": p_stag,
                "p_cc": p_cc,
                "T_stag": T_stag,
                "T_cc": T_cc,
                "V": V,
                "fuel_iterations": fuel["iterations"],
                "fuel_converged": fuel["converged"],
                "next_gas": next_gas}
