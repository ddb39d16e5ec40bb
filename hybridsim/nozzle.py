"""
Converging-diverging nozzle flow and thrust, using isentropic perfect gas relations.

References:
 - [1] - Heister et al., Rocket Propulsion (https://doi.org/10.1017/9781108381376)
 - [2] - Sutton and Biblarz, Rocket Propulsion Elements, 7th Edition, Chapter 3
"""

from hybridsim.roots import secant

REL_TOL = 0.001         # Acceptable relative error in the area ratio before a Mach number search is started

def A_At(M, gamma):
    """Ratio of local flow area to the throat area, for a given Mach number [1].

    Args:
        M (float): Mach number
        gamma (float): Ratio of specific heats cp/cv

    Returns:
        float: Area ratio A/A*
    """
    return 1/M * (2/(gamma + 1) * (1 + (gamma - 1)/2 * M**2))**((gamma + 1)/(2*gamma - 2))

def area_ratio_error(M, gamma, area_ratio):
    return A_At(M, gamma) - area_ratio

def exit_mach(area_ratio, gamma, M_guess = 3.0):
    """Supersonic exit Mach number for a nozzle area ratio. The guess must be on the supersonic branch, otherwise the
    subsonic root might be found instead.

    Args:
        area_ratio (float): Nozzle exit area / throat area
        gamma (float): Ratio of specific heats cp/cv
        M_guess (float, optional): Initial guess, usually the previous step's solution. Defaults to 3.

    Returns:
        tuple: (Mach number, whether or not the solver converged)
    """
    assert M_guess > 1, "'M_guess' must be supersonic"

    if abs(area_ratio_error(M_guess, gamma, area_ratio)) <= REL_TOL * area_ratio:
        return M_guess, True

    sol = secant(area_ratio_error, M_guess, args = (gamma, area_ratio))
    return sol.root, sol.converged

def exit_conditions(p0, T0, gamma, R, M, area_ratio, full_expansion = True):
    """Nozzle exit plane conditions.

    If full_expansion is False, the exit conditions are taken to be those at the throat instead (with an effective area
    ratio of 1). This is used once the oxidizer tank only contains vapour, as a simple way of avoiding the heavily
    overexpanded and separated flow that happens at low chamber pressures. It is not physically justified.

    Args:
        p0 (float): Stagnation pressure (Pa)
        T0 (float): Stagnation temperature (K)
        gamma (float): Ratio of specific heats cp/cv
        R (float): Specific gas constant (J/kg/K)
        M (float): Exit Mach number for the full area ratio
        area_ratio (float): Nozzle exit area / throat area
        full_expansion (bool, optional): Whether to expand to the full area ratio. Defaults to True.

    Returns:
        dict: With keys 'p' (Pa), 'T' (K), 'V' (m/s) and 'area_ratio' (the effective area ratio).
    """
    if full_expansion:
        T = T0 / (1 + (gamma - 1)/2 * M**2)
        return {"p": p0 / (1 + (gamma - 1)/2 * M**2)**(gamma/(gamma - 1)),
                "T": T,
                "V": M * (gamma * R * T)**0.5,
                "area_ratio": area_ratio}

    else:
        return {"p": p0 * (2/(gamma + 1))**(gamma/(gamma - 1)),
                "T": 2 * T0 / (gamma + 1),
                "V": (2 * gamma * R * T0 / (gamma + 1))**0.5,
                "area_ratio": 1.0}

def thrust(mdot, V_e, p_e, p_amb, A_th, area_ratio, zeta_CF = 1.0, nozzle_angle_correction = 1.0):
    """Rocket thrust, corrected with a thrust coefficient efficiency [2].

    Args:
        mdot (float): Mass flow rate (kg/s)
        V_e (float): Exit velocity (m/s)
        p_e (float): Exit pressure (Pa)
        p_amb (float): Ambient pressure (Pa)
        A_th (float): Throat area (m^2)
        area_ratio (float): Effective nozzle area ratio
        zeta_CF (float, optional): Thrust coefficient efficiency. Defaults to 1.
        nozzle_angle_correction (float, optional): Divergence loss factor, e.g. 0.983 for a 15 deg cone. Defaults to 1.

    Returns:
        float: Thrust (N)
    """
    return zeta_CF * (mdot * V_e * nozzle_angle_correction + (p_e - p_amb) * A_th * area_ratio)
