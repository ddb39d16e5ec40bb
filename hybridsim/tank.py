"""
Self-pressurising oxidizer tank thermodynamics, and injector flow out of the tank.

The tank is modelled as a fixed volume containing a known mass and total internal energy of oxidizer. While any
liquid is left, the contents are a saturated liquid-vapour mixture and the saturation table is used. Once the
liquid has boiled off the tank only holds vapour, and the real gas equation of state is used instead. The change
from two-phase to vapour only happens once per run and cannot reverse.

Notation:
 - 'x': Vapour mass fraction (quality)
 - 'U': Total internal energy (J), 'u': Specific internal energy (J/kg)
 - 'discharge': Properties of the fluid leaving through the injector
"""

from hybridsim import eos
from hybridsim.errors import ConfigurationError, PressureInversionError
from hybridsim.roots import secant

REL_TOL = 0.001         # Acceptable relative error in tank volume (two-phase) or specific internal energy (vapour only)

class TwoPhase:
    """Tank phase when there is still liquid in the tank.

    Args:
        x (float): Vapour mass fraction.
    """
    def __init__(self, x):
        self.x = x

    def __repr__(self):
        return f"TwoPhase(x = {self.x})"

class VaporOnly:
    """Tank phase once all the liquid has gone."""
    x = 1.0

    def __repr__(self):
        return "VaporOnly()"

def phase_from_fraction(x):
    """Get the tank phase corresponding to a vapour mass fraction.

    Args:
        x (float): Vapour mass fraction

    Returns:
        TwoPhase or VaporOnly: Tank phase
    """
    if x < 1:
        return TwoPhase(x)
    return VaporOnly()

def injector_mass_flow(C_inj, rho, p_tank, p_cc, p_feed):
    """Mass flow rate through the injector, using a single phase incompressible orifice model.

    Args:
        C_inj (float): Injector effective area, i.e. number of holes * discharge coefficient * hole area (m^2)
        rho (float): Density of the fluid entering the injector (kg/m^3)
        p_tank (float): Tank pressure (Pa)
        p_cc (float): Combustion chamber pressure (Pa)
        p_feed (float): Feed line pressure drop (Pa)

    Returns:
        float: Mass flow rate (kg/s)
    """
    dp = p_tank - p_cc - p_feed

    if dp < 0:
        raise PressureInversionError(p_tank = p_tank, p_cc = p_cc, p_feed = p_feed)

    return C_inj * (2 * rho * dp)**0.5

class Tank:
    """Fixed volume oxidizer tank.

    Args:
        V (float): Tank volume (m^3)
        saturation_table (SaturationTable): Saturation properties of the oxidizer.
        rel_tol (float, optional): Relative tolerance on the tank volume (two-phase) or specific internal energy (vapour only) before a temperature search is started. Defaults to 0.001.
    """
    def __init__(self, V, saturation_table, rel_tol = REL_TOL):
        assert V > 0, "Tank volume 'V' must be positive"

        self.V = V
        self.saturation_table = saturation_table
        self.rel_tol = rel_tol

    def initial_conditions(self, p, m):
        """Get the initial saturated state of the tank from its pressure and the mass of oxidizer loaded.

        Args:
            p (float): Initial tank pressure (Pa)
            m (float): Initial oxidizer mass (kg)

        Returns:
            dict: Initial state, with keys 'T', 'x', 'u', 'U', 'rho_liq', 'rho_vap', 'fill_level' and 'phase'.
        """
        T, rho_liq, rho_vap, u_liq, u_vap = self.saturation_table.interpolate(p, "p", ["T", "rho_liq", "rho_vap", "u_liq", "u_vap"])

        x = (self.V/m - 1/rho_liq) / (1/rho_vap - 1/rho_liq)

        if x < 0:
            raise ConfigurationError(f"The tank is overfilled: {m} kg of oxidizer does not fit in {self.V} m^3 as a saturated mixture at {p} Pa (maximum is {self.V*rho_liq} kg).", ["m_ox_init"])
        if x >= 1:
            raise ConfigurationError(f"There is not enough oxidizer in the tank for any liquid at {p} Pa (you need more than {self.V*rho_vap} kg).", ["m_ox_init"])

        u = x*u_vap + (1 - x)*u_liq

        return {"T": T,
                "x": x,
                "u": u,
                "U": m*u,
                "rho_liq": rho_liq,
                "rho_vap": rho_vap,
                "fill_level": (m/self.V - rho_vap) / (rho_liq - rho_vap),
                "phase": TwoPhase(x)}

    def volume_error(self, T, U, m):
        """Difference between the volume a saturated mixture would occupy at temperature T, and the actual tank volume.

        Args:
            T (float): Trial temperature (K)
            U (float): Total internal energy of the tank contents (J)
            m (float): Mass of the tank contents (kg)

        Returns:
            float: Volume error (m^3)
        """
        rho_liq, rho_vap, u_liq, u_vap = self.saturation_table.interpolate(T, "T", ["rho_liq", "rho_vap", "u_liq", "u_vap"])
        x = (U/m - u_liq) / (u_vap - u_liq)

        return m * ((1 - x)/rho_liq + x/rho_vap) - self.V

    @staticmethod
    def energy_error(T, rho, u):
        """Difference between the vapour specific internal energy at temperature T, and the actual specific internal energy.

        Args:
            T (float): Trial temperature (K)
            rho (float): Vapour density (kg/m^3)
            u (float): Specific internal energy, using the saturation table convention (J/kg)

        Returns:
            float: Specific internal energy error (J/kg)
        """
        return eos.properties(rho, T, "u") + eos.ENTHALPY_OFFSET - u

    def solve(self, phase, U, m, T_guess):
        """Find the tank temperature, pressure and other properties, given its current contents.

        Args:
            phase (TwoPhase or VaporOnly): Phase of the tank contents going into this step.
            U (float): Total internal energy of the tank contents (J)
            m (float): Mass of the tank contents (kg)
            T_guess (float): Initial guess for the tank temperature (K), usually the previous step's temperature.

        Returns:
            dict: Tank state with keys 'T', 'p', 'x', 'rho', 'u', 'h', 'rho_discharge', 'h_discharge', 'converged' and 'phase'. 'phase' is the phase to use for the next step.
        """
        if isinstance(phase, VaporOnly):
            return self._solve_vapor(U, m, T_guess)

        return self._solve_two_phase(U, m, T_guess)

    def _solve_two_phase(self, U, m, T_guess):
        T = T_guess
        converged = True

        if abs(self.volume_error(T, U, m)) > self.rel_tol * self.V:
            sol = secant(self.volume_error, T, args = (U, m))
            T = sol.root
            converged = sol.converged

        p, h_liq, h_vap, rho_liq, rho_vap, u_liq, u_vap = self.saturation_table.interpolate(T, "T", ["p", "h_liq", "h_vap", "rho_liq", "rho_vap", "u_liq", "u_vap"])

        x = (U/m - u_liq) / (u_vap - u_liq)

        # Liquid is drawn from the bottom of the tank, until there is none left
        return {"T": T,
                "p": p,
                "x": min(x, 1.0),
                "rho": 1 / (x/rho_vap + (1 - x)/rho_liq),
                "u": x*u_vap + (1 - x)*u_liq,
                "h": x*h_vap + (1 - x)*h_liq,
                "rho_discharge": rho_liq,
                "h_discharge": h_liq,
                "converged": converged,
                "phase": phase_from_fraction(x)}

    def _solve_vapor(self, U, m, T_guess):
        rho = m / self.V
        u = U / m
        T = T_guess
        converged = True

        if abs(self.energy_error(T, rho, u)) > self.rel_tol * abs(u):
            sol = secant(self.energy_error, T, args = (rho, u))
            T = sol.root
            converged = sol.converged

        p, h = eos.properties(rho, T, ["p", "h"])
        h = h + eos.ENTHALPY_OFFSET

        return {"T": T,
                "p": p,
                "x": 1.0,
                "rho": rho,
                "u": u,
                "h": h,
                "rho_discharge": rho,
                "h_discharge": h,
                "converged": converged,
                "phase": VaporOnly()}
