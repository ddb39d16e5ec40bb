"""
Time marching simulation of a hybrid rocket motor, with a self-pressurising oxidizer tank, a single port fuel grain
and a converging-diverging nozzle.

Each step the tank is solved, the injector flow is found, the tank mass and energy are integrated forward, and then
the combustion chamber and nozzle are solved. The chamber gas properties found at the end of each step are used for
the next one.

Notation:
 - 'ox': Oxidizer
 - 'cc': Combustion chamber (static conditions)
 - 'stag': Combustion chamber stagnation conditions
 - 'th': Nozzle throat
"""

import enum
import warnings
import numpy as np
import scipy.integrate

from hybridsim.tank import Tank, injector_mass_flow
from hybridsim.chamber import CombustionChamber, R_BAR
from hybridsim.nozzle import exit_mach, exit_conditions, thrust
from hybridsim.errors import HybridSimError, ConfigurationError

GRAVITY = 9.80665           # Standard gravity (m/s^2), for specific impulse
M_AIR = 28.97               # Molar mass of air (kg/kmol), used for the gas in the chamber before ignition
GAMMA_AIR = 1.4             # Ratio of specific heats of air
MACH_GUESS = 3.0            # Initial guess for the nozzle exit Mach number. Must be supersonic.

class Status(enum.Enum):
    INITIALIZING = "initializing"
    STEPPING = "stepping"
    TERMINATED = "terminated"
    FAILED = "failed"

class MotorConfig:
    """Static motor parameters. All values are in SI units.

    Keyword Args:
        dt (float): Time step (s)
        t_max (float): Maximum simulation time (s)
        V_tank (float): Oxidizer tank volume (m^3)
        p_tank_init (float): Initial tank pressure (Pa)
        m_ox_init (float): Initial oxidizer mass in the tank (kg)
        p_feed (float): Feed line pressure drop between the tank and the injector (Pa)
        n_inj (int): Number of injector holes
        d_inj (float): Injector hole diameter (m)
        Cd_inj (float): Injector discharge coefficient
        d_grain (float): Fuel grain outer diameter (m)
        d_port_init (float): Initial fuel port diameter (m)
        L_grain (float): Fuel grain length (m)
        rho_fuel (float): Fuel density (kg/m^3)
        a (float): Regression rate coefficient, for r_dot = a G^n with r_dot in m/s and G in kg/m^2/s
        n (float): Regression rate exponent
        T_cc_init (float): Initial combustion chamber temperature (K)
        p_cc_init (float): Initial combustion chamber pressure (Pa)
        zeta_d (float): Nozzle discharge correction efficiency
        zeta_cstar (float): Characteristic velocity efficiency
        zeta_CF (float): Thrust coefficient efficiency
        A_th (float): Nozzle throat area (m^2)
        area_ratio (float): Nozzle exit area / throat area
        p_amb (float): Ambient pressure (Pa)
        ox_stop_fraction (float, optional): The simulation stops once the oxidizer left in the tank is below this fraction of the initial mass. Defaults to 0.05.
        nozzle_angle_correction (float, optional): Nozzle divergence loss factor applied to the momentum thrust. Defaults to 1.

    Attributes:
        C_inj (float): Injector effective area (m^2)
        m_fuel_init (float): Initial mass of the fuel grain (kg)
        A_exit (float): Nozzle exit area (m^2)
    """
    required = ("dt", "t_max", "V_tank", "p_tank_init", "m_ox_init", "p_feed", "n_inj", "d_inj", "Cd_inj",
                "d_grain", "d_port_init", "L_grain", "rho_fuel", "a", "n", "T_cc_init", "p_cc_init",
                "zeta_d", "zeta_cstar", "zeta_CF", "A_th", "area_ratio", "p_amb")

    optional = {"ox_stop_fraction": 0.05,
                "nozzle_angle_correction": 1.0}

    positive = ("dt", "t_max", "V_tank", "p_tank_init", "m_ox_init", "n_inj", "d_inj", "Cd_inj", "d_grain",
                "d_port_init", "L_grain", "rho_fuel", "a", "T_cc_init", "p_cc_init", "zeta_d", "zeta_cstar",
                "zeta_CF", "A_th", "area_ratio")

    def __init__(self, **kwargs):
        # Check that the user has not mispelt or used additional kwargs
        left_over = set(kwargs.keys()) - set(self.required) - set(self.optional.keys())
        if left_over:
            raise ConfigurationError(f"Unrecognised MotorConfig parameters: {sorted(left_over)}", sorted(left_over))

        missing = [name for name in self.required if name not in kwargs]
        if missing:
            raise ConfigurationError(f"Missing MotorConfig parameters: {missing}", missing)

        values = dict(self.optional)
        values.update(kwargs)

        not_a_number = [name for name, value in values.items() if value is None or np.isnan(float(value))]
        if not_a_number:
            raise ConfigurationError(f"MotorConfig parameters must not be NaN: {not_a_number}", not_a_number)

        not_positive = [name for name in self.positive if values[name] <= 0]
        if not_positive:
            raise ConfigurationError(f"MotorConfig parameters must be positive: {not_positive}", not_positive)

        if values["d_port_init"] >= values["d_grain"]:
            raise ConfigurationError(f"Initial port diameter ({values['d_port_init']} m) must be smaller than the grain outer diameter ({values['d_grain']} m)", ["d_port_init", "d_grain"])

        if not 0 <= values["ox_stop_fraction"] < 1:
            raise ConfigurationError(f"'ox_stop_fraction' must be between 0 and 1. You gave {values['ox_stop_fraction']}", ["ox_stop_fraction"])

        for name, value in values.items():
            setattr(self, name, float(value))

        self.n_inj = int(values["n_inj"])

    @classmethod
    def from_dict(cls, parameters):
        """Create a MotorConfig from a flat mapping of parameter name to value, e.g. read from a spreadsheet.

        Args:
            parameters (dict): Parameter names and values.

        Returns:
            MotorConfig: The motor configuration.
        """
        return cls(**dict(parameters))

    def to_dict(self):
        """
        Returns:
            dict: Parameter names and values.
        """
        return {name: getattr(self, name) for name in self.required + tuple(self.optional.keys())}

    def __repr__(self):
        return "<hybridsim.MotorConfig> with: \n" + " \n".join(f"{name} = {value}" for name, value in self.to_dict().items())

    @property
    def C_inj(self):
        return self.n_inj * self.Cd_inj * np.pi * (self.d_inj/2)**2

    @property
    def m_fuel_init(self):
        return self.rho_fuel * self.L_grain * np.pi/4 * (self.d_grain**2 - self.d_port_init**2)

    @property
    def A_exit(self):
        return self.A_th * self.area_ratio

class TimeSeries:
    """Append-only list of per-step records. Records are dictionaries, and record i corresponds to time i*dt."""
    def __init__(self):
        self._records = []

    def append(self, record):
        self._records.append(dict(record))

    def __getitem__(self, i):
        return self._records[i]

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def column(self, key):
        """
        Args:
            key (str): Record key

        Returns:
            numpy.ndarray: The value of 'key' at every step.
        """
        return np.array([record[key] for record in self._records])

class MotorSimulation:
    """Transient simulation of a hybrid rocket motor.

    Args:
        config (MotorConfig or dict): Motor parameters.
        equilibrium_table (EquilibriumTable): Combustion product properties.
        saturation_table (SaturationTable): Saturation properties of the oxidizer.

    Attributes:
        status (Status): Where the simulation is in its lifecycle.
        state (TimeSeries): One record per step. Kept after a failure for diagnostics.
        termination_reason (str): 'max_time' or 'oxidizer_depleted' once the simulation has terminated.
    """
    def __init__(self, config, equilibrium_table, saturation_table):
        if not isinstance(config, MotorConfig):
            config = MotorConfig.from_dict(config)

        self.config = config
        self.tank = Tank(V = config.V_tank, saturation_table = saturation_table)
        self.chamber = CombustionChamber(L = config.L_grain,
                                         rho_fuel = config.rho_fuel,
                                         a = config.a,
                                         n = config.n,
                                         A_th = config.A_th,
                                         zeta_d = config.zeta_d,
                                         zeta_cstar = config.zeta_cstar,
                                         equilibrium_table = equilibrium_table)
        self.reset()

    def reset(self):
        """
        Empty the 'state' time series and set up the initial conditions.
        """
        self.status = Status.INITIALIZING
        self.state = TimeSeries()
        self.termination_reason = None
        self.i = 0

        config = self.config
        self.initial_tank = self.tank.initial_conditions(p = config.p_tank_init, m = config.m_ox_init)

        # Conditions going into the first step. The chamber is full of air before ignition.
        R_air = R_BAR / M_AIR

        self._next = {"m_ox": config.m_ox_init,
                      "U_tank": self.initial_tank["U"],
                      "phase": self.initial_tank["phase"],
                      "T_tank": self.initial_tank["T"],
                      "r_port": config.d_port_init / 2,
                      "p_cc": config.p_cc_init,
                      "Ma_exit": MACH_GUESS,
                      "m_tot": config.m_ox_init + config.m_fuel_init,
                      "gas": {"T_stag": config.T_cc_init,
                              "rho": config.p_cc_init / (R_air * config.T_cc_init),
                              "cp": GAMMA_AIR * R_air / (GAMMA_AIR - 1),
                              "gamma": GAMMA_AIR,
                              "R": R_air}}

        self.status = Status.STEPPING

    def step(self):
        """
        Run a single time step, append its record to 'state', and decide whether or not to carry on.

        The simulation stops once the oxidizer mass left after this step's integration is at or below
        ox_stop_fraction * m_ox_init, so the last record still holds slightly more than that fraction. Checking the
        mass at the start of the step instead would run one step longer.

        If a fatal error occurs (e.g. a PressureInversionError or OutOfRangeError), the status is set to FAILED, the
        simulated time is attached to the error as 'time', and it is re-raised. The steps completed so far are left in 'state'.

        Returns:
            bool: True if the simulation should continue.
        """
        assert self.status == Status.STEPPING, f"Cannot step a simulation with status {self.status}. Run reset() first."

        try:
            return self._advance()

        except HybridSimError as e:
            self.status = Status.FAILED
            e.time = self.i * self.config.dt
            raise

    def _advance(self):
        config = self.config
        now = self._next
        i = self.i
        gas = now["gas"]

        # Oxidizer tank
        tank = self.tank.solve(now["phase"], U = now["U_tank"], m = now["m_ox"], T_guess = now["T_tank"])

        mdot_ox_raw = injector_mass_flow(config.C_inj, tank["rho_discharge"], tank["p"], now["p_cc"], config.p_feed)

        # Average over the last two steps to stop oscillations. There's nothing to average with on the first step.
        if i == 0:
            mdot_ox = 0.5 * mdot_ox_raw
        else:
            mdot_ox = 0.5 * mdot_ox_raw + 0.5 * self.state[i-1]["mdot_ox"]

        dm_ox = -mdot_ox * config.dt
        dU_tank = -mdot_ox * tank["h_discharge"] * config.dt

        # Combustion chamber
        chamber = self.chamber.solve(mdot_ox, now["r_port"], gas, V_previous = self.state[i-1]["V_cc"] if i > 0 else None)

        # Nozzle
        Ma_exit, nozzle_converged = exit_mach(config.area_ratio, gas["gamma"], M_guess = now["Ma_exit"])
        nozzle = exit_conditions(p0 = chamber["p_stag"],
                                 T0 = gas["T_stag"],
                                 gamma = gas["gamma"],
                                 R = gas["R"],
                                 M = Ma_exit,
                                 area_ratio = config.area_ratio,
                                 full_expansion = tank["x"] < 1)

        F = thrust(mdot = chamber["mdot_total"],
                   V_e = nozzle["V"],
                   p_e = nozzle["p"],
                   p_amb = config.p_amb,
                   A_th = config.A_th,
                   area_ratio = nozzle["area_ratio"],
                   zeta_CF = config.zeta_CF,
                   nozzle_angle_correction = config.nozzle_angle_correction)

        self.state.append({"time": i * config.dt,
                           "m_ox": now["m_ox"],
                           "U_tank": now["U_tank"],
                           "x_tank": tank["x"],
                           "T_tank": tank["T"],
                           "p_tank": tank["p"],
                           "rho_tank": tank["rho"],
                           "h_tank": tank["h"],
                           "h_discharge": tank["h_discharge"],
                           "mdot_ox": mdot_ox,
                           "r_port": now["r_port"],
                           "r_dot": chamber["r_dot"],
                           "mdot_fuel": chamber["mdot_fuel"],
                           "mdot_total": chamber["mdot_total"],
                           "OF": chamber["OF"],
                           "p_stag": chamber["p_stag"],
                           "p_cc": chamber["p_cc"],
                           "T_stag": chamber["T_stag"],
                           "T_cc": chamber["T_cc"],
                           "rho_cc": gas["rho"],
                           "cp_cc": gas["cp"],
                           "gamma_cc": gas["gamma"],
                           "R_cc": gas["R"],
                           "V_cc": chamber["V"],
                           "Ma_exit": Ma_exit,
                           "p_exit": nozzle["p"],
                           "T_exit": nozzle["T"],
                           "V_exit": nozzle["V"],
                           "thrust": F,
                           "m_tot": now["m_tot"],
                           "tank_converged": tank["converged"],
                           "fuel_converged": chamber["fuel_converged"],
                           "nozzle_converged": nozzle_converged})

        r_port_next = now["r_port"] + chamber["r_dot"] * config.dt
        if 2 * now["r_port"] < config.d_grain <= 2 * r_port_next:
            warnings.warn(f"The fuel port has burnt through the grain outer diameter ({config.d_grain} m) at t = {i * config.dt} s.", stacklevel = 2)

        self._next = {"m_ox": now["m_ox"] + dm_ox,
                      "U_tank": now["U_tank"] + dU_tank,
                      "phase": tank["phase"],
                      "T_tank": tank["T"],
                      "r_port": r_port_next,
                      "p_cc": chamber["p_cc"],
                      "Ma_exit": Ma_exit,
                      "m_tot": now["m_tot"] - chamber["mdot_total"] * config.dt,
                      "gas": chamber["next_gas"]}

        # Decide whether to carry on
        if not i + 1 < config.t_max / config.dt:
            self.termination_reason = "max_time"

        elif not self._next["m_ox"] > config.ox_stop_fraction * config.m_ox_init:
            self.termination_reason = "oxidizer_depleted"

        else:
            self.i += 1
            return True

        self.status = Status.TERMINATED
        return False

    def run(self, verbose = False):
        """Run the simulation until the oxidizer runs out or the maximum time is reached.

        Fatal errors are re-raised with the simulated time attached, see step().

        Args:
            verbose (bool, optional): Whether to print a message when the simulation ends. Defaults to False.

        Returns:
            dict: Results dictionary. See results().
        """
        if self.status != Status.STEPPING:
            self.reset()

        while self.step():
            pass

        if verbose:
            print(f"hybridsim: Simulation terminated ({self.termination_reason}) after {len(self.state)} steps, t = {self.state[-1]['time']} s")

        return self.results()

    def results(self):
        """Collect the time series into arrays, along with summary values and an explanation of each key.

        Returns:
            dict: Results. results["info"] explains what each key means.
        """
        results = {}
        for key in self.state[0].keys():
            results[key] = self.state.column(key)

        results["summary"] = self.summary()

        results["info"] = {}
        results["info"]["time"] = "Time since ignition (s)."
        results["info"]["m_ox"] = "Oxidizer mass in the tank (kg)."
        results["info"]["U_tank"] = "Total internal energy of the tank contents (J)."
        results["info"]["x_tank"] = "Vapour mass fraction in the tank. Equal to 1 once there is no liquid left."
        results["info"]["T_tank"] = "Tank temperature (K)."
        results["info"]["p_tank"] = "Tank pressure (Pa)."
        results["info"]["rho_tank"] = "Bulk density of the tank contents (kg/m3)."
        results["info"]["h_tank"] = "Bulk specific enthalpy of the tank contents (J/kg)."
        results["info"]["h_discharge"] = "Specific enthalpy of the oxidizer leaving through the injector (J/kg)."
        results["info"]["mdot_ox"] = "Oxidizer mass flow rate, after averaging with the previous step (kg/s)."
        results["info"]["r_port"] = "Fuel port radius (m)."
        results["info"]["r_dot"] = "Fuel regression rate (m/s)."
        results["info"]["mdot_fuel"] = "Fuel mass flow rate (kg/s)."
        results["info"]["mdot_total"] = "Total mass flow rate through the nozzle (kg/s)."
        results["info"]["OF"] = "Oxidizer/fuel mass ratio."
        results["info"]["p_stag"] = "Combustion chamber stagnation pressure (Pa)."
        results["info"]["p_cc"] = "Combustion chamber static pressure (Pa)."
        results["info"]["T_stag"] = "Combustion chamber stagnation temperature (K)."
        results["info"]["T_cc"] = "Combustion chamber static temperature (K)."
        results["info"]["rho_cc"] = "Combustion chamber gas density (kg/m3)."
        results["info"]["cp_cc"] = "Combustion chamber gas isobaric specific heat capacity (J/kg/K)."
        results["info"]["gamma_cc"] = "Combustion chamber gas ratio of specific heats."
        results["info"]["R_cc"] = "Combustion chamber gas specific gas constant (J/kg/K)."
        results["info"]["V_cc"] = "Combustion chamber gas velocity, averaged with the previous step (m/s)."
        results["info"]["Ma_exit"] = "Nozzle exit Mach number for the full area ratio."
        results["info"]["p_exit"] = "Nozzle exit pressure (Pa). Throat pressure once the tank only holds vapour."
        results["info"]["T_exit"] = "Nozzle exit temperature (K). Throat temperature once the tank only holds vapour."
        results["info"]["V_exit"] = "Nozzle exit velocity (m/s). Throat velocity once the tank only holds vapour."
        results["info"]["thrust"] = "Thrust (N)."
        results["info"]["m_tot"] = "Total propellant mass left in the motor (kg)."
        results["info"]["tank_converged"] = "Whether the tank temperature solver converged."
        results["info"]["fuel_converged"] = "Whether the fuel mass flow iteration converged."
        results["info"]["nozzle_converged"] = "Whether the nozzle exit Mach number solver converged."
        results["info"]["summary"] = "Summary values for the whole burn. See hybridsim.MotorSimulation.summary()."

        return results

    def summary(self):
        """Summary values for the whole burn, integrated with the trapezium rule.

        Returns:
            dict: Summary values.
        """
        assert len(self.state) > 0, "The simulation has not been run yet"

        config = self.config
        dt = config.dt
        time = self.state.column("time")
        F = self.state.column("thrust")
        mdot_total = self.state.column("mdot_total")
        mdot_fuel = self.state.column("mdot_fuel")
        mdot_ox = self.state.column("mdot_ox")
        p_cc = self.state.column("p_cc")
        x_tank = self.state.column("x_tank")

        m_out = total_mass(mdot_total, dt)
        m_fuel = total_mass(mdot_fuel, dt)
        I_tot = total_impulse(F, dt)

        # First step where the tank had run out of liquid
        vapor_steps = np.nonzero(x_tank >= 1)[0]

        return {"termination_reason": self.termination_reason,
                "burn_time": time[-1],
                "liquid_burn_time": time[vapor_steps[0]] if len(vapor_steps) > 0 else None,
                "peak_thrust": np.max(F),
                "mean_thrust": np.mean(F),
                "total_impulse": I_tot,
                "exhaust_velocity": I_tot / m_out,
                "isp": I_tot / m_out / GRAVITY,
                "c_star": characteristic_velocity(p_cc, mdot_total, config.A_th),
                "mean_OF": np.mean(self.state.column("OF")),
                "mean_mdot_ox": np.mean(mdot_ox),
                "mean_mdot_fuel": np.mean(mdot_fuel),
                "m_out": m_out,
                "m_fuel": m_fuel,
                "m_ox": m_out - m_fuel,
                "mean_r_dot": np.mean(self.state.column("r_dot")),
                "d_port_final": 2 * self._next["r_port"],
                "max_p_cc": np.max(p_cc),
                "max_T_cc": np.max(self.state.column("T_cc")),
                "fill_level": self.initial_tank["fill_level"]}

    def thrust_curve(self):
        """Thrust curve for trajectory simulations.

        Returns:
            numpy.ndarray: Array with columns [time (s), thrust (N), propellant mass left (kg)].
        """
        return np.column_stack([self.state.column("time"), self.state.column("thrust"), self.state.column("m_tot")])

def total_impulse(F, dt):
    """Total impulse from evenly spaced thrust values, using the trapezium rule.

    Args:
        F (array): Thrust at each step (N)
        dt (float): Time step (s)

    Returns:
        float: Total impulse (N s)
    """
    return float(scipy.integrate.trapezoid(F, dx = dt))

def total_mass(mdot, dt):
    """Total mass from evenly spaced mass flow rates, using the trapezium rule.

    Args:
        mdot (array): Mass flow rate at each step (kg/s)
        dt (float): Time step (s)

    Returns:
        float: Total mass (kg)
    """
    return float(scipy.integrate.trapezoid(mdot, dx = dt))

def characteristic_velocity(p_cc, mdot, A_th):
    """Mean characteristic velocity, c* = mean(p_cc) A_th / mean(mdot).

    Args:
        p_cc (array): Chamber pressure at each step (Pa)
        mdot (array): Total mass flow rate at each step (kg/s)
        A_th (float): Throat area (m^2)

    Returns:
        float: Characteristic velocity (m/s)
    """
    return float(np.mean(p_cc) * A_th / np.mean(mdot))
