"""
Unit tests for the motor configuration and the time marching simulation.
"""

import unittest
import numpy as np

import hybridsim as hs
from hybridsim.motor import MotorConfig, MotorSimulation, Status, TimeSeries, total_impulse, total_mass, characteristic_velocity
from hybridsim.errors import ConfigurationError, PressureInversionError
from hybridsim.tank import VaporOnly
from tests.tables import linear_saturation_table, constant_equilibrium_table, motor_parameters, paraffin_equilibrium_table, nitrous_motor_parameters


class TestMotorConfig(unittest.TestCase):

    def test_defaults(self):
        config = MotorConfig(**motor_parameters())

        self.assertEqual(config.ox_stop_fraction, 0.05)
        self.assertEqual(config.nozzle_angle_correction, 1.0)
        self.assertIsInstance(config.n_inj, int)

    def test_derived_properties(self):
        config = MotorConfig(**motor_parameters(n_inj = 4, d_inj = 2e-3, Cd_inj = 0.7))

        self.assertAlmostEqual(config.C_inj, 4 * 0.7 * np.pi * 1e-6)
        self.assertAlmostEqual(config.m_fuel_init, 900 * 0.5 * np.pi/4 * (0.2**2 - 0.1**2))
        self.assertAlmostEqual(config.A_exit, 0.2)

    def test_from_dict(self):
        config = MotorConfig.from_dict(motor_parameters())
        self.assertEqual(config.to_dict(), MotorConfig(**motor_parameters()).to_dict())

    def test_missing_fields(self):
        parameters = motor_parameters()
        del parameters["A_th"]
        del parameters["dt"]

        with self.assertRaises(ConfigurationError) as context:
            MotorConfig.from_dict(parameters)

        self.assertEqual(sorted(context.exception.fields), ["A_th", "dt"])

    def test_unknown_field(self):
        with self.assertRaises(ConfigurationError) as context:
            MotorConfig(**motor_parameters(L_port = 0.5))

        self.assertEqual(context.exception.fields, ["L_port"])

    def test_nan(self):
        with self.assertRaises(ConfigurationError) as context:
            MotorConfig(**motor_parameters(a = float("nan")))

        self.assertEqual(context.exception.fields, ["a"])

    def test_non_positive(self):
        with self.assertRaises(ConfigurationError) as context:
            MotorConfig(**motor_parameters(V_tank = 0.0, dt = -0.1))

        self.assertEqual(sorted(context.exception.fields), ["V_tank", "dt"])

    def test_port_larger_than_grain(self):
        with self.assertRaises(ConfigurationError):
            MotorConfig(**motor_parameters(d_port_init = 0.3))

    def test_is_a_value_error(self):
        with self.assertRaises(ValueError):
            MotorConfig(**motor_parameters(ox_stop_fraction = 1.5))


class TestTimeSeries(unittest.TestCase):

    def test_append_and_column(self):
        series = TimeSeries()
        series.append({"a": 1.0, "b": 2.0})
        series.append({"a": 3.0, "b": 4.0})

        self.assertEqual(len(series), 2)
        self.assertEqual(series[-1]["a"], 3.0)
        np.testing.assert_array_equal(series.column("b"), [2.0, 4.0])

    def test_records_are_copied(self):
        series = TimeSeries()
        record = {"a": 1.0}
        series.append(record)
        record["a"] = 5.0

        self.assertEqual(series[0]["a"], 1.0)


class TestAggregates(unittest.TestCase):

    def test_constant_thrust_impulse(self):
        N, dt = 7, 0.1
        self.assertAlmostEqual(total_impulse(np.full(N, 100.0), dt), 100.0 * (N - 1) * dt)

    def test_total_mass(self):
        self.assertAlmostEqual(total_mass([1.0, 2.0, 3.0], 0.5), 0.5 * (1.5 + 2.5))

    def test_characteristic_velocity(self):
        self.assertAlmostEqual(characteristic_velocity([1e6, 2e6], [2.0, 4.0], 1e-3), 1.5e6 * 1e-3 / 3.0)


class TestMotorSimulation(unittest.TestCase):

    def setUp(self):
        self.saturation_table = linear_saturation_table()
        self.equilibrium_table = constant_equilibrium_table()

    def simulation(self, **overrides):
        return MotorSimulation(motor_parameters(**overrides), self.equilibrium_table, self.saturation_table)

    def test_initial_status(self):
        motor = self.simulation()

        self.assertEqual(motor.status, Status.STEPPING)
        self.assertEqual(len(motor.state), 0)
        self.assertAlmostEqual(motor.initial_tank["T"], 280.0)

    def test_pressure_inversion_in_single_step(self):
        motor = self.simulation(p_cc_init = 5e6)

        with self.assertRaises(PressureInversionError) as context:
            motor.step()

        self.assertEqual(context.exception.time, 0.0)
        self.assertEqual(motor.status, Status.FAILED)
        self.assertEqual(len(motor.state), 0)

        with self.assertRaises(AssertionError):
            motor.step()

    def test_oxidizer_depletion(self):
        # A large injector empties the tank within two steps
        motor = self.simulation()
        results = motor.run()

        self.assertEqual(motor.status, Status.TERMINATED)
        self.assertEqual(motor.termination_reason, "oxidizer_depleted")
        self.assertEqual(results["summary"]["termination_reason"], "oxidizer_depleted")
        self.assertLessEqual(len(results["time"]), 5)
        self.assertAlmostEqual(results["time"][1], 0.1)

        # The last record still has more than the stop fraction left, and the step it feeds would not
        config = motor.config
        self.assertGreater(results["m_ox"][-1], config.ox_stop_fraction * config.m_ox_init)
        self.assertLessEqual(results["m_ox"][-1] - results["mdot_ox"][-1] * config.dt, config.ox_stop_fraction * config.m_ox_init)

    def test_max_time(self):
        motor = self.simulation(d_inj = 0.01128, t_max = 0.15)
        results = motor.run()

        self.assertEqual(motor.termination_reason, "max_time")
        self.assertEqual(len(results["time"]), 2)
        self.assertEqual(motor.status, Status.TERMINATED)

    def test_first_step_stabilisation(self):
        motor = self.simulation(d_inj = 0.01128, t_max = 0.5)
        results = motor.run()
        config = motor.config

        # The first step uses half of the injector flow, with the liquid density at 280 K
        mdot_raw = config.C_inj * (2 * 860.0 * (4.2e6 - 1e5))**0.5
        self.assertAlmostEqual(results["mdot_ox"][0], 0.5 * mdot_raw)
        self.assertAlmostEqual(results["m_ox"][1], 6.0 - 0.5 * mdot_raw * 0.1)
        self.assertEqual(results["V_cc"][0], 0.0)

    def test_tank_trends(self):
        motor = self.simulation(d_inj = 0.01128, t_max = 0.5)
        results = motor.run()

        self.assertEqual(len(results["time"]), 5)
        self.assertTrue(np.all(np.diff(results["m_ox"]) <= 0))
        self.assertTrue(np.all(np.diff(results["x_tank"]) >= 0))
        self.assertTrue(np.all(np.diff(results["m_tot"]) <= 0))

    def test_results_format(self):
        motor = self.simulation(d_inj = 0.01128, t_max = 0.5)
        results = motor.run()

        for key in ["time", "m_ox", "U_tank", "x_tank", "T_tank", "p_tank", "rho_tank", "h_tank", "mdot_ox",
                    "r_port", "r_dot", "mdot_fuel", "mdot_total", "OF", "p_stag", "p_cc", "T_stag", "T_cc",
                    "rho_cc", "cp_cc", "gamma_cc", "R_cc", "V_cc", "Ma_exit", "p_exit", "T_exit", "V_exit",
                    "thrust", "m_tot", "tank_converged", "fuel_converged", "nozzle_converged"]:
            self.assertIn(key, results)
            self.assertIn(key, results["info"])
            self.assertEqual(len(results[key]), len(motor.state))

        summary = results["summary"]
        self.assertAlmostEqual(summary["total_impulse"], total_impulse(results["thrust"], 0.1))
        self.assertAlmostEqual(summary["isp"], summary["total_impulse"] / summary["m_out"] / 9.80665)
        self.assertAlmostEqual(summary["m_ox"] + summary["m_fuel"], summary["m_out"])
        self.assertIsNone(summary["liquid_burn_time"])
        self.assertGreater(summary["d_port_final"], 0.1)

    def test_thrust_curve(self):
        motor = self.simulation(d_inj = 0.01128, t_max = 0.5)
        results = motor.run()
        curve = motor.thrust_curve()

        self.assertEqual(curve.shape, (5, 3))
        np.testing.assert_allclose(curve[:, 1], results["thrust"])
        self.assertAlmostEqual(curve[0, 2], 6.0 + motor.config.m_fuel_init)

    def test_pressure_inversion(self):
        motor = self.simulation(p_cc_init = 5e6)

        with self.assertRaises(PressureInversionError) as context:
            motor.run()

        self.assertEqual(context.exception.time, 0.0)
        self.assertIn("at t = 0.0 s", str(context.exception))
        self.assertEqual(motor.status, Status.FAILED)
        self.assertEqual(len(motor.state), 0)

    def test_port_burn_through_warning(self):
        motor = self.simulation(d_grain = 0.1005)

        with self.assertWarnsRegex(UserWarning, "burnt through"):
            motor.run()

    def test_cannot_step_after_termination(self):
        motor = self.simulation()
        motor.run()

        with self.assertRaises(AssertionError):
            motor.step()

    def test_rerun_resets(self):
        motor = self.simulation()
        first = motor.run()
        second = motor.run()

        np.testing.assert_allclose(first["thrust"], second["thrust"])
        self.assertEqual(len(motor.state), len(first["time"]))

    def test_overfilled_tank(self):
        with self.assertRaises(ConfigurationError):
            self.simulation(m_ox_init = 9.0)

    def test_accepts_config_object(self):
        motor = MotorSimulation(MotorConfig(**motor_parameters()), self.equilibrium_table, self.saturation_table)
        self.assertIsInstance(motor.config, hs.MotorConfig)


class TestNitrousBlowdown(unittest.TestCase):
    """Full run of a small nitrous oxide motor, through the end of the liquid phase."""

    @classmethod
    def setUpClass(cls):
        cls.motor = MotorSimulation(nitrous_motor_parameters(), paraffin_equilibrium_table(), hs.nitrous.saturation_table())
        cls.results = cls.motor.run()
        cls.vapour_start = int(np.argmax(cls.results["x_tank"] >= 1))

    def test_runs_out_of_liquid(self):
        summary = self.results["summary"]

        self.assertEqual(self.motor.status, Status.TERMINATED)
        self.assertIsNotNone(summary["liquid_burn_time"])
        self.assertAlmostEqual(summary["liquid_burn_time"], self.results["time"][self.vapour_start])
        self.assertGreater(self.vapour_start, 0)
        self.assertLess(self.vapour_start, len(self.results["time"]) - 1)
        self.assertIsInstance(self.motor._next["phase"], VaporOnly)

    def test_vapour_phase_does_not_reverse(self):
        x = self.results["x_tank"]

        self.assertTrue(np.all(x[:self.vapour_start] < 1))
        self.assertTrue(np.all(x[self.vapour_start:] == 1.0))
        self.assertTrue(np.all(np.diff(x) >= 0))
        self.assertTrue(np.all(np.diff(self.results["m_ox"]) <= 0))

    def test_throat_exit_conditions_once_vapour_only(self):
        r = self.results
        k = self.vapour_start
        gamma = r["gamma_cc"]

        p_throat = r["p_stag"] * (2/(gamma + 1))**(gamma/(gamma - 1))
        V_throat = (2 * gamma * r["R_cc"] * r["T_stag"] / (gamma + 1))**0.5

        np.testing.assert_allclose(r["p_exit"][k:], p_throat[k:])
        np.testing.assert_allclose(r["V_exit"][k:], V_throat[k:])

        # Full expansion to the area ratio of 5 before that
        self.assertTrue(np.all(r["p_exit"][:k] < p_throat[:k]))
        self.assertTrue(np.all(r["V_exit"][:k] > V_throat[:k]))

    def test_solvers_converged(self):
        for key in ["tank_converged", "fuel_converged", "nozzle_converged"]:
            self.assertTrue(np.all(self.results[key]), key)


if __name__ == '__main__':
    unittest.main()
