"""
Unit tests for nozzle flow and thrust.
"""

import unittest

from hybridsim.nozzle import A_At, exit_mach, exit_conditions, thrust


class TestNozzle(unittest.TestCase):

    def test_area_ratio_is_one_at_throat(self):
        self.assertAlmostEqual(A_At(1.0, 1.4), 1.0)

    def test_supersonic_exit_mach(self):
        M, converged = exit_mach(4.0, 1.4)

        self.assertTrue(converged)
        self.assertAlmostEqual(M, 2.94, delta = 0.02)
        self.assertGreater(M, 1)

    def test_guess_within_tolerance(self):
        M, converged = exit_mach(A_At(2.5, 1.2), 1.2, M_guess = 2.5)

        self.assertEqual(M, 2.5)
        self.assertTrue(converged)

    def test_subsonic_guess_rejected(self):
        with self.assertRaises(AssertionError):
            exit_mach(4.0, 1.4, M_guess = 0.5)

    def test_full_expansion(self):
        exit = exit_conditions(p0 = 2e6, T0 = 3000.0, gamma = 1.2, R = 330.0, M = 2.5, area_ratio = 4.0)
        T = 3000.0 / (1 + 0.1 * 2.5**2)

        self.assertAlmostEqual(exit["T"], T)
        self.assertAlmostEqual(exit["p"], 2e6 * (T / 3000.0)**6)
        self.assertAlmostEqual(exit["V"], 2.5 * (1.2 * 330.0 * T)**0.5)
        self.assertEqual(exit["area_ratio"], 4.0)

    def test_throat_conditions(self):
        exit = exit_conditions(p0 = 2e6, T0 = 3000.0, gamma = 1.2, R = 330.0, M = 2.5, area_ratio = 4.0, full_expansion = False)

        # Same as a Mach 1 expansion
        sonic = exit_conditions(p0 = 2e6, T0 = 3000.0, gamma = 1.2, R = 330.0, M = 1.0, area_ratio = 1.0)

        self.assertAlmostEqual(exit["T"], sonic["T"])
        self.assertAlmostEqual(exit["p"], sonic["p"])
        self.assertAlmostEqual(exit["V"], sonic["V"])
        self.assertEqual(exit["area_ratio"], 1.0)

    def test_thrust(self):
        F = thrust(mdot = 2.0, V_e = 2000.0, p_e = 0.5e5, p_amb = 1e5, A_th = 1e-3, area_ratio = 4.0)
        self.assertAlmostEqual(F, 2.0*2000.0 - 0.5e5*4e-3)

    def test_thrust_corrections(self):
        F = thrust(mdot = 2.0, V_e = 2000.0, p_e = 1.5e5, p_amb = 1e5, A_th = 1e-3, area_ratio = 4.0,
                   zeta_CF = 0.95, nozzle_angle_correction = 0.983)

        self.assertAlmostEqual(F, 0.95 * (2.0*2000.0*0.983 + 0.5e5*4e-3))


if __name__ == '__main__':
    unittest.main()
