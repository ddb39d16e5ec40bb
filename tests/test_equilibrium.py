"""
Unit tests for bilinear interpolation of combustion equilibrium tables.
"""

import unittest
import numpy as np

import hybridsim as hs
from hybridsim.errors import OutOfRangeError


class TestEquilibriumTable(unittest.TestCase):

    def setUp(self):
        self.OF = np.array([1.0, 3.0, 6.0])
        self.p = np.array([1e5, 1e6, 5e6, 1e7])

        # T = 1000 + 200*OF + 1e-4*p, which bilinear interpolation reproduces exactly
        OF_grid, p_grid = np.meshgrid(self.OF, self.p, indexing = "ij")
        self.T = 1000 + 200*OF_grid + 1e-4*p_grid

        self.table = hs.EquilibriumTable(OF = self.OF,
                                         p = self.p,
                                         T = self.T,
                                         rho = 0.5 + OF_grid * p_grid / 1e6,
                                         cp = np.full(OF_grid.shape, 2000.0),
                                         gamma = 1.3 - 0.01*OF_grid,
                                         M = 20 + OF_grid)

    def test_exact_at_nodes(self):
        for i, OF in enumerate(self.OF):
            for j, p in enumerate(self.p):
                T, rho, cp, gamma, M = self.table.interpolate(OF, p, ["T", "rho", "cp", "gamma", "M"])

                self.assertAlmostEqual(T, self.T[i, j], places = 6)
                self.assertAlmostEqual(rho, 0.5 + OF * p / 1e6, places = 6)
                self.assertAlmostEqual(cp, 2000.0, places = 6)
                self.assertAlmostEqual(gamma, 1.3 - 0.01*OF, places = 9)
                self.assertAlmostEqual(M, 20 + OF, places = 9)

    def test_inside_cell(self):
        self.assertAlmostEqual(self.table.interpolate(4.5, 2.5e6, "T"), 1000 + 200*4.5 + 250, places = 6)

    def test_product_term_is_bilinear(self):
        # rho has an OF*p term, which is still exact for bilinear interpolation within one cell
        self.assertAlmostEqual(self.table.interpolate(2.0, 5.5e5, "rho"), 0.5 + 2.0 * 5.5e5 / 1e6, places = 6)

    def test_out_of_range_kinds(self):
        cases = [(0.5, 2e6, OutOfRangeError.RATIO_BELOW),
                 (7.0, 2e6, OutOfRangeError.RATIO_ABOVE),
                 (2.0, 5e4, OutOfRangeError.PRESSURE_BELOW),
                 (2.0, 2e7, OutOfRangeError.PRESSURE_ABOVE)]

        for OF, p, kind in cases:
            with self.assertRaises(OutOfRangeError) as context:
                self.table.interpolate(OF, p, "T")

            self.assertEqual(context.exception.kind, kind)

    def test_non_finite_query(self):
        for OF, p in [(float("nan"), 2e6), (2.0, float("nan")), (float("inf"), 2e6)]:
            with self.assertRaises(ValueError):
                self.table.interpolate(OF, p, "T")

        # 0/0 from a zero oxidizer and fuel flow
        with np.errstate(invalid = "ignore"):
            OF = np.float64(0.0) / np.float64(0.0)

        with self.assertRaises(ValueError):
            self.table.interpolate(OF, 2e6, ["T", "gamma"])

    def test_unknown_property(self):
        with self.assertRaises(ValueError):
            self.table.interpolate(2.0, 2e6, "viscosity")

    def test_shape_check(self):
        with self.assertRaises(ValueError):
            hs.EquilibriumTable(OF = [1, 2], p = [1e5, 1e6, 1e7],
                                T = np.ones((3, 2)), rho = np.ones((3, 2)), cp = np.ones((3, 2)),
                                gamma = np.ones((3, 2)), M = np.ones((3, 2)))

    def test_ascending_check(self):
        with self.assertRaises(ValueError):
            hs.EquilibriumTable(OF = [2, 1], p = [1e5, 1e6],
                                T = np.ones((2, 2)), rho = np.ones((2, 2)), cp = np.ones((2, 2)),
                                gamma = np.ones((2, 2)), M = np.ones((2, 2)))


if __name__ == '__main__':
    unittest.main()
