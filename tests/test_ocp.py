import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import unittest
import numpy as np
from spectral_spm.ocp import GRAPHITE_OCP, LCO_OCP, OpenCircuitPotential, U_n, U_p, dUdT_n, dUdT_p


class TestOpenCircuitPotential(unittest.TestCase):

    def test_cathode_curve(self):
        self.assertTrue(4.0 < U_p(0.5) < 4.4, U_p(0.5))
        self.assertGreater(U_p(0.5), U_p(0.7))
        self.assertGreater(U_p(0.7), U_p(0.95))

    def test_anode_curve(self):
        self.assertTrue(0.0 < U_n(0.8) < 0.2, U_n(0.8))
        self.assertGreater(U_n(0.3), U_n(0.8))

    def test_entropic_coefficients_are_small(self):
        theta = np.linspace(0.55, 0.95, 9)
        self.assertTrue(np.all(np.abs(dUdT_p(theta)) < 5e-3))
        theta = np.linspace(0.27, 0.8, 9)
        self.assertTrue(np.all(np.abs(dUdT_n(theta)) < 5e-3))

    def test_temperature_expansion(self):
        U_ref, dUdT = LCO_OCP(0.6, LCO_OCP.T_ref)
        self.assertEqual(U_ref, U_p(0.6))
        self.assertEqual(dUdT, dUdT_p(0.6))
        U, _ = LCO_OCP(0.6, LCO_OCP.T_ref + 10.0)
        self.assertAlmostEqual(U, U_ref + 10.0 * dUdT)

    def test_at_reference(self):
        shifted = LCO_OCP.at_reference(310.0)
        self.assertEqual(shifted.T_ref, 310.0)
        self.assertEqual(LCO_OCP.T_ref, 298.15)
        U, _ = shifted(0.6, 310.0)
        self.assertEqual(U, U_p(0.6))

    def test_custom_curve(self):
        linear = OpenCircuitPotential(lambda th: 1.0 - th, lambda th: 1e-4 * np.ones_like(th),
                                      T_ref=300.0, name='linear')
        U, dUdT = linear(np.array([0.2, 0.4]), 310.0)
        self.assertTrue(np.allclose(U, [0.801, 0.601]))
        self.assertIn('linear', repr(linear))
        self.assertIn('graphite', repr(GRAPHITE_OCP))


if __name__ == "__main__":
    unittest.main()
