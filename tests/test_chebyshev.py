import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import unittest
import numpy as np
from numpy.polynomial import polynomial as P
from spectral_spm.chebyshev import chebdif, chebyshev_operators, clenshaw_curtis_weights
from spectral_spm.errors import DiscretizationError


class TestChebyshevOperators(unittest.TestCase):

    def test_nodes_symmetric_and_ordered(self):
        for M in (1, 2, 5, 12):
            ops = chebyshev_operators(M)
            x = ops.nodes
            self.assertEqual(len(x), M + 1)
            self.assertEqual(x[0], 1.0)
            self.assertEqual(x[-1], -1.0)
            self.assertTrue(np.all(np.diff(x) < 0), f"Nodes not decreasing for M = {M}: {x}")
            self.assertTrue(np.array_equal(x, -x[::-1]), f"Nodes not symmetric for M = {M}")

    def test_low_order_matrices(self):
        ops = chebyshev_operators(1)
        self.assertTrue(np.allclose(ops.D1, [[0.5, -0.5], [0.5, -0.5]]))
        self.assertTrue(np.allclose(ops.D2, 0.0))

        ops = chebyshev_operators(2)
        expected = np.array([[1.5, -2.0, 0.5], [0.5, 0.0, -0.5], [-0.5, 2.0, -1.5]])
        self.assertTrue(np.allclose(ops.D1, expected, atol=1e-14), f"Got {ops.D1}")
        self.assertTrue(np.allclose(ops.D2, np.tile([1.0, -2.0, 1.0], (3, 1)), atol=1e-13))

    def test_polynomial_exactness(self):
        rng = np.random.default_rng(seed=7)
        for M in range(2, 17):
            ops = chebyshev_operators(M)
            coeffs = rng.uniform(-1, 1, M + 1)
            f = P.polyval(ops.nodes, coeffs)
            df = P.polyval(ops.nodes, P.polyder(coeffs))
            d2f = P.polyval(ops.nodes, P.polyder(coeffs, 2))
            scale1 = max(1.0, np.max(np.abs(df)))
            scale2 = max(1.0, np.max(np.abs(d2f)))
            self.assertTrue(np.allclose(ops.D1 @ f, df, rtol=0, atol=1e-11 * scale1),
                            f"D1 not exact for M = {M}")
            self.assertTrue(np.allclose(ops.D2 @ f, d2f, rtol=0, atol=1e-9 * scale2),
                            f"D2 not exact for M = {M}")

    def test_rows_sum_to_zero(self):
        ops = chebyshev_operators(10)
        self.assertTrue(np.allclose(ops.D1.sum(axis=1), 0.0, atol=1e-12))
        self.assertTrue(np.allclose(ops.D2.sum(axis=1), 0.0, atol=1e-10))

    def test_operators_are_read_only(self):
        ops = chebyshev_operators(4)
        with self.assertRaises(ValueError):
            ops.D1[0, 0] = 1.0

    def test_invalid_order(self):
        for M in (0, -3, 2.5, True, '4'):
            with self.assertRaises(DiscretizationError):
                chebyshev_operators(M)
        with self.assertRaises(DiscretizationError):
            chebyshev_operators(4, max_order=3)
        with self.assertRaises(DiscretizationError):
            chebdif(3, 3)

    def test_discretization_error_is_value_error(self):
        with self.assertRaises(ValueError):
            chebyshev_operators(0)


class TestClenshawCurtis(unittest.TestCase):

    def test_weights_integrate_polynomials(self):
        for M in (1, 2, 3, 6, 9, 12):
            x = chebyshev_operators(M).nodes
            w = clenshaw_curtis_weights(M)
            self.assertAlmostEqual(w.sum(), 2.0, places=12)
            for k in range(M + 1):
                exact = 0.0 if k % 2 else 2.0 / (k + 1)
                self.assertAlmostEqual(w @ x**k, exact, places=12, msg=f"M = {M}, k = {k}")

    def test_weights_symmetric_and_positive(self):
        w = clenshaw_curtis_weights(8)
        self.assertTrue(np.allclose(w, w[::-1]))
        self.assertTrue(np.all(w > 0))


if __name__ == "__main__":
    unittest.main()
