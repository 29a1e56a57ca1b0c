import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import unittest
import numpy as np
import pandas as pd
from spectral_spm.current import ConstantCurrent
from spectral_spm.model import SPM
from spectral_spm.postprocessing import SCALAR_FIELDS, postprocess


class TestPostprocess(unittest.TestCase):

    def setUp(self):
        self.model = SPM(N=5)
        self.y0 = self.model.initial_state(0.7, 0.6)

    def test_initial_state_round_trip(self):
        series = postprocess(self.model, 0.0, self.y0)
        self.assertEqual(len(series), 1)
        self.assertEqual(series.c_neg.shape, (1, 6))
        self.assertTrue(np.allclose(series.c_neg[0] / self.model.p.neg.c_s_max, 0.7, rtol=1e-10))
        self.assertTrue(np.allclose(series.c_pos[0] / self.model.p.pos.c_s_max, 0.6, rtol=1e-10))
        self.assertAlmostEqual(series.theta_avg_neg[0], 0.7, places=10)
        self.assertAlmostEqual(series.theta_surf_pos[0], 0.6, places=10)

    def test_matches_model_evaluation(self):
        model = self.model.with_current(ConstantCurrent(1.5))
        t = np.array([0.0, 5.0])
        y = np.column_stack([self.y0, self.y0 + 1e-6])
        series = postprocess(model, t, y)
        out = model.evaluate(5.0, y[:, 1])
        self.assertEqual(series.voltage[1], out['V'])
        self.assertEqual(series.q_contact[1], out['q_c'])
        self.assertTrue(np.array_equal(series.c_pos[1], out['c_pos']))
        self.assertTrue(np.allclose(series.r_neg, self.model.p.neg.R_s * self.model.particles['neg'].x))

    def test_shape_mismatch(self):
        with self.assertRaises(ValueError):
            postprocess(self.model, [0.0, 1.0], self.y0)

    def test_to_dataframe(self):
        t = np.array([0.0, 1.0, 2.0])
        series = postprocess(self.model, t, np.tile(self.y0[:, None], (1, 3)))
        df = series.to_dataframe()
        self.assertIsInstance(df, pd.DataFrame)
        self.assertEqual(df.index.name, 'time')
        self.assertEqual(list(df.columns), [name for _, name in SCALAR_FIELDS])
        self.assertEqual(len(df), 3)

        df = series.to_dataframe(profiles=True)
        self.assertIn('c_neg_0', df.columns)
        self.assertIn('c_pos_5', df.columns)
        self.assertNotIn('c_pos_6', df.columns)

    def test_summary_single_sample(self):
        summary = postprocess(self.model, 0.0, self.y0).summary()
        self.assertEqual(summary['charge_Ah'], 0.0)
        self.assertEqual(summary['V_start'], summary['V_end'])


if __name__ == "__main__":
    unittest.main()
