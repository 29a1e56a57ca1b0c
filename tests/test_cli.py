import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import json
import tempfile
import unittest
from io import StringIO
from unittest.mock import patch
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from spectral_spm.cli import build_parser, main


class TestCli(unittest.TestCase):

    def tearDown(self):
        plt.close('all')

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        self.assertEqual(args.n, 6)
        self.assertEqual(args.c_rate, 1.0)
        self.assertEqual(args.t_end, 3600.0)
        self.assertEqual(args.dt, 10.0)
        self.assertEqual(args.method, 'BDF')

    @patch('sys.stdout', new_callable=StringIO)
    def test_short_discharge_without_plots(self, mock_stdout):
        with tempfile.TemporaryDirectory() as outdir:
            summary = main(['--t-end', '600', '--dt', '60', '--outdir', outdir, '--no-plots'])

            self.assertEqual(summary['terminated_by'], 'final time')
            self.assertAlmostEqual(summary['t_end'], 600.0)
            self.assertEqual(summary['n_samples'], 11)
            self.assertTrue(os.path.exists(os.path.join(outdir, 'results.csv')))
            self.assertFalse(os.path.exists(os.path.join(outdir, 'voltage.png')))
            with open(os.path.join(outdir, 'summary.json'), encoding='utf-8') as f:
                self.assertEqual(json.load(f)['N'], 6)
        self.assertIn('[run]', mock_stdout.getvalue())

    @patch('sys.stdout', new_callable=StringIO)
    def test_parameter_file_and_plots(self, mock_stdout):
        with tempfile.TemporaryDirectory() as outdir:
            params_path = os.path.join(outdir, 'params.csv')
            with open(params_path, 'w', encoding='utf-8') as f:
                f.write("group,name,value\ncell,C_nom,1.0\n")

            summary = main(['--t-end', '360', '--dt', '60', '--n', '4', '--params', params_path,
                            '--outdir', outdir])

            self.assertAlmostEqual(summary['charge_Ah'], 0.1, places=6)
            for name in ('voltage.png', 'temperature.png', 'concentration.png'):
                self.assertTrue(os.path.exists(os.path.join(outdir, name)))


if __name__ == "__main__":
    unittest.main()
