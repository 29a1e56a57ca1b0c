import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import unittest
import numpy as np
from spectral_spm.errors import ConfigurationError
from spectral_spm.events import VoltageLimitEvent, voltage_limit_events
from spectral_spm.model import SPM


class TestVoltageLimitEvents(unittest.TestCase):

    def setUp(self):
        self.model = SPM(N=4)
        self.y0 = self.model.initial_state()

    def test_default_limits_from_cell(self):
        lower, upper = voltage_limit_events(self.model)
        self.assertEqual(lower.limit, self.model.p.cell.V_min)
        self.assertEqual(upper.limit, self.model.p.cell.V_max)
        self.assertEqual((lower.kind, upper.kind), ('lower', 'upper'))

    def test_direction_and_terminal(self):
        lower, upper = voltage_limit_events(self.model, 3.0, 4.2)
        self.assertEqual(lower.direction, -1)
        self.assertEqual(upper.direction, 1)
        self.assertTrue(lower.terminal)
        self.assertTrue(upper.terminal)

    def test_event_value_is_voltage_minus_limit(self):
        V = self.model.voltage(0.0, self.y0)
        lower, upper = voltage_limit_events(self.model, 3.0, 4.2)
        self.assertAlmostEqual(lower(0.0, self.y0), V - 3.0)
        self.assertAlmostEqual(upper(0.0, self.y0), V - 4.2)
        self.assertTrue(lower.inside(V))
        self.assertTrue(upper.inside(V))
        self.assertFalse(lower.inside(2.9))
        self.assertFalse(upper.inside(4.3))

    def test_infinite_limit_is_dropped(self):
        events = voltage_limit_events(self.model, V_min=-np.inf)
        self.assertEqual([e.kind for e in events], ['upper'])
        events = voltage_limit_events(self.model, V_max=np.inf)
        self.assertEqual([e.kind for e in events], ['lower'])

    def test_invalid_limits(self):
        with self.assertRaises(ConfigurationError):
            voltage_limit_events(self.model, 4.0, 3.5)
        with self.assertRaises(ConfigurationError):
            voltage_limit_events(self.model, 3.8, 3.8)
        with self.assertRaises(ValueError):
            VoltageLimitEvent(self.model, 3.0, 'middle')


if __name__ == "__main__":
    unittest.main()
