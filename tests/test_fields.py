"""
Tests for the domains.fields.magnetic module.
"""

import unittest
import sys
import os
import math

import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from astroprop.core import units
from astroprop.domains.fields import HelicalMagneticField, MagneticFieldList, UniformMagneticField


class TestMagneticFields(unittest.TestCase):
    """Tests for the analytic field models."""

    def test_uniform(self):
        """Test that callers cannot change a uniform field."""
        field = UniformMagneticField((0.0, 0.0, 1 * units.nG))
        b = field.get_field(np.zeros(3))
        b[2] = 0.0
        self.assertEqual(field.get_field(np.ones(3))[2], 1 * units.nG)

    def test_helical(self):
        field = HelicalMagneticField(2.0, 4 * units.kpc, axial=0.5)
        np.testing.assert_allclose(field.get_field(np.zeros(3)), [2.0, 0.0, 1.0])
        b = field.get_field(np.array([0.0, 0.0, 1 * units.kpc]))
        np.testing.assert_allclose(b, [0.0, 2.0, 1.0], atol=1e-12)
        self.assertAlmostEqual(np.linalg.norm(b), math.sqrt(5.0))

    def test_helical_invalid(self):
        with self.assertRaises(ValueError):
            HelicalMagneticField(1.0, 0.0)

    def test_list(self):
        """Test that a field list sums its members."""
        fields = MagneticFieldList([UniformMagneticField((1.0, 0.0, 0.0))])
        fields.add_field(UniformMagneticField((0.0, 2.0, 0.0)))
        np.testing.assert_array_equal(fields.get_field(np.zeros(3)), [1.0, 2.0, 0.0])
        np.testing.assert_array_equal(MagneticFieldList().get_field(np.zeros(3)), [0.0, 0.0, 0.0])


if __name__ == "__main__":
    unittest.main()
