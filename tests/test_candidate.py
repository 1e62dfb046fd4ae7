"""
Tests for the core.candidate and core.particle_id modules.
"""

import unittest
import sys
import os

import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from astroprop.core import units
from astroprop.core import particle_id
from astroprop.core.candidate import Candidate, ParticleState


class TestParticleId(unittest.TestCase):
    """Tests for particle id helpers."""

    def test_nucleus_id(self):
        """Test the ten digit nucleus encoding."""
        self.assertEqual(particle_id.nucleus_id(1, 1), 1000010010)
        self.assertEqual(particle_id.nucleus_id(56, 26), 1000260560)

    def test_nucleus_id_invalid(self):
        """Test that impossible nuclei are rejected."""
        with self.assertRaises(ValueError):
            particle_id.nucleus_id(1, 2)
        with self.assertRaises(ValueError):
            particle_id.nucleus_id(0, 0)

    def test_charge_and_mass_numbers(self):
        """Test charge and mass numbers of nuclei and leptons."""
        iron = particle_id.nucleus_id(56, 26)
        self.assertEqual(particle_id.charge_number(iron), 26)
        self.assertEqual(particle_id.mass_number(iron), 56)
        self.assertEqual(particle_id.charge_number(-iron), -26)
        self.assertEqual(particle_id.charge_number(11), -1)
        self.assertEqual(particle_id.charge_number(-11), 1)
        self.assertEqual(particle_id.charge_number(22), 0)
        self.assertEqual(particle_id.mass_number(2212), 1)
        self.assertEqual(particle_id.charge_number(2112), 0)

    def test_is_nucleus(self):
        """Test nucleus classification."""
        self.assertTrue(particle_id.is_nucleus(particle_id.nucleus_id(4, 2)))
        self.assertTrue(particle_id.is_nucleus(2212))
        self.assertTrue(particle_id.is_nucleus(2112))
        self.assertFalse(particle_id.is_nucleus(11))
        self.assertFalse(particle_id.is_nucleus(22))


class TestParticleState(unittest.TestCase):
    """Tests for the ParticleState class."""

    def test_direction_is_normalised(self):
        """Test that directions are stored as unit vectors."""
        state = ParticleState(direction=(3.0, 0.0, 4.0))
        np.testing.assert_allclose(state.direction, [0.6, 0.0, 0.8])

    def test_zero_direction_kept(self):
        """Test that a zero direction does not raise."""
        state = ParticleState(direction=(0.0, 0.0, 0.0))
        np.testing.assert_array_equal(state.direction, [0.0, 0.0, 0.0])

    def test_energy_never_negative(self):
        """Test that negative energies are clamped to zero."""
        state = ParticleState(energy=-1.0)
        self.assertEqual(state.energy, 0.0)

    def test_rigidity(self):
        """Test rigidity of a proton and a neutral particle."""
        proton = ParticleState(particle_id.nucleus_id(1, 1), 1 * units.EeV)
        self.assertAlmostEqual(proton.rigidity, 1e18, delta=1e6)
        photon = ParticleState(22, 1 * units.EeV)
        self.assertEqual(photon.rigidity, float("inf"))

    def test_copy_is_independent(self):
        """Test that copies do not share position arrays."""
        state = ParticleState(position=(1.0, 2.0, 3.0))
        other = state.copy()
        self.assertEqual(state, other)
        other.position[0] = 10.0
        self.assertEqual(state.position[0], 1.0)


class TestCandidate(unittest.TestCase):
    """Tests for the Candidate class."""

    def test_creation(self):
        """Test default bookkeeping values."""
        c = Candidate.from_values(particle_id.nucleus_id(1, 1), 1 * units.EeV)
        self.assertTrue(c.active)
        self.assertTrue(c.is_alive())
        self.assertEqual(c.trajectory_length, 0.0)
        self.assertEqual(c.step_count, 0)
        self.assertEqual(c.current, c.source)

    def test_zero_energy_not_alive(self):
        """Test that a candidate without energy is not processed."""
        c = Candidate.from_values(particle_id.nucleus_id(1, 1), 0.0)
        self.assertFalse(c.is_alive())

    def test_set_current_step_accumulates(self):
        """Test that steps add up to the trajectory length."""
        c = Candidate()
        c.set_current_step(2.0)
        c.set_current_step(3.0)
        self.assertEqual(c.current_step, 3.0)
        self.assertEqual(c.trajectory_length, 5.0)

    def test_limit_next_step(self):
        """Test that the next step can only be lowered."""
        c = Candidate()
        c.next_step = 10.0
        c.limit_next_step(20.0)
        self.assertEqual(c.next_step, 10.0)
        c.limit_next_step(4.0)
        self.assertEqual(c.next_step, 4.0)

    def test_previous_is_snapshot(self):
        """Test that previous is a copy, not an alias of current."""
        c = Candidate.from_values(particle_id.nucleus_id(1, 1), 1 * units.EeV)
        c.save_previous()
        c.current.position = (1.0, 0.0, 0.0)
        np.testing.assert_array_equal(c.previous.position, [0.0, 0.0, 0.0])

    def test_rollback(self):
        """Test restoring the previous state."""
        c = Candidate.from_values(particle_id.nucleus_id(1, 1), 1 * units.EeV)
        c.save_previous()
        c.current.position = (5.0, 5.0, 5.0)
        c.current.energy = 0.5 * units.EeV
        c.rollback()
        self.assertEqual(c.current, c.previous)
        self.assertEqual(c.current.energy, 1 * units.EeV)
        # a rollback must not alias the snapshot either
        c.current.position[1] = 7.0
        self.assertEqual(c.previous.position[1], 0.0)

    def test_clone(self):
        """Test deep copies of candidates."""
        c = Candidate.from_values(particle_id.nucleus_id(1, 1), 1 * units.EeV)
        c.properties["flag"] = 1
        clone = c.clone()
        clone.properties["flag"] = 2
        clone.current.position[0] = 3.0
        self.assertEqual(c.properties["flag"], 1)
        self.assertEqual(c.current.position[0], 0.0)


if __name__ == "__main__":
    unittest.main()
