"""
Tests for the core.module pipeline engine.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from astroprop.core import units
from astroprop.core import particle_id
from astroprop.core.candidate import Candidate
from astroprop.core.config import SimulationConfig
from astroprop.core.module import Module, ModuleList
from astroprop.domains.transport import SimplePropagation


def make_candidate(energy=1 * units.EeV):
    return Candidate.from_values(particle_id.nucleus_id(1, 1), energy, position=(0.0, 0.0, 0.0), direction=(1.0, 0.0, 0.0))


class RecordingModule(Module):
    """Appends its name to a shared log each time it runs."""

    def __init__(self, name, log):
        super().__init__(name)
        self.name = name
        self.log = log

    def process(self, candidate):
        self.log.append(self.name)


class DeactivateAfter(Module):
    """Deactivates candidates after a number of calls."""

    def __init__(self, calls):
        super().__init__()
        self.calls = calls
        self.seen = 0

    def process(self, candidate):
        self.seen += 1
        if self.seen >= self.calls:
            candidate.active = False


class HalveEnergy(Module):
    """User-defined lossy module."""

    def process(self, candidate):
        candidate.current.energy = candidate.current.energy / 2


class TestModuleList(unittest.TestCase):
    """Tests for the ModuleList class."""

    def test_insertion_order(self):
        """Test that modules run in insertion order."""
        log = []
        ml = ModuleList()
        for name in "abc":
            ml.add(RecordingModule(name, log))
        ml.process(make_candidate())
        self.assertEqual(log, ["a", "b", "c"])

    def test_container(self):
        """Test the container interface."""
        log = []
        ml = ModuleList(modules=[RecordingModule("a", log), RecordingModule("b", log)])
        self.assertEqual(len(ml), 2)
        self.assertEqual(ml[1].name, "b")
        removed = ml.remove(0)
        self.assertEqual(removed.name, "a")
        self.assertEqual([m.name for m in ml], ["b"])
        ml.clear()
        self.assertEqual(len(ml), 0)

    def test_add_rejects_non_modules(self):
        """Test that objects without process() are refused."""
        with self.assertRaises(TypeError):
            ModuleList().add(object())

    def test_step_stops_after_deactivation(self):
        """Test that later modules do not see a deactivated candidate."""
        log = []
        ml = ModuleList(modules=[DeactivateAfter(1), RecordingModule("after", log)])
        c = make_candidate()
        ml.process(c)
        self.assertFalse(c.active)
        self.assertEqual(log, [])

    def test_inactive_candidate_untouched(self):
        """Test that processing an inactive candidate is a no-op."""
        log = []
        ml = ModuleList(modules=[RecordingModule("a", log), SimplePropagation(max_step=1 * units.kpc)])
        c = make_candidate()
        c.active = False
        before = c.current.copy()
        ml.process(c)
        ml.run(c)
        self.assertEqual(log, [])
        self.assertEqual(c.current, before)
        self.assertEqual(c.step_count, 0)
        self.assertEqual(c.trajectory_length, 0.0)

    def test_run_until_inactive(self):
        """Test that run repeats steps until a module deactivates."""
        ml = ModuleList(modules=[DeactivateAfter(5)])
        c = make_candidate()
        ml.run(c)
        self.assertFalse(c.active)
        self.assertEqual(c.step_count, 5)

    def test_step_guard(self):
        """Test that the step guard ends propagation."""
        ml = ModuleList(SimulationConfig(max_steps=7), [SimplePropagation(max_step=1 * units.kpc)])
        c = make_candidate()
        ml.run(c)
        self.assertFalse(c.active)
        self.assertEqual(c.step_count, 7)

    def test_length_guard(self):
        """Test that the trajectory length guard ends propagation."""
        prop = SimplePropagation(min_step=1 * units.kpc, max_step=1 * units.kpc)
        ml = ModuleList(SimulationConfig(max_trajectory_length=9.5 * units.kpc), [prop])
        c = make_candidate()
        ml.run(c)
        self.assertFalse(c.active)
        self.assertEqual(c.step_count, 10)
        self.assertAlmostEqual(c.trajectory_length / units.kpc, 10.0)

    def test_energy_exhausted(self):
        """Test that a candidate stops once its energy reaches zero."""
        ml = ModuleList(modules=[HalveEnergy()])
        c = make_candidate(energy=1e-300)
        ml.run(c)
        self.assertEqual(c.current.energy, 0.0)
        self.assertFalse(c.is_alive())
        self.assertFalse(c.active)

    def test_user_module_mutation_visible(self):
        """Test that a user module's mutation is seen by the next module."""
        seen = []

        class Probe(Module):
            def process(self, candidate):
                seen.append(candidate.current.energy)

        ml = ModuleList(modules=[HalveEnergy(), Probe()])
        ml.process(make_candidate(energy=8.0))
        self.assertEqual(seen, [4.0])

    def test_deterministic(self):
        """Test that identical candidates give identical results."""
        ml = ModuleList(SimulationConfig(max_steps=3), [SimplePropagation(min_step=1.0, max_step=1 * units.kpc), HalveEnergy()])
        a = ml.run(make_candidate())
        b = ml.run(make_candidate())
        self.assertEqual(a.current, b.current)
        self.assertEqual(a.trajectory_length, b.trajectory_length)

    def test_run_all(self):
        """Test running several independent candidates."""
        ml = ModuleList(SimulationConfig(max_steps=2), [SimplePropagation(max_step=1 * units.kpc)])
        candidates = [make_candidate() for _ in range(4)]
        finished = ml.run_all(candidates)
        self.assertEqual(len(finished), 4)
        self.assertTrue(all(c.step_count == 2 for c in finished))

    def test_run_all_drops_removed(self):
        """Test that removed candidates are left out of the results."""

        class RemoveFirst(Module):
            def process(self, candidate):
                if candidate.current.energy > 2 * units.EeV:
                    candidate.removed = True
                candidate.active = False

        ml = ModuleList(modules=[RemoveFirst()])
        finished = ml.run_all([make_candidate(3 * units.EeV), make_candidate(1 * units.EeV)])
        self.assertEqual(len(finished), 1)
        self.assertEqual(finished[0].current.energy, 1 * units.EeV)

    def test_add_passes_config_seed(self):
        """Test that added modules receive the configured seed."""

        class SeedRecorder(Module):
            def __init__(self):
                super().__init__()
                self.seeds = []

            def seed_from(self, seed):
                self.seeds.append(seed)

            def process(self, candidate):
                pass

        recorder = SeedRecorder()
        ml = ModuleList(SimulationConfig(seed=99), [recorder])
        self.assertEqual(recorder.seeds, [99])
        other = SeedRecorder()
        ml.add(other)
        self.assertEqual(other.seeds, [99])


class TestSimplePropagation(unittest.TestCase):
    """Tests for the SimplePropagation module."""

    def test_step(self):
        """Test a straight step of the clipped length."""
        prop = SimplePropagation(min_step=1 * units.kpc, max_step=10 * units.kpc)
        c = make_candidate()
        prop.process(c)
        self.assertAlmostEqual(c.current.position[0] / units.kpc, 1.0)
        self.assertAlmostEqual(c.current_step / units.kpc, 1.0)
        self.assertEqual(c.next_step, 10 * units.kpc)
        self.assertEqual(c.previous.position[0], 0.0)

    def test_invalid_steps(self):
        """Test that inconsistent step bounds are rejected."""
        with self.assertRaises(ValueError):
            SimplePropagation(min_step=2.0, max_step=1.0)
        with self.assertRaises(ValueError):
            SimplePropagation(min_step=-1.0)


if __name__ == "__main__":
    unittest.main()
