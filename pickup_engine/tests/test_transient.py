"""
Tests for time-domain behaviour.

Validates:
1. Decay time, ring period and cycle count at f0 = 5 kHz, Q = 3
2. Impulse and step responses are normalised and start at rest
3. Attack labels across the Q range
"""

import math

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from pickup_engine.transient import (
    attack_label,
    decay_time_constant,
    impulse_response,
    step_response,
    transient_characteristics,
)


class TestCharacteristics:

    def test_time_constant(self):
        assert decay_time_constant(5000, 3) == pytest.approx(3 / (math.pi * 5000))

    def test_reference(self):
        result = transient_characteristics(5000, 3)
        assert result.decay_time == pytest.approx(0.43977, rel=1e-4)
        assert result.ring_period == pytest.approx(0.2)
        assert result.ring_cycles == pytest.approx(0.43977 / 0.2, rel=1e-4)
        assert result.attack_speed == "Balanced"

    def test_degenerate(self):
        result = transient_characteristics(0, 3)
        assert result.decay_time == 0
        assert result.ring_period == 0
        assert result.ring_cycles == 0

    def test_labels(self):
        assert attack_label(1.0) == "Very soft (overdamped)"
        assert attack_label(2.0) == "Soft (damped)"
        assert attack_label(5.0) == "Snappy"
        assert attack_label(8.0) == "Glassy (ringing)"


class TestImpulse:

    def test_normalised(self):
        points = impulse_response(5000, 3)
        assert len(points) == 500
        assert max(abs(p.amplitude) for p in points) == pytest.approx(1.0)

    def test_starts_at_zero(self):
        points = impulse_response(5000, 3)
        assert points[0].time == 0
        assert points[0].amplitude == pytest.approx(0.0)

    def test_time_axis_in_ms(self):
        points = impulse_response(5000, 3, duration_ms=10.0, num_points=500)
        assert points[1].time == pytest.approx(0.02)

    def test_decays(self):
        points = impulse_response(5000, 3)
        assert max(abs(p.amplitude) for p in points[-50:]) < 0.01

    def test_degenerate_is_silent(self):
        assert all(p.amplitude == 0 for p in impulse_response(0, 3))

    def test_no_samples(self):
        assert impulse_response(5000, 2, 10, 0) == []
        assert impulse_response(5000, 2, 10, -5) == []


class TestStep:

    def test_overshoot(self):
        """Underdamped: settles below the normalised overshoot peak."""
        points = step_response(5000, 3)
        assert points[0].amplitude == pytest.approx(0.0)
        assert 0.5 < points[-1].amplitude < 1.0

    def test_degenerate_is_silent(self):
        assert all(p.amplitude == 0 for p in step_response(0, 3))

    def test_no_samples(self):
        assert step_response(5000, 2, 10, 0) == []
