"""
Tests for the loaded resonance search.

Validates:
1. Peak detection and -3 dB crossing interpolation
2. Flat and edge sweeps fall back to the theoretical loaded circuit
3. Q clamping across all branches
4. Reference single coil (6k, 2.2 H, 110 pF) into a standard load
"""

import math

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from pickup_engine.models import (
    CoreMaterial,
    CoreMaterialBase,
    CoreShape,
    LoadParams,
    TransformerCoreParams,
    TransformerParams,
    TransformerWindingParams,
)
from pickup_engine.resonance import (
    ResonanceSearchSettings,
    SweepShape,
    clamp_q,
    classify_sweep,
    find_peak,
    half_power_crossings,
    loaded_resonance,
    resonance_from_sweep,
    theoretical_fallback,
    theoretical_q,
    theoretical_resonance,
)


REFERENCE_COIL = {"resistance": 6000.0, "inductance": 2.2, "capacitance": 110e-12}


class TestTheory:

    def test_loaded_f0(self):
        """Coil plus 300 pF of cable."""
        assert theoretical_resonance(2.2, 410e-12) == pytest.approx(5299, rel=1e-3)

    def test_q(self):
        assert theoretical_q(6000, 2.2, 410e-12) == pytest.approx(math.sqrt(2.2 / 410e-12) / 6000)

    def test_missing_elements(self):
        assert theoretical_resonance(0, 1e-10) == 0.0
        assert theoretical_q(0, 2.2, 1e-10) == 1.0

    def test_clamp(self):
        assert clamp_q(0.1) == 0.5
        assert clamp_q(25.0) == 10.0
        assert clamp_q(3.0) == 3.0

    def test_clamp_custom_range(self):
        settings = ResonanceSearchSettings(q_min=1.0, q_max=5.0)
        assert clamp_q(0.7, settings) == 1.0
        assert clamp_q(7.0, settings) == 5.0


class TestSweepHelpers:

    def test_find_peak_first_on_ties(self):
        assert find_peak(np.array([1.0, 3.0, 3.0, 2.0])) == (1, 3.0)

    def test_flat_sweep(self):
        mags = np.ones(100)
        assert classify_sweep(mags, 0)

    def test_edge_peak(self):
        mags = np.linspace(1.0, 5.0, 100)
        assert classify_sweep(mags, 99)

    def test_clear_peak(self):
        mags = np.concatenate([np.linspace(1, 3, 50), np.linspace(3, 0.1, 50)])
        assert not classify_sweep(mags, 49)

    def test_crossings_interpolated(self):
        freqs = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        mags = np.array([0.5, 1.0, 2.0, 1.0, 0.5])
        lower, upper = half_power_crossings(freqs, mags, 2)
        assert lower == pytest.approx(2 + (math.sqrt(2) - 1))
        assert upper == pytest.approx(3 + (2 - math.sqrt(2)))

    def test_missing_upper_crossing(self):
        freqs = np.array([1.0, 2.0, 3.0])
        mags = np.array([1.0, 1.2, 2.0])
        lower, upper = half_power_crossings(freqs, mags, 2)
        assert lower is not None
        assert upper is None


class TestSweepStateMachine:
    """Each branch driven by a hand-built magnitude curve."""

    FREQS = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    FALLBACK = (3000.0, 4.0)

    def test_flat_uses_fallback(self):
        mags = np.array([1.0, 1.1, 1.3, 1.2, 1.1, 1.0])
        result = resonance_from_sweep(self.FREQS, mags, self.FALLBACK, unloaded_q=7.0)
        assert result.shape == SweepShape.FLAT_OR_EDGE
        assert result.frequency == 3000.0
        assert result.q == 4.0

    def test_edge_uses_fallback(self):
        mags = np.array([0.1, 0.2, 0.3, 0.5, 0.8, 1.0])
        result = resonance_from_sweep(self.FREQS, mags, self.FALLBACK, unloaded_q=7.0)
        assert result.shape == SweepShape.FLAT_OR_EDGE
        assert result.frequency == 3000.0

    def test_fallback_q_clamped(self):
        mags = np.ones(6)
        assert resonance_from_sweep(self.FREQS, mags, (3000.0, 50.0), 7.0).q == 10.0
        assert resonance_from_sweep(self.FREQS, mags, (3000.0, 0.1), 7.0).q == 0.5

    def test_peaked(self):
        mags = np.array([0.1, 0.5, 1.0, 0.5, 0.1, 0.1])
        result = resonance_from_sweep(self.FREQS, mags, self.FALLBACK, unloaded_q=7.0)
        assert result.shape == SweepShape.PEAKED
        assert result.frequency == 3.0
        # Crossings at 1 + √2 and 5 - √2
        assert result.q == pytest.approx(3.0 / (4 - 2 * math.sqrt(2)))

    def test_lower_crossing_only_mirrored(self):
        mags = np.array([0.1, 0.5, 1.0, 0.9, 0.85, 0.8])
        result = resonance_from_sweep(self.FREQS, mags, self.FALLBACK, unloaded_q=7.0)
        assert result.shape == SweepShape.SINGLE_SIDED
        half = 3.0 - (2 + (1 / math.sqrt(2) - 0.5) / 0.5)
        assert result.q == pytest.approx(3.0 / (2 * half))

    def test_upper_crossing_only_mirrored(self):
        mags = np.array([0.8, 0.9, 1.0, 0.5, 0.1, 0.1])
        result = resonance_from_sweep(self.FREQS, mags, self.FALLBACK, unloaded_q=7.0)
        assert result.shape == SweepShape.SINGLE_SIDED
        half = (3 + (1 / math.sqrt(2) - 1) / (0.5 - 1)) - 3.0
        assert result.q == pytest.approx(3.0 / (2 * half))

    def test_no_crossing_uses_unloaded_q(self):
        # With the default 1.5 flat ratio a non-flat sweep always has a crossing
        settings = ResonanceSearchSettings(flat_ratio=1.2)
        mags = np.array([0.8, 0.9, 1.0, 0.9, 0.8, 0.8])
        result = resonance_from_sweep(self.FREQS, mags, self.FALLBACK, unloaded_q=7.0, settings=settings)
        assert result.shape == SweepShape.SINGLE_SIDED
        assert result.frequency == 3.0
        assert result.q == 7.0

    def test_no_crossing_q_clamped(self):
        settings = ResonanceSearchSettings(flat_ratio=1.2)
        mags = np.array([0.8, 0.9, 1.0, 0.9, 0.8, 0.8])
        result = resonance_from_sweep(self.FREQS, mags, self.FALLBACK, unloaded_q=25.0, settings=settings)
        assert result.q == 10.0

    def test_narrow_peak_q_clamped(self):
        freqs = np.array([1000.0, 1001.0, 1002.0, 1003.0, 1004.0, 1005.0])
        mags = np.array([0.1, 0.1, 1.0, 0.1, 0.1, 0.1])
        result = resonance_from_sweep(freqs, mags, self.FALLBACK, unloaded_q=7.0)
        assert result.shape == SweepShape.PEAKED
        assert result.q == 10.0

    def test_accepts_lists(self):
        result = resonance_from_sweep([1, 2, 3, 4, 5, 6], [0.1, 0.5, 1.0, 0.5, 0.1, 0.1], self.FALLBACK, 7.0)
        assert result.shape == SweepShape.PEAKED


class TestLoadedResonance:

    def test_reference_coil(self):
        result = loaded_resonance(load=LoadParams(), **REFERENCE_COIL)
        assert result.shape == SweepShape.PEAKED
        assert 4000 < result.frequency < 6000
        assert 1.0 < result.q < 5.0

    def test_q_within_bounds(self):
        result = loaded_resonance(load=LoadParams(), **REFERENCE_COIL)
        assert 0.5 <= result.q <= 10.0

    def test_edge_falls_back_to_theory(self):
        """Sweep stops below the peak, so the loaded LC values are used."""
        settings = ResonanceSearchSettings(f_max=2000.0)
        result = loaded_resonance(load=LoadParams(), settings=settings, **REFERENCE_COIL)
        assert result.shape == SweepShape.FLAT_OR_EDGE
        assert result.frequency == pytest.approx(theoretical_resonance(2.2, 410e-12))
        # theoretical Q of 12.2 is clamped
        assert result.q == 10.0

    def test_more_cable_lowers_resonance(self):
        short = loaded_resonance(load=LoadParams(cable_length=1.0), **REFERENCE_COIL)
        long = loaded_resonance(load=LoadParams(cable_length=6.0), **REFERENCE_COIL)
        assert long.frequency < short.frequency

    def test_volume_down_lowers_q(self):
        full = loaded_resonance(load=LoadParams(), **REFERENCE_COIL)
        rolled = loaded_resonance(load=LoadParams(volume_position=0.3), **REFERENCE_COIL)
        assert rolled.q < full.q


class TestTransformerFallback:

    def test_cable_scaled_by_ratio_squared(self):
        transformer = TransformerParams(
            core=TransformerCoreParams(
                shape=CoreShape.TOROID_ROUND,
                material=CoreMaterial(CoreMaterialBase.NANOCRYSTALLINE, "nc_iron"),
                effective_area=52.0,
                effective_length=62.0,
            ),
            winding=TransformerWindingParams(primary_turns=100, secondary_turns=1000),
        )
        f0, q = theoretical_fallback(1.0, 0.01, 1e-9, LoadParams(), transformer)
        c_eff = 1e-9 + 300e-12 * 100
        assert f0 == pytest.approx(theoretical_resonance(0.01, c_eff))
        assert q == pytest.approx(theoretical_q(1.0 + 200e3 / 100, 0.01, c_eff))

    def test_disabled_transformer_ignored(self):
        transformer = TransformerParams(
            core=TransformerCoreParams(
                shape=CoreShape.TOROID_ROUND,
                material=CoreMaterial(CoreMaterialBase.NANOCRYSTALLINE, "nc_iron"),
                effective_area=52.0,
                effective_length=62.0,
            ),
            winding=TransformerWindingParams(primary_turns=100, secondary_turns=1000),
            enabled=False,
        )
        with_disabled = theoretical_fallback(6000, 2.2, 110e-12, LoadParams(), transformer)
        without = theoretical_fallback(6000, 2.2, 110e-12, LoadParams())
        assert with_disabled == pytest.approx(without)
