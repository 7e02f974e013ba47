"""
Tests for the magnet field model.

Validates:
1. On-axis cylinder field against the closed form
2. Bar and blade variants and their scaling factors
3. Gradient sign, output index and sensitivity
4. String pull index and warning thresholds
5. Distance sweeps
"""

import math
from dataclasses import replace

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from pickup_engine.magnetic import (
    POLE_PIECE_FIELD_FACTOR,
    compute_magnet_results,
    field_at,
    field_bar,
    field_cylinder,
    field_gradient,
    field_vs_distance,
    output_index,
    output_vs_distance,
    pole_sensing_area,
    string_pull_index,
    string_pull_warning,
)
from pickup_engine.models import (
    CoilForm,
    CoilGeometry,
    MagnetGeometry,
    MagnetParams,
    MagnetType,
    PositioningParams,
    StringPullWarning,
)


# Strat-style rod: 5 mm x 18 mm AlNiCo 5
STRAT_ROD = MagnetParams(type=MagnetType.ALNICO5, geometry=MagnetGeometry.ROD, magnet_length=18.0, diameter=5.0)

CERAMIC_BAR = MagnetParams(
    type=MagnetType.FERRITE, geometry=MagnetGeometry.BAR, magnet_length=60.0, width=12.0, magnet_height=5.0,
)

RAIL = MagnetParams(
    type=MagnetType.FERRITE, geometry=MagnetGeometry.BLADE, magnet_length=50.0, width=12.0,
    magnet_height=3.0, blade_thickness=3.0, blade_height=2.0, magnet_count=1,
)

POSITION = PositioningParams(string_to_pole_distance=2.5, coil_to_string_distance=5.0)


class TestCylinderField:
    """B(z) = (Br/2)·[(z+t)/√((z+t)²+R²) − z/√(z²+R²)]."""

    def test_rod_reference(self):
        """About 183 mT, 2.5 mm above a 5x18 mm AlNiCo 5 rod."""
        b = field_at(STRAT_ROD, 2.5)
        assert b == pytest.approx(0.1827, rel=1e-3)
        assert 0.03 < b < 0.3

    def test_closed_form(self):
        r, t, z = 2.5e-3, 18e-3, 2.5e-3
        expected = 1.28 / 2 * ((z + t) / math.sqrt((z + t) ** 2 + r * r) - z / math.sqrt(z * z + r * r))
        assert field_cylinder(MagnetType.ALNICO5, 2.5, 18.0, 2.5) == pytest.approx(expected)

    def test_falls_with_distance(self):
        assert field_at(STRAT_ROD, 1.0) > field_at(STRAT_ROD, 3.0) > field_at(STRAT_ROD, 8.0)

    def test_magnetization_scales(self):
        half = MagnetParams(
            type=MagnetType.ALNICO5, geometry=MagnetGeometry.ROD, magnet_length=18.0, diameter=5.0, magnetization=0.5,
        )
        assert field_at(half, 2.5) == pytest.approx(0.5 * field_at(STRAT_ROD, 2.5))

    def test_demagnetized(self):
        zero = MagnetParams(
            type=MagnetType.ALNICO5, geometry=MagnetGeometry.ROD, magnet_length=18.0, diameter=5.0, magnetization=0.0,
        )
        assert field_at(zero, 2.5) == 0.0

    def test_stronger_alloy(self):
        alnico2 = MagnetParams(type=MagnetType.ALNICO2, geometry=MagnetGeometry.ROD, magnet_length=18.0, diameter=5.0)
        assert field_at(alnico2, 2.5) < field_at(STRAT_ROD, 2.5)

    def test_overcharged_rejected(self):
        with pytest.raises(ValueError):
            MagnetParams(type=MagnetType.ALNICO5, geometry=MagnetGeometry.ROD, magnet_length=18.0, magnetization=1.5)


class TestBarAndBlade:

    def test_pole_pieces_read_at_tip(self):
        expected = field_cylinder(MagnetType.FERRITE, 2.5, 5.0, 3.0) * POLE_PIECE_FIELD_FACTOR
        assert field_bar(MagnetType.FERRITE, 12.0, 60.0, 5.0, 3.0) == pytest.approx(expected)

    def test_bare_bar_uses_face_radius(self):
        radius = math.sqrt(12.0 * 60.0 / math.pi)
        expected = field_cylinder(MagnetType.FERRITE, radius, 5.0, 3.0)
        assert field_bar(MagnetType.FERRITE, 12.0, 60.0, 5.0, 3.0, pole_pieces=False) == pytest.approx(expected)

    def test_blade_positive(self):
        assert field_at(RAIL, 2.0, coil_height=10.0) > 0

    def test_dual_magnet_blade(self):
        dual = MagnetParams(
            type=MagnetType.FERRITE, geometry=MagnetGeometry.BLADE, magnet_length=50.0, width=12.0,
            magnet_height=3.0, blade_thickness=3.0, blade_height=2.0, magnet_count=2,
        )
        assert field_at(dual, 2.0, 10.0) == pytest.approx(1.35 * field_at(RAIL, 2.0, 10.0))

    def test_unknown_geometry(self):
        odd = MagnetParams(type=MagnetType.ALNICO5, geometry="horseshoe", magnet_length=10.0)
        with pytest.raises(ValueError):
            field_at(odd, 2.0)


BARE_BAR = replace(CERAMIC_BAR, pole_pieces=False)
DUAL_RAIL = replace(RAIL, magnet_count=2)

ALL_GEOMETRIES = [
    pytest.param(STRAT_ROD, id="rod"),
    pytest.param(CERAMIC_BAR, id="bar-pole-pieces"),
    pytest.param(BARE_BAR, id="bar-bare"),
    pytest.param(RAIL, id="blade"),
    pytest.param(DUAL_RAIL, id="blade-dual"),
]

DISTANCES = np.arange(0.0, 30.05, 0.1)   # mm


class TestEveryGeometry:

    @pytest.mark.parametrize("magnet", ALL_GEOMETRIES)
    def test_monotonic_decay(self, magnet):
        fields = np.array([field_at(magnet, z, coil_height=10.0) for z in DISTANCES])
        assert np.all(fields > 0)
        assert np.all(np.diff(fields) < 0)

    @pytest.mark.parametrize("magnet", ALL_GEOMETRIES)
    @pytest.mark.parametrize("m", [0.1, 0.25, 0.5, 0.75, 1.0])
    def test_linear_in_magnetization(self, magnet, m):
        scaled = replace(magnet, magnetization=m)
        for z in (0.5, 2.5, 8.0, 20.0):
            assert field_at(scaled, z, 10.0) == pytest.approx(m * field_at(magnet, z, 10.0))


class TestGradientAndOutput:

    def test_gradient_negative(self):
        """Field weakens moving away from the pole."""
        assert field_gradient(STRAT_ROD, 2.5) < 0

    def test_output_index_faraday(self):
        """E = N·A·k·|dB/dz|·ω·x0, reported in mV."""
        expected = 8000 * 2e-5 * 0.4 * 30.0 * 2 * math.pi * 1000 * 0.5e-3 * 1000
        assert output_index(8000, 2e-5, 0.4, -30.0) == pytest.approx(expected)

    def test_sensing_area_rod(self):
        coil = CoilGeometry(form=CoilForm.CYLINDRICAL, inner_radius=4.0, outer_radius=10.0, height=10.0)
        assert pole_sensing_area(STRAT_ROD, coil) == pytest.approx(math.pi * 2e-3 ** 2)

    def test_sensing_area_blade(self):
        coil = CoilGeometry(form=CoilForm.FLATWORK, inner_radius=4.0, outer_radius=10.0, height=10.0)
        assert pole_sensing_area(RAIL, coil) == pytest.approx(3e-3 * 8e-3)


class TestStringPull:

    def test_touching_string(self):
        assert string_pull_index(0.2, 0.0) == 1.0

    def test_capped_at_one(self):
        assert string_pull_index(1.0, 0.5) == 1.0

    def test_formula(self):
        assert string_pull_index(0.1, 3.0) == pytest.approx(0.01 / 3.0 ** 2.5 / 0.01)

    def test_warnings(self):
        assert string_pull_warning(0.2) == StringPullWarning.SAFE
        assert string_pull_warning(0.5) == StringPullWarning.CAUTION
        assert string_pull_warning(0.9) == StringPullWarning.DANGER

    def test_threshold_edges(self):
        assert string_pull_warning(0.4) == StringPullWarning.CAUTION
        assert string_pull_warning(0.7) == StringPullWarning.DANGER


class TestSweeps:

    def test_field_curve(self):
        curve = field_vs_distance(STRAT_ROD, 0.5, 20.0, 50)
        assert len(curve) == 50
        assert curve[0].distance == pytest.approx(0.5)
        assert curve[-1].distance == pytest.approx(20.0)
        assert curve[0].field > curve[-1].field
        # mT
        assert curve[0].field > 100

    def test_output_curve_normalised(self):
        curve = output_vs_distance(STRAT_ROD, 8000, 2e-5, 0.4)
        assert max(p.output for p in curve) == pytest.approx(1.0)
        assert all(0 <= p.output <= 1.0 for p in curve)


class TestMagnetResults:

    def test_rod_in_position(self):
        result = compute_magnet_results(STRAT_ROD, POSITION, 8000, math.pi * 2e-3 ** 2, 0.4)
        assert result.field_at_string == pytest.approx(field_at(STRAT_ROD, 2.5))
        assert result.field_at_coil < result.field_at_string
        assert result.sensitivity_index > 0
        assert result.string_pull_warning == string_pull_warning(result.string_pull_index)
