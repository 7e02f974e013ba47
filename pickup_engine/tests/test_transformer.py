"""
Tests for the step-up transformer model and core catalogue.

Validates:
1. Turns ratio, reflection and gapped-core permeability
2. Parasitic estimates stay inside their clamps
3. Saturation margin and core loss tiers
4. Summary results for a catalogue core
"""

import math

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from pickup_engine.cores import (
    TRANSFORMER_CORES,
    core_params_from_spec,
    core_spec,
    cores_by_material,
    cores_by_shape,
)
from pickup_engine.models import (
    ConductorType,
    CoreLoss,
    CoreMaterial,
    CoreMaterialBase,
    CoreShape,
    LoadParams,
    PrimaryConductor,
    ToroidGeometry,
    TransformerCoreParams,
    TransformerParams,
    TransformerWindingParams,
    TransformerWindingStyle,
)
from pickup_engine.transformer import (
    compute_parasitics,
    compute_transformer_results,
    core_inductance,
    core_loss_tier,
    effective_permeability,
    interwinding_capacitance,
    leakage_inductance,
    peak_flux_density,
    primary_inductance,
    reflected_load,
    reflected_load_magnitude,
    saturation_margin,
    transformer_response,
    turns_ratio,
    winding_mean_turn_length,
)


def make_transformer(core_id="nano_toroid_medium", primary=100, secondary=1000, **winding):
    return TransformerParams(
        core=core_params_from_spec(core_id),
        winding=TransformerWindingParams(primary_turns=primary, secondary_turns=secondary, **winding),
    )


class TestRatio:

    def test_turns_ratio(self):
        assert turns_ratio(100, 1000) == 10.0

    def test_empty_primary(self):
        assert turns_ratio(0, 1000) == 0.0

    def test_reflection_divides_by_n_squared(self):
        assert reflected_load(200e3, 10.0) == pytest.approx(2000)

    def test_reflected_magnitude(self):
        load = LoadParams(cable_length=0.0)
        assert reflected_load_magnitude(load, 10.0) == pytest.approx(2000)

    def test_zero_turns_rejected(self):
        with pytest.raises(ValueError):
            TransformerWindingParams(primary_turns=0, secondary_turns=1000)


class TestCore:

    def test_ungapped(self):
        assert effective_permeability(80000, 0.0, 62) == 80000

    def test_gap_dominates(self):
        assert effective_permeability(80000, 0.1, 62) == pytest.approx(615.2, rel=1e-3)

    def test_primary_inductance(self):
        expected = 4 * math.pi * 1e-7 * 615.2 * 100 ** 2 * 52e-6 / 62e-3
        assert primary_inductance(100, 52, 62, 615.2) == pytest.approx(expected)

    def test_core_inductance_uses_material(self):
        transformer = make_transformer()
        assert core_inductance(transformer) == pytest.approx(primary_inductance(100, 52, 62, 80000))

    def test_bad_variant(self):
        with pytest.raises(ValueError):
            CoreMaterial(CoreMaterialBase.NANOCRYSTALLINE, "am_iron")

    def test_steel_has_no_variant(self):
        with pytest.raises(ValueError):
            CoreMaterial(CoreMaterialBase.SILICON_STEEL, "nc_iron")


class TestParasitics:

    def test_leakage_interleaved(self):
        assert leakage_inductance(1.0, TransformerWindingStyle.INTERLEAVED) == pytest.approx(0.015)
        assert leakage_inductance(1.0, TransformerWindingStyle.NON_INTERLEAVED) == pytest.approx(0.06)

    def test_leakage_shielded(self):
        assert leakage_inductance(1.0, TransformerWindingStyle.NON_INTERLEAVED, True) == pytest.approx(0.072)

    def test_interwinding_clamped(self):
        for style in TransformerWindingStyle:
            c = interwinding_capacitance(make_transformer(winding_style=style))
            assert 5e-12 <= c <= 200e-12

    def test_shield_reduces_interwinding(self):
        plain = interwinding_capacitance(make_transformer())
        shielded = interwinding_capacitance(make_transformer(shielding=True))
        assert shielded < plain

    def test_plate_primary(self):
        plate = PrimaryConductor(type=ConductorType.PLATE, plate_thickness=0.1, plate_width=5.0)
        parasitics = compute_parasitics(make_transformer(primary=10, primary_conductor=plate), 0.01)
        assert parasitics.primary_resistance > 0
        assert parasitics.interwinding_capacitance <= 300e-12

    def test_toroid_turn_length(self):
        core = TransformerCoreParams(
            shape=CoreShape.TOROID_ROUND,
            material=CoreMaterial(CoreMaterialBase.NANOCRYSTALLINE, "nc_iron"),
            effective_area=52,
            effective_length=62,
            toroid_geometry=ToroidGeometry(inner_diameter=20, outer_diameter=30, height=10),
        )
        assert winding_mean_turn_length(core) == pytest.approx(78.54, rel=1e-4)

    def test_default_turn_length(self):
        assert winding_mean_turn_length(core_params_from_spec("nano_toroid_medium")) == pytest.approx(24.8)

    def test_secondary_resistance_scales_with_turns(self):
        few = compute_parasitics(make_transformer(secondary=500), 1.0)
        many = compute_parasitics(make_transformer(secondary=1000), 1.0)
        assert many.secondary_resistance == pytest.approx(2 * few.secondary_resistance)


class TestSaturationAndLoss:

    def test_peak_flux(self):
        assert peak_flux_density(0.1, 1000, 100, 52) == pytest.approx(0.004331, rel=1e-3)

    def test_margin(self):
        assert saturation_margin(0.6, 1.2) == pytest.approx(0.5)
        assert saturation_margin(2.0, 1.2) == 0.0

    def test_loss_tiers(self):
        assert core_loss_tier(CoreMaterial(CoreMaterialBase.SILICON_STEEL), 1000) == CoreLoss.HIGH
        assert core_loss_tier(CoreMaterial(CoreMaterialBase.NANOCRYSTALLINE, "nc_cobalt"), 1000) == CoreLoss.LOW
        assert core_loss_tier(CoreMaterial(CoreMaterialBase.AMORPHOUS, "am_iron"), 1000) == CoreLoss.MEDIUM


class TestCatalogue:

    def test_lookup(self):
        assert core_spec("nano_toroid_medium")["effective_area"] == 52
        assert core_spec("unobtainium") is None

    def test_params(self):
        core = core_params_from_spec("steel_ei_small", air_gap=0.05)
        assert core.material.base == CoreMaterialBase.SILICON_STEEL
        assert core.air_gap == 0.05

    def test_unknown_id(self):
        with pytest.raises(ValueError):
            core_params_from_spec("unobtainium")

    def test_filters(self):
        assert len(cores_by_material(CoreMaterialBase.FERRITE)) == 3
        assert len(cores_by_shape(CoreShape.EI_CORE)) == 2

    def test_every_entry_builds(self):
        for core in TRANSFORMER_CORES:
            assert core_params_from_spec(core["id"]).effective_area > 0


class TestTransformerResults:

    def test_summary(self):
        transformer = make_transformer()
        result = compute_transformer_results(transformer, LoadParams())
        assert result.turns_ratio == 10.0
        assert result.voltage_ratio == 10.0
        assert result.primary_inductance == pytest.approx(core_inductance(transformer))
        assert 0 < result.saturation_margin <= 1
        assert 20 < result.bandwidth <= 100000
        assert result.core_loss_estimate == core_loss_tier(transformer.core.material, 1000)

    def test_response_normalised(self):
        points = transformer_response(make_transformer(), LoadParams(), [100.0, 1000.0, 10000.0])
        assert points[1].magnitude == pytest.approx(1.0)
