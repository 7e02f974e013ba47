"""
Step-up transformer model for low-impedance pickups.

Equivalent circuit seen from the coil (primary side):

    Z_in = Rp + ( jωLm ∥ (jωLlk + Rs/n² + Z_load/n²) ) ∥ 1/(jωCiw)

where n = Ns/Np, Lm the magnetizing (primary) inductance from the core,
Llk the leakage inductance and Ciw the interwinding capacitance. Winding
capacitances and resistances are empirical estimates from turn counts,
conductor size and winding style.

Primary inductance follows from the gapped core:

    μ_eff = μ / (1 + μ·g/ℓe)
    Lp    = μ0 · μ_eff · Np² · Ae / ℓe

and the saturation check from the transformer EMF equation
B_peak = V / (4.44 · f · N · Ae).
"""

import logging
import math
from typing import Dict, List

import numpy as np

from pickup_engine import calibration
from pickup_engine import complex_math as cm
from pickup_engine.impedance import capacitor_impedance, load_impedance, log_frequencies
from pickup_engine.models import (
    ConductorMaterial,
    ConductorType,
    CoreLoss,
    CoreMaterial,
    FrequencyPoint,
    LoadParams,
    TransformerComputedResults,
    TransformerCoreParams,
    TransformerParams,
    TransformerParasitics,
    TransformerWindingStyle,
)
from pickup_engine.units import mm2_to_m2, mm_to_m
from pickup_engine.wire_table import COPPER_RESISTIVITY_20C, awg_spec, wire_area, wire_diameter_for_awg

logger = logging.getLogger(__name__)

REFERENCE_FREQUENCY = 1000.0
DEFAULT_SOURCE_VOLTAGE = 0.1   # V rms, typical pickup output
DEFAULT_PRIMARY_AWG = 38
DEFAULT_PLATE_WIDTH = 5.0      # mm
DEFAULT_PLATE_THICKNESS = 0.1  # mm

CONDUCTOR_RESISTIVITY_FACTORS: Dict[ConductorMaterial, float] = {
    ConductorMaterial.COPPER: 1.0,
    ConductorMaterial.OFC_COPPER: 0.995,
    ConductorMaterial.SILVER: 0.95,
    ConductorMaterial.ALUMINUM: 1.64,
    ConductorMaterial.BRASS: 3.8,
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# --- Ratios and reflection ---

def turns_ratio(primary_turns: int, secondary_turns: int) -> float:
    """n = Ns / Np (0 for an empty primary)."""
    if primary_turns <= 0:
        return 0.0
    return secondary_turns / primary_turns


def voltage_ratio(ratio: float) -> float:
    return ratio


def reflected_load(load_z, ratio: float):
    """Secondary-side impedance as seen from the primary: Z / n²."""
    if ratio == 0:
        return cm.INF
    return load_z / (ratio * ratio)


def reflected_load_magnitude(load: LoadParams, ratio: float, frequency: float = REFERENCE_FREQUENCY) -> float:
    return cm.magnitude(reflected_load(load_impedance(load, frequency), ratio))


# --- Core ---

def effective_permeability(core_permeability: float, air_gap: float, effective_length: float) -> float:
    """Permeability of a gapped core; the gap dominates once μ·g/ℓe >> 1."""
    if air_gap <= 0:
        return core_permeability
    return core_permeability / (1 + core_permeability * air_gap / effective_length)


def primary_inductance(
    primary_turns: int,
    effective_area: float,
    effective_length: float,
    permeability: float,
) -> float:
    """Magnetizing inductance in H (area in mm², path length in mm)."""
    return (calibration.MU_0 * permeability * primary_turns ** 2
            * mm2_to_m2(effective_area) / mm_to_m(effective_length))


def core_inductance(transformer: TransformerParams) -> float:
    """Primary inductance for the configured core, gap included."""
    core = transformer.core
    mu = calibration.core_material_properties(core.material).permeability
    mu_eff = effective_permeability(mu, core.air_gap, core.effective_length)
    return primary_inductance(transformer.winding.primary_turns, core.effective_area, core.effective_length, mu_eff)


# --- Parasitics ---

def leakage_inductance(
    lp: float,
    winding_style: TransformerWindingStyle,
    shielding: bool = False,
) -> float:
    """Fraction of the primary inductance not coupled to the secondary."""
    factor = 0.015 if winding_style == TransformerWindingStyle.INTERLEAVED else 0.06
    if shielding:
        factor *= 1.2
    return lp * factor


def interwinding_capacitance(transformer: TransformerParams) -> float:
    """Primary-to-secondary capacitance in F, scaled from a 50 mm² core at 100 turns."""
    winding = transformer.winding
    conductor = winding.primary_conductor
    is_plate = conductor.type == ConductorType.PLATE

    turns_factor = math.sqrt(winding.primary_turns * winding.secondary_turns)
    area_factor = transformer.core.effective_area / 50
    cap_pf = 5 * math.sqrt(area_factor) * math.sqrt(turns_factor / 100)

    if is_plate:
        width = conductor.plate_width or DEFAULT_PLATE_WIDTH
        cap_pf *= min(4, 1.5 + width / 10)
    if winding.winding_style == TransformerWindingStyle.INTERLEAVED:
        cap_pf *= 2.5
    if winding.shielding:
        cap_pf *= 0.3

    high = 300e-12 if is_plate else 200e-12
    return _clamp(cap_pf * 1e-12, 5e-12, high)


def primary_capacitance(transformer: TransformerParams) -> float:
    """Self-capacitance of the primary winding in F."""
    winding = transformer.winding
    conductor = winding.primary_conductor
    is_plate = conductor.type == ConductorType.PLATE

    cap_pf = 3 * math.sqrt(winding.primary_turns / 100)
    if is_plate:
        width = conductor.plate_width or DEFAULT_PLATE_WIDTH
        thickness = conductor.plate_thickness or DEFAULT_PLATE_THICKNESS
        cap_pf *= _clamp((width / 5) * math.sqrt(0.5 / thickness), 1.5, 5)
    else:
        awg = conductor.wire_awg or DEFAULT_PRIMARY_AWG
        cap_pf *= _clamp(1.0 + (38 - awg) * 0.05, 0.5, 2)

    if winding.winding_style == TransformerWindingStyle.INTERLEAVED:
        cap_pf *= 1.5

    high = 100e-12 if is_plate else 50e-12
    return _clamp(cap_pf * 1e-12, 3e-12, high)


def secondary_capacitance(transformer: TransformerParams) -> float:
    """Self-capacitance of the secondary winding in F."""
    winding = transformer.winding
    cap_pf = 5 * math.sqrt(winding.secondary_turns / 500)
    cap_pf *= _clamp(1.0 + (40 - winding.secondary_awg) * 0.04, 0.5, 2)
    if winding.winding_style == TransformerWindingStyle.INTERLEAVED:
        cap_pf *= 1.3
    return _clamp(cap_pf * 1e-12, 5e-12, 150e-12)


def conductor_resistivity_factor(material: ConductorMaterial) -> float:
    """Resistivity relative to annealed copper."""
    return CONDUCTOR_RESISTIVITY_FACTORS.get(material, 1.0)


def winding_mean_turn_length(core: TransformerCoreParams) -> float:
    """
    Mean turn length in mm.

    Toroids with known dimensions use π·D_mean plus the straight sections
    of an oval; otherwise a square window is assumed (0.4·ℓe).
    """
    if core.toroid_geometry is not None:
        g = core.toroid_geometry
        return math.pi * (g.inner_diameter + g.outer_diameter) / 2 + 2 * g.straight_length
    return core.effective_length * 0.4


def _wire_resistance(awg: int, length_m: float, factor: float) -> float:
    spec = awg_spec(awg)
    if spec is not None:
        return spec["resistance_per_meter"] * length_m * factor
    area = mm2_to_m2(wire_area(wire_diameter_for_awg(awg)))
    return COPPER_RESISTIVITY_20C * factor * length_m / area


def primary_resistance(transformer: TransformerParams) -> float:
    conductor = transformer.winding.primary_conductor
    length = transformer.winding.primary_turns * mm_to_m(winding_mean_turn_length(transformer.core))
    factor = conductor_resistivity_factor(conductor.material)

    if conductor.type == ConductorType.PLATE:
        thickness = mm_to_m(conductor.plate_thickness or DEFAULT_PLATE_THICKNESS)
        width = mm_to_m(conductor.plate_width or DEFAULT_PLATE_WIDTH)
        area = thickness * width
        if area <= 0:
            return 0.0
        return COPPER_RESISTIVITY_20C * factor * length / area

    return _wire_resistance(conductor.wire_awg or DEFAULT_PRIMARY_AWG, length, factor)


def secondary_resistance(transformer: TransformerParams) -> float:
    winding = transformer.winding
    length = winding.secondary_turns * mm_to_m(winding_mean_turn_length(transformer.core))
    return _wire_resistance(winding.secondary_awg, length, conductor_resistivity_factor(winding.secondary_material))


def compute_parasitics(transformer: TransformerParams, lp: float) -> TransformerParasitics:
    winding = transformer.winding
    return TransformerParasitics(
        leakage_inductance=leakage_inductance(lp, winding.winding_style, winding.shielding),
        interwinding_capacitance=interwinding_capacitance(transformer),
        primary_capacitance=primary_capacitance(transformer),
        secondary_capacitance=secondary_capacitance(transformer),
        primary_resistance=primary_resistance(transformer),
        secondary_resistance=secondary_resistance(transformer),
    )


# --- Saturation and loss ---

def peak_flux_density(voltage_rms: float, frequency: float, primary_turns: int, effective_area: float) -> float:
    """Peak core flux in T for a sinusoidal drive (area in mm²)."""
    if frequency <= 0 or primary_turns <= 0 or effective_area <= 0:
        return 0.0
    return voltage_rms / (4.44 * frequency * primary_turns * mm2_to_m2(effective_area))


def saturation_margin(peak_flux: float, saturation_flux: float) -> float:
    """Headroom to saturation: 1 = unused core, 0 = at or past Bsat."""
    if saturation_flux <= 0:
        return 0.0
    return max(0.0, 1 - peak_flux / saturation_flux)


def core_loss_tier(material: CoreMaterial, frequency: float) -> CoreLoss:
    loss = calibration.core_material_properties(material).loss_coefficient
    loss_factor = loss * (1 + math.log10(frequency / 100) / 3)
    if loss_factor < 0.4:
        return CoreLoss.LOW
    if loss_factor < 0.8:
        return CoreLoss.MEDIUM
    return CoreLoss.HIGH


# --- Network ---

def transformer_impedance(lp: float, llk: float, ciw: float, rp: float, frequency):
    """Unloaded transformer: Rp + jωLlk + (jωLm ∥ Ciw)."""
    omega = 2 * np.pi * np.asarray(frequency, dtype=float)
    z_lm = 1j * omega * lp
    return rp + 1j * omega * llk + cm.parallel(z_lm, capacitor_impedance(ciw, frequency))


def primary_impedance(transformer: TransformerParams, load_z, frequency):
    """Impedance the coil sees looking into the primary, with the load reflected through."""
    omega = 2 * np.pi * np.asarray(frequency, dtype=float)
    n = turns_ratio(transformer.winding.primary_turns, transformer.winding.secondary_turns)
    lp = core_inductance(transformer)
    parasitics = compute_parasitics(transformer, lp)

    z_secondary = (1j * omega * parasitics.leakage_inductance
                   + parasitics.secondary_resistance / (n * n)
                   + reflected_load(load_z, n))
    z_magnetizing = cm.parallel(1j * omega * lp, z_secondary)
    z_shunt = cm.parallel(z_magnetizing, capacitor_impedance(parasitics.interwinding_capacitance, frequency))
    return parasitics.primary_resistance + z_shunt


def transformer_response(
    transformer: TransformerParams,
    load: LoadParams,
    frequencies,
) -> List[FrequencyPoint]:
    """Transformer alone driving the load, from an ideal source; normalised to 1 kHz."""
    n = turns_ratio(transformer.winding.primary_turns, transformer.winding.secondary_turns)
    lp = core_inductance(transformer)
    parasitics = compute_parasitics(transformer, lp)
    rs_reflected = parasitics.secondary_resistance / (n * n)

    def transfer(freqs):
        reflected = reflected_load(load_impedance(load, freqs), n) + rs_reflected
        z_xfmr = transformer_impedance(
            lp, parasitics.leakage_inductance, parasitics.interwinding_capacitance,
            parasitics.primary_resistance, freqs,
        )
        return cm.divide(reflected, z_xfmr + reflected)

    freqs = np.atleast_1d(np.asarray(frequencies, dtype=float))
    h = transfer(freqs)
    ref = float(cm.magnitude(transfer(np.array([REFERENCE_FREQUENCY])))[0])

    mags = cm.magnitude(h)
    if ref > 0:
        mags = mags / ref
    db = 20 * np.log10(np.where(mags > 0, mags, 1e-10))
    phases = cm.phase_deg(h)
    return [
        FrequencyPoint(frequency=float(f), magnitude=float(m), magnitude_db=float(d), phase_deg=float(p))
        for f, m, d, p in zip(freqs, mags, db, phases)
    ]


def transformer_bandwidth(transformer: TransformerParams, load: LoadParams) -> float:
    """Upper -3 dB frequency: first point below 0.707 × peak once the peak is reached."""
    freqs = log_frequencies(20, 100000, 500)
    mags = np.array([p.magnitude for p in transformer_response(transformer, load, freqs)])
    peak = mags.max()

    reached = np.cumsum(mags >= 0.99 * peak) > 0
    below = np.nonzero(reached & (mags < 0.707 * peak))[0]
    if below.size:
        return float(freqs[below[0]])
    return float(freqs[-1])


def compute_transformer_results(
    transformer: TransformerParams,
    load: LoadParams,
    source_voltage_rms: float = DEFAULT_SOURCE_VOLTAGE,
    operating_frequency: float = REFERENCE_FREQUENCY,
) -> TransformerComputedResults:
    """
    Summary figures for a transformer driving the given load.

    Args:
        transformer: Core and winding description.
        load: Pots, cable and amp on the secondary.
        source_voltage_rms: Drive level for the saturation check.
        operating_frequency: Frequency for the flux and core-loss estimates.
    """
    winding = transformer.winding
    core = transformer.core
    props = calibration.core_material_properties(core.material)

    n = turns_ratio(winding.primary_turns, winding.secondary_turns)
    mu_eff = effective_permeability(props.permeability, core.air_gap, core.effective_length)
    lp = primary_inductance(winding.primary_turns, core.effective_area, core.effective_length, mu_eff)
    b_peak = peak_flux_density(source_voltage_rms, operating_frequency, winding.primary_turns, core.effective_area)

    logger.debug("Transformer 1:%.1f, Lp=%.3f H, B_peak=%.4f T", n, lp, b_peak)

    return TransformerComputedResults(
        turns_ratio=n,
        voltage_ratio=voltage_ratio(n),
        reflected_load=reflected_load_magnitude(load, n, REFERENCE_FREQUENCY),
        primary_inductance=lp,
        effective_permeability=mu_eff,
        parasitics=compute_parasitics(transformer, lp),
        bandwidth=transformer_bandwidth(transformer, load),
        saturation_margin=saturation_margin(b_peak, props.saturation_flux),
        saturation_flux=props.saturation_flux,
        peak_flux=b_peak,
        core_loss_estimate=core_loss_tier(core.material, operating_frequency),
    )
