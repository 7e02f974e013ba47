"""
Combining two coils (humbuckers, split and stacked designs).

Coupled inductors share flux through their mutual inductance
M = k·√(L1·L2):

    series:    L = L1 + L2 ± 2M
    parallel:  L = (L1·L2 − M²) / (L1 + L2 ∓ 2M)

with the upper sign for in-phase wiring. Winding capacitances add in both
cases; resonance and Q are recomputed from the combined elements.
"""

import math
from dataclasses import replace
from typing import Optional, Union

from pickup_engine.calibration import get_k_mutual
from pickup_engine.models import CoilComputedResults, PhaseConfig, WiringConfig

Coupling = Union[str, float]


def mutual_inductance(l1: float, l2: float, k: float) -> float:
    return k * math.sqrt(l1 * l2)


def _recomputed(
    coil1: CoilComputedResults,
    coil2: CoilComputedResults,
    resistance: float,
    inductance: float,
    capacitance: float,
) -> CoilComputedResults:
    f0 = 0.0
    if inductance > 0 and capacitance > 0:
        f0 = 1 / (2 * math.pi * math.sqrt(inductance * capacitance))
    q = 0.0
    if resistance > 0 and f0 > 0:
        q = 2 * math.pi * f0 * inductance / resistance

    return replace(
        coil1,
        mean_turn_length=(coil1.mean_turn_length + coil2.mean_turn_length) / 2,
        total_wire_length=coil1.total_wire_length + coil2.total_wire_length,
        coil_volume=coil1.coil_volume + coil2.coil_volume,
        dc_resistance=resistance,
        inductance=inductance,
        capacitance=capacitance,
        resonant_frequency=f0,
        quality_factor=q,
        max_turns=min(coil1.max_turns, coil2.max_turns),
        computed_outer_radius=max(coil1.computed_outer_radius, coil2.computed_outer_radius),
    )


def series_coils(
    coil1: CoilComputedResults,
    coil2: CoilComputedResults,
    coupling: Coupling = 'humbucker_side',
    phase: PhaseConfig = PhaseConfig.IN_PHASE,
) -> CoilComputedResults:
    """Coils in series. Out of phase the mutual flux cancels; L never goes negative."""
    m = mutual_inductance(coil1.inductance, coil2.inductance, get_k_mutual(coupling))
    l_sum = coil1.inductance + coil2.inductance
    if phase == PhaseConfig.IN_PHASE:
        inductance = l_sum + 2 * m
    else:
        inductance = max(l_sum - 2 * m, 0.0)

    return _recomputed(
        coil1, coil2,
        resistance=coil1.dc_resistance + coil2.dc_resistance,
        inductance=inductance,
        capacitance=coil1.capacitance + coil2.capacitance,
    )


def parallel_coils(
    coil1: CoilComputedResults,
    coil2: CoilComputedResults,
    coupling: Coupling = 'humbucker_side',
    phase: PhaseConfig = PhaseConfig.IN_PHASE,
) -> CoilComputedResults:
    l1, l2 = coil1.inductance, coil2.inductance
    m = mutual_inductance(l1, l2, get_k_mutual(coupling))

    r1, r2 = coil1.dc_resistance, coil2.dc_resistance
    resistance = r1 * r2 / (r1 + r2) if r1 + r2 > 0 else 0.0

    if phase == PhaseConfig.IN_PHASE:
        denominator = l1 + l2 - 2 * m
    else:
        denominator = l1 + l2 + 2 * m
    inductance = (l1 * l2 - m * m) / denominator if denominator > 0 else 0.0

    return _recomputed(
        coil1, coil2,
        resistance=resistance,
        inductance=inductance,
        capacitance=coil1.capacitance + coil2.capacitance,
    )


def combine_coils(
    coil1: CoilComputedResults,
    coil2: Optional[CoilComputedResults],
    wiring: WiringConfig,
    phase: PhaseConfig = PhaseConfig.IN_PHASE,
    coupling: Coupling = 'humbucker_side',
) -> CoilComputedResults:
    """Electrical equivalent of the wired pair; ``coil1`` unchanged for single-coil wiring."""
    if wiring == WiringConfig.SINGLE or coil2 is None:
        return coil1
    if wiring == WiringConfig.SERIES:
        return series_coils(coil1, coil2, coupling, phase)
    if wiring == WiringConfig.PARALLEL:
        return parallel_coils(coil1, coil2, coupling, phase)
    raise ValueError(f"Unknown wiring '{wiring}'. Must be one of: {[w.value for w in WiringConfig]}")


_OUTPUT_MULTIPLIERS = {
    (WiringConfig.SERIES, PhaseConfig.IN_PHASE): 2.0,
    (WiringConfig.SERIES, PhaseConfig.OUT_OF_PHASE): 0.3,
    (WiringConfig.PARALLEL, PhaseConfig.IN_PHASE): 1.0,
    (WiringConfig.PARALLEL, PhaseConfig.OUT_OF_PHASE): 0.5,
}


def output_multiplier(wiring: WiringConfig, phase: PhaseConfig) -> float:
    """Relative output voltage versus one coil alone."""
    if wiring == WiringConfig.SINGLE:
        return 1.0
    return _OUTPUT_MULTIPLIERS.get((wiring, phase), 1.0)
