"""
Coil electrical model: DC resistance, inductance and self-capacitance of a
wound pickup coil from its geometry and winding.

Resistance follows directly from wire length and copper resistivity.
Inductance uses Wheeler's short-solenoid approximation:

    L(µH) = r²·N² / (9r + 10ℓ)        r, ℓ in inches

with r the mean radius (cylindrical) or the radius of a circle with the
winding cross-section area (rectangular, flatwork). Flatwork coils get a
1.12 calibration factor since Wheeler underestimates wide flat windings.

Self-capacitance scales sub-linearly with turn count, as only adjacent
turns contribute appreciably:

    C ≈ 8 pF · N^0.35 · k_wind · k_pack · k_ins
"""

import logging
import math

from pickup_engine import calibration
from pickup_engine.models import (
    CoilComputedResults,
    CoilForm,
    CoilGeometry,
    CopperGrade,
    InsulationType,
    WireParams,
)
from pickup_engine.units import mm2_to_m2, mm_to_inch, mm_to_m
from pickup_engine.wire_table import copper_resistivity, total_wire_diameter, wire_area

logger = logging.getLogger(__name__)

WIRE_LENGTH_CORRECTION = 1.03   # lead-outs and winding irregularity
FLATWORK_STRAIGHT_FACTOR = 0.92  # straight share of a racetrack side
FLATWORK_DEFAULT_LENGTH = 80.0   # mm
FLATWORK_INDUCTANCE_FACTOR = 1.12


# --- Geometry ---

def mean_turn_length(geometry: CoilGeometry) -> float:
    """Length of one average turn in metres."""
    if geometry.form == CoilForm.RECTANGULAR:
        width = geometry.outer_radius - geometry.inner_radius
        length = geometry.length or geometry.height
        return mm_to_m(2 * (width + length))

    if geometry.form == CoilForm.FLATWORK:
        # Racetrack: two straights plus two semicircles around the mean width
        length = geometry.length or FLATWORK_DEFAULT_LENGTH
        straight = length * FLATWORK_STRAIGHT_FACTOR
        mean_width = (geometry.inner_radius + geometry.outer_radius) / 2
        return mm_to_m(2 * straight + mean_width * (math.pi - 2))

    r_mean = (geometry.inner_radius + geometry.outer_radius) / 2
    return 2 * math.pi * mm_to_m(r_mean)


def total_wire_length(geometry: CoilGeometry, turns: int) -> float:
    """Wire needed for ``turns`` turns, metres."""
    return turns * mean_turn_length(geometry) * WIRE_LENGTH_CORRECTION


def winding_area(geometry: CoilGeometry) -> float:
    """Cross-section the turns enclose on average, mm²."""
    if geometry.form == CoilForm.CYLINDRICAL:
        return math.pi * (geometry.outer_radius ** 2 - geometry.inner_radius ** 2)
    width = geometry.outer_radius - geometry.inner_radius
    return width * (geometry.length or geometry.height)


def equivalent_radius(area: float) -> float:
    """Radius of a circle with the given area (mm² -> mm)."""
    return math.sqrt(area / math.pi)


def coil_volume(geometry: CoilGeometry) -> float:
    """Winding volume in mm³."""
    if geometry.form == CoilForm.CYLINDRICAL:
        return math.pi * (geometry.outer_radius ** 2 - geometry.inner_radius ** 2) * geometry.height
    width = geometry.outer_radius - geometry.inner_radius
    return width * (geometry.length or geometry.height) * geometry.height


# --- Electrical ---

def dc_resistance(
    length_m: float,
    diameter_mm: float,
    temperature: float = 20.0,
    grade: CopperGrade = CopperGrade.STANDARD,
) -> float:
    """
    DC resistance R = ρ(T)·L / A.

    Args:
        length_m: Wire length in metres.
        diameter_mm: Bare conductor diameter in mm.
        temperature: Winding temperature in °C.
        grade: Copper purity grade.

    Raises:
        ValueError: If the diameter is not positive.
    """
    if diameter_mm <= 0:
        raise ValueError(f"Invalid wire diameter: {diameter_mm}")
    rho = copper_resistivity(temperature, grade)
    return rho * length_m / mm2_to_m2(wire_area(diameter_mm))


def inductance(geometry: CoilGeometry, turns: int) -> float:
    """Self-inductance in henries (Wheeler approximation)."""
    factor = 1.0
    if geometry.form == CoilForm.CYLINDRICAL:
        radius = (geometry.inner_radius + geometry.outer_radius) / 2
    else:
        radius = equivalent_radius(winding_area(geometry))
        if geometry.form == CoilForm.FLATWORK:
            factor = FLATWORK_INDUCTANCE_FACTOR

    r = mm_to_inch(radius)
    ell = mm_to_inch(geometry.height)
    inductance_uh = (r * r * turns * turns) / (9 * r + 10 * ell)
    return inductance_uh * 1e-6 * factor


def solenoid_inductance(geometry: CoilGeometry, turns: int) -> float:
    """Long-solenoid formula μ0·N²·A/ℓ, for comparison only."""
    return calibration.MU_0 * turns * turns * mm2_to_m2(winding_area(geometry)) / mm_to_m(geometry.height)


def capacitance(wire: WireParams) -> float:
    """Winding self-capacitance in farads."""
    k_wind = calibration.get_k_wind(wire.winding_style)
    k_pack = calibration.get_k_pack(wire.packing_factor)
    k_ins = calibration.get_k_ins(wire.insulation)
    turns_factor = wire.turns ** calibration.C_CAPACITANCE_EXPONENT
    return calibration.C_CAPACITANCE_BASE * turns_factor * k_wind * k_pack * k_ins


def resonant_frequency(inductance_h: float, capacitance_f: float) -> float:
    """f0 = 1 / (2π√(LC)); 0 when either element is missing."""
    if inductance_h <= 0 or capacitance_f <= 0:
        return 0.0
    return 1 / (2 * math.pi * math.sqrt(inductance_h * capacitance_f))


def quality_factor(f0: float, inductance_h: float, resistance: float) -> float:
    """Q = ω0·L / R; infinite for a lossless coil."""
    if resistance <= 0:
        return math.inf
    return 2 * math.pi * f0 * inductance_h / resistance


# --- Winding window ---

def max_turns(
    geometry: CoilGeometry,
    diameter_mm: float,
    insulation: InsulationType,
    packing_factor: float,
) -> int:
    """Turns that fit the bobbin window at the given packing factor."""
    total_d = total_wire_diameter(diameter_mm, insulation)
    if total_d <= 0:
        return 0

    bobbin = geometry.bobbin_thickness or 0.0
    width = geometry.outer_radius - geometry.inner_radius - 2 * bobbin
    height = geometry.height - 2 * bobbin
    if width <= 0 or height <= 0:
        return 0

    return int(math.floor(width * height * packing_factor / wire_area(total_d)))


def outer_build(
    inner: float,
    height: float,
    turns: int,
    diameter_mm: float,
    insulation: InsulationType,
    packing_factor: float,
) -> float:
    """
    Outer radius (or width for non-round forms) the winding actually reaches.

    A single layer adds one wire diameter. Stacked layers leave gaps, so
    each layer adds d/√packing.
    """
    total_d = total_wire_diameter(diameter_mm, insulation)
    if total_d <= 0 or height <= 0 or turns <= 0:
        return inner

    per_layer = max(1, int(math.floor(height * packing_factor / total_d)))
    layers = math.ceil(turns / per_layer)
    if layers == 1:
        return inner + total_d
    return inner + layers * total_d / math.sqrt(packing_factor)


def compute_coil_results(geometry: CoilGeometry, wire: WireParams) -> CoilComputedResults:
    mtl = mean_turn_length(geometry)
    length = total_wire_length(geometry, wire.turns)
    r = dc_resistance(length, wire.wire_diameter, wire.temperature, wire.copper_grade)
    l = inductance(geometry, wire.turns)
    c = capacitance(wire)
    f0 = resonant_frequency(l, c)

    logger.debug("Coil: %d turns, R=%.1f Ohm, L=%.3f H, C=%.1f pF", wire.turns, r, l, c * 1e12)

    return CoilComputedResults(
        mean_turn_length=mtl,
        total_wire_length=length,
        coil_volume=coil_volume(geometry),
        dc_resistance=r,
        inductance=l,
        capacitance=c,
        resonant_frequency=f0,
        quality_factor=quality_factor(f0, l, r),
        max_turns=max_turns(geometry, wire.wire_diameter, wire.insulation, wire.packing_factor),
        computed_outer_radius=outer_build(
            geometry.inner_radius, geometry.height, wire.turns,
            wire.wire_diameter, wire.insulation, wire.packing_factor,
        ),
    )
