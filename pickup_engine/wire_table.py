"""
Magnet wire tables: AWG gauges, insulation builds and copper resistivity.

Gauge data follows ASTM B 258 (d = 0.127 · 92^((36-n)/39) mm), rounded to
the values printed on wire spools. All dimensions are millimetres.
"""

import math
from typing import Dict, List, Optional

from pickup_engine.calibration import lookup
from pickup_engine.models import CopperGrade, InsulationType

# AWG 18-46. Thick gauges are for transformer windings, 38+ is pickup wire.
AWG_TABLE: List[Dict] = [
    {"awg": 18, "bare_diameter": 1.024, "area": 0.823, "resistance_per_meter": 0.0209},
    {"awg": 19, "bare_diameter": 0.912, "area": 0.653, "resistance_per_meter": 0.0264},
    {"awg": 20, "bare_diameter": 0.812, "area": 0.518, "resistance_per_meter": 0.0333},
    {"awg": 21, "bare_diameter": 0.723, "area": 0.411, "resistance_per_meter": 0.0420},
    {"awg": 22, "bare_diameter": 0.644, "area": 0.326, "resistance_per_meter": 0.0530},
    {"awg": 23, "bare_diameter": 0.573, "area": 0.258, "resistance_per_meter": 0.0668},
    {"awg": 24, "bare_diameter": 0.511, "area": 0.205, "resistance_per_meter": 0.0842},
    {"awg": 25, "bare_diameter": 0.455, "area": 0.162, "resistance_per_meter": 0.106},
    {"awg": 26, "bare_diameter": 0.405, "area": 0.129, "resistance_per_meter": 0.134},
    {"awg": 27, "bare_diameter": 0.361, "area": 0.102, "resistance_per_meter": 0.169},
    {"awg": 28, "bare_diameter": 0.321, "area": 0.0810, "resistance_per_meter": 0.213},
    {"awg": 29, "bare_diameter": 0.286, "area": 0.0642, "resistance_per_meter": 0.268},
    {"awg": 30, "bare_diameter": 0.255, "area": 0.0510, "resistance_per_meter": 0.338},
    {"awg": 31, "bare_diameter": 0.227, "area": 0.0404, "resistance_per_meter": 0.426},
    {"awg": 32, "bare_diameter": 0.202, "area": 0.0320, "resistance_per_meter": 0.538},
    {"awg": 33, "bare_diameter": 0.180, "area": 0.0254, "resistance_per_meter": 0.679},
    {"awg": 34, "bare_diameter": 0.160, "area": 0.0201, "resistance_per_meter": 0.856},
    {"awg": 35, "bare_diameter": 0.143, "area": 0.0160, "resistance_per_meter": 1.08},
    {"awg": 36, "bare_diameter": 0.127, "area": 0.0127, "resistance_per_meter": 1.36},
    {"awg": 37, "bare_diameter": 0.113, "area": 0.0100, "resistance_per_meter": 1.72},
    {"awg": 38, "bare_diameter": 0.1016, "area": 0.00811, "resistance_per_meter": 2.127},
    {"awg": 39, "bare_diameter": 0.0897, "area": 0.00632, "resistance_per_meter": 2.729},
    {"awg": 40, "bare_diameter": 0.0787, "area": 0.00487, "resistance_per_meter": 3.543},
    {"awg": 41, "bare_diameter": 0.0711, "area": 0.00397, "resistance_per_meter": 4.345},
    {"awg": 42, "bare_diameter": 0.0635, "area": 0.00317, "resistance_per_meter": 5.443},
    {"awg": 43, "bare_diameter": 0.0559, "area": 0.00245, "resistance_per_meter": 7.035},
    {"awg": 44, "bare_diameter": 0.0508, "area": 0.00203, "resistance_per_meter": 8.498},
    {"awg": 45, "bare_diameter": 0.0445, "area": 0.00156, "resistance_per_meter": 11.07},
    {"awg": 46, "bare_diameter": 0.0396, "area": 0.00123, "resistance_per_meter": 14.00},
]

# Build per side; total diameter grows by twice this
INSULATION_TABLE: Dict[InsulationType, Dict] = {
    InsulationType.PLAIN_ENAMEL: {"thickness": 0.005, "dielectric_constant": 3.5, "name": "Plain Enamel"},
    InsulationType.HEAVY_FORMVAR: {"thickness": 0.010, "dielectric_constant": 3.2, "name": "Heavy Formvar"},
    InsulationType.POLY: {"thickness": 0.007, "dielectric_constant": 2.3, "name": "Polyurethane"},
    InsulationType.POLY_NYLON: {"thickness": 0.007, "dielectric_constant": 2.5, "name": "Poly-Nylon"},
    InsulationType.SOLDERABLE: {"thickness": 0.005, "dielectric_constant": 3.0, "name": "Solderable Enamel"},
}
DEFAULT_INSULATION = InsulationType.PLAIN_ENAMEL

COPPER_RESISTIVITY_20C = 1.724e-8   # Ohm·m
COPPER_TEMP_COEFFICIENT = 0.00393   # 1/°C
COPPER_REFERENCE_TEMP = 20.0        # °C

# Purity relative to electrolytic copper
COPPER_GRADE_FACTORS: Dict[CopperGrade, float] = {
    CopperGrade.STANDARD: 1.0,
    CopperGrade.OFC: 0.995,
    CopperGrade.OCC: 0.99,
}


def awg_spec(awg: int) -> Optional[Dict]:
    """Table row for a gauge, or None outside AWG 18-46."""
    for spec in AWG_TABLE:
        if spec["awg"] == awg:
            return spec
    return None


def awg_from_diameter(diameter: float, tolerance: float = 0.002) -> Optional[int]:
    """Match a bare diameter (mm) back to its gauge."""
    for spec in AWG_TABLE:
        if abs(spec["bare_diameter"] - diameter) <= tolerance:
            return spec["awg"]
    return None


def wire_diameter_for_awg(awg: int) -> float:
    """
    Bare diameter in mm.

    Uses the table where possible and the ASTM formula for gauges outside it.
    """
    spec = awg_spec(awg)
    if spec is not None:
        return spec["bare_diameter"]
    return 0.127 * 92 ** ((36 - awg) / 39)


def wire_area(diameter: float) -> float:
    """Cross-section of a round conductor, mm²."""
    return math.pi * (diameter / 2) ** 2


def insulation_spec(insulation: InsulationType) -> Dict:
    """Build and dielectric data; unknown insulation falls back to plain enamel."""
    return lookup(INSULATION_TABLE, insulation, DEFAULT_INSULATION, "insulation")


def total_wire_diameter(bare_diameter: float, insulation: InsulationType) -> float:
    """Bare diameter plus insulation build on both sides, mm."""
    return bare_diameter + 2 * insulation_spec(insulation)["thickness"]


def copper_resistivity(temperature: float = 20.0, grade: CopperGrade = CopperGrade.STANDARD) -> float:
    """Resistivity in Ohm·m at ``temperature`` °C for a copper grade."""
    base = COPPER_RESISTIVITY_20C * COPPER_GRADE_FACTORS[CopperGrade(grade)]
    return base * (1 + COPPER_TEMP_COEFFICIENT * (temperature - COPPER_REFERENCE_TEMP))
