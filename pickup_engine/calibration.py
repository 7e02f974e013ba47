"""
Calibration coefficients for the v1 pickup model.

These cover the quantities that cannot be derived analytically without a
field solver (winding capacitance, magnetic coupling, string pull). The
values are empirical defaults that land inside measured ranges for common
pickups:

    Fender single coil (7500-8200 turns): 80-120 pF
    P90 (9500-10500 turns):              100-150 pF
    PAF humbucker (5000-5500 turns):      90-130 pF

Every table is read-only. Lookups go through the ``get_*`` helpers, which
fall back to the table's documented default for keys the table does not
know:

    K_WIND             scatter
    K_INS              plain_enamel
    K_COUPLING         custom
    K_MUTUAL           humbucker_side
    MAGNET_PROPERTIES  alnico5

Core material variants have no default; an unknown variant raises
``ValueError``.
"""

import logging
import math
from typing import Any, Dict, NamedTuple, Union

from pickup_engine.models import (
    CoreMaterial,
    CoreMaterialBase,
    InsulationType,
    MagnetType,
    WindingStyle,
)

logger = logging.getLogger(__name__)

MODEL_VERSION = "v1.0"

MU_0 = 4 * math.pi * 1e-7   # H/m
T_REF = 20.0                # °C, resistivity reference



def lookup(table: Dict, key: Any, default_key: Any, what: str = "key") -> Any:
    """``table[key]``, or ``table[default_key]`` when the key is unknown."""
    try:
        return table[key]
    except (KeyError, TypeError):
        logger.debug("Unknown %s '%s', using default '%s'", what, key, default_key)
        return table[default_key]


class CoefficientRange(NamedTuple):
    min: float
    max: float
    typical: float


# --- Winding capacitance: C ≈ C_BASE · N^C_EXPONENT · k_wind · k_pack · k_ins ---

C_CAPACITANCE_BASE = 8.0e-12   # F
C_CAPACITANCE_EXPONENT = 0.35  # only neighbouring turns contribute

K_WIND: Dict[WindingStyle, CoefficientRange] = {
    WindingStyle.SCATTER: CoefficientRange(0.6, 0.85, 0.75),
    WindingStyle.RANDOM: CoefficientRange(0.85, 1.05, 0.95),
    WindingStyle.LAYERED: CoefficientRange(1.1, 1.4, 1.25),
}
DEFAULT_WINDING_STYLE = WindingStyle.SCATTER

# Thicker insulation spaces turns further apart
K_INS: Dict[InsulationType, float] = {
    InsulationType.PLAIN_ENAMEL: 1.0,
    InsulationType.HEAVY_FORMVAR: 0.9,
    InsulationType.POLY: 0.95,
    InsulationType.POLY_NYLON: 0.93,
    InsulationType.SOLDERABLE: 0.98,
}
DEFAULT_INSULATION = InsulationType.PLAIN_ENAMEL


def get_k_wind(style: WindingStyle) -> float:
    return lookup(K_WIND, style, DEFAULT_WINDING_STYLE, "winding style").typical


def get_k_ins(insulation: InsulationType) -> float:
    return lookup(K_INS, insulation, DEFAULT_INSULATION, "insulation")


def get_k_pack(packing_factor: float) -> float:
    """0.7 at packing 0.5, rising linearly to 1.1 at packing 0.9."""
    return 0.7 + 1.0 * (packing_factor - 0.5)


# --- Magnetic coupling between field and coil ---

class CouplingRange(NamedTuple):
    min: float
    max: float
    typical: float
    description: str


K_COUPLING: Dict[str, CouplingRange] = {
    'sc_rod': CouplingRange(0.25, 0.45, 0.35, "Single coil with rod magnets"),
    'sc_bar_poles': CouplingRange(0.35, 0.6, 0.48, "Single coil with bar magnet and steel pole pieces"),
    'humbucker': CouplingRange(0.45, 0.75, 0.6, "Humbucker coil with concentrated flux"),
    'stacked': CouplingRange(0.3, 0.55, 0.42, "Stacked coil design"),
    'custom': CouplingRange(0.2, 0.8, 0.4, "Custom configuration"),
}
DEFAULT_COUPLING = 'custom'


def coupling_factor(key: str) -> float:
    return lookup(K_COUPLING, key, DEFAULT_COUPLING, "coupling configuration").typical


# --- Mutual inductance between coils: M = k·√(L1·L2) ---

K_MUTUAL: Dict[str, CoefficientRange] = {
    'humbucker_side': CoefficientRange(0.6, 0.9, 0.75),
    'stacked': CoefficientRange(0.85, 0.98, 0.92),
    'spaced': CoefficientRange(0.1, 0.4, 0.25),
}
DEFAULT_MUTUAL = 'humbucker_side'


def get_k_mutual(config: Union[str, float]) -> float:
    """Named coupling (see K_MUTUAL) or a numeric k in [0, 1]."""
    if isinstance(config, (int, float)):
        if not 0.0 <= config <= 1.0:
            raise ValueError(f"Mutual coupling must be in [0, 1], got {config}")
        return float(config)
    return lookup(K_MUTUAL, config, DEFAULT_MUTUAL, "mutual coupling").typical


# --- Magnets ---

class MagnetProperties(NamedTuple):
    br: float            # remanent flux density, T
    name: str
    description: str


MAGNET_PROPERTIES: Dict[MagnetType, MagnetProperties] = {
    MagnetType.ALNICO2: MagnetProperties(0.72, "AlNiCo 2", "Softer, warmer tone, lower output"),
    MagnetType.ALNICO3: MagnetProperties(0.70, "AlNiCo 3", "Mellow tone, vintage character"),
    MagnetType.ALNICO5: MagnetProperties(1.28, "AlNiCo 5", "Strong, bright, classic rock tone"),
    MagnetType.ALNICO8: MagnetProperties(0.92, "AlNiCo 8", "High output, aggressive tone"),
    MagnetType.FERRITE: MagnetProperties(0.42, "Ceramic/Ferrite", "Bright, percussive, high output"),
    MagnetType.NEODYMIUM: MagnetProperties(1.35, "Neodymium", "Very strong, modern high-output"),
}
DEFAULT_MAGNET = MagnetType.ALNICO5


def remanence(magnet_type: MagnetType) -> float:
    return lookup(MAGNET_PROPERTIES, magnet_type, DEFAULT_MAGNET, "magnet type").br


# --- String pull: SPI ∝ B² / d^n ---

STRING_PULL_EXPONENT = 2.5
STRING_PULL_NORMALIZATION = 0.01
STRING_PULL_SAFE = 0.4
STRING_PULL_DANGER = 0.7


# --- Transformer core materials ---

class CoreMaterialProperties(NamedTuple):
    permeability: float      # initial µr
    saturation_flux: float   # Bsat, T
    loss_coefficient: float  # relative, 1.0 = baseline
    name: str


CORE_MATERIAL_PROPERTIES: Dict[str, CoreMaterialProperties] = {
    'nc_iron': CoreMaterialProperties(80000, 1.23, 0.3, "Nanocrystalline Fe (Finemet/Vitroperm)"),
    'nc_cobalt': CoreMaterialProperties(150000, 0.8, 0.25, "Nanocrystalline Co"),
    'am_iron': CoreMaterialProperties(30000, 1.56, 0.5, "Amorphous Fe (Metglas 2605)"),
    'am_cobalt': CoreMaterialProperties(120000, 0.57, 0.35, "Amorphous Co (Metglas 2714)"),
    'ferrite_mnzn': CoreMaterialProperties(5000, 0.45, 0.8, "MnZn Ferrite"),
    'ferrite_nizn': CoreMaterialProperties(500, 0.35, 0.6, "NiZn Ferrite"),
    'silicon_steel': CoreMaterialProperties(4000, 1.8, 1.5, "Grain-Oriented Silicon Steel"),
}


def core_material_properties(material: CoreMaterial) -> CoreMaterialProperties:
    if material.base == CoreMaterialBase.SILICON_STEEL:
        return CORE_MATERIAL_PROPERTIES['silicon_steel']
    if material.variant not in CORE_MATERIAL_PROPERTIES:
        raise ValueError(f"Unknown core material variant '{material.variant}'")
    return CORE_MATERIAL_PROPERTIES[material.variant]
