"""
Tone guide: qualitative bass/mid/treble ratings for a loaded pickup.

Ratings sit on a 1-9 scale centred on 5 and come from the loaded resonance
(brightness, relative to a 3.5 kHz reference), the loaded Q (peakiness,
relative to 3) and empirical offsets for the magnet, wire insulation, pole
pieces and cover. Conductive pole pieces and covers also lose energy to
eddy currents, which lowers the effective Q.

These are heuristics for comparing designs, not measurements.
"""

import math
from typing import Dict, List, NamedTuple, Optional

from pickup_engine.calibration import lookup
from pickup_engine.models import (
    CoverType,
    InsulationType,
    MagnetType,
    PolePieceMaterial,
    ToneDescriptor,
    ToneRatings,
)

F0_REF = 3500.0    # Hz
Q_REF = 3.0
PRESENCE_CENTER = 3500.0   # Hz
PRESENCE_WIDTH = 1.5       # octaves


class BandModifier(NamedTuple):
    bass: float
    low_mid: float
    high_mid: float
    treble: float
    character: str


class EddyModifier(NamedTuple):
    q_factor: float
    treble: float
    high_mid: float
    character: str


MAGNET_MODIFIERS: Dict[MagnetType, BandModifier] = {
    MagnetType.ALNICO2: BandModifier(0.5, 0.3, -0.3, -0.5, 'soft'),
    MagnetType.ALNICO3: BandModifier(0.3, 0.2, -0.2, -0.3, 'mellow'),
    MagnetType.ALNICO5: BandModifier(-0.2, 0.0, 0.3, 0.4, 'punchy'),
    MagnetType.ALNICO8: BandModifier(-0.4, -0.2, 0.5, 0.3, 'hot'),
    MagnetType.FERRITE: BandModifier(-0.6, -0.3, 0.6, 0.7, 'aggressive'),
    MagnetType.NEODYMIUM: BandModifier(-0.4, -0.2, 0.4, 0.8, 'modern'),
}
DEFAULT_MAGNET = MagnetType.ALNICO5

WIRE_MODIFIERS: Dict[InsulationType, BandModifier] = {
    InsulationType.PLAIN_ENAMEL: BandModifier(-0.2, 0.2, 0.4, -0.2, 'biting'),
    InsulationType.HEAVY_FORMVAR: BandModifier(0.3, -0.3, -0.2, 0.3, 'glassy'),
    InsulationType.POLY: BandModifier(0.0, 0.0, 0.1, 0.2, 'modern'),
    InsulationType.POLY_NYLON: BandModifier(0.1, 0.1, 0.0, 0.0, 'smooth'),
    InsulationType.SOLDERABLE: BandModifier(0.0, 0.0, 0.2, 0.0, 'neutral'),
}
DEFAULT_INSULATION = InsulationType.PLAIN_ENAMEL

POLE_PIECE_MODIFIERS: Dict[PolePieceMaterial, EddyModifier] = {
    PolePieceMaterial.ALNICO: EddyModifier(1.0, 0.0, 0.0, 'open'),
    PolePieceMaterial.STEEL: EddyModifier(0.85, -0.5, -0.2, 'focused'),
    PolePieceMaterial.STEEL_PLATED: EddyModifier(0.75, -0.8, -0.4, 'smooth'),
}
DEFAULT_POLE_PIECE = PolePieceMaterial.ALNICO

COVER_MODIFIERS: Dict[CoverType, EddyModifier] = {
    CoverType.NONE: EddyModifier(1.0, 0.0, 0.0, 'bright'),
    CoverType.PLASTIC: EddyModifier(0.98, -0.1, 0.0, 'neutral'),
    CoverType.NICKEL_SILVER: EddyModifier(0.85, -0.6, -0.3, 'warm'),
    CoverType.CHROME: EddyModifier(0.75, -1.0, -0.5, 'dark'),
}
DEFAULT_COVER = CoverType.NONE


def magnet_modifier(magnet_type: MagnetType) -> BandModifier:
    return lookup(MAGNET_MODIFIERS, magnet_type, DEFAULT_MAGNET, "magnet type")


def wire_modifier(insulation: InsulationType) -> BandModifier:
    return lookup(WIRE_MODIFIERS, insulation, DEFAULT_INSULATION, "insulation")


def pole_piece_modifier(pole_piece: PolePieceMaterial) -> EddyModifier:
    return lookup(POLE_PIECE_MODIFIERS, pole_piece, DEFAULT_POLE_PIECE, "pole piece")


def cover_modifier(cover: CoverType) -> EddyModifier:
    return lookup(COVER_MODIFIERS, cover, DEFAULT_COVER, "cover")


def soft_clamp(value: float, low: float, high: float, softness: float = 2.0) -> float:
    """Squash ``value`` into (low, high) along a tanh curve instead of a hard limit."""
    center = (low + high) / 2
    half_range = (high - low) / 2
    normalized = (value - center) / half_range
    return center + math.tanh(normalized / softness) * half_range


def eddy_q_factor(
    pole_piece: PolePieceMaterial = PolePieceMaterial.ALNICO,
    cover: CoverType = CoverType.NONE,
) -> float:
    """Fraction of Q left after eddy losses in pole pieces and cover."""
    return pole_piece_modifier(pole_piece).q_factor * cover_modifier(cover).q_factor


def tone_ratings(
    loaded_f0: float,
    loaded_q: float,
    magnet_type: MagnetType = MagnetType.ALNICO5,
    insulation: InsulationType = InsulationType.PLAIN_ENAMEL,
    pole_piece: PolePieceMaterial = PolePieceMaterial.ALNICO,
    cover: CoverType = CoverType.NONE,
) -> ToneRatings:
    magnet = magnet_modifier(magnet_type)
    wire = wire_modifier(insulation)
    pole = pole_piece_modifier(pole_piece)
    shell = cover_modifier(cover)

    # Octaves from the reference, compressed to about ±1.5
    f0 = max(loaded_f0, 1.0)
    brightness = math.tanh(math.log2(f0 / F0_REF) / 1.5) * 1.5

    effective_q = loaded_q * pole.q_factor * shell.q_factor
    peak = math.tanh((effective_q - Q_REF) / Q_REF / 2) * 2

    distance = abs(math.log2(f0 / PRESENCE_CENTER))
    presence = math.exp(-distance ** 2 / (2 * PRESENCE_WIDTH ** 2)) * 0.8

    bass = 5.0 - brightness * 0.8 + magnet.bass + wire.bass
    low_mid = (5.0 - brightness * 0.5 - peak * 0.15 - presence * 0.15
               + magnet.low_mid + wire.low_mid)
    high_mid = (5.0 + brightness * 0.6 + peak * 0.5 + presence * 0.8
                + magnet.high_mid + wire.high_mid + pole.high_mid + shell.high_mid)
    treble = (5.0 + brightness + peak * 0.2
              + magnet.treble + wire.treble + pole.treble + shell.treble)

    return ToneRatings(
        bass=soft_clamp(bass, 1, 9, 3),
        low_mid=soft_clamp(low_mid, 1, 9, 3),
        high_mid=soft_clamp(high_mid, 1, 9, 3),
        treble=soft_clamp(treble, 1, 9, 3),
    )


def tone_descriptor(
    ratings: ToneRatings,
    loaded_f0: float,
    loaded_q: float,
    magnet_type: Optional[MagnetType] = None,
    insulation: Optional[InsulationType] = None,
    pole_piece: Optional[PolePieceMaterial] = None,
    cover: Optional[CoverType] = None,
) -> ToneDescriptor:
    """Short character string (at most two words) and one voicing suggestion."""
    traits: List[str] = []
    suggestions: List[str] = []

    if magnet_type is not None:
        traits.append(magnet_modifier(magnet_type).character)
    if insulation is not None and insulation != InsulationType.PLAIN_ENAMEL:
        traits.append(wire_modifier(insulation).character)
    if pole_piece is not None and pole_piece != PolePieceMaterial.ALNICO:
        traits.append(pole_piece_modifier(pole_piece).character)
    if cover is not None and cover not in (CoverType.NONE, CoverType.PLASTIC):
        traits.append(cover_modifier(cover).character)

    if ratings.treble > ratings.bass + 1.5:
        traits.append('bright')
    elif ratings.bass > ratings.treble + 1.5:
        traits.append('warm')
    else:
        traits.append('balanced')

    if ratings.high_mid > 6:
        traits.append('present')
    elif ratings.high_mid < 4.5:
        traits.append('smooth')

    if ratings.low_mid > 5.5:
        traits.append('full')
    elif ratings.low_mid < 4:
        traits.append('tight')

    if loaded_f0 < 3000:
        suggestions.append("Warm voicing - jazz, blues, neck position")
    elif loaded_f0 > 6000:
        suggestions.append("Bright voicing - country, funk, bridge position")
    elif 3500 <= loaded_f0 <= 5000:
        suggestions.append("Versatile voicing - rock, pop, all positions")

    if loaded_q > 5:
        suggestions.append("Pronounced peak - articulate attack")
    elif loaded_q < 2:
        suggestions.append("Damped response - smooth, compressed feel")

    character = ', '.join(traits[:2]) or 'neutral'
    return ToneDescriptor(character=character[0].upper() + character[1:], suggestions=suggestions[:1])
