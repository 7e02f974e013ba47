"""
Magnetic field model for pickup magnets.

All geometries reduce to the on-axis field of a uniformly magnetized
cylinder of radius R and thickness t at distance z from its face:

    B(z) = (Br/2) · [ (z+t)/√((z+t)² + R²) − z/√(z² + R²) ]

Bar magnets use the pole-piece radius (or the equivalent radius of the bar
face) and blades are treated as a thin cylinder at the blade tip, scaled by
an empirical magnetic-circuit efficiency.

The string's vibration modulates the flux through the coil in proportion to
the field gradient, which gives the output index via Faraday's law:

    E = N · A · k · |dB/dz| · ω · x0
"""

import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np

from pickup_engine import calibration
from pickup_engine.models import (
    CoilGeometry,
    FieldPoint,
    MagnetComputedResults,
    MagnetGeometry,
    MagnetParams,
    MagnetType,
    OutputPoint,
    PositioningParams,
    StringPullWarning,
)
from pickup_engine.units import mm_to_m, t_to_mt

logger = logging.getLogger(__name__)

# Geometry defaults (mm) for variant fields left unset
DEFAULT_ROD_DIAMETER = 5.0
DEFAULT_BAR_WIDTH = 12.0
DEFAULT_BAR_HEIGHT = 5.0
DEFAULT_BLADE_MAGNET_HEIGHT = 3.0
DEFAULT_BLADE_THICKNESS = 3.0
DEFAULT_BLADE_PROTRUSION = 2.0
DEFAULT_COIL_HEIGHT = 10.0

POLE_PIECE_RADIUS = 2.5          # mm, typical 5 mm slug or screw
POLE_PIECE_FIELD_FACTOR = 0.6    # added reluctance of the steel path
BLADE_INTERACTION_WIDTH = 8.0    # mm of blade under one string
BLADE_REFERENCE_VOLUME = 12 * 50 * 3   # mm³
BLADE_CIRCUIT_EFFICIENCY = 0.18
DUAL_MAGNET_FACTOR = 1.35

STRING_AMPLITUDE = 0.5           # mm peak
REFERENCE_FREQUENCY = 1000.0     # Hz
SENSITIVITY_CALIBRATION = 1e-5

# The bare Faraday model overestimates rods and underestimates blades
GEOMETRY_SENSITIVITY_FACTORS: Dict[MagnetGeometry, float] = {
    MagnetGeometry.ROD: 0.4,
    MagnetGeometry.BAR: 1.0,
    MagnetGeometry.BLADE: 1.8,
}


# --- Field primitives ---

def field_cylinder(
    magnet_type: MagnetType,
    radius: float,
    thickness: float,
    distance: float,
    magnetization: float = 1.0,
) -> float:
    """
    On-axis field of a cylinder magnet, in tesla.

    Args:
        magnet_type: Magnet alloy (sets Br).
        radius: Cylinder radius in mm.
        thickness: Length along the magnetization axis in mm.
        distance: Distance from the pole face in mm.
        magnetization: Charge level, 1.0 = fully charged.
    """
    br = calibration.remanence(magnet_type) * magnetization
    r = mm_to_m(radius)
    t = mm_to_m(thickness)
    z = mm_to_m(distance)
    if r <= 0:
        return 0.0

    near = (z + t) / math.sqrt((z + t) ** 2 + r * r)
    far = z / math.sqrt(z * z + r * r)
    return (br / 2) * (near - far)


def field_bar(
    magnet_type: MagnetType,
    width: float,
    length: float,
    height: float,
    distance: float,
    magnetization: float = 1.0,
    pole_pieces: bool = True,
) -> float:
    """Bar magnet magnetized through ``height``; with pole pieces the field is read at a pole tip."""
    if pole_pieces:
        radius = POLE_PIECE_RADIUS
    else:
        radius = math.sqrt(width * length / math.pi)

    b = field_cylinder(magnet_type, radius, height, distance, magnetization)
    if pole_pieces:
        b *= POLE_PIECE_FIELD_FACTOR
    return b


def field_blade(
    magnet_type: MagnetType,
    magnet_width: float,
    magnet_length: float,
    magnet_height: float,
    blade_thickness: float,
    blade_length: float,
    magnet_count: int,
    distance: float,
    magnetization: float = 1.0,
) -> float:
    """Blade/rail pickup: the blade tip acts as a weak cylinder magnet."""
    tip_radius = math.sqrt(blade_thickness * BLADE_INTERACTION_WIDTH / math.pi)
    volume_factor = math.sqrt(magnet_width * magnet_length * magnet_height / BLADE_REFERENCE_VOLUME)
    count_factor = DUAL_MAGNET_FACTOR if magnet_count == 2 else 1.0

    base = field_cylinder(magnet_type, tip_radius, blade_length, distance, magnetization)
    return base * BLADE_CIRCUIT_EFFICIENCY * count_factor * volume_factor


def _rod_field(magnet: MagnetParams, distance: float, coil_height: Optional[float]) -> float:
    diameter = magnet.diameter if magnet.diameter is not None else DEFAULT_ROD_DIAMETER
    return field_cylinder(magnet.type, diameter / 2, magnet.magnet_length, distance, magnet.magnetization)


def _bar_field(magnet: MagnetParams, distance: float, coil_height: Optional[float]) -> float:
    return field_bar(
        magnet.type,
        magnet.width if magnet.width is not None else DEFAULT_BAR_WIDTH,
        magnet.magnet_length,
        magnet.magnet_height if magnet.magnet_height is not None else DEFAULT_BAR_HEIGHT,
        distance,
        magnet.magnetization,
        magnet.pole_pieces,
    )


def _blade_field(magnet: MagnetParams, distance: float, coil_height: Optional[float]) -> float:
    magnet_height = magnet.magnet_height if magnet.magnet_height is not None else DEFAULT_BLADE_MAGNET_HEIGHT
    protrusion = magnet.blade_height if magnet.blade_height is not None else DEFAULT_BLADE_PROTRUSION
    # Blade runs through the coil, out past the top and half way into the magnet
    blade_length = (coil_height or DEFAULT_COIL_HEIGHT) + protrusion + 0.5 * magnet_height
    return field_blade(
        magnet.type,
        magnet.width if magnet.width is not None else DEFAULT_BAR_WIDTH,
        magnet.magnet_length,
        magnet_height,
        magnet.blade_thickness if magnet.blade_thickness is not None else DEFAULT_BLADE_THICKNESS,
        blade_length,
        magnet.magnet_count or 1,
        distance,
        magnet.magnetization,
    )


_FIELD_MODELS: Dict[MagnetGeometry, Callable[[MagnetParams, float, Optional[float]], float]] = {
    MagnetGeometry.ROD: _rod_field,
    MagnetGeometry.BAR: _bar_field,
    MagnetGeometry.BLADE: _blade_field,
}


def field_at(magnet: MagnetParams, distance: float, coil_height: Optional[float] = None) -> float:
    """Field in tesla at ``distance`` mm above the pole, for any magnet geometry."""
    try:
        model = _FIELD_MODELS[MagnetGeometry(magnet.geometry)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown magnet geometry '{magnet.geometry}'")
    return model(magnet, distance, coil_height)


def field_gradient(
    magnet: MagnetParams,
    distance: float,
    delta: float = 0.1,
    coil_height: Optional[float] = None,
) -> float:
    """Central-difference dB/dz in T/m (negative: the field falls off with distance)."""
    b_near = field_at(magnet, distance - delta, coil_height)
    b_far = field_at(magnet, distance + delta, coil_height)
    per_mm = (b_far - b_near) / (2 * delta)
    return per_mm * 1000


# --- Output and string pull ---

def pole_sensing_area(magnet: MagnetParams, geometry: CoilGeometry) -> float:
    """
    Area (m²) where flux concentrates under one string.

    Blades use thickness × interaction width. Rods and bars use a circular
    pole with diameter equal to the coil's ``inner_radius`` (on flatwork
    bobbins that field holds the pole hole diameter).
    """
    if magnet.geometry == MagnetGeometry.BLADE:
        thickness = magnet.blade_thickness if magnet.blade_thickness is not None else DEFAULT_BLADE_THICKNESS
        return mm_to_m(thickness) * mm_to_m(BLADE_INTERACTION_WIDTH)
    pole_radius = geometry.inner_radius / 2
    return math.pi * mm_to_m(pole_radius) ** 2


def output_index(
    turns: int,
    effective_area: float,
    coupling_factor: float,
    gradient: float,
    frequency: float = REFERENCE_FREQUENCY,
    string_amplitude: float = STRING_AMPLITUDE,
) -> float:
    """Peak EMF in mV for a string vibrating ``string_amplitude`` mm at ``frequency``."""
    omega = 2 * math.pi * frequency
    e_peak = turns * effective_area * coupling_factor * abs(gradient) * omega * mm_to_m(string_amplitude)
    return e_peak * 1000


def sensitivity_index(
    turns: int,
    effective_area: float,
    coupling_factor: float,
    gradient: float,
    geometry: MagnetGeometry = MagnetGeometry.BAR,
    frequency: float = REFERENCE_FREQUENCY,
) -> float:
    """Calibrated output per unit string displacement, mV/mm."""
    omega = 2 * math.pi * frequency
    raw = turns * effective_area * coupling_factor * abs(gradient) * omega
    factor = GEOMETRY_SENSITIVITY_FACTORS.get(geometry, 1.0)
    return raw * SENSITIVITY_CALIBRATION * factor


def string_pull_index(field_at_string: float, distance: float) -> float:
    """Relative pull on the string, 0..1, from B²/d^2.5."""
    if distance <= 0:
        return 1.0
    raw = field_at_string ** 2 / distance ** calibration.STRING_PULL_EXPONENT
    return min(raw / calibration.STRING_PULL_NORMALIZATION, 1.0)


def string_pull_warning(spi: float) -> StringPullWarning:
    if spi < calibration.STRING_PULL_SAFE:
        return StringPullWarning.SAFE
    if spi < calibration.STRING_PULL_DANGER:
        return StringPullWarning.CAUTION
    return StringPullWarning.DANGER


# --- Sweeps ---

def field_vs_distance(
    magnet: MagnetParams,
    min_distance: float = 0.5,
    max_distance: float = 20.0,
    num_points: int = 50,
    coil_height: Optional[float] = None,
) -> List[FieldPoint]:
    """Field in mT at evenly spaced distances."""
    return [
        FieldPoint(distance=float(d), field=t_to_mt(field_at(magnet, float(d), coil_height)))
        for d in np.linspace(min_distance, max_distance, num_points)
    ]


def output_vs_distance(
    magnet: MagnetParams,
    turns: int,
    effective_area: float,
    coupling_factor: float,
    min_distance: float = 1.0,
    max_distance: float = 10.0,
    num_points: int = 50,
    coil_height: Optional[float] = None,
) -> List[OutputPoint]:
    """Output index at each distance, normalised to the largest value in the sweep."""
    distances = np.linspace(min_distance, max_distance, num_points)
    outputs = np.array([
        output_index(turns, effective_area, coupling_factor,
                     field_gradient(magnet, float(d), coil_height=coil_height))
        for d in distances
    ])
    peak = outputs.max() if outputs.size else 0.0
    relative = outputs / peak if peak > 0 else np.zeros_like(outputs)
    return [OutputPoint(distance=float(d), output=float(o)) for d, o in zip(distances, relative)]


def compute_magnet_results(
    magnet: MagnetParams,
    positioning: PositioningParams,
    turns: int,
    effective_area: float,
    coupling_factor: float,
    coil_height: Optional[float] = None,
) -> MagnetComputedResults:
    """
    Field, gradient, sensitivity and string pull for a magnet in position.

    ``effective_area`` is the pole sensing area in m² (see ``pole_sensing_area``).
    """
    b_string = field_at(magnet, positioning.string_to_pole_distance, coil_height)
    b_coil = field_at(magnet, positioning.coil_to_string_distance, coil_height)
    gradient = field_gradient(magnet, positioning.string_to_pole_distance, 0.1, coil_height)
    spi = string_pull_index(b_string, positioning.string_to_pole_distance)

    logger.debug("Magnet %s/%s: B=%.1f mT at %.2f mm, SPI=%.2f",
                 magnet.type.value, magnet.geometry.value, b_string * 1e3,
                 positioning.string_to_pole_distance, spi)

    return MagnetComputedResults(
        field_at_string=b_string,
        field_at_coil=b_coil,
        field_gradient=gradient,
        sensitivity_index=sensitivity_index(turns, effective_area, coupling_factor, gradient, magnet.geometry),
        string_pull_index=spi,
        string_pull_warning=string_pull_warning(spi),
    )
