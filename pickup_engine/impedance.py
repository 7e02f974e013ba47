"""
Pickup and load network modelling.

The coil is a series R-L shunted by its winding capacitance:

    Z_coil(f) = (R + jωL) ∥ 1/(jωC)

It drives the guitar's passive load: the volume pot in parallel with the amp
input, shunted by the cable capacitance. The voltage reaching the amp is the
divider

    H(f) = Z_load / (Z_coil + Z_load)

shaped by the tone control. The full chain, with an optional step-up
transformer, lives in :mod:`pickup_engine.response`.

Every function takes a scalar frequency or a numpy array of frequencies.
"""

import logging
from typing import List

import numpy as np

from pickup_engine import complex_math as cm
from pickup_engine.models import ImpedancePoint, LoadParams

logger = logging.getLogger(__name__)

MIN_WIPER_RESISTANCE = 1e3     # Ohm, volume pot fully down
TONE_BYPASS_THRESHOLD = 0.01
TONE_GAIN_FLOOR = 0.1


def log_frequencies(f_min: float = 20.0, f_max: float = 20000.0, num_points: int = 500) -> np.ndarray:
    """Logarithmically spaced frequencies in Hz, both ends included."""
    return np.logspace(np.log10(f_min), np.log10(f_max), num_points)


# --- Elements ---

def series_rl(resistance: float, inductance: float, frequency):
    """R + jωL."""
    omega = 2 * np.pi * np.asarray(frequency, dtype=float)
    z = resistance + 1j * omega * inductance
    return complex(z) if np.ndim(z) == 0 else z


def capacitor_impedance(capacitance: float, frequency):
    """-j/(ωC); an open circuit (inf) for C <= 0 or f <= 0."""
    f = np.asarray(frequency, dtype=float)
    if capacitance <= 0:
        z = np.full(f.shape, cm.INF, dtype=complex)
    else:
        z = np.where(f > 0, -1j / (2 * np.pi * np.where(f > 0, f, 1.0) * capacitance), cm.INF)
    return complex(z) if np.ndim(z) == 0 else z


def coil_impedance(resistance: float, inductance: float, capacitance: float, frequency):
    """Lumped coil model: series R-L in parallel with the winding capacitance."""
    return cm.parallel(series_rl(resistance, inductance, frequency), capacitor_impedance(capacitance, frequency))


# --- Load ---

def cable_capacitance(load: LoadParams) -> float:
    return load.cable_capacitance_per_meter * load.cable_length


def effective_volume_resistance(load: LoadParams) -> float:
    """
    Resistance the volume pot presents at its wiper setting.

    Full value at position 1, blending linearly down to the minimum wiper
    resistance at position 0.
    """
    position = min(max(load.volume_position, 0.0), 1.0)
    floor = min(MIN_WIPER_RESISTANCE, load.volume_pot)
    return floor + (load.volume_pot - floor) * position


def effective_load_resistance(load: LoadParams) -> float:
    """Volume pot in parallel with the amp input."""
    r_vol = effective_volume_resistance(load)
    r_amp = load.amp_input_impedance
    if r_vol + r_amp <= 0:
        return 0.0
    return r_vol * r_amp / (r_vol + r_amp)


def load_impedance(load: LoadParams, frequency):
    """Effective load resistance shunted by the cable capacitance."""
    r_eff = effective_load_resistance(load)
    z_cable = capacitor_impedance(cable_capacitance(load), frequency)
    return cm.parallel(complex(r_eff), z_cable)


def tone_control_impedance(
    tone_capacitance: float,
    tone_resistance: float,
    tone_position: float,
    frequency,
):
    """Tone pot section in series with the tone cap; never below 1 Ohm of resistance."""
    r = tone_resistance * (1 - tone_position) + 1
    return r + capacitor_impedance(tone_capacitance, frequency)


def tone_filter_gain(load: LoadParams, frequency):
    """
    Attenuation from the tone control, in [0.1, 1].

    The engaged tone cap shunts the load and the remaining pot track sits
    in series with it, forming a first-order low-pass. Below 1% engagement
    the control is treated as bypassed.
    """
    f = np.asarray(frequency, dtype=float)
    position = load.tone_position
    if position < TONE_BYPASS_THRESHOLD:
        return 1.0 if f.ndim == 0 else np.ones_like(f)

    tone_r = load.tone_pot * (1 - 0.9 * position)
    cap_z = cm.magnitude(capacitor_impedance(load.tone_capacitor, f))
    shunt = cap_z / position
    effective = np.real(cm.parallel(shunt + 0j, complex(effective_load_resistance(load))))
    gain = effective / np.sqrt(effective ** 2 + tone_r ** 2)
    gain = np.clip(gain, TONE_GAIN_FLOOR, 1.0)
    return float(gain) if gain.ndim == 0 else gain


# --- System ---

def system_impedance(coil_z, load_z):
    """Impedance seen looking back into the output jack."""
    return cm.parallel(coil_z, load_z)


def transfer_function(coil_z, load_z):
    """Voltage divider Z_load / (Z_coil + Z_load)."""
    return cm.divide(load_z, cm.add(coil_z, load_z))


def impedance_response(
    resistance: float,
    inductance: float,
    capacitance: float,
    frequencies,
) -> List[ImpedancePoint]:
    """Unloaded coil impedance magnitude and phase across ``frequencies``."""
    freqs = np.atleast_1d(np.asarray(frequencies, dtype=float))
    z = coil_impedance(resistance, inductance, capacitance, freqs)
    mags = cm.magnitude(z)
    phases = cm.phase_deg(z)
    return [
        ImpedancePoint(frequency=float(f), magnitude=float(m), phase_deg=float(p))
        for f, m, p in zip(freqs, mags, phases)
    ]
