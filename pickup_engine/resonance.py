"""
Loaded resonance search.

Finds the resonant peak and its Q from a swept, loaded frequency response.
The search is a three-way decision on the shape of the sweep:

    PEAKED        a clear peak with both -3 dB crossings inside the sweep
    SINGLE_SIDED  a clear peak, but only one crossing (or none) is found
    FLAT_OR_EDGE  no usable peak: the response is nearly flat, or the peak
                  sits at the top edge of the sweep (resonance above range)

Flat and edge sweeps fall back to the theoretical f0 and Q of the loaded
circuit. Every branch clamps Q to a plausible range for loaded pickups.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from pickup_engine.impedance import cable_capacitance, effective_load_resistance, log_frequencies
from pickup_engine.models import LoadParams, TransformerParams
from pickup_engine.response import response_magnitudes, system_response
from pickup_engine.transformer import turns_ratio

logger = logging.getLogger(__name__)


class SweepShape(str, Enum):
    PEAKED = "peaked"
    SINGLE_SIDED = "single_sided"
    FLAT_OR_EDGE = "flat_or_edge"


@dataclass(frozen=True)
class ResonanceSearchSettings:
    f_min: float = 20.0
    f_max: float = 100000.0
    num_points: int = 500
    flat_ratio: float = 1.5       # peak/trough below this is flat (~3.5 dB)
    edge_fraction: float = 0.03   # peak in the top 3% of samples is at the edge
    q_min: float = 0.5
    q_max: float = 10.0


DEFAULT_SETTINGS = ResonanceSearchSettings()


@dataclass(frozen=True)
class LoadedResonance:
    frequency: float   # Hz
    q: float
    shape: SweepShape


def theoretical_resonance(inductance: float, capacitance: float) -> float:
    if inductance <= 0 or capacitance <= 0:
        return 0.0
    return 1 / (2 * math.pi * math.sqrt(inductance * capacitance))


def theoretical_q(resistance: float, inductance: float, capacitance: float) -> float:
    """Series-RLC Q = (1/R)·√(L/C); 1 when any element is missing."""
    if resistance <= 0 or inductance <= 0 or capacitance <= 0:
        return 1.0
    return math.sqrt(inductance / capacitance) / resistance


def clamp_q(q: float, settings: ResonanceSearchSettings = DEFAULT_SETTINGS) -> float:
    return max(settings.q_min, min(q, settings.q_max))


def find_peak(magnitudes: np.ndarray) -> Tuple[int, float]:
    """Index and value of the largest magnitude (first one on ties)."""
    idx = int(np.argmax(magnitudes))
    return idx, float(magnitudes[idx])


def classify_sweep(
    magnitudes: np.ndarray,
    peak_idx: int,
    settings: ResonanceSearchSettings = DEFAULT_SETTINGS,
) -> bool:
    """True when the sweep has no usable peak (flat, or peak at the upper edge)."""
    n = len(magnitudes)
    at_edge = peak_idx >= math.floor(n * (1 - settings.edge_fraction))
    trough = float(np.min(magnitudes)) or 1e-10
    flat = magnitudes[peak_idx] / trough < settings.flat_ratio
    return bool(at_edge or flat)


def half_power_crossings(
    frequencies: np.ndarray,
    magnitudes: np.ndarray,
    peak_idx: int,
) -> Tuple[Optional[float], Optional[float]]:
    """
    Frequencies where the response first drops below peak/√2 on each side.

    Crossings are linearly interpolated between the bracketing samples.
    A side with no crossing inside the sweep is returned as None.
    """
    target = magnitudes[peak_idx] / math.sqrt(2)

    lower = None
    below = np.nonzero(magnitudes[:peak_idx + 1] < target)[0]
    if below.size:
        i = int(below[-1])
        if i < peak_idx:
            t = (target - magnitudes[i]) / (magnitudes[i + 1] - magnitudes[i])
            lower = float(frequencies[i] + t * (frequencies[i + 1] - frequencies[i]))
        else:
            lower = float(frequencies[i])

    upper = None
    below = np.nonzero(magnitudes[peak_idx:] < target)[0]
    if below.size:
        i = int(below[0]) + peak_idx
        if i > peak_idx:
            t = (target - magnitudes[i - 1]) / (magnitudes[i] - magnitudes[i - 1])
            upper = float(frequencies[i - 1] + t * (frequencies[i] - frequencies[i - 1]))
        else:
            upper = float(frequencies[i])

    return lower, upper


def theoretical_fallback(
    resistance: float,
    inductance: float,
    capacitance: float,
    load: LoadParams,
    transformer: Optional[TransformerParams] = None,
) -> Tuple[float, float]:
    """
    f0 and Q of the loaded circuit when the sweep cannot be read.

    The cable adds to the coil capacitance. Through a step-up transformer
    the cable appears multiplied by n² and the load resistance divided by n².
    """
    cable = cable_capacitance(load)
    c_eff = capacitance + cable
    r_eff = resistance

    if transformer is not None and transformer.enabled:
        n = turns_ratio(transformer.winding.primary_turns, transformer.winding.secondary_turns)
        c_eff = capacitance + cable * n * n
        r_eff = resistance + effective_load_resistance(load) / (n * n)

    return theoretical_resonance(inductance, c_eff), theoretical_q(r_eff, inductance, c_eff)


def resonance_from_sweep(
    frequencies: np.ndarray,
    magnitudes: np.ndarray,
    fallback: Tuple[float, float],
    unloaded_q: float,
    settings: ResonanceSearchSettings = DEFAULT_SETTINGS,
) -> LoadedResonance:
    """
    Read f0 and Q off a swept magnitude response.

    Args:
        frequencies: Sweep frequencies (Hz), ascending.
        magnitudes: |H| at each frequency.
        fallback: Theoretical (f0, Q) used when the sweep has no usable peak.
        unloaded_q: Q used when a peak is found but neither -3 dB crossing is.
        settings: Decision thresholds and the Q clamp.
    """
    frequencies = np.asarray(frequencies, dtype=float)
    magnitudes = np.asarray(magnitudes, dtype=float)
    peak_idx, _ = find_peak(magnitudes)

    if classify_sweep(magnitudes, peak_idx, settings):
        f0, q = fallback
        logger.debug("Sweep flat or peaked at edge, using theoretical f0=%.0f Hz Q=%.2f", f0, q)
        return LoadedResonance(frequency=f0, q=clamp_q(q, settings), shape=SweepShape.FLAT_OR_EDGE)

    f0 = float(frequencies[peak_idx])
    lower, upper = half_power_crossings(frequencies, magnitudes, peak_idx)

    if lower is not None and upper is not None:
        bandwidth = upper - lower
        q = f0 / bandwidth if bandwidth > 0 else 1.0
        shape = SweepShape.PEAKED
    elif lower is not None or upper is not None:
        # Mirror the half bandwidth we did find
        half = f0 - lower if lower is not None else upper - f0
        q = f0 / (2 * half) if half > 0 else 1.0
        shape = SweepShape.SINGLE_SIDED
    else:
        q = unloaded_q
        shape = SweepShape.SINGLE_SIDED

    logger.debug("Loaded resonance %.0f Hz, Q=%.2f (%s)", f0, q, shape.value)
    return LoadedResonance(frequency=f0, q=clamp_q(q, settings), shape=shape)


def loaded_resonance(
    resistance: float,
    inductance: float,
    capacitance: float,
    load: LoadParams,
    transformer: Optional[TransformerParams] = None,
    settings: ResonanceSearchSettings = DEFAULT_SETTINGS,
) -> LoadedResonance:
    """
    Resonant frequency and Q of the pickup as loaded by the guitar circuit.

    Sweeps the loaded response over ``settings`` and hands it to
    :func:`resonance_from_sweep`.

    Args:
        resistance: Coil DC resistance (Ohm).
        inductance: Coil inductance (H).
        capacitance: Coil self-capacitance (F).
        load: Pots, cable and amp.
        transformer: Optional step-up transformer.
        settings: Sweep range and decision thresholds.
    """
    freqs = log_frequencies(settings.f_min, settings.f_max, settings.num_points)
    mags = response_magnitudes(system_response(resistance, inductance, capacitance, load, freqs, transformer))
    return resonance_from_sweep(
        freqs,
        mags,
        theoretical_fallback(resistance, inductance, capacitance, load, transformer),
        theoretical_q(resistance, inductance, capacitance),
        settings,
    )
