"""
Loaded frequency response of the pickup.

Chains the coil, the load network and an optional step-up transformer
into the voltage transfer seen at the amp input, shaped by the tone
control and normalised to 1 kHz.
"""

from typing import List, Optional

import numpy as np

from pickup_engine import complex_math as cm
from pickup_engine.impedance import (
    coil_impedance,
    load_impedance,
    tone_filter_gain,
    transfer_function,
)
from pickup_engine.models import FrequencyPoint, LoadParams, TransformerParams
from pickup_engine.transformer import primary_impedance, turns_ratio

REFERENCE_FREQUENCY = 1000.0   # Hz, normalisation point
DB_FLOOR = 1e-10


def output_transfer(
    resistance: float,
    inductance: float,
    capacitance: float,
    load: LoadParams,
    frequencies,
    transformer: Optional[TransformerParams] = None,
) -> np.ndarray:
    """
    Complex coil-to-amp transfer, unnormalised, including tone gain.

    With an enabled transformer the coil sees the transformer's primary
    impedance (reflected load included) and the output is stepped up by the
    turns ratio.
    """
    freqs = np.atleast_1d(np.asarray(frequencies, dtype=float))
    coil_z = coil_impedance(resistance, inductance, capacitance, freqs)
    load_z = load_impedance(load, freqs)

    if transformer is not None and transformer.enabled:
        n = turns_ratio(transformer.winding.primary_turns, transformer.winding.secondary_turns)
        h = transfer_function(coil_z, primary_impedance(transformer, load_z, freqs)) * n
    else:
        h = transfer_function(coil_z, load_z)

    return h * tone_filter_gain(load, freqs)


def system_response(
    resistance: float,
    inductance: float,
    capacitance: float,
    load: LoadParams,
    frequencies,
    transformer: Optional[TransformerParams] = None,
) -> List[FrequencyPoint]:
    """
    Loaded frequency response normalised to 1 kHz.

    Args:
        resistance: Coil DC resistance (Ohm).
        inductance: Coil inductance (H).
        capacitance: Coil self-capacitance (F).
        load: Pots, cable and amp.
        frequencies: Sample frequencies in Hz.
        transformer: Optional step-up transformer; ignored when disabled.

    Returns:
        One FrequencyPoint per frequency.
    """
    freqs = np.atleast_1d(np.asarray(frequencies, dtype=float))
    h = output_transfer(resistance, inductance, capacitance, load, freqs, transformer)
    ref = float(cm.magnitude(output_transfer(
        resistance, inductance, capacitance, load, [REFERENCE_FREQUENCY], transformer,
    ))[0])

    mags = cm.magnitude(h)
    if ref > 0:
        mags = mags / ref
    with np.errstate(divide='ignore'):
        db = 20 * np.log10(np.where(mags > 0, mags, DB_FLOOR))
    phases = cm.phase_deg(h)

    return [
        FrequencyPoint(frequency=float(f), magnitude=float(m), magnitude_db=float(d), phase_deg=float(p))
        for f, m, d, p in zip(freqs, mags, db, phases)
    ]


def response_magnitudes(points: List[FrequencyPoint]) -> np.ndarray:
    return np.array([p.magnitude for p in points])
