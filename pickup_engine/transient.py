"""
Time-domain behaviour of the loaded pickup.

The loaded pickup is treated as a second-order resonator with frequency f0
and quality factor Q, whose envelope decays with time constant

    τ = Q / (π·f0)

Impulse and step responses are sampled and normalised to a peak of 1.
"""

import math
from typing import List

import numpy as np

from pickup_engine.models import ImpulsePoint, TransientCharacteristics
from pickup_engine.units import s_to_ms

ATTACK_LABELS = (
    (1.5, "Very soft (overdamped)"),
    (2.5, "Soft (damped)"),
    (4.0, "Balanced"),
    (6.0, "Snappy"),
)
RINGING_LABEL = "Glassy (ringing)"


def decay_time_constant(f0: float, q: float) -> float:
    """Envelope time constant in seconds; 0 for a degenerate resonator."""
    if f0 <= 0:
        return 0.0
    return q / (math.pi * f0)


def _sample_times(duration_ms: float, num_points: int) -> np.ndarray:
    if num_points <= 0:
        return np.empty(0)
    dt = duration_ms / 1000 / num_points
    return np.arange(num_points) * dt


def _normalised(times: np.ndarray, raw: np.ndarray) -> List[ImpulsePoint]:
    peak = float(np.max(np.abs(raw))) if raw.size else 0.0
    amps = raw / peak if peak > 0 else np.zeros_like(raw)
    return [ImpulsePoint(time=float(s_to_ms(t)), amplitude=float(a)) for t, a in zip(times, amps)]


def impulse_response(f0: float, q: float, duration_ms: float = 10.0, num_points: int = 500) -> List[ImpulsePoint]:
    """Damped sinusoid e^(-t/τ)·sin(ωt)."""
    times = _sample_times(duration_ms, num_points)
    tau = decay_time_constant(f0, q)
    if tau <= 0:
        return _normalised(times, np.zeros_like(times))

    omega = 2 * math.pi * f0
    return _normalised(times, np.exp(-times / tau) * np.sin(omega * times))


def step_response(f0: float, q: float, duration_ms: float = 10.0, num_points: int = 500) -> List[ImpulsePoint]:
    """Underdamped step 1 - e^(-t/τ)·(cos ωt + sin ωt / (ωτ)), overshoot included."""
    times = _sample_times(duration_ms, num_points)
    tau = decay_time_constant(f0, q)
    if tau <= 0:
        return _normalised(times, np.zeros_like(times))

    omega = 2 * math.pi * f0
    ringing = np.cos(omega * times) + np.sin(omega * times) / (omega * tau)
    return _normalised(times, 1 - np.exp(-times / tau) * ringing)


def attack_label(q: float) -> str:
    for limit, label in ATTACK_LABELS:
        if q < limit:
            return label
    return RINGING_LABEL


def transient_characteristics(f0: float, q: float) -> TransientCharacteristics:
    """Decay to 10% (τ·ln 10), ring period and the number of cycles heard before then."""
    tau = decay_time_constant(f0, q)
    decay_ms = s_to_ms(tau * math.log(10))
    period_ms = s_to_ms(1 / f0) if f0 > 0 else 0.0
    cycles = decay_ms / period_ms if period_ms > 0 else 0.0
    return TransientCharacteristics(
        decay_time=decay_ms,
        ring_period=period_ms,
        ring_cycles=cycles,
        attack_speed=attack_label(q),
    )
