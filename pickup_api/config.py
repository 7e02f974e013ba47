"""Service settings read from the environment (see .env.example)."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SweepDefaults:
    """Frequency sweep used when a request does not give its own."""
    num_points: int = 500
    f_min: float = 20.0
    f_max: float = 20000.0


def frontend_url() -> Optional[str]:
    return os.getenv("FRONTEND_URL")


def sweep_defaults() -> SweepDefaults:
    """
    Read PICKUP_SWEEP_POINTS, PICKUP_SWEEP_MIN_HZ and PICKUP_SWEEP_MAX_HZ.

    Raises ValueError for unparsable or inconsistent values so a bad .env
    fails at startup instead of on the first request.
    """
    defaults = SweepDefaults()
    num_points = int(os.getenv("PICKUP_SWEEP_POINTS", defaults.num_points))
    f_min = float(os.getenv("PICKUP_SWEEP_MIN_HZ", defaults.f_min))
    f_max = float(os.getenv("PICKUP_SWEEP_MAX_HZ", defaults.f_max))

    if num_points < 2:
        raise ValueError(f"PICKUP_SWEEP_POINTS must be at least 2, got {num_points}")
    if not 0 < f_min < f_max:
        raise ValueError(f"Sweep range must satisfy 0 < min < max, got {f_min}..{f_max} Hz")
    return SweepDefaults(num_points=num_points, f_min=f_min, f_max=f_max)
