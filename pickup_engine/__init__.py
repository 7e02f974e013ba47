"""
Pickup Physics Engine

Analytic model of electromagnetic guitar and bass pickups: coil
resistance, inductance and capacitance, magnet field and string pull,
the loaded frequency response through pots, cable and an optional
step-up transformer, and the resulting transient behaviour.

All computation is deterministic and stateless.
"""

from pickup_engine.calibration import MODEL_VERSION
from pickup_engine.coil import compute_coil_results
from pickup_engine.magnetic import compute_magnet_results, field_at, field_vs_distance, output_vs_distance
from pickup_engine.impedance import impedance_response, log_frequencies
from pickup_engine.response import system_response
from pickup_engine.resonance import loaded_resonance, LoadedResonance, ResonanceSearchSettings, SweepShape
from pickup_engine.transformer import compute_transformer_results, transformer_response
from pickup_engine.transient import impulse_response, step_response, transient_characteristics
from pickup_engine.wiring import combine_coils, output_multiplier
from pickup_engine.system import analyze, SystemResults

__version__ = "0.1.0"
