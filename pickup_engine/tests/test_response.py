"""
Tests for the loaded frequency response.

Validates:
1. Response normalised to 1 kHz with the resonant bump and treble roll-off
2. Volume position damps the peak
3. Transformer path steps up through the primary impedance
4. The load network module does not depend on the transformer model
"""

import inspect

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from pickup_engine import complex_math as cm
from pickup_engine import impedance
from pickup_engine.cores import core_params_from_spec
from pickup_engine.impedance import coil_impedance, load_impedance, log_frequencies, tone_filter_gain, transfer_function
from pickup_engine.models import LoadParams, TransformerParams, TransformerWindingParams
from pickup_engine.response import REFERENCE_FREQUENCY, output_transfer, response_magnitudes, system_response
from pickup_engine.transformer import primary_impedance


# Typical Strat-style single coil
R_COIL = 6000.0
L_COIL = 2.2
C_COIL = 110e-12

DEFAULT_LOAD = LoadParams()

# Low impedance coil into a 1:10 step-up
LOW_Z = (5.0, 0.005, 100e-12)
STEP_UP = TransformerParams(
    core=core_params_from_spec("nano_toroid_medium"),
    winding=TransformerWindingParams(primary_turns=100, secondary_turns=1000),
)


class TestSystemResponse:

    def test_normalised_at_1khz(self):
        points = system_response(R_COIL, L_COIL, C_COIL, DEFAULT_LOAD, [100.0, 1000.0, 5000.0])
        assert points[1].magnitude == pytest.approx(1.0)
        assert points[1].magnitude_db == pytest.approx(0.0, abs=1e-9)

    def test_resonant_bump(self):
        points = system_response(R_COIL, L_COIL, C_COIL, DEFAULT_LOAD, log_frequencies(20, 20000, 300))
        peak = max(points, key=lambda p: p.magnitude)
        assert 3000 < peak.frequency < 7000
        assert peak.magnitude_db > 3

    def test_highs_roll_off(self):
        points = system_response(R_COIL, L_COIL, C_COIL, DEFAULT_LOAD, [1000.0, 20000.0])
        assert points[1].magnitude < 0.5

    def test_volume_down_flattens_peak(self):
        freqs = log_frequencies(20, 20000, 300)
        full = max(p.magnitude for p in system_response(R_COIL, L_COIL, C_COIL, DEFAULT_LOAD, freqs))
        low = max(p.magnitude for p in system_response(
            R_COIL, L_COIL, C_COIL, LoadParams(volume_position=0.3), freqs,
        ))
        assert low < full

    def test_magnitudes_helper(self):
        points = system_response(R_COIL, L_COIL, C_COIL, DEFAULT_LOAD, [100.0, 1000.0])
        assert response_magnitudes(points) == pytest.approx([points[0].magnitude, 1.0])


class TestTransformerPath:

    def test_matches_primary_divider(self):
        freqs = np.array([200.0, REFERENCE_FREQUENCY, 8000.0])
        coil_z = coil_impedance(*LOW_Z, freqs)
        expected = (transfer_function(coil_z, primary_impedance(STEP_UP, load_impedance(DEFAULT_LOAD, freqs), freqs))
                    * 10 * tone_filter_gain(DEFAULT_LOAD, freqs))
        actual = output_transfer(*LOW_Z, DEFAULT_LOAD, freqs, STEP_UP)
        assert cm.magnitude(actual) == pytest.approx(cm.magnitude(expected))

    def test_normalised_with_transformer(self):
        points = system_response(*LOW_Z, DEFAULT_LOAD, [100.0, REFERENCE_FREQUENCY], STEP_UP)
        assert points[1].magnitude == pytest.approx(1.0)

    def test_disabled_transformer_is_direct(self):
        disabled = TransformerParams(core=STEP_UP.core, winding=STEP_UP.winding, enabled=False)
        freqs = log_frequencies(20, 20000, 20)
        direct = output_transfer(*LOW_Z, DEFAULT_LOAD, freqs)
        assert cm.magnitude(output_transfer(*LOW_Z, DEFAULT_LOAD, freqs, disabled)) == pytest.approx(cm.magnitude(direct))


class TestModuleLayering:

    def test_load_network_is_independent_of_transformer(self):
        assert "pickup_engine.transformer" not in inspect.getsource(impedance)
