"""Response routes: loaded frequency response and time-domain behaviour."""

import logging

from fastapi import APIRouter, HTTPException, Request

from pickup_api.config import SweepDefaults
from pickup_api.models import (
    CoilResults,
    FrequencyPointModel,
    ImpedancePointModel,
    ImpulsePointModel,
    LoadedResonanceModel,
    ResponseRequest,
    ResponseResponse,
    TransientCharacteristicsModel,
    TransientRequest,
    TransientResponse,
)
from pickup_engine.coil import compute_coil_results
from pickup_engine.impedance import impedance_response, log_frequencies
from pickup_engine.response import system_response
from pickup_engine.resonance import loaded_resonance
from pickup_engine.transient import impulse_response, step_response, transient_characteristics
from pickup_engine.wiring import combine_coils

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/response", response_model=ResponseResponse)
async def compute_response(request: Request, payload: ResponseRequest):
    """Frequency response through pots, cable and optional transformer, with the loaded resonance."""
    defaults = getattr(request.app.state, "sweep", SweepDefaults())
    try:
        sweep = payload.sweep.resolve(defaults)
        coil_params = payload.coil.to_engine()
        load = payload.load.to_engine()
        transformer = payload.transformer.to_engine() if payload.transformer else None
        if transformer is not None and not transformer.enabled:
            transformer = None

        coil = compute_coil_results(coil_params.geometry, coil_params.wire)
        combined = combine_coils(
            coil, coil, coil_params.wiring_config, coil_params.phase_config, payload.mutual_coupling,
        )
        r, l, c = combined.dc_resistance, combined.inductance, combined.capacitance

        freqs = log_frequencies(sweep.f_min, sweep.f_max, sweep.num_points)
        resonance = loaded_resonance(r, l, c, load, transformer)
        curve = system_response(r, l, c, load, freqs, transformer)
        impedance = impedance_response(r, l, c, freqs)
    except ValueError:
        logger.warning("Response computation rejected", exc_info=True)
        raise HTTPException(status_code=400, detail="Response calculation failed. Check the coil, load and sweep.")

    return ResponseResponse(
        coil=CoilResults.model_validate(combined),
        loaded_resonance=LoadedResonanceModel.model_validate(resonance),
        frequency_response=[FrequencyPointModel.model_validate(p) for p in curve],
        impedance=[ImpedancePointModel.model_validate(p) for p in impedance],
    )


@router.post("/transient", response_model=TransientResponse)
async def compute_transient(payload: TransientRequest):
    """Impulse and step response of a resonator with the given f0 and Q."""
    f0, q = payload.resonant_frequency, payload.q
    impulse = impulse_response(f0, q, payload.duration_ms, payload.num_points)
    step = step_response(f0, q, payload.duration_ms, payload.num_points)

    return TransientResponse(
        characteristics=TransientCharacteristicsModel.model_validate(transient_characteristics(f0, q)),
        impulse=[ImpulsePointModel.model_validate(p) for p in impulse],
        step=[ImpulsePointModel.model_validate(p) for p in step],
    )
