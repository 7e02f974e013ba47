"""Coil routes: single-coil electrical model and two-coil wiring."""

import logging

from fastapi import APIRouter, HTTPException

from pickup_api.models import CoilRequest, CoilResponse, CoilResults, WiringRequest, WiringResponse
from pickup_engine.calibration import MODEL_VERSION
from pickup_engine.coil import compute_coil_results
from pickup_engine.wire_table import awg_from_diameter
from pickup_engine.wiring import combine_coils, output_multiplier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/coil", response_model=CoilResponse)
async def compute_coil(request: CoilRequest):
    """Resistance, inductance, capacitance and unloaded resonance of one coil."""
    try:
        results = compute_coil_results(request.geometry.to_engine(), request.wire.to_engine())
    except ValueError:
        logger.warning("Coil computation rejected", exc_info=True)
        raise HTTPException(status_code=400, detail="Coil calculation failed. Check the winding window and wire.")

    return CoilResponse(
        results=CoilResults.model_validate(results),
        awg=awg_from_diameter(request.wire.wire_diameter),
        model_version=MODEL_VERSION,
    )


@router.post("/wiring", response_model=WiringResponse)
async def wire_coils(request: WiringRequest):
    """Combine two coils in series or parallel, in or out of phase."""
    try:
        coil1 = compute_coil_results(request.coil1.geometry.to_engine(), request.coil1.wire.to_engine())
        coil2 = compute_coil_results(request.coil2.geometry.to_engine(), request.coil2.wire.to_engine())
        combined = combine_coils(coil1, coil2, request.wiring, request.phase, request.coupling)
    except ValueError:
        logger.warning("Wiring computation rejected", exc_info=True)
        raise HTTPException(status_code=400, detail="Wiring calculation failed. Check both coils and the coupling.")

    return WiringResponse(
        coil1=CoilResults.model_validate(coil1),
        coil2=CoilResults.model_validate(coil2),
        combined=CoilResults.model_validate(combined),
        output_multiplier=output_multiplier(request.wiring, request.phase),
    )
