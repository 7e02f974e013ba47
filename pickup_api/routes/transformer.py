"""Transformer routes: step-up transformer analysis and the core catalogue."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from pickup_api.config import SweepDefaults
from pickup_api.models import (
    CoreInfo,
    CoreListResponse,
    FrequencyPointModel,
    TransformerRequest,
    TransformerResponse,
    TransformerResults,
)
from pickup_engine.cores import TRANSFORMER_CORES, cores_by_material, cores_by_shape
from pickup_engine.impedance import log_frequencies
from pickup_engine.models import CoreMaterialBase, CoreShape
from pickup_engine.transformer import compute_transformer_results, transformer_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/transformer", response_model=TransformerResponse)
async def compute_transformer(request: Request, payload: TransformerRequest):
    """Ratio, inductance, parasitics, saturation and response of a transformer into the load."""
    defaults = getattr(request.app.state, "sweep", SweepDefaults())
    try:
        sweep = payload.sweep.resolve(defaults)
        transformer = payload.transformer.to_engine()
        load = payload.load.to_engine()

        results = compute_transformer_results(
            transformer, load, payload.source_voltage_rms, payload.operating_frequency,
        )
        curve = transformer_response(
            transformer, load, log_frequencies(sweep.f_min, sweep.f_max, sweep.num_points),
        )
    except ValueError:
        logger.warning("Transformer computation rejected", exc_info=True)
        raise HTTPException(
            status_code=400,
            detail="Transformer calculation failed. Check the core material, dimensions and turns.",
        )

    return TransformerResponse(
        results=TransformerResults.model_validate(results),
        frequency_response=[FrequencyPointModel.model_validate(p) for p in curve],
    )


@router.get("/cores", response_model=CoreListResponse)
async def list_cores(
    material: Optional[CoreMaterialBase] = Query(None, description="Filter by material family"),
    shape: Optional[CoreShape] = Query(None, description="Filter by core shape"),
):
    """Catalogue cores suitable for pickup transformers."""
    cores = cores_by_material(material) if material is not None else TRANSFORMER_CORES
    if shape is not None:
        by_shape = {c["id"] for c in cores_by_shape(shape)}
        cores = [c for c in cores if c["id"] in by_shape]
    infos = [
        CoreInfo(
            id=c["id"],
            name=c["name"],
            shape=c["shape"],
            material_base=c["base"],
            material_variant=c["variant"],
            effective_area=c["effective_area"],
            effective_length=c["effective_length"],
            saturation_flux=c["saturation_flux"],
            typical_permeability=c["typical_permeability"],
            loss_grade=c["loss_grade"],
            description=c["description"],
        )
        for c in cores
    ]
    return CoreListResponse(cores=infos, total=len(infos))
