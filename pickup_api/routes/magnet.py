"""Magnet route: field, string pull and output against distance."""

import logging

from fastapi import APIRouter, HTTPException

from pickup_api.models import FieldPointModel, MagnetRequest, MagnetResponse, MagnetResults, OutputPointModel
from pickup_engine.magnetic import (
    compute_magnet_results,
    field_vs_distance,
    output_index,
    output_vs_distance,
    pole_sensing_area,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/magnet", response_model=MagnetResponse)
async def compute_magnet(request: MagnetRequest):
    try:
        magnet = request.magnet.to_engine()
        positioning = request.positioning.to_engine()
        geometry = request.coil_geometry.to_engine()

        area = pole_sensing_area(magnet, geometry)
        results = compute_magnet_results(
            magnet, positioning, request.turns, area, request.coupling_factor, geometry.height,
        )
        field_curve = field_vs_distance(magnet, num_points=request.curve_points, coil_height=geometry.height)
        output_curve = output_vs_distance(
            magnet, request.turns, area, request.coupling_factor,
            num_points=request.curve_points, coil_height=geometry.height,
        )
    except ValueError:
        logger.warning("Magnet computation rejected", exc_info=True)
        raise HTTPException(status_code=400, detail="Magnet calculation failed. Check the magnet geometry and spacing.")

    return MagnetResponse(
        results=MagnetResults.model_validate(results),
        output_index=output_index(request.turns, area, request.coupling_factor, results.field_gradient),
        field_curve=[FieldPointModel.model_validate(p) for p in field_curve],
        output_curve=[OutputPointModel.model_validate(p) for p in output_curve],
    )
