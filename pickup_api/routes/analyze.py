"""Analyze route: runs the whole engine on a saved pickup configuration."""

import logging

from fastapi import APIRouter, HTTPException, Request

from pickup_api.config import SweepDefaults
from pickup_api.models import AnalyzeRequest, AnalyzeResponse
from pickup_engine.system import analyze

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_pickup(request: Request, payload: AnalyzeRequest):
    """Coil, magnet, load, transformer, transient and tone results for one pickup."""
    defaults = getattr(request.app.state, "sweep", SweepDefaults())
    try:
        sweep = payload.sweep.resolve(defaults)
        results = analyze(payload.to_engine(), sweep.f_min, sweep.f_max, sweep.num_points)
    except ValueError:
        logger.warning("Analysis of '%s' rejected", payload.name, exc_info=True)
        raise HTTPException(status_code=400, detail="Analysis failed. Check that the pickup configuration is physically valid.")

    return AnalyzeResponse.model_validate(results)
