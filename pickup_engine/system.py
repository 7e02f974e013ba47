"""
End-to-end evaluation of a pickup configuration.

Runs the whole chain for one ``PickupConfig``: coil and magnet are computed
independently, the coil (combined with its twin for two-coil wiring) is
loaded by the guitar circuit and optional transformer, and the loaded
resonance drives the transient and tone estimates.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from pickup_engine.coil import compute_coil_results
from pickup_engine.impedance import (
    cable_capacitance,
    effective_load_resistance,
    impedance_response,
    log_frequencies,
)
from pickup_engine.magnetic import compute_magnet_results, output_index, pole_sensing_area
from pickup_engine.models import (
    CoilComputedResults,
    FrequencyPoint,
    ImpedancePoint,
    ImpulsePoint,
    LoadComputedResults,
    MagnetComputedResults,
    PickupConfig,
    ToneDescriptor,
    ToneRatings,
    TransformerComputedResults,
    TransientCharacteristics,
)
from pickup_engine.resonance import DEFAULT_SETTINGS, ResonanceSearchSettings, loaded_resonance
from pickup_engine.response import REFERENCE_FREQUENCY, output_transfer, system_response
from pickup_engine.tone import tone_descriptor, tone_ratings
from pickup_engine.transformer import compute_transformer_results
from pickup_engine.transient import impulse_response, step_response, transient_characteristics
from pickup_engine.wiring import combine_coils, output_multiplier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SystemResults:
    coil: CoilComputedResults
    combined_coil: CoilComputedResults
    magnet: MagnetComputedResults
    load: LoadComputedResults
    transformer: Optional[TransformerComputedResults]
    output_index: float                  # mV, wiring included
    frequency_response: List[FrequencyPoint]
    impedance: List[ImpedancePoint]
    impulse: List[ImpulsePoint]
    step: List[ImpulsePoint]
    transient: TransientCharacteristics
    tone: ToneRatings
    tone_descriptor: ToneDescriptor
    model_version: str


def analyze(
    config: PickupConfig,
    f_min: float = 20.0,
    f_max: float = 20000.0,
    num_points: int = 500,
    settings: ResonanceSearchSettings = DEFAULT_SETTINGS,
) -> SystemResults:
    """
    Evaluate a complete pickup.

    Args:
        config: Coil, magnet, positioning, load and optional transformer.
        f_min: Lowest frequency of the response curves (Hz).
        f_max: Highest frequency of the response curves (Hz).
        num_points: Samples per response curve.
        settings: Loaded-resonance search settings.

    Returns:
        SystemResults with every derived quantity and curve.
    """
    coil_params = config.coil
    geometry = coil_params.geometry
    wire = coil_params.wire

    coil = compute_coil_results(geometry, wire)
    combined = combine_coils(
        coil, coil, coil_params.wiring_config, coil_params.phase_config, config.mutual_coupling,
    )

    area = pole_sensing_area(config.magnet, geometry)
    magnet = compute_magnet_results(
        config.magnet, config.positioning, wire.turns, area, coil_params.coupling_factor, geometry.height,
    )

    transformer = config.transformer if config.transformer is not None and config.transformer.enabled else None
    transformer_results = None
    if transformer is not None:
        transformer_results = compute_transformer_results(transformer, config.load)

    r, l, c = combined.dc_resistance, combined.inductance, combined.capacitance
    resonance = loaded_resonance(r, l, c, config.load, transformer, settings)
    at_1khz = output_transfer(r, l, c, config.load, [REFERENCE_FREQUENCY], transformer)

    load = LoadComputedResults(
        total_cable_capacitance=cable_capacitance(config.load),
        effective_load_resistance=effective_load_resistance(config.load),
        loaded_resonance=resonance.frequency,
        loaded_q=resonance.q,
        output_at_1khz=float(abs(at_1khz[0])),
    )

    freqs = log_frequencies(f_min, f_max, num_points)
    emf = output_index(wire.turns, area, coil_params.coupling_factor, magnet.field_gradient)
    ratings = tone_ratings(
        resonance.frequency, resonance.q, config.magnet.type, wire.insulation,
        config.magnet.pole_piece_material, config.magnet.cover_type,
    )

    logger.debug("Analyzed '%s': loaded f0=%.0f Hz, Q=%.2f (%s)",
                 config.name, resonance.frequency, resonance.q, resonance.shape.value)

    return SystemResults(
        coil=coil,
        combined_coil=combined,
        magnet=magnet,
        load=load,
        transformer=transformer_results,
        output_index=emf * output_multiplier(coil_params.wiring_config, coil_params.phase_config),
        frequency_response=system_response(r, l, c, config.load, freqs, transformer),
        impedance=impedance_response(r, l, c, freqs),
        impulse=impulse_response(resonance.frequency, resonance.q),
        step=step_response(resonance.frequency, resonance.q),
        transient=transient_characteristics(resonance.frequency, resonance.q),
        tone=ratings,
        tone_descriptor=tone_descriptor(
            ratings, resonance.frequency, resonance.q, config.magnet.type, wire.insulation,
            config.magnet.pole_piece_material, config.magnet.cover_type,
        ),
        model_version=config.model_version,
    )
