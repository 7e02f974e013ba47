"""Pydantic models for the pickup API requests and responses."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from pickup_api.config import SweepDefaults
from pickup_engine.cores import core_params_from_spec
from pickup_engine.models import (
    BladeMaterial,
    CoilForm,
    CoilGeometry,
    CoilParams,
    ConductorMaterial,
    ConductorType,
    CopperGrade,
    CoreLoss,
    CoreMaterial,
    CoreMaterialBase,
    CoreShape,
    CoverType,
    InsulationClass,
    InsulationType,
    LoadParams,
    MagnetGeometry,
    MagnetParams,
    MagnetType,
    PhaseConfig,
    PickupConfig,
    PolePieceMaterial,
    PositioningParams,
    PrimaryConductor,
    StrandType,
    StringMaterial,
    StringPullWarning,
    ToroidGeometry,
    TransformerCoreParams,
    TransformerParams,
    TransformerWindingParams,
    TransformerWindingStyle,
    WindingStyle,
    WireMaterial,
    WireParams,
    WiringConfig,
)
from pickup_engine.resonance import SweepShape


# --- Coil ---

class CoilGeometryModel(BaseModel):
    """Winding window; radii are half widths for rectangular and flatwork forms."""
    form: CoilForm = CoilForm.CYLINDRICAL
    inner_radius: float = Field(..., gt=0, description="Inner radius or half width (mm)")
    outer_radius: float = Field(..., gt=0, description="Outer radius or half width (mm)")
    height: float = Field(..., gt=0, description="Winding height (mm)")
    length: Optional[float] = Field(None, gt=0, description="Bobbin length for non-round forms (mm)")
    bobbin_thickness: Optional[float] = Field(None, ge=0, description="Bobbin wall thickness (mm)")

    def to_engine(self) -> CoilGeometry:
        return CoilGeometry(**self.model_dump())


class WireModel(BaseModel):
    wire_diameter: float = Field(..., gt=0, description="Bare conductor diameter (mm)")
    turns: int = Field(..., ge=1, description="Number of turns")
    insulation: InsulationType = InsulationType.PLAIN_ENAMEL
    winding_style: WindingStyle = WindingStyle.SCATTER
    packing_factor: float = Field(0.7, ge=0.3, le=0.95, description="Copper fill of the winding window")
    temperature: float = Field(20.0, ge=-40, le=200, description="Winding temperature (°C)")
    copper_grade: CopperGrade = CopperGrade.STANDARD
    material: WireMaterial = WireMaterial.COPPER
    strand_type: StrandType = StrandType.SOLID
    strand_count: Optional[int] = Field(None, ge=1)
    insulation_class: InsulationClass = InsulationClass.B

    def to_engine(self) -> WireParams:
        return WireParams(**self.model_dump())


class CoilModel(BaseModel):
    geometry: CoilGeometryModel
    wire: WireModel
    coupling_factor: float = Field(0.4, gt=0, le=1, description="Field-to-coil coupling")
    wiring_config: WiringConfig = WiringConfig.SINGLE
    phase_config: PhaseConfig = PhaseConfig.IN_PHASE

    def to_engine(self) -> CoilParams:
        return CoilParams(
            geometry=self.geometry.to_engine(),
            wire=self.wire.to_engine(),
            coupling_factor=self.coupling_factor,
            wiring_config=self.wiring_config,
            phase_config=self.phase_config,
        )


# --- Magnet ---

class MagnetModel(BaseModel):
    type: MagnetType = MagnetType.ALNICO5
    geometry: MagnetGeometry = MagnetGeometry.ROD
    magnet_length: float = Field(..., gt=0, description="Length along the magnetization axis (mm)")
    magnetization: float = Field(1.0, ge=0, le=1.2, description="Charge level, 1.0 = full")
    diameter: Optional[float] = Field(None, gt=0, description="Rod diameter (mm)")
    width: Optional[float] = Field(None, gt=0, description="Bar or blade magnet width (mm)")
    magnet_height: Optional[float] = Field(None, gt=0, description="Bar or blade magnet height (mm)")
    pole_pieces: bool = True
    pole_piece_material: PolePieceMaterial = PolePieceMaterial.ALNICO
    cover_type: CoverType = CoverType.NONE
    blade_thickness: Optional[float] = Field(None, gt=0, description="Blade thickness (mm)")
    blade_height: Optional[float] = Field(None, ge=0, description="Blade protrusion above the coil (mm)")
    blade_material: Optional[BladeMaterial] = None
    magnet_count: Optional[int] = Field(None, ge=1, le=2)

    def to_engine(self) -> MagnetParams:
        return MagnetParams(**self.model_dump())


class PositioningModel(BaseModel):
    string_to_pole_distance: float = Field(..., gt=0, description="String to pole top (mm)")
    coil_to_string_distance: float = Field(..., gt=0, description="String to coil top (mm)")
    pole_spacing: float = Field(10.4, gt=0, description="Pole centre spacing (mm)")
    string_diameter: float = Field(0.43, gt=0, description="String diameter (mm)")
    string_material: StringMaterial = StringMaterial.NICKEL

    def to_engine(self) -> PositioningParams:
        return PositioningParams(**self.model_dump())


# --- Load ---

class LoadModel(BaseModel):
    volume_pot: float = Field(250e3, gt=0, description="Volume pot (Ohm)")
    volume_position: float = Field(1.0, ge=0, le=1, description="0 = off, 1 = full")
    tone_pot: float = Field(250e3, gt=0, description="Tone pot (Ohm)")
    tone_capacitor: float = Field(22e-9, gt=0, description="Tone capacitor (F)")
    tone_position: float = Field(0.0, ge=0, le=1, description="0 = full treble, 1 = full cut")
    cable_capacitance_per_meter: float = Field(100e-12, ge=0, description="Cable capacitance (F/m)")
    cable_length: float = Field(3.0, ge=0, description="Cable length (m)")
    amp_input_impedance: float = Field(1e6, gt=0, description="Amp input impedance (Ohm)")

    def to_engine(self) -> LoadParams:
        return LoadParams(**self.model_dump())


# --- Transformer ---

class ToroidModel(BaseModel):
    inner_diameter: float = Field(..., gt=0, description="mm")
    outer_diameter: float = Field(..., gt=0, description="mm")
    height: float = Field(..., gt=0, description="mm")
    straight_length: float = Field(0.0, ge=0, description="Oval toroid straight section (mm)")


class TransformerCoreModel(BaseModel):
    """Either a catalogue ``core_id`` or an explicit core description."""
    core_id: Optional[str] = Field(None, description="Catalogue id, see GET /api/cores")
    shape: CoreShape = CoreShape.TOROID_ROUND
    material_base: CoreMaterialBase = CoreMaterialBase.NANOCRYSTALLINE
    material_variant: Optional[str] = Field(None, description="e.g. nc_iron, am_cobalt, ferrite_mnzn")
    effective_area: Optional[float] = Field(None, gt=0, description="Ae (mm²)")
    effective_length: Optional[float] = Field(None, gt=0, description="le (mm)")
    air_gap: float = Field(0.0, ge=0, description="Total air gap (mm)")
    toroid_geometry: Optional[ToroidModel] = None

    def to_engine(self) -> TransformerCoreParams:
        if self.core_id is not None:
            return core_params_from_spec(self.core_id, self.air_gap)
        if self.effective_area is None or self.effective_length is None:
            raise ValueError("effective_area and effective_length are required without a core_id")
        toroid = None
        if self.toroid_geometry is not None:
            toroid = ToroidGeometry(**self.toroid_geometry.model_dump())
        return TransformerCoreParams(
            shape=self.shape,
            material=CoreMaterial(base=self.material_base, variant=self.material_variant),
            effective_area=self.effective_area,
            effective_length=self.effective_length,
            air_gap=self.air_gap,
            toroid_geometry=toroid,
        )


class PrimaryConductorModel(BaseModel):
    type: ConductorType = ConductorType.WIRE
    material: ConductorMaterial = ConductorMaterial.COPPER
    wire_awg: Optional[int] = Field(None, ge=10, le=50)
    plate_thickness: Optional[float] = Field(None, gt=0, description="mm")
    plate_width: Optional[float] = Field(None, gt=0, description="mm")


class TransformerWindingModel(BaseModel):
    primary_turns: int = Field(..., ge=1)
    secondary_turns: int = Field(..., ge=1)
    primary_conductor: PrimaryConductorModel = PrimaryConductorModel()
    secondary_awg: int = Field(40, ge=10, le=50)
    secondary_material: ConductorMaterial = ConductorMaterial.COPPER
    winding_style: TransformerWindingStyle = TransformerWindingStyle.NON_INTERLEAVED
    shielding: bool = False


class TransformerModel(BaseModel):
    core: TransformerCoreModel
    winding: TransformerWindingModel
    enabled: bool = True

    def to_engine(self) -> TransformerParams:
        winding = self.winding.model_dump(exclude={"primary_conductor"})
        return TransformerParams(
            core=self.core.to_engine(),
            winding=TransformerWindingParams(
                primary_conductor=PrimaryConductor(**self.winding.primary_conductor.model_dump()),
                **winding,
            ),
            enabled=self.enabled,
        )


# --- Sweep ---

class SweepModel(BaseModel):
    """Optional sweep override; unset fields use the service defaults."""
    f_min: Optional[float] = Field(None, gt=0, description="Lowest frequency (Hz)")
    f_max: Optional[float] = Field(None, gt=0, description="Highest frequency (Hz)")
    num_points: Optional[int] = Field(None, ge=2, le=5000)

    def resolve(self, defaults: SweepDefaults) -> SweepDefaults:
        resolved = SweepDefaults(
            num_points=self.num_points or defaults.num_points,
            f_min=self.f_min or defaults.f_min,
            f_max=self.f_max or defaults.f_max,
        )
        if resolved.f_min >= resolved.f_max:
            raise ValueError(f"f_min ({resolved.f_min}) must be below f_max ({resolved.f_max})")
        return resolved


# --- Requests ---

class CoilRequest(BaseModel):
    geometry: CoilGeometryModel
    wire: WireModel


class MagnetRequest(BaseModel):
    magnet: MagnetModel
    positioning: PositioningModel
    coil_geometry: CoilGeometryModel
    turns: int = Field(8000, ge=1)
    coupling_factor: float = Field(0.4, gt=0, le=1)
    curve_points: int = Field(50, ge=2, le=1000)


class TransformerRequest(BaseModel):
    transformer: TransformerModel
    load: LoadModel = LoadModel()
    source_voltage_rms: float = Field(0.1, gt=0, description="Drive level for the saturation check (V rms)")
    operating_frequency: float = Field(1000.0, gt=0, description="Hz")
    sweep: SweepModel = SweepModel()


class ResponseRequest(BaseModel):
    coil: CoilModel
    load: LoadModel = LoadModel()
    transformer: Optional[TransformerModel] = None
    mutual_coupling: Union[str, float] = "humbucker_side"
    sweep: SweepModel = SweepModel()


class TransientRequest(BaseModel):
    resonant_frequency: float = Field(..., gt=0, description="Loaded f0 (Hz)")
    q: float = Field(..., gt=0, description="Loaded Q")
    duration_ms: float = Field(10.0, gt=0, le=1000)
    num_points: int = Field(500, ge=2, le=10000)


class WiringRequest(BaseModel):
    coil1: CoilRequest
    coil2: CoilRequest
    wiring: WiringConfig = WiringConfig.SERIES
    phase: PhaseConfig = PhaseConfig.IN_PHASE
    coupling: Union[str, float] = "humbucker_side"


class AnalyzeRequest(BaseModel):
    """A complete pickup; the same shape callers save and reload."""
    name: str = ""
    coil: CoilModel
    magnet: MagnetModel
    positioning: PositioningModel
    load: LoadModel = LoadModel()
    transformer: Optional[TransformerModel] = None
    model_version: str = "v1.0"
    mutual_coupling: Union[str, float] = "humbucker_side"
    sweep: SweepModel = SweepModel()

    def to_engine(self) -> PickupConfig:
        return PickupConfig(
            coil=self.coil.to_engine(),
            magnet=self.magnet.to_engine(),
            positioning=self.positioning.to_engine(),
            load=self.load.to_engine(),
            transformer=self.transformer.to_engine() if self.transformer else None,
            name=self.name,
            model_version=self.model_version,
            mutual_coupling=self.mutual_coupling,
        )


# --- Responses ---

class EngineResult(BaseModel):
    """Built straight from engine dataclasses."""
    model_config = ConfigDict(from_attributes=True)


class CoilResults(EngineResult):
    mean_turn_length: float
    total_wire_length: float
    coil_volume: float
    dc_resistance: float
    inductance: float
    capacitance: float
    resonant_frequency: float
    quality_factor: float
    max_turns: int
    computed_outer_radius: float


class CoilResponse(BaseModel):
    results: CoilResults
    awg: Optional[int] = None
    model_version: str


class FieldPointModel(EngineResult):
    distance: float
    field: float


class OutputPointModel(EngineResult):
    distance: float
    output: float


class MagnetResults(EngineResult):
    field_at_string: float
    field_at_coil: float
    field_gradient: float
    sensitivity_index: float
    string_pull_index: float
    string_pull_warning: StringPullWarning


class MagnetResponse(BaseModel):
    results: MagnetResults
    output_index: float
    field_curve: list[FieldPointModel]
    output_curve: list[OutputPointModel]


class FrequencyPointModel(EngineResult):
    frequency: float
    magnitude: float
    magnitude_db: float
    phase_deg: float


class ImpedancePointModel(EngineResult):
    frequency: float
    magnitude: float
    phase_deg: float


class ImpulsePointModel(EngineResult):
    time: float
    amplitude: float


class ParasiticsModel(EngineResult):
    leakage_inductance: float
    interwinding_capacitance: float
    primary_capacitance: float
    secondary_capacitance: float
    primary_resistance: float
    secondary_resistance: float


class TransformerResults(EngineResult):
    turns_ratio: float
    voltage_ratio: float
    reflected_load: float
    primary_inductance: float
    effective_permeability: float
    parasitics: ParasiticsModel
    bandwidth: float
    saturation_margin: float
    saturation_flux: float
    peak_flux: float
    core_loss_estimate: CoreLoss


class TransformerResponse(BaseModel):
    results: TransformerResults
    frequency_response: list[FrequencyPointModel]


class LoadedResonanceModel(EngineResult):
    frequency: float
    q: float
    shape: SweepShape


class ResponseResponse(BaseModel):
    coil: CoilResults
    loaded_resonance: LoadedResonanceModel
    frequency_response: list[FrequencyPointModel]
    impedance: list[ImpedancePointModel]


class TransientCharacteristicsModel(EngineResult):
    decay_time: float
    ring_period: float
    ring_cycles: float
    attack_speed: str


class TransientResponse(BaseModel):
    characteristics: TransientCharacteristicsModel
    impulse: list[ImpulsePointModel]
    step: list[ImpulsePointModel]


class WiringResponse(BaseModel):
    coil1: CoilResults
    coil2: CoilResults
    combined: CoilResults
    output_multiplier: float


class LoadResults(EngineResult):
    total_cable_capacitance: float
    effective_load_resistance: float
    loaded_resonance: float
    loaded_q: float
    output_at_1khz: float


class ToneRatingsModel(EngineResult):
    bass: float
    low_mid: float
    high_mid: float
    treble: float


class ToneDescriptorModel(EngineResult):
    character: str
    suggestions: list[str]


class AnalyzeResponse(EngineResult):
    coil: CoilResults
    combined_coil: CoilResults
    magnet: MagnetResults
    load: LoadResults
    transformer: Optional[TransformerResults] = None
    output_index: float
    frequency_response: list[FrequencyPointModel]
    impedance: list[ImpedancePointModel]
    impulse: list[ImpulsePointModel]
    step: list[ImpulsePointModel]
    transient: TransientCharacteristicsModel
    tone: ToneRatingsModel
    tone_descriptor: ToneDescriptorModel
    model_version: str


class CoreInfo(BaseModel):
    id: str
    name: str
    shape: CoreShape
    material_base: CoreMaterialBase
    material_variant: Optional[str] = None
    effective_area: float
    effective_length: float
    saturation_flux: float
    typical_permeability: float
    loss_grade: str
    description: str


class CoreListResponse(BaseModel):
    cores: list[CoreInfo]
    total: int
