"""
Parameter and result records for the pickup engine.

Every record is a frozen dataclass: callers build a snapshot, hand it to the
engine and get a fresh result back. Nothing here is mutated after
construction, and nothing is cached between calls.

Variant keys (coil form, magnet geometry, core material ...) are ``str``
enums so they serialize as plain strings and can be dispatched exhaustively.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


# --- Coil enums ---

class CoilForm(str, Enum):
    CYLINDRICAL = "cylindrical"
    RECTANGULAR = "rectangular"
    FLATWORK = "flatwork"


class WireMaterial(str, Enum):
    COPPER = "copper"
    SILVER = "silver"


class CopperGrade(str, Enum):
    STANDARD = "standard"   # electrolytic, 99.9%
    OFC = "ofc"             # oxygen-free, 99.99%
    OCC = "occ"             # Ohno continuous cast, 99.9999%


class StrandType(str, Enum):
    SOLID = "solid"
    STRANDED = "stranded"
    LITZ = "litz"


class InsulationType(str, Enum):
    PLAIN_ENAMEL = "plain_enamel"
    HEAVY_FORMVAR = "heavy_formvar"
    POLY = "poly"
    POLY_NYLON = "poly_nylon"
    SOLDERABLE = "solderable"


class InsulationClass(str, Enum):
    """NEMA thermal class (A 105°C, B 130°C, F 155°C, H 180°C, N 200°C)."""
    A = "A"
    B = "B"
    F = "F"
    H = "H"
    N = "N"


class WindingStyle(str, Enum):
    SCATTER = "scatter"
    RANDOM = "random"
    LAYERED = "layered"


class WiringConfig(str, Enum):
    SINGLE = "single"
    SERIES = "series"
    PARALLEL = "parallel"


class PhaseConfig(str, Enum):
    IN_PHASE = "in_phase"
    OUT_OF_PHASE = "out_of_phase"


# --- Magnet enums ---

class MagnetType(str, Enum):
    ALNICO2 = "alnico2"
    ALNICO3 = "alnico3"
    ALNICO5 = "alnico5"
    ALNICO8 = "alnico8"
    FERRITE = "ferrite"
    NEODYMIUM = "neodymium"


class MagnetGeometry(str, Enum):
    ROD = "rod"
    BAR = "bar"
    BLADE = "blade"


class BladeMaterial(str, Enum):
    STEEL = "steel"
    SS430 = "ss430"
    SS420 = "ss420"


class PolePieceMaterial(str, Enum):
    ALNICO = "alnico"
    STEEL = "steel"
    STEEL_PLATED = "steel_plated"


class CoverType(str, Enum):
    NONE = "none"
    NICKEL_SILVER = "nickel_silver"
    CHROME = "chrome"
    PLASTIC = "plastic"


class StringMaterial(str, Enum):
    NICKEL = "nickel"
    STEEL = "steel"


class StringPullWarning(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    DANGER = "danger"


# --- Transformer enums ---

class CoreShape(str, Enum):
    TOROID_ROUND = "toroid_round"
    TOROID_OVAL = "toroid_oval"
    C_CORE = "c_core"
    EI_CORE = "ei_core"


class CoreMaterialBase(str, Enum):
    NANOCRYSTALLINE = "nanocrystalline"
    AMORPHOUS = "amorphous"
    FERRITE = "ferrite"
    SILICON_STEEL = "silicon_steel"


class ConductorType(str, Enum):
    WIRE = "wire"
    PLATE = "plate"


class ConductorMaterial(str, Enum):
    COPPER = "copper"
    OFC_COPPER = "ofc_copper"
    SILVER = "silver"
    ALUMINUM = "aluminum"
    BRASS = "brass"


class TransformerWindingStyle(str, Enum):
    INTERLEAVED = "interleaved"
    NON_INTERLEAVED = "non_interleaved"


class CoreLoss(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Allowed variants per core material base (silicon steel has none)
CORE_VARIANTS = {
    CoreMaterialBase.NANOCRYSTALLINE: ("nc_iron", "nc_cobalt"),
    CoreMaterialBase.AMORPHOUS: ("am_iron", "am_cobalt"),
    CoreMaterialBase.FERRITE: ("ferrite_mnzn", "ferrite_nizn"),
    CoreMaterialBase.SILICON_STEEL: (),
}


# --- Coil records ---

@dataclass(frozen=True)
class CoilGeometry:
    """Winding window. Radii are widths for rectangular/flatwork forms (mm)."""
    form: CoilForm
    inner_radius: float
    outer_radius: float
    height: float
    length: Optional[float] = None
    bobbin_thickness: Optional[float] = None

    def __post_init__(self):
        if self.outer_radius <= self.inner_radius:
            raise ValueError(
                f"outer_radius ({self.outer_radius}) must exceed inner_radius ({self.inner_radius})"
            )


@dataclass(frozen=True)
class WireParams:
    wire_diameter: float                 # bare diameter, mm
    turns: int
    insulation: InsulationType = InsulationType.PLAIN_ENAMEL
    winding_style: WindingStyle = WindingStyle.SCATTER
    packing_factor: float = 0.7
    temperature: float = 20.0            # °C
    copper_grade: CopperGrade = CopperGrade.STANDARD
    material: WireMaterial = WireMaterial.COPPER
    strand_type: StrandType = StrandType.SOLID
    strand_count: Optional[int] = None
    insulation_class: InsulationClass = InsulationClass.B

    def __post_init__(self):
        if self.turns < 1:
            raise ValueError(f"turns must be at least 1, got {self.turns}")
        if not 0.3 <= self.packing_factor <= 0.95:
            raise ValueError(f"packing_factor must be in [0.3, 0.95], got {self.packing_factor}")


@dataclass(frozen=True)
class CoilComputedResults:
    mean_turn_length: float      # m
    total_wire_length: float     # m
    coil_volume: float           # mm³
    dc_resistance: float         # Ohm
    inductance: float            # H
    capacitance: float           # F
    resonant_frequency: float    # Hz
    quality_factor: float
    max_turns: int
    computed_outer_radius: float  # mm


# --- Magnet records ---

@dataclass(frozen=True)
class MagnetParams:
    """
    Magnet description, tagged by ``geometry``.

    rod:   diameter
    bar:   width, magnet_height
    blade: width, magnet_height, blade_thickness, blade_height,
           blade_material, magnet_count

    Variant fields left as ``None`` fall back to the defaults in
    ``magnetic.py``.
    """
    type: MagnetType
    geometry: MagnetGeometry
    magnet_length: float                 # mm
    magnetization: float = 1.0
    diameter: Optional[float] = None
    width: Optional[float] = None
    magnet_height: Optional[float] = None
    pole_pieces: bool = True
    pole_piece_material: PolePieceMaterial = PolePieceMaterial.ALNICO
    cover_type: CoverType = CoverType.NONE
    blade_thickness: Optional[float] = None
    blade_height: Optional[float] = None
    blade_material: Optional[BladeMaterial] = None
    magnet_count: Optional[int] = None

    def __post_init__(self):
        if not 0.0 <= self.magnetization <= 1.2:
            raise ValueError(f"magnetization must be in [0, 1.2], got {self.magnetization}")


@dataclass(frozen=True)
class PositioningParams:
    string_to_pole_distance: float       # mm
    coil_to_string_distance: float       # mm
    pole_spacing: float = 10.4           # mm
    string_diameter: float = 0.43        # mm
    string_material: StringMaterial = StringMaterial.NICKEL


@dataclass(frozen=True)
class MagnetComputedResults:
    field_at_string: float       # T
    field_at_coil: float         # T
    field_gradient: float        # T/m
    sensitivity_index: float     # mV/mm
    string_pull_index: float     # 0..1
    string_pull_warning: StringPullWarning


# --- Load ---

@dataclass(frozen=True)
class LoadParams:
    volume_pot: float = 250e3                    # Ohm
    volume_position: float = 1.0                 # 0 = off, 1 = full
    tone_pot: float = 250e3                      # Ohm
    tone_capacitor: float = 22e-9                # F
    tone_position: float = 0.0                   # 0 = full treble, 1 = full cut
    cable_capacitance_per_meter: float = 100e-12  # F/m
    cable_length: float = 3.0                    # m
    amp_input_impedance: float = 1e6             # Ohm


@dataclass(frozen=True)
class LoadComputedResults:
    total_cable_capacitance: float   # F
    effective_load_resistance: float  # Ohm
    loaded_resonance: float          # Hz
    loaded_q: float
    output_at_1khz: float            # |V_out/V_coil| at 1 kHz


# --- Transformer records ---

@dataclass(frozen=True)
class CoreMaterial:
    base: CoreMaterialBase
    variant: Optional[str] = None

    def __post_init__(self):
        allowed = CORE_VARIANTS[self.base]
        if allowed and self.variant not in allowed:
            raise ValueError(f"Unknown {self.base.value} variant '{self.variant}'. Must be one of: {list(allowed)}")
        if not allowed and self.variant is not None:
            raise ValueError(f"{self.base.value} has no variants, got '{self.variant}'")


@dataclass(frozen=True)
class ToroidGeometry:
    inner_diameter: float        # mm
    outer_diameter: float        # mm
    height: float                # mm
    straight_length: float = 0.0  # mm, oval toroids only


@dataclass(frozen=True)
class TransformerCoreParams:
    shape: CoreShape
    material: CoreMaterial
    effective_area: float        # mm²
    effective_length: float      # mm
    air_gap: float = 0.0         # mm
    toroid_geometry: Optional[ToroidGeometry] = None


@dataclass(frozen=True)
class PrimaryConductor:
    type: ConductorType = ConductorType.WIRE
    material: ConductorMaterial = ConductorMaterial.COPPER
    wire_awg: Optional[int] = None
    plate_thickness: Optional[float] = None  # mm
    plate_width: Optional[float] = None      # mm


@dataclass(frozen=True)
class TransformerWindingParams:
    primary_turns: int
    secondary_turns: int
    primary_conductor: PrimaryConductor = field(default_factory=PrimaryConductor)
    secondary_awg: int = 40
    secondary_material: ConductorMaterial = ConductorMaterial.COPPER
    winding_style: TransformerWindingStyle = TransformerWindingStyle.NON_INTERLEAVED
    shielding: bool = False

    def __post_init__(self):
        if self.primary_turns < 1 or self.secondary_turns < 1:
            raise ValueError(
                f"Winding turns must be at least 1, got {self.primary_turns}:{self.secondary_turns}"
            )


@dataclass(frozen=True)
class TransformerParams:
    core: TransformerCoreParams
    winding: TransformerWindingParams
    enabled: bool = True


@dataclass(frozen=True)
class TransformerParasitics:
    leakage_inductance: float        # H
    interwinding_capacitance: float  # F
    primary_capacitance: float       # F
    secondary_capacitance: float     # F
    primary_resistance: float        # Ohm
    secondary_resistance: float      # Ohm


@dataclass(frozen=True)
class TransformerComputedResults:
    turns_ratio: float
    voltage_ratio: float
    reflected_load: float            # |Z| at 1 kHz, Ohm
    primary_inductance: float        # H
    effective_permeability: float
    parasitics: TransformerParasitics
    bandwidth: float                 # Hz, upper -3 dB
    saturation_margin: float         # 0..1
    saturation_flux: float           # T
    peak_flux: float                 # T
    core_loss_estimate: CoreLoss


# --- Sampled curves ---

@dataclass(frozen=True)
class FrequencyPoint:
    frequency: float     # Hz
    magnitude: float     # linear, normalised to 1 kHz
    magnitude_db: float
    phase_deg: float


@dataclass(frozen=True)
class ImpedancePoint:
    frequency: float     # Hz
    magnitude: float     # Ohm
    phase_deg: float


@dataclass(frozen=True)
class FieldPoint:
    distance: float      # mm
    field: float         # mT


@dataclass(frozen=True)
class OutputPoint:
    distance: float      # mm
    output: float        # relative, 0..1


@dataclass(frozen=True)
class ImpulsePoint:
    time: float          # ms
    amplitude: float     # -1..1


# --- Aggregate configuration ---

@dataclass(frozen=True)
class CoilParams:
    geometry: CoilGeometry
    wire: WireParams
    coupling_factor: float = 0.4
    wiring_config: WiringConfig = WiringConfig.SINGLE
    phase_config: PhaseConfig = PhaseConfig.IN_PHASE


@dataclass(frozen=True)
class PickupConfig:
    """Everything needed to evaluate one pickup. This is the unit callers persist."""
    coil: CoilParams
    magnet: MagnetParams
    positioning: PositioningParams
    load: LoadParams = field(default_factory=LoadParams)
    transformer: Optional[TransformerParams] = None
    name: str = ""
    model_version: str = "v1.0"
    mutual_coupling: Union[str, float] = "humbucker_side"   # K_MUTUAL name or numeric k


@dataclass(frozen=True)
class TransientCharacteristics:
    decay_time: float    # ms to 10%
    ring_period: float   # ms
    ring_cycles: float
    attack_speed: str


@dataclass(frozen=True)
class ToneRatings:
    bass: float
    low_mid: float
    high_mid: float
    treble: float


@dataclass(frozen=True)
class ToneDescriptor:
    character: str
    suggestions: List[str]
