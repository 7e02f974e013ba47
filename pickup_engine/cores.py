"""
Transformer core catalogue.

Cores that suit pickup step-up transformers, with datasheet effective area
(mm²) and magnetic path length (mm). Material permeability and saturation
come from ``calibration.CORE_MATERIAL_PROPERTIES``; the per-core figures here
are what a winder reads off the vendor sheet.
"""

from typing import Dict, List, Optional

from pickup_engine.models import (
    CoreMaterial,
    CoreMaterialBase,
    CoreShape,
    TransformerCoreParams,
)

TRANSFORMER_CORES: List[Dict] = [
    # --- Nanocrystalline toroids ---
    {"id": "nano_toroid_small", "name": "Nanocrystalline Toroid (Small)",
     "shape": CoreShape.TOROID_ROUND, "base": CoreMaterialBase.NANOCRYSTALLINE, "variant": "nc_iron",
     "effective_area": 25, "effective_length": 40, "saturation_flux": 1.2,
     "permeability_range": (15000, 80000), "typical_permeability": 30000, "loss_grade": "low",
     "description": "Compact high-permeability core for low-power applications"},
    {"id": "nano_toroid_medium", "name": "Nanocrystalline Toroid (Medium)",
     "shape": CoreShape.TOROID_ROUND, "base": CoreMaterialBase.NANOCRYSTALLINE, "variant": "nc_iron",
     "effective_area": 52, "effective_length": 62, "saturation_flux": 1.2,
     "permeability_range": (20000, 100000), "typical_permeability": 50000, "loss_grade": "low",
     "description": "Standard size for pickup transformers"},
    {"id": "nano_toroid_large", "name": "Nanocrystalline Toroid (Large)",
     "shape": CoreShape.TOROID_ROUND, "base": CoreMaterialBase.NANOCRYSTALLINE, "variant": "nc_iron",
     "effective_area": 100, "effective_length": 85, "saturation_flux": 1.2,
     "permeability_range": (30000, 150000), "typical_permeability": 80000, "loss_grade": "low",
     "description": "Large core for lower frequency extension"},

    # --- Amorphous C-cores ---
    {"id": "amorphous_c_small", "name": "Amorphous C-Core (Small)",
     "shape": CoreShape.C_CORE, "base": CoreMaterialBase.AMORPHOUS, "variant": "am_iron",
     "effective_area": 30, "effective_length": 50, "saturation_flux": 1.56,
     "permeability_range": (1000, 10000), "typical_permeability": 5000, "loss_grade": "low",
     "description": "Good balance of saturation and permeability"},
    {"id": "amorphous_c_medium", "name": "Amorphous C-Core (Medium)",
     "shape": CoreShape.C_CORE, "base": CoreMaterialBase.AMORPHOUS, "variant": "am_iron",
     "effective_area": 65, "effective_length": 75, "saturation_flux": 1.56,
     "permeability_range": (1500, 15000), "typical_permeability": 8000, "loss_grade": "low",
     "description": "Versatile core for various transformer designs"},

    # --- Ferrite ---
    {"id": "ferrite_toroid_small", "name": "NiZn Ferrite Toroid (Small)",
     "shape": CoreShape.TOROID_ROUND, "base": CoreMaterialBase.FERRITE, "variant": "ferrite_nizn",
     "effective_area": 20, "effective_length": 35, "saturation_flux": 0.35,
     "permeability_range": (125, 850), "typical_permeability": 400, "loss_grade": "medium",
     "description": "Compact ferrite for high-frequency applications"},
    {"id": "ferrite_toroid_medium", "name": "MnZn Ferrite Toroid (Medium)",
     "shape": CoreShape.TOROID_ROUND, "base": CoreMaterialBase.FERRITE, "variant": "ferrite_mnzn",
     "effective_area": 45, "effective_length": 55, "saturation_flux": 0.45,
     "permeability_range": (2000, 5000), "typical_permeability": 3000, "loss_grade": "medium",
     "description": "Standard ferrite for audio frequency range"},
    {"id": "ferrite_ei_small", "name": "Ferrite EI Core (Small)",
     "shape": CoreShape.EI_CORE, "base": CoreMaterialBase.FERRITE, "variant": "ferrite_mnzn",
     "effective_area": 35, "effective_length": 45, "saturation_flux": 0.4,
     "permeability_range": (1500, 4000), "typical_permeability": 2500, "loss_grade": "medium",
     "description": "EI shape for easy winding"},

    # --- Laminated steel, for comparison ---
    {"id": "steel_ei_small", "name": "Silicon Steel EI (Small)",
     "shape": CoreShape.EI_CORE, "base": CoreMaterialBase.SILICON_STEEL, "variant": None,
     "effective_area": 40, "effective_length": 60, "saturation_flux": 1.5,
     "permeability_range": (2000, 8000), "typical_permeability": 4000, "loss_grade": "high",
     "description": "Traditional laminated steel core"},
]


def core_spec(core_id: str) -> Optional[Dict]:
    """Catalogue entry by id."""
    for core in TRANSFORMER_CORES:
        if core["id"] == core_id:
            return core
    return None


def cores_by_material(base: CoreMaterialBase) -> List[Dict]:
    return [c for c in TRANSFORMER_CORES if c["base"] == CoreMaterialBase(base)]


def cores_by_shape(shape: CoreShape) -> List[Dict]:
    return [c for c in TRANSFORMER_CORES if c["shape"] == CoreShape(shape)]


def core_params_from_spec(core_id: str, air_gap: float = 0.0) -> TransformerCoreParams:
    """Build core parameters for a catalogue entry. Unknown ids raise ValueError."""
    core = core_spec(core_id)
    if core is None:
        raise ValueError(f"Unknown core '{core_id}'. Must be one of: {[c['id'] for c in TRANSFORMER_CORES]}")
    return TransformerCoreParams(
        shape=core["shape"],
        material=CoreMaterial(base=core["base"], variant=core["variant"]),
        effective_area=float(core["effective_area"]),
        effective_length=float(core["effective_length"]),
        air_gap=air_gap,
    )
