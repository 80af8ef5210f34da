"""Data models for the building cost and returns engine."""

from .building import BuildingParameters, CostFactors, ExtraCost, GarageLayout, ManualAreas
from .config import DEFAULT_CONFIG, EngineConfig
from .fee_tables import FeeDiscipline
from .lookups import (
    BalconyType,
    BathroomPlacement,
    BuildingClass,
    CirculationType,
    ConstructionMethod,
    DisbursementCurve,
    EnergyStandard,
    FacadeFinish,
    FloorFinish,
    FootprintMode,
    GreenRoof,
    HeatingSupply,
    KitchenPackage,
    Quarter,
    RoofForm,
    Strategy,
    SunProtection,
    UndergroundType,
    WindowMaterial,
)
from .project import (
    BASE_CASE,
    ExitAssumptions,
    FeeSettings,
    FinancingTerms,
    InvestmentSettings,
    LandCostInput,
    PercentageCost,
    ProjectInputs,
    RevenueAssumptions,
    SensitivityCase,
    TimelinePhases,
)

__all__ = [
    "BalconyType",
    "BASE_CASE",
    "BathroomPlacement",
    "BuildingClass",
    "BuildingParameters",
    "CirculationType",
    "ConstructionMethod",
    "CostFactors",
    "DEFAULT_CONFIG",
    "DisbursementCurve",
    "EnergyStandard",
    "EngineConfig",
    "ExitAssumptions",
    "ExtraCost",
    "FacadeFinish",
    "FeeDiscipline",
    "FeeSettings",
    "FinancingTerms",
    "FloorFinish",
    "FootprintMode",
    "GarageLayout",
    "GreenRoof",
    "HeatingSupply",
    "InvestmentSettings",
    "KitchenPackage",
    "LandCostInput",
    "ManualAreas",
    "PercentageCost",
    "ProjectInputs",
    "Quarter",
    "RevenueAssumptions",
    "RoofForm",
    "SensitivityCase",
    "Strategy",
    "SunProtection",
    "TimelinePhases",
    "UndergroundType",
    "WindowMaterial",
]
