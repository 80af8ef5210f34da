"""Engine-wide configuration passed explicitly into every pipeline stage."""

from dataclasses import dataclass, field

from .lookups import PRICE_INDEX_REFERENCE, Quarter


@dataclass(frozen=True)
class EngineConfig:
    """Immutable engine constants.

    Build variants with ``dataclasses.replace(DEFAULT_CONFIG, ...)`` rather
    than mutating a shared instance.
    """

    # === Tax & geometry ===
    tax_multiplier: float = 1.19  # net -> gross (VAT)
    slab_allowance_m: float = 0.35  # added to clear height per floor
    target_unit_size_m2: float = 70.0  # "auto" apartment count divisor
    floor_plate_per_core_m2: float = 400.0

    # === Price escalation ===
    price_index_reference: Quarter = field(default_factory=lambda: PRICE_INDEX_REFERENCE)
    annual_escalation_rate: float = 0.015

    # === Cashflow timing ===
    planning_fee_share: float = 0.6  # rest is paid during construction
    construction_curve_alpha: float = 2.0
    construction_curve_beta: float = 3.0
    sale_curve_alpha: float = 2.0
    sale_curve_beta: float = 2.0


DEFAULT_CONFIG = EngineConfig()
