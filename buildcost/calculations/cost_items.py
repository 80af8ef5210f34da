"""Cost line items, cost groups and the ordered adjustment sequence.

Raw line items are priced net. A group sums its raw items and then runs the
subtotal through a fixed sequence of multiplicative adjustments:

    regional factor -> general contractor markup -> price escalation

Adjustments are applied once per group, after summation, never per item.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple

from ..models.building import CostFactors
from ..models.config import DEFAULT_CONFIG, EngineConfig


@dataclass(frozen=True)
class CostLineItem:
    """Single priced position within a cost group."""

    code: str  # DIN276 code, e.g. "331"
    description: str
    quantity: float
    unit: str
    unit_price_net: float
    line_total_net: float
    line_total_gross: float


def line_item(
    code: str,
    description: str,
    quantity: float,
    unit: str,
    unit_price_net: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CostLineItem:
    """Price a line item; gross is always net times the VAT multiplier."""
    net = quantity * unit_price_net
    return CostLineItem(
        code=code,
        description=description,
        quantity=quantity,
        unit=unit,
        unit_price_net=unit_price_net,
        line_total_net=net,
        line_total_gross=net * config.tax_multiplier,
    )


@dataclass(frozen=True)
class Adjustment:
    """Named multiplicative step applied to a group subtotal."""

    name: str
    factor: float

    def apply(self, amount: float) -> float:
        return amount * self.factor


@dataclass(frozen=True)
class AppliedAdjustment:
    """Record of one adjustment step."""

    name: str
    factor: float
    before_net: float
    after_net: float

    @property
    def amount_net(self) -> float:
        return self.after_net - self.before_net


AdjustmentRule = Callable[[CostFactors, float], Adjustment]


def regional_adjustment(factors: CostFactors, escalation: float) -> Adjustment:
    return Adjustment("regional factor", factors.regional_factor)


def contractor_adjustment(factors: CostFactors, escalation: float) -> Adjustment:
    return Adjustment("general contractor markup", 1 + factors.contractor_markup)


def escalation_adjustment(factors: CostFactors, escalation: float) -> Adjustment:
    return Adjustment("price escalation", 1 + escalation)


# Order matters for the recorded step amounts, not for the product.
BUILDING_SEQUENCE: Tuple[AdjustmentRule, ...] = (
    regional_adjustment,
    contractor_adjustment,
    escalation_adjustment,
)
UNDERGROUND_SEQUENCE: Tuple[AdjustmentRule, ...] = (
    regional_adjustment,
    escalation_adjustment,
)


def build_adjustments(
    sequence: Sequence[AdjustmentRule],
    factors: CostFactors,
    escalation: float,
) -> Tuple[Adjustment, ...]:
    return tuple(rule(factors, escalation) for rule in sequence)


def apply_adjustments(
    subtotal: float,
    adjustments: Iterable[Adjustment],
) -> Tuple[float, Tuple[AppliedAdjustment, ...]]:
    """Run a subtotal through the adjustments in order.

    Returns:
        Tuple of (adjusted total, applied steps).
    """
    steps: List[AppliedAdjustment] = []
    running = subtotal
    for adjustment in adjustments:
        after = adjustment.apply(running)
        steps.append(AppliedAdjustment(adjustment.name, adjustment.factor, running, after))
        running = after
    return running, tuple(steps)


@dataclass(frozen=True)
class CostGroup:
    """Named bucket of line items with its adjusted totals."""

    code: str
    name: str
    items: Tuple[CostLineItem, ...]
    subtotal_net: float  # raw items before adjustments
    adjustments: Tuple[AppliedAdjustment, ...]
    net_total: float
    gross_total: float

    @property
    def subtotal_gross(self) -> float:
        return sum(item.line_total_gross for item in self.items)

    @property
    def adjustment_factor(self) -> float:
        factor = 1.0
        for step in self.adjustments:
            factor *= step.factor
        return factor

    def net_total_for(self, code_prefix: str) -> float:
        """Adjusted net total of the items whose code starts with a prefix."""
        raw = sum(item.line_total_net for item in self.items if item.code.startswith(code_prefix))
        return raw * self.adjustment_factor


def build_group(
    code: str,
    name: str,
    items: Iterable[CostLineItem],
    adjustments: Iterable[Adjustment] = (),
    config: EngineConfig = DEFAULT_CONFIG,
) -> CostGroup:
    """Freeze line items into a group and apply its adjustments."""
    frozen_items = tuple(items)
    subtotal = sum(item.line_total_net for item in frozen_items)
    net_total, steps = apply_adjustments(subtotal, adjustments)
    return CostGroup(
        code=code,
        name=name,
        items=frozen_items,
        subtotal_net=subtotal,
        adjustments=steps,
        net_total=net_total,
        gross_total=net_total * config.tax_multiplier,
    )
