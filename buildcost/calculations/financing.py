"""Financing plan: loan sizing, construction-phase costs and annuity repayment."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy_financial as npf

from ..models.project import FinancingTerms, TimelinePhases

logger = logging.getLogger(__name__)

RATE_SENSITIVITY_DELTAS: Tuple[float, ...] = (-0.01, 0.0, 0.01, 0.02)


@dataclass(frozen=True)
class FinancingPlan:
    """Loan and equity for a total investment, plus financing costs."""

    enabled: bool
    total_investment: float
    loan_amount: float
    equity: float
    interest_rate: float
    amortization_rate: float
    construction_months: int
    construction_interest: float  # on the average half-drawn loan
    commitment_fee: float
    monthly_payment: float  # German annuity: loan x (interest + amortization) / 12

    @property
    def financing_cost(self) -> float:
        return self.construction_interest + self.commitment_fee

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 12

    @property
    def annual_debt_service(self) -> float:
        return self.monthly_payment * 12

    @property
    def payoff_months(self) -> Optional[float]:
        """Months until the annuity repays the loan, None if it never does."""
        if self.loan_amount <= 0:
            return 0.0
        if self.monthly_payment <= 0:
            return None
        if self.monthly_rate == 0:
            return self.loan_amount / self.monthly_payment
        if self.monthly_payment <= self.loan_amount * self.monthly_rate:
            return None
        months = float(npf.nper(self.monthly_rate, -self.monthly_payment, self.loan_amount))
        return months if math.isfinite(months) else None


@dataclass(frozen=True)
class AmortizationRow:
    """One month of annuity repayment."""

    month: int  # 1-indexed payment number
    opening_balance: float
    interest: float
    principal: float
    closing_balance: float

    @property
    def payment(self) -> float:
        return self.interest + self.principal


@dataclass(frozen=True)
class RateScenario:
    """Debt service at a shifted interest rate."""

    delta: float
    interest_rate: float
    monthly_payment: float
    annual_debt_service: float
    dscr: Optional[float]


def plan_financing(
    total_investment: float,
    financing: FinancingTerms = FinancingTerms(),
    timeline: TimelinePhases = TimelinePhases(),
) -> FinancingPlan:
    """Split the investment into loan and equity and price the construction phase.

    Construction interest assumes the loan is on average half drawn over
    the construction period; the commitment fee is a monthly rate on the
    undrawn half.

    Args:
        total_investment: Total investment cost (gross).
        financing: Loan terms.
        timeline: Phase months; only the construction length is used.

    Returns:
        FinancingPlan. With financing disabled the loan and its costs are zero.

    Example:
        >>> plan = plan_financing(10_000_000, FinancingTerms(equity_ratio=0.3))
        >>> plan.loan_amount
        7000000.0
    """
    terms = financing.clamped()
    months = max(0, timeline.construction_months)
    if not terms.enabled:
        return FinancingPlan(
            enabled=False,
            total_investment=total_investment,
            loan_amount=0.0,
            equity=total_investment,
            interest_rate=terms.interest_rate,
            amortization_rate=terms.amortization_rate,
            construction_months=months,
            construction_interest=0.0,
            commitment_fee=0.0,
            monthly_payment=0.0,
        )

    loan = max(0.0, total_investment) * terms.debt_ratio
    plan = FinancingPlan(
        enabled=True,
        total_investment=total_investment,
        loan_amount=loan,
        equity=total_investment - loan,
        interest_rate=terms.interest_rate,
        amortization_rate=terms.amortization_rate,
        construction_months=months,
        construction_interest=loan * 0.5 * terms.interest_rate * months / 12,
        commitment_fee=loan * 0.5 * terms.commitment_rate * months,
        monthly_payment=loan * (terms.interest_rate + terms.amortization_rate) / 12,
    )
    logger.debug(
        "Financing: loan %.0f, equity %.0f, financing cost %.0f",
        plan.loan_amount,
        plan.equity,
        plan.financing_cost,
    )
    return plan


def remaining_balance(plan: FinancingPlan, months_paid: int) -> float:
    """Loan balance after ``months_paid`` annuity payments.

    Balance = L x (1 + r)^n - PMT x [((1 + r)^n - 1) / r]
    """
    if plan.loan_amount <= 0 or months_paid <= 0:
        return max(0.0, plan.loan_amount)
    if plan.monthly_rate == 0:
        return max(0.0, plan.loan_amount - plan.monthly_payment * months_paid)
    balance = -npf.fv(plan.monthly_rate, months_paid, -plan.monthly_payment, plan.loan_amount)
    return max(0.0, float(balance))


def amortization_schedule(
    plan: FinancingPlan,
    months: int,
    opening_balance: Optional[float] = None,
) -> List[AmortizationRow]:
    """Month-by-month annuity repayment; principal never exceeds the balance.

    Args:
        plan: Financing plan with rate and annuity.
        months: Number of payments to schedule.
        opening_balance: Balance at the first payment, defaults to the loan.

    Returns:
        One row per payment, stopping early once the loan is repaid.
    """
    balance = plan.loan_amount if opening_balance is None else opening_balance
    rows = []
    for month in range(1, months + 1):
        if balance <= 0:
            break
        interest = balance * plan.monthly_rate
        principal = min(max(0.0, plan.monthly_payment - interest), balance)
        rows.append(
            AmortizationRow(
                month=month,
                opening_balance=balance,
                interest=interest,
                principal=principal,
                closing_balance=balance - principal,
            )
        )
        balance -= principal
    return rows


def interest_rate_sensitivity(
    plan: FinancingPlan,
    financing: FinancingTerms,
    annual_noi: float,
    deltas: Sequence[float] = RATE_SENSITIVITY_DELTAS,
) -> List[RateScenario]:
    """Annuity and DSCR when the interest rate moves by each delta."""
    scenarios = []
    for delta in deltas:
        rate = max(0.0, financing.interest_rate + delta)
        payment = plan.loan_amount * (rate + financing.amortization_rate) / 12
        annual = payment * 12
        scenarios.append(
            RateScenario(
                delta=delta,
                interest_rate=rate,
                monthly_payment=payment,
                annual_debt_service=annual,
                dscr=annual_noi / annual if annual > 0 else None,
            )
        )
    return scenarios
