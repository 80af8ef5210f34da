"""Report export - tabular views of a project run and an Excel workbook.

Reads the frozen result objects only; nothing here feeds back into the
calculation.
"""

import io
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils.dataframe import dataframe_to_rows

from ..calculations.cascade import CostCascadeResult
from ..calculations.cashflow import CashflowSeries
from ..calculations.investment import InvestmentCostBreakdown
from ..calculations.masses import MassResult
from ..calculations.returns import ReturnsResult
from ..models.lookups import TABLE_VERSION, Strategy
from ..scenarios import ProjectResult, StrategyResult


@dataclass
class ReportConfig:
    """Which sheets to write."""
    include_masses: bool = True
    include_cost_groups: bool = True
    include_investment: bool = True
    include_cashflows: bool = True
    include_returns: bool = True
    project_name: str = "Residential building"


def masses_frame(masses: MassResult) -> pd.DataFrame:
    """One row per quantity."""
    rows = []
    for name, value in asdict(masses).items():
        if isinstance(value, Enum):
            value = value.value
        rows.append({"quantity": name, "value": value})
    return pd.DataFrame(rows, columns=["quantity", "value"])


def cost_items_frame(cascade: CostCascadeResult) -> pd.DataFrame:
    """Every line item of every group, plus one row per applied adjustment."""
    rows = []
    for group in cascade.all_groups():
        for item in group.items:
            rows.append({
                "group": group.code,
                "code": item.code,
                "description": item.description,
                "quantity": item.quantity,
                "unit": item.unit,
                "unit_price_net": item.unit_price_net,
                "total_net": item.line_total_net,
                "total_gross": item.line_total_gross,
            })
        for adjustment in group.adjustments:
            rows.append({
                "group": group.code,
                "code": "",
                "description": f"{adjustment.name} (x{adjustment.factor:.4f})",
                "quantity": None,
                "unit": "",
                "unit_price_net": None,
                "total_net": adjustment.amount_net,
                "total_gross": None,
            })
    return pd.DataFrame(rows)


def cost_groups_frame(cascade: CostCascadeResult) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "group": group.code,
            "name": group.name,
            "subtotal_net": group.subtotal_net,
            "net": group.net_total,
            "gross": group.gross_total,
        }
        for group in cascade.all_groups()
    ])


def investment_frame(breakdown: InvestmentCostBreakdown) -> pd.DataFrame:
    """Components, subsidy and total with per-m2 figures."""
    rows = [
        {
            "component": c.label,
            "amount": c.amount,
            "per_m2": c.per_m2,
            "included": c.included,
        }
        for c in breakdown.components
    ]
    rows.append({
        "component": "Subsidy",
        "amount": -breakdown.subsidy,
        "per_m2": -breakdown.subsidy_per_m2,
        "included": True,
    })
    rows.append({
        "component": "Total investment cost",
        "amount": breakdown.total,
        "per_m2": breakdown.total_per_m2,
        "included": True,
    })
    return pd.DataFrame(rows)


def cashflow_frame(series: CashflowSeries) -> pd.DataFrame:
    """Monthly entries indexed by month."""
    frame = pd.DataFrame([asdict(entry) for entry in series.entries])
    return frame.set_index("month")


def returns_frame(returns: ReturnsResult) -> pd.DataFrame:
    """Scalar metrics; metrics that do not apply are left out."""
    rows = []
    for name, value in asdict(returns).items():
        if isinstance(value, (tuple, list)) or value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        rows.append({"metric": name, "value": value})
    return pd.DataFrame(rows, columns=["metric", "value"])


def _style_header(ws, row: int, cols: int) -> None:
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)
    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")


def _write_frame(wb: Workbook, title: str, frame: pd.DataFrame, index: bool = False) -> None:
    ws = wb.create_sheet(title)
    if index:
        frame = frame.reset_index()
    for row in dataframe_to_rows(frame, index=False, header=True):
        ws.append(row)
    _style_header(ws, 1, len(frame.columns))
    for col in range(1, len(frame.columns) + 1):
        ws.column_dimensions[ws.cell(row=1, column=col).column_letter].width = 18


def generate_report_excel(
    project: ProjectResult,
    strategies: Dict[Strategy, StrategyResult],
    config: Optional[ReportConfig] = None,
) -> bytes:
    """Excel workbook with one sheet per view.

    Args:
        project: Output of ``run_project``.
        strategies: Strategy results to include, e.g. from ``run_both``.
        config: Optional sheet selection.

    Returns:
        Excel file as bytes
    """
    if config is None:
        config = ReportConfig()

    wb = Workbook()
    ws = wb.active
    ws.title = "Summary"
    ws.cell(row=1, column=1, value=f"Cost & returns report: {config.project_name}").font = Font(bold=True, size=16)
    ws.cell(row=2, column=1, value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    summary = [
        ("Gross floor area (m2)", project.masses.gross_floor_area),
        ("Lettable area (m2)", project.masses.lettable_area),
        ("Construction cost gross", project.cascade.construction_gross),
        ("Total investment cost", project.breakdown.total),
        ("Total investment cost per m2", project.breakdown.total_per_m2),
        ("Lookup fallbacks", len(project.cascade.flags)),
        ("Price tables", TABLE_VERSION),
    ]
    for offset, (label, value) in enumerate(summary, start=4):
        ws.cell(row=offset, column=1, value=label)
        ws.cell(row=offset, column=2, value=value)
    ws.column_dimensions["A"].width = 32
    ws.column_dimensions["B"].width = 20

    if config.include_masses:
        _write_frame(wb, "Masses", masses_frame(project.masses))
    if config.include_cost_groups:
        _write_frame(wb, "Cost groups", cost_groups_frame(project.cascade))
        _write_frame(wb, "Line items", cost_items_frame(project.cascade))
    if config.include_investment:
        _write_frame(wb, "Investment", investment_frame(project.breakdown))
    for strategy, result in strategies.items():
        if config.include_cashflows:
            _write_frame(wb, f"Cashflow {strategy.value}", cashflow_frame(result.cashflow), index=True)
        if config.include_returns:
            _write_frame(wb, f"Returns {strategy.value}", returns_frame(result.returns))

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()
