"""Export module for tabular reports and Excel workbooks."""

from .report import (
    ReportConfig,
    cashflow_frame,
    cost_groups_frame,
    cost_items_frame,
    generate_report_excel,
    investment_frame,
    masses_frame,
    returns_frame,
)

__all__ = [
    "ReportConfig",
    "cashflow_frame",
    "cost_groups_frame",
    "cost_items_frame",
    "generate_report_excel",
    "investment_frame",
    "masses_frame",
    "returns_frame",
]
