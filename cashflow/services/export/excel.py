"""
Excel export: one worksheet per collection.

Amounts are written as numbers so the workbook can be summed and charted.
"""

from pathlib import Path
from typing import Union

import pandas as pd

from cashflow.services.export.base import ExportData, ExportError, or_missing

INCOME_COLUMNS = ["Name", "Amount", "Category", "Frequency", "Date"]
SPENDING_COLUMNS = ["Name", "Amount", "Category", "Kind", "Date"]
OBLIGATION_COLUMNS = [
    "Name", "Type", "Monthly Payment", "Balance", "Credit Limit",
    "Interest Rate (%)", "Total Months", "Paid Months", "Start Date", "Status",
]
ASSET_COLUMNS = ["Name", "Type", "Quantity", "Unit", "Purchase Price (THB)"]


def _number(value):
    return float(value) if value is not None else None


def build_frames(data: ExportData) -> dict[str, pd.DataFrame]:
    """Sheet name -> DataFrame, in workbook order."""
    incomes = pd.DataFrame(
        [
            {
                "Name": i.name,
                "Amount": _number(i.amount),
                "Category": i.category,
                "Frequency": i.frequency.value,
                "Date": i.date.isoformat(),
            }
            for i in data.incomes
        ],
        columns=INCOME_COLUMNS,
    )
    spendings = pd.DataFrame(
        [
            {
                "Name": s.name,
                "Amount": _number(s.amount),
                "Category": s.category,
                "Kind": s.kind.value,
                "Date": s.date.isoformat(),
            }
            for s in data.spendings
        ],
        columns=SPENDING_COLUMNS,
    )
    obligations = pd.DataFrame(
        [
            {
                "Name": o.name,
                "Type": o.type.value,
                "Monthly Payment": _number(o.amount),
                "Balance": _number(o.balance) if o.balance is not None else 0.0,
                "Credit Limit": or_missing(_number(o.credit_limit)),
                "Interest Rate (%)": or_missing(_number(o.interest_rate)),
                "Total Months": or_missing(o.total_months),
                "Paid Months": or_missing(o.paid_months),
                "Start Date": or_missing(o.start_date.isoformat() if o.start_date else None),
                "Status": o.status.value,
            }
            for o in data.obligations
        ],
        columns=OBLIGATION_COLUMNS,
    )
    assets = pd.DataFrame(
        [
            {
                "Name": a.name,
                "Type": a.type.value,
                "Quantity": _number(a.quantity),
                "Unit": a.unit,
                "Purchase Price (THB)": or_missing(_number(a.purchase_price)),
            }
            for a in data.assets
        ],
        columns=ASSET_COLUMNS,
    )
    return {
        "Incomes": incomes,
        "Spendings": spendings,
        "Obligations": obligations,
        "Assets": assets,
    }


def export_excel(data: ExportData, path: Union[str, Path]) -> Path:
    """
    Write the workbook.

    Raises:
        ExportError: If the file can't be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, frame in build_frames(data).items():
                frame.to_excel(writer, sheet_name=sheet_name, index=False)
    except (OSError, ValueError) as e:
        raise ExportError(f"Failed to write Excel export: {e}")
    return path
