"""Shared pieces of the Excel and PDF exports."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from cashflow.models.records import Asset, Income, Obligation, Spending
from cashflow.state.app_state import AppState

EXPORT_EXTENSIONS = {"excel": "xlsx", "pdf": "pdf"}

# Placeholder for optional fields that are unset
MISSING = "-"


class ExportError(Exception):
    """An export file could not be produced."""
    pass


class ExportData(BaseModel):
    """The four synced collections, as exported."""

    incomes: list[Income] = Field(default_factory=list)
    spendings: list[Spending] = Field(default_factory=list)
    obligations: list[Obligation] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: AppState) -> "ExportData":
        return cls(
            incomes=state.incomes,
            spendings=state.spendings,
            obligations=state.obligations,
            assets=state.assets,
        )


def default_export_filename(kind: str, today: Optional[date] = None) -> str:
    """
    Finance_Data_YYYY-MM-DD.xlsx or .pdf

    Raises:
        ExportError: If kind is not 'excel' or 'pdf'
    """
    if kind not in EXPORT_EXTENSIONS:
        raise ExportError(f"Unknown export kind: {kind}")
    today = today or date.today()
    return f"Finance_Data_{today.isoformat()}.{EXPORT_EXTENSIONS[kind]}"


def or_missing(value):
    return MISSING if value is None else value
