"""
Remote Row Projection

Records are stored remotely as flat rows of strings: the record's fields
plus the owning profile_id. Every storage backend goes through these two
functions so a row written by one backend reads back the same in another.
"""

from typing import Type
from uuid import UUID

from pydantic import BaseModel

from cashflow.models.records import Asset, Income, Obligation, Profile, Spending

TABLE_MODELS: dict[str, Type[BaseModel]] = {
    "incomes": Income,
    "spendings": Spending,
    "obligations": Obligation,
    "assets": Asset,
}

# Column order of each remote table (header row)
TABLE_COLUMNS: dict[str, list[str]] = {
    "incomes": [
        "id", "profile_id", "name", "amount", "category",
        "frequency", "date", "created_at",
    ],
    "spendings": [
        "id", "profile_id", "name", "amount", "category",
        "date", "kind", "linked_obligation_id", "created_at",
    ],
    "obligations": [
        "id", "profile_id", "name", "type", "amount", "balance",
        "credit_limit", "interest_rate", "total_months", "paid_months",
        "start_date", "status", "created_at",
    ],
    "assets": [
        "id", "profile_id", "name", "type", "quantity", "unit",
        "purchase_price", "created_at",
    ],
}

PROFILE_COLUMNS = ["id", "user_id_text", "pin_hash", "language", "created_at"]


def _to_cells(data: dict, columns: list[str]) -> dict[str, str]:
    return {
        col: "" if data.get(col) is None else str(data[col])
        for col in columns
    }


def record_to_row(record: BaseModel, table: str, profile_id: UUID) -> dict[str, str]:
    data = record.model_dump(mode="json")
    data["profile_id"] = str(profile_id)
    return _to_cells(data, TABLE_COLUMNS[table])


def row_to_record(table: str, row: dict[str, str]) -> BaseModel:
    """
    Parse a remote row. Empty cells become unset optional fields.

    Raises:
        pydantic.ValidationError: If the row doesn't form a valid record
    """
    model = TABLE_MODELS[table]
    data = {
        k: v for k, v in row.items()
        if k in model.model_fields and v not in ("", None)
    }
    return model.model_validate(data)


def profile_to_row(profile: Profile) -> dict[str, str]:
    return _to_cells(profile.model_dump(mode="json"), PROFILE_COLUMNS)


def row_to_profile(row: dict[str, str]) -> Profile:
    data = {k: v for k, v in row.items() if k in PROFILE_COLUMNS and v not in ("", None)}
    return Profile.model_validate(data)


def ordered(row: dict[str, str], columns: list[str]) -> list[str]:
    """Row dict to a list of cells in header order."""
    return [row.get(col, "") for col in columns]
