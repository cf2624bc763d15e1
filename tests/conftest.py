"""Shared fixtures for the Cash Flow Tracker tests."""

from datetime import date
from decimal import Decimal

import pytest

from cashflow.audit import AuditLogger
from cashflow.config.settings import AppSettings
from cashflow.models.records import (
    Obligation,
    ObligationType,
    Spending,
    SpendingKind,
)
from cashflow.orchestrator import FinanceController
from cashflow.services.storage import (
    InMemoryAuditStorage,
    InMemoryProfileStorage,
    InMemoryRecordStorage,
)


@pytest.fixture
def iphone():
    """Installment: 4200 x 10 months, 2 paid, 33600 left."""
    return Obligation(
        name="iPhone 16 Pro",
        type=ObligationType.INSTALLMENT,
        amount=Decimal("4200"),
        total_months=10,
        paid_months=2,
        balance=Decimal("33600"),
    )


@pytest.fixture
def car_loan():
    return Obligation(
        name="Car Loan",
        type=ObligationType.CAR_LOAN,
        amount=Decimal("14500"),
        balance=Decimal("850000"),
        interest_rate=Decimal("2.5"),
    )


@pytest.fixture
def make_payment():
    """Factory for obligation-payment spendings linked to an obligation."""
    def _make(obligation, amount="4200", day=date(2026, 3, 5)):
        return Spending(
            name=f"Pay {obligation.name}",
            amount=Decimal(amount),
            category="Obligation Payment",
            kind=SpendingKind.OBLIGATION_PAYMENT,
            linked_obligation_id=obligation.id,
            date=day,
        )
    return _make


@pytest.fixture
def app_settings(tmp_path):
    return AppSettings(export_dir=str(tmp_path / "exports"))


@pytest.fixture
def record_storage():
    return InMemoryRecordStorage()


@pytest.fixture
def profile_storage():
    return InMemoryProfileStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def controller(record_storage, profile_storage, audit_storage, app_settings):
    """Controller wired to in-memory storage, no state file."""
    return FinanceController(
        record_storage=record_storage,
        profile_storage=profile_storage,
        audit_logger=AuditLogger(audit_storage),
        settings=app_settings,
    )
