"""
Tests for the Cash Flow Tracker models

Test strategy:
1. Unit tests for records, reducer and aggregates (pure, no I/O)
2. Service tests against in-memory or faked backends
3. No real network calls in tests (use fakes)
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from cashflow.models.records import (
    Asset,
    AssetType,
    Budget,
    BudgetPeriod,
    Frequency,
    Income,
    Obligation,
    ObligationType,
    Spending,
    SpendingKind,
    apply_changes,
)
from cashflow.models.audit import (
    AUDIT_COLUMNS,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from cashflow.models.views import PeriodTotals


class TestRecordModels:
    """Tests for the record Pydantic models."""

    def test_income_creation(self):
        """Test Income model creation with defaults."""
        income = Income(
            name="Monthly Salary",
            amount=Decimal("65000"),
            category="Salary",
            date=date(2026, 1, 28),
        )
        assert income.frequency == Frequency.MONTHLY
        assert income.id is not None

    def test_income_strips_whitespace(self):
        """Test that whitespace is stripped from names."""
        income = Income(name="  Salary  ", amount=Decimal("1"), category="Salary", date=date.today())
        assert income.name == "Salary"

    def test_income_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(ValueError):
            Income(name="Salary", amount=Decimal("0"), category="Salary", date=date.today())
        with pytest.raises(ValueError):
            Income(name="Salary", amount=Decimal("-5"), category="Salary", date=date.today())

    def test_date_accepts_iso_datetime_string(self):
        """Test that the time part of an ISO timestamp is dropped."""
        spending = Spending(
            name="Lunch",
            amount=Decimal("120"),
            category="Food",
            date="2026-02-03T12:30:00.000Z",
        )
        assert spending.date == date(2026, 2, 3)

    def test_obligation_payment_requires_link(self):
        """Test that an obligation payment without a link is rejected."""
        with pytest.raises(ValueError):
            Spending(
                name="Pay card",
                amount=Decimal("1000"),
                category="Obligation Payment",
                kind=SpendingKind.OBLIGATION_PAYMENT,
                date=date.today(),
            )

    def test_normal_spending_is_not_obligation_payment(self):
        """Test that a normal spending with a stray link doesn't count as a payment."""
        spending = Spending(
            name="Lunch",
            amount=Decimal("120"),
            category="Food",
            linked_obligation_id=uuid4(),
            date=date.today(),
        )
        assert not spending.is_obligation_payment

    def test_obligation_optional_fields(self):
        """Test that optional obligation fields default to None."""
        obligation = Obligation(name="Card", type=ObligationType.CREDIT_CARD, amount=Decimal("500"))
        assert obligation.balance is None
        assert obligation.paid_months is None
        assert obligation.credit_limit is None

    def test_asset_rejects_negative_quantity(self):
        """Test that negative quantities are rejected."""
        with pytest.raises(ValueError):
            Asset(name="Gold", type=AssetType.GOLD, quantity=Decimal("-1"), unit="baht")

    def test_budget_defaults_to_monthly(self):
        """Test Budget default period."""
        budget = Budget(category="Food", amount=Decimal("5000"))
        assert budget.period == BudgetPeriod.MONTHLY


class TestApplyChanges:
    """Tests for validated partial updates."""

    def test_changes_are_merged_and_validated(self):
        """Test that changed fields are coerced through validation."""
        income = Income(name="Salary", amount=Decimal("1000"), category="Salary", date=date(2026, 1, 1))
        updated = apply_changes(income, {"amount": "1500", "date": "2026-02-01"})
        assert updated.amount == Decimal("1500")
        assert updated.date == date(2026, 2, 1)
        assert income.amount == Decimal("1000")

    def test_id_cannot_change(self):
        """Test that the id is ignored in changes."""
        income = Income(name="Salary", amount=Decimal("1000"), category="Salary", date=date(2026, 1, 1))
        updated = apply_changes(income, {"id": uuid4(), "name": "Wage"})
        assert updated.id == income.id
        assert updated.name == "Wage"

    def test_invalid_change_raises(self):
        """Test that an invalid update raises instead of producing a bad record."""
        income = Income(name="Salary", amount=Decimal("1000"), category="Salary", date=date(2026, 1, 1))
        with pytest.raises(ValueError):
            apply_changes(income, {"amount": "-1"})


class TestViewModels:
    """Tests for derived view models."""

    def test_period_totals_net(self):
        """Test that net is income minus expense."""
        totals = PeriodTotals(income=Decimal("100"), expense=Decimal("250"))
        assert totals.net == Decimal("-150")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            description="Income added",
        )
        assert event.event_id is not None
        assert event.timestamp is not None
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.SYNC_FAILED,
            severity=AuditSeverity.ERROR,
            description="Sync of spendings failed",
            error_message="timeout",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "sync_failed"
        assert log_dict["severity"] == "error"
        assert log_dict["error_message"] == "timeout"

    def test_audit_event_sheets_row_round_trip(self):
        """Test that a sheets row reads back as the same event."""
        event = AuditEventBuilder.obligation_payment(
            obligation_id=uuid4(),
            spending_id=uuid4(),
            amount="4200",
            reversed_=False,
            correlation_id=uuid4(),
        )
        row = event.to_sheets_row()
        assert len(row) == len(AUDIT_COLUMNS)

        restored = AuditEvent.from_sheets_row(row)
        assert restored.event_id == event.event_id
        assert restored.event_type == AuditEventType.OBLIGATION_PAYMENT_APPLIED
        assert restored.details["amount"] == "4200"

    def test_builder_reversed_payment(self):
        """Test that a reversed payment gets its own event type."""
        event = AuditEventBuilder.obligation_payment(
            obligation_id=uuid4(),
            spending_id=uuid4(),
            amount="4200",
            reversed_=True,
        )
        assert event.event_type == AuditEventType.OBLIGATION_PAYMENT_REVERSED

    def test_builder_login_created_profile(self):
        """Test that a registration is recorded as profile creation."""
        event = AuditEventBuilder.login_succeeded(uuid4(), "alice", created=True)
        assert event.event_type == AuditEventType.PROFILE_CREATED
        assert event.is_user_action is True

    def test_builder_dangling_link_is_warning(self):
        """Test that dangling links are logged as warnings."""
        event = AuditEventBuilder.obligation_link_dangling(uuid4(), uuid4())
        assert event.severity == AuditSeverity.WARNING


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
