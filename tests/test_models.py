"""
Tests for Pocketbook models

Test strategy:
1. Unit tests for models, the report engine and the books
2. Storage tests against the in-memory and JSON-file stores
3. No real user data touched (settings point at a temp file)
"""

import pytest
from datetime import date
from pydantic import ValidationError

from pocketbook.models.ledger import (
    Account,
    Group,
    SplitHistoryEntry,
    SplitShare,
    TransactionRecord,
    TransactionType,
    parse_amount,
)
from pocketbook.models.report import (
    DateWindow,
    RangeMode,
    ReportQuery,
    ReportResult,
    ReportTab,
)
from pocketbook.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity


class TestParseAmount:
    """Tests for amount text parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("100", 100.0),
        (" 12.5 ", 12.5),
        ("1,250", 1250.0),
        ("12,345.67", 12345.67),
        ("-1,000,000", -1000000.0),
        (42, 42.0),
    ])
    def test_parses_numbers(self, text, expected):
        """Test amounts that parse to numbers."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", [
        "", "   ", "abc", "12abc", "nan", "inf", None, True,
        "1,5", "12,34", ",100", "1,0000", "1_000",
    ])
    def test_rejects_non_numbers(self, text):
        """Test text that is not a finite number."""
        assert parse_amount(text) is None


class TestTransactionRecord:
    """Tests for the TransactionRecord model."""

    def test_creation_defaults(self):
        """Test creation defaults."""
        record = TransactionRecord(amount="100", type=TransactionType.EXPENSE, category="Food")
        assert record.id
        assert record.date == date.today()
        assert record.note is None
        assert record.parsed_amount == 100.0
        assert record.signed_amount == -100.0

    def test_income_is_positive(self):
        """Test income is positive."""
        record = TransactionRecord(amount="50", type=TransactionType.INCOME, category="Bonus")
        assert record.signed_amount == 50.0

    def test_numeric_amount_coerced_to_text(self):
        """Test numeric amount coerced to text."""
        record = TransactionRecord(amount=12.5, type="expense", category="Food")
        assert record.amount == "12.5"
        record = TransactionRecord(amount=7, type="expense", category="Food")
        assert record.amount == "7"

    def test_unparseable_amount_is_representable(self):
        """Test unparseable amount is representable."""
        record = TransactionRecord(amount="abc", type="expense", category="Food")
        assert record.parsed_amount is None
        assert record.signed_amount is None

    def test_legacy_type_labels(self):
        """Test legacy type labels."""
        assert TransactionRecord(amount="1", type="支出", category="食物").type == TransactionType.EXPENSE
        assert TransactionRecord(amount="1", type="收入", category="薪資").type == TransactionType.INCOME
        assert TransactionType("Income") == TransactionType.INCOME

    def test_unknown_type_rejected(self):
        """Test unknown type rejected."""
        with pytest.raises(ValidationError):
            TransactionRecord(amount="1", type="transfer", category="Food")

    def test_empty_category_rejected(self):
        """Test empty category rejected."""
        with pytest.raises(ValidationError):
            TransactionRecord(amount="1", type="expense", category="   ")

    def test_blank_note_becomes_none(self):
        """Test blank note becomes none."""
        record = TransactionRecord(amount="1", type="expense", category="Food", note="  ")
        assert record.note is None

    def test_date_parsed_from_iso_string(self):
        """Test date parsed from iso string."""
        record = TransactionRecord(amount="1", type="expense", category="Food", date="2024-03-05")
        assert record.date == date(2024, 3, 5)
        assert record.model_dump(mode="json")["date"] == "2024-03-05"

    def test_records_are_frozen(self):
        """Test records are frozen."""
        record = TransactionRecord(amount="1", type="expense", category="Food")
        with pytest.raises(ValidationError):
            record.amount = "2"


class TestLedgerModels:
    """Tests for accounts, groups and split models."""

    def test_account_accepts_legacy_credit_limit_key(self):
        """Test account accepts legacy credit limit key."""
        account = Account.model_validate(
            {"id": "1", "name": "Card", "balance": 100, "creditLimit": 5000, "icon": "credit-card"}
        )
        assert account.credit_limit == 5000
        assert account.currency == "NT$"

    def test_account_rejects_unknown_icon(self):
        """Test account rejects unknown icon."""
        with pytest.raises(ValidationError):
            Account(name="Card", balance=0, icon="rocket")

    def test_group_code_must_be_upper_alphanumeric(self):
        """Test group code must be upper alphanumeric."""
        assert Group(name="Trip", code="AB12CD").code == "AB12CD"
        with pytest.raises(ValidationError):
            Group(name="Trip", code="ab-12")

    def test_split_history_participant_count(self):
        """Test split history participant count."""
        entry = SplitHistoryEntry(
            created_at="2024-03-01T12:00:00",
            amount=100,
            shares=[
                SplitShare(member_id="1", member_name="Alex", amount=50),
                SplitShare(member_id="2", member_name="Sam", amount=50),
            ],
        )
        assert entry.participant_count == 2
        assert entry.shares[0].describe() == "Alex owes 50"


class TestReportModels:
    """Tests for report query and window models."""

    def test_window_rejects_inverted_bounds(self):
        """Test window rejects inverted bounds."""
        with pytest.raises(ValidationError, match="Window end cannot be before start"):
            DateWindow(start=date(2024, 3, 31), end=date(2024, 3, 1))

    def test_window_contains_is_inclusive(self):
        """Test window contains is inclusive."""
        window = DateWindow(start=date(2024, 3, 1), end=date(2024, 3, 31))
        assert window.contains(date(2024, 3, 1))
        assert window.contains(date(2024, 3, 31))
        assert not window.contains(date(2024, 4, 1))

    def test_window_describe(self):
        """Test window describe."""
        window = DateWindow(start=date(2024, 3, 1), end=date(2024, 3, 31))
        assert window.describe() == "2024/03/01 ~ 2024/03/31"

    def test_query_defaults(self):
        """Test query defaults."""
        query = ReportQuery()
        assert query.tab == ReportTab.EXPENSE
        assert query.range_mode == RangeMode.MONTH
        assert query.custom_start is None

    def test_query_rejects_inverted_custom_bounds(self):
        """Test query rejects inverted custom bounds."""
        with pytest.raises(ValidationError, match="Custom end cannot be before custom start"):
            ReportQuery(
                range_mode=RangeMode.CUSTOM,
                custom_start=date(2024, 3, 10),
                custom_end=date(2024, 3, 1),
            )

    def test_query_navigation_unit_must_be_navigable(self):
        """Test query navigation unit must be navigable."""
        with pytest.raises(ValidationError):
            ReportQuery(navigation_unit=RangeMode.LAST_SIX_MONTHS)

    def test_custom_start_switches_to_custom_and_drops_earlier_end(self):
        """Test custom start switches to custom and drops earlier end."""
        query = ReportQuery().with_custom_end(date(2024, 3, 5)).with_custom_start(date(2024, 3, 10))
        assert query.range_mode == RangeMode.CUSTOM
        assert query.custom_start == date(2024, 3, 10)
        assert query.custom_end is None

    def test_with_range_mode_clears_navigation_unit(self):
        """Test with range mode clears navigation unit."""
        query = ReportQuery(
            range_mode=RangeMode.CUSTOM,
            custom_start=date(2024, 4, 1),
            custom_end=date(2024, 4, 30),
            navigation_unit=RangeMode.MONTH,
        )
        changed = query.with_range_mode(RangeMode.YEAR)
        assert changed.navigation_unit is None
        assert changed.range_mode == RangeMode.YEAR

    def test_result_slices_use_magnitudes_when_net_is_zero(self):
        """Test that slices divide by the summed magnitudes, not the net total."""
        result = ReportResult(
            window_start=date(2024, 3, 1),
            window_end=date(2024, 3, 31),
            by_category={"Salary": 50.0, "Food": -50.0},
            total=0.0,
        )
        assert [s.name for s in result.slices] == ["Salary", "Food"]
        assert [s.percentage for s in result.slices] == [50.0, 50.0]
        assert result.has_data is True


class TestAuditModels:
    """Tests for audit events."""

    def test_storage_error_event(self):
        """Test storage error event."""
        event = AuditEventBuilder.storage_error("transactions", "disk full")
        assert event.event_type == AuditEventType.STORAGE_ERROR
        assert event.severity == AuditSeverity.ERROR
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "storage_error"
        assert log_dict["error_message"] == "disk full"
        assert log_dict["details"]["collection"] == "transactions"

    def test_category_changed_event(self):
        """Test category changed event."""
        added = AuditEventBuilder.category_changed("expense", "Pets", added=True)
        deleted = AuditEventBuilder.category_changed("expense", "Pets", added=False)
        assert added.event_type == AuditEventType.CATEGORY_ADDED
        assert deleted.event_type == AuditEventType.CATEGORY_DELETED


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
