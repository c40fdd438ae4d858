"""Tests for services.session_service."""

from datetime import date
from decimal import Decimal

import pytest

from utils.errors import StoreError


class TestSessionStart:
    """Tests for SessionService.start."""

    def test_registers_user_and_catches_up(self, session_service, recurring_service, store) -> None:
        recurring_service.add_definition("alice", "Rent", "15000", "monthly", date(2024, 1, 1))

        inserted = session_service.start("alice", today=date(2024, 3, 15))

        assert inserted == 3
        assert store.users == ["alice"]
        assert sorted(e.date.date() for e in store.expenses) == [
            date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1),
        ]
        assert all(e.amount == Decimal("15000.00") for e in store.expenses)

    def test_second_start_inserts_nothing(self, session_service, recurring_service, store) -> None:
        recurring_service.add_definition("alice", "Rent", "15000", "monthly", date(2024, 1, 1))
        session_service.start("alice", today=date(2024, 3, 15))

        assert session_service.start("alice", today=date(2024, 3, 15)) == 0
        assert store.users == ["alice"]
        assert len(store.expenses) == 3

    def test_new_user_without_definitions(self, session_service, store) -> None:
        assert session_service.start("carol", today=date(2024, 3, 15)) == 0
        assert store.users == ["carol"]

    def test_store_failure_propagates(self, session_service, recurring_repo, monkeypatch) -> None:
        def unavailable(owner):
            raise StoreError("database unavailable")

        monkeypatch.setattr(recurring_repo, "get_all", unavailable)

        with pytest.raises(StoreError):
            session_service.start("alice", today=date(2024, 3, 15))
