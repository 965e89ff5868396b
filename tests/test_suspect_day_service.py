from __future__ import annotations

from datetime import date

from timesheet_compare.services.suspect_day_service import SuspectDayService


def test_add_is_idempotent(db):
    service = SuspectDayService(db)
    assert service.add("E100", date(2026, 1, 3)) is True
    assert service.add("E100", date(2026, 1, 3)) is False
    assert service.list_for("E100") == [date(2026, 1, 3)]


def test_list_is_sorted_and_scoped(db):
    service = SuspectDayService(db)
    service.add("E100", date(2026, 1, 9))
    service.add("E100", date(2026, 1, 2))
    service.add("E200", date(2026, 1, 5))

    assert service.list_for("E100") == [date(2026, 1, 2), date(2026, 1, 9)]
    assert service.list_for("E999") == []


def test_remove_missing_marker(db):
    service = SuspectDayService(db)
    service.add("E100", date(2026, 1, 2))

    assert service.remove("E100", date(2026, 1, 2)) is True
    assert service.remove("E100", date(2026, 1, 2)) is False
    assert service.list_for("E100") == []


def test_counts_by_employee(db):
    service = SuspectDayService(db)
    service.add("E100", date(2026, 1, 2))
    service.add("E100", date(2026, 1, 3))
    service.add("E200", date(2026, 1, 5))

    assert service.counts_by_employee() == {"E100": 2, "E200": 1}
