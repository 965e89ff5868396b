from __future__ import annotations

from datetime import date, datetime

import pytest

from timesheet_compare.exceptions import (
    EmployeeNotFoundError,
    InvalidFilterError,
    SourceUnavailableError,
    TimesheetNotLoadedError,
)
from timesheet_compare.schemas.comparison import (
    ComparisonFilter,
    ComparisonMode,
    DatabaseDayData,
    DataSource,
    MissingDirection,
    SpreadsheetDayData,
)
from timesheet_compare.services.attendance_store import AttendanceStore
from timesheet_compare.services.comparison_service import (
    ComparisonService,
    align_days,
    detect_discrepancies,
    extract_database_day,
    generate_issues,
    total_issues,
)
from tests.factories import make_entry, make_record


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (date(2026, 1, 1), date(2026, 1, 1), 1),
        (date(2026, 1, 1), date(2026, 1, 31), 31),
        (date(2026, 2, 1), date(2026, 2, 28), 28),
        (date(2025, 12, 30), date(2026, 1, 2), 4),
    ],
)
def test_align_days_yields_one_row_per_day(start, end, expected):
    days = align_days(start, end, None, [])
    assert len(days) == expected
    assert days[0].date == start.strftime("%d/%m/%Y")
    assert days[-1].date == end.strftime("%d/%m/%Y")


def test_align_days_ignores_data_outside_interval():
    entries = [make_entry("15/01/2026", "08:00", "17:00")]
    days = align_days(date(2026, 1, 1), date(2026, 1, 3), entries, [])
    assert len(days) == 3
    assert all(day.spreadsheet.check_in is None for day in days)


def test_empty_day_has_no_issues_and_favors_spreadsheet():
    day = align_days(date(2026, 1, 4), date(2026, 1, 4), [], [])[0]
    assert day.day_name == "Sunday"
    assert day.spreadsheet.check_in is None
    assert day.spreadsheet.check_in_date is None
    assert day.database.first_check_in is None
    assert day.issues == []
    assert day.selection.check_in == DataSource.SPREADSHEET
    assert day.selection.check_out == DataSource.SPREADSHEET


def test_day_present_in_both_sources():
    entries = [make_entry("01/01/2026", "08:00", "17:00", "09:00", "Thursday")]
    # 04:05 and 13:00 UTC are 08:05 and 17:00 in Dubai
    records = [make_record(1, date(2026, 1, 1), datetime(2026, 1, 1, 4, 5), datetime(2026, 1, 1, 13, 0), 32100)]

    day = align_days(date(2026, 1, 1), date(2026, 1, 1), entries, records)[0]

    assert day.day_name == "Thursday"
    assert day.spreadsheet.check_in == "08:00"
    assert day.spreadsheet.check_out_date == "01/01/2026"
    assert day.database.first_check_in == "08:05"
    assert day.database.last_check_out == "17:00"
    assert day.database.total_hours == "08:55"
    assert day.issues == []
    assert day.selection.check_in == DataSource.SPREADSHEET


def test_database_only_day_selects_database():
    records = [make_record(1, date(2026, 1, 2), datetime(2026, 1, 2, 5, 0), datetime(2026, 1, 2, 14, 0), 32400)]
    day = align_days(date(2026, 1, 2), date(2026, 1, 2), None, records)[0]

    assert day.spreadsheet.check_in is None
    assert day.database.first_check_in == "09:00"
    assert day.selection.check_in == DataSource.DATABASE
    assert day.selection.check_out == DataSource.DATABASE


def test_overnight_checkout_date():
    entries = [make_entry("01/01/2026", "23:50", "00:10")]
    day = align_days(date(2026, 1, 1), date(2026, 1, 1), entries, [])[0]
    assert day.spreadsheet.check_in_date == "01/01/2026"
    assert day.spreadsheet.check_out_date == "02/01/2026"


def test_database_view_falls_back_to_legacy_intervals():
    record = make_record(
        1, date(2026, 1, 1),
        intervals=["2026-01-01T04:00:00+00:00", "2026-01-01T08:00:00+00:00", "2026-01-01T12:30:00+00:00"],
    )
    view = extract_database_day(record)
    assert view.first_check_in == "08:00"
    assert view.last_check_out == "16:30"
    assert view.total_hours is None


def test_database_view_with_single_interval_has_no_checkout():
    record = make_record(1, date(2026, 1, 1), intervals=["2026-01-01T04:00:00+00:00"])
    view = extract_database_day(record)
    assert view.first_check_in == "08:00"
    assert view.last_check_out is None


@pytest.mark.parametrize(
    "net, expected",
    [("03:30", True), ("03:00", True), ("04:00", False), ("02:59", False), ("00:00", False), (None, False)],
)
def test_low_hours_band(net, expected):
    discrepancies = detect_discrepancies(
        SpreadsheetDayData(check_in="08:00", check_out="11:30", net_work_hours=net),
        DatabaseDayData(),
        MissingDirection.SPREADSHEET_MISSING,
    )
    assert discrepancies.low_hours is expected


def test_missing_detection_spreadsheet_direction():
    spreadsheet = SpreadsheetDayData(check_in=None, check_out="17:00")
    database = DatabaseDayData(first_check_in="08:00", last_check_out="17:00")
    discrepancies = detect_discrepancies(spreadsheet, database, MissingDirection.SPREADSHEET_MISSING)
    assert discrepancies.check_in_missing is True
    assert discrepancies.check_out_missing is False


def test_missing_detection_database_direction():
    spreadsheet = SpreadsheetDayData(check_in="08:00", check_out="17:00")
    database = DatabaseDayData(first_check_in="08:00")
    discrepancies = detect_discrepancies(spreadsheet, database, MissingDirection.DATABASE_MISSING)
    assert discrepancies.check_in_missing is False
    assert discrepancies.check_out_missing is True

    reverse = detect_discrepancies(spreadsheet, database, MissingDirection.SPREADSHEET_MISSING)
    assert reverse.check_out_missing is False


def test_issue_order_is_fixed():
    spreadsheet = SpreadsheetDayData(net_work_hours="03:15")
    database = DatabaseDayData(first_check_in="08:00", last_check_out="11:15")
    direction = MissingDirection.SPREADSHEET_MISSING
    issues = generate_issues(detect_discrepancies(spreadsheet, database, direction), direction)

    assert issues == [
        "Missing 1 IN - database has check-in record",
        "Missing 2 OUT - database has check-out record",
        "Net work hours between 3-4 hours - verify with database",
    ]


def test_total_issues_sums_days():
    entries = [
        make_entry("01/01/2026", "08:00", "11:30", "03:30"),
        make_entry("02/01/2026", None, None, "03:45"),
    ]
    records = [make_record(1, date(2026, 1, 2), datetime(2026, 1, 2, 4, 0), datetime(2026, 1, 2, 7, 45), 13500)]
    days = align_days(date(2026, 1, 1), date(2026, 1, 3), entries, records, MissingDirection.SPREADSHEET_MISSING)
    assert [len(day.issues) for day in days] == [1, 3, 0]
    assert total_issues(days) == 4


class TestComparisonService:
    def test_not_loaded_and_unknown_employee(self, db, cache):
        with pytest.raises(TimesheetNotLoadedError):
            ComparisonService(db, cache).get_comparison("E100")

    def test_unknown_employee_with_loaded_timesheet(self, db, cache, loaded_timesheet):
        with pytest.raises(EmployeeNotFoundError):
            ComparisonService(db, cache).get_comparison("E999")

    def test_database_only_employee_without_import(self, db, cache, employee):
        db.add(make_record(employee.id, date(2026, 1, 5), datetime(2026, 1, 5, 4, 0), datetime(2026, 1, 5, 13, 0), 32400))
        db.commit()

        result = ComparisonService(db, cache).get_comparison(
            "E100",
            ComparisonFilter(mode=ComparisonMode.MONTH, month="2026-01"),
            today=date(2026, 10, 18),
        )

        assert result.employee.name == "Amina Rahman"
        assert len(result.days) == 31
        assert result.days[4].database.first_check_in == "08:00"
        assert result.days[4].selection.check_in == DataSource.DATABASE

    def test_range_mode_combines_sources(self, db, cache, employee, loaded_timesheet):
        db.add(make_record(employee.id, date(2026, 1, 3), datetime(2026, 1, 3, 4, 0), datetime(2026, 1, 3, 13, 0), 32400))
        db.commit()

        result = ComparisonService(db, cache, MissingDirection.SPREADSHEET_MISSING).get_comparison(
            "E100",
            ComparisonFilter(mode=ComparisonMode.RANGE, start_date="01/01/2026", end_date="07/01/2026"),
            today=date(2026, 10, 18),
        )

        assert [day.date for day in result.days][:3] == ["01/01/2026", "02/01/2026", "03/01/2026"]
        assert len(result.days) == 7
        assert result.days[1].spreadsheet.check_out_date == "03/01/2026"
        assert result.days[2].issues[0] == "Missing 1 IN - database has check-in record"
        assert result.total_issues == 2
        assert result.filter.start_date == "01/01/2026"
        assert result.database_available is True

    def test_date_bounds_prefer_join_date(self, db, cache, employee, loaded_timesheet):
        result = ComparisonService(db, cache).get_comparison(
            "E100", ComparisonFilter(mode=ComparisonMode.ALL), today=date(2026, 1, 10)
        )
        assert result.date_bounds.earliest == "01/12/2025"
        assert result.date_bounds.latest == "10/01/2026"
        assert len(result.days) == 41

    def test_date_bounds_spreadsheet_only_employee(self, db, cache, loaded_timesheet):
        result = ComparisonService(db, cache).get_comparison(
            "E200", ComparisonFilter(mode=ComparisonMode.ALL), today=date(2026, 10, 18)
        )
        assert result.date_bounds.earliest == "01/01/2026"
        assert result.date_bounds.latest == "05/01/2026"
        assert len(result.days) == 5
        assert result.employee.internal_id is None

    def test_date_bounds_fall_back_to_earliest_record(self, db, cache):
        from timesheet_compare.models import Employee

        employee = Employee(employee_id="E300", first_name="Lina", last_name="Saleh")
        db.add(employee)
        db.commit()
        db.add(make_record(employee.id, date(2026, 9, 20), datetime(2026, 9, 20, 4, 0), None))
        db.commit()

        result = ComparisonService(db, cache).get_comparison(
            "E300", ComparisonFilter(mode=ComparisonMode.ALL), today=date(2026, 10, 18)
        )
        assert result.date_bounds.earliest == "20/09/2026"

    def test_month_defaults_to_latest_month(self, db, cache, employee):
        result = ComparisonService(db, cache).get_comparison("E100", today=date(2026, 2, 10))
        assert result.filter.month == "2026-02"
        # clamped to today
        assert len(result.days) == 10

    def test_invalid_filters(self, db, cache, employee):
        service = ComparisonService(db, cache)
        with pytest.raises(InvalidFilterError):
            service.get_comparison("E100", ComparisonFilter(mode=ComparisonMode.MONTH, month="02/2026"))
        with pytest.raises(InvalidFilterError):
            service.get_comparison("E100", ComparisonFilter(mode=ComparisonMode.RANGE, start_date="01/01/2026"))
        with pytest.raises(InvalidFilterError):
            service.get_comparison(
                "E100",
                ComparisonFilter(mode=ComparisonMode.RANGE, start_date="05/01/2026", end_date="01/01/2026"),
            )

    def test_store_failure_degrades_to_spreadsheet_view(self, db, cache, employee, loaded_timesheet, monkeypatch):
        def unavailable(self, *args, **kwargs):
            raise SourceUnavailableError("connection refused")

        monkeypatch.setattr(AttendanceStore, "records_for", unavailable)

        result = ComparisonService(db, cache).get_comparison(
            "E100",
            ComparisonFilter(mode=ComparisonMode.RANGE, start_date="01/01/2026", end_date="03/01/2026"),
            today=date(2026, 10, 18),
        )

        assert result.database_available is False
        assert result.days[0].spreadsheet.check_in == "08:00"
        assert result.days[0].database.first_check_in is None
