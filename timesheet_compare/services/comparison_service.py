"""
Comparison service: aligns spreadsheet entries with attendance records day by day
and flags discrepancies for review.
"""

import calendar
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session

from timesheet_compare.config import settings
from timesheet_compare.exceptions import (
    EmployeeNotFoundError, InvalidFilterError, SourceUnavailableError, TimesheetNotLoadedError
)
from timesheet_compare.models.attendance import AttendanceDay
from timesheet_compare.schemas.comparison import (
    CellSelection, ComparisonFilter, ComparisonMode, ComparisonResponse, DatabaseDayData,
    DataSource, DateBounds, DayComparison, Discrepancies, EmployeeInfo, MissingDirection,
    SpreadsheetDayData
)
from timesheet_compare.schemas.timesheet import TimeEntry
from timesheet_compare.services.attendance_store import AttendanceStore
from timesheet_compare.services.directory_service import DirectoryEntry, DirectoryService
from timesheet_compare.services.suspect_day_service import SuspectDayService
from timesheet_compare.services.timesheet_store import TimesheetCache, TimesheetStore
from timesheet_compare.utils.datetime_utils import (
    detect_checkout_date, format_date_string, get_today, hhmm_to_hours, instant_to_local,
    iter_days, parse_date_string, parse_month_string, record_calendar_date, seconds_to_hhmm
)

logger = logging.getLogger(__name__)

ISSUE_MESSAGES = {
    MissingDirection.SPREADSHEET_MISSING: (
        "Missing 1 IN - database has check-in record",
        "Missing 2 OUT - database has check-out record",
    ),
    MissingDirection.DATABASE_MISSING: (
        "Missing check-in in database - spreadsheet has 1 IN",
        "Missing check-out in database - spreadsheet has 2 OUT",
    ),
}
LOW_HOURS_MESSAGE = "Net work hours between {low:g}-{high:g} hours - verify with database"


def get_missing_direction(value: Optional[str] = None) -> MissingDirection:
    return MissingDirection(value or settings.MISSING_DETECTION_DIRECTION)


def extract_spreadsheet_day(entry: Optional[TimeEntry]) -> SpreadsheetDayData:
    """取出試算表單日的上班 (1 IN) 與下班 (2 OUT)，並偵測跨夜下班日期"""
    if entry is None:
        return SpreadsheetDayData()

    return SpreadsheetDayData(
        check_in=entry.in1,
        check_in_date=entry.date,
        check_out=entry.out2,
        check_out_date=detect_checkout_date(entry.date, entry.in1, entry.out2),
        net_work_hours=entry.net_work_hours,
    )


def extract_database_day(record: Optional[AttendanceDay]) -> DatabaseDayData:
    """
    取出資料庫記錄的第一次上班與最後一次下班（轉為參考時區）。

    先看 periods，再退回舊版 intervals 欄位。
    """
    if record is None:
        return DatabaseDayData()

    first_check_in = first_check_in_date = None
    last_check_out = last_check_out_date = None

    periods = list(record.periods or [])
    if periods:
        start = instant_to_local(periods[0].start_time)
        if start:
            first_check_in, first_check_in_date = start
        end = instant_to_local(periods[-1].end_time)
        if end:
            last_check_out, last_check_out_date = end

    intervals = record.intervals or []
    if not first_check_in and intervals:
        start = instant_to_local(intervals[0])
        if start:
            first_check_in, first_check_in_date = start

    if not last_check_out and len(intervals) > 1:
        end = instant_to_local(intervals[-1])
        if end:
            last_check_out, last_check_out_date = end

    total_seconds = record.total_seconds or 0

    return DatabaseDayData(
        first_check_in=first_check_in,
        first_check_in_date=first_check_in_date,
        last_check_out=last_check_out,
        last_check_out_date=last_check_out_date,
        total_hours=seconds_to_hhmm(total_seconds) if total_seconds > 0 else None,
    )


def detect_discrepancies(
    spreadsheet: SpreadsheetDayData,
    database: DatabaseDayData,
    direction: MissingDirection = None,
    low_hours_min: float = None,
    low_hours_max: float = None,
) -> Discrepancies:
    """
    比對單日兩來源的差異。

    Args:
        spreadsheet: 試算表資料
        database: 資料庫資料
        direction: 缺值檢測方向（預設取自設定）
        low_hours_min: 低工時下限（含）
        low_hours_max: 低工時上限（不含）
    """
    direction = direction or get_missing_direction()
    low_min = settings.LOW_HOURS_MIN if low_hours_min is None else low_hours_min
    low_max = settings.LOW_HOURS_MAX if low_hours_max is None else low_hours_max

    if direction == MissingDirection.SPREADSHEET_MISSING:
        check_in_missing = not spreadsheet.check_in and bool(database.first_check_in)
        check_out_missing = not spreadsheet.check_out and bool(database.last_check_out)
    else:
        check_in_missing = bool(spreadsheet.check_in) and not database.first_check_in
        check_out_missing = bool(spreadsheet.check_out) and not database.last_check_out

    low_hours = False
    if spreadsheet.net_work_hours:
        hours = hhmm_to_hours(spreadsheet.net_work_hours)
        low_hours = hours > 0 and low_min <= hours < low_max

    return Discrepancies(
        check_in_missing=check_in_missing,
        check_out_missing=check_out_missing,
        low_hours=low_hours,
    )


def generate_issues(
    discrepancies: Discrepancies,
    direction: MissingDirection = None,
    low_hours_min: float = None,
    low_hours_max: float = None,
) -> List[str]:
    """將差異轉為固定順序的問題描述：上班、下班、低工時"""
    direction = direction or get_missing_direction()
    check_in_message, check_out_message = ISSUE_MESSAGES[direction]

    issues = []
    if discrepancies.check_in_missing:
        issues.append(check_in_message)
    if discrepancies.check_out_missing:
        issues.append(check_out_message)
    if discrepancies.low_hours:
        issues.append(LOW_HOURS_MESSAGE.format(
            low=settings.LOW_HOURS_MIN if low_hours_min is None else low_hours_min,
            high=settings.LOW_HOURS_MAX if low_hours_max is None else low_hours_max,
        ))
    return issues


def default_selection(spreadsheet: SpreadsheetDayData, database: DatabaseDayData) -> CellSelection:
    """試算表當日有任何時間值時採用試算表，否則在資料庫有值時採用資料庫"""
    if spreadsheet.has_time:
        return CellSelection(check_in=DataSource.SPREADSHEET, check_out=DataSource.SPREADSHEET)
    if database.first_check_in or database.last_check_out:
        return CellSelection(check_in=DataSource.DATABASE, check_out=DataSource.DATABASE)
    return CellSelection()


def build_day_comparison(
    day: date,
    entry: Optional[TimeEntry],
    record: Optional[AttendanceDay],
    direction: MissingDirection = None,
) -> DayComparison:
    spreadsheet = extract_spreadsheet_day(entry)
    database = extract_database_day(record)
    discrepancies = detect_discrepancies(spreadsheet, database, direction)

    return DayComparison(
        date=format_date_string(day),
        day_name=(entry.day if entry and entry.day else calendar.day_name[day.weekday()]),
        spreadsheet=spreadsheet,
        database=database,
        discrepancies=discrepancies,
        issues=generate_issues(discrepancies, direction),
        selection=default_selection(spreadsheet, database),
    )


def index_entries(entries: Optional[Iterable[TimeEntry]]) -> Dict[date, TimeEntry]:
    indexed = {}
    for entry in entries or []:
        parsed = parse_date_string(entry.date)
        if parsed is None:
            logger.warning(f"Skipping spreadsheet entry with invalid date: {entry.date}")
            continue
        indexed[parsed] = entry
    return indexed


def index_records(records: Optional[Iterable[AttendanceDay]]) -> Dict[date, AttendanceDay]:
    return {record_calendar_date(record.day): record for record in records or []}


def align_days(
    start_date: date,
    end_date: date,
    entries: Optional[Iterable[TimeEntry]],
    records: Optional[Iterable[AttendanceDay]],
    direction: MissingDirection = None,
) -> List[DayComparison]:
    """
    為閉區間內的每一天產生一筆比對結果，依日期升冪。

    Args:
        start_date: 開始日期
        end_date: 結束日期
        entries: 試算表每日資料（可為 None）
        records: 資料庫出勤記錄（可為空）

    Returns:
        每天恰好一筆的 DayComparison 列表
    """
    entries_by_day = index_entries(entries)
    records_by_day = index_records(records)

    return [
        build_day_comparison(day, entries_by_day.get(day), records_by_day.get(day), direction)
        for day in iter_days(start_date, end_date)
    ]


def total_issues(days: Iterable[DayComparison]) -> int:
    return sum(len(day.issues) for day in days)


class ComparisonService:
    """比對業務邏輯服務"""

    def __init__(
        self,
        db: Session,
        cache: TimesheetCache = None,
        direction: MissingDirection = None,
    ):
        self.db = db
        self.timesheets = TimesheetStore(db, cache)
        self.directory = DirectoryService(db)
        self.attendance = AttendanceStore(db)
        self.suspect_days = SuspectDayService(db)
        self.direction = direction or get_missing_direction()

    def get_date_bounds(
        self,
        employee: Optional[DirectoryEntry],
        spreadsheet_bounded: bool,
        today: date = None,
    ) -> DateBounds:
        """
        計算可瀏覽的日期範圍。

        最早日期依序取：到職日、試算表起始日、資料庫最早記錄、今天。
        最晚日期為今天；僅存在於試算表的員工則為試算表結束日。
        """
        today = today or get_today()
        date_range = self.timesheets.detected_date_range()
        range_start = parse_date_string(date_range.start) if date_range else None
        range_end = parse_date_string(date_range.end) if date_range else None

        earliest = employee.join_date if employee else None
        if earliest is None:
            earliest = range_start
        if earliest is None and employee:
            try:
                earliest = self.attendance.earliest_day(employee.internal_id)
            except SourceUnavailableError:
                earliest = None
        if earliest is None:
            earliest = today

        latest = today
        if spreadsheet_bounded and range_end:
            latest = range_end

        return DateBounds(
            earliest=format_date_string(min(earliest, latest)),
            latest=format_date_string(latest),
        )

    def resolve_interval(
        self,
        comparison_filter: ComparisonFilter,
        bounds: DateBounds,
    ) -> Tuple[date, date, ComparisonFilter]:
        """
        將篩選條件轉為日期區間並限制在範圍內。

        Raises:
            InvalidFilterError: 篩選條件格式錯誤
        """
        earliest = parse_date_string(bounds.earliest)
        latest = parse_date_string(bounds.latest)

        if comparison_filter.mode == ComparisonMode.ALL:
            start_date, end_date = earliest, latest
            echo = ComparisonFilter(mode=ComparisonMode.ALL)

        elif comparison_filter.mode == ComparisonMode.RANGE:
            start_date = parse_date_string(comparison_filter.start_date)
            end_date = parse_date_string(comparison_filter.end_date)
            if start_date is None or end_date is None:
                raise InvalidFilterError("Range mode requires start_date and end_date in DD/MM/YYYY format")
            if start_date > end_date:
                raise InvalidFilterError("start_date must not be after end_date")
            echo = ComparisonFilter(
                mode=ComparisonMode.RANGE,
                start_date=format_date_string(start_date),
                end_date=format_date_string(end_date),
            )

        else:
            month = comparison_filter.month or latest.strftime("%Y-%m")
            month_range = parse_month_string(month)
            if month_range is None:
                raise InvalidFilterError(f"Invalid month format: {month}")
            start_date, end_date = month_range
            echo = ComparisonFilter(mode=ComparisonMode.MONTH, month=month)

        return max(start_date, earliest), min(end_date, latest), echo

    def get_comparison(
        self,
        employee_id: str,
        comparison_filter: ComparisonFilter = None,
        today: date = None,
    ) -> ComparisonResponse:
        """
        產生員工在指定區間的逐日比對。

        Args:
            employee_id: 外部員工編號
            comparison_filter: 篩選條件（月份、區間或全部）
            today: 今天日期（可選，測試用）

        Returns:
            比對結果

        Raises:
            TimesheetNotLoadedError: 尚未匯入試算表且資料庫無此員工
            EmployeeNotFoundError: 兩個來源都找不到員工
            InvalidFilterError: 篩選條件錯誤
        """
        comparison_filter = comparison_filter or ComparisonFilter()

        loaded = self.timesheets.is_loaded()
        sheet_employee = self.timesheets.employee(employee_id) if loaded else None
        directory_entry = self.directory.find_employee(employee_id)

        if not loaded and directory_entry is None:
            raise TimesheetNotLoadedError("Timesheet not loaded. Please import a file first.")
        if sheet_employee is None and directory_entry is None:
            raise EmployeeNotFoundError(employee_id)

        bounds = self.get_date_bounds(
            directory_entry,
            spreadsheet_bounded=directory_entry is None,
            today=today,
        )
        start_date, end_date, echo = self.resolve_interval(comparison_filter, bounds)

        records = []
        database_available = True
        if directory_entry and start_date <= end_date:
            try:
                records = self.attendance.records_for(directory_entry.internal_id, start_date, end_date)
            except SourceUnavailableError as e:
                logger.warning(f"Attendance store unavailable, showing spreadsheet only for {employee_id}: {e}")
                database_available = False

        entries = sheet_employee.entries if sheet_employee else None
        days = align_days(start_date, end_date, entries, records, self.direction) if start_date <= end_date else []

        employee = EmployeeInfo(
            id=employee_id,
            name=sheet_employee.employee_name if sheet_employee else directory_entry.display_name,
            company=sheet_employee.company if sheet_employee else "",
            internal_id=directory_entry.internal_id if directory_entry else None,
            join_date=format_date_string(directory_entry.join_date) if directory_entry and directory_entry.join_date else None,
        )

        return ComparisonResponse(
            employee=employee,
            date_bounds=bounds,
            filter=echo,
            days=days,
            total_issues=total_issues(days),
            suspect_days=[format_date_string(d) for d in self.suspect_days.list_for(employee_id)],
            database_available=database_available,
        )
