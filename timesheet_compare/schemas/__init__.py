from .timesheet import TimeEntry, EmployeeTimesheet, DateRange, TimesheetImportRequest
from .comparison import (
    DataSource, MissingDirection, ComparisonMode, SpreadsheetDayData, DatabaseDayData,
    Discrepancies, CellSelection, DayComparison, EmployeeInfo, DateBounds,
    ComparisonFilter, ComparisonResponse
)
from .attendance import DayUpdate, BulkUpdateRequest, BulkUpdateResponse, BulkDeleteRequest, BulkDeleteResponse
from .suspect_day import SuspectDayRequest, SuspectDayListResponse

__all__ = [
    "TimeEntry", "EmployeeTimesheet", "DateRange", "TimesheetImportRequest",
    "DataSource", "MissingDirection", "ComparisonMode", "SpreadsheetDayData", "DatabaseDayData",
    "Discrepancies", "CellSelection", "DayComparison", "EmployeeInfo", "DateBounds",
    "ComparisonFilter", "ComparisonResponse",
    "DayUpdate", "BulkUpdateRequest", "BulkUpdateResponse", "BulkDeleteRequest", "BulkDeleteResponse",
    "SuspectDayRequest", "SuspectDayListResponse",
]
