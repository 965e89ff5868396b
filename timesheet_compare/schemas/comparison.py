from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum

class DataSource(str, Enum):
    SPREADSHEET = "spreadsheet"
    DATABASE = "database"

class MissingDirection(str, Enum):
    SPREADSHEET_MISSING = "spreadsheet_missing"  # 試算表缺值、資料庫有值
    DATABASE_MISSING = "database_missing"  # 試算表有值、資料庫缺值

class ComparisonMode(str, Enum):
    MONTH = "month"
    RANGE = "range"
    ALL = "all"

class SpreadsheetDayData(BaseModel):
    check_in: Optional[str] = None
    check_in_date: Optional[str] = None
    check_out: Optional[str] = None
    check_out_date: Optional[str] = None  # 跨夜時為隔天
    net_work_hours: Optional[str] = None

    @property
    def has_time(self) -> bool:
        return bool(self.check_in or self.check_out)

class DatabaseDayData(BaseModel):
    first_check_in: Optional[str] = None
    first_check_in_date: Optional[str] = None
    last_check_out: Optional[str] = None
    last_check_out_date: Optional[str] = None
    total_hours: Optional[str] = None

class Discrepancies(BaseModel):
    check_in_missing: bool = False
    check_out_missing: bool = False
    low_hours: bool = False

class CellSelection(BaseModel):
    check_in: DataSource = DataSource.SPREADSHEET
    check_out: DataSource = DataSource.SPREADSHEET

class DayComparison(BaseModel):
    date: str  # DD/MM/YYYY
    day_name: str
    spreadsheet: SpreadsheetDayData = Field(default_factory=SpreadsheetDayData)
    database: DatabaseDayData = Field(default_factory=DatabaseDayData)
    discrepancies: Discrepancies = Field(default_factory=Discrepancies)
    issues: List[str] = Field(default_factory=list)
    selection: CellSelection = Field(default_factory=CellSelection)

class EmployeeInfo(BaseModel):
    id: str
    name: str
    company: str = ""
    internal_id: Optional[int] = None
    join_date: Optional[str] = None

class DateBounds(BaseModel):
    earliest: str  # DD/MM/YYYY
    latest: str

class ComparisonFilter(BaseModel):
    mode: ComparisonMode = ComparisonMode.MONTH
    month: Optional[str] = None  # YYYY-MM
    start_date: Optional[str] = None  # DD/MM/YYYY
    end_date: Optional[str] = None

class ComparisonResponse(BaseModel):
    employee: EmployeeInfo
    date_bounds: DateBounds
    filter: ComparisonFilter
    days: List[DayComparison]
    total_issues: int
    suspect_days: List[str] = Field(default_factory=list)
    database_available: bool = True
