from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime

from timesheet_compare.utils.datetime_utils import format_time_value

class TimeEntry(BaseModel):
    """試算表中單一員工的單日資料（時間皆為參考時區 HH:mm）"""
    date: str  # DD/MM/YYYY
    day: str = ""
    in1: Optional[str] = None
    out2: Optional[str] = None
    in3: Optional[str] = None
    out4: Optional[str] = None
    in5: Optional[str] = None
    out6: Optional[str] = None
    last_in: Optional[str] = None
    last_out: Optional[str] = None
    net_work_hours: Optional[str] = None
    less_work: Optional[str] = None
    auth_ot: Optional[str] = None
    site: Optional[str] = None
    remarks: Optional[str] = None

    @field_validator(
        "in1", "out2", "in3", "out4", "in5", "out6", "last_in", "last_out",
        "net_work_hours", "less_work", "auth_ot",
        mode="before"
    )
    @classmethod
    def decode_time_cell(cls, value):
        """接受試算表原始的日分數數值，轉為 HH:mm"""
        return format_time_value(value)

    class Config:
        frozen = True

class EmployeeTimesheet(BaseModel):
    employee_id: str
    employee_name: str
    company: str = ""
    entries: List[TimeEntry] = Field(default_factory=list)
    total_hours: Optional[str] = None
    summary_stats: Optional[str] = None

class DateRange(BaseModel):
    start: str  # DD/MM/YYYY
    end: str

class EmployeeListItem(BaseModel):
    id: str
    name: str

class TimesheetImportRequest(BaseModel):
    employees: List[EmployeeTimesheet]
    date_range: Optional[DateRange] = None

class TimesheetImportResponse(BaseModel):
    success: bool
    employee_count: int
    date_range: Optional[DateRange] = None
    imported_at: datetime

class EmployeeSummary(BaseModel):
    id: str
    name: str
    updated: bool = False
    suspect_days: int = 0

class EmployeeListResponse(BaseModel):
    employees: List[EmployeeSummary]
    date_range: Optional[DateRange] = None
    count: int

class MarkUpdatedResponse(BaseModel):
    success: bool
    employee_id: str
    updated_employees: List[str]

class EmployeeValidationResponse(BaseModel):
    employees: List[EmployeeListItem]
    date_range: Optional[DateRange] = None
    count: int
    total_in_spreadsheet: int
    filtered_count: int
    updated_employees: List[str]
    suspect_days_counts: Dict[str, int]
