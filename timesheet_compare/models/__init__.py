from .employee import Employee
from .attendance import AttendanceDay, AttendancePeriod
from .timesheet import TimesheetImport, SuspectDay

__all__ = ["Employee", "AttendanceDay", "AttendancePeriod", "TimesheetImport", "SuspectDay"]
