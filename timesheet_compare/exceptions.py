"""
Domain exceptions raised by the comparison and commit services.
"""


class TimesheetCompareError(Exception):
    """Base exception for reconciliation failures."""


class EmployeeNotFoundError(TimesheetCompareError):
    """Raised when an employee is absent from every source."""

    def __init__(self, employee_id: str, source: str = "any source"):
        self.employee_id = employee_id
        self.source = source
        super().__init__(f"Employee {employee_id} not found in {source}")


class TimesheetNotLoadedError(TimesheetCompareError):
    """Raised when no spreadsheet import exists and nothing can stand in for it."""


class SourceUnavailableError(TimesheetCompareError):
    """Raised when the attendance store cannot be read."""


class InvalidFilterError(TimesheetCompareError):
    """Raised when a comparison filter is malformed."""
