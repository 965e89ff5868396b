"""
Spreadsheet import store with an explicit, caller-owned cache.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set
from sqlalchemy.orm import Session

from timesheet_compare.models.timesheet import TimesheetImport
from timesheet_compare.schemas.timesheet import (
    DateRange, EmployeeListItem, EmployeeTimesheet, TimeEntry, TimesheetImportRequest
)
from timesheet_compare.utils.datetime_utils import parse_date_string

logger = logging.getLogger(__name__)


@dataclass
class TimesheetSnapshot:
    employees: Dict[str, EmployeeTimesheet] = field(default_factory=dict)
    employee_list: List[EmployeeListItem] = field(default_factory=list)
    date_range: Optional[DateRange] = None
    is_loaded: bool = False
    updated_employees: Set[str] = field(default_factory=set)


class TimesheetCache:
    """已解析試算表匯入的快取；每次寫入後必須呼叫 invalidate()"""

    def __init__(self):
        self._snapshot: Optional[TimesheetSnapshot] = None
        self._lock = threading.Lock()

    def get(self, loader: Callable[[], TimesheetSnapshot]) -> TimesheetSnapshot:
        with self._lock:
            if self._snapshot is None:
                self._snapshot = loader()
            return self._snapshot

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None

    @property
    def is_warm(self) -> bool:
        return self._snapshot is not None


def _import_to_snapshot(doc: Optional[TimesheetImport]) -> TimesheetSnapshot:
    if not doc:
        return TimesheetSnapshot()

    employees = {}
    for raw in doc.employees or []:
        employee = EmployeeTimesheet(**raw)
        employees[employee.employee_id] = employee

    date_range = None
    if doc.date_range_start and doc.date_range_end:
        date_range = DateRange(start=doc.date_range_start, end=doc.date_range_end)

    return TimesheetSnapshot(
        employees=employees,
        employee_list=[EmployeeListItem(**item) for item in doc.employee_list or []],
        date_range=date_range,
        is_loaded=bool(doc.is_loaded),
        updated_employees=set(doc.updated_employees or []),
    )


def detect_date_range(employees: List[EmployeeTimesheet]) -> Optional[DateRange]:
    """由所有員工的列日期推算匯入的日期範圍"""
    days = [
        parsed
        for employee in employees
        for parsed in (parse_date_string(entry.date) for entry in employee.entries)
        if parsed is not None
    ]
    if not days:
        return None
    return DateRange(start=min(days).strftime("%d/%m/%Y"), end=max(days).strftime("%d/%m/%Y"))


class TimesheetStore:
    """試算表匯入資料存取服務"""

    IMPORT_KEY = "current"

    def __init__(self, db: Session, cache: TimesheetCache = None):
        self.db = db
        self.cache = cache or TimesheetCache()

    def _get_import(self) -> Optional[TimesheetImport]:
        return self.db.query(TimesheetImport).filter(
            TimesheetImport.import_key == self.IMPORT_KEY
        ).first()

    def snapshot(self) -> TimesheetSnapshot:
        return self.cache.get(lambda: _import_to_snapshot(self._get_import()))

    def is_loaded(self) -> bool:
        return self.snapshot().is_loaded

    def employee(self, employee_id: str) -> Optional[EmployeeTimesheet]:
        return self.snapshot().employees.get(employee_id)

    def entries_for(self, employee_id: str) -> Optional[List[TimeEntry]]:
        """取得員工的每日資料；員工不在匯入中時返回 None"""
        employee = self.employee(employee_id)
        return list(employee.entries) if employee else None

    def detected_date_range(self) -> Optional[DateRange]:
        return self.snapshot().date_range

    def employee_list(self) -> List[EmployeeListItem]:
        return list(self.snapshot().employee_list)

    def updated_employees(self) -> Set[str]:
        return set(self.snapshot().updated_employees)

    def save_import(self, request: TimesheetImportRequest) -> TimesheetImport:
        """
        儲存（取代）目前的試算表匯入。

        Args:
            request: 已解析的員工資料

        Returns:
            儲存後的匯入記錄
        """
        date_range = request.date_range or detect_date_range(request.employees)

        try:
            doc = self._get_import()
            if doc is None:
                doc = TimesheetImport(import_key=self.IMPORT_KEY)
                self.db.add(doc)

            doc.employees = [employee.model_dump() for employee in request.employees]
            doc.employee_list = [
                {"id": employee.employee_id, "name": employee.employee_name}
                for employee in request.employees
            ]
            doc.updated_employees = []
            doc.date_range_start = date_range.start if date_range else None
            doc.date_range_end = date_range.end if date_range else None
            doc.is_loaded = True

            self.db.commit()
            self.db.refresh(doc)

            logger.info(f"Stored timesheet import with {len(request.employees)} employees")
            return doc

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store timesheet import: {str(e)}")
            raise
        finally:
            self.cache.invalidate()

    def mark_employee_updated(self, employee_id: str) -> Set[str]:
        """標記員工已完成審核"""
        try:
            doc = self._get_import()
            if doc is None:
                return set()

            updated = list(doc.updated_employees or [])
            if employee_id not in updated:
                updated.append(employee_id)
                doc.updated_employees = updated
                self.db.commit()

            return set(updated)
        except Exception:
            self.db.rollback()
            raise
        finally:
            self.cache.invalidate()

    def clear(self) -> None:
        """清除目前的試算表匯入"""
        try:
            self.db.query(TimesheetImport).filter(
                TimesheetImport.import_key == self.IMPORT_KEY
            ).delete()
            self.db.commit()
            logger.info("Cleared timesheet import")
        except Exception:
            self.db.rollback()
            raise
        finally:
            self.cache.invalidate()
