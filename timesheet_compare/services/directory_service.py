"""
Employee directory lookups.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Set
from sqlalchemy.orm import Session

from timesheet_compare.models.employee import Employee


@dataclass(frozen=True)
class DirectoryEntry:
    internal_id: int
    employee_id: str
    display_name: str
    join_date: Optional[date] = None


class DirectoryService:
    """員工名錄查詢服務"""

    def __init__(self, db: Session):
        self.db = db

    def find_employee(self, employee_id: str) -> Optional[DirectoryEntry]:
        """以外部員工編號查找員工，不存在時返回 None"""
        employee = self.db.query(Employee).filter(
            Employee.employee_id == employee_id
        ).first()

        if not employee:
            return None

        return DirectoryEntry(
            internal_id=employee.id,
            employee_id=employee.employee_id,
            display_name=employee.display_name,
            join_date=employee.date_of_joining,
        )

    def existing_ids(self, employee_ids: Iterable[str]) -> Set[str]:
        """批次查詢哪些外部員工編號存在於名錄中"""
        ids = list(employee_ids)
        if not ids:
            return set()

        rows = self.db.query(Employee.employee_id).filter(
            Employee.employee_id.in_(ids)
        ).all()
        return {row[0] for row in rows}
