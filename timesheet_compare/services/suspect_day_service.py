"""
Suspect-day markers: reviewer flags for days that need manual follow-up.
"""

import logging
from datetime import date
from typing import Dict, List
from sqlalchemy.orm import Session
from sqlalchemy import func

from timesheet_compare.models.timesheet import SuspectDay

logger = logging.getLogger(__name__)

class SuspectDayService:
    """可疑日標記服務（集合語意，新增與移除皆為冪等）"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, employee_id: str, day: date) -> bool:
        """
        標記可疑日。

        Returns:
            是否新增了記錄（已存在時為 False）
        """
        existing = self.db.query(SuspectDay).filter(
            SuspectDay.employee_id == employee_id,
            SuspectDay.date == day
        ).first()
        if existing:
            return False

        try:
            self.db.add(SuspectDay(employee_id=employee_id, date=day))
            self.db.commit()
            logger.info(f"Marked {day} as suspect for employee {employee_id}")
            return True
        except Exception:
            self.db.rollback()
            raise

    def remove(self, employee_id: str, day: date) -> bool:
        """取消可疑日標記；不存在時不視為錯誤"""
        try:
            removed = self.db.query(SuspectDay).filter(
                SuspectDay.employee_id == employee_id,
                SuspectDay.date == day
            ).delete()
            self.db.commit()
            return removed > 0
        except Exception:
            self.db.rollback()
            raise

    def list_for(self, employee_id: str) -> List[date]:
        rows = self.db.query(SuspectDay.date).filter(
            SuspectDay.employee_id == employee_id
        ).order_by(SuspectDay.date).all()
        return [row[0] for row in rows]

    def counts_by_employee(self) -> Dict[str, int]:
        rows = self.db.query(
            SuspectDay.employee_id,
            func.count(SuspectDay.id)
        ).group_by(SuspectDay.employee_id).all()
        return {employee_id: count for employee_id, count in rows}
