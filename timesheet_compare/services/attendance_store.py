"""
Attendance store: per-day attendance records keyed by (employee, calendar day).
"""

import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func

from timesheet_compare.models.attendance import AttendanceDay
from timesheet_compare.exceptions import SourceUnavailableError
from timesheet_compare.utils.datetime_utils import day_start_utc, day_end_utc, record_calendar_date

logger = logging.getLogger(__name__)

class AttendanceStore:
    """出勤記錄存取層"""

    def __init__(self, db: Session):
        self.db = db

    def records_for(self, internal_id: int, start_date: date, end_date: date) -> List[AttendanceDay]:
        """
        取得員工指定日期範圍內的出勤記錄。

        Args:
            internal_id: 員工內部 ID
            start_date: 開始日期
            end_date: 結束日期

        Returns:
            依 day 升冪排序的記錄

        Raises:
            SourceUnavailableError: 如果資料庫無法讀取
        """
        try:
            return self.db.query(AttendanceDay).filter(
                AttendanceDay.employee_id == internal_id,
                AttendanceDay.day >= day_start_utc(start_date),
                AttendanceDay.day <= day_end_utc(end_date)
            ).order_by(AttendanceDay.day).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read attendance for employee {internal_id}: {e}")
            raise SourceUnavailableError(str(e)) from e

    def earliest_day(self, internal_id: int) -> Optional[date]:
        """取得員工最早一筆出勤記錄的日期"""
        try:
            earliest = self.db.query(func.min(AttendanceDay.day)).filter(
                AttendanceDay.employee_id == internal_id
            ).scalar()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read earliest attendance for employee {internal_id}: {e}")
            raise SourceUnavailableError(str(e)) from e
        return record_calendar_date(earliest) if earliest else None

    def find_one(self, internal_id: int, day: date) -> Optional[AttendanceDay]:
        """以 (員工, 日曆日) 查找單筆記錄"""
        return self.db.query(AttendanceDay).filter(
            AttendanceDay.employee_id == internal_id,
            AttendanceDay.day >= day_start_utc(day),
            AttendanceDay.day <= day_end_utc(day)
        ).first()

    def upsert(self, record: AttendanceDay) -> AttendanceDay:
        """新增或整筆取代出勤記錄"""
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
            return record
        except Exception:
            self.db.rollback()
            raise

    def delete(self, internal_id: int, day: date) -> int:
        """
        刪除 (員工, 日曆日) 對應的記錄。

        Returns:
            刪除筆數；記錄不存在時為 0
        """
        try:
            record = self.find_one(internal_id, day)
            if not record:
                return 0
            self.db.delete(record)
            self.db.commit()
            return 1
        except Exception:
            self.db.rollback()
            raise
