"""
Attendance service layer: turns reviewed days into writes against the attendance store.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from timesheet_compare.config import settings
from timesheet_compare.models.attendance import AttendanceDay, AttendancePeriod
from timesheet_compare.schemas.attendance import BulkDeleteResponse, BulkUpdateResponse, DayUpdate
from timesheet_compare.services.attendance_store import AttendanceStore
from timesheet_compare.services.timesheet_store import TimesheetCache
from timesheet_compare.utils.datetime_utils import day_start_utc, local_to_instant, to_naive_utc
from timesheet_compare.utils.validators import DataValidator, ValidationError, validate_date_format

logger = logging.getLogger(__name__)

class AttendanceService:
    """出勤寫入業務邏輯服務"""

    def __init__(self, db: Session, cache: TimesheetCache = None, store: AttendanceStore = None):
        self.db = db
        self.store = store or AttendanceStore(db)
        self.cache = cache
        self.validator = DataValidator()

    def _resolve_instant(self, day, time_str: Optional[str], label: str) -> Optional[datetime]:
        if not time_str or day is None:
            return None
        instant = local_to_instant(day, time_str)
        if instant is None:
            raise ValidationError(f"Invalid {label} time format: {time_str}", field=f"{label}_time")
        return instant

    def apply_update(self, internal_id: int, update: DayUpdate) -> AttendanceDay:
        """
        將單日更新寫入出勤記錄。

        記錄以列日期的 UTC 午夜為鍵，與上/下班實際落在哪天無關，
        因此跨夜的下班時間仍屬於原本那一天的記錄。

        Args:
            internal_id: 員工內部 ID
            update: 單日更新資料

        Returns:
            寫入後的出勤記錄

        Raises:
            ValidationError: 如果日期或時間格式錯誤
        """
        row_date = self.validator.parse_row_date(update.date)
        check_in_date = self.validator.parse_optional_date(update.check_in_date, update.check_in_time, "check-in")
        check_out_date = self.validator.parse_optional_date(update.check_out_date, update.check_out_time, "check-out")

        check_in = self._resolve_instant(check_in_date, update.check_in_time, "check-in")
        check_out = self._resolve_instant(check_out_date, update.check_out_time, "check-out")

        total_seconds = 0
        if check_in and check_out:
            # 下班早於上班時不寫入負值
            total_seconds = max(0, int((check_out - check_in).total_seconds()))

        existing = self.store.find_one(internal_id, row_date)

        if existing:
            periods = list(existing.periods or [])
            first_period = periods[0] if periods else None
            last_period = periods[-1] if periods else None

            existing.periods = [
                AttendancePeriod(
                    position=0,
                    start_time=to_naive_utc(check_in) if check_in else None,
                    end_time=to_naive_utc(check_out) if check_out else None,
                    checkout_type=(last_period.checkout_type if last_period and last_period.checkout_type
                                   else settings.DEFAULT_CHECKOUT_TYPE),
                    check_in_location=first_period.check_in_location if first_period else None,
                    check_out_location=last_period.check_out_location if last_period else None,
                )
            ]
            existing.total_seconds = total_seconds
            existing.intervals = None
            existing.forgot_to_check_out = False
            record = existing
            action = "Updated"
        else:
            record = AttendanceDay(
                employee_id=internal_id,
                day=day_start_utc(row_date),
                periods=[
                    AttendancePeriod(
                        position=0,
                        start_time=to_naive_utc(check_in) if check_in else None,
                        end_time=to_naive_utc(check_out) if check_out else None,
                        checkout_type=settings.DEFAULT_CHECKOUT_TYPE,
                    )
                ],
                total_seconds=total_seconds,
                is_active=False,
                is_night_work=False,
                forgot_to_check_out=False,
            )
            action = "Created"

        record = self.store.upsert(record)
        logger.info(f"{action} attendance for employee {internal_id} on {update.date} ({total_seconds}s)")
        return record

    def commit_batch(self, internal_id: int, updates: Iterable[DayUpdate]) -> BulkUpdateResponse:
        """
        批次套用更新；每筆獨立處理，單筆失敗不影響其他筆。

        Args:
            internal_id: 員工內部 ID
            updates: 單日更新列表

        Returns:
            成功筆數與錯誤列表
        """
        errors: List[str] = []
        updated_count = 0

        try:
            for update in updates:
                try:
                    self.apply_update(internal_id, update)
                    updated_count += 1
                except ValidationError as e:
                    logger.warning(f"Rejected update for {update.date}: {e.message}")
                    errors.append(e.message)
                except Exception as e:
                    logger.error(f"Error updating {update.date}: {str(e)}")
                    errors.append(f"Failed to update {update.date}")
        finally:
            if self.cache:
                self.cache.invalidate()

        return BulkUpdateResponse(
            success=len(errors) == 0,
            updated_count=updated_count,
            errors=errors,
        )

    def delete_batch(self, internal_id: int, dates: Iterable[str]) -> BulkDeleteResponse:
        """
        批次刪除指定列日期的出勤記錄；記錄不存在時不視為錯誤。

        Args:
            internal_id: 員工內部 ID
            dates: 列日期 (DD/MM/YYYY)

        Returns:
            刪除筆數與錯誤列表
        """
        errors: List[str] = []
        deleted_count = 0

        try:
            for date_str in dates:
                day = validate_date_format(date_str)
                if day is None:
                    errors.append(f"Invalid date format: {date_str}")
                    continue

                try:
                    deleted = self.store.delete(internal_id, day)
                    deleted_count += deleted
                    if deleted:
                        logger.info(f"Deleted attendance for employee {internal_id} on {date_str}")
                except Exception as e:
                    logger.error(f"Error deleting {date_str}: {str(e)}")
                    errors.append(f"Failed to delete {date_str}")
        finally:
            if self.cache:
                self.cache.invalidate()

        return BulkDeleteResponse(
            success=len(errors) == 0,
            deleted_count=deleted_count,
            errors=errors,
        )
