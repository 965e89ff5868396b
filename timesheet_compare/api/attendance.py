"""
Attendance write API routes: bulk update and bulk delete of reviewed days.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timesheet_compare.api.deps import get_timesheet_cache
from timesheet_compare.database import get_db
from timesheet_compare.schemas.attendance import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkUpdateRequest,
    BulkUpdateResponse
)
from timesheet_compare.services.attendance_service import AttendanceService
from timesheet_compare.services.directory_service import DirectoryService
from timesheet_compare.services.timesheet_store import TimesheetCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["attendance"])

def _require_employee(db: Session, employee_id: str):
    employee = DirectoryService(db).find_employee(employee_id)
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found in database"
        )
    return employee

@router.post("/{employee_id}/bulk", response_model=BulkUpdateResponse, summary="批次更新出勤記錄")
def bulk_update_attendance(
    employee_id: str,
    request: BulkUpdateRequest,
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """
    批次寫入審核後的上/下班時間。

    - 每一天取代為單一時段，重送相同批次結果不變
    - 單筆錯誤記錄於 errors，不中斷整批
    """
    try:
        employee = _require_employee(db, employee_id)

        attendance_service = AttendanceService(db, cache)
        result = attendance_service.commit_batch(employee.internal_id, request.updates)

        logger.info(
            f"Bulk update for {employee_id}: {result.updated_count} updated, {len(result.errors)} errors"
        )
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Bulk update error for {employee_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process bulk update"
        )

@router.delete("/{employee_id}/delete", response_model=BulkDeleteResponse, summary="批次刪除出勤記錄")
def bulk_delete_attendance(
    employee_id: str,
    request: BulkDeleteRequest,
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """
    刪除指定列日期的出勤記錄。

    - 記錄不存在時不視為錯誤
    """
    try:
        if not request.dates:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid request body. Expected { dates: [...] }"
            )

        employee = _require_employee(db, employee_id)

        attendance_service = AttendanceService(db, cache)
        result = attendance_service.delete_batch(employee.internal_id, request.dates)

        logger.info(
            f"Bulk delete for {employee_id}: {result.deleted_count} deleted, {len(result.errors)} errors"
        )
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Bulk delete error for {employee_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process bulk delete"
        )
