"""
Timesheet import API routes: store a parsed spreadsheet import and list its employees.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timesheet_compare.api.deps import get_timesheet_cache
from timesheet_compare.database import get_db
from timesheet_compare.schemas.timesheet import (
    EmployeeListResponse,
    EmployeeSummary,
    EmployeeValidationResponse,
    MarkUpdatedResponse,
    TimesheetImportRequest,
    TimesheetImportResponse
)
from timesheet_compare.services.directory_service import DirectoryService
from timesheet_compare.services.suspect_day_service import SuspectDayService
from timesheet_compare.services.timesheet_store import TimesheetCache, TimesheetStore
from timesheet_compare.utils.datetime_utils import utc_now
from timesheet_compare.utils.validators import validate_employee_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["timesheets"])

@router.post("/timesheets/import", response_model=TimesheetImportResponse, summary="匯入已解析的試算表")
def import_timesheet(
    request: TimesheetImportRequest,
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """
    儲存已解析的試算表資料，取代先前的匯入。

    - 未提供日期範圍時由列日期推算
    """
    try:
        if not request.employees:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No employees found in import"
            )

        store = TimesheetStore(db, cache)
        doc = store.save_import(request)
        date_range = store.detected_date_range()

        return TimesheetImportResponse(
            success=True,
            employee_count=len(request.employees),
            date_range=date_range,
            imported_at=doc.updated_at or utc_now()
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Timesheet import error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store timesheet import"
        )

@router.delete("/timesheets/import", response_model=dict, summary="清除試算表匯入")
def clear_timesheet(
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """清除目前的試算表匯入"""
    try:
        TimesheetStore(db, cache).clear()
        return {"success": True}
    except Exception as e:
        logger.error(f"Timesheet clear error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear timesheet import"
        )

@router.get("/employees", response_model=EmployeeListResponse, summary="取得試算表員工列表")
def list_employees(
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """
    取得目前匯入中的員工列表。

    - 包含是否已審核與可疑日數量
    """
    store = TimesheetStore(db, cache)
    if not store.is_loaded():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Timesheet not loaded. Please import a file first."
        )

    updated = store.updated_employees()
    suspect_counts = SuspectDayService(db).counts_by_employee()

    employees = [
        EmployeeSummary(
            id=item.id,
            name=item.name,
            updated=item.id in updated,
            suspect_days=suspect_counts.get(item.id, 0)
        )
        for item in store.employee_list()
    ]

    return EmployeeListResponse(
        employees=employees,
        date_range=store.detected_date_range(),
        count=len(employees)
    )

@router.get("/employees/validate", response_model=EmployeeValidationResponse, summary="比對試算表員工與名錄")
def validate_employees(
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """
    僅列出同時存在於名錄中的試算表員工，依姓名排序。

    - 一次查詢名錄，不逐筆查找
    """
    store = TimesheetStore(db, cache)
    if not store.is_loaded():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Timesheet not loaded. Please import a file first."
        )

    try:
        sheet_employees = store.employee_list()
        existing = DirectoryService(db).existing_ids(item.id for item in sheet_employees)
        valid = sorted(
            (item for item in sheet_employees if item.id in existing),
            key=lambda item: item.name.lower()
        )

        return EmployeeValidationResponse(
            employees=valid,
            date_range=store.detected_date_range(),
            count=len(valid),
            total_in_spreadsheet=len(sheet_employees),
            filtered_count=len(sheet_employees) - len(valid),
            updated_employees=sorted(store.updated_employees()),
            suspect_days_counts=SuspectDayService(db).counts_by_employee()
        )

    except Exception as e:
        logger.error(f"Error validating employees: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to validate employees against directory"
        )

@router.post("/employees/{employee_id}/updated", response_model=MarkUpdatedResponse, summary="標記員工已審核")
def mark_employee_updated(
    employee_id: str,
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """標記員工的比對已審核完成"""
    if not validate_employee_id(employee_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Employee ID is required"
        )

    try:
        updated = TimesheetStore(db, cache).mark_employee_updated(employee_id)
        return MarkUpdatedResponse(
            success=True,
            employee_id=employee_id,
            updated_employees=sorted(updated)
        )
    except Exception as e:
        logger.error(f"Error marking employee {employee_id} as updated: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to mark employee as updated"
        )
