"""
Suspect-day API routes.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from timesheet_compare.database import get_db
from timesheet_compare.schemas.suspect_day import (
    SuspectDayCountsResponse,
    SuspectDayListResponse,
    SuspectDayRequest
)
from timesheet_compare.services.suspect_day_service import SuspectDayService
from timesheet_compare.utils.datetime_utils import format_date_string
from timesheet_compare.utils.validators import validate_date_format, validate_employee_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suspect-days", tags=["suspect-days"])

def _parse_request(request: SuspectDayRequest):
    day = validate_date_format(request.date)
    if not validate_employee_id(request.employee_id) or day is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="employee_id and date (DD/MM/YYYY) are required"
        )
    return day

@router.get("", response_model=SuspectDayListResponse, summary="取得員工的可疑日")
def get_suspect_days(
    employee_id: Optional[str] = Query(None, description="員工編號"),
    db: Session = Depends(get_db)
):
    if not employee_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="employee_id query parameter is required"
        )

    dates = SuspectDayService(db).list_for(employee_id)
    return SuspectDayListResponse(
        employee_id=employee_id,
        dates=[format_date_string(d) for d in dates]
    )

@router.get("/counts", response_model=SuspectDayCountsResponse, summary="取得各員工可疑日數量")
def get_suspect_day_counts(db: Session = Depends(get_db)):
    return SuspectDayCountsResponse(counts=SuspectDayService(db).counts_by_employee())

@router.post("", response_model=dict, summary="標記可疑日")
def add_suspect_day(request: SuspectDayRequest, db: Session = Depends(get_db)):
    """標記可疑日；重複標記不視為錯誤"""
    day = _parse_request(request)
    try:
        SuspectDayService(db).add(request.employee_id, day)
        return {"success": True}
    except Exception as e:
        logger.error(f"Error adding suspect day: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add suspect day"
        )

@router.delete("", response_model=dict, summary="取消可疑日標記")
def remove_suspect_day(request: SuspectDayRequest, db: Session = Depends(get_db)):
    """取消可疑日標記；不存在時不視為錯誤"""
    day = _parse_request(request)
    try:
        SuspectDayService(db).remove(request.employee_id, day)
        return {"success": True}
    except Exception as e:
        logger.error(f"Error removing suspect day: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove suspect day"
        )
