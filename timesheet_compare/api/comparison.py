"""
Comparison API routes: day-by-day reconciliation of spreadsheet and attendance data.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from timesheet_compare.api.deps import get_timesheet_cache
from timesheet_compare.database import get_db
from timesheet_compare.exceptions import EmployeeNotFoundError, InvalidFilterError, TimesheetNotLoadedError
from timesheet_compare.schemas.comparison import ComparisonFilter, ComparisonMode, ComparisonResponse
from timesheet_compare.services.comparison_service import ComparisonService
from timesheet_compare.services.timesheet_store import TimesheetCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comparison", tags=["comparison"])

@router.get("/{employee_id}", response_model=ComparisonResponse, summary="取得員工逐日比對")
def get_comparison(
    employee_id: str,
    mode: ComparisonMode = Query(ComparisonMode.MONTH, description="篩選模式"),
    month: Optional[str] = Query(None, description="月份 (YYYY-MM)"),
    start_date: Optional[str] = Query(None, description="開始日期 (DD/MM/YYYY)"),
    end_date: Optional[str] = Query(None, description="結束日期 (DD/MM/YYYY)"),
    cache: TimesheetCache = Depends(get_timesheet_cache),
    db: Session = Depends(get_db)
):
    """
    取得員工在指定區間內每一天的試算表與資料庫比對。

    - 區間內每一天恰好一筆，即使兩個來源都沒有資料
    - 資料庫無法讀取時退化為僅試算表的結果
    """
    try:
        comparison_filter = ComparisonFilter(
            mode=mode,
            month=month,
            start_date=start_date,
            end_date=end_date
        )
        comparison_service = ComparisonService(db, cache)
        return comparison_service.get_comparison(employee_id, comparison_filter)

    except TimesheetNotLoadedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InvalidFilterError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except EmployeeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Comparison error for {employee_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate comparison"
        )
