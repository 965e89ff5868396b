from pydantic import BaseModel, Field
from typing import List, Optional

class DayUpdate(BaseModel):
    """單日更新：date 為列日期（用於查找記錄），上/下班日期可不同"""
    date: str
    check_in_date: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_date: Optional[str] = None
    check_out_time: Optional[str] = None

class BulkUpdateRequest(BaseModel):
    updates: List[DayUpdate]

class BulkUpdateResponse(BaseModel):
    success: bool
    updated_count: int
    errors: List[str] = Field(default_factory=list)

class BulkDeleteRequest(BaseModel):
    dates: List[str]

class BulkDeleteResponse(BaseModel):
    success: bool
    deleted_count: int
    errors: List[str] = Field(default_factory=list)
