from pydantic import BaseModel
from typing import Dict, List

class SuspectDayRequest(BaseModel):
    employee_id: str
    date: str  # DD/MM/YYYY

class SuspectDayListResponse(BaseModel):
    employee_id: str
    dates: List[str]

class SuspectDayCountsResponse(BaseModel):
    counts: Dict[str, int]
