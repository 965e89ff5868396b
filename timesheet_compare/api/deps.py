"""
Shared FastAPI dependencies.
"""
from fastapi import Request

from timesheet_compare.services.timesheet_store import TimesheetCache


def get_timesheet_cache(request: Request) -> TimesheetCache:
    """取得應用程式持有的試算表快取"""
    cache = getattr(request.app.state, "timesheet_cache", None)
    if cache is None:
        cache = TimesheetCache()
        request.app.state.timesheet_cache = cache
    return cache
