import re
from datetime import date
from typing import Optional

from timesheet_compare.utils.datetime_utils import parse_date_string, parse_time_string

EMPTY_TIME_PLACEHOLDER = "--:--"


def validate_employee_id(employee_id: str) -> bool:
    """驗證員工編號格式"""
    if not employee_id or len(employee_id.strip()) == 0:
        return False

    if len(employee_id) > 50:
        return False

    pattern = r'^[\w.-]+$'
    return re.match(pattern, employee_id.strip()) is not None


def validate_date_format(date_str: str) -> Optional[date]:
    """驗證並解析日期格式 (DD/MM/YYYY)"""
    return parse_date_string(date_str)


def format_time_input(raw: str) -> str:
    """輸入中的時間文字：兩位數字後自動補冒號"""
    if raw is None:
        return ""
    if re.match(r'^\d{2}$', raw):
        return raw + ":"
    return raw


def normalize_time_input(raw: Optional[str], previous: str = "") -> str:
    """
    確認時間輸入。

    Args:
        raw: 使用者輸入的文字
        previous: 上一次確認的值

    Returns:
        補零後的 HH:mm；空白輸入返回空字串；格式錯誤時返回 previous
    """
    if raw is None:
        return previous

    value = raw.strip()
    if value == "" or value == EMPTY_TIME_PLACEHOLDER:
        return ""

    parsed = parse_time_string(value)
    if parsed is None:
        return previous

    hours, minutes = value.split(":")
    return hours.zfill(2) + ":" + minutes


class ValidationError(Exception):
    """驗證錯誤異常"""

    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class DataValidator:
    """資料驗證器"""

    def __init__(self):
        pass

    def parse_row_date(self, date_str: str) -> date:
        """解析列日期，失敗時拋出 ValidationError"""
        parsed = validate_date_format(date_str)
        if parsed is None:
            raise ValidationError(f"Invalid row date format: {date_str}", field="date")
        return parsed

    def parse_optional_date(self, date_str: Optional[str], time_str: Optional[str], label: str) -> Optional[date]:
        """解析上/下班日期；僅在有提供時間時才要求日期有效"""
        parsed = validate_date_format(date_str)
        if parsed is None and time_str:
            raise ValidationError(f"Invalid {label} date format: {date_str}", field=f"{label}_date")
        return parsed

