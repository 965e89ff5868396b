import math
import re
from datetime import datetime, date, timedelta
from typing import Iterator, Optional, Tuple, Union
import pytz

from timesheet_compare.config import settings

TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
DATE_FORMAT = "%d/%m/%Y"
MINUTES_PER_DAY = 24 * 60


def get_reference_timezone(timezone_str: str = None) -> pytz.BaseTzInfo:
    """獲取參考時區"""
    try:
        return pytz.timezone(timezone_str or settings.TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.timezone("Asia/Dubai")


def utc_now() -> datetime:
    """獲取當前 UTC 時間"""
    return datetime.now(pytz.UTC)


def get_today(timezone_str: str = None) -> date:
    """獲取參考時區今天日期"""
    return utc_now().astimezone(get_reference_timezone(timezone_str)).date()


def to_utc(dt: datetime) -> datetime:
    """將時間轉為 aware UTC；naive 視為 UTC"""
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def to_naive_utc(dt: datetime) -> datetime:
    """將時間轉為資料庫儲存用的 naive UTC"""
    return to_utc(dt).replace(tzinfo=None)


def to_reference_timezone(dt: datetime, timezone_str: str = None) -> datetime:
    """將 UTC 時間轉換為參考時區"""
    return to_utc(dt).astimezone(get_reference_timezone(timezone_str))


def parse_time_string(time_str: Optional[str]) -> Optional[Tuple[int, int]]:
    """解析 HH:mm 字串，超出範圍返回 None"""
    if not time_str or not isinstance(time_str, str):
        return None
    match = TIME_PATTERN.match(time_str.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes


def time_to_minutes(time_str: Optional[str]) -> int:
    """HH:mm 轉為分鐘數，無法解析時為 0"""
    if not time_str:
        return 0
    match = TIME_PATTERN.match(time_str.strip())
    if not match:
        return 0
    return int(match.group(1)) * 60 + int(match.group(2))


def local_to_instant(day: date, time_str: str, timezone_str: str = None) -> Optional[datetime]:
    """
    將參考時區的日期與 HH:mm 轉換為 UTC 時間點。

    Args:
        day: 日曆日期
        time_str: 24 小時制時間字串
        timezone_str: 參考時區（可選）

    Returns:
        aware UTC datetime，時間字串無效時返回 None
    """
    parsed = parse_time_string(time_str)
    if parsed is None or day is None:
        return None
    hours, minutes = parsed
    tz = get_reference_timezone(timezone_str)
    local_dt = tz.localize(datetime(day.year, day.month, day.day, hours, minutes))
    return local_dt.astimezone(pytz.UTC)


def instant_to_local(instant: Optional[datetime], timezone_str: str = None) -> Optional[Tuple[str, str]]:
    """
    將 UTC 時間點轉換為參考時區的 (HH:mm, DD/MM/YYYY)。

    Args:
        instant: 時間點，naive 視為 UTC

    Returns:
        (時間, 日期) 元組，輸入無效時返回 None
    """
    if instant is None:
        return None
    if isinstance(instant, str):
        try:
            instant = datetime.fromisoformat(instant.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(instant, datetime):
        return None
    local_dt = to_reference_timezone(instant, timezone_str)
    return local_dt.strftime("%H:%M"), local_dt.strftime(DATE_FORMAT)


def _minutes_to_hhmm(total_minutes: int) -> str:
    hours = total_minutes // 60
    minutes = total_minutes % 60
    return f"{hours:02d}:{minutes:02d}"


def numeric_time_to_local(value: float) -> str:
    """
    將試算表的日分數轉為 HH:mm。

    0 <= value < 1 為當日時間；value >= 1 為經過時數（例如總工時），
    使用同一公式，不做 24 小時截斷：1.25 -> "30:00"。
    """
    return _minutes_to_hhmm(int(math.floor(value * MINUTES_PER_DAY + 0.5)))


def format_time_value(value) -> Optional[str]:
    """格式化試算表儲存格中的時間值"""
    if value is None or value == "" or value == "--":
        return None

    if isinstance(value, bool):
        return str(value)

    if isinstance(value, (int, float)) and value >= 0:
        return numeric_time_to_local(value)

    str_value = str(value).strip()
    return str_value or None


def seconds_to_hhmm(seconds: int) -> str:
    """秒數轉為 HH:mm"""
    seconds = int(seconds)
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}"


def hhmm_to_hours(time_str: Optional[str]) -> float:
    """HH:mm 轉為十進位小時，無法解析時為 0"""
    if not time_str:
        return 0.0
    parts = time_str.split(":")
    if len(parts) != 2:
        return 0.0
    try:
        return int(parts[0]) + int(parts[1]) / 60
    except ValueError:
        return 0.0


def parse_date_string(date_str: Optional[str]) -> Optional[date]:
    """解析 DD/MM/YYYY 日期字串"""
    if not date_str or not isinstance(date_str, str):
        return None
    try:
        return datetime.strptime(date_str.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def format_date_string(day: Union[datetime, date]) -> str:
    """格式化為 DD/MM/YYYY"""
    if isinstance(day, datetime):
        day = day.date()
    return day.strftime(DATE_FORMAT)


def parse_month_string(month_str: Optional[str]) -> Optional[Tuple[date, date]]:
    """解析 YYYY-MM，返回該月第一天與最後一天"""
    if not month_str:
        return None
    match = MONTH_PATTERN.match(month_str.strip())
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    first_day = date(year, month, 1)
    next_month = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return first_day, next_month - timedelta(days=1)


def day_start_utc(day: date) -> datetime:
    """日曆日期的 UTC 午夜（naive），作為出勤記錄的 day 鍵"""
    return datetime(day.year, day.month, day.day)


def day_end_utc(day: date) -> datetime:
    """日曆日期的 UTC 最後一刻（naive）"""
    return datetime(day.year, day.month, day.day, 23, 59, 59, 999999)


def record_calendar_date(day_value: datetime) -> date:
    """出勤記錄 day 欄位對應的日曆日期"""
    return to_utc(day_value).date()


def detect_checkout_date(row_date: str, check_in: Optional[str], check_out: Optional[str]) -> str:
    """
    判斷下班日期：下班時間 <= 上班時間時視為跨夜，返回隔天。

    僅作為顯示提示，無法區分跨夜與忘記打卡。
    """
    if not check_in or not check_out:
        return row_date

    if time_to_minutes(check_out) <= time_to_minutes(check_in):
        parsed = parse_date_string(row_date)
        if parsed is None:
            return row_date
        return format_date_string(parsed + timedelta(days=1))

    return row_date


def calculate_duration_with_dates(
    check_in_date: Optional[str],
    check_in_time: Optional[str],
    check_out_date: Optional[str],
    check_out_time: Optional[str],
) -> Optional[str]:
    """
    以完整日期時間計算工時，正確處理跨夜與跨多日。

    Returns:
        HH:mm 字串；缺值、無效或下班早於上班時返回 None
    """
    if not check_in_time or not check_out_time:
        return None

    in_day = parse_date_string(check_in_date)
    out_day = parse_date_string(check_out_date)
    if in_day is None or out_day is None:
        return None

    start = local_to_instant(in_day, check_in_time)
    end = local_to_instant(out_day, check_out_time)
    if start is None or end is None:
        return None

    diff_seconds = (end - start).total_seconds()
    if diff_seconds < 0:
        return None

    return _minutes_to_hhmm(int(diff_seconds // 60))


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    """依序產生閉區間內的每一天"""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def count_days_in_range(start_date: date, end_date: date) -> int:
    """計算閉區間的天數"""
    if end_date < start_date:
        return 0
    return (end_date - start_date).days + 1
