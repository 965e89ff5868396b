"""
Reviewer working set: per-day editable check-in/check-out values seeded from a
comparison, and the update/delete batches built from them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from timesheet_compare.schemas.attendance import DayUpdate
from timesheet_compare.schemas.comparison import DataSource, DayComparison
from timesheet_compare.utils.datetime_utils import calculate_duration_with_dates
from timesheet_compare.utils.validators import format_time_input, normalize_time_input


class Field(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


@dataclass
class FieldValue:
    date: Optional[str] = None
    time: str = ""
    pending: Optional[str] = None  # 尚未確認的輸入


def _source_value(comparison: DayComparison, field_name: Field, source: DataSource):
    """取得指定來源在該欄位的 (時間, 日期)"""
    if source == DataSource.SPREADSHEET:
        sheet = comparison.spreadsheet
        if field_name == Field.CHECK_IN:
            return sheet.check_in, sheet.check_in_date
        return sheet.check_out, sheet.check_out_date

    database = comparison.database
    if field_name == Field.CHECK_IN:
        return database.first_check_in, database.first_check_in_date
    return database.last_check_out, database.last_check_out_date


@dataclass
class DayEdit:
    """單日的可編輯值：上班日期/時間、下班日期/時間"""

    comparison: DayComparison
    check_in: FieldValue = field(default_factory=FieldValue)
    check_out: FieldValue = field(default_factory=FieldValue)
    selected: bool = True
    marked_for_deletion: bool = False

    @classmethod
    def from_comparison(cls, comparison: DayComparison) -> "DayEdit":
        edit = cls(
            comparison=comparison,
            check_in=FieldValue(date=comparison.date),
            check_out=FieldValue(date=comparison.date),
        )
        edit.select_source(Field.CHECK_IN, comparison.selection.check_in)
        edit.select_source(Field.CHECK_OUT, comparison.selection.check_out)
        return edit

    @property
    def date(self) -> str:
        return self.comparison.date

    def _field(self, field_name: Field) -> FieldValue:
        return self.check_in if Field(field_name) == Field.CHECK_IN else self.check_out

    def select_source(self, field_name: Field, source: DataSource) -> bool:
        """
        從指定來源複製該欄位的時間與日期。

        Returns:
            是否套用；來源無值時不變動
        """
        field_name = Field(field_name)
        time_value, date_value = _source_value(self.comparison, field_name, DataSource(source))
        if not time_value:
            return False

        target = self._field(field_name)
        target.time = time_value
        target.date = date_value or self.comparison.date
        target.pending = None
        return True

    def set_time(self, field_name: Field, raw: str) -> str:
        """暫存輸入文字（兩位數字後自動補冒號），返回目前顯示的文字"""
        target = self._field(field_name)
        target.pending = format_time_input(raw)
        return target.pending

    def commit_time(self, field_name: Field) -> str:
        """確認輸入：有效時正規化，空白時清除，無效時還原為上一次的值"""
        target = self._field(field_name)
        if target.pending is not None:
            target.time = normalize_time_input(target.pending, target.time)
            target.pending = None
        return target.time

    def set_date(self, field_name: Field, date_value: str) -> None:
        self._field(field_name).date = date_value

    @property
    def has_times(self) -> bool:
        return bool(self.check_in.time or self.check_out.time)

    @property
    def duration(self) -> Optional[str]:
        """以完整日期時間計算工時；下班早於上班時不顯示"""
        return calculate_duration_with_dates(
            self.check_in.date, self.check_in.time or None,
            self.check_out.date, self.check_out.time or None,
        )

    def to_update(self) -> DayUpdate:
        return DayUpdate(
            date=self.date,
            check_in_date=self.check_in.date or self.date,
            check_in_time=self.check_in.time or None,
            check_out_date=self.check_out.date or self.date,
            check_out_time=self.check_out.time or None,
        )


class ReviewSession:
    """單一員工、單一日期區間的審核工作集"""

    def __init__(self, employee_id: str, days: Iterable[DayComparison]):
        self.employee_id = employee_id
        self.days: Dict[str, DayEdit] = {}
        for comparison in days:
            self.days[comparison.date] = DayEdit.from_comparison(comparison)

    def __getitem__(self, date_value: str) -> DayEdit:
        return self.days[date_value]

    def __len__(self) -> int:
        return len(self.days)

    def select_source(self, date_value: str, field_name: Field, source: DataSource) -> bool:
        return self.days[date_value].select_source(field_name, source)

    def set_time(self, date_value: str, field_name: Field, raw: str) -> str:
        edit = self.days[date_value]
        edit.set_time(field_name, raw)
        return edit.commit_time(field_name)

    def set_date(self, date_value: str, field_name: Field, new_date: str) -> None:
        self.days[date_value].set_date(field_name, new_date)

    def toggle_selected(self, date_value: str) -> bool:
        edit = self.days[date_value]
        edit.selected = not edit.selected
        return edit.selected

    def toggle_deletion(self, date_value: str) -> bool:
        """切換刪除標記；標記刪除時同時取消勾選更新"""
        edit = self.days[date_value]
        edit.marked_for_deletion = not edit.marked_for_deletion
        if edit.marked_for_deletion:
            edit.selected = False
        return edit.marked_for_deletion

    def select_all(self, selected: bool = True) -> None:
        for edit in self.days.values():
            edit.selected = selected

    @property
    def selected_count(self) -> int:
        return sum(1 for edit in self.days.values() if edit.selected)

    def _check_conflicts(self) -> None:
        conflicts = [
            edit.date for edit in self.days.values()
            if edit.selected and edit.marked_for_deletion
        ]
        if conflicts:
            raise ValueError(f"Days both selected for update and marked for deletion: {', '.join(conflicts)}")

    def build_updates(self) -> List[DayUpdate]:
        """
        產生更新批次：已勾選且至少有一個時間值的日期。

        Raises:
            ValueError: 同一天同時勾選更新與標記刪除
        """
        self._check_conflicts()
        return [
            edit.to_update() for edit in self.days.values()
            if edit.selected and edit.has_times
        ]

    def build_deletions(self) -> List[str]:
        """產生刪除批次（已標記刪除的列日期）"""
        self._check_conflicts()
        return [edit.date for edit in self.days.values() if edit.marked_for_deletion]
