"""범위(range) 절 빌더

첫 조건 설정 시 부모 QueryBuilder에 절을 등록하고,
이후 조건은 부모의 같은 필드 마지막 range 절을 갱신합니다.

Usage:
    query.range("published_at").gte("2024-01-01").lt("2025-01-01").timezone("+09:00")
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .query import QueryBuilder


class RangeClauseBuilder:
    """단일 필드 range 절 빌더"""

    def __init__(self, parent: "QueryBuilder", field: str):
        self.parent = parent
        self.field = field
        self._conditions: dict[str, Any] = {}
        self._timezone: str | None = None
        self._format: str | None = None
        self._added_to_parent = False

    def gt(self, value: Any) -> "RangeClauseBuilder":
        self._conditions["gt"] = value
        self._add_to_parent()
        return self

    def gte(self, value: Any) -> "RangeClauseBuilder":
        self._conditions["gte"] = value
        self._add_to_parent()
        return self

    def lt(self, value: Any) -> "RangeClauseBuilder":
        self._conditions["lt"] = value
        self._add_to_parent()
        return self

    def lte(self, value: Any) -> "RangeClauseBuilder":
        self._conditions["lte"] = value
        self._add_to_parent()
        return self

    def timezone(self, timezone: str) -> "RangeClauseBuilder":
        self._timezone = timezone
        self._add_to_parent()
        return self

    def format(self, format: str) -> "RangeClauseBuilder":
        """날짜 포맷 (예: "yyyy-MM-dd")"""
        self._format = format
        self._add_to_parent()
        return self

    def get_parent(self) -> "QueryBuilder":
        return self.parent

    def build(self) -> dict:
        range_ = dict(self._conditions)

        if self._timezone:
            range_["time_zone"] = self._timezone

        if self._format:
            range_["format"] = self._format

        return {"range": {self.field: range_}}

    def _add_to_parent(self) -> None:
        if not self._added_to_parent:
            self.parent.add_query(self.build())
            self._added_to_parent = True
        else:
            self.parent.update_last_range_query(self.field, self.build())
