"""bool 절 빌더

must / should / filter / must_not 각 그룹은 콜백(또는 콜백 리스트)을 받아
새 QueryBuilder에서 실행한 뒤 그 query 조각만 추가합니다.

Usage:
    query.bool(lambda b: (
        b.must(lambda q: q.match("title", "검색"))
         .should([
             lambda q: q.term("tags", "python"),
             lambda q: q.term("tags", "search"),
         ])
         .minimum_should_match(1)
    ))
"""

from typing import TYPE_CHECKING, Any, Callable, Sequence

if TYPE_CHECKING:
    from .query import QueryBuilder

Compose = Callable[["QueryBuilder"], Any]


class BoolClauseBuilder:
    """bool 절 빌더"""

    def __init__(self, parent: "QueryBuilder"):
        self.parent = parent
        self._must: list[dict] = []
        self._should: list[dict] = []
        self._filter: list[dict] = []
        self._must_not: list[dict] = []
        self._minimum_should_match: int | str | None = None

    def must(self, callback: Compose | Sequence[Compose]) -> "BoolClauseBuilder":
        self._compose(self._must, callback)
        return self

    def should(self, callback: Compose | Sequence[Compose]) -> "BoolClauseBuilder":
        self._compose(self._should, callback)
        return self

    def filter(self, callback: Compose | Sequence[Compose]) -> "BoolClauseBuilder":
        """점수에 영향 없는 조건"""
        self._compose(self._filter, callback)
        return self

    def must_not(self, callback: Compose | Sequence[Compose]) -> "BoolClauseBuilder":
        self._compose(self._must_not, callback)
        return self

    def minimum_should_match(self, minimum: int | str) -> "BoolClauseBuilder":
        """정수 개수 또는 "75%" 같은 비율 문자열"""
        self._minimum_should_match = minimum
        return self

    def get_parent(self) -> "QueryBuilder":
        return self.parent

    def build(self) -> dict:
        bool_: dict[str, Any] = {}

        if self._must:
            bool_["must"] = list(self._must)

        if self._should:
            bool_["should"] = list(self._should)

        if self._filter:
            bool_["filter"] = list(self._filter)

        if self._must_not:
            bool_["must_not"] = list(self._must_not)

        if self._minimum_should_match is not None:
            bool_["minimum_should_match"] = self._minimum_should_match

        return {"bool": bool_}

    def _compose(self, group: list[dict], callback: Compose | Sequence[Compose]) -> None:
        if callable(callback):
            fragment = self.parent.compose_query(callback)
            if fragment is not None:
                group.append(fragment)
        else:
            for cb in callback:
                self._compose(group, cb)
