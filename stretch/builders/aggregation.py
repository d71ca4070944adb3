"""집계(aggregation) 빌더

인스턴스 하나는 집계 종류 하나만 가집니다.
종류 메서드를 다시 호출하면 이전 종류를 덮어씁니다.

size / order_by는 terms 집계에서만 출력됩니다.
다른 종류에서는 저장만 되고 결과에 나타나지 않습니다.

Usage:
    query.aggregation("by_category", lambda a: (
        a.terms("category")
         .size(5)
         .order_by("_count", "desc")
         .sub_aggregation("avg_price", lambda s: s.avg("price"))
    ))
"""

import copy
from typing import Any, Callable


class AggregationBuilder:
    """집계 빌더"""

    def __init__(self):
        self._aggregation: dict[str, Any] = {}
        self._sub_aggregations: dict[str, dict] = {}
        self._size: int | None = None
        self._order: dict[str, dict] = {}

    # =========================================================================
    # 버킷 집계
    # =========================================================================

    def terms(self, field: str) -> "AggregationBuilder":
        self._aggregation = {"terms": {"field": field}}
        return self

    def date_histogram(self, field: str, interval: str) -> "AggregationBuilder":
        """달력 기준 날짜 히스토그램 (interval 예: "day", "month")"""
        self._aggregation = {
            "date_histogram": {
                "field": field,
                "calendar_interval": interval,
            }
        }
        return self

    def range(self, field: str, ranges: list[dict]) -> "AggregationBuilder":
        """ranges 예: [{"to": 100}, {"from": 100, "to": 200}, {"from": 200}]"""
        self._aggregation = {
            "range": {
                "field": field,
                "ranges": list(ranges),
            }
        }
        return self

    def histogram(self, field: str, interval: int | float) -> "AggregationBuilder":
        self._aggregation = {
            "histogram": {
                "field": field,
                "interval": interval,
            }
        }
        return self

    # =========================================================================
    # 메트릭 집계
    # =========================================================================

    def avg(self, field: str) -> "AggregationBuilder":
        self._aggregation = {"avg": {"field": field}}
        return self

    def sum(self, field: str) -> "AggregationBuilder":
        self._aggregation = {"sum": {"field": field}}
        return self

    def min(self, field: str) -> "AggregationBuilder":
        self._aggregation = {"min": {"field": field}}
        return self

    def max(self, field: str) -> "AggregationBuilder":
        self._aggregation = {"max": {"field": field}}
        return self

    def count(self) -> "AggregationBuilder":
        """문서 수 (_id 기준 value_count)"""
        self._aggregation = {"value_count": {"field": "_id"}}
        return self

    def cardinality(self, field: str) -> "AggregationBuilder":
        self._aggregation = {"cardinality": {"field": field}}
        return self

    # =========================================================================
    # 옵션
    # =========================================================================

    def size(self, size: int) -> "AggregationBuilder":
        self._size = size
        return self

    def order_by(self, field: str, direction: str = "asc") -> "AggregationBuilder":
        self._order = {field: {"order": direction}}
        return self

    def sub_aggregation(
        self,
        name: str,
        callback: Callable[["AggregationBuilder"], Any],
    ) -> "AggregationBuilder":
        """하위 집계 (같은 이름이면 덮어씀)"""
        sub = AggregationBuilder()
        callback(sub)
        self._sub_aggregations[name] = sub.build()
        return self

    def build(self) -> dict:
        agg = copy.deepcopy(self._aggregation)

        if self._size is not None and "terms" in agg:
            agg["terms"]["size"] = self._size

        if self._order and "terms" in agg:
            agg["terms"]["order"] = copy.deepcopy(self._order)

        if self._sub_aggregations:
            agg["aggs"] = copy.deepcopy(self._sub_aggregations)

        return agg
