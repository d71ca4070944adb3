"""쿼리 빌더 모듈"""

from .aggregation import AggregationBuilder
from .bool_query import BoolClauseBuilder
from .multi_search import MultiSearchBuilder
from .query import QueryBuilder
from .range_query import RangeClauseBuilder

__all__ = [
    "AggregationBuilder",
    "BoolClauseBuilder",
    "MultiSearchBuilder",
    "QueryBuilder",
    "RangeClauseBuilder",
]
