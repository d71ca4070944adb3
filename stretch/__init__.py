"""stretch

OpenSearch/Elasticsearch 검색 API용 체이닝 쿼리 빌더입니다.

Usage:
    from stretch import create_stretch

    stretch = create_stretch()

    response = (
        stretch.index("posts")
        .match("title", "연차 휴가")
        .filter(lambda q: q.term("status", "published"))
        .aggregation("by_tag", lambda a: a.terms("tags").size(5))
        .cache()
        .execute()
    )
"""

from .builders import (
    AggregationBuilder,
    BoolClauseBuilder,
    MultiSearchBuilder,
    QueryBuilder,
    RangeClauseBuilder,
)
from .cache import CacheManager, CacheStore, MemoryCacheStore
from .client import OpenSearchClient, SearchClient
from .config import ConnectionSettings, StretchConfig, load_config
from .connection import ConnectionManager
from .exceptions import (
    ConfigurationError,
    StretchError,
    TransportError,
    UnknownConnectionError,
)
from .pagination import SearchPage
from .service import Stretch, create_stretch

__all__ = [
    # Service
    "Stretch",
    "create_stretch",
    # Builders
    "AggregationBuilder",
    "BoolClauseBuilder",
    "MultiSearchBuilder",
    "QueryBuilder",
    "RangeClauseBuilder",
    # Client
    "ConnectionManager",
    "OpenSearchClient",
    "SearchClient",
    # Cache
    "CacheManager",
    "CacheStore",
    "MemoryCacheStore",
    # Config
    "ConnectionSettings",
    "StretchConfig",
    "load_config",
    # Pagination
    "SearchPage",
    # Exceptions
    "ConfigurationError",
    "StretchError",
    "TransportError",
    "UnknownConnectionError",
]
