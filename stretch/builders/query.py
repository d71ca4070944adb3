"""쿼리 빌더 (QueryBuilder)

체이닝 호출로 검색 요청 body를 조립하고 클라이언트로 실행합니다.

조립 규칙 (build):
- filter가 있으면 항상 {"bool": {"must": ..., "filter": [...]}} 하나로 감쌈
- filter 없이 절이 하나면 그대로, 여러 개면 {"bool": {"must": [...]}}
- must는 절이 하나면 단일 dict, 여러 개면 리스트

Usage:
    results = (
        stretch.query()
        .index("posts")
        .match("title", "연차 휴가")
        .filter(lambda q: q.term("status", "published"))
        .range("published_at").gte("2024-01-01").get_parent()
        .sort("published_at", "desc")
        .size(20)
        .execute()
    )
"""

import copy
import logging
from typing import TYPE_CHECKING, Any, Callable

from ..cache import CacheManager, Cacheable
from ..client import OpenSearchClient, SearchClient
from ..config import StretchConfig, load_config
from ..exceptions import ConfigurationError
from .aggregation import AggregationBuilder
from .bool_query import BoolClauseBuilder
from .range_query import RangeClauseBuilder

if TYPE_CHECKING:
    from ..connection import ConnectionManager

logger = logging.getLogger(__name__)

Compose = Callable[["QueryBuilder"], Any]
SourceSpec = bool | str | list[str]


class QueryBuilder(Cacheable):
    """검색 요청 빌더

    요청마다 새로 만들어 쓰고 버립니다.
    """

    def __init__(
        self,
        client: SearchClient | None = None,
        manager: "ConnectionManager | None" = None,
        cache: CacheManager | None = None,
        config: StretchConfig | None = None,
    ):
        """
        Args:
            client: 실행용 클라이언트 (없으면 execute() 불가)
            manager: 커넥션 매니저 (없으면 connection() 불가)
            cache: 캐시 매니저 (없으면 캐싱 불가)
            config: 설정 (없으면 호출 시점에 load_config())
        """
        self._client = client
        self._manager = manager
        self._cache_manager = cache
        self._config = config

        self._queries: list[dict] = []
        self._filters: list[dict] = []
        self._aggregations: dict[str, dict] = {}
        self._sort: list[Any] = []
        self._source: SourceSpec | None = None
        self._highlight: dict[str, Any] = {}
        self._index: str | list[str] | None = None
        self._size: int | None = None
        self._from: int | None = None

    @property
    def config(self) -> StretchConfig:
        return self._config or load_config()

    @property
    def client(self) -> SearchClient | None:
        return self._client

    def index(self, index: str | list[str]) -> "QueryBuilder":
        self._index = index
        return self

    def connection(self, name: str) -> "QueryBuilder":
        """지정 커넥션을 쓰는 새 빌더 (현재 상태는 넘어가지 않음)

        Raises:
            ConfigurationError: 커넥션 매니저 없음
            UnknownConnectionError: 설정에 없는 이름
        """
        if self._manager is None:
            raise ConfigurationError(
                "Elasticsearch manager not available. Cannot switch connections."
            )

        client = OpenSearchClient(self._manager.connection(name), config=self._config)
        return QueryBuilder(client, self._manager, self._cache_manager, self._config)

    # =========================================================================
    # 전문 검색 / 단어 절
    # =========================================================================

    def match(self, field: str, value: Any, options: dict | None = None) -> "QueryBuilder":
        self.add_query({"match": {field: {"query": value, **(options or {})}}})
        return self

    def match_phrase(self, field: str, value: Any, options: dict | None = None) -> "QueryBuilder":
        self.add_query({"match_phrase": {field: {"query": value, **(options or {})}}})
        return self

    def term(self, field: str, value: Any) -> "QueryBuilder":
        self.add_query({"term": {field: value}})
        return self

    def terms(self, field: str, values: list[Any]) -> "QueryBuilder":
        self.add_query({"terms": {field: list(values)}})
        return self

    def wildcard(self, field: str, value: str) -> "QueryBuilder":
        self.add_query({"wildcard": {field: value}})
        return self

    def fuzzy(self, field: str, value: Any, options: dict | None = None) -> "QueryBuilder":
        self.add_query({"fuzzy": {field: {"value": value, **(options or {})}}})
        return self

    def exists(self, field: str) -> "QueryBuilder":
        self.add_query({"exists": {"field": field}})
        return self

    # =========================================================================
    # 복합 절
    # =========================================================================

    def range(self, field: str) -> RangeClauseBuilder:
        """range 절 빌더 (첫 조건 설정 시 이 빌더에 등록됨)"""
        return RangeClauseBuilder(self, field)

    def bool(self, callback: Callable[[BoolClauseBuilder], Any] | None = None) -> BoolClauseBuilder:
        """bool 절 빌더

        callback이 있으면 바로 실행하고 결과 절을 추가합니다.
        callback 없이 받은 빌더는 add_query(builder.build())로 직접 추가해야 합니다.
        """
        bool_builder = BoolClauseBuilder(self)

        if callback is not None:
            callback(bool_builder)
            self.add_query(bool_builder.build())

        return bool_builder

    def nested(self, path: str, callback: Compose) -> "QueryBuilder":
        """nested 문서 대상 절"""
        fragment = self.compose_query(callback)
        if fragment is not None:
            self.add_query({"nested": {"path": path, "query": fragment}})
        return self

    def filter(self, callback: Compose) -> "QueryBuilder":
        """점수에 영향 없는 필터 (build 시 bool.filter로 들어감)"""
        fragment = self.compose_query(callback)
        if fragment is not None:
            self._filters.append(fragment)
        return self

    def aggregation(self, name: str, callback: Callable[[AggregationBuilder], Any]) -> "QueryBuilder":
        """이름별 집계 (같은 이름이면 덮어씀)"""
        builder = AggregationBuilder()
        callback(builder)
        self._aggregations[name] = builder.build()
        return self

    # =========================================================================
    # 페이지 / 정렬 / 출력
    # =========================================================================

    def size(self, size: int) -> "QueryBuilder":
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        self._size = size
        return self

    def from_(self, offset: int) -> "QueryBuilder":
        if offset < 0:
            raise ValueError(f"from must be non-negative, got {offset}")
        self._from = offset
        return self

    def sort(self, field: str | dict, direction: str = "asc") -> "QueryBuilder":
        """필드명이면 {field: {"order": direction}}, dict면 그대로 추가"""
        if isinstance(field, str):
            self._sort.append({field: {"order": direction}})
        else:
            self._sort.append(field)
        return self

    def source(self, source: SourceSpec) -> "QueryBuilder":
        self._source = source
        return self

    def highlight(self, fields: list | dict, options: dict | None = None) -> "QueryBuilder":
        self._highlight = {**(options or {}), "fields": fields}
        return self

    def get_size(self) -> int | None:
        return self._size

    def get_from(self) -> int | None:
        return self._from

    def get_index(self) -> str | list[str] | None:
        return self._index

    # =========================================================================
    # 조립 / 실행
    # =========================================================================

    def build(self) -> dict:
        body: dict[str, Any] = {}

        if self._filters:
            bool_: dict[str, Any] = {}
            if self._queries:
                bool_["must"] = self._queries[0] if len(self._queries) == 1 else list(self._queries)
            bool_["filter"] = list(self._filters)
            body["query"] = {"bool": bool_}
        elif len(self._queries) == 1:
            body["query"] = self._queries[0]
        elif self._queries:
            body["query"] = {"bool": {"must": list(self._queries)}}

        if self._size is not None:
            body["size"] = self._size

        if self._from is not None:
            body["from"] = self._from

        if self._sort:
            body["sort"] = list(self._sort)

        if self._source is not None:
            body["_source"] = self._source

        if self._highlight:
            body["highlight"] = self._highlight

        if self._aggregations:
            body["aggs"] = self._aggregations

        return copy.deepcopy(body)

    def to_dict(self) -> dict:
        return self.build()

    def execute(self) -> dict:
        """검색 실행 (캐싱이 켜져 있으면 캐시 경유)

        Raises:
            ConfigurationError: 클라이언트 없음
            TransportError: 검색 실패
        """
        if self._client is None:
            raise ConfigurationError("Client not set. Cannot execute query.")

        return self._execute_cached(self._search)

    def get_indexes(self) -> list[str]:
        if self._index is None:
            return []
        if isinstance(self._index, str):
            return [self._index]
        return [str(i) for i in self._index]

    def _search(self) -> dict:
        params: dict[str, Any] = {}

        if self._index:
            params["index"] = self._index

        body = self.build()
        if body:
            params["body"] = body

        return self._client.search(params)

    # =========================================================================
    # 하위 빌더 연동
    # =========================================================================

    def compose_query(self, callback: Compose) -> dict | None:
        """새 빌더에 callback을 실행하고 그 query 조각만 반환 (절이 없으면 None)"""
        inner = QueryBuilder(self._client, self._manager, self._cache_manager, self._config)
        callback(inner)
        return inner.build().get("query")

    def add_query(self, query: dict) -> None:
        self._queries.append(query)

    def update_last_range_query(self, field: str, range_query: dict) -> None:
        """같은 필드의 마지막 range 절 교체 (없으면 무시)

        필드 이름으로만 찾으므로 같은 필드에 range 빌더 두 개를 번갈아 쓰면
        먼저 만든 빌더의 갱신이 나중에 추가된 절을 덮어씁니다.
        """
        for i in range(len(self._queries) - 1, -1, -1):
            if field in self._queries[i].get("range", {}):
                self._queries[i] = range_query
                return
