"""멀티 검색 빌더

여러 검색을 한 번의 msearch 요청으로 실행합니다.
응답 순서는 add() 순서와 같습니다.

Usage:
    responses = (
        stretch.multi()
        .add("posts", lambda q: q.match("title", "휴가"))
        .add(["logs-2024", "logs-2025"], lambda q: q.term("level", "error"))
        .execute()
    )["responses"]
"""

import logging
from typing import TYPE_CHECKING, Any, Callable

from ..cache import CacheManager, Cacheable
from ..client import OpenSearchClient, SearchClient
from ..config import StretchConfig, load_config
from ..exceptions import ConfigurationError
from .query import QueryBuilder

if TYPE_CHECKING:
    from ..connection import ConnectionManager

logger = logging.getLogger(__name__)


def _join_index(index: str | list[str]) -> str:
    if isinstance(index, str):
        return index
    return ",".join(index)


class MultiSearchBuilder(Cacheable):
    """(인덱스, QueryBuilder) 쌍의 순서 있는 목록"""

    def __init__(
        self,
        client: SearchClient | None = None,
        manager: "ConnectionManager | None" = None,
        cache: CacheManager | None = None,
        config: StretchConfig | None = None,
    ):
        self._client = client
        self._manager = manager
        self._cache_manager = cache
        self._config = config
        self._queries: list[tuple[str | list[str], QueryBuilder]] = []

    @property
    def config(self) -> StretchConfig:
        return self._config or load_config()

    def __len__(self) -> int:
        return len(self._queries)

    def count(self) -> int:
        return len(self._queries)

    def connection(self, name: str) -> "MultiSearchBuilder":
        """지정 커넥션을 쓰는 새 빌더 (추가된 검색은 넘어가지 않음)"""
        if self._manager is None:
            raise ConfigurationError(
                "Elasticsearch manager not available. Cannot switch connections."
            )

        client = OpenSearchClient(self._manager.connection(name), config=self._config)
        return MultiSearchBuilder(client, self._manager, self._cache_manager, self._config)

    def add(
        self,
        index: str | list[str],
        query: QueryBuilder | Callable[[QueryBuilder], Any],
    ) -> "MultiSearchBuilder":
        """검색 추가 (QueryBuilder 또는 새 빌더를 채울 callback)"""
        if not isinstance(query, QueryBuilder):
            builder = QueryBuilder(self._client, self._manager, self._cache_manager, self._config)
            query(builder)
            query = builder

        self._queries.append((index, query))
        return self

    def build(self) -> list[dict]:
        """헤더/바디 교차 리스트"""
        body: list[dict] = []

        for index, query in self._queries:
            body.append({"index": _join_index(index)})
            body.append(query.build())

        return body

    def to_dict(self) -> list[dict]:
        return self.build()

    def execute(self) -> dict:
        """멀티 검색 실행

        추가된 검색이 없으면 클라이언트를 호출하지 않고 {"responses": []}를 반환합니다.

        Raises:
            ConfigurationError: 클라이언트 없음
            TransportError: 검색 실패
        """
        if self._client is None:
            raise ConfigurationError("Client not set. Cannot execute query.")

        if not self._queries:
            return {"responses": []}

        return self._execute_cached(self._msearch)

    def get_indexes(self) -> list[str]:
        indexes: list[str] = []
        for index, _ in self._queries:
            joined = _join_index(index)
            if joined not in indexes:
                indexes.append(joined)
        return indexes

    def _msearch(self) -> dict:
        logger.debug(f"Executing multi-search with {len(self._queries)} queries")
        return self._client.msearch({"body": self.build()})
