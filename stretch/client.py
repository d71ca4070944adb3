"""OpenSearch 클라이언트 모듈

opensearch-py 클라이언트를 감싸 요청 로깅, 느린 쿼리 감지,
예외 정규화(TransportError)를 담당합니다.

구현체:
- SearchClient: 빌더가 의존하는 클라이언트 프로토콜
- OpenSearchClient: opensearchpy.OpenSearch 기반 구현
"""

import logging
from typing import Any, Protocol, runtime_checkable

from opensearchpy import OpenSearch

from .config import StretchConfig, load_config
from .exceptions import TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class SearchClient(Protocol):
    """검색 클라이언트 프로토콜

    모든 실패는 TransportError로 정규화됩니다 (index_exists 제외).
    """

    def search(self, params: dict) -> dict: ...

    def msearch(self, params: dict) -> dict: ...

    def index(self, params: dict) -> dict: ...

    def update(self, params: dict) -> dict: ...

    def delete(self, params: dict) -> dict: ...

    def bulk(self, params: dict) -> dict: ...

    def get(self, params: dict) -> dict: ...

    def indices(self) -> dict: ...

    def index_exists(self, index: str) -> bool: ...

    def create_index(self, index: str, settings: dict | None = None) -> dict: ...

    def delete_index(self, index: str) -> dict: ...

    def health(self) -> dict: ...


class OpenSearchClient:
    """opensearchpy.OpenSearch 래퍼

    params는 {"index": ..., "body": ...} 형태의 dict이며
    그대로 키워드 인자로 전달됩니다.
    """

    def __init__(self, client: OpenSearch, config: StretchConfig | None = None):
        """
        Args:
            client: 하위 opensearchpy 클라이언트
            config: 설정 (없으면 호출 시점에 load_config())
        """
        self.client = client
        self._config = config

    @property
    def config(self) -> StretchConfig:
        return self._config or load_config()

    # =========================================================================
    # 검색
    # =========================================================================

    def search(self, params: dict) -> dict:
        """검색 수행"""
        try:
            self._log_query("Elasticsearch query:", params)
            response = self.client.search(**params)
            self._log_slow_query("Slow Elasticsearch query:", params, response)
            return response
        except Exception as e:
            raise TransportError("Search failed", e) from e

    def msearch(self, params: dict) -> dict:
        """멀티 검색 수행 (헤더/바디 교차 리스트)"""
        try:
            self._log_query("Elasticsearch multi-search:", params)
            response = self.client.msearch(**params)
            self._log_slow_query("Slow Elasticsearch multi-search:", params, response)
            return response
        except Exception as e:
            raise TransportError("Multi-search failed", e) from e

    # =========================================================================
    # 문서
    # =========================================================================

    def index(self, params: dict) -> dict:
        try:
            return self.client.index(**params)
        except Exception as e:
            raise TransportError("Index operation failed", e) from e

    def update(self, params: dict) -> dict:
        try:
            return self.client.update(**params)
        except Exception as e:
            raise TransportError("Update operation failed", e) from e

    def delete(self, params: dict) -> dict:
        try:
            return self.client.delete(**params)
        except Exception as e:
            raise TransportError("Delete operation failed", e) from e

    def bulk(self, params: dict) -> dict:
        """벌크 요청 (문서별 오류는 응답에 그대로 포함)"""
        try:
            return self.client.bulk(**params)
        except Exception as e:
            raise TransportError("Bulk operation failed", e) from e

    def get(self, params: dict) -> dict:
        try:
            return self.client.get(**params)
        except Exception as e:
            raise TransportError("Get operation failed", e) from e

    # =========================================================================
    # 인덱스 / 클러스터
    # =========================================================================

    def indices(self) -> dict:
        """전체 인덱스 정보 반환"""
        try:
            return self.client.indices.get(index="*")
        except Exception as e:
            raise TransportError("Failed to get indices", e) from e

    def index_exists(self, index: str) -> bool:
        """인덱스 존재 여부

        Note:
            호출 실패도 False로 반환합니다.
            "없음"과 "확인 불가"를 구분할 수 없습니다.
        """
        try:
            return bool(self.client.indices.exists(index=index))
        except Exception as e:
            logger.debug(f"index_exists({index}) failed: {e}")
            return False

    def create_index(self, index: str, settings: dict | None = None) -> dict:
        params: dict[str, Any] = {"index": index}
        if settings:
            params["body"] = settings

        try:
            return self.client.indices.create(**params)
        except Exception as e:
            raise TransportError(f"Failed to create index '{index}'", e) from e

    def delete_index(self, index: str) -> dict:
        try:
            return self.client.indices.delete(index=index)
        except Exception as e:
            raise TransportError(f"Failed to delete index '{index}'", e) from e

    def health(self) -> dict:
        """클러스터 상태 반환"""
        try:
            return self.client.cluster.health()
        except Exception as e:
            raise TransportError("Failed to get cluster health", e) from e

    # =========================================================================
    # 로깅
    # =========================================================================

    def _log_query(self, message: str, params: dict) -> None:
        config = self.config
        if config.logging_enabled and config.log_queries:
            logger.info(f"{message} {params}")

    def _log_slow_query(self, message: str, params: dict, response: Any) -> None:
        config = self.config
        if not (config.logging_enabled and config.log_slow_queries):
            return

        took = response.get("took", 0) if isinstance(response, dict) else 0
        if took > config.slow_query_threshold_ms:
            logger.warning(f"{message} ({took}ms) {params}")
