"""Stretch 서비스

프로세스 시작 시 한 번 만들어 두고 빌더 생성과 문서/인덱스 작업에 사용합니다.

Usage:
    from stretch import create_stretch

    stretch = create_stretch()

    # 검색
    response = stretch.index("posts").match("title", "휴가").execute()

    # 다른 커넥션
    logs = stretch.connection("logs").query().term("level", "error").execute()

    # 문서
    stretch.index_document("posts", {"title": "첫 글"}, id="1")
"""

from .builders import MultiSearchBuilder, QueryBuilder
from .cache import CacheManager
from .client import SearchClient
from .config import StretchConfig
from .connection import ConnectionManager
from .exceptions import ConfigurationError


class Stretch:
    """클라이언트 + 커넥션 매니저 + 캐시 매니저 묶음"""

    def __init__(
        self,
        client: SearchClient,
        manager: ConnectionManager | None = None,
        cache: CacheManager | None = None,
        config: StretchConfig | None = None,
    ):
        """
        Args:
            client: 기본 클라이언트
            manager: 커넥션 매니저 (connection() 사용 시 필요)
            cache: 캐시 매니저 (빌더 캐싱 시 필요)
            config: 설정 (없으면 호출 시점에 load_config())
        """
        self._client = client
        self._manager = manager
        self._cache = cache
        self._config = config

    @property
    def client(self) -> SearchClient:
        return self._client

    # =========================================================================
    # 빌더
    # =========================================================================

    def query(self) -> QueryBuilder:
        return QueryBuilder(self._client, self._manager, self._cache, self._config)

    def index(self, index: str | list[str]) -> QueryBuilder:
        return self.query().index(index)

    def multi(self) -> MultiSearchBuilder:
        return MultiSearchBuilder(self._client, self._manager, self._cache, self._config)

    def connection(self, name: str) -> "Stretch":
        """지정 커넥션을 쓰는 새 서비스

        Raises:
            ConfigurationError: 커넥션 매니저 없음
            UnknownConnectionError: 설정에 없는 이름
        """
        if self._manager is None:
            raise ConfigurationError(
                "Elasticsearch manager not available. Cannot switch connections."
            )

        return Stretch(self._manager.client(name), self._manager, self._cache, self._config)

    # =========================================================================
    # 인덱스 / 클러스터
    # =========================================================================

    def index_exists(self, index: str) -> bool:
        return self._client.index_exists(index)

    def create_index(self, index: str, settings: dict | None = None) -> dict:
        return self._client.create_index(index, settings or {})

    def delete_index(self, index: str) -> dict:
        return self._client.delete_index(index)

    def health(self) -> dict:
        return self._client.health()

    def indices(self) -> dict:
        return self._client.indices()

    # =========================================================================
    # 문서
    # =========================================================================

    def bulk(self, operations: list[dict]) -> dict:
        """액션/문서 교차 리스트로 벌크 요청"""
        return self._client.bulk({"body": operations})

    def index_document(self, index: str, document: dict, id: str | None = None) -> dict:
        params = {"index": index, "body": document}
        if id:
            params["id"] = id
        return self._client.index(params)

    def update_document(self, index: str, id: str, document: dict) -> dict:
        """부분 업데이트 (doc 병합)"""
        return self._client.update({"index": index, "id": id, "body": {"doc": document}})

    def delete_document(self, index: str, id: str) -> dict:
        return self._client.delete({"index": index, "id": id})

    def get_document(self, index: str, id: str) -> dict:
        return self._client.get({"index": index, "id": id})


def create_stretch(config: StretchConfig | None = None) -> Stretch:
    """설정으로 Stretch 서비스 생성

    Args:
        config: 설정 (없으면 각 컴포넌트가 호출 시점에 환경변수에서 읽음)

    Returns:
        Stretch: 기본 커넥션에 연결된 서비스
    """
    manager = ConnectionManager(config)
    return Stretch(manager.client(), manager, CacheManager(config), config)
