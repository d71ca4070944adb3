"""커넥션 매니저

이름별 OpenSearch 커넥션을 지연 생성하고 재사용합니다.
"""

import logging
import warnings
from typing import Callable

import urllib3
from opensearchpy import OpenSearch, RequestsHttpConnection

from .client import OpenSearchClient
from .config import ConnectionSettings, StretchConfig, load_config
from .exceptions import UnknownConnectionError

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[ConnectionSettings], OpenSearch]


def create_connection(settings: ConnectionSettings) -> OpenSearch:
    """설정으로 opensearchpy 클라이언트 생성"""
    if settings.use_ssl and not settings.verify_certs:
        # SSL 경고 숨기기 (터널 환경에서 정상)
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        warnings.filterwarnings("ignore", message=".*verify_certs=False.*")

    http_auth = None
    if settings.username:
        http_auth = (settings.username, settings.password)

    return OpenSearch(
        hosts=[{"host": settings.host, "port": settings.port}],
        http_auth=http_auth,
        use_ssl=settings.use_ssl,
        verify_certs=settings.verify_certs,
        connection_class=RequestsHttpConnection,
    )


class ConnectionManager:
    """이름 → OpenSearch 커넥션 관리

    프로세스 수명 동안 유지되며, 커넥션은 처음 요청될 때 생성됩니다.
    """

    def __init__(
        self,
        config: StretchConfig | None = None,
        factory: ConnectionFactory | None = None,
    ):
        """
        Args:
            config: 설정 (없으면 호출 시점에 load_config())
            factory: 커넥션 생성 함수 (테스트용 주입)
        """
        self._config = config
        self._factory = factory or create_connection
        self._connections: dict[str, OpenSearch] = {}

    @property
    def config(self) -> StretchConfig:
        return self._config or load_config()

    def names(self) -> list[str]:
        """설정된 커넥션 이름 목록"""
        return list(self.config.connections)

    def connection(self, name: str | None = None) -> OpenSearch:
        """커넥션 반환 (name이 없으면 기본 커넥션)

        Raises:
            UnknownConnectionError: 설정에 없는 이름
        """
        config = self.config
        name = name or config.default_connection

        if name not in self._connections:
            settings = config.connections.get(name)
            if settings is None:
                raise UnknownConnectionError(name)

            logger.debug(f"Opening connection [{name}] to {settings.host}:{settings.port}")
            self._connections[name] = self._factory(settings)

        return self._connections[name]

    def client(self, name: str | None = None) -> OpenSearchClient:
        """커넥션을 OpenSearchClient로 감싸서 반환"""
        return OpenSearchClient(self.connection(name), config=self._config)
