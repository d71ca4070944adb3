"""ConnectionManager 테스트"""

from unittest.mock import MagicMock, patch

import pytest

from stretch.client import OpenSearchClient
from stretch.config import ConnectionSettings
from stretch.connection import ConnectionManager, create_connection
from stretch.exceptions import UnknownConnectionError


@pytest.fixture
def factory():
    return MagicMock(side_effect=lambda settings: MagicMock(name=settings.host))


class TestConnectionManager:
    """이름별 커넥션"""

    def test_default_connection(self, config, factory):
        manager = ConnectionManager(config, factory=factory)

        manager.connection()

        factory.assert_called_once_with(config.connections["default"])

    def test_named_connection(self, config, factory):
        manager = ConnectionManager(config, factory=factory)

        manager.connection("logs")

        settings = factory.call_args.args[0]
        assert settings.host == "logs.local"
        assert settings.port == 9201

    def test_connections_are_reused(self, config, factory):
        manager = ConnectionManager(config, factory=factory)

        assert manager.connection("logs") is manager.connection("logs")
        assert manager.connection() is manager.connection("default")
        assert factory.call_count == 2

    def test_unknown_connection(self, config, factory):
        manager = ConnectionManager(config, factory=factory)

        with pytest.raises(UnknownConnectionError) as exc_info:
            manager.connection("analytics")

        assert exc_info.value.name == "analytics"
        factory.assert_not_called()

    def test_names(self, config, factory):
        assert ConnectionManager(config, factory=factory).names() == ["default", "logs"]

    def test_client_wraps_connection(self, config, factory):
        manager = ConnectionManager(config, factory=factory)

        client = manager.client("logs")

        assert isinstance(client, OpenSearchClient)
        assert client.client is manager.connection("logs")


class TestCreateConnection:
    """opensearchpy 클라이언트 생성"""

    def test_builds_opensearch_client(self):
        settings = ConnectionSettings(host="search.local", port=9443, username="u", password="p", use_ssl=True)

        with patch("stretch.connection.OpenSearch") as opensearch:
            create_connection(settings)

        kwargs = opensearch.call_args.kwargs
        assert kwargs["hosts"] == [{"host": "search.local", "port": 9443}]
        assert kwargs["http_auth"] == ("u", "p")
        assert kwargs["use_ssl"] is True
        assert kwargs["verify_certs"] is True

    def test_no_auth_without_username(self):
        with patch("stretch.connection.OpenSearch") as opensearch:
            create_connection(ConnectionSettings())

        assert opensearch.call_args.kwargs["http_auth"] is None
