"""CLI 테스트"""

import json

import pytest

from stretch import cli
from stretch.exceptions import TransportError
from stretch.service import Stretch


@pytest.fixture
def service(mock_client, config, monkeypatch) -> Stretch:
    service = Stretch(mock_client, config=config)
    monkeypatch.setattr(cli, "create_stretch", lambda: service)
    return service


class TestCLI:
    """명령 실행"""

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 2
        assert "usage" in capsys.readouterr().out

    def test_test_command(self, service, mock_client, capsys):
        mock_client.health.return_value = {"cluster_name": "local", "status": "green"}
        mock_client.indices.return_value = {"posts": {}, "users": {}}

        assert cli.main(["test"]) == 0

        out = capsys.readouterr().out
        assert "Cluster: local" in out
        assert "Indices count: 2" in out

    def test_exists(self, service, mock_client):
        mock_client.index_exists.return_value = False

        assert cli.main(["exists", "posts"]) == 1
        mock_client.index_exists.assert_called_once_with("posts")

    def test_search_dry_run(self, service, mock_client, capsys):
        code = cli.main(["search", "posts", "--match", "title=휴가", "--term", "lang=ko", "--size", "3", "--dry-run"])

        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert body == {
            "query": {
                "bool": {
                    "must": [
                        {"match": {"title": {"query": "휴가"}}},
                        {"term": {"lang": "ko"}},
                    ]
                }
            },
            "size": 3,
        }
        mock_client.search.assert_not_called()

    def test_search_executes(self, service, mock_client, capsys):
        assert cli.main(["search", "posts", "--match", "title=휴가"]) == 0

        mock_client.search.assert_called_once()
        assert json.loads(capsys.readouterr().out)["hits"]["total"]["value"] == 2

    def test_transport_error_exit_code(self, service, mock_client, capsys):
        mock_client.health.side_effect = TransportError("Failed to get cluster health", RuntimeError("down"))

        assert cli.main(["test"]) == 1
        assert "down" in capsys.readouterr().err

    def test_invalid_pair(self, service):
        with pytest.raises(SystemExit):
            cli.main(["search", "posts", "--match", "title"])
