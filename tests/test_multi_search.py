"""MultiSearchBuilder 테스트"""

from unittest.mock import MagicMock

import pytest

from stretch.builders import MultiSearchBuilder, QueryBuilder
from stretch.exceptions import ConfigurationError


class TestBuild:
    """헤더/바디 교차 출력"""

    def test_empty(self):
        assert MultiSearchBuilder().build() == []

    def test_alternating_header_and_body(self):
        multi = (
            MultiSearchBuilder()
            .add("posts", lambda q: q.match("title", "휴가"))
            .add("users", lambda q: q.term("active", True).size(1))
        )

        assert multi.build() == [
            {"index": "posts"},
            {"query": {"match": {"title": {"query": "휴가"}}}},
            {"index": "users"},
            {"query": {"term": {"active": True}}, "size": 1},
        ]

    def test_index_list_is_joined(self):
        multi = MultiSearchBuilder().add(["logs-2024", "logs-2025"], lambda q: q.term("level", "error"))

        assert multi.build()[0] == {"index": "logs-2024,logs-2025"}

    def test_accepts_query_builder(self):
        query = QueryBuilder().exists("title")

        multi = MultiSearchBuilder().add("posts", query)

        assert multi.build() == [{"index": "posts"}, {"query": {"exists": {"field": "title"}}}]

    def test_count(self):
        multi = MultiSearchBuilder().add("a", lambda q: None).add("b", lambda q: None)

        assert multi.count() == 2
        assert len(multi) == 2

    def test_get_indexes_unique_in_order(self):
        multi = (
            MultiSearchBuilder()
            .add("b", lambda q: None)
            .add(["a", "c"], lambda q: None)
            .add("b", lambda q: None)
        )

        assert multi.get_indexes() == ["b", "a,c"]


class TestExecute:
    """execute() 테스트"""

    def test_requires_client(self):
        with pytest.raises(ConfigurationError):
            MultiSearchBuilder().add("posts", lambda q: q.term("a", 1)).execute()

    def test_empty_does_not_call_client(self, mock_client, config):
        result = MultiSearchBuilder(mock_client, config=config).execute()

        assert result == {"responses": []}
        mock_client.msearch.assert_not_called()

    def test_delegates_to_msearch(self, mock_client, config):
        multi = MultiSearchBuilder(mock_client, config=config).add("posts", lambda q: q.term("a", 1))

        result = multi.execute()

        mock_client.msearch.assert_called_once_with(
            {"body": [{"index": "posts"}, {"query": {"term": {"a": 1}}}]}
        )
        assert result == mock_client.msearch.return_value

    def test_connection_requires_manager(self, mock_client):
        with pytest.raises(ConfigurationError):
            MultiSearchBuilder(mock_client).connection("logs")

    def test_connection_returns_fresh_builder(self, mock_client, config):
        manager = MagicMock()
        multi = MultiSearchBuilder(mock_client, manager, config=config).add("posts", lambda q: None)

        switched = multi.connection("logs")

        manager.connection.assert_called_once_with("logs")
        assert len(switched) == 0
