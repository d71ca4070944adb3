"""SearchPage 테스트"""

from stretch.builders import QueryBuilder
from stretch.pagination import SearchPage


def make_response(total, count: int = 2) -> dict:
    return {"hits": {"total": total, "hits": [{"_id": str(i)} for i in range(count)]}}


class TestSearchPage:
    """응답 → 페이지"""

    def test_from_response(self):
        query = QueryBuilder().size(10).from_(20)

        page = SearchPage.from_response(query, make_response({"value": 45, "relation": "eq"}))

        assert page.total == 45
        assert page.per_page == 10
        assert page.current_page == 3
        assert page.last_page == 5
        assert page.has_more_pages is True
        assert len(page.items) == 2

    def test_default_size_from_config(self, config):
        config.default_size = 25

        page = SearchPage.from_response(QueryBuilder(), make_response({"value": 30}), config)

        assert page.per_page == 25
        assert page.current_page == 1
        assert page.last_page == 2

    def test_integer_total(self):
        page = SearchPage.from_response(QueryBuilder().size(5), make_response(7))

        assert page.total == 7

    def test_last_page(self):
        query = QueryBuilder().size(10).from_(40)

        page = SearchPage.from_response(query, make_response({"value": 45}, count=5))

        assert page.current_page == 5
        assert page.has_more_pages is False

    def test_empty_response(self):
        page = SearchPage.from_response(QueryBuilder().size(10), {})

        assert page.is_empty
        assert page.total == 0
        assert page.last_page == 1
