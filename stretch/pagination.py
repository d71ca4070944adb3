"""검색 응답 페이지네이션"""

from dataclasses import dataclass, field
from math import ceil

from .builders import QueryBuilder
from .config import StretchConfig, load_config


@dataclass
class SearchPage:
    """검색 결과 한 페이지

    Attributes:
        items: hits.hits 리스트
        total: 전체 매칭 문서 수
        per_page: 페이지 크기
        current_page: 현재 페이지 (1부터)
    """

    items: list[dict] = field(default_factory=list)
    total: int = 0
    per_page: int = 10
    current_page: int = 1

    @property
    def last_page(self) -> int:
        if self.per_page <= 0:
            return 1
        return max(1, ceil(self.total / self.per_page))

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    @property
    def is_empty(self) -> bool:
        return not self.items

    @classmethod
    def from_response(
        cls,
        builder: QueryBuilder,
        response: dict,
        config: StretchConfig | None = None,
    ) -> "SearchPage":
        """빌더의 size/from과 응답으로 페이지 생성"""
        hits = response.get("hits", {})
        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)

        size = builder.get_size()
        offset = builder.get_from() or 0

        return cls(
            items=hits.get("hits", []),
            total=total,
            per_page=size or (config or load_config()).default_size,
            current_page=offset // size + 1 if size else 1,
        )
