"""pytest 공통 설정 및 fixtures"""

from unittest.mock import MagicMock

import pytest

from stretch.cache import CacheManager, MemoryCacheStore
from stretch.config import ConnectionSettings, StretchConfig


class FakeClock:
    """수동으로 진행시키는 시계"""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class DeferredExecutor:
    """submit된 작업을 run_all() 호출 시 실행"""

    def __init__(self):
        self.pending = []

    def submit(self, fn):
        self.pending.append(fn)

    def run_all(self) -> None:
        while self.pending:
            self.pending.pop(0)()


@pytest.fixture
def config() -> StretchConfig:
    """테스트용 설정 (환경변수 무시)"""
    return StretchConfig(
        cache_prefix="stretch:",
        cache_ttl=(300, 600),
        connections={
            "default": ConnectionSettings(host="search.local"),
            "logs": ConnectionSettings(host="logs.local", port=9201),
        },
    )


@pytest.fixture
def mock_client():
    """Mock 검색 클라이언트"""
    client = MagicMock()
    client.search.return_value = {
        "took": 3,
        "hits": {
            "total": {"value": 2, "relation": "eq"},
            "hits": [
                {"_id": "1", "_score": 1.2, "_source": {"title": "연차 휴가 안내"}},
                {"_id": "2", "_score": 0.8, "_source": {"title": "휴가 신청 방법"}},
            ],
        },
    }
    client.msearch.return_value = {"responses": [{"hits": {"hits": []}}]}
    return client


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def executor() -> DeferredExecutor:
    return DeferredExecutor()


@pytest.fixture
def store(clock, executor) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock, executor=executor)


@pytest.fixture
def cache_manager(config, store) -> CacheManager:
    """항상 같은 store를 돌려주는 캐시 매니저"""
    return CacheManager(config, factory=lambda: store)
