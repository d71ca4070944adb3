"""검색 결과 캐시

빌더의 execute()를 stale-while-revalidate 방식으로 캐싱합니다.

구성:
- canonicalize / cache_key: 빌드 결과 기반 결정적 캐시 키
- CacheStore: 저장소 프로토콜 (get_or_compute, forget)
- MemoryCacheStore: 프로세스 내 저장소
- CacheManager: 이름별 저장소 관리
- Cacheable: 빌더용 mixin (execute() 가로채기)

TTL은 (fresh, stale) 두 단계입니다:
    age < fresh          → 캐시 값 반환
    fresh <= age < stale → 캐시 값 반환 + 백그라운드 갱신
    stale <= age / 미스  → 동기 재계산
"""

import copy
import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Protocol, runtime_checkable

from .config import StretchConfig, load_config
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# =============================================================================
# 캐시 키
# =============================================================================


def canonicalize(value: Any) -> Any:
    """dict 키를 재귀적으로 정렬

    리스트 순서는 의미가 있으므로 (must 절 순서, sort 우선순위 등) 그대로 둡니다.
    """
    if isinstance(value, dict):
        return {k: canonicalize(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [canonicalize(v) for v in value]
    return value


def serialize(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def cache_key(body: Any, indexes: list[str], prefix: str = "") -> str:
    """prefix + "idx1:idx2" + ":" + sha1(정렬된 body)

    인덱스와 해시 사이에도 ":"를 넣습니다. 예: "app:posts:logs:3f2a..."
    인덱스가 없으면 prefix 바로 뒤에 해시가 옵니다.
    """
    digest = hashlib.sha1(serialize(canonicalize(body)).encode("utf-8")).hexdigest()
    return prefix + ":".join([*indexes, digest])


# =============================================================================
# 저장소
# =============================================================================


@runtime_checkable
class CacheStore(Protocol):
    """캐시 저장소 프로토콜"""

    def get_or_compute(
        self,
        key: str,
        ttl: tuple[int, int],
        compute: Callable[[], Any],
    ) -> Any:
        """캐시 조회, 없거나 만료되면 compute() 결과를 저장 후 반환

        Args:
            key: 캐시 키
            ttl: (fresh, stale) 초
            compute: 값 계산 함수
        """
        ...

    def forget(self, key: str) -> None: ...


class MemoryCacheStore:
    """프로세스 내 stale-while-revalidate 저장소

    같은 키에 대한 동시 갱신은 중복 계산될 수 있으며 마지막 쓰기가 남습니다.
    stale 구간의 갱신은 키당 하나만 예약됩니다.
    값은 깊은 복사로 저장/반환하므로 호출자가 응답을 수정해도 캐시에 영향이 없습니다.
    stale 기간이 지난 항목은 쓰기 시 제거되고, capacity를 넘으면 가장 오래 쓰이지 않은 항목부터 제거됩니다.
    """

    def __init__(
        self,
        clock: Callable[[], float] | None = None,
        executor=None,
        capacity: int = 1000,
    ):
        """
        Args:
            clock: 시간 함수 (테스트용, 기본 time.time)
            executor: submit(fn)을 가진 실행기 (없으면 데몬 스레드)
            capacity: 최대 항목 수 (LRU 제거)
        """
        self.clock = clock or time.time
        self.executor = executor
        self.capacity = capacity
        # key → (value, stored_at, expires_at), 앞쪽이 가장 오래 쓰이지 않은 항목
        self._entries: OrderedDict[str, tuple[Any, float, float]] = OrderedDict()
        self._refreshing: set[str] = set()
        self._lock = threading.Lock()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_or_compute(
        self,
        key: str,
        ttl: tuple[int, int],
        compute: Callable[[], Any],
    ) -> Any:
        fresh, stale = ttl
        now = self.clock()

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                value, stored_at, _ = entry
                age = now - stored_at
                if age < stale:
                    self._entries.move_to_end(key)
                    value = copy.deepcopy(value)
                else:
                    del self._entries[key]
                    entry = None

        if entry is not None:
            if age < fresh:
                logger.debug(f"Cache hit: {key}")
                return value

            logger.debug(f"Cache stale, refreshing: {key}")
            self._schedule_refresh(key, stale, compute)
            return value

        logger.debug(f"Cache miss: {key}")
        value = compute()
        self.put(key, value, stale)
        return value

    def put(self, key: str, value: Any, lifetime: float = float("inf")) -> None:
        """값 저장 (lifetime 초 후 만료)"""
        now = self.clock()
        with self._lock:
            self._purge_expired(now)
            self._entries[key] = (copy.deepcopy(value), now, now + lifetime)
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Cache evicted: {evicted}")

    def forget(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _purge_expired(self, now: float) -> None:
        # _lock 보유 상태에서 호출
        expired = [k for k, (_, _, expires_at) in self._entries.items() if expires_at <= now]
        for k in expired:
            del self._entries[k]

    def _schedule_refresh(self, key: str, lifetime: float, compute: Callable[[], Any]) -> None:
        with self._lock:
            if key in self._refreshing:
                return
            self._refreshing.add(key)

        def refresh():
            try:
                self.put(key, compute(), lifetime)
            except Exception as e:
                # stale 값은 그대로 남음
                logger.warning(f"Cache refresh failed for {key}: {e}")
            finally:
                with self._lock:
                    self._refreshing.discard(key)

        if self.executor is not None:
            self.executor.submit(refresh)
        else:
            threading.Thread(target=refresh, name=f"cache-refresh-{key}", daemon=True).start()


class CacheManager:
    """이름 → 캐시 저장소 (지연 생성)"""

    def __init__(
        self,
        config: StretchConfig | None = None,
        factory: Callable[[], CacheStore] | None = None,
    ):
        self._config = config
        self._factory = factory or MemoryCacheStore
        self._stores: dict[str, CacheStore] = {}

    def store(self, name: str | None = None) -> CacheStore:
        name = name or (self._config or load_config()).cache_store
        if name not in self._stores:
            self._stores[name] = self._factory()
        return self._stores[name]


# =============================================================================
# 빌더 mixin
# =============================================================================


class Cacheable:
    """execute() 캐싱 mixin

    사용하는 클래스는 build(), get_indexes(), config, _cache_manager를 제공해야 합니다.
    인스턴스에 지정하지 않은 값은 설정(StretchConfig)을 따릅니다.
    """

    _cache_manager: CacheManager | None = None
    _cache_enabled: bool | None = None
    _cache_clear: bool = False
    _cache_ttl: tuple[int, int] | None = None
    _cache_prefix: str | None = None
    _cache_store: str | None = None

    config: StretchConfig

    def cache(self, enabled: bool = True):
        """execute() 결과 캐싱"""
        self._cache_enabled = enabled
        return self

    def clear_cache(self, clear: bool = True):
        """실행 전 해당 키의 캐시 삭제"""
        self._cache_clear = clear
        return self

    def set_cache_ttl(self, fresh: int, stale: int | None = None):
        self._cache_ttl = (fresh, stale if stale is not None else fresh)
        return self

    def set_cache_prefix(self, prefix: str):
        self._cache_prefix = prefix
        return self

    def set_cache_store(self, name: str):
        self._cache_store = name
        return self

    def is_cache_enabled(self) -> bool:
        if self._cache_enabled is None:
            return self.config.cache_enabled
        return self._cache_enabled

    def get_cache_clear(self) -> bool:
        return self._cache_clear

    def get_cache_ttl(self) -> tuple[int, int]:
        return self._cache_ttl or tuple(self.config.cache_ttl)

    def get_cache_prefix(self) -> str:
        return self._cache_prefix if self._cache_prefix is not None else self.config.cache_prefix

    def get_cache_store(self) -> str:
        return self._cache_store or self.config.cache_store

    def get_indexes(self) -> list[str]:
        raise NotImplementedError

    def get_cache_key(self) -> str:
        return cache_key(self.build(), self.get_indexes(), self.get_cache_prefix())

    def _execute_cached(self, compute: Callable[[], Any]) -> Any:
        """캐싱이 켜져 있으면 저장소를 거쳐 compute() 실행"""
        if not self.is_cache_enabled():
            return compute()

        if self._cache_manager is None:
            raise ConfigurationError("Cache store not available. Cannot cache query.")

        store = self._cache_manager.store(self.get_cache_store())
        key = self.get_cache_key()

        if self.get_cache_clear():
            store.forget(key)

        return store.get_or_compute(key, self.get_cache_ttl(), compute)
