"""설정 모듈

환경변수(.env 포함)에서 설정을 읽습니다.
캐싱하지 않으므로 load_config()는 호출 시점의 환경을 반영합니다.

Usage:
    from stretch.config import load_config

    config = load_config()
    config.cache_ttl  # (300, 600)
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .exceptions import ConfigurationError

DEFAULT_CONNECTION = "default"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class ConnectionSettings:
    """OpenSearch 커넥션 설정"""

    host: str = "localhost"
    port: int = 9200
    username: str | None = None
    password: str | None = None
    use_ssl: bool = False
    verify_certs: bool = True


@dataclass
class StretchConfig:
    """Stretch 전역 설정

    Attributes:
        logging_enabled: 로깅 전체 on/off
        log_queries: 모든 검색 요청 로깅
        log_slow_queries: 느린 쿼리 경고 로깅
        slow_query_threshold_ms: 느린 쿼리 기준 (응답 took, 밀리초)
        cache_enabled: 빌더 execute() 캐싱 기본값
        cache_ttl: (fresh, stale) 초 단위
        cache_prefix: 캐시 키 접두사
        cache_store: 캐시 저장소 이름
        default_size: size 미지정 시 페이지 크기
        default_connection: 기본 커넥션 이름
        connections: 커넥션 이름 → 설정
    """

    logging_enabled: bool = True
    log_queries: bool = False
    log_slow_queries: bool = True
    slow_query_threshold_ms: int = 1000
    cache_enabled: bool = False
    cache_ttl: tuple[int, int] = (300, 600)
    cache_prefix: str = ""
    cache_store: str = "default"
    default_size: int = 10
    default_connection: str = DEFAULT_CONNECTION
    connections: dict[str, ConnectionSettings] = field(
        default_factory=lambda: {DEFAULT_CONNECTION: ConnectionSettings()}
    )


# =============================================================================
# 환경변수 파싱
# =============================================================================


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def parse_ttl(raw: str) -> tuple[int, int]:
    """"300,600" → (300, 600). 값이 하나면 fresh == stale"""
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    try:
        values = [int(p) for p in parts]
    except ValueError as e:
        raise ConfigurationError(f"Invalid cache TTL {raw!r}") from e

    if len(values) == 1:
        return values[0], values[0]
    if len(values) != 2 or values[0] < 0 or values[1] < values[0]:
        raise ConfigurationError(f"Invalid cache TTL {raw!r}, expected 'fresh,stale'")
    return values[0], values[1]


def _connection_from_env(prefix: str) -> ConnectionSettings:
    """OPENSEARCH_HOST / OPENSEARCH_LOGS_HOST 형식"""
    defaults = ConnectionSettings()
    return ConnectionSettings(
        host=os.getenv(f"{prefix}_HOST", defaults.host),
        port=_env_int(f"{prefix}_PORT", defaults.port),
        username=os.getenv(f"{prefix}_USERNAME"),
        password=os.getenv(f"{prefix}_PASSWORD"),
        use_ssl=_env_bool(f"{prefix}_USE_SSL", defaults.use_ssl),
        verify_certs=_env_bool(f"{prefix}_VERIFY_CERTS", defaults.verify_certs),
    )


def load_config() -> StretchConfig:
    """환경변수에서 설정 로드 (호출마다 새로 읽음)"""
    load_dotenv()

    ttl_raw = os.getenv("STRETCH_CACHE_TTL")
    default_connection = os.getenv("STRETCH_DEFAULT_CONNECTION", DEFAULT_CONNECTION)

    connections = {default_connection: _connection_from_env("OPENSEARCH")}
    extra = os.getenv("STRETCH_CONNECTIONS", "")
    for name in (n.strip() for n in extra.split(",")):
        if name and name not in connections:
            connections[name] = _connection_from_env(f"OPENSEARCH_{name.upper()}")

    return StretchConfig(
        logging_enabled=_env_bool("STRETCH_LOGGING_ENABLED", True),
        log_queries=_env_bool("STRETCH_LOG_QUERIES", False),
        log_slow_queries=_env_bool("STRETCH_LOG_SLOW_QUERIES", True),
        slow_query_threshold_ms=_env_int("STRETCH_SLOW_QUERY_THRESHOLD", 1000),
        cache_enabled=_env_bool("STRETCH_CACHE_ENABLED", False),
        cache_ttl=parse_ttl(ttl_raw) if ttl_raw else (300, 600),
        cache_prefix=os.getenv("STRETCH_CACHE_PREFIX", ""),
        cache_store=os.getenv("STRETCH_CACHE_STORE", "default"),
        default_size=_env_int("STRETCH_DEFAULT_SIZE", 10),
        default_connection=default_connection,
        connections=connections,
    )
