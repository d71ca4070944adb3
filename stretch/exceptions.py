"""예외 정의

모든 예외는 StretchError를 상속합니다.
"""


class StretchError(Exception):
    """Stretch 기본 예외"""


class ConfigurationError(StretchError):
    """클라이언트/매니저/캐시 저장소 없이 실행하거나 설정값이 잘못된 경우"""


class UnknownConnectionError(StretchError):
    """설정에 없는 커넥션 이름"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Elasticsearch connection [{name}] not configured.")


class TransportError(StretchError):
    """하위 클라이언트 호출 실패 (원인 예외를 cause로 보관)

    Attributes:
        cause: 원본 예외
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
