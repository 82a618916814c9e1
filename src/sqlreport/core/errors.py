"""SQL 분석 에러 정의."""


class StatementError(Exception):
    """SQL 구문 분석 에러의 기본 클래스."""

    def __init__(self, message: str, statement: str = "") -> None:
        super().__init__(message)
        self.statement = statement


class UnclassifiableStatement(StatementError):
    """첫 토큰이 select/insert/update가 아닌 구문."""

    pass


class MalformedStatement(StatementError):
    """추출에 필요한 구분자(from, ., values, set 등)가 없는 구문."""

    pass


class TimingUnavailable(StatementError):
    """'<n> ms.' 형태의 수행 시간 주석이 없는 구문."""

    pass
