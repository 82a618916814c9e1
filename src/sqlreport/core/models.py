"""Core 데이터 모델 정의."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

# 스키마 -> 테이블 -> 컬럼 집합
Inventory = dict[str, dict[str, set[str]]]


class StatementKind(Enum):
    """분석 대상 SQL 구문 타입."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"


@dataclass
class QueryEvent:
    """빌드 로그에서 재구성한 쿼리 이벤트 (커넥션, SQL, 결과 행, 행 수)."""

    connection_id: str
    sql_text: str
    result_rows: list[str] = field(default_factory=list)
    row_total: Optional[int] = None
    total_text: str = ""

    def to_dict(self) -> dict[str, object]:
        """리포트 직렬화용 딕셔너리로 변환."""
        return {
            "connection": self.connection_id,
            "query": self.sql_text,
            "results": list(self.result_rows),
            "total": self.total_text,
        }


@dataclass(frozen=True)
class ParsedRecord:
    """추출 루틴 하나가 만들어낸 스키마/테이블/컬럼 레코드."""

    schema: str
    table: str
    columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class Parsed:
    """정상 분석된 구문의 결과."""

    kind: StatementKind
    records: tuple[ParsedRecord, ...]


@dataclass(frozen=True)
class Failed:
    """분석에 실패한 구문의 결과."""

    raw_text: str
    reason: str = ""


StatementOutcome = Union[Parsed, Failed]


@dataclass(frozen=True)
class ParseContext:
    """구문 간에 이어지는 분석 문맥 (마지막으로 사용된 스키마/테이블)."""

    last_used_schema: str = ""
    last_used_table: str = ""

    @property
    def has_table(self) -> bool:
        return bool(self.last_used_schema and self.last_used_table)


@dataclass
class TimingStats:
    """쿼리 수행 시간 통계."""

    all_durations_ms: list[int] = field(default_factory=list)
    max_duration_ms: int = 0
    statements_at_max: list[str] = field(default_factory=list)
    durations_at_max: list[int] = field(default_factory=list)

    @property
    def average_duration_ms(self) -> float:
        """전체 수행 시간의 평균 (기록이 없으면 0.0)."""
        if not self.all_durations_ms:
            return 0.0
        return sum(self.all_durations_ms) / len(self.all_durations_ms)

    def record(self, duration_ms: int, statement: str) -> None:
        """수행 시간을 기록한다.

        최대값이 갱신될 때마다 구문을 statements_at_max에 덧붙인다
        (마지막 최대값만 남기지 않는다).
        """
        self.all_durations_ms.append(duration_ms)
        if duration_ms > self.max_duration_ms:
            self.max_duration_ms = duration_ms
            self.statements_at_max.append(statement)
            self.durations_at_max.append(duration_ms)


@dataclass
class FailureLog:
    """분석 실패 구문 기록."""

    last_failed: Optional[str] = None
    all_failed: list[str] = field(default_factory=list)

    def add(self, statement: str) -> None:
        self.last_failed = statement
        self.all_failed.append(statement)
