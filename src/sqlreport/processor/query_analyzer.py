"""SQL 구문 분석기 - 인벤토리, 실패 목록, 수행 시간 통계 누적."""

import json
import logging
import re
from typing import Optional

from sqlreport.core.errors import MalformedStatement, StatementError, TimingUnavailable
from sqlreport.core.models import (
    Failed,
    FailureLog,
    Inventory,
    ParseContext,
    Parsed,
    ParsedRecord,
    StatementKind,
    StatementOutcome,
    TimingStats,
)
from sqlreport.processor.sql_normalizer import SQLNormalizer
from sqlreport.processor.statement_parser import (
    parse_insert,
    parse_select,
    parse_update,
    parse_where,
    split_select_segments,
)

logger = logging.getLogger(__name__)

# 로그 끝에 붙는 '<n> ms.' 수행 시간 주석
DURATION_PATTERN = re.compile(r"(\d+)\s*ms\.")

_normalizer = SQLNormalizer()


def extract_duration_ms(sql: str) -> int:
    """구문 끝의 '<n> ms.' 주석에서 수행 시간을 읽는다.

    Raises:
        TimingUnavailable: 주석이 없는 경우
    """
    matches = DURATION_PATTERN.findall(sql)
    if not matches:
        raise TimingUnavailable("No elapsed time annotation", sql)
    return int(matches[-1])


def analyze_statement(
    sql_text: str, context: ParseContext = ParseContext()
) -> tuple[StatementOutcome, ParseContext]:
    """구문 하나를 분석해 결과와 갱신된 분석 문맥을 돌려준다.

    인벤토리는 건드리지 않으며, 실패하면 입력 문맥을 그대로 돌려준다.

    Args:
        sql_text: 로그에서 읽은 원본 SQL
        context: 직전 구문까지의 분석 문맥

    Returns:
        (Parsed 또는 Failed, 다음 구문에 넘길 문맥)
    """
    try:
        normalized = _normalizer.normalize(sql_text)
        kind = _normalizer.classify(normalized)

        if kind is StatementKind.SELECT:
            records = [parse_select(segment) for segment in split_select_segments(normalized)]
        elif kind is StatementKind.INSERT:
            records = [parse_insert(normalized)]
        else:
            records = [parse_update(normalized)]

        next_context = ParseContext(records[-1].schema, records[-1].table)

        if kind in (StatementKind.SELECT, StatementKind.UPDATE):
            where_record = _where_record(sql_text, next_context)
            if where_record is not None:
                records.append(where_record)
    except (StatementError, ValueError, IndexError) as e:
        return Failed(raw_text=sql_text, reason=str(e)), context

    return Parsed(kind=kind, records=tuple(records)), next_context


def _where_record(sql_text: str, context: ParseContext) -> Optional[ParsedRecord]:
    # WHERE 절 추출 실패는 구문 전체의 실패로 보지 않는다
    try:
        columns = parse_where(_normalizer.compact(sql_text))
    except (ValueError, IndexError) as e:
        logger.debug("WHERE 절 분석 실패 (무시): %s", e)
        return None
    if not columns or not context.has_table:
        return None
    return ParsedRecord(context.last_used_schema, context.last_used_table, tuple(columns))


class QueryAnalyzer:
    """SQL 구문을 분석해 스키마/테이블/컬럼 인벤토리를 누적하는 분석기.

    인스턴스 하나가 분석 한 번(로그 파일 하나)의 상태를 소유한다.
    여러 스레드에서 같은 인스턴스를 공유하면 안 되며, 파일별로 분석한 뒤
    merge()로 합친다.
    """

    def __init__(self) -> None:
        self._inventory: Inventory = {}
        self._failures = FailureLog()
        self._timing = TimingStats()
        self._context = ParseContext()

    def process_query(self, sql_text: str) -> bool:
        """구문 하나를 처리.

        Args:
            sql_text: 로그에서 읽은 원본 SQL

        Returns:
            분석 성공 여부
        """
        outcome, self._context = analyze_statement(sql_text, self._context)

        if isinstance(outcome, Failed):
            logger.debug("구문 분석 실패: %s (%s)", outcome.raw_text, outcome.reason)
            self._failures.add(outcome.raw_text)
            return False

        for record in outcome.records:
            self.record_columns(record.schema, record.table, list(record.columns))

        try:
            self._timing.record(extract_duration_ms(_normalizer.compact(sql_text)), sql_text)
        except TimingUnavailable:
            pass
        return True

    def record_columns(self, schema: str, table: str, columns: list[str]) -> None:
        """컬럼을 인벤토리의 schema.table 아래에 합친다.

        Args:
            schema: 스키마명
            table: 테이블명 ('(' 이후는 잘라냄)
            columns: 컬럼 표현식 목록

        Raises:
            MalformedStatement: 스키마나 테이블명이 비어 있는 경우
        """
        if not schema:
            raise MalformedStatement("Empty schema name", schema)
        table = _normalizer.clean_table_name(table)
        table_columns = self._inventory.setdefault(schema, {}).setdefault(table, set())
        table_columns.update(_normalizer.clean_columns(columns))

    def reset(self) -> None:
        """인벤토리를 비운다 (실패 목록과 시간 통계는 유지)."""
        self._inventory = {}

    def merge(self, other: "QueryAnalyzer") -> None:
        """다른 분석기의 결과를 합친다.

        인벤토리는 합집합, 실패 목록과 수행 시간 목록은 이어 붙인다.
        """
        for schema, tables in other.inventory.items():
            for table, columns in tables.items():
                self._inventory.setdefault(schema, {}).setdefault(table, set()).update(columns)

        for statement in other.failures.all_failed:
            self._failures.add(statement)

        self._timing.all_durations_ms.extend(other.timing.all_durations_ms)
        # 현재 최대값을 넘는 기록만 이어 붙여 증가 순서를 유지한다
        history = zip(other.timing.durations_at_max, other.timing.statements_at_max)
        for duration_ms, statement in history:
            if duration_ms > self._timing.max_duration_ms:
                self._timing.max_duration_ms = duration_ms
                self._timing.statements_at_max.append(statement)
                self._timing.durations_at_max.append(duration_ms)

    @property
    def inventory(self) -> Inventory:
        return self._inventory

    @property
    def failures(self) -> FailureLog:
        return self._failures

    @property
    def timing(self) -> TimingStats:
        return self._timing

    @property
    def context(self) -> ParseContext:
        return self._context

    @property
    def last_failed_query(self) -> Optional[str]:
        return self._failures.last_failed

    @property
    def all_failed_queries(self) -> list[str]:
        return list(self._failures.all_failed)

    @property
    def max_query_time(self) -> int:
        return self._timing.max_duration_ms

    @property
    def longest_query_strings(self) -> list[str]:
        return list(self._timing.statements_at_max)

    @property
    def average_query_time(self) -> float:
        return self._timing.average_duration_ms

    def inventory_as_dict(self) -> dict[str, dict[str, list[str]]]:
        """인벤토리를 스키마 -> 테이블 -> 정렬된 컬럼 리스트로 변환."""
        return {
            schema: {table: sorted(columns) for table, columns in tables.items()}
            for schema, tables in self._inventory.items()
        }

    def inventory_as_json(self, indent: Optional[int] = None) -> str:
        """인벤토리를 JSON 문자열로 변환."""
        return json.dumps(self.inventory_as_dict(), indent=indent, sort_keys=True)
