"""jdbcdslog 로그 블록 추출기."""

import logging
import re
from enum import Enum
from typing import Iterable, Iterator, Optional

from sqlreport.core.config import Settings
from sqlreport.core.models import QueryEvent

logger = logging.getLogger(__name__)


class ExtractorState(Enum):
    """다음 라인을 어떤 페이로드로 읽을지 나타내는 상태."""

    IDLE = "idle"
    EXPECT_CONNECTION = "expect_connection"
    EXPECT_STATEMENT = "expect_statement"
    EXPECT_RESULT = "expect_result"


class LogBlockExtractor:
    """마커 라인과 그 다음 페이로드 라인을 묶어 QueryEvent로 조립한다.

    마커 라인(ConnectionLogger, StatementLogger, ResultSetLogger)이 나오면
    바로 다음 라인을 해당 타입의 페이로드로 읽는다. StatementLogger 마커
    다음에 "Total of N rows read" 라인이 오면 지금까지 모은 커넥션/구문/결과
    행을 하나의 이벤트로 내보낸다.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        payload_offset: Optional[int] = None,
        result_offset: Optional[int] = None,
    ) -> None:
        """추출기 초기화.

        Args:
            settings: 마커 패턴과 오프셋을 담은 설정 (None이면 기본값)
            payload_offset: 커넥션/구문 페이로드 시작 컬럼 (설정값보다 우선)
            result_offset: 결과 행 페이로드 시작 컬럼 (설정값보다 우선)
        """
        settings = settings or Settings()
        self._connection_pattern = re.compile(settings.connection_pattern)
        self._statement_pattern = re.compile(settings.statement_pattern)
        self._result_pattern = re.compile(settings.result_pattern)
        self._total_pattern = re.compile(settings.total_pattern)
        self._payload_offset = (
            payload_offset if payload_offset is not None else settings.payload_offset
        )
        self._result_offset = (
            result_offset if result_offset is not None else settings.result_offset
        )

    def extract(self, lines: Iterable[str]) -> Iterator[QueryEvent]:
        """라인 시퀀스에서 QueryEvent를 순차적으로 생성한다.

        Args:
            lines: 디코딩된 로그 라인 (한 번만 순회)

        Yields:
            완성된 QueryEvent
        """
        state = ExtractorState.IDLE
        connection = ""
        statement = ""
        results: list[str] = []

        for raw_line in lines:
            line = raw_line.rstrip("\r\n")

            total_match = self._total_pattern.search(line)

            if state is ExtractorState.EXPECT_STATEMENT and total_match:
                if statement:
                    yield self._build_event(
                        connection, statement, results, total_match.group(1)
                    )
                else:
                    logger.debug("구문 없이 행 수 라인이 나와 무시함: %s", line)
                results = []
            elif total_match:
                # 구문 위치가 아닌 곳의 행 수 라인은 페이로드로 읽지 않음
                pass
            elif state is ExtractorState.EXPECT_STATEMENT:
                statement = line[self._payload_offset:].strip()
            elif state is ExtractorState.EXPECT_CONNECTION:
                connection = line[self._payload_offset:].strip()
            elif state is ExtractorState.EXPECT_RESULT:
                row = line[self._result_offset:]
                if row:
                    results.append(row[:-1])

            state = self._next_state(line)

    def _next_state(self, line: str) -> ExtractorState:
        """마커 매칭 결과로 다음 상태를 결정한다."""
        if self._connection_pattern.search(line):
            return ExtractorState.EXPECT_CONNECTION
        if self._statement_pattern.search(line):
            return ExtractorState.EXPECT_STATEMENT
        if self._result_pattern.search(line):
            return ExtractorState.EXPECT_RESULT
        return ExtractorState.IDLE

    @staticmethod
    def _build_event(
        connection: str, statement: str, results: list[str], total_text: str
    ) -> QueryEvent:
        total_text = total_text.strip()
        try:
            row_total: Optional[int] = int(total_text)
        except ValueError:
            row_total = None
        return QueryEvent(
            connection_id=connection,
            sql_text=statement,
            result_rows=list(results),
            row_total=row_total,
            total_text=total_text,
        )
