"""SQL 리포트 파이프라인 오케스트레이터."""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from sqlreport.core.models import FailureLog, QueryEvent, TimingStats

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """파이프라인 단계."""

    READING = "reading"
    ANALYZING = "analyzing"
    COMPLETED = "completed"


@dataclass
class ProgressInfo:
    """진행 상황 정보."""

    stage: PipelineStage
    current: int = 0
    message: str = ""
    connection_id: str = ""


# 진행 상황 콜백 타입
ProgressCallback = Callable[[ProgressInfo], None]


@dataclass
class PipelineResult:
    """파이프라인 실행 결과."""

    events: list[QueryEvent] = field(default_factory=list)
    parsed_count: int = 0
    inventory: dict[str, dict[str, list[str]]] = field(default_factory=dict)
    failures: FailureLog = field(default_factory=FailureLog)
    timing: TimingStats = field(default_factory=TimingStats)

    @property
    def event_count(self) -> int:
        return len(self.events)

    @property
    def failed_count(self) -> int:
        return len(self.failures.all_failed)

    @property
    def success(self) -> bool:
        """분석 실패 구문이 없는지 여부."""
        return self.failed_count == 0

    def events_as_dict(self) -> dict[str, list[dict[str, Any]]]:
        """이벤트 단위 직렬화 ({"queries": [...]})."""
        return {"queries": [event.to_dict() for event in self.events]}

    def events_as_json(self, indent: Optional[int] = 4) -> str:
        return json.dumps(self.events_as_dict(), indent=indent)

    def inventory_as_json(self, indent: Optional[int] = 4) -> str:
        return json.dumps(self.inventory, indent=indent, sort_keys=True)

    def to_dict(self) -> dict[str, Any]:
        """리포트 파일로 저장할 전체 결과."""
        return {
            **self.events_as_dict(),
            "inventory": self.inventory,
            "failures": {
                "last": self.failures.last_failed,
                "all": list(self.failures.all_failed),
            },
            "timing": {
                "max_ms": self.timing.max_duration_ms,
                "average_ms": self.timing.average_duration_ms,
                "longest_queries": list(self.timing.statements_at_max),
                "count": len(self.timing.all_durations_ms),
            },
        }

    def to_report(self) -> str:
        """파이프라인 결과를 리포트 문자열로 변환.

        Returns:
            리포트 문자열
        """
        table_count = sum(len(tables) for tables in self.inventory.values())
        lines = [
            "=== SQL 리포트 결과 ===",
            f"추출된 쿼리 이벤트: {self.event_count}건",
            f"분석 성공 구문: {self.parsed_count}건",
            f"분석 실패 구문: {self.failed_count}건",
            f"스키마: {len(self.inventory)}개, 테이블: {table_count}개",
            f"최대 수행 시간: {self.timing.max_duration_ms} ms",
            f"평균 수행 시간: {self.timing.average_duration_ms:.1f} ms",
        ]

        if self.failures.all_failed:
            lines.append("\n=== 분석 실패 목록 ===")
            for statement in self.failures.all_failed:
                lines.append(f"  - {statement}")

        return "\n".join(lines)


class ReportPipeline:
    """로그 라인 → 쿼리 이벤트 → SQL 분석 파이프라인."""

    def __init__(
        self,
        log_reader: Any,
        block_extractor: Any,
        query_analyzer: Any,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """파이프라인 초기화.

        Args:
            log_reader: 로그 리더 (read_lines() 제공)
            block_extractor: 로그 블록 추출기
            query_analyzer: SQL 구문 분석기
            progress_callback: 진행 상황 콜백 함수
        """
        self._log_reader = log_reader
        self._block_extractor = block_extractor
        self._query_analyzer = query_analyzer
        self._progress_callback = progress_callback

    def _notify_progress(self, info: ProgressInfo) -> None:
        """진행 상황을 알림."""
        if self._progress_callback:
            self._progress_callback(info)

    def run(self) -> PipelineResult:
        """로그 리더의 라인으로 파이프라인을 실행.

        Returns:
            파이프라인 실행 결과
        """
        self._notify_progress(ProgressInfo(
            stage=PipelineStage.READING,
            message="빌드 로그 읽는 중..."
        ))
        return self.run_lines(self._log_reader.read_lines())

    def run_lines(self, lines: Iterable[str]) -> PipelineResult:
        """주어진 라인 시퀀스로 파이프라인을 실행.

        Args:
            lines: 디코딩된 로그 라인

        Returns:
            파이프라인 실행 결과
        """
        result = PipelineResult()

        for event in self._block_extractor.extract(lines):
            result.events.append(event)
            self._notify_progress(ProgressInfo(
                stage=PipelineStage.ANALYZING,
                current=len(result.events),
                message="SQL 분석 중...",
                connection_id=event.connection_id,
            ))
            if self._query_analyzer.process_query(event.sql_text):
                result.parsed_count += 1

        result.inventory = self._query_analyzer.inventory_as_dict()
        result.failures = self._query_analyzer.failures
        result.timing = self._query_analyzer.timing

        logger.info(
            "쿼리 이벤트 %d건 분석 완료 (실패 %d건)",
            result.event_count,
            result.failed_count,
        )
        self._notify_progress(ProgressInfo(
            stage=PipelineStage.COMPLETED,
            current=result.event_count,
            message="파이프라인 완료!"
        ))

        return result
