"""Pipeline 테스트."""

import json
from unittest.mock import MagicMock

from sqlreport.core.models import QueryEvent
from sqlreport.ingestor.block_extractor import LogBlockExtractor
from sqlreport.pipeline import PipelineResult, PipelineStage, ReportPipeline
from sqlreport.processor.query_analyzer import QueryAnalyzer

STATEMENT_MARKER = "[INFO] [talledLocalContainer] INFO org.jdbcdslog.StatementLogger - execute"
CONNECTION_MARKER = "[INFO] [talledLocalContainer] INFO org.jdbcdslog.ConnectionLogger - connect"
RESULT_MARKER = "[INFO] [talledLocalContainer] INFO org.jdbcdslog.ResultSetLogger - row"


def build_log() -> list[str]:
    return [
        "[INFO] Building project",
        CONNECTION_MARKER,
        "[INFO] conn-1",
        STATEMENT_MARKER,
        "[INFO] select id, name from hr.employees where dept = 'x'; 12 ms.",
        RESULT_MARKER,
        "[INFO] [talledLocalContainer] {1, 'a'}",
        STATEMENT_MARKER,
        "[INFO] Total of 1 rows read",
        STATEMENT_MARKER,
        "[INFO] delete from hr.employees; 4 ms.",
        STATEMENT_MARKER,
        "[INFO] Total of 0 rows read",
        "[INFO] BUILD SUCCESS",
    ]


class TestReportPipeline:
    """ReportPipeline 테스트."""

    def test_run_should_read_extract_and_analyze(self) -> None:
        """로그 리더 → 추출기 → 분석기 순서로 실행해야 함."""
        # Given
        mock_log_reader = MagicMock()
        mock_log_reader.read_lines.return_value = ["line"]

        event = QueryEvent(connection_id="c", sql_text="select a from s.t")
        mock_extractor = MagicMock()
        mock_extractor.extract.return_value = iter([event])

        mock_analyzer = MagicMock()
        mock_analyzer.process_query.return_value = True
        mock_analyzer.inventory_as_dict.return_value = {"s": {"t": ["a"]}}

        pipeline = ReportPipeline(
            log_reader=mock_log_reader,
            block_extractor=mock_extractor,
            query_analyzer=mock_analyzer,
        )

        # When
        result = pipeline.run()

        # Then
        assert isinstance(result, PipelineResult)
        mock_log_reader.read_lines.assert_called_once()
        mock_extractor.extract.assert_called_once_with(["line"])
        mock_analyzer.process_query.assert_called_once_with("select a from s.t")
        assert result.parsed_count == 1
        assert result.inventory == {"s": {"t": ["a"]}}

    def test_run_lines_end_to_end(self) -> None:
        """실제 컴포넌트로 이벤트, 인벤토리, 실패, 시간 통계를 만들어야 함."""
        # Given
        pipeline = ReportPipeline(
            log_reader=MagicMock(),
            block_extractor=LogBlockExtractor(),
            query_analyzer=QueryAnalyzer(),
        )

        # When
        result = pipeline.run_lines(build_log())

        # Then
        assert result.event_count == 2
        assert result.parsed_count == 1
        assert result.failed_count == 1
        assert result.success is False
        assert result.inventory == {"hr": {"employees": ["dept", "id", "name"]}}
        assert result.failures.last_failed == "delete from hr.employees; 4 ms."
        assert result.timing.max_duration_ms == 12

    def test_progress_callback_receives_stages(self) -> None:
        """진행 상황 콜백이 단계별로 호출되어야 함."""
        # Given
        stages = []
        mock_log_reader = MagicMock()
        mock_log_reader.read_lines.return_value = build_log()
        pipeline = ReportPipeline(
            log_reader=mock_log_reader,
            block_extractor=LogBlockExtractor(),
            query_analyzer=QueryAnalyzer(),
            progress_callback=lambda info: stages.append(info.stage),
        )

        # When
        pipeline.run()

        # Then
        assert stages[0] is PipelineStage.READING
        assert stages.count(PipelineStage.ANALYZING) == 2
        assert stages[-1] is PipelineStage.COMPLETED


class TestPipelineResult:
    """PipelineResult 테스트."""

    def test_events_as_json(self) -> None:
        """이벤트 단위 JSON은 queries 리스트여야 함."""
        pipeline = ReportPipeline(MagicMock(), LogBlockExtractor(), QueryAnalyzer())
        result = pipeline.run_lines(build_log())

        data = json.loads(result.events_as_json())

        assert data["queries"][0] == {
            "connection": "conn-1",
            "query": "select id, name from hr.employees where dept = 'x'; 12 ms.",
            "results": ["1, 'a'"],
            "total": "1",
        }
        assert data["queries"][1]["total"] == "0"

    def test_to_dict_contains_all_sections(self) -> None:
        """리포트 딕셔너리는 이벤트, 인벤토리, 실패, 시간 통계를 포함해야 함."""
        pipeline = ReportPipeline(MagicMock(), LogBlockExtractor(), QueryAnalyzer())
        result = pipeline.run_lines(build_log())

        data = result.to_dict()

        assert set(data) == {"queries", "inventory", "failures", "timing"}
        assert data["failures"]["all"] == ["delete from hr.employees; 4 ms."]
        assert data["timing"]["max_ms"] == 12
        assert json.loads(result.inventory_as_json()) == data["inventory"]

    def test_to_report(self) -> None:
        """리포트 문자열에 요약과 실패 목록이 있어야 함."""
        pipeline = ReportPipeline(MagicMock(), LogBlockExtractor(), QueryAnalyzer())
        result = pipeline.run_lines(build_log())

        report = result.to_report()

        assert "추출된 쿼리 이벤트: 2건" in report
        assert "분석 실패 구문: 1건" in report
        assert "delete from hr.employees" in report

    def test_empty_result_is_success(self) -> None:
        result = PipelineResult()

        assert result.success is True
        assert result.events_as_dict() == {"queries": []}
