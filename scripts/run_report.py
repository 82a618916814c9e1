#!/usr/bin/env python
"""SQL 리포트 생성 스크립트.

사용법:
    python scripts/run_report.py                          # 설정의 report_file 분석
    python scripts/run_report.py target/cargo.log         # 지정한 로그 파일 분석
    python scripts/run_report.py a.log b.log --no-write   # 여러 파일 분석, 저장 없이 출력만
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# 프로젝트 루트 경로 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from sqlreport.core.config import Settings
from sqlreport.core.logging_config import setup_logging
from sqlreport.ingestor.block_extractor import LogBlockExtractor
from sqlreport.ingestor.log_reader import LogFileReader
from sqlreport.pipeline import PipelineResult, ReportPipeline
from sqlreport.processor.query_analyzer import QueryAnalyzer
from sqlreport.report_writer import ReportWriter

console = Console()
logger = logging.getLogger("sqlreport.scripts.run_report")


def analyze_logs(settings: Settings, log_paths: list[Path]) -> PipelineResult:
    """로그 파일마다 독립된 분석기로 분석한 뒤 결과를 합친다."""
    extractor = LogBlockExtractor(settings)
    merged_analyzer = QueryAnalyzer()
    merged = PipelineResult()

    for log_path in log_paths:
        reader = LogFileReader(
            log_path,
            encoding=settings.log_encoding,
            allow_missing=settings.allow_missing,
        )
        analyzer = QueryAnalyzer()
        pipeline = ReportPipeline(
            log_reader=reader,
            block_extractor=extractor,
            query_analyzer=analyzer,
        )
        with console.status(f"[bold]⚙️  {log_path} 분석 중...[/bold]"):
            result = pipeline.run()

        merged.events.extend(result.events)
        merged.parsed_count += result.parsed_count
        merged_analyzer.merge(analyzer)

    merged.inventory = merged_analyzer.inventory_as_dict()
    merged.failures = merged_analyzer.failures
    merged.timing = merged_analyzer.timing
    return merged


def print_result_panel(result: PipelineResult) -> None:
    """결과를 패널로 출력."""
    result_table = Table(show_header=False, box=None)
    result_table.add_column("항목", style="cyan")
    result_table.add_column("값", style="yellow")

    result_table.add_row("📥 쿼리 이벤트", f"{result.event_count}건")
    result_table.add_row("⚙️  분석 성공", f"{result.parsed_count}건")
    result_table.add_row("❌ 분석 실패", f"{result.failed_count}건")
    result_table.add_row("⏱️  최대 수행 시간", f"{result.timing.max_duration_ms} ms")
    result_table.add_row("⏱️  평균 수행 시간", f"{result.timing.average_duration_ms:.1f} ms")

    console.print(Panel(result_table, title="[bold blue]SQL 리포트 결과[/bold blue]", border_style="green" if result.success else "yellow"))

    if result.inventory:
        inventory_table = Table(show_header=True, header_style="bold magenta")
        inventory_table.add_column("스키마")
        inventory_table.add_column("테이블")
        inventory_table.add_column("컬럼")

        for schema in sorted(result.inventory):
            for table, columns in sorted(result.inventory[schema].items()):
                inventory_table.add_row(schema, table, ", ".join(columns))

        console.print(Panel(inventory_table, title="[bold blue]인벤토리[/bold blue]", border_style="blue"))

    if result.failures.all_failed:
        failure_table = Table(show_header=True, header_style="bold red")
        failure_table.add_column("분석 실패 구문")

        for statement in result.failures.all_failed:
            failure_table.add_row(statement)

        console.print(Panel(failure_table, title="[bold red]실패 목록[/bold red]", border_style="red"))


def main():
    """메인 함수."""
    parser = argparse.ArgumentParser(
        description="빌드 로그의 JDBC 로그에서 SQL 리포트 생성",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
  python scripts/run_report.py target/cargo.log
  SQLREPORT_KEEP_ALL=true python scripts/run_report.py target/cargo.log
        """,
    )
    parser.add_argument(
        "log_files",
        nargs="*",
        type=Path,
        help="분석할 로그 파일 (생략하면 설정의 report_file)",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="리포트 저장 디렉터리",
    )
    parser.add_argument(
        "--no-write",
        action="store_true",
        help="리포트 파일을 저장하지 않고 결과만 출력",
    )

    args = parser.parse_args()

    settings = Settings()
    if args.report_dir:
        settings.report_dir = args.report_dir
    setup_logging(settings.log_level)

    log_paths = args.log_files or [Path(settings.report_file)]

    try:
        result = analyze_logs(settings, log_paths)
    except FileNotFoundError as e:
        console.print(f"[red]❌ {e}[/red]")
        console.print("   [dim]SQLREPORT_ALLOW_MISSING=true 로 누락을 허용할 수 있습니다.[/dim]")
        sys.exit(1)

    console.print("\n")
    print_result_panel(result)

    if not args.no_write:
        path = ReportWriter(settings).write(result)
        console.print(f"\n[green]📂 리포트 저장:[/green] {path}")

    # 분석 실패는 경고로만 취급
    if not result.success:
        logger.warning("분석하지 못한 구문 %d건", result.failed_count)
    sys.exit(0)


if __name__ == "__main__":
    main()
