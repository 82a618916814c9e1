"""분석 결과를 JSON 리포트 파일로 저장."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlreport.core.config import Settings
from sqlreport.pipeline import PipelineResult

logger = logging.getLogger(__name__)


class ReportWriter:
    """PipelineResult를 리포트 디렉터리에 JSON으로 기록한다.

    keep_all 설정이면 실행마다 타임스탬프 하위 디렉터리에 남기고,
    아니면 리포트 디렉터리의 파일 하나를 덮어쓴다.
    """

    def __init__(self, settings: Settings) -> None:
        self._report_dir = Path(settings.report_dir)
        self._output_file = settings.output_file
        self._keep_all = settings.keep_all

    def target_path(self, now: Optional[datetime] = None) -> Path:
        """이번 실행의 리포트 파일 경로."""
        if self._keep_all:
            stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
            return self._report_dir / stamp / self._output_file
        return self._report_dir / self._output_file

    def write(self, result: PipelineResult, now: Optional[datetime] = None) -> Path:
        """리포트를 저장.

        Args:
            result: 파이프라인 실행 결과
            now: keep_all 디렉터리 이름에 쓸 시각 (None이면 현재 시각)

        Returns:
            저장된 파일 경로
        """
        path = self.target_path(now)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=4, ensure_ascii=False)
        logger.info("리포트 저장: %s", path)
        return path
