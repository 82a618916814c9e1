"""빌드 로그 리더."""

import logging
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class LogFileReader:
    """빌드 로그 파일에서 라인을 읽어오는 서비스."""

    def __init__(
        self,
        log_path: str | Path,
        encoding: str = "utf-8",
        allow_missing: bool = False,
    ) -> None:
        """리더 초기화.

        Args:
            log_path: 로그 파일 경로
            encoding: 파일 인코딩
            allow_missing: True면 파일이 없을 때 빈 시퀀스를 반환
        """
        self._log_path = Path(log_path)
        self._encoding = encoding
        self._allow_missing = allow_missing

    @property
    def path(self) -> Path:
        return self._log_path

    def exists(self) -> bool:
        return self._log_path.is_file()

    def read_lines(self) -> Iterator[str]:
        """로그 파일의 라인을 순서대로 반환.

        Yields:
            줄바꿈이 제거된 라인

        Raises:
            FileNotFoundError: 파일이 없고 allow_missing이 False일 때
        """
        if not self.exists():
            if self._allow_missing:
                logger.warning("로그 파일이 없어 건너뜀: %s", self._log_path)
                return
            raise FileNotFoundError(f"Log file not found: {self._log_path}")

        with open(self._log_path, encoding=self._encoding, errors="replace") as f:
            for line in f:
                yield line.rstrip("\r\n")
