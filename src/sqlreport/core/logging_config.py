"""로깅 설정 모듈."""

import logging

from rich.logging import RichHandler

LOG_FORMAT = "%(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """RichHandler 기반으로 루트 로거를 설정한다.

    Args:
        level: 로그 레벨 이름 (DEBUG, INFO, WARNING ...)
    """
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        handlers=[RichHandler(rich_tracebacks=True, show_time=False, show_path=False)],
        force=True,
    )
    logging.getLogger("sqlreport").setLevel(level.upper())
