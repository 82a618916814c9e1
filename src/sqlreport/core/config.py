"""애플리케이션 설정 모듈."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 설정."""

    # 리포트 입출력 설정
    report_dir: str = "target/sqlreport"
    report_file: str = "target/cargo.log"
    output_file: str = "sqlreport.json"
    keep_all: bool = False
    allow_missing: bool = False

    # 로그 파일 설정
    log_encoding: str = "utf-8"
    log_level: str = "INFO"

    # jdbcdslog 마커 패턴 (정규식)
    connection_pattern: str = r"jdbcds.*ConnectionLogger"
    statement_pattern: str = r"jdbcds.*StatementLogger"
    result_pattern: str = r"jdbcds.*ResultSetLogger"
    total_pattern: str = r"Total of (.*) rows read"

    # 페이로드 라인 오프셋 ("[INFO] " 접두어 등을 건너뜀)
    payload_offset: int = 6
    result_offset: int = 31

    # 리포트 제목
    report_name: Optional[str] = "SQL Report"

    model_config = {
        "env_prefix": "SQLREPORT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
