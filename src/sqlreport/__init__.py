"""빌드 로그의 JDBC 로그에서 스키마/테이블/컬럼 인벤토리를 추출하는 패키지."""

__version__ = "0.1.0"
