"""SQL 구문 분석 모듈."""

from sqlreport.processor.query_analyzer import QueryAnalyzer, analyze_statement
from sqlreport.processor.sql_normalizer import SQLNormalizer

__all__ = ["QueryAnalyzer", "SQLNormalizer", "analyze_statement"]
