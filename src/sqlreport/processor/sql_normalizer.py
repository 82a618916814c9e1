"""SQL 정규화기 - 노이즈 토큰 제거, 구문 분류, 식별자 정리."""

import re

from sqlreport.core.errors import MalformedStatement, UnclassifiableStatement
from sqlreport.core.models import StatementKind


class SQLNormalizer:
    """SQL 정규화기."""

    # 스키마/테이블/컬럼 식별에 영향이 없는 노이즈 토큰 (순서대로 제거)
    # 단어 경계를 보지 않는 단순 부분 문자열 제거라서 식별자 내부도 잘릴 수 있다
    NOISE_TOKENS = (
        "union ",
        "all ",
        "inner ",
        "join ",
        "is ",
        "not ",
        "null ",
        "(nolock)",
        "and ",
        "getdate()",
        "between ",
        "order ",
        "by ",
        "asc ",
        "in ",
    )

    # 식별자에 허용되는 문자 이외의 문자
    NON_IDENTIFIER_PATTERN = re.compile(r"[^a-zA-Z0-9_]")

    def normalize(self, sql: str) -> str:
        """소문자 변환, 공백 정리 후 노이즈 토큰을 제거한다.

        Args:
            sql: 원본 SQL 문자열

        Returns:
            정규화된 SQL
        """
        result = self.compact(sql)
        for token in self.NOISE_TOKENS:
            result = result.replace(token, "")
        return result

    def compact(self, sql: str) -> str:
        """소문자로 변환하고 연속 공백/줄바꿈을 공백 하나로 줄인다."""
        return " ".join(sql.lower().split())

    def classify(self, sql: str) -> StatementKind:
        """첫 토큰으로 구문 타입을 판별한다.

        Args:
            sql: 정규화된 SQL 문자열

        Returns:
            구문 타입

        Raises:
            UnclassifiableStatement: select/insert/update가 아닌 경우
        """
        parts = sql.split(None, 1)
        command = parts[0] if parts else ""
        for kind in StatementKind:
            if command == kind.value:
                return kind
        raise UnclassifiableStatement(
            f"Unsupported statement type: {command or '<empty>'}", sql
        )

    def sanitize(self, identifier: str) -> str:
        """영문자, 숫자, 밑줄만 남기고 앞쪽 숫자는 제거한다."""
        return self.NON_IDENTIFIER_PATTERN.sub("", identifier).lstrip("0123456789")

    def dequalify(self, identifier: str) -> str:
        """'a.b.col' 형태에서 마지막 '.' 뒤의 이름만 남긴다."""
        return identifier.rsplit(".", 1)[-1]

    def clean_table_name(self, table: str) -> str:
        """테이블명에서 '(' 이후를 잘라내고 정리한다.

        Raises:
            MalformedStatement: 정리 후 테이블명이 비어 있는 경우
        """
        cleaned = self.sanitize(table.split("(", 1)[0])
        if not cleaned:
            raise MalformedStatement(f"Empty table name: {table!r}", table)
        return cleaned

    def clean_columns(self, columns: list[str] | tuple[str, ...]) -> list[str]:
        """컬럼 표현식 목록을 인벤토리에 넣을 컬럼명으로 정리한다.

        한정자가 붙은('.' 포함) 항목이 하나라도 있으면 한정된 항목만 남긴다.
        각 항목은 마지막 '.' 뒤 이름만 남기고 허용 문자만 남기며,
        빈 이름과 중복은 제거한다.
        """
        if any("." in column for column in columns):
            columns = [column for column in columns if "." in column]

        cleaned: list[str] = []
        for column in columns:
            name = self.sanitize(self.dequalify(column.strip()))
            if name and name not in cleaned:
                cleaned.append(name)
        return cleaned
