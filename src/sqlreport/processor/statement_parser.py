"""구문별 스키마/테이블/컬럼 추출 루틴.

각 루틴은 정규화된 SQL 문자열을 받아 ParsedRecord를 돌려주는 순수 함수이며,
필요한 구분자가 없으면 MalformedStatement를 발생시킨다.
"""

import re

from sqlreport.core.errors import MalformedStatement
from sqlreport.core.models import ParsedRecord
from sqlreport.processor.sql_normalizer import SQLNormalizer

_normalizer = SQLNormalizer()

SELECT_KEYWORD = "select "
FROM_KEYWORD = " from "
INSERT_KEYWORD = "insert into "
UPDATE_KEYWORD = "update "
SET_KEYWORD = " set "
WHERE_KEYWORD = " where "

# SELECT 컬럼 목록 앞에 붙는 수식어
SELECT_MODIFIER_PATTERN = re.compile(r"^(?:distinct\s+|top\s+\d+\s+)+")

# 한정자가 붙은 참조 (a.col, s.t.col)
QUALIFIED_REF_PATTERN = re.compile(r"[^\s,()]*\.[^\s,()]+")

# 컬럼 목록을 닫는 괄호 뒤의 values 키워드
VALUES_PATTERN = re.compile(r"\)\s*values\b")

# WHERE 절에서 'column = value' 의 '= value' 부분
ASSIGNMENT_VALUE_PATTERN = re.compile(r"=\s*\S*")

# WHERE 절 토큰 중 컬럼이 아닌 키워드
WHERE_KEYWORDS = frozenset(
    {
        "and",
        "or",
        "not",
        "is",
        "null",
        "in",
        "like",
        "between",
        "exists",
        "order",
        "group",
        "by",
        "asc",
        "desc",
        "having",
        "limit",
        "ms",
        "union",
        "all",
        "inner",
        "join",
        "on",
    }
)


def split_qualified_name(name: str, statement: str = "") -> tuple[str, str]:
    """'schema.table' 을 스키마와 테이블로 분리한다.

    Raises:
        MalformedStatement: '.' 이 없거나 스키마가 비어 있는 경우
    """
    if "." not in name:
        raise MalformedStatement(f"Missing schema qualifier: {name!r}", statement)
    schema, table = name.split(".", 1)
    schema = _normalizer.sanitize(schema)
    if not schema:
        raise MalformedStatement(f"Empty schema name: {name!r}", statement)
    return schema, _normalizer.clean_table_name(table)


def split_select_segments(sql: str) -> list[str]:
    """'select ' 가 나오는 위치마다 구문을 나눈다.

    노이즈 토큰 제거 후 UNION 으로 이어진 구문은 'select ... select ...'
    형태가 되므로 각 조각을 별도로 분석한다.
    """
    starts = [m.start() for m in re.finditer(re.escape(SELECT_KEYWORD), sql)]
    if not starts:
        raise MalformedStatement("Missing 'select' keyword", sql)
    bounds = starts[1:] + [len(sql)]
    return [sql[start:end].strip() for start, end in zip(starts, bounds)]


def parse_select(sql: str) -> ParsedRecord:
    """SELECT 구문 하나에서 스키마/테이블/컬럼을 추출한다.

    Args:
        sql: 'select' 로 시작하는 정규화된 구문 조각

    Returns:
        추출된 레코드 (컬럼은 정리 전 표현식)
    """
    body = sql[len("select"):]
    from_at = body.find(FROM_KEYWORD)
    if from_at < 0:
        raise MalformedStatement("Missing 'from' keyword", sql)

    source = body[from_at + len(FROM_KEYWORD):].split()
    if not source:
        raise MalformedStatement("Missing table after 'from'", sql)
    schema, table = split_qualified_name(source[0], sql)

    column_text = SELECT_MODIFIER_PATTERN.sub("", body[:from_at].strip())
    return ParsedRecord(schema, table, tuple(_select_columns(column_text, sql)))


def _select_columns(column_text: str, sql: str) -> list[str]:
    if "(" in column_text and "," not in column_text:
        # count(*), max(col) 같은 단일 함수 호출
        close_at = column_text.find(")", column_text.index("("))
        if close_at < 0:
            raise MalformedStatement("Unbalanced parenthesis in column list", sql)
        return [column_text[column_text.index("(") + 1:close_at]]
    if "." in column_text:
        return QUALIFIED_REF_PATTERN.findall(column_text)
    return [_unwrap_call(_first_word(entry)) for entry in column_text.split(",")]


def parse_insert(sql: str) -> ParsedRecord:
    """INSERT 구문에서 스키마/테이블/컬럼을 추출한다.

    Args:
        sql: 정규화된 INSERT 구문

    Returns:
        추출된 레코드
    """
    if not sql.startswith(INSERT_KEYWORD):
        raise MalformedStatement("Missing 'insert into' keywords", sql)
    rest = sql[len(INSERT_KEYWORD):].lstrip()

    name_match = re.match(r"[^\s(]+", rest)
    if not name_match:
        raise MalformedStatement("Missing table after 'insert into'", sql)
    schema, table = split_qualified_name(name_match.group(0), sql)

    values_match = VALUES_PATTERN.search(rest, name_match.end())
    if not values_match:
        raise MalformedStatement("Missing 'values' keyword after column list", sql)
    column_part = rest[name_match.end():values_match.start() + 1].strip()
    if not (column_part.startswith("(") and column_part.endswith(")")):
        raise MalformedStatement("Missing column list before 'values'", sql)

    columns = [entry.strip() for entry in column_part[1:-1].split(",")]
    return ParsedRecord(schema, table, tuple(columns))


def parse_update(sql: str) -> ParsedRecord:
    """UPDATE 구문에서 스키마/테이블과 SET 절의 대상 컬럼을 추출한다.

    Args:
        sql: 정규화된 UPDATE 구문

    Returns:
        추출된 레코드
    """
    if not sql.startswith(UPDATE_KEYWORD):
        raise MalformedStatement("Missing 'update' keyword", sql)
    rest = sql[len(UPDATE_KEYWORD):].lstrip()

    name = rest.split(None, 1)[0] if rest else ""
    schema, table = split_qualified_name(name, sql)

    set_at = rest.find(SET_KEYWORD)
    if set_at < 0:
        raise MalformedStatement("Missing 'set' keyword", sql)
    assignments = rest[set_at + len(SET_KEYWORD):]
    where_at = assignments.find(WHERE_KEYWORD)
    if where_at >= 0:
        assignments = assignments[:where_at]

    columns = []
    for assignment in assignments.split(","):
        if "=" not in assignment:
            raise MalformedStatement(f"Missing '=' in assignment: {assignment!r}", sql)
        columns.append(assignment.split("=", 1)[0].strip())
    return ParsedRecord(schema, table, tuple(columns))


def parse_where(sql: str) -> list[str]:
    """WHERE 절에서 비교 대상 컬럼명을 추출한다.

    WHERE 절에는 자체 스키마 문맥이 없으므로 테이블 귀속은 호출자가 정한다.

    Args:
        sql: 소문자로 변환된 구문 (노이즈 토큰 제거 전)

    Returns:
        정리된 컬럼명 목록 (WHERE 절이 없으면 빈 리스트)
    """
    where_at = sql.find(WHERE_KEYWORD)
    if where_at < 0:
        return []

    clause = sql[where_at + len(WHERE_KEYWORD):]
    subquery_at = clause.find(SELECT_KEYWORD)
    if subquery_at >= 0:
        clause = clause[:subquery_at]
    semicolon_at = clause.find(";")
    if semicolon_at >= 0:
        clause = clause[:semicolon_at]

    clause = clause.replace("<", "").replace(">", "")
    clause = ASSIGNMENT_VALUE_PATTERN.sub(" ", clause)

    columns: list[str] = []
    for token in clause.split():
        if token.lstrip("(").startswith(("'", '"')):
            continue  # 문자열 리터럴
        name = _normalizer.sanitize(_normalizer.dequalify(token))
        if name and name not in WHERE_KEYWORDS and name not in columns:
            columns.append(name)
    return columns


def _first_word(text: str) -> str:
    words = text.split()
    return words[0] if words else ""


def _unwrap_call(expression: str) -> str:
    """'max(col)' 이면 괄호 안의 'col' 을 돌려준다."""
    open_at = expression.find("(")
    close_at = expression.find(")", open_at + 1)
    if open_at < 0 or close_at < 0:
        return expression
    return expression[open_at + 1:close_at]
