"""구문별 추출 루틴 테스트."""

import pytest

from sqlreport.core.errors import MalformedStatement
from sqlreport.core.models import ParsedRecord
from sqlreport.processor.statement_parser import (
    parse_insert,
    parse_select,
    parse_update,
    parse_where,
    split_qualified_name,
    split_select_segments,
)


class TestParseSelect:
    """SELECT 추출 테스트."""

    def test_simple_column_list(self):
        """쉼표로 나뉜 컬럼 목록을 추출해야 한다."""
        record = parse_select("select col1, col2 from sales.orders where status = 'x'")

        assert record == ParsedRecord("sales", "orders", ("col1", "col2"))

    def test_single_function_call_uses_argument(self):
        """쉼표 없는 함수 호출은 괄호 안 표현식을 컬럼으로 본다."""
        assert parse_select("select max(salary) from hr.employees").columns == ("salary",)
        assert parse_select("select count(*) from hr.employees").columns == ("*",)

    def test_function_call_inside_column_list(self):
        """목록 안의 함수 호출도 괄호 안 컬럼을 사용한다."""
        record = parse_select("select dept, sum(salary) total from hr.employees")

        assert record.columns == ("dept", "salary")

    def test_qualified_columns_with_join(self):
        """한정자가 있으면 한정된 참조만 추출한다."""
        record = parse_select("select o.id, c.name from s.orders o s.customers c on o.cid = c.id")

        assert record.schema == "s"
        assert record.table == "orders"
        assert record.columns == ("o.id", "c.name")

    def test_aliases_and_distinct_are_dropped(self):
        """별칭과 distinct 수식어는 컬럼명에서 제외한다."""
        record = parse_select("select distinct a as x, b y from s.t")

        assert record.columns == ("a", "b")

    def test_table_name_is_sanitized(self):
        """테이블명 뒤의 구두점은 제거한다."""
        assert parse_select("select b from s.u)").table == "u"
        assert parse_select("select b from s.u; 5 ms.").table == "u"

    @pytest.mark.parametrize(
        "sql",
        [
            "select a, b",
            "select a from orders",
            "select a from .orders",
            "select a from ",
        ],
    )
    def test_missing_delimiters_raise(self, sql):
        """from 이나 '.' 이 없으면 MalformedStatement를 발생시켜야 한다."""
        with pytest.raises(MalformedStatement):
            parse_select(sql)

    def test_split_union_segments(self):
        """select 가 여러 번 나오면 조각으로 나눠야 한다."""
        segments = split_select_segments("select a from s.t select b from s.u")

        assert segments == ["select a from s.t", "select b from s.u"]


class TestParseInsert:
    """INSERT 추출 테스트."""

    def test_column_list(self):
        """테이블명 뒤 괄호 안의 컬럼 목록을 추출해야 한다."""
        record = parse_insert("insert into hr.employees (id, name) values (1,'a')")

        assert record == ParsedRecord("hr", "employees", ("id", "name"))

    def test_column_list_without_space(self):
        """테이블명과 괄호 사이에 공백이 없어도 동작해야 한다."""
        record = parse_insert("insert into hr.employees(id,name) values(1,'a')")

        assert record.table == "employees"
        assert record.columns == ("id", "name")

    def test_column_name_containing_values(self):
        """컬럼명 안의 values 는 키워드로 보지 않아야 한다."""
        record = parse_insert("insert into s.t (id, default_values) values (1, 2)")

        assert record == ParsedRecord("s", "t", ("id", "default_values"))

    @pytest.mark.parametrize(
        "sql",
        [
            "insert into hr.employees values (1, 'a')",
            "insert into employees (id) values (1)",
            "insert into hr.employees (id, name)",
            "insert hr.employees (id) values (1)",
        ],
    )
    def test_missing_delimiters_raise(self, sql):
        """values, '.', 컬럼 목록이 없으면 MalformedStatement를 발생시켜야 한다."""
        with pytest.raises(MalformedStatement):
            parse_insert(sql)


class TestParseUpdate:
    """UPDATE 추출 테스트."""

    def test_set_clause_columns(self):
        """SET 절 대입식의 왼쪽 컬럼을 추출해야 한다."""
        record = parse_update("update hr.employees set name = 'a', age = 30 where id = 1")

        assert record == ParsedRecord("hr", "employees", ("name", "age"))

    def test_assignment_without_spaces(self):
        """공백 없는 대입식도 처리해야 한다."""
        record = parse_update("update hr.employees set name='a',age=30")

        assert record.columns == ("name", "age")

    @pytest.mark.parametrize(
        "sql",
        [
            "update hr.employees name = 'a'",
            "update employees set name = 'a'",
            "update hr.employees set name",
        ],
    )
    def test_missing_delimiters_raise(self, sql):
        """set, '.', '=' 이 없으면 MalformedStatement를 발생시켜야 한다."""
        with pytest.raises(MalformedStatement):
            parse_update(sql)


class TestParseWhere:
    """WHERE 절 추출 테스트."""

    def test_no_where_clause(self):
        """WHERE 절이 없으면 빈 리스트를 반환한다."""
        assert parse_where("select a from s.t") == []

    def test_qualified_columns_and_operators(self):
        """한정자와 비교 연산자를 제거하고 컬럼명만 남긴다."""
        result = parse_where("select a from s.t where s.t.status = 'x' and o.id <> 3")

        assert result == ["status", "id"]

    def test_values_without_spaces(self):
        """'=값' 형태도 제거한다."""
        assert parse_where("select a from s.t where a=1 and b='z'") == ["a", "b"]

    def test_stops_at_semicolon(self):
        """';' 뒤의 수행 시간 주석은 무시한다."""
        assert parse_where("select a from s.t where a = 1; 12 ms.") == ["a"]

    def test_stops_at_subquery(self):
        """하위 select 앞에서 멈춘다."""
        result = parse_where("select a from s.t where id in (select x from s.u where y = 2)")

        assert result == ["id"]

    def test_skips_keywords_and_literals(self):
        """키워드와 문자열 리터럴은 컬럼으로 보지 않는다."""
        result = parse_where("select a from s.t where name like 'bob%' or code is not null")

        assert result == ["name", "code"]

    def test_skips_union_and_join_keywords(self):
        """union all, inner join ... on 키워드는 컬럼으로 보지 않는다."""
        union = parse_where("select a from s.t where x = 1 union all select b from s.u")
        join = parse_where("select a from s.t where x = 1 inner join on y")

        assert union == ["x"]
        assert join == ["x", "y"]


class TestSplitQualifiedName:
    """스키마.테이블 분리 테스트."""

    def test_split(self):
        assert split_qualified_name("sales.orders") == ("sales", "orders")

    def test_strip_parenthesis_suffix(self):
        assert split_qualified_name("hr.employees(id,name)") == ("hr", "employees")

    def test_missing_table_raises(self):
        with pytest.raises(MalformedStatement):
            split_qualified_name("sales.(")
