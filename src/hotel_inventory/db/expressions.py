"""Dialect-specific SQL constructs.

``has_year_record(column, year, available)`` is true when the JSON array in
``column`` holds an object whose ``year`` and ``available`` keys equal the
given values. ``year_record_count(column, available)`` counts the objects
whose ``available`` key equals the value. Values are always bound parameters.
"""

from typing import Any

from sqlalchemy import Boolean, Integer
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.compiler import SQLCompiler
from sqlalchemy.sql.functions import FunctionElement


class has_year_record(FunctionElement[bool]):  # noqa: N801
    type = Boolean()
    inherit_cache = True
    name = "has_year_record"


def _operands(element: has_year_record, compiler: SQLCompiler, **kw: Any) -> list[str]:
    return [compiler.process(clause, **kw) for clause in element.clauses]


@compiles(has_year_record, "postgresql")
def _compile_postgresql(element: has_year_record, compiler: SQLCompiler, **kw: Any) -> str:
    column, year, available = _operands(element, compiler, **kw)
    return (
        f"EXISTS (SELECT 1 FROM jsonb_array_elements({column}) AS yr(value) "
        f"WHERE (yr.value ->> 'year')::integer = {year} "
        f"AND (yr.value ->> 'available')::boolean = {available})"
    )


@compiles(has_year_record)
def _compile_json_each(element: has_year_record, compiler: SQLCompiler, **kw: Any) -> str:
    # SQLite: json_extract yields 1/0 for JSON true/false, matching bound booleans
    column, year, available = _operands(element, compiler, **kw)
    return (
        f"EXISTS (SELECT 1 FROM json_each({column}) AS yr "
        f"WHERE json_extract(yr.value, '$.year') = {year} "
        f"AND json_extract(yr.value, '$.available') = {available})"
    )


class year_record_count(FunctionElement[int]):  # noqa: N801
    type = Integer()
    inherit_cache = True
    name = "year_record_count"


@compiles(year_record_count, "postgresql")
def _count_postgresql(element: year_record_count, compiler: SQLCompiler, **kw: Any) -> str:
    column, available = _operands(element, compiler, **kw)
    return (
        f"(SELECT count(*) FROM jsonb_array_elements({column}) AS yr(value) "
        f"WHERE (yr.value ->> 'available')::boolean = {available})"
    )


@compiles(year_record_count)
def _count_json_each(element: year_record_count, compiler: SQLCompiler, **kw: Any) -> str:
    column, available = _operands(element, compiler, **kw)
    return (
        f"(SELECT count(*) FROM json_each({column}) AS yr "
        f"WHERE json_extract(yr.value, '$.available') = {available})"
    )
