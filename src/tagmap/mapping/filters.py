"""Element filter compilation.

Filter rows per table::

    exclude_tags:
    - [key, val]              # exclude key = val
    - [key, __nil__]          # exclude features without key
    - [key, __any__]          # exclude features with key
    - [key, val1, val2, ...]  # exclude key in (val1, val2, ...)
    exclude_negated_tags:     # same rows, keep only on match
    exclude_regexp_tags:
    - [key, pattern]          # exclude when pattern matches the value
    exclude_negated_regexp_tags:
    - [key, pattern]          # keep only when pattern matches the value

Categories are applied in the order above and all predicates of a table must
return True for a feature to be kept. Patterns use ``re.search``.
"""

from __future__ import annotations

import re
from typing import Mapping as TagsMapping
from typing import Sequence

from tagmap.common import ElementFilter, InvalidPatternError, Key, MalformedRuleWarning, Value
from tagmap.observability import get_logger

from .models import ANY_VALUE, NIL_VALUE, Mapping, Table

logger = get_logger(__name__)

# (category, regexp rows, exclude on match)
_CATEGORIES = (
    ("exclude_tags", False, True),
    ("exclude_negated_tags", False, False),
    ("exclude_regexp_tags", True, True),
    ("exclude_negated_regexp_tags", True, False),
)


def build_element_filters(mapping: Mapping) -> dict[str, list[ElementFilter]]:
    """Compiles filter predicates per table name.

    Malformed rows are logged and skipped. Raises InvalidPatternError when a
    regexp row does not compile.
    """
    result: dict[str, list[ElementFilter]] = {}
    for name, table in mapping.tables.items():
        if table.filters is None:
            continue
        predicates = compile_table_filters(table)
        if predicates:
            result[name] = predicates
    return result


def compile_table_filters(table: Table) -> list[ElementFilter]:
    predicates: list[ElementFilter] = []
    if table.filters is None:
        return predicates

    for category, is_regexp, exclude_on_match in _CATEGORIES:
        rows = getattr(table.filters, category)
        if rows is None:
            continue
        for row in rows:
            if is_regexp:
                predicate = _compile_regexp_row(table.name, category, row, exclude_on_match)
            else:
                predicate = _compile_value_row(table.name, category, row, exclude_on_match)
            if predicate is not None:
                predicates.append(predicate)
    return predicates


def _compile_value_row(
    table_name: str, category: str, row: Sequence[str], exclude_on_match: bool
) -> ElementFilter | None:
    if len(row) < 2:
        _warn(table_name, category, row, "need at least 1 more value")
        return None
    if len(row) == 2:
        return make_value_filter(row[0], row[1], exclude_on_match)

    if NIL_VALUE in row[1:] or ANY_VALUE in row[1:]:
        _warn(
            table_name,
            category,
            row,
            f"{NIL_VALUE} or {ANY_VALUE} not allowed with more than 1 value",
        )
    return make_value_list_filter(row[0], row[1:], exclude_on_match)


def _compile_regexp_row(
    table_name: str, category: str, row: Sequence[str], exclude_on_match: bool
) -> ElementFilter | None:
    if len(row) != 2:
        _warn(table_name, category, row, "need a [key, regexp] row")
        return None
    try:
        pattern = re.compile(row[1])
    except re.error as exc:
        raise InvalidPatternError(
            f"table '{table_name}' {category} key:{row[0]} invalid regexp {row[1]!r}: {exc}"
        ) from exc
    return make_regexp_filter(row[0], pattern, exclude_on_match)


def make_value_filter(key: Key, value: Value, exclude_on_match: bool) -> ElementFilter:
    """Single value or sentinel row predicate."""

    def element_filter(tags: TagsMapping[Key, Value]) -> bool:
        if key in tags:
            matched = value == ANY_VALUE or tags[key] == value
        else:
            matched = value == NIL_VALUE
        return matched != exclude_on_match

    return element_filter


def make_value_list_filter(
    key: Key, values: Sequence[Value], exclude_on_match: bool
) -> ElementFilter:
    """Row predicate for ``[key, v1, v2, ...]``."""
    candidates = frozenset(values)

    def element_filter(tags: TagsMapping[Key, Value]) -> bool:
        matched = key in tags and tags[key] in candidates
        return matched != exclude_on_match

    return element_filter


def make_regexp_filter(key: Key, pattern: re.Pattern[str], exclude_on_match: bool) -> ElementFilter:
    def element_filter(tags: TagsMapping[Key, Value]) -> bool:
        matched = key in tags and pattern.search(tags[key]) is not None
        return matched != exclude_on_match

    return element_filter


def _warn(table_name: str, category: str, row: Sequence[str], reason: str) -> None:
    key = row[0] if row else ""
    logger.warning(
        "%s: mapping filter error: table '%s' %s key:%s %s",
        MalformedRuleWarning.__name__,
        table_name,
        category,
        key,
        reason,
    )
