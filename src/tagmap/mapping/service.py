"""Classification query surface over a finalized Mapping."""

from __future__ import annotations

from typing import Mapping as TagsMapping

from tagmap.common import ElementFilter, Key, TableType, Value

from .filters import build_element_filters
from .index import build_tag_index
from .models import ANY_VALUE, DestTable, Field, Mapping, OrderedDestTable, TagTables


def tag_index(mapping: Mapping, category: TableType) -> TagTables:
    """Tag index for ``category``. Rebuilt on every call."""
    return build_tag_index(mapping, category)


def element_filters(mapping: Mapping) -> dict[str, list[ElementFilter]]:
    """Filter predicates per table name. Rebuilt on every call."""
    return build_element_filters(mapping)


def tables(mapping: Mapping, category: TableType) -> dict[str, tuple[Field, ...]]:
    """Columns of every table matching ``category`` (or of type geometry)."""
    return {
        name: table.fields
        for name, table in mapping.tables.items()
        if table.type == category or table.type == "geometry"
    }


def extra_tags(mapping: Mapping, category: TableType) -> set[Key]:
    """Tag keys that must be loaded even when load_all is off.

    Covers the keys used by columns and the keys of ``exclude_tags`` rows.
    """
    tags: set[Key] = set()
    for table in mapping.tables.values():
        if table.type != category and table.type != "geometry":
            continue
        tags.update(table.extra_tags())
        if table.filters is not None and table.filters.exclude_tags is not None:
            for row in table.filters.exclude_tags:
                if row:
                    tags.add(row[0])
    return tags


def classify(
    index: TagTables,
    filters: TagsMapping[str, list[ElementFilter]],
    tags: TagsMapping[Key, Value],
) -> list[OrderedDestTable]:
    """Destination tables for a tag set, in declaration order.

    Each ``DestTable`` is reported once with its first matching rule. Tables
    whose filters exclude the tag set are dropped.
    """
    matches: list[OrderedDestTable] = []
    for key, value in tags.items():
        by_value = index.get(key)
        if by_value is None:
            continue
        matches.extend(by_value.get(value, ()))
        if value != ANY_VALUE:
            matches.extend(by_value.get(ANY_VALUE, ()))

    seen: set[DestTable] = set()
    result: list[OrderedDestTable] = []
    for match in sorted(matches, key=lambda m: m.order):
        if match.dest in seen:
            continue
        seen.add(match.dest)
        if all(predicate(tags) for predicate in filters.get(match.name, ())):
            result.append(match)
    return result
