"""Tag index construction: tag key/value -> destination tables."""

from __future__ import annotations

from tagmap.common import TableType

from .models import DestTable, KeyValues, Mapping, OrderedDestTable, Table, TagTables


def build_tag_index(mapping: Mapping, category: TableType) -> TagTables:
    """Builds a fresh tag index for one geometry category.

    Tables of type ``geometry`` take part in every category. Sub-mappings are
    added under their own ``DestTable``; the type mapping matching the category
    extends the primary mapping. Nothing is deduplicated, and the order of
    tables with the same key/value only follows table iteration order, so
    callers needing a total order sort on ``OrderedDestTable.order``.
    """
    index: TagTables = {}
    for name, table in mapping.tables.items():
        if table.type != "geometry" and table.type != category:
            continue

        _add_from_mapping(index, table.mapping, DestTable(name=name))

        for sub_name, sub_mapping in table.mappings.items():
            _add_from_mapping(index, sub_mapping, DestTable(name=name, sub_mapping=sub_name))

        type_mapping = _type_mapping(table, category)
        if type_mapping:
            _add_from_mapping(index, type_mapping, DestTable(name=name))
    return index


def _type_mapping(table: Table, category: TableType) -> KeyValues:
    if category == "point":
        return table.type_mappings.points
    if category == "linestring":
        return table.type_mappings.linestrings
    if category == "polygon":
        return table.type_mappings.polygons
    return {}


def _add_from_mapping(index: TagTables, key_values: KeyValues, dest: DestTable) -> None:
    for key, values in key_values.items():
        by_value = index.setdefault(key, {})
        for ordered in values:
            by_value.setdefault(ordered.value, []).append(
                OrderedDestTable(dest=dest, order=ordered.order)
            )
