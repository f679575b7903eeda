"""YAML 기반 매핑 설정 로딩."""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable

import yaml

from tagmap.common import (
    TABLE_TYPES,
    ConfigParseError,
    ConfigReadError,
    MalformedRuleError,
    MalformedRuleWarning,
)
from tagmap.observability import get_logger

from .models import (
    Field,
    Filters,
    GeneralizedTable,
    KeyValues,
    Mapping,
    OrderedValue,
    Table,
    Tags,
    TypeMappings,
)

logger = get_logger(__name__)

_BOOL_TAG = "tag:yaml.org,2002:bool"

_FILTER_CATEGORIES = (
    "exclude_tags",
    "exclude_negated_tags",
    "exclude_regexp_tags",
    "exclude_negated_regexp_tags",
)


class MappingLoader(yaml.SafeLoader):
    """SafeLoader that only resolves true/false as booleans, so yes/no/on/off stay tag values."""


MappingLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
MappingLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class OrderCounter:
    """Hands out declaration order numbers for one parse pass."""

    def __init__(self) -> None:
        self._next = 0

    def next(self) -> int:
        order = self._next
        self._next += 1
        return order


def load_mapping(config_path: Path | str) -> Mapping:
    """mapping.yaml 로딩 후 Mapping 반환. 실패 시 ConfigReadError/ConfigParseError."""
    path = Path(config_path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f, Loader=MappingLoader)
    except OSError as exc:
        raise ConfigReadError(f"cannot read mapping {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigReadError(f"invalid YAML in mapping {path}: {exc}") from exc

    mapping = parse_mapping(data if data is not None else {})
    logger.info(
        "mapping loaded: %s (tables=%d, generalized_tables=%d)",
        path,
        len(mapping.tables),
        len(mapping.generalized_tables),
    )
    return mapping


def parse_mapping(data: Any) -> Mapping:
    """Builds the finalized Mapping from a loaded YAML document."""
    root = _as_dict(data, "mapping document")
    counter = OrderCounter()

    tables = {
        str(name): _build_table(str(name), raw, counter)
        for name, raw in _as_dict(root.get("tables"), "tables").items()
    }
    generalized_tables = {
        str(name): _build_generalized_table(str(name), raw)
        for name, raw in _as_dict(root.get("generalized_tables"), "generalized_tables").items()
    }

    tags_raw = _as_dict(root.get("tags"), "tags")
    tags = Tags(
        load_all=_bool(tags_raw.get("load_all"), "tags.load_all", False),
        exclude=_string_tuple(tags_raw.get("exclude"), "tags.exclude"),
    )

    return Mapping(
        tables=MappingProxyType(tables),
        generalized_tables=MappingProxyType(generalized_tables),
        tags=tags,
        single_id_space=_bool(root.get("use_single_id_space"), "use_single_id_space", False),
    )


def parse_key_values(entries: Iterable[tuple[Any, Any]], counter: OrderCounter) -> KeyValues:
    """(key, [value, ...]) 쌍을 문서 순서대로 KeyValues로 변환."""
    result: dict[str, list[OrderedValue]] = {}
    for key, values in entries:
        if not isinstance(key, str):
            raise MalformedRuleError(f"mapping key {key!r} not a string")
        if not isinstance(values, list):
            raise MalformedRuleError(f"mapping values of key '{key}' not a list")
        for value in values:
            if not isinstance(value, str):
                raise MalformedRuleError(f"mapping value {value!r} of key '{key}' not a string")
            result.setdefault(key, []).append(OrderedValue(value=value, order=counter.next()))
    return MappingProxyType({key: tuple(values) for key, values in result.items()})


def _build_table(name: str, raw: Any, counter: OrderCounter) -> Table:
    table_raw = _as_dict(raw, f"table '{name}'")

    table_type = table_raw.get("type")
    if table_type is None:
        raise ConfigParseError(f"missing table type for table '{name}'")
    if table_type not in TABLE_TYPES:
        raise ConfigParseError(f"unknown type {table_type!r} for table '{name}'")

    mapping = _key_values(table_raw.get("mapping"), counter, f"{name}.mapping")

    mappings = {}
    for sub_name, sub_raw in _as_dict(table_raw.get("mappings"), f"{name}.mappings").items():
        sub = _as_dict(sub_raw, f"{name}.mappings.{sub_name}")
        mappings[str(sub_name)] = _key_values(
            sub.get("mapping"), counter, f"{name}.mappings.{sub_name}.mapping"
        )

    type_raw = _as_dict(table_raw.get("type_mappings"), f"{name}.type_mappings")
    type_mappings = TypeMappings(
        points=_key_values(type_raw.get("points"), counter, f"{name}.type_mappings.points"),
        linestrings=_key_values(
            type_raw.get("linestrings"), counter, f"{name}.type_mappings.linestrings"
        ),
        polygons=_key_values(type_raw.get("polygons"), counter, f"{name}.type_mappings.polygons"),
    )

    columns_raw = table_raw.get("columns")
    if columns_raw is None and table_raw.get("fields") is not None:
        logger.warning("table '%s': 'fields' is deprecated, use 'columns'", name)
        columns_raw = table_raw.get("fields")

    filters = None
    if table_raw.get("filters") is not None:
        filters = _build_filters(table_raw["filters"], name)

    return Table(
        name=name,
        type=table_type,
        mapping=mapping,
        mappings=MappingProxyType(mappings),
        type_mappings=type_mappings,
        fields=_build_fields(columns_raw, name),
        filters=filters,
    )


def _build_fields(raw: Any, table_name: str) -> tuple[Field, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigParseError(f"columns of table '{table_name}' not a list")

    fields = []
    for item in raw:
        column = _as_dict(item, f"column of table '{table_name}'")
        key = column.get("key")
        fields.append(
            Field(
                name=str(column.get("name", "")),
                key=str(key) if key is not None else "",
                keys=_string_tuple(column.get("keys"), f"{table_name}.columns.keys"),
                type=str(column.get("type", "")),
                args=MappingProxyType(
                    dict(_as_dict(column.get("args"), f"{table_name}.columns.args"))
                ),
                from_member=_bool(
                    column.get("from_member"), f"{table_name}.columns.from_member", False
                ),
            )
        )
    return tuple(fields)


def _build_filters(raw: Any, table_name: str) -> Filters:
    filters_raw = _as_dict(raw, f"filters of table '{table_name}'")
    rows: dict[str, tuple[tuple[str, ...], ...] | None] = {}
    for category in _FILTER_CATEGORIES:
        category_raw = filters_raw.get(category)
        if category_raw is None:
            rows[category] = None
            continue
        if not isinstance(category_raw, list):
            raise ConfigParseError(f"{table_name}.filters.{category} not a list")
        category_rows = []
        for row in category_raw:
            filter_row = _filter_row(row)
            if filter_row is None:
                logger.warning(
                    "%s: mapping filter error: table '%s' %s row %r not a list of scalars",
                    MalformedRuleWarning.__name__,
                    table_name,
                    category,
                    row,
                )
                continue
            category_rows.append(filter_row)
        rows[category] = tuple(category_rows)
    return Filters(**rows)


def _filter_row(row: Any) -> tuple[str, ...] | None:
    """Filter row as strings. Unquoted numbers and booleans are converted with str()."""
    if not isinstance(row, list):
        return None
    values = []
    for item in row:
        if isinstance(item, bool):
            values.append(str(item).lower())
        elif isinstance(item, (str, int, float)):
            values.append(str(item))
        else:
            return None
    return tuple(values)


def _build_generalized_table(name: str, raw: Any) -> GeneralizedTable:
    table_raw = _as_dict(raw, f"generalized table '{name}'")
    try:
        tolerance = float(table_raw.get("tolerance", 0.0))
    except (TypeError, ValueError) as exc:
        raise ConfigParseError(f"invalid tolerance for generalized table '{name}'") from exc
    return GeneralizedTable(
        name=name,
        source=str(table_raw.get("source", "")),
        tolerance=tolerance,
        sql_filter=str(table_raw.get("sql_filter") or ""),
    )


def _key_values(raw: Any, counter: OrderCounter, where: str) -> KeyValues:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        raise MalformedRuleError(f"{where} not a mapping")
    return parse_key_values(raw.items(), counter)


def _as_dict(raw: Any, where: str) -> dict[Any, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigParseError(f"{where} not a mapping")
    return raw


def _string_tuple(raw: Any, where: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigParseError(f"{where} not a list")
    for item in raw:
        if not isinstance(item, str):
            raise ConfigParseError(f"{where}: value {item!r} not a string")
    return tuple(raw)


def _bool(raw: Any, where: str, default: bool) -> bool:
    if raw is None:
        return default
    if not isinstance(raw, bool):
        raise ConfigParseError(f"{where}: {raw!r} not a boolean, use true or false")
    return raw
