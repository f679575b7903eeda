"""매핑 설정 모델."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List
from typing import Mapping as ReadOnlyMapping

from tagmap.common import Key, TableType, Value

# sentinels, only valid in single value filter rows
NIL_VALUE = "__nil__"
ANY_VALUE = "__any__"


@dataclass(frozen=True)
class OrderedValue:
    """Tag value with its declaration order in the mapping document."""

    value: Value
    order: int


KeyValues = ReadOnlyMapping[Key, tuple[OrderedValue, ...]]


@dataclass(frozen=True)
class Field:
    """Column specification."""

    name: str
    key: Key = ""
    keys: tuple[Key, ...] = ()
    type: str = ""
    args: ReadOnlyMapping[str, Any] = field(default_factory=dict)
    from_member: bool = False


@dataclass(frozen=True)
class Filters:
    """Filter rows by category. ``None`` means the category is not declared."""

    exclude_tags: tuple[tuple[str, ...], ...] | None = None
    exclude_negated_tags: tuple[tuple[str, ...], ...] | None = None
    exclude_regexp_tags: tuple[tuple[str, ...], ...] | None = None
    exclude_negated_regexp_tags: tuple[tuple[str, ...], ...] | None = None


@dataclass(frozen=True)
class TypeMappings:
    """Per geometry type mappings, merged on top of the primary mapping."""

    points: KeyValues = field(default_factory=dict)
    linestrings: KeyValues = field(default_factory=dict)
    polygons: KeyValues = field(default_factory=dict)


@dataclass(frozen=True)
class Table:
    """Destination table definition."""

    name: str
    type: TableType
    mapping: KeyValues = field(default_factory=dict)
    mappings: ReadOnlyMapping[str, KeyValues] = field(default_factory=dict)
    type_mappings: TypeMappings = field(default_factory=TypeMappings)
    fields: tuple[Field, ...] = ()
    filters: Filters | None = None

    def extra_tags(self) -> set[Key]:
        """Keys the columns of this table read from the element tags."""
        tags: set[Key] = set()
        for column in self.fields:
            if column.key:
                tags.add(column.key)
            tags.update(column.keys)
        return tags


@dataclass(frozen=True)
class GeneralizedTable:
    name: str
    source: str
    tolerance: float = 0.0
    sql_filter: str = ""


@dataclass(frozen=True)
class Tags:
    """Tag loading policy."""

    load_all: bool = False
    exclude: tuple[Key, ...] = ()


@dataclass(frozen=True)
class Mapping:
    """Finalized mapping configuration.

    The loader wraps every mapping in ``MappingProxyType``, so a loaded
    Mapping can be shared read-only between threads.
    """

    tables: ReadOnlyMapping[str, Table] = field(default_factory=dict)
    generalized_tables: ReadOnlyMapping[str, GeneralizedTable] = field(default_factory=dict)
    tags: Tags = field(default_factory=Tags)
    # node/way/relation ids mangled into one id space
    single_id_space: bool = False


@dataclass(frozen=True)
class DestTable:
    """Table a tag routes to. An empty ``sub_mapping`` is the primary mapping."""

    name: str
    sub_mapping: str = ""


@dataclass(frozen=True)
class OrderedDestTable:
    dest: DestTable
    order: int

    @property
    def name(self) -> str:
        return self.dest.name

    @property
    def sub_mapping(self) -> str:
        return self.dest.sub_mapping


TagTables = Dict[Key, Dict[Value, List[OrderedDestTable]]]
