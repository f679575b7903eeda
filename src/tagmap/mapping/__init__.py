"""매핑 설정 모듈."""

from .filters import build_element_filters
from .index import build_tag_index
from .loader import MappingLoader, OrderCounter, load_mapping, parse_key_values, parse_mapping
from .models import (
    ANY_VALUE,
    NIL_VALUE,
    DestTable,
    Field,
    Filters,
    GeneralizedTable,
    KeyValues,
    Mapping,
    OrderedDestTable,
    OrderedValue,
    Table,
    Tags,
    TagTables,
    TypeMappings,
)
from .service import classify, element_filters, extra_tags, tables, tag_index

__all__ = [
    "ANY_VALUE",
    "DestTable",
    "Field",
    "Filters",
    "GeneralizedTable",
    "KeyValues",
    "Mapping",
    "MappingLoader",
    "NIL_VALUE",
    "OrderCounter",
    "OrderedDestTable",
    "OrderedValue",
    "Table",
    "TagTables",
    "Tags",
    "TypeMappings",
    "build_element_filters",
    "build_tag_index",
    "classify",
    "element_filters",
    "extra_tags",
    "load_mapping",
    "parse_key_values",
    "parse_mapping",
    "tables",
    "tag_index",
]
