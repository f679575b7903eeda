"""Shared type aliases for tagmap."""

from __future__ import annotations

from typing import Callable, Literal, Mapping

Key = str
Value = str

TableType = Literal[
    "point",
    "linestring",
    "polygon",
    "geometry",
    "relation",
    "relation_member",
]

TABLE_TYPES: tuple[TableType, ...] = (
    "point",
    "linestring",
    "polygon",
    "geometry",
    "relation",
    "relation_member",
)

# feature tags -> True (keep) / False (exclude)
ElementFilter = Callable[[Mapping[Key, Value]], bool]
