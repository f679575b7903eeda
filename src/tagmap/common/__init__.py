"""Common models and exceptions."""

from .exceptions import (
    ConfigParseError,
    ConfigReadError,
    InvalidPatternError,
    MalformedRuleError,
    MalformedRuleWarning,
    TagMapError,
    UserInputError,
)
from .models import TABLE_TYPES, ElementFilter, Key, TableType, Value

__all__ = [
    "ConfigParseError",
    "ConfigReadError",
    "ElementFilter",
    "InvalidPatternError",
    "Key",
    "MalformedRuleError",
    "MalformedRuleWarning",
    "TABLE_TYPES",
    "TableType",
    "TagMapError",
    "UserInputError",
    "Value",
]
