"""Exceptions raised while loading and compiling a tag mapping."""

from __future__ import annotations


class TagMapError(Exception):
    """Base class for tagmap errors."""


class UserInputError(TagMapError):
    """Raised when command line input is invalid."""


class ConfigReadError(TagMapError):
    """Raised when the mapping file cannot be read."""


class ConfigParseError(TagMapError):
    """Raised when the mapping document is structurally invalid."""


class MalformedRuleError(ConfigParseError):
    """Raised when a key/values rule list has a non-string key or value."""


class InvalidPatternError(ConfigParseError):
    """Raised when a regexp filter pattern does not compile."""


class MalformedRuleWarning(UserWarning):
    """Category of non-fatal filter row diagnostics."""
