"""CLI 커맨드 모듈."""

from __future__ import annotations

from types import ModuleType

from tagmap.cli.commands import check, classify, extra_tags

COMMAND_MODULES: list[ModuleType] = [check, classify, extra_tags]

__all__ = ["COMMAND_MODULES"]
