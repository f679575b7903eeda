"""extra-tags 커맨드 핸들러."""

from __future__ import annotations

import argparse

from tagmap.common import TABLE_TYPES
from tagmap.mapping import extra_tags, load_mapping


def configure(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("extra-tags")
    parser.add_argument("--mapping", required=True)
    parser.add_argument("--category", required=True, choices=TABLE_TYPES)
    parser.set_defaults(handler=execute)


def execute(args: argparse.Namespace) -> int:
    mapping = load_mapping(args.mapping)
    for key in sorted(extra_tags(mapping, args.category)):
        print(key)
    return 0
