"""classify 커맨드 핸들러."""

from __future__ import annotations

import argparse

from tagmap.common import TABLE_TYPES, UserInputError
from tagmap.mapping import build_element_filters, build_tag_index, classify, load_mapping


def configure(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("classify")
    parser.add_argument("--mapping", required=True)
    parser.add_argument("--category", required=True, choices=TABLE_TYPES)
    parser.add_argument("--tag", action="append", default=[], metavar="KEY=VALUE")
    parser.set_defaults(handler=execute)


def execute(args: argparse.Namespace) -> int:
    tags = _parse_tags(args.tag)
    mapping = load_mapping(args.mapping)

    matches = classify(
        build_tag_index(mapping, args.category),
        build_element_filters(mapping),
        tags,
    )
    for match in matches:
        if match.sub_mapping:
            print(f"{match.name}\t{match.sub_mapping}")
        else:
            print(match.name)
    return 0


def _parse_tags(raw_tags: list[str]) -> dict[str, str]:
    tags: dict[str, str] = {}
    for raw in raw_tags:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise UserInputError(f"invalid tag {raw!r}, expected KEY=VALUE")
        tags[key] = value
    return tags
