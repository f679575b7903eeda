"""check 커맨드 핸들러."""

from __future__ import annotations

import argparse

from tagmap.common import TABLE_TYPES
from tagmap.mapping import build_element_filters, build_tag_index, load_mapping


def configure(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("check")
    parser.add_argument("--mapping", required=True)
    parser.set_defaults(handler=execute)


def execute(args: argparse.Namespace) -> int:
    mapping = load_mapping(args.mapping)
    filters = build_element_filters(mapping)

    print(
        f"[OK] tables={len(mapping.tables)}, "
        f"generalized_tables={len(mapping.generalized_tables)}, "
        f"filtered_tables={len(filters)}"
    )
    for category in TABLE_TYPES:
        if category == "geometry":
            continue
        index = build_tag_index(mapping, category)
        rules = sum(len(dests) for by_value in index.values() for dests in by_value.values())
        print(f"[OK] {category}: keys={len(index)}, rules={rules}")
    return 0
