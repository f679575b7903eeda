"""매핑 로더 테스트."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import pytest

from tagmap.common import ConfigParseError, ConfigReadError, MalformedRuleError
from tagmap.mapping import Field, Mapping, load_mapping, parse_mapping

CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"


def test_load_mapping_from_yaml() -> None:
    mapping = load_mapping(CONFIGS_DIR / "mapping" / "example.yaml")

    assert isinstance(mapping, Mapping)
    assert set(mapping.tables) == {"pois", "roads", "buildings", "landmarks"}
    assert mapping.single_id_space is True
    assert mapping.tags.load_all is False
    assert mapping.tags.exclude == ("created_by", "source")

    gen = mapping.generalized_tables["roads_gen0"]
    assert gen.name == "roads_gen0"
    assert gen.source == "roads"
    assert gen.tolerance == 50.0
    assert gen.sql_filter == "type IN ('motorway', 'trunk')"


def test_table_names_come_from_keys() -> None:
    mapping = load_mapping(CONFIGS_DIR / "mapping" / "example.yaml")
    for name, table in mapping.tables.items():
        assert table.name == name


def test_mapping_is_frozen() -> None:
    mapping = load_mapping(CONFIGS_DIR / "mapping" / "example.yaml")
    with pytest.raises(dataclasses.FrozenInstanceError):
        mapping.tables["roads"].name = "other"  # type: ignore[misc]


def test_load_mapping_missing_file_raises() -> None:
    with pytest.raises(ConfigReadError):
        load_mapping(Path("/nonexistent/mapping.yaml"))


def test_load_mapping_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "mapping.yaml"
    path.write_text("tables: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigReadError):
        load_mapping(path)


def test_load_mapping_keeps_yes_no_as_strings(tmp_path: Path) -> None:
    path = tmp_path / "mapping.yaml"
    path.write_text(
        "use_single_id_space: true\n"
        "tables:\n"
        "  areas:\n"
        "    type: polygon\n"
        "    mapping:\n"
        "      area: [yes, no]\n"
        "    filters:\n"
        "      exclude_tags:\n"
        "      - [oneway, yes]\n",
        encoding="utf-8",
    )
    mapping = load_mapping(path)

    assert mapping.single_id_space is True
    assert [v.value for v in mapping.tables["areas"].mapping["area"]] == ["yes", "no"]
    assert mapping.tables["areas"].filters is not None
    assert mapping.tables["areas"].filters.exclude_tags == (("oneway", "yes"),)


def test_unknown_table_type_is_parse_error() -> None:
    with pytest.raises(ConfigParseError, match="unknown type"):
        parse_mapping({"tables": {"t": {"type": "Point"}}})


def test_missing_table_type_is_parse_error() -> None:
    with pytest.raises(ConfigParseError, match="missing table type"):
        parse_mapping({"tables": {"t": {"mapping": {"a": ["b"]}}}})


def test_non_string_mapping_value_is_malformed_rule() -> None:
    with pytest.raises(MalformedRuleError):
        parse_mapping({"tables": {"t": {"type": "point", "mapping": {"lanes": [2]}}}})


def test_filter_row_not_a_list_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        mapping = parse_mapping(
            {
                "tables": {
                    "t": {
                        "type": "point",
                        "filters": {"exclude_tags": ["access", ["area", "yes"]]},
                    }
                }
            }
        )

    assert mapping.tables["t"].filters is not None
    assert mapping.tables["t"].filters.exclude_tags == (("area", "yes"),)
    assert "MalformedRuleWarning" in caplog.text


def test_filter_category_must_be_list() -> None:
    with pytest.raises(ConfigParseError):
        parse_mapping({"tables": {"t": {"type": "point", "filters": {"exclude_tags": "access"}}}})


def test_unquoted_numbers_in_filter_rows_become_strings(tmp_path: Path) -> None:
    path = tmp_path / "mapping.yaml"
    path.write_text(
        "tables:\n"
        "  roads:\n"
        "    type: linestring\n"
        "    filters:\n"
        "      exclude_tags:\n"
        "      - [layer, 1]\n"
        "      - [tunnel, true]\n"
        "      exclude_negated_tags:\n"
        "      - [lanes, 2, 3]\n",
        encoding="utf-8",
    )
    filters = load_mapping(path).tables["roads"].filters

    assert filters is not None
    assert filters.exclude_tags == (("layer", "1"), ("tunnel", "true"))
    assert filters.exclude_negated_tags == (("lanes", "2", "3"),)


@pytest.mark.parametrize(
    "document",
    [
        "use_single_id_space: no\n",
        "tags:\n  load_all: no\n",
        "use_single_id_space: \"false\"\n",
        "tables:\n  t:\n    type: point\n    columns:\n    - name: role\n      from_member: off\n",
    ],
)
def test_non_boolean_flags_are_parse_errors(tmp_path: Path, document: str) -> None:
    path = tmp_path / "mapping.yaml"
    path.write_text(document, encoding="utf-8")
    with pytest.raises(ConfigParseError, match="not a boolean"):
        load_mapping(path)


def test_boolean_flags_default_to_false() -> None:
    mapping = parse_mapping(
        {"tables": {"t": {"type": "point", "columns": [{"name": "role"}]}}}
    )
    assert mapping.single_id_space is False
    assert mapping.tags.load_all is False
    assert mapping.tables["t"].fields[0].from_member is False


def test_loaded_mapping_collections_are_read_only() -> None:
    mapping = load_mapping(CONFIGS_DIR / "mapping" / "example.yaml")
    roads = mapping.tables["roads"]

    with pytest.raises(TypeError):
        mapping.tables["extra"] = roads  # type: ignore[index]
    with pytest.raises(TypeError):
        roads.mapping["highway"] = ()  # type: ignore[index]
    with pytest.raises(TypeError):
        roads.mappings["railway"]["railway"] = ()  # type: ignore[index]
    with pytest.raises(TypeError):
        roads.fields[0].args["x"] = 1  # type: ignore[index]
    with pytest.raises(TypeError):
        del mapping.generalized_tables["roads_gen0"]  # type: ignore[index]


def test_columns_take_priority_over_deprecated_fields() -> None:
    mapping = parse_mapping(
        {
            "tables": {
                "t": {
                    "type": "point",
                    "columns": [{"name": "name", "key": "name", "type": "string"}],
                    "fields": [{"name": "old", "key": "old", "type": "string"}],
                }
            }
        }
    )
    assert mapping.tables["t"].fields == (Field(name="name", key="name", type="string"),)


def test_deprecated_fields_used_when_columns_absent(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        mapping = parse_mapping(
            {
                "tables": {
                    "t": {
                        "type": "point",
                        "fields": [{"name": "old", "key": "old", "type": "string"}],
                    }
                }
            }
        )
    assert mapping.tables["t"].fields == (Field(name="old", key="old", type="string"),)
    assert "deprecated" in caplog.text


def test_field_attributes_parsed() -> None:
    mapping = parse_mapping(
        {
            "tables": {
                "members": {
                    "type": "relation_member",
                    "columns": [
                        {
                            "name": "role",
                            "type": "member_role",
                            "from_member": True,
                            "args": {"values": ["outer", "inner"]},
                        }
                    ],
                }
            }
        }
    )
    column = mapping.tables["members"].fields[0]
    assert column.from_member is True
    assert column.args == {"values": ["outer", "inner"]}
    assert column.key == ""
    assert column.keys == ()


def test_empty_document_gives_empty_mapping() -> None:
    mapping = parse_mapping({})
    assert mapping.tables == {}
    assert mapping.generalized_tables == {}
    assert mapping.single_id_space is False
