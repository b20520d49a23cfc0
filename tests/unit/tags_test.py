"""Unit tests for struct tag helpers."""

from docify.core.tags import extract_enum_values, json_name, lookup_tag, parse_tag_settings


class TestLookupTag:
    def test_finds_each_key(self) -> None:
        tag = 'json:"name,omitempty" validation:"required" gorm:"column:name"'
        assert lookup_tag(tag, "json") == "name,omitempty"
        assert lookup_tag(tag, "validation") == "required"
        assert lookup_tag(tag, "gorm") == "column:name"

    def test_missing_key_is_empty(self) -> None:
        assert lookup_tag('json:"id"', "xml") == ""
        assert lookup_tag("", "json") == ""

    def test_unquotes_escapes(self) -> None:
        assert lookup_tag(r'doc:"say \"hi\""', "doc") == 'say "hi"'

    def test_stops_at_malformed_tag(self) -> None:
        assert lookup_tag('json:id gorm:"x"', "gorm") == ""


class TestParseTagSettings:
    def test_upper_cases_keys_and_keeps_values(self) -> None:
        settings = parse_tag_settings("column:user_id;primaryKey;type:enum('a','b');fk:users.id")
        assert settings == {
            "COLUMN": "user_id",
            "PRIMARYKEY": "PRIMARYKEY",
            "TYPE": "enum('a','b')",
            "FK": "users.id",
        }

    def test_values_may_contain_colons(self) -> None:
        assert parse_tag_settings("default:12:30:00") == {"DEFAULT": "12:30:00"}

    def test_escaped_separator_joins_parts(self) -> None:
        assert parse_tag_settings(r"check:a > 0\;b;index") == {"CHECK": "a > 0;b", "INDEX": "INDEX"}

    def test_empty_string(self) -> None:
        assert parse_tag_settings("") == {}


class TestJsonName:
    def test_first_segment(self) -> None:
        assert json_name('json:"price,string"', "Price") == "price"

    def test_defaults_to_field_name(self) -> None:
        assert json_name('gorm:"column:x"', "X") == "X"
        assert json_name('json:",omitempty"', "X") == "X"

    def test_keeps_dash(self) -> None:
        assert json_name('json:"-"', "Secret") == "-"


class TestEnumValues:
    def test_parses_quoted_values(self) -> None:
        assert extract_enum_values("enum('active','inactive')") == ["active", "inactive"]

    def test_trims_spaces(self) -> None:
        assert extract_enum_values("enum('a', 'b')") == ["a", "b"]

    def test_non_enum(self) -> None:
        assert extract_enum_values("varchar(20)") == []
