import json

import pytest

from valuerender.core.errors import FileAccessError, FormatError, ParseError
from valuerender.parameters import build_parameters, load_values_file


def test_values_always_present():
    assert build_parameters() == {"Values": {}}


def test_inline_and_file_values(write_file):
    test_json = '{"value3": {"foo": "bar"}}'
    test_file = write_file("test.json", test_json)

    result = build_parameters(
        ["key1=value1", "key2=value2"], [f"key3={test_file}"]
    )

    assert result == {
        "Values": {
            "key1": "value1",
            "key2": "value2",
            "key3": json.loads(test_json),
        }
    }


def test_inline_values_stay_strings():
    result = build_parameters(["port=8080", "debug=true"])
    assert result["Values"] == {"port": "8080", "debug": "true"}


def test_file_values_are_typed(write_file):
    path = write_file("values.yaml", "port: 8080\ndebug: true\nhosts:\n  - a\n  - b\n")
    result = build_parameters(value_files=[f"data={path}"])
    assert result["Values"]["data"] == {"port": 8080, "debug": True, "hosts": ["a", "b"]}


def test_file_value_overrides_inline_value(write_file):
    path = write_file("values.yaml", "foo: bar\n")
    result = build_parameters(["data=inline"], [f"data={path}"])
    assert result["Values"]["data"] == {"foo": "bar"}


def test_missing_values_file(tmp_path):
    with pytest.raises(FileAccessError):
        build_parameters(["key1=value1"], [f"key3={tmp_path / 'does-not-exist.json'}"])


def test_invalid_yaml(write_file):
    path = write_file("broken.yaml", "foo: [unclosed\n")
    with pytest.raises(ParseError):
        load_values_file(path)


def test_top_level_must_be_mapping(write_file):
    path = write_file("list.yaml", "- a\n- b\n")
    with pytest.raises(ParseError, match="mapping"):
        load_values_file(path)


def test_empty_file_is_empty_mapping(write_file):
    path = write_file("empty.yaml", "")
    assert load_values_file(path) == {}


def test_malformed_file_entry():
    with pytest.raises(FormatError):
        build_parameters(value_files=["no-equals-sign"])


def test_stops_at_first_bad_file(write_file, tmp_path):
    good = write_file("good.yaml", "a: 1\n")
    with pytest.raises(FileAccessError, match="missing.yaml"):
        build_parameters(
            value_files=[f"bad={tmp_path / 'missing.yaml'}", f"good={good}"]
        )
