import pytest

from yab.unmarshal import JSONNumber, unmarshal_json, unmarshal_yaml


@pytest.mark.parametrize(
    "data, want",
    [
        (None, None),
        (b"", None),
        (b"{}", {}),
        (b'"hello"', "hello"),
        (b"true", True),
    ],
)
def test_json_values(data, want):
    assert unmarshal_json(data) == want


def test_json_numbers_are_kept_as_numbers():
    got = unmarshal_json(b'{"k1": "v1", "k2": 5}\n')
    assert got == {"k1": "v1", "k2": "5"}
    assert isinstance(got["k2"], JSONNumber)
    assert int(got["k2"]) == 5


def test_json_number_float_conversion():
    got = unmarshal_json(b"[6.5]")
    assert isinstance(got[0], JSONNumber)
    assert float(got[0]) == 6.5


def test_json_invalid():
    with pytest.raises(ValueError, match="failed to parse JSON"):
        unmarshal_json(b"{")


def test_json_whitespace_only_is_an_error():
    with pytest.raises(ValueError):
        unmarshal_json(b"   \n")


def test_json_reads_only_first_value():
    assert unmarshal_json(b'  {"a": "b"}{"c": "d"}') == {"a": "b"}


_BASIC_WANT = {
    "str": "v1",
    "int": 5,
    "bool": True,
    "int64": 9223372036854775807,
    "uint64": 18446744073709551615,
    "float": 6.5,
}


def test_yaml_basic_types():
    data = (
        b"\nstr: v1\nint: 5\nbool: true\n"
        b"int64: 9223372036854775807\nuint64: 18446744073709551615\nfloat: 6.5"
    )
    assert unmarshal_yaml(data) == _BASIC_WANT


def test_yaml_inline_objects():
    assert unmarshal_yaml(b"\nobj:\n  1: 2\n  3: 5.6") == {"obj": {1: 2, 3: 5.6}}


def test_yaml_json_is_yaml():
    data = (
        b'{"str": "v1", "int": 5, "bool": true, '
        b'"int64": 9223372036854775807, "uint64": 18446744073709551615, '
        b'"float": 6.5, "obj": {"k1": "v1"}}'
    )
    assert unmarshal_yaml(data) == {**_BASIC_WANT, "obj": {"k1": "v1"}}


def test_yaml_json_with_trailing_comma():
    assert unmarshal_yaml(b'{\n  "str": "v1",\n}') == {"str": "v1"}


def test_yaml_json_with_int_keys():
    data = b'{\n  "obj": {\n    1: 2,\n    3: 4,\n  }\n}'
    assert unmarshal_yaml(data) == {"obj": {1: 2, 3: 4}}


def test_yaml_invalid():
    with pytest.raises(ValueError):
        unmarshal_yaml(b'{"str" "asd"}')


def test_yaml_empty_input_gives_empty_mapping():
    assert unmarshal_yaml(b"") == {}


def test_yaml_non_mapping_is_rejected():
    with pytest.raises(ValueError):
        unmarshal_yaml(b"- a\n- b\n")


def test_yaml_timestamps_stay_strings():
    assert unmarshal_yaml(b"when: 2001-12-14\n") == {"when": "2001-12-14"}