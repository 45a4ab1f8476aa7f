"""Decoding of user-supplied YAML and JSON request bodies."""

from __future__ import annotations

import json
from typing import Any

import yaml

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_JSON_WHITESPACE = " \t\n\r"


class _Loader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as plain strings."""


_Loader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class JSONNumber(str):
    """A JSON number kept as its literal text."""

    def __int__(self) -> int:
        return int(str(self))

    def __float__(self) -> float:
        return float(str(self))

    def __repr__(self) -> str:
        return f"JSONNumber({str(self)!r})"


def unmarshal_yaml(data: bytes | str) -> dict[Any, Any]:
    """Decode YAML whose top level is a mapping; empty input gives an empty dict."""
    try:
        value = yaml.load(data, Loader=_Loader)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse YAML: {exc}") from exc
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"YAML input must be a mapping, got {type(value).__name__}")
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid character in JSON: {name}")


def unmarshal_json(data: bytes | str | None) -> Any:
    """Decode the first JSON value in ``data``, keeping numbers as JSONNumber.

    Empty input decodes to None; anything after the first value is ignored.
    """
    if not data:
        return None
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    start = len(text) - len(text.lstrip(_JSON_WHITESPACE))
    decoder = json.JSONDecoder(
        parse_int=JSONNumber,
        parse_float=JSONNumber,
        parse_constant=_reject_constant,
    )
    try:
        value, _ = decoder.raw_decode(text, start)
    except ValueError as exc:
        raise ValueError(f"failed to parse JSON: {exc}") from exc
    return value