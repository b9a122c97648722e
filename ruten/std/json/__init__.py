"""The `json` native module: conversion between JSON text and Ruten values."""

import json
import math
from typing import Any, Dict, List

from ruten.builtin_function import BuiltinFunction
from ruten.errors import RutenError
from ruten.types import NONE, NoneVal, ListVal, DictVal, is_number


def json_to_value(obj: Any) -> Any:
    if obj is None:
        return NONE
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, (int, float)):
        try:
            return float(obj)
        except OverflowError:
            raise RutenError('RuntimeError', 'invalid json number')
    if isinstance(obj, str):
        return obj
    if isinstance(obj, list):
        return ListVal([json_to_value(item) for item in obj])
    if isinstance(obj, dict):
        return DictVal({key: json_to_value(val) for key, val in obj.items()})
    raise RutenError('RuntimeError', 'invalid json value')


def value_to_json(value: Any) -> Any:
    if isinstance(value, NoneVal):
        return None
    if isinstance(value, bool):
        return value
    if is_number(value):
        if not math.isfinite(value):
            raise RutenError('RuntimeError', 'invalid number for json')
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, ListVal):
        return [value_to_json(item) for item in value.items]
    if isinstance(value, DictVal):
        return {key: value_to_json(val) for key, val in value.entries.items()}
    raise RutenError('TypeError', 'cannot convert to json')


def populate_json_module() -> Dict[str, Any]:

    def std_parse(args: List[Any]) -> Any:
        text = args[0]
        if not isinstance(text, str):
            raise RutenError('TypeError', 'parse() requires a string')
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise RutenError('RuntimeError', f'json parse error: {e}')
        return json_to_value(data)

    def std_stringify(args: List[Any]) -> Any:
        return json.dumps(value_to_json(args[0]), ensure_ascii=False, separators=(',', ':'))

    def std_pretty(args: List[Any]) -> Any:
        return json.dumps(value_to_json(args[0]), ensure_ascii=False, indent=2)

    return {
        'parse': BuiltinFunction('parse', 1, std_parse),
        'stringify': BuiltinFunction('stringify', 1, std_stringify),
        'pretty': BuiltinFunction('pretty', 1, std_pretty),
    }
