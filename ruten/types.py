"""Runtime value model for Ruten.

Every runtime datum is one of nine kinds. The scalar kinds map directly
onto Python objects (Number is always a ``float``, String a ``str`` and
Bool a ``bool``); the remaining kinds are represented by the small
classes defined here, plus ``FunctionValue`` (see ``interpreter``) and
``BuiltinFunction`` for native capabilities.

This module also holds the rules shared by the evaluator and the native
modules: truthiness, the display string used by ``print``/``str``, and the
literal text used by the REPL echo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List

from .builtin_function import BuiltinFunction


class NoneVal:
    """Marker object for the Ruten `None` value."""
    def __repr__(self) -> str:
        return 'None'

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, NoneVal)

    def __hash__(self) -> int:
        return hash(NoneVal)


NONE = NoneVal()


@dataclass
class ListVal:
    """An ordered sequence of values."""
    items: List[Any] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"List({self.items!r})"


@dataclass
class DictVal:
    """A mapping from string keys to values.

    Entries keep insertion order so display and iteration are
    deterministic.
    """
    entries: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Dict({self.entries!r})"


@dataclass
class ModuleVal:
    """A native module: a named mapping of members."""
    name: str
    members: Dict[str, Any]

    def __repr__(self) -> str:
        return f"<module {self.name}>"


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, NoneVal):
        return False
    if isinstance(value, float):
        return value != 0.0
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, ListVal):
        return len(value.items) > 0
    return True


def type_name(value: Any) -> str:
    """Return the Ruten kind name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NoneVal):
        return 'None'
    if isinstance(value, ListVal):
        return 'List'
    if isinstance(value, DictVal):
        return 'Dict'
    if isinstance(value, ModuleVal):
        return 'Module'
    if isinstance(value, BuiltinFunction):
        return 'NativeFunction'
    return getattr(value, 'kind', type(value).__name__)


def format_number(value: float) -> str:
    if value.is_integer():
        return f"{value:.0f}"
    return str(value)


def to_string(value: Any) -> str:
    """Convert a value to its display string (as used by print and str)."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NoneVal):
        return 'None'
    if isinstance(value, ListVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    if isinstance(value, DictVal):
        entries = ', '.join(f"{k}: {to_string(v)}" for k, v in value.entries.items())
        return '{' + entries + '}'
    if isinstance(value, ModuleVal):
        return '<module>'
    if isinstance(value, BuiltinFunction):
        return '<native function>'
    return str(value)


def quote_string(text: str) -> str:
    escaped = (
        text.replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('\n', '\\n')
        .replace('\t', '\\t')
        .replace('\r', '\\r')
    )
    return '"' + escaped + '"'


def repr_value(value: Any) -> str:
    """Render a value as Ruten literal source text.

    Unlike `to_string`, strings are quoted and booleans use the keyword
    spelling, so lists and dicts of literals can be parsed back into an
    equal structure. Numbers never use exponent notation since the lexer
    does not accept it.
    """
    if isinstance(value, bool):
        return 'True' if value else 'False'
    if isinstance(value, float):
        text = format_number(value)
        if 'e' in text:
            text = format(Decimal(text), 'f')
        return text
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, ListVal):
        return '[' + ', '.join(repr_value(item) for item in value.items) + ']'
    if isinstance(value, DictVal):
        entries = ', '.join(f"{quote_string(k)}: {repr_value(v)}" for k, v in value.entries.items())
        return '{' + entries + '}'
    return to_string(value)
