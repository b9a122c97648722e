from .store import KeyValueStore
from ruten.builtin_function import BuiltinFunction
from ruten.errors import RutenError
from ruten.types import NONE, ListVal, to_string
from typing import Any, Dict, List


def populate_database_module(store: KeyValueStore) -> Dict[str, Any]:
    # Values are stored as their display strings

    def key_arg(name: str, args: List[Any], required: str) -> str:
        if not args:
            raise RutenError('RuntimeError', f'database.{name}() requires {required}')
        key = args[0]
        if not isinstance(key, str):
            raise RutenError('TypeError', 'key must be a string')
        return key

    def std_set(args: List[Any]) -> Any:
        if len(args) < 2:
            raise RutenError('RuntimeError', 'database.set() requires key and value')
        key = key_arg('set', args, 'key and value')
        store.set(key, to_string(args[1]))
        return True

    def std_get(args: List[Any]) -> Any:
        value = store.get(key_arg('get', args, 'key'))
        return NONE if value is None else value

    def std_delete(args: List[Any]) -> Any:
        store.delete(key_arg('delete', args, 'key'))
        return True

    def std_exists(args: List[Any]) -> Any:
        return store.exists(key_arg('exists', args, 'key'))

    def std_keys(args: List[Any]) -> Any:
        return ListVal(store.keys())

    def std_clear(args: List[Any]) -> Any:
        store.clear()
        return True

    return {
        'set': BuiltinFunction('set', None, std_set),
        'get': BuiltinFunction('get', None, std_get),
        'delete': BuiltinFunction('delete', None, std_delete),
        'exists': BuiltinFunction('exists', None, std_exists),
        'keys': BuiltinFunction('keys', None, std_keys),
        'clear': BuiltinFunction('clear', None, std_clear),
    }
