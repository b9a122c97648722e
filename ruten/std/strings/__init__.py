import re
from typing import Any, Dict, List

from ruten.builtin_function import BuiltinFunction
from ruten.errors import RutenError
from ruten.types import ListVal


def populate_strings_module() -> Dict[str, Any]:

    def require_strings(name: str, args: List[Any], what: str):
        if not all(isinstance(a, str) for a in args):
            raise RutenError('TypeError', f'{name}() requires {what}')

    def compile_pattern(pattern: str):
        try:
            return re.compile(pattern)
        except re.error as e:
            raise RutenError('RuntimeError', f'invalid regex: {e}')

    def std_upper(args: List[Any]) -> Any:
        require_strings('upper', args, 'a string')
        return args[0].upper()

    def std_lower(args: List[Any]) -> Any:
        require_strings('lower', args, 'a string')
        return args[0].lower()

    def std_trim(args: List[Any]) -> Any:
        require_strings('trim', args, 'a string')
        return args[0].strip()

    def std_split(args: List[Any]) -> Any:
        require_strings('split', args, 'two strings')
        s, sep = args
        if sep == '':
            # Empty separator yields every character, framed by empty strings
            return ListVal([''] + list(s) + [''])
        return ListVal(s.split(sep))

    def std_join(args: List[Any]) -> Any:
        sep, items = args
        if not (isinstance(sep, str) and isinstance(items, ListVal)):
            raise RutenError('TypeError', 'join() requires string and list')
        if not all(isinstance(item, str) for item in items.items):
            raise RutenError('TypeError', 'join() requires list of strings')
        return sep.join(items.items)

    def std_replace(args: List[Any]) -> Any:
        require_strings('replace', args, 'three strings')
        s, old, new = args
        return s.replace(old, new)

    def std_startswith(args: List[Any]) -> Any:
        require_strings('startswith', args, 'two strings')
        return args[0].startswith(args[1])

    def std_endswith(args: List[Any]) -> Any:
        require_strings('endswith', args, 'two strings')
        return args[0].endswith(args[1])

    def std_contains(args: List[Any]) -> Any:
        require_strings('contains', args, 'two strings')
        return args[1] in args[0]

    def std_regex_match(args: List[Any]) -> Any:
        require_strings('regex_match', args, 'two strings')
        pattern, text = args
        return compile_pattern(pattern).search(text) is not None

    def std_regex_find(args: List[Any]) -> Any:
        require_strings('regex_find', args, 'two strings')
        pattern, text = args
        return ListVal([m.group(0) for m in compile_pattern(pattern).finditer(text)])

    return {
        'upper': BuiltinFunction('upper', 1, std_upper),
        'lower': BuiltinFunction('lower', 1, std_lower),
        'trim': BuiltinFunction('trim', 1, std_trim),
        'split': BuiltinFunction('split', 2, std_split),
        'join': BuiltinFunction('join', 2, std_join),
        'replace': BuiltinFunction('replace', 3, std_replace),
        'startswith': BuiltinFunction('startswith', 2, std_startswith),
        'endswith': BuiltinFunction('endswith', 2, std_endswith),
        'contains': BuiltinFunction('contains', 2, std_contains),
        'regex_match': BuiltinFunction('regex_match', 2, std_regex_match),
        'regex_find': BuiltinFunction('regex_find', 2, std_regex_find),
    }
