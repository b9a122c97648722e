import math
from typing import Any, Callable, Dict, List

from ruten.builtin_function import BuiltinFunction
from ruten.errors import RutenError
from ruten.types import ListVal, is_number


def _floor(n: float) -> float:
    return float(math.floor(n)) if math.isfinite(n) else n


def _ceil(n: float) -> float:
    return float(math.ceil(n)) if math.isfinite(n) else n


def populate_math_module() -> Dict[str, Any]:
    # Domain errors produce NaN rather than raising, like IEEE float operations

    def number_function(name: str, fn: Callable[[float], float]) -> BuiltinFunction:
        def call(args: List[Any]) -> Any:
            n = args[0]
            if not is_number(n):
                raise RutenError('TypeError', f'{name}() requires a number')
            try:
                return float(fn(n))
            except ValueError:
                return math.nan
        return BuiltinFunction(name, 1, call)

    def numbers_of(name: str, value: Any) -> List[float]:
        if not isinstance(value, ListVal):
            raise RutenError('TypeError', f'{name}() requires a list')
        for item in value.items:
            if not is_number(item):
                raise RutenError('TypeError', f'{name}() requires a list of numbers')
        return value.items

    def std_pow(args: List[Any]) -> Any:
        base, exp = args
        if not (is_number(base) and is_number(exp)):
            raise RutenError('TypeError', 'pow() requires numbers')
        try:
            return math.pow(base, exp)
        except OverflowError:
            return math.inf
        except ValueError:
            return math.nan

    def std_sum(args: List[Any]) -> Any:
        total = 0.0
        for n in numbers_of('sum', args[0]):
            total += n
        return total

    def std_mean(args: List[Any]) -> Any:
        items = numbers_of('mean', args[0])
        if not items:
            raise RutenError('RuntimeError', 'mean() requires non-empty list')
        total = 0.0
        for n in items:
            total += n
        return total / len(items)

    def std_fibonacci(args: List[Any]) -> Any:
        n = args[0]
        if not is_number(n):
            raise RutenError('TypeError', 'fibonacci() requires a number')
        if math.isnan(n) or n <= -1:
            raise RutenError('RuntimeError', 'fibonacci() requires non-negative number')
        if math.isinf(n):
            return math.inf
        a, b = 0.0, 1.0
        for _ in range(int(n)):
            a, b = b, a + b
        return a

    return {
        'pi': math.pi,
        'e': math.e,
        'sqrt': number_function('sqrt', math.sqrt),
        'pow': BuiltinFunction('pow', 2, std_pow),
        'abs': number_function('abs', abs),
        'sin': number_function('sin', math.sin),
        'cos': number_function('cos', math.cos),
        'tan': number_function('tan', math.tan),
        'floor': number_function('floor', _floor),
        'ceil': number_function('ceil', _ceil),
        'sum': BuiltinFunction('sum', 1, std_sum),
        'mean': BuiltinFunction('mean', 1, std_mean),
        'fibonacci': BuiltinFunction('fibonacci', 1, std_fibonacci),
    }
