"""Tree-walking interpreter for the Ruten language.

The interpreter executes a `Program` AST directly against an
`Environment`. Statement execution returns a control-flow signal rather
than raising: `None` for normal completion, a `ReturnSignal` carrying the
returned value, or one of the `BREAK` / `CONTINUE` markers. Every
statement list stops at the first signal and hands it to its enclosing
construct, so loops consume break/continue and function calls consume
returns. Errors, by contrast, are `RutenError` exceptions that propagate
unchanged to the caller.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from .ast import (
    Program, ImportStmt, Assign, FuncDef, ReturnStmt, IfStmt, WhileStmt,
    ForStmt, BreakStmt, ContinueStmt, ExprStmt, Literal, Ident, BinaryOp,
    UnaryOp, Call, ListLit, DictLit, Index, Member, Node
)
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import RutenError, ReturnSignal, BREAK, CONTINUE
from .parser import parse_program
from .std import ModuleLoader
from .types import (
    NONE, ListVal, DictVal, ModuleVal,
    is_number, is_truthy, to_string, repr_value, type_name,
)


class FunctionValue:
    """Represents a user-defined Ruten function.

    `closure` is a snapshot of the environment taken when the `def`
    statement ran (after the function's own name was bound), so later
    changes to outer variables are not visible inside the function.
    """
    kind = 'Function'

    def __init__(self, name: str, params: List[str], body: List[Node], closure: Optional[Environment] = None):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure

    def __str__(self) -> str:
        return '<function>'

    def __repr__(self) -> str:
        return f"<function {self.name}>"


def truncate(value: float) -> float:
    if not math.isfinite(value):
        return value
    return float(math.trunc(value))


def number_from_text(text: str, builtin: str) -> float:
    # Surrounding whitespace and digit separators are not part of a number literal
    if '_' in text or text != text.strip():
        raise RutenError('RuntimeError', f'invalid literal for {builtin}()')
    try:
        return float(text)
    except ValueError:
        raise RutenError('RuntimeError', f'invalid literal for {builtin}()')


class Interpreter:
    """Core interpreter that executes Ruten ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', loader: Optional[ModuleLoader] = None):
        self.global_env = Environment()
        self.loader = loader if loader is not None else ModuleLoader()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        self.load_builtins()

    def debug(self, msg: str):
        if self.debug_fp is not None:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp is not None:
            self.debug_fp.close()
            self.debug_fp = None

    def load_builtins(self):
        # Built-in functions: print, len, range, str, int, float

        def std_print(args: List[Any]) -> Any:
            print(' '.join(to_string(a) for a in args))
            return NONE

        def std_len(args: List[Any]) -> Any:
            value = args[0]
            if isinstance(value, str):
                return float(len(value))
            if isinstance(value, ListVal):
                return float(len(value.items))
            if isinstance(value, DictVal):
                return float(len(value.entries))
            raise RutenError('TypeError', 'len() argument must be a string, list, or dict')

        def std_range(args: List[Any]) -> Any:
            if len(args) < 1 or len(args) > 3:
                raise RutenError('RuntimeError', 'range() takes 1 to 3 arguments')
            if not all(is_number(a) for a in args):
                raise RutenError('TypeError', 'range() arguments must be numbers')
            if len(args) == 1:
                start, end, step = 0.0, args[0], 1.0
            elif len(args) == 2:
                start, end, step = args[0], args[1], 1.0
            else:
                start, end, step = args
            items: List[Any] = []
            current = start
            while (step > 0 and current < end) or (step < 0 and current > end):
                items.append(current)
                current += step
            return ListVal(items)

        def std_str(args: List[Any]) -> Any:
            return to_string(args[0])

        def std_int(args: List[Any]) -> Any:
            value = args[0]
            if is_number(value):
                return truncate(value)
            if isinstance(value, str):
                return truncate(number_from_text(value, 'int'))
            raise RutenError('TypeError', 'int() argument must be a number or string')

        def std_float(args: List[Any]) -> Any:
            value = args[0]
            if is_number(value):
                return value
            if isinstance(value, str):
                return number_from_text(value, 'float')
            raise RutenError('TypeError', 'float() argument must be a number or string')

        builtins = [
            BuiltinFunction('print', None, std_print),
            BuiltinFunction('len', 1, std_len),
            BuiltinFunction('range', None, std_range),
            BuiltinFunction('str', 1, std_str),
            BuiltinFunction('int', 1, std_int),
            BuiltinFunction('float', 1, std_float),
        ]
        for builtin in builtins:
            self.global_env.define(builtin.name, builtin)

    # Public API
    def run(self, program: Program) -> None:
        """Execute a whole program in the global environment.

        A signal that escapes the top level (such as a stray `return`)
        simply ends the program.
        """
        self.execute_block(program.body, self.global_env)

    def run_interactive(self, program: Program) -> Optional[Any]:
        """Run one line of interactive input.

        If the input is exactly one bare expression statement its value is
        returned; otherwise the input runs as a program and None is
        returned.
        """
        if len(program.body) == 1 and isinstance(program.body[0], ExprStmt):
            return self.evaluate(program.body[0].expr, self.global_env)
        self.run(program)
        return None

    def execute_block(self, statements: List[Node], env: Environment) -> Any:
        for stmt in statements:
            signal = self.execute(stmt, env)
            if signal is not None:
                return signal
        return None

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr, env)
            return None
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {repr_value(value)}")
            return None
        if isinstance(node, ImportStmt):
            module = self.loader.resolve(node.name)
            env.define(node.name, module)
            if self.debug_level >= 1:
                self.debug(f"import {node.name}")
            return None
        if isinstance(node, FuncDef):
            func_value = FunctionValue(node.name, list(node.params), list(node.body))
            env.define(node.name, func_value)
            func_value.closure = env.snapshot()
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return None
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else NONE
            return ReturnSignal(value)
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {repr_value(cond)} -> {truthy}")
            if truthy:
                return self.execute_block(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute_block(node.else_branch, env)
            return None
        if isinstance(node, WhileStmt):
            while is_truthy(self.evaluate(node.condition, env)):
                signal = self.execute_block(node.body, env)
                if isinstance(signal, ReturnSignal):
                    return signal
                if signal is BREAK:
                    break
            return None
        if isinstance(node, ForStmt):
            iterable = self.evaluate(node.iterable, env)
            if isinstance(iterable, ListVal):
                items = list(iterable.items)
            elif isinstance(iterable, str):
                items = list(iterable)
            else:
                raise RutenError('TypeError', 'for loop requires an iterable')
            for item in items:
                env.set(node.var, item)
                if self.debug_level >= 3:
                    self.debug(f"for {node.var} = {repr_value(item)}")
                signal = self.execute_block(node.body, env)
                if isinstance(signal, ReturnSignal):
                    return signal
                if signal is BREAK:
                    break
            return None
        if isinstance(node, BreakStmt):
            return BREAK
        if isinstance(node, ContinueStmt):
            return CONTINUE
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            if node.literal_type == 'None':
                return NONE
            if node.literal_type == 'Number':
                return float(node.value)
            return node.value
        if isinstance(node, Ident):
            return env.get(node.name)
        if isinstance(node, BinaryOp):
            # Both operands are always evaluated, `and`/`or` included
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            return self.apply_unary_op(node.op, operand)
        if isinstance(node, Call):
            func = self.evaluate(node.func, env)
            args = [self.evaluate(arg, env) for arg in node.args]
            return self.call_function(func, args)
        if isinstance(node, ListLit):
            return ListVal([self.evaluate(el, env) for el in node.elements])
        if isinstance(node, DictLit):
            entries: Dict[str, Any] = {}
            for key_node, value_node in node.entries:
                key = self.evaluate(key_node, env)
                if not isinstance(key, str):
                    key = to_string(key)
                entries[key] = self.evaluate(value_node, env)
            return DictVal(entries)
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            return self.index_value(target, index)
        if isinstance(node, Member):
            target = self.evaluate(node.target, env)
            if isinstance(target, ModuleVal):
                if node.name not in target.members:
                    raise RutenError('NameError', f'module has no member: {node.name}')
                return target.members[node.name]
            raise RutenError('TypeError', 'member access on non-module')
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == 'and':
            return is_truthy(a) and is_truthy(b)
        if op == 'or':
            return is_truthy(a) or is_truthy(b)
        if is_number(a) and is_number(b):
            if op == '+':
                return a + b
            if op == '-':
                return a - b
            if op == '*':
                return a * b
            if op == '/':
                if b == 0.0:
                    raise RutenError('RuntimeError', 'division by zero')
                return a / b
            if op == '%':
                # Floating remainder takes the sign of the dividend
                try:
                    return math.fmod(a, b)
                except ValueError:
                    return math.nan
            if op == '==':
                return a == b
            if op == '!=':
                return a != b
            if op == '<':
                return a < b
            if op == '<=':
                return a <= b
            if op == '>':
                return a > b
            if op == '>=':
                return a >= b
        elif isinstance(a, str) and isinstance(b, str):
            if op == '+':
                return a + b
            if op == '==':
                return a == b
            if op == '!=':
                return a != b
        elif isinstance(a, bool) and isinstance(b, bool):
            if op == '==':
                return a == b
            if op == '!=':
                return a != b
        raise RutenError('TypeError', f'unsupported operation: {type_name(a)} {op} {type_name(b)}')

    def apply_unary_op(self, op: str, value: Any) -> Any:
        if op == 'not':
            return not is_truthy(value)
        if op == '-' and is_number(value):
            return -value
        raise RutenError('TypeError', f'unsupported unary operation: {op} {type_name(value)}')

    def index_value(self, target: Any, index: Any) -> Any:
        if isinstance(target, ListVal) and is_number(index):
            position = self.resolve_position(index, len(target.items))
            if position is None:
                raise RutenError('RuntimeError', 'list index out of range')
            return target.items[position]
        if isinstance(target, DictVal) and isinstance(index, str):
            if index not in target.entries:
                raise RutenError('RuntimeError', f'key not found: {index}')
            return target.entries[index]
        if isinstance(target, str) and is_number(index):
            position = self.resolve_position(index, len(target))
            if position is None:
                raise RutenError('RuntimeError', 'string index out of range')
            return target[position]
        raise RutenError('TypeError', 'invalid index operation')

    def resolve_position(self, index: float, length: int) -> Optional[int]:
        if not math.isfinite(index):
            return None
        position = int(index)
        if position < 0:
            position += length
        if position < 0 or position >= length:
            return None
        return position

    def call_function(self, func: Any, args: List[Any]) -> Any:
        if isinstance(func, BuiltinFunction):
            # Check arity; None means the function validates its own arguments
            if func.arity is not None and len(args) != func.arity:
                plural = '' if func.arity == 1 else 's'
                raise RutenError('RuntimeError', f"{func.name}() takes {func.arity} argument{plural}")
            return func.fn(args)
        if isinstance(func, FunctionValue):
            if len(args) != len(func.params):
                raise RutenError(
                    'RuntimeError',
                    f"function expects {len(func.params)} arguments, got {len(args)}",
                )
            if self.debug_level >= 1:
                self.debug(f"call {func.name}({', '.join(repr_value(a) for a in args)})")
            # Run on a copy of the captured environment; the caller's environment is untouched
            call_env = func.closure.snapshot()
            call_env.push_scope()
            for param, arg in zip(func.params, args):
                call_env.define(param, arg)
            signal = self.execute_block(func.body, call_env)
            # A stray break/continue ends the body like falling off its end
            if isinstance(signal, ReturnSignal):
                return signal.value
            return NONE
        raise RutenError('TypeError', 'not a callable object')


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Convenience function to parse and run a Ruten program from source.

    Returns the interpreter so callers can inspect the resulting globals.
    """
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    finally:
        interpreter.close()
    return interpreter


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and run a Ruten source file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
