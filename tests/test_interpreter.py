import pytest

from ruten.ast import Program, FuncDef, ForStmt, WhileStmt, Ident, ListLit, Literal
from ruten.errors import RutenError
from ruten.interpreter import FunctionValue, Interpreter, run_file, run_program
from ruten.parser import parse_program


def output_of(source, capsys):
    run_program(source)
    return capsys.readouterr().out.splitlines()


def statement(source):
    program = parse_program(source)
    assert len(program.body) == 1
    return program.body[0]


def runtime_error(source):
    with pytest.raises(RutenError) as excinfo:
        run_program(source)
    return excinfo.value


def num(n):
    return Literal(float(n), 'Number')


def bound(interp, name):
    return any(name in scope for scope in interp.global_env.scopes)


def test_arithmetic(capsys):
    assert output_of('print(2 * 3 + 1, 7 / 2, 10 % 3, -7 % 3, 2 - 5)', capsys) == ['7 3.5 1 -1 -3']


def test_string_concatenation(capsys):
    assert output_of('name = "ru" + "ten"\nprint("hello " + name)', capsys) == ['hello ruten']


def test_division_by_zero():
    err = runtime_error('print(1 / 0)')
    assert err.kind == 'RuntimeError'
    assert str(err) == 'runtime error: division by zero'


def test_division_by_float_zero():
    err = runtime_error('1 / 0.0')
    assert err.kind == 'RuntimeError'
    assert str(err) == 'runtime error: division by zero'


def test_modulo_by_zero_is_nan(capsys):
    assert output_of('print(5 % 0)', capsys) == ['nan']


def test_mixed_operand_types_are_type_errors():
    assert str(runtime_error('"a" * 2')) == 'type error: unsupported operation: String * Number'
    assert str(runtime_error('1 == "1"')) == 'type error: unsupported operation: Number == String'
    assert str(runtime_error('"a" < "b"')) == 'type error: unsupported operation: String < String'
    assert str(runtime_error('None == None')) == 'type error: unsupported operation: None == None'


def test_equality(capsys):
    assert output_of('print(1 == 1.0, "a" != "b", True == False)', capsys) == ['true true false']


def test_logical_operators_return_bools(capsys):
    assert output_of('print(1 and "x", 0 or "", not 0, not [1])', capsys) == ['true false true false']


def test_logical_operators_evaluate_both_sides(capsys):
    source = (
        'def noisy():\n'
        '    print("evaluated")\n'
        '    return True\n'
        'if True:\n'
        '    result = False and noisy()\n'
        '    print(result)\n'
    )
    assert output_of(source, capsys) == ['evaluated', 'false']


def test_or_evaluates_right_side_after_true():
    err = runtime_error('True or fail()')
    assert err.kind == 'NameError'
    assert str(err) == 'name error: undefined variable: fail'


def test_unary_operators(capsys):
    assert output_of('x = 4\nprint(-x, --x, not x)', capsys) == ['-4 4 false']
    assert str(runtime_error('-"x"')) == 'type error: unsupported unary operation: - String'


def test_undefined_variable():
    err = runtime_error('print(y)')
    assert err.kind == 'NameError'
    assert str(err) == 'name error: undefined variable: y'


def test_calling_a_non_callable():
    assert str(runtime_error('x = 1\nx()')) == 'type error: not a callable object'


def test_user_function_arity():
    err = runtime_error('def f(a):\n    return a\nif True:\n    f(1, 2)\n')
    assert str(err) == 'runtime error: function expects 1 arguments, got 2'


def test_native_function_arity():
    assert str(runtime_error('len("a", "b")')) == 'runtime error: len() takes 1 argument'


def test_function_without_return_yields_none(capsys):
    source = 'def f():\n    x = 1\nif True:\n    print(f())\n'
    assert output_of(source, capsys) == ['None']


def test_function_sees_its_own_name():
    interp = Interpreter()
    interp.run(parse_program('def f(n):\n    return f\n'))
    func = interp.global_env.get('f')
    assert isinstance(func, FunctionValue)
    assert func.closure.get('f') is func
    assert interp.run_interactive(parse_program('f(1)')) is func


def test_recursion(capsys):
    body = parse_program('if n < 2:\n    return 1\nelse:\n    return n * fact(n - 1)\n').body
    program = Program([
        FuncDef('fact', ['n'], body),
        statement('print(fact(5), fact(10))'),
    ])
    Interpreter().run(program)
    assert capsys.readouterr().out.splitlines() == ['120 3628800']


def test_function_parameters_and_locals_do_not_leak(capsys):
    source = (
        'def f(a):\n'
        '    b = a * 2\n'
        '    return b\n'
        'if True:\n'
        '    print(f(3))\n'
    )
    interp = run_program(source)
    assert capsys.readouterr().out.splitlines() == ['6']
    assert not bound(interp, 'a')
    assert not bound(interp, 'b')


def test_function_cannot_modify_caller_variables(capsys):
    source = (
        'count = 1\n'
        'def bump():\n'
        '    count = count + 1\n'
        '    return count\n'
        'if True:\n'
        '    print(bump(), bump(), count)\n'
    )
    assert output_of(source, capsys) == ['2 2 1']


def test_closure_snapshot_ignores_later_assignments(capsys):
    interp = Interpreter()
    interp.run(parse_program('x = 1\ndef get():\n    return x\n'))
    interp.run(parse_program('x = 2'))
    assert interp.run_interactive(parse_program('get()')) == 1.0
    assert interp.run_interactive(parse_program('x')) == 2.0


def test_top_level_return_stops_program(capsys):
    assert output_of('print(1)\nreturn\nprint(2)\n', capsys) == ['1']


def test_top_level_break_stops_program(capsys):
    assert output_of('print(1)\nbreak\nprint(2)\n', capsys) == ['1']


def test_stray_break_in_function_ends_body(capsys):
    source = (
        'def f():\n'
        '    print("start")\n'
        '    break\n'
        '    print("unreachable")\n'
        'if True:\n'
        '    print(f())\n'
        '    print("after")\n'
    )
    assert output_of(source, capsys) == ['start', 'None', 'after']


def test_break_only_exits_innermost_loop(capsys):
    inner = ForStmt('j', ListLit([num(1), num(2), num(3)]), [
        statement('if j == 2:\n    break\n'),
        statement('print(i, j)'),
    ])
    outer = ForStmt('i', ListLit([num(1), num(2)]), [inner, statement('print("end", i)')])
    Interpreter().run(Program([outer]))
    assert capsys.readouterr().out.splitlines() == ['1 1', 'end 1', '2 1', 'end 2']


def test_continue_skips_rest_of_iteration(capsys):
    loop = WhileStmt(parse_program('i < 5').body[0].expr, [
        statement('i = i + 1'),
        statement('if i % 2 == 0:\n    continue\n'),
        statement('print(i)'),
    ])
    Interpreter().run(Program([statement('i = 0'), loop]))
    assert capsys.readouterr().out.splitlines() == ['1', '3', '5']


def test_return_from_inside_loop(capsys):
    body = [
        ForStmt('x', Ident('xs'), [statement('if x > 2:\n    return x\n')]),
        statement('return -1'),
    ]
    program = Program([
        FuncDef('first_big', ['xs'], body),
        statement('print(first_big([1, 3, 5]), first_big([1]))'),
    ])
    Interpreter().run(program)
    assert capsys.readouterr().out.splitlines() == ['3 -1']


def test_for_over_string_characters(capsys):
    assert output_of('for ch in "héy":\n    print(ch)\n', capsys) == ['h', 'é', 'y']


def test_for_variable_remains_after_loop(capsys):
    source = 'i = 99\nfor i in range(3):\n    y = i\nif True:\n    print(i, y)\n'
    assert output_of(source, capsys) == ['2 2']


def test_for_over_empty_list_leaves_variable_unbound():
    interp = run_program('for item in []:\n    print(item)\n')
    assert not bound(interp, 'item')


def test_for_requires_iterable():
    assert str(runtime_error('for x in 5:\n    print(x)\n')) == 'type error: for loop requires an iterable'
    assert str(runtime_error('for x in {"a": 1}:\n    print(x)\n')) == 'type error: for loop requires an iterable'


def test_while_condition_reevaluated(capsys):
    assert output_of('n = 0\nwhile n < 3:\n    n = n + 1\n    print(n)\n', capsys) == ['1', '2', '3']


def test_if_without_else_false_branch(capsys):
    assert output_of('if 0:\n    print("no")\n', capsys) == []


def test_list_indexing(capsys):
    assert output_of('xs = [10, 20, 30]\nprint(xs[0], xs[-1], xs[1.7])', capsys) == ['10 30 20']
    assert str(runtime_error('[1, 2][5]')) == 'runtime error: list index out of range'
    assert str(runtime_error('[1, 2][-3]')) == 'runtime error: list index out of range'


def test_string_indexing(capsys):
    assert output_of('s = "abc"\nprint(s[0], s[-1])', capsys) == ['a c']
    assert str(runtime_error('"abc"[10]')) == 'runtime error: string index out of range'


def test_dict_indexing(capsys):
    assert output_of('d = {"a": 1, 2: "two"}\nprint(d["a"], d["2"])', capsys) == ['1 two']
    assert str(runtime_error('{"a": 1}["b"]')) == 'runtime error: key not found: b'


def test_invalid_index_operations():
    assert str(runtime_error('5[0]')) == 'type error: invalid index operation'
    assert str(runtime_error('[1]["0"]')) == 'type error: invalid index operation'
    assert str(runtime_error('{"a": 1}[0]')) == 'type error: invalid index operation'


def test_dict_keeps_insertion_order_and_last_duplicate_wins(capsys):
    assert output_of('print({"b": 1, "a": 2, "b": 3})', capsys) == ['{b: 3, a: 2}']


def test_member_access_errors():
    assert str(runtime_error('x = 1\nx.y')) == 'type error: member access on non-module'
    err = runtime_error('import math\nmath.nope')
    assert err.kind == 'NameError'
    assert str(err) == 'name error: module has no member: nope'


def test_unknown_import():
    err = runtime_error('import nope')
    assert err.kind == 'ImportError'
    assert str(err) == "import error: no module named 'nope'"


def test_print_multiple_values(capsys):
    assert output_of('print(True, None, [1, "a"], "x")\nprint()', capsys) == ['true None [1, a] x', '']


def test_functions_are_first_class(capsys):
    source = (
        'def double(x):\n'
        '    return x * 2\n'
        'def apply(f, v):\n'
        '    return f(v)\n'
        'if True:\n'
        '    op = double\n'
        '    print(apply(op, 21), op)\n'
    )
    assert output_of(source, capsys) == ['42 <function>']


def test_run_interactive_returns_expression_value():
    interp = Interpreter()
    assert interp.run_interactive(parse_program('x = 5')) is None
    assert interp.run_interactive(parse_program('x * 2')) == 10.0
    assert interp.run_interactive(parse_program('x + 1\nx + 2')) is None


def test_error_leaves_earlier_effects(capsys):
    interp = Interpreter()
    with pytest.raises(RutenError):
        interp.run(parse_program('a = 1\nprint("before")\nb = 1 / 0\nc = 3'))
    assert capsys.readouterr().out == 'before\n'
    assert interp.global_env.get('a') == 1.0
    assert not bound(interp, 'c')


def test_debug_log_levels(tmp_path):
    log_path = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=3, debug_file=str(log_path))
    interp.run(parse_program('import math\nx = 1\ndef f(a):\n    return a\nif f(x):\n    y = 2\n'))
    interp.close()
    log = log_path.read_text(encoding='utf-8').splitlines()
    assert 'import math' in log
    assert 'assign x = 1' in log
    assert 'define function f(a)' in log
    assert 'call f(1)' in log
    assert 'if condition 1 -> True' in log


def test_debug_level_one_skips_assignments(tmp_path):
    log_path = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=1, debug_file=str(log_path))
    interp.run(parse_program('x = "s"\nimport json\n'))
    interp.close()
    assert log_path.read_text(encoding='utf-8').splitlines() == ['import json']


def test_no_debug_file_without_verbosity(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    interp = Interpreter()
    interp.run(parse_program('x = 1'))
    interp.close()
    assert not (tmp_path / 'debug.txt').exists()


def test_unknown_node_type_is_rejected():
    with pytest.raises(NotImplementedError):
        Interpreter().run(Program([object()]))


def test_run_file(tmp_path, capsys):
    path = tmp_path / 'script.rtn'
    path.write_text('greeting = "from file"\nprint(greeting)\n', encoding='utf-8')
    interp = run_file(str(path))
    assert capsys.readouterr().out == 'from file\n'
    assert interp.global_env.get('greeting') == 'from file'
