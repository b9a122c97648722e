"""CLI entry point for the Ruten interpreter.

Usage:
    python -m ruten [-v|-vv|-vvv]                      (interactive REPL)
    python -m ruten [-v...] <program_file>
    python -m ruten --emit-ast <program_file>
    python -m ruten [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .rtn file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Without a program file an interactive
session is started.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from . import repl
from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import RutenError
from .interpreter import Interpreter
from .parser import parse_program


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"error reading file '{path}': {e}", file=sys.stderr)
        sys.exit(1)


def parse_or_exit(source: str) -> Program:
    try:
        return parse_program(source)
    except RutenError as e:
        print(e, file=sys.stderr)
        sys.exit(1)


def execute(program: Program, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    except RutenError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Ruten language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='RUTEN_FILE', help='emit AST JSON for the given .rtn file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Ruten program file (.rtn) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = parse_or_exit(read_source(program_file))
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        try:
            program = ast_from_obj(json.loads(read_source(ast_path)))
        except (ValueError, KeyError, TypeError) as e:
            print(f"error reading file '{ast_path}': {e}", file=sys.stderr)
            sys.exit(1)
        execute(program, args.v)
        return

    # No program: interactive session
    if not args.program:
        interpreter = Interpreter(debug_level=args.v)
        try:
            repl.start(interpreter)
        finally:
            interpreter.close()
        return

    ast_program = parse_or_exit(read_source(Path(args.program)))
    execute(ast_program, args.v)


if __name__ == '__main__':
    main()
