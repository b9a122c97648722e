"""Interactive read-eval-print loop for Ruten.

All lines entered in one session share a single interpreter, so variables,
functions and imports persist from line to line. A line consisting of a
single expression has its value echoed as `=> <literal>`.
"""

import os
import subprocess
import sys
from typing import Any, Callable, Optional

from termcolor import colored

from .errors import RutenError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse
from .types import repr_value


BANNER_TITLE = 'ruten repl v2.0.0'

BANNER = """a small dynamically typed scripting language

type 'exit' or 'quit' to exit, 'help' for help
"""

HELP_TEXT = """
ruten repl commands:
  help       - show this help message
  clear      - clear the screen
  exit/quit  - exit the repl

language features:
  - variables: x = 10 or name = "ruten"
  - functions: def add(a, b): return a + b
  - control flow: if, while, for
  - data structures: [1, 2, 3], {{"key": "value"}}
  - modules: import math

available modules:
  {modules}
"""


def clear_screen():
    command = ['cmd', '/C', 'cls'] if os.name == 'nt' else ['clear']
    try:
        subprocess.run(command, check=False)
    except OSError as e:
        print(colored(f"cannot clear screen: {e}", 'red'), file=sys.stderr)


def eval_line(interpreter: Interpreter, line: str) -> Optional[Any]:
    """Evaluate one line of input against the session interpreter.

    Returns the value of a lone expression statement, otherwise None.
    """
    program = parse(tokenize(line))
    return interpreter.run_interactive(program)


def start(interpreter: Optional[Interpreter] = None, input_fn: Optional[Callable[[str], str]] = None) -> None:
    if interpreter is None:
        interpreter = Interpreter()
    if input_fn is None:
        input_fn = input
    print(colored(BANNER_TITLE, 'cyan', attrs=['bold']))
    print(colored(BANNER, attrs=['dark']))
    line_number = 1
    while True:
        try:
            line = input_fn(colored(f"[{line_number}]>", 'green', attrs=['bold']) + ' ')
        except (EOFError, KeyboardInterrupt):
            print()
            print(colored('goodbye!', 'cyan'))
            break
        line = line.strip()
        if line in ('exit', 'quit'):
            print(colored('goodbye!', 'cyan'))
            break
        if not line:
            continue
        if line == 'help':
            print(HELP_TEXT.format(modules=', '.join(interpreter.loader.available())))
            continue
        if line == 'clear':
            clear_screen()
            continue
        try:
            value = eval_line(interpreter, line)
        except RutenError as e:
            print(colored(str(e), 'red'), file=sys.stderr)
        else:
            if value is not None:
                print(colored(f"=> {repr_value(value)}", 'yellow'))
        line_number += 1
