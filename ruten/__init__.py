# Ruten language package
# This package provides a tokenizer, parser and tree-walking interpreter for the Ruten language.
from .errors import RutenError
from .lexer import tokenize
from .parser import parse, parse_program
from .interpreter import run_program, run_file, Interpreter

__all__ = [
    'tokenize',
    'parse',
    'parse_program',
    'run_program',
    'run_file',
    'Interpreter',
    'RutenError',
]
