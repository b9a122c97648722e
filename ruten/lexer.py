"""Tokenizer for the Ruten language.

Raw lexing is delegated to a lark `basic` lexer built from the terminal
definitions below. Lark only splits the text; this module then classifies
keywords, converts number literals and decodes string escapes, producing
the immutable `Token` sequence consumed by the parser. Newlines are
significant and become `NEWLINE` tokens; the sequence always ends with a
single `EOF` token.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from lark import Lark, UnexpectedCharacters

from .errors import RutenError


KEYWORDS = {
    'import', 'def', 'return', 'if', 'else', 'while', 'for', 'in',
    'break', 'continue', 'True', 'False', 'None', 'and', 'or', 'not',
}

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    '"': '"',
    '\'': '\'',
}


RUTEN_TERMINALS = r"""
    start: _item*
    _item: NUMBER | STRING | NAME | OPERATOR | DELIMITER | NEWLINE

    NUMBER: /[0-9][0-9.]*/
    STRING: /"(?:[^"\\]|\\[\s\S])*"/
          | /'(?:[^'\\]|\\[\s\S])*'/
    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    OPERATOR: /==|!=|<=|>=|[-+*\/%=<>]/
    DELIMITER: /[()\[\]{},.:]/
    NEWLINE: /\n/

    WHITESPACE: /[ \t\r]+/
    COMMENT: /#[^\n]*/
    %ignore WHITESPACE
    %ignore COMMENT
"""


RUTEN_LEXER = Lark(
    RUTEN_TERMINALS,
    parser='lalr',
    lexer='basic',
)


@dataclass(frozen=True)
class Token:
    kind: str
    value: Any
    line: int
    column: int

    def describe(self) -> str:
        if self.kind == 'EOF':
            return 'end of input'
        if self.kind == 'NEWLINE':
            return 'newline'
        if self.kind == 'STRING':
            return f"string {self.value!r}"
        if self.kind == 'NUMBER':
            return f"number {self.value!r}"
        if self.kind == 'IDENT':
            return f"identifier '{self.value}'"
        return f"'{self.kind}'"


def unescape(body: str) -> str:
    """Decode the escapes of a string literal body (quotes already removed).

    Unknown escapes keep their backslash.
    """
    out: List[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == '\\' and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(ESCAPES.get(nxt, '\\' + nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return ''.join(out)


def convert_token(raw) -> Token:
    text = str(raw)
    if raw.type == 'NUMBER':
        try:
            value = float(text)
        except ValueError:
            raise RutenError('SyntaxError', f"invalid number: {text}")
        return Token('NUMBER', value, raw.line, raw.column)
    if raw.type == 'STRING':
        return Token('STRING', unescape(text[1:-1]), raw.line, raw.column)
    if raw.type == 'NAME':
        if text in KEYWORDS:
            return Token(text, text, raw.line, raw.column)
        return Token('IDENT', text, raw.line, raw.column)
    if raw.type == 'NEWLINE':
        return Token('NEWLINE', '\n', raw.line, raw.column)
    return Token(text, text, raw.line, raw.column)


def tokenize(source: str) -> List[Token]:
    """Convert source text into a list of tokens ending with `EOF`."""
    tokens: List[Token] = []
    try:
        for raw in RUTEN_LEXER.lex(source):
            tokens.append(convert_token(raw))
    except UnexpectedCharacters as e:
        where = f"{e.line}:{e.column}"
        if e.char == '!':
            raise RutenError('SyntaxError', f"unexpected character '!' at {where}")
        if e.char in ('"', '\''):
            raise RutenError('SyntaxError', f"unterminated string literal at {where}")
        raise RutenError('SyntaxError', f"unexpected character: {e.char!r} at {where}")
    line, column = 1, 1
    if tokens:
        last = tokens[-1]
        line, column = last.line, last.column + 1
    tokens.append(Token('EOF', None, line, column))
    return tokens
