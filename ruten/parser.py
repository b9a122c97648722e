"""Parser for the Ruten language.

A recursive-descent parser with one token of lookahead. Expressions are
parsed by a precedence cascade, lowest to highest:

    or -> and -> equality -> comparison -> term -> factor -> unary
       -> postfix (call, index, member) -> primary

All binary operators are left-associative.

Statements are line oriented. `def`, `if`, `else`, `while` and `for`
introduce a block after a colon, but blocks are not delimited by
indentation: a block collects statements until it reaches one of the
keywords `else`, `def`, `if`, `while`, `for`, or the end of input. As a
consequence a block never contains a nested compound statement; the
nested keyword ends the enclosing block instead. Programs rely on this
behaviour, so it is kept as is.
"""

from __future__ import annotations

from typing import List, Union

from .ast import (
    Program, ImportStmt, Assign, FuncDef, ReturnStmt, IfStmt, WhileStmt,
    ForStmt, BreakStmt, ContinueStmt, ExprStmt, Literal, Ident, BinaryOp,
    UnaryOp, Call, ListLit, DictLit, Index, Member, Node
)
from .errors import RutenError
from .lexer import Token, tokenize


BLOCK_TERMINATORS = ['else', 'def', 'if', 'while', 'for']


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind != 'EOF':
            self.tokens.append(Token('EOF', None, 0, 0))
        self.pos = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def is_at_end(self) -> bool:
        return self.peek().kind == 'EOF'

    def advance(self) -> Token:
        token = self.peek()
        if not self.is_at_end():
            self.pos += 1
        return token

    def match(self, expected: Union[str, List[str]]) -> bool:
        if self.is_at_end():
            return False
        token = self.peek()
        if isinstance(expected, list):
            return token.kind in expected
        return token.kind == expected

    def consume(self, expected: Union[str, List[str]], message: str) -> Token:
        if not self.match(expected):
            raise RutenError('SyntaxError', message)
        return self.advance()

    def unexpected(self) -> RutenError:
        token = self.peek()
        return RutenError('SyntaxError', f"unexpected token: {token.describe()} at {token.line}:{token.column}")

    def skip_newlines(self):
        while self.match('NEWLINE'):
            self.advance()

    def parse_program(self) -> Program:
        statements: List[Node] = []
        self.skip_newlines()
        while not self.is_at_end():
            statements.append(self.parse_statement())
            self.skip_newlines()
        return Program(statements)

    def parse_statement(self) -> Node:
        self.skip_newlines()
        kind = self.peek().kind
        if kind == 'import':
            return self.parse_import_stmt()
        if kind == 'def':
            return self.parse_func_def()
        if kind == 'return':
            return self.parse_return_stmt()
        if kind == 'if':
            return self.parse_if_stmt()
        if kind == 'while':
            return self.parse_while_stmt()
        if kind == 'for':
            return self.parse_for_stmt()
        if kind == 'break':
            self.advance()
            self.skip_newlines()
            return BreakStmt()
        if kind == 'continue':
            self.advance()
            self.skip_newlines()
            return ContinueStmt()
        expr = self.parse_expression()
        # `name = expr` is the only assignment form
        if isinstance(expr, Ident) and self.match('='):
            self.advance()
            value = self.parse_expression()
            self.skip_newlines()
            return Assign(expr.name, value)
        self.skip_newlines()
        return ExprStmt(expr)

    def parse_import_stmt(self) -> ImportStmt:
        self.advance()
        name_token = self.consume('IDENT', "expected module name after 'import'")
        self.skip_newlines()
        return ImportStmt(name_token.value)

    def parse_func_def(self) -> FuncDef:
        self.advance()
        name_token = self.consume('IDENT', 'expected function name')
        self.consume('(', "expected '(' after function name")
        params: List[str] = []
        if not self.match(')'):
            while True:
                params.append(self.consume('IDENT', 'expected parameter name').value)
                if not self.match(','):
                    break
                self.advance()
        self.consume(')', "expected ')' after parameters")
        self.consume(':', "expected ':' after function signature")
        self.skip_newlines()
        body = self.parse_block()
        return FuncDef(name_token.value, params, body)

    def parse_return_stmt(self) -> ReturnStmt:
        self.advance()
        if self.match('NEWLINE') or self.is_at_end():
            self.skip_newlines()
            return ReturnStmt(None)
        value = self.parse_expression()
        self.skip_newlines()
        return ReturnStmt(value)

    def parse_if_stmt(self) -> IfStmt:
        self.advance()
        condition = self.parse_expression()
        self.consume(':', "expected ':' after if condition")
        self.skip_newlines()
        then_branch = self.parse_block()
        else_branch = None
        if self.match('else'):
            self.advance()
            self.consume(':', "expected ':' after else")
            self.skip_newlines()
            else_branch = self.parse_block()
        return IfStmt(condition, then_branch, else_branch)

    def parse_while_stmt(self) -> WhileStmt:
        self.advance()
        condition = self.parse_expression()
        self.consume(':', "expected ':' after while condition")
        self.skip_newlines()
        body = self.parse_block()
        return WhileStmt(condition, body)

    def parse_for_stmt(self) -> ForStmt:
        self.advance()
        var_token = self.consume('IDENT', 'expected variable name in for loop')
        self.consume('in', "expected 'in' in for loop")
        iterable = self.parse_expression()
        self.consume(':', "expected ':' after for clause")
        self.skip_newlines()
        body = self.parse_block()
        return ForStmt(var_token.value, iterable, body)

    def parse_block(self) -> List[Node]:
        statements: List[Node] = []
        while not self.is_at_end() and not self.match(BLOCK_TERMINATORS):
            if self.match('NEWLINE'):
                self.advance()
                continue
            statements.append(self.parse_statement())
        return statements

    # Expression parsing (precedence climbing)
    def parse_expression(self) -> Node:
        return self.parse_logic_or()

    def parse_logic_or(self) -> Node:
        node = self.parse_logic_and()
        while self.match('or'):
            op_token = self.advance()
            right = self.parse_logic_and()
            node = BinaryOp(op_token.kind, node, right)
        return node

    def parse_logic_and(self) -> Node:
        node = self.parse_equality()
        while self.match('and'):
            op_token = self.advance()
            right = self.parse_equality()
            node = BinaryOp(op_token.kind, node, right)
        return node

    def parse_equality(self) -> Node:
        node = self.parse_comparison()
        while self.match(['==', '!=']):
            op_token = self.advance()
            right = self.parse_comparison()
            node = BinaryOp(op_token.kind, node, right)
        return node

    def parse_comparison(self) -> Node:
        node = self.parse_term()
        while self.match(['<', '<=', '>', '>=']):
            op_token = self.advance()
            right = self.parse_term()
            node = BinaryOp(op_token.kind, node, right)
        return node

    def parse_term(self) -> Node:
        node = self.parse_factor()
        while self.match(['+', '-']):
            op_token = self.advance()
            right = self.parse_factor()
            node = BinaryOp(op_token.kind, node, right)
        return node

    def parse_factor(self) -> Node:
        node = self.parse_unary()
        while self.match(['*', '/', '%']):
            op_token = self.advance()
            right = self.parse_unary()
            node = BinaryOp(op_token.kind, node, right)
        return node

    def parse_unary(self) -> Node:
        if self.match(['-', 'not']):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryOp(op_token.kind, operand)
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while True:
            if self.match('('):  # function call
                self.advance()
                args: List[Node] = []
                if not self.match(')'):
                    args.append(self.parse_expression())
                    while self.match(','):
                        self.advance()
                        args.append(self.parse_expression())
                self.consume(')', "expected ')' after arguments")
                node = Call(node, args)
                continue
            if self.match('['):
                self.advance()
                index_expr = self.parse_expression()
                self.consume(']', "expected ']' after index")
                node = Index(node, index_expr)
                continue
            if self.match('.'):
                self.advance()
                name_token = self.consume('IDENT', "expected member name after '.'")
                node = Member(node, name_token.value)
                continue
            break
        return node

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.kind == 'NUMBER':
            self.advance()
            return Literal(token.value, 'Number')
        if token.kind == 'STRING':
            self.advance()
            return Literal(token.value, 'String')
        if token.kind == 'True':
            self.advance()
            return Literal(True, 'Bool')
        if token.kind == 'False':
            self.advance()
            return Literal(False, 'Bool')
        if token.kind == 'None':
            self.advance()
            return Literal(None, 'None')
        if token.kind == 'IDENT':
            self.advance()
            return Ident(token.value)
        # Grouping
        if token.kind == '(':
            self.advance()
            expr = self.parse_expression()
            self.consume(')', "expected ')' after expression")
            return expr
        # List literal
        if token.kind == '[':
            self.advance()
            elements: List[Node] = []
            if not self.match(']'):
                elements.append(self.parse_expression())
                while self.match(','):
                    self.advance()
                    elements.append(self.parse_expression())
            self.consume(']', "expected ']' after list elements")
            return ListLit(elements)
        # Dict literal
        if token.kind == '{':
            self.advance()
            entries = []
            if not self.match('}'):
                entries.append(self.parse_dict_entry())
                while self.match(','):
                    self.advance()
                    entries.append(self.parse_dict_entry())
            self.consume('}', "expected '}' after dictionary")
            return DictLit(entries)
        raise self.unexpected()

    def parse_dict_entry(self):
        key = self.parse_expression()
        self.consume(':', "expected ':' in dictionary")
        value = self.parse_expression()
        return (key, value)


def parse(tokens: List[Token]) -> Program:
    """Parse a token sequence (as produced by `tokenize`) into a Program."""
    return Parser(tokens).parse_program()


def parse_program(source: str) -> Program:
    """Tokenize and parse Ruten source text."""
    return parse(tokenize(source))
