"""Abstract Syntax Tree (AST) definitions for the Ruten language.

Expression nodes produce values; statement nodes are executed for their
effect. Statement bodies (function bodies, branches, loop bodies) are
plain lists of statement nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Any


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Program(Node):
    body: List[Node]


# Statements


@dataclass
class ImportStmt(Node):
    name: str


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class FuncDef(Node):
    name: str
    params: List[str]
    body: List[Node]


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class IfStmt(Node):
    condition: Node
    then_branch: List[Node]
    else_branch: Optional[List[Node]] = None


@dataclass
class WhileStmt(Node):
    condition: Node
    body: List[Node]


@dataclass
class ForStmt(Node):
    var: str
    iterable: Node
    body: List[Node]


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class ExprStmt(Node):
    expr: Node


# Expressions


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'Number', 'String', 'Bool', 'None'


@dataclass
class Ident(Node):
    name: str


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str  # '-' or 'not'
    operand: Node


@dataclass
class Call(Node):
    func: Node
    args: List[Node] = field(default_factory=list)


@dataclass
class ListLit(Node):
    elements: List[Node]


@dataclass
class DictLit(Node):
    entries: List[Tuple[Node, Node]]  # key expressions are evaluated at runtime


@dataclass
class Index(Node):
    target: Node
    index: Node


@dataclass
class Member(Node):
    target: Node
    name: str
