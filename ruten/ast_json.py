"""JSON serialization/deserialization for the Ruten AST.

This module converts between Ruten AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node type survives
a full round-trip. Statement bodies are encoded as plain lists.
"""

from __future__ import annotations

from typing import Any, List

from .ast import (
    Program,
    ImportStmt,
    Assign,
    FuncDef,
    ReturnStmt,
    IfStmt,
    WhileStmt,
    ForStmt,
    BreakStmt,
    ContinueStmt,
    ExprStmt,
    Literal,
    Ident,
    BinaryOp,
    UnaryOp,
    Call,
    ListLit,
    DictLit,
    Index,
    Member,
)


def _body_to_obj(body: List[Any]) -> List[Any]:
    return [ast_to_obj(s) for s in body]


def _body_from_obj(body: Any) -> Any:
    if body is None:
        return None
    return [ast_from_obj(s) for s in body]


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, (int, float, str, bool)):
        return node

    if isinstance(node, Program):
        return {"type": "Program", "body": _body_to_obj(node.body)}
    if isinstance(node, ImportStmt):
        return {"type": "ImportStmt", "name": node.name}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, FuncDef):
        return {
            "type": "FuncDef",
            "name": node.name,
            "params": list(node.params),
            "body": _body_to_obj(node.body),
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "value": ast_to_obj(node.value)}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": _body_to_obj(node.then_branch),
            "else_branch": None if node.else_branch is None else _body_to_obj(node.else_branch),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition), "body": _body_to_obj(node.body)}
    if isinstance(node, ForStmt):
        return {
            "type": "ForStmt",
            "var": node.var,
            "iterable": ast_to_obj(node.iterable),
            "body": _body_to_obj(node.body),
        }
    if isinstance(node, BreakStmt):
        return {"type": "BreakStmt"}
    if isinstance(node, ContinueStmt):
        return {"type": "ContinueStmt"}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": ast_to_obj(node.value), "literal_type": node.literal_type}
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name}
    if isinstance(node, ListLit):
        return {"type": "ListLit", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, DictLit):
        return {"type": "DictLit", "entries": [[ast_to_obj(k), ast_to_obj(v)] for (k, v) in node.entries]}
    if isinstance(node, Call):
        return {"type": "Call", "func": ast_to_obj(node.func), "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, Index):
        return {"type": "Index", "target": ast_to_obj(node.target), "index": ast_to_obj(node.index)}
    if isinstance(node, Member):
        return {"type": "Member", "target": ast_to_obj(node.target), "name": node.name}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(body=_body_from_obj(obj["body"]))
    if t == "ImportStmt":
        return ImportStmt(name=obj["name"])
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "FuncDef":
        return FuncDef(name=obj["name"], params=list(obj["params"]), body=_body_from_obj(obj["body"]))
    if t == "ReturnStmt":
        return ReturnStmt(value=ast_from_obj(obj.get("value")))
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_branch=_body_from_obj(obj["then_branch"]),
            else_branch=_body_from_obj(obj.get("else_branch")),
        )
    if t == "WhileStmt":
        return WhileStmt(condition=ast_from_obj(obj["condition"]), body=_body_from_obj(obj["body"]))
    if t == "ForStmt":
        return ForStmt(var=obj["var"], iterable=ast_from_obj(obj["iterable"]), body=_body_from_obj(obj["body"]))
    if t == "BreakStmt":
        return BreakStmt()
    if t == "ContinueStmt":
        return ContinueStmt()
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]))
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "Literal":
        return Literal(value=ast_from_obj(obj["value"]), literal_type=obj["literal_type"])
    if t == "Ident":
        return Ident(name=obj["name"])
    if t == "ListLit":
        return ListLit(elements=[ast_from_obj(e) for e in obj["elements"]])
    if t == "DictLit":
        return DictLit(entries=[(ast_from_obj(k), ast_from_obj(v)) for (k, v) in obj["entries"]])
    if t == "Call":
        return Call(func=ast_from_obj(obj["func"]), args=[ast_from_obj(a) for a in obj["args"]])
    if t == "Index":
        return Index(target=ast_from_obj(obj["target"]), index=ast_from_obj(obj["index"]))
    if t == "Member":
        return Member(target=ast_from_obj(obj["target"]), name=obj["name"])

    raise ValueError(f"Unknown AST node type: {t}")
