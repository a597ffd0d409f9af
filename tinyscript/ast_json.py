"""JSON serialization/deserialization for the TinyScript AST.

This module converts between TinyScript AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Resolved scope distances
and source positions are carried along, so a resolved tree can be dumped
and executed later without losing diagnostics.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .ast import (
    Literal,
    Ident,
    Assign,
    BinaryOp,
    UnaryOp,
    LogicalOp,
    Call,
    Member,
    MemberAssign,
    ArrayLit,
    Index,
    IndexAssign,
    This,
    Block,
    VarDecl,
    FuncDecl,
    ClassDecl,
    IfStmt,
    WhileStmt,
    PrintStmt,
    ReturnStmt,
    ImportStmt,
    ExprStmt,
)
from .lexer import Position


def pos_to_obj(pos: Optional[Position]) -> Optional[List[int]]:
    if pos is None:
        return None
    return [pos.line, pos.column]


def pos_from_obj(o: Optional[List[int]]) -> Optional[Position]:
    if o is None:
        return None
    return Position(o[0], o[1])


def program_to_obj(statements: List[Any]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(s) for s in statements]}


def program_from_obj(obj: Dict[str, Any]) -> List[Any]:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise ValueError("AST document must be a Program object")
    return [ast_from_obj(s) for s in obj["body"]]


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, (int, float, str, bool)):
        return node

    # Statements
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, VarDecl):
        return {
            "type": "VarDecl",
            "name": node.name,
            "initializer": ast_to_obj(node.initializer),
            "keyword": node.keyword,
        }
    if isinstance(node, FuncDecl):
        return {
            "type": "FuncDecl",
            "name": node.name,
            "params": list(node.params),
            "body": [ast_to_obj(s) for s in node.body],
            "is_initializer": node.is_initializer,
        }
    if isinstance(node, ClassDecl):
        return {
            "type": "ClassDecl",
            "name": node.name,
            "superclass": ast_to_obj(node.superclass),
            "methods": [ast_to_obj(m) for m in node.methods],
        }
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "value": ast_to_obj(node.value), "pos": pos_to_obj(node.pos)}
    if isinstance(node, ImportStmt):
        return {"type": "ImportStmt", "name": node.name, "pos": pos_to_obj(node.pos)}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": ast_to_obj(node.value), "literal_type": node.literal_type}
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name, "distance": node.distance, "pos": pos_to_obj(node.pos)}
    if isinstance(node, Assign):
        return {
            "type": "Assign",
            "target": ast_to_obj(node.target),
            "value": ast_to_obj(node.value),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, BinaryOp):
        return {
            "type": "BinaryOp",
            "op": node.op,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand), "pos": pos_to_obj(node.pos)}
    if isinstance(node, LogicalOp):
        return {"type": "LogicalOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "func": ast_to_obj(node.func),
            "args": [ast_to_obj(a) for a in node.args],
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, Member):
        return {"type": "Member", "target": ast_to_obj(node.target), "name": node.name, "pos": pos_to_obj(node.pos)}
    if isinstance(node, MemberAssign):
        return {
            "type": "MemberAssign",
            "target": ast_to_obj(node.target),
            "name": node.name,
            "value": ast_to_obj(node.value),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, ArrayLit):
        return {"type": "ArrayLit", "elements": [ast_to_obj(e) for e in node.elements], "distance": node.distance}
    if isinstance(node, Index):
        return {
            "type": "Index",
            "target": ast_to_obj(node.target),
            "index": ast_to_obj(node.index),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, IndexAssign):
        return {
            "type": "IndexAssign",
            "target": ast_to_obj(node.target),
            "index": ast_to_obj(node.index),
            "value": ast_to_obj(node.value),
            "pos": pos_to_obj(node.pos),
        }
    if isinstance(node, This):
        return {"type": "This", "distance": node.distance, "pos": pos_to_obj(node.pos)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "VarDecl":
        return VarDecl(
            name=obj["name"],
            initializer=ast_from_obj(obj.get("initializer")),
            keyword=obj.get("keyword", "var"),
        )
    if t == "FuncDecl":
        return FuncDecl(
            name=obj["name"],
            params=list(obj["params"]),
            body=[ast_from_obj(s) for s in obj["body"]],
            is_initializer=bool(obj.get("is_initializer", False)),
        )
    if t == "ClassDecl":
        return ClassDecl(
            name=obj["name"],
            superclass=ast_from_obj(obj.get("superclass")),
            methods=[ast_from_obj(m) for m in obj["methods"]],
        )
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "WhileStmt":
        return WhileStmt(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "PrintStmt":
        return PrintStmt(expr=ast_from_obj(obj["expr"]))
    if t == "ReturnStmt":
        return ReturnStmt(value=ast_from_obj(obj.get("value")), pos=pos_from_obj(obj.get("pos")))
    if t == "ImportStmt":
        return ImportStmt(name=obj["name"], pos=pos_from_obj(obj.get("pos")))
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]))
    if t == "Literal":
        value = obj["value"]
        # JSON has a single number type; the interpreter expects floats.
        if obj["literal_type"] == "Number":
            value = float(value)
        return Literal(value=value, literal_type=obj["literal_type"])
    if t == "Ident":
        return Ident(name=obj["name"], distance=obj.get("distance", -1), pos=pos_from_obj(obj.get("pos")))
    if t == "Assign":
        return Assign(
            target=ast_from_obj(obj["target"]),
            value=ast_from_obj(obj["value"]),
            pos=pos_from_obj(obj.get("pos")),
        )
    if t == "BinaryOp":
        return BinaryOp(
            op=obj["op"],
            left=ast_from_obj(obj["left"]),
            right=ast_from_obj(obj["right"]),
            pos=pos_from_obj(obj.get("pos")),
        )
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]), pos=pos_from_obj(obj.get("pos")))
    if t == "LogicalOp":
        return LogicalOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "Call":
        return Call(
            func=ast_from_obj(obj["func"]),
            args=[ast_from_obj(a) for a in obj["args"]],
            pos=pos_from_obj(obj.get("pos")),
        )
    if t == "Member":
        return Member(target=ast_from_obj(obj["target"]), name=obj["name"], pos=pos_from_obj(obj.get("pos")))
    if t == "MemberAssign":
        return MemberAssign(
            target=ast_from_obj(obj["target"]),
            name=obj["name"],
            value=ast_from_obj(obj["value"]),
            pos=pos_from_obj(obj.get("pos")),
        )
    if t == "ArrayLit":
        return ArrayLit(elements=[ast_from_obj(e) for e in obj["elements"]], distance=obj.get("distance", -1))
    if t == "Index":
        return Index(
            target=ast_from_obj(obj["target"]),
            index=ast_from_obj(obj["index"]),
            pos=pos_from_obj(obj.get("pos")),
        )
    if t == "IndexAssign":
        return IndexAssign(
            target=ast_from_obj(obj["target"]),
            index=ast_from_obj(obj["index"]),
            value=ast_from_obj(obj["value"]),
            pos=pos_from_obj(obj.get("pos")),
        )
    if t == "This":
        return This(distance=obj.get("distance", -1), pos=pos_from_obj(obj.get("pos")))

    raise ValueError(f"Unknown AST node type: {t}")
