"""Abstract Syntax Tree (AST) definitions for the TinyScript language.

Two closed families of nodes are defined here: expressions (subclasses of
:class:`Expr`) and statements (subclasses of :class:`Stmt`). The parser
builds them once per input unit; afterwards the only mutation is the
resolver writing ``distance`` onto :class:`Ident`, :class:`This` and
:class:`ArrayLit` nodes. A distance of ``-1`` means "look in the global
frame"; ``d >= 0`` means "ascend ``d`` parent frames".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .lexer import Position


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Expr(Node):
    pass


@dataclass
class Stmt(Node):
    pass


# Expressions

@dataclass
class Literal(Expr):
    value: Any
    literal_type: str  # 'Number', 'String', 'Boolean', 'Nil'


@dataclass
class Ident(Expr):
    name: str
    distance: int = -1
    pos: Optional[Position] = None


@dataclass
class Assign(Expr):
    target: Ident
    value: Expr
    pos: Optional[Position] = None


@dataclass
class BinaryOp(Expr):
    op: str
    left: Expr
    right: Expr
    pos: Optional[Position] = None


@dataclass
class UnaryOp(Expr):
    op: str
    operand: Expr
    pos: Optional[Position] = None


@dataclass
class LogicalOp(Expr):
    op: str  # '&' or '|'
    left: Expr
    right: Expr


@dataclass
class Call(Expr):
    func: Expr
    args: List[Expr]
    pos: Optional[Position] = None


@dataclass
class Member(Expr):
    target: Expr
    name: str
    pos: Optional[Position] = None


@dataclass
class MemberAssign(Expr):
    target: Expr
    name: str
    value: Expr
    pos: Optional[Position] = None


@dataclass
class ArrayLit(Expr):
    elements: List[Expr]
    distance: int = -1


@dataclass
class Index(Expr):
    target: Expr
    index: Expr
    pos: Optional[Position] = None


@dataclass
class IndexAssign(Expr):
    target: Expr
    index: Expr
    value: Expr
    pos: Optional[Position] = None


@dataclass
class This(Expr):
    distance: int = -1
    pos: Optional[Position] = None


# Statements

@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class VarDecl(Stmt):
    name: str
    initializer: Optional[Expr]
    keyword: str = 'var'  # 'var' or 'let'


@dataclass
class FuncDecl(Stmt):
    name: str
    params: List[str]
    body: List[Stmt]
    is_initializer: bool = False


@dataclass
class ClassDecl(Stmt):
    name: str
    superclass: Optional[Ident]  # parsed but never evaluated
    methods: List[FuncDecl]


@dataclass
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class PrintStmt(Stmt):
    expr: Expr


@dataclass
class ReturnStmt(Stmt):
    value: Optional[Expr]
    pos: Optional[Position] = None


@dataclass
class ImportStmt(Stmt):
    name: str
    pos: Optional[Position] = None


@dataclass
class ExprStmt(Stmt):
    expr: Expr
