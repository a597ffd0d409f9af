"""Static scope resolution for TinyScript.

The resolver walks a parsed statement list once, before evaluation, with a
stack of scopes that mirrors the frames the interpreter will push at run
time: one per block, one per function call (parameters and body share it)
and, for methods, one more outside it holding ``this``. Every variable
reference is annotated with the number of frames to ascend to reach its
declaration, or ``-1`` when it is not declared in any local scope and must
be found in the global frame.
"""

from __future__ import annotations

from typing import List, Set

from .ast import (
    Node, Literal, Ident, Assign, BinaryOp, UnaryOp, LogicalOp, Call, Member,
    MemberAssign, ArrayLit, Index, IndexAssign, This,
    Block, VarDecl, FuncDecl, ClassDecl, IfStmt, WhileStmt, PrintStmt,
    ReturnStmt, ImportStmt, ExprStmt, Stmt,
)


class Resolver:
    def __init__(self):
        self.scopes: List[Set[str]] = []

    def resolve(self, statements: List[Stmt]):
        for stmt in statements:
            self.resolve_node(stmt)

    def begin_scope(self):
        self.scopes.append(set())

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: str):
        # Names declared outside every local scope live in the global frame.
        if self.scopes:
            self.scopes[-1].add(name)

    def resolve_local(self, name: str) -> int:
        for depth, scope in enumerate(reversed(self.scopes)):
            if name in scope:
                return depth
        return -1

    def resolve_function(self, decl: FuncDecl):
        self.begin_scope()
        for param in decl.params:
            self.declare(param)
        self.resolve(decl.body)
        self.end_scope()

    def resolve_node(self, node: Node):
        # Statements
        if isinstance(node, Block):
            self.begin_scope()
            self.resolve(node.statements)
            self.end_scope()
            return
        if isinstance(node, VarDecl):
            if node.initializer is not None:
                self.resolve_node(node.initializer)
            self.declare(node.name)
            return
        if isinstance(node, FuncDecl):
            self.declare(node.name)
            self.resolve_function(node)
            return
        if isinstance(node, ClassDecl):
            self.declare(node.name)
            if node.superclass is not None:
                self.resolve_node(node.superclass)
            for method in node.methods:
                self.begin_scope()
                self.declare('this')
                self.resolve_function(method)
                self.end_scope()
            return
        if isinstance(node, IfStmt):
            self.resolve_node(node.condition)
            self.resolve_node(node.then_branch)
            if node.else_branch is not None:
                self.resolve_node(node.else_branch)
            return
        if isinstance(node, WhileStmt):
            self.resolve_node(node.condition)
            self.resolve_node(node.body)
            return
        if isinstance(node, PrintStmt):
            self.resolve_node(node.expr)
            return
        if isinstance(node, ReturnStmt):
            if node.value is not None:
                self.resolve_node(node.value)
            return
        if isinstance(node, ExprStmt):
            self.resolve_node(node.expr)
            return
        if isinstance(node, ImportStmt):
            # Imports always bind in the global frame.
            return

        # Expressions
        if isinstance(node, Literal):
            return
        if isinstance(node, Ident):
            node.distance = self.resolve_local(node.name)
            return
        if isinstance(node, This):
            node.distance = self.resolve_local('this')
            return
        if isinstance(node, Assign):
            self.resolve_node(node.value)
            self.resolve_node(node.target)
            return
        if isinstance(node, (BinaryOp, LogicalOp)):
            self.resolve_node(node.left)
            self.resolve_node(node.right)
            return
        if isinstance(node, UnaryOp):
            self.resolve_node(node.operand)
            return
        if isinstance(node, Call):
            self.resolve_node(node.func)
            for arg in node.args:
                self.resolve_node(arg)
            return
        if isinstance(node, Member):
            self.resolve_node(node.target)
            return
        if isinstance(node, MemberAssign):
            self.resolve_node(node.target)
            self.resolve_node(node.value)
            return
        if isinstance(node, ArrayLit):
            node.distance = 0 if self.scopes else -1
            for element in node.elements:
                self.resolve_node(element)
            return
        if isinstance(node, Index):
            self.resolve_node(node.target)
            self.resolve_node(node.index)
            return
        if isinstance(node, IndexAssign):
            self.resolve_node(node.target)
            self.resolve_node(node.index)
            self.resolve_node(node.value)
            return
        raise NotImplementedError(f"resolve: unexpected node type {type(node)}")


def resolve(statements: List[Stmt]) -> List[Stmt]:
    """Annotate ``statements`` in place and return them."""
    Resolver().resolve(statements)
    return statements
