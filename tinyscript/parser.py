"""Recursive-descent parser for the TinyScript language.

Each precedence tier has its own method, from lowest to highest binding:
assignment, logical or (``|``), logical and (``&``), equality,
comparison, addition, multiplication, unary, call/property/index postfix
and primary. ``for`` loops are desugared into ``while`` loops wrapped in
blocks, so later stages never see a dedicated loop-with-increment node.

A grammar violation raises :class:`ParseError`, which unwinds to
:meth:`Parser.parse`. Only the first error of a parse call is reported;
every statement parsed by that call is discarded.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .ast import (
    Expr, Stmt, Literal, Ident, Assign, BinaryOp, UnaryOp, LogicalOp, Call,
    Member, MemberAssign, ArrayLit, Index, IndexAssign, This,
    Block, VarDecl, FuncDecl, ClassDecl, IfStmt, WhileStmt, PrintStmt,
    ReturnStmt, ImportStmt, ExprStmt,
)
from .errors import ParseError
from .lexer import Lexer, Token, EOF, IDENT, NUMBER, STRING

MAX_ARGS = 255

# Tokens that start a new statement; used when synchronizing after an error.
STATEMENT_KEYWORDS = frozenset({
    'class', 'function', 'var', 'let', 'if', 'while', 'print', 'return',
})


class Parser:
    def __init__(self, lexer: Lexer, err: Optional[TextIO] = None):
        self.lexer = lexer
        self.err = err
        self.tok: Token = lexer.next_token()

    # Token helpers

    def next_token(self) -> Token:
        if not self.is_at_end():
            self.tok = self.lexer.next_token()
        return self.tok

    def is_at_end(self) -> bool:
        return self.tok.kind == EOF

    def check(self, kind: str) -> bool:
        if self.is_at_end():
            return False
        return self.tok.kind == kind

    def match(self, *kinds: str) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.next_token()
                return True
        return False

    def expect(self, kind: str, msg: str) -> Token:
        token = self.tok
        if self.check(kind):
            self.next_token()
            return token
        self.error(msg)

    def error(self, msg: str) -> None:
        raise ParseError(msg, self.tok.pos)

    def synchronize(self) -> None:
        """Skip tokens up to the next statement boundary."""
        while not self.is_at_end():
            if self.tok.kind == ';':
                self.next_token()
                return
            if self.tok.kind in STATEMENT_KEYWORDS:
                return
            self.next_token()

    # Entry point

    def parse(self) -> List[Stmt]:
        """Parse every statement of the input.

        On the first :class:`ParseError` the statements collected so far
        are dropped, the error is written to the diagnostic stream and
        re-raised to the caller.
        """
        statements: List[Stmt] = []
        try:
            while not self.is_at_end():
                statements.append(self.parse_declaration())
        except ParseError as exc:
            print(str(exc), file=self.err or sys.stderr)
            self.synchronize()
            raise
        return statements

    # Declarations

    def parse_declaration(self) -> Stmt:
        if self.match('var'):
            return self.parse_var_declaration('var')
        if self.match('let'):
            return self.parse_var_declaration('let')
        if self.match('function'):
            return self.parse_function()
        if self.match('class'):
            return self.parse_class_declaration()
        if self.match('import'):
            return self.parse_import_declaration()
        return self.parse_statement()

    def parse_var_declaration(self, keyword: str) -> VarDecl:
        name = self.expect(IDENT, 'Expect variable name.').lexeme
        initializer: Optional[Expr] = None
        if self.match('='):
            initializer = self.parse_expression()
        self.expect(';', "Expect ';' after variable declaration.")
        return VarDecl(name, initializer, keyword)

    def parse_function(self) -> FuncDecl:
        name = self.expect(IDENT, 'Expect function name.').lexeme
        self.expect('(', "Expect '(' after function name.")
        params: List[str] = []
        if not self.match(')'):
            while True:
                param = self.expect(IDENT, 'Expect parameter name.')
                if len(params) >= MAX_ARGS:
                    self.error(f'Cannot have more than {MAX_ARGS} parameters.')
                params.append(param.lexeme)
                if not self.match(','):
                    break
            self.expect(')', "Expect ')' after parameters.")
        self.expect('{', "Expect '{' before function body.")
        body = self.parse_block_statements()
        return FuncDecl(name, params, body)

    def parse_class_declaration(self) -> ClassDecl:
        name = self.expect(IDENT, 'Expect class name.').lexeme
        superclass: Optional[Ident] = None
        if self.match('<'):
            token = self.expect(IDENT, 'Expect superclass name.')
            superclass = Ident(token.lexeme, pos=token.pos)
        self.expect('{', "Expect '{' after class name.")
        methods: List[FuncDecl] = []
        while self.check(IDENT):
            method = self.parse_function()
            method.is_initializer = method.name == 'init'
            methods.append(method)
        self.expect('}', "Expect '}' after class block.")
        return ClassDecl(name, superclass, methods)

    def parse_import_declaration(self) -> ImportStmt:
        token = self.expect(IDENT, 'Expect native object name.')
        self.expect(';', "Expect ';' after value.")
        return ImportStmt(token.lexeme, token.pos)

    # Statements

    def parse_statement(self) -> Stmt:
        if self.match('print'):
            return self.parse_print_statement()
        if self.match('if'):
            return self.parse_if_statement()
        if self.match('while'):
            return self.parse_while_statement()
        if self.match('for'):
            return self.parse_for_statement()
        if self.match('{'):
            return Block(self.parse_block_statements())
        keyword = self.tok
        if self.match('return'):
            return self.parse_return_statement(keyword)
        if self.match('import'):
            return self.parse_import_declaration()
        return self.parse_expr_statement()

    def parse_print_statement(self) -> PrintStmt:
        expr = self.parse_expression()
        self.expect(';', "Expect ';' after value.")
        return PrintStmt(expr)

    def parse_if_statement(self) -> IfStmt:
        self.expect('(', "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.expect(')', "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch: Optional[Stmt] = None
        if self.match('else'):
            else_branch = self.parse_statement()
        return IfStmt(condition, then_branch, else_branch)

    def parse_while_statement(self) -> WhileStmt:
        self.expect('(', "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.expect(')', "Expect ')' after while condition.")
        body = self.parse_statement()
        return WhileStmt(condition, body)

    def parse_for_statement(self) -> Stmt:
        self.expect('(', "Expect '(' after 'for'.")
        initializer: Optional[Stmt] = None
        if self.match(';'):
            initializer = None
        elif self.match('var'):
            initializer = self.parse_var_declaration('var')
        elif self.match('let'):
            initializer = self.parse_var_declaration('let')
        else:
            initializer = self.parse_expr_statement()

        condition: Optional[Expr] = None
        if not self.match(';'):
            condition = self.parse_expression()
            self.expect(';', "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.match(')'):
            increment = self.parse_expression()
            self.expect(')', "Expect ')' after for clause.")

        body = self.parse_statement()
        if increment is not None:
            body = Block([body, ExprStmt(increment)])
        if condition is None:
            condition = Literal(True, 'Boolean')
        loop: Stmt = WhileStmt(condition, body)
        if initializer is not None:
            loop = Block([initializer, loop])
        return loop

    def parse_block_statements(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not (self.check('}') or self.is_at_end()):
            statements.append(self.parse_declaration())
        self.expect('}', "Expect '}' after block.")
        return statements

    def parse_return_statement(self, keyword: Token) -> ReturnStmt:
        value: Optional[Expr] = None
        if not self.match(';'):
            value = self.parse_expression()
            self.expect(';', "Expect ';' after return value.")
        return ReturnStmt(value, keyword.pos)

    def parse_expr_statement(self) -> ExprStmt:
        expr = self.parse_expression()
        self.expect(';', "Expect ';' after expression.")
        return ExprStmt(expr)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        expr = self.parse_or()
        if not self.check('='):
            return expr
        equals = self.tok
        self.next_token()
        value = self.parse_assignment()
        if isinstance(expr, Ident):
            return Assign(expr, value, equals.pos)
        if isinstance(expr, Member):
            return MemberAssign(expr.target, expr.name, value, expr.pos)
        if isinstance(expr, Index):
            return IndexAssign(expr.target, expr.index, value, expr.pos)
        raise ParseError('Invalid assignment target.', equals.pos)

    def parse_or(self) -> Expr:
        expr = self.parse_and()
        while self.match('|'):
            right = self.parse_and()
            expr = LogicalOp('|', expr, right)
        return expr

    def parse_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match('&'):
            right = self.parse_equality()
            expr = LogicalOp('&', expr, right)
        return expr

    def parse_binary(self, operators: tuple, operand) -> Expr:
        expr = operand()
        while self.tok.kind in operators:
            op_token = self.tok
            self.next_token()
            right = operand()
            expr = BinaryOp(op_token.kind, expr, right, op_token.pos)
        return expr

    def parse_equality(self) -> Expr:
        return self.parse_binary(('==', '!='), self.parse_comparison)

    def parse_comparison(self) -> Expr:
        return self.parse_binary(('>', '>=', '<', '<='), self.parse_addition)

    def parse_addition(self) -> Expr:
        return self.parse_binary(('+', '-'), self.parse_multiplication)

    def parse_multiplication(self) -> Expr:
        return self.parse_binary(('*', '/'), self.parse_unary)

    def parse_unary(self) -> Expr:
        if self.tok.kind in ('!', '-'):
            op_token = self.tok
            self.next_token()
            operand = self.parse_unary()
            return UnaryOp(op_token.kind, operand, op_token.pos)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        # f()(x).y[0]
        while True:
            token = self.tok
            if self.match('('):
                expr = self.finish_call(expr, token)
            elif self.match('.'):
                name = self.expect(IDENT, "Expect property name after '.'.")
                expr = Member(expr, name.lexeme, name.pos)
            elif self.match('['):
                index = self.parse_expression()
                self.expect(']', "Expect ']' after index.")
                expr = Index(expr, index, token.pos)
            else:
                return expr

    def finish_call(self, callee: Expr, paren: Token) -> Call:
        args: List[Expr] = []
        if self.match(')'):
            return Call(callee, args, paren.pos)
        while True:
            if len(args) >= MAX_ARGS:
                self.error(f'Cannot have more than {MAX_ARGS} arguments.')
            args.append(self.parse_expression())
            if not self.match(','):
                break
        self.expect(')', "Expect ')' after arguments.")
        return Call(callee, args, paren.pos)

    def parse_primary(self) -> Expr:
        token = self.tok
        if self.match('true'):
            return Literal(True, 'Boolean')
        if self.match('false'):
            return Literal(False, 'Boolean')
        if self.match('nil'):
            return Literal(None, 'Nil')
        if self.match(NUMBER):
            return Literal(float(token.lexeme), 'Number')
        if self.match(STRING):
            return Literal(token.lexeme, 'String')
        if self.match(IDENT):
            return Ident(token.lexeme, pos=token.pos)
        if self.match('this'):
            return This(pos=token.pos)
        if self.match('('):
            expr = self.parse_expression()
            self.expect(')', "Expect ')' after expression.")
            return expr
        if self.match('['):
            elements: List[Expr] = []
            while not self.match(']'):
                elements.append(self.parse_expression())
                if self.match(']'):
                    break
                if not self.match(','):
                    self.error("Expect ',' or ']' after array element.")
            return ArrayLit(elements)
        self.error('Expect expression.')


def parse_program(source: str, err: Optional[TextIO] = None) -> List[Stmt]:
    """Parse TinyScript source into a list of statements.

    Raises :class:`ParseError` (already reported on ``err``) if the source
    is malformed.
    """
    return Parser(Lexer(source, err), err).parse()


def parse_expression(source: str, err: Optional[TextIO] = None) -> Expr:
    """Parse a single expression; used by tests and tooling."""
    return Parser(Lexer(source, err), err).parse_expression()
