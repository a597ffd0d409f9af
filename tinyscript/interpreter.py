"""Tree-walking interpreter for the TinyScript language.

The interpreter executes a parsed and resolved statement list against a
single persistent global frame. Statements return either ``None`` or a
:class:`ReturnSignal`; blocks and loops stop on a signal and pass it up
until a call unwraps it, so ``return`` never relies on exceptions.
Runtime errors are raised as :class:`ScriptRuntimeError`, unwind to
:meth:`Interpreter.interpret` and are reported on the diagnostic stream.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, TextIO

from .ast import (
    Node, Literal, Ident, Assign, BinaryOp, UnaryOp, LogicalOp, Call, Member,
    MemberAssign, ArrayLit, Index, IndexAssign, This,
    Block, VarDecl, FuncDecl, ClassDecl, IfStmt, WhileStmt, PrintStmt,
    ReturnStmt, ImportStmt, ExprStmt, Stmt,
)
from .builtin_function import NativeFunction
from .environment import Environment
from .errors import ParseError, ScriptRuntimeError
from .parser import parse_program
from .resolver import resolve
from .std import NativeRegistry, default_registry
from .values import (
    NIL, NilVal, ReturnSignal, ScriptFunction, ClassValue, Instance, ArrayVal,
    to_string,
)


class Interpreter:
    """Core interpreter that executes TinyScript ASTs."""
    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt',
                 registry: Optional[NativeRegistry] = None):
        self.globals = Environment()
        self.out = out
        self.err = err
        self.registry = registry if registry is not None else default_registry()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def report(self, error: Exception):
        print(str(error), file=self.err or sys.stderr)

    # Public API
    def run(self, source: str) -> bool:
        """Parse, resolve and execute ``source``; return False on any error."""
        try:
            statements = parse_program(source, self.err)
        except ParseError:
            return False
        return self.interpret(statements)

    def interpret(self, statements: List[Stmt]) -> bool:
        resolve(statements)
        self.debug(f"interpret {len(statements)} statement(s)")
        ok = True
        try:
            for stmt in statements:
                result = self.execute(stmt, self.globals)
                if isinstance(result, ReturnSignal):
                    self.report(ScriptRuntimeError('Unexpected return statement.', result.pos))
                    ok = False
        except ScriptRuntimeError as ex:
            self.report(ex)
            return False
        return ok

    def execute_block(self, statements: List[Stmt], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Node, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr, env)
            return None
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expr, env)
            print(to_string(value), file=self.out)
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else NIL
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"{node.keyword} {node.name} = {to_string(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = self.is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, WhileStmt):
            while True:
                cond = self.evaluate(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition {to_string(cond)}")
                if not self.is_truthy(cond):
                    return None
                result = self.execute(node.body, env)
                if isinstance(result, ReturnSignal):
                    return result
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else NIL
            return ReturnSignal(value, node.pos)
        if isinstance(node, FuncDecl):
            env.define(node.name, ScriptFunction.from_decl(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}")
            return None
        if isinstance(node, ClassDecl):
            methods = {m.name: ScriptFunction.from_decl(m, env) for m in node.methods}
            superclass = node.superclass.name if node.superclass is not None else None
            env.define(node.name, ClassValue(node.name, methods, superclass))
            if self.debug_level >= 2:
                self.debug(f"define class {node.name} with {len(methods)} method(s)")
            return None
        if isinstance(node, ImportStmt):
            obj = self.registry.get_native_object(node.name)
            if obj is None:
                raise ScriptRuntimeError('native object not found', node.pos)
            instance = Instance(ClassValue(node.name, dict(obj)))
            self.globals.define(node.name, instance)
            if self.debug_level >= 2:
                self.debug(f"import {node.name}: {', '.join(sorted(obj))}")
            return None
        # catch any other nodes
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            if node.literal_type == 'Nil':
                return NIL
            return node.value
        if isinstance(node, Ident):
            return self.look_up_variable(node.name, node.distance, node.pos, env)
        if isinstance(node, This):
            if node.distance < 0:
                raise ScriptRuntimeError("Cannot use 'this' outside of a class.", node.pos)
            return self.look_up_variable('this', node.distance, node.pos, env)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            target = node.target
            try:
                if target.distance >= 0:
                    env.assign_at(target.distance, target.name, value)
                else:
                    self.globals.assign(target.name, value)
            except ScriptRuntimeError as ex:
                if ex.pos is None:
                    ex.pos = node.pos
                raise
            return value
        if isinstance(node, LogicalOp):
            left = self.evaluate(node.left, env)
            if node.op == '|':
                if self.is_truthy(left):
                    return left
            elif not self.is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            if node.op == '!':
                return not self.is_truthy(operand)
            if node.op == '-':
                if not isinstance(operand, float):
                    raise ScriptRuntimeError('Operand must be a number.', node.pos)
                return -operand
            raise NotImplementedError(f"unsupported unary operator {node.op}")
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right, node.pos)
        if isinstance(node, Call):
            return self.call_value(node, env)
        if isinstance(node, Member):
            target = self.evaluate(node.target, env)
            if isinstance(target, Instance):
                value = target.get(node.name)
                if value is None:
                    raise ScriptRuntimeError(f'Undefined property {node.name}.', node.pos)
                return value
            if isinstance(target, ArrayVal):
                if node.name == 'length':
                    return float(len(target.elements))
                raise ScriptRuntimeError(f'Undefined property {node.name}.', node.pos)
            raise ScriptRuntimeError('Only instances or arrays have properties.', node.pos)
        if isinstance(node, MemberAssign):
            target = self.evaluate(node.target, env)
            if not isinstance(target, Instance):
                raise ScriptRuntimeError('Only instances have properties.', node.pos)
            value = self.evaluate(node.value, env)
            target.set(node.name, value)
            return value
        if isinstance(node, ArrayLit):
            return ArrayVal([self.evaluate(el, env) for el in node.elements])
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            i = self.check_index(target, index, node.pos)
            return target.elements[i]
        if isinstance(node, IndexAssign):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            i = self.check_index(target, index, node.pos)
            value = self.evaluate(node.value, env)
            target.elements[i] = value
            return value
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def look_up_variable(self, name: str, distance: int, pos: Any, env: Environment) -> Any:
        try:
            if distance >= 0:
                return env.get_at(distance, name)
            return self.globals.get(name)
        except ScriptRuntimeError as ex:
            if ex.pos is None:
                ex.pos = pos
            raise

    def check_index(self, target: Any, index: Any, pos: Any) -> int:
        if not isinstance(target, ArrayVal):
            raise ScriptRuntimeError('Only arrays can be indexed.', pos)
        if not isinstance(index, float):
            raise ScriptRuntimeError('Index must be a number.', pos)
        if not 0 <= index < len(target.elements):
            raise ScriptRuntimeError('Index out of range.', pos)
        return int(index)

    # Calls
    def call_value(self, node: Call, env: Environment) -> Any:
        callee = self.evaluate(node.func, env)
        if not isinstance(callee, (ScriptFunction, NativeFunction, ClassValue)):
            raise ScriptRuntimeError('Can only call functions and classes.', node.pos)
        arity = callee.arity()
        if arity != len(node.args):
            raise ScriptRuntimeError(f'Expected {arity} arguments but got {len(node.args)}.', node.pos)
        if isinstance(callee, NativeFunction):
            return self.call_native(callee, node.args, node.pos)
        args = [self.evaluate(arg, env) for arg in node.args]
        if self.debug_level >= 3:
            self.debug(f"call {callee!r} with ({', '.join(to_string(a) for a in args)})")
        if isinstance(callee, ClassValue):
            return self.construct_instance(callee, args)
        return self.call_function(callee, args)

    def call_function(self, func: ScriptFunction, args: List[Any]) -> Any:
        # The call frame hangs off the closure, not the caller's frame.
        call_env = Environment(parent=func.closure)
        for param, arg in zip(func.params, args):
            call_env.define(param, arg)
        result = self.execute_block(func.body, call_env)
        if func.is_initializer:
            return func.closure.get_at(0, 'this')
        if isinstance(result, ReturnSignal):
            return result.value
        return NIL

    def construct_instance(self, klass: ClassValue, args: List[Any]) -> Instance:
        instance = Instance(klass)
        initializer = klass.find_method('init')
        if initializer is not None:
            self.call_function(initializer.bind(instance), args)
        return instance

    def call_native(self, func: NativeFunction, arg_nodes: List[Node], pos: Any) -> Any:
        args: List[Any] = []
        for arg in arg_nodes:
            if not isinstance(arg, Literal) or arg.literal_type not in ('Number', 'String'):
                raise ScriptRuntimeError('Native call arguments must be literals.', pos)
            value = arg.value
            if arg.literal_type == 'Number' and value.is_integer():
                value = int(value)
            args.append(value)
        if self.debug_level >= 3:
            self.debug(f"native call {func.name}{tuple(args)!r}")
        results = func.invoke(args)
        if func.is_err and results and results[-1] is not None:
            raise ScriptRuntimeError(str(results[-1]), pos)
        if not results:
            return NIL
        return self.from_host(results[0])

    def from_host(self, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            return value
        return NIL

    # Operators
    def is_truthy(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, float):
            return value != 0.0
        if isinstance(value, str):
            return len(value) > 0
        if isinstance(value, NilVal):
            return False
        return True

    def equal_values(self, a: Any, b: Any) -> bool:
        if isinstance(a, bool) or isinstance(b, bool):
            return self.is_truthy(a) == self.is_truthy(b)
        if isinstance(a, float) and isinstance(b, float):
            return a == b
        if isinstance(a, str) and isinstance(b, str):
            return a == b
        if isinstance(a, NilVal) and isinstance(b, NilVal):
            return True
        return False

    def check_number_operands(self, a: Any, b: Any, pos: Any):
        if not (isinstance(a, float) and isinstance(b, float)):
            raise ScriptRuntimeError('Operands must be numbers.', pos)
        return a, b

    def apply_binary_op(self, op: str, a: Any, b: Any, pos: Any) -> Any:
        if op == '==':
            return self.equal_values(a, b)
        if op == '!=':
            return not self.equal_values(a, b)
        if op == '+':
            if isinstance(a, float) and isinstance(b, float):
                return a + b
            # A string on the left takes anything; a number only takes a string.
            if isinstance(a, str) or (isinstance(a, float) and isinstance(b, str)):
                return to_string(a) + to_string(b)
            raise ScriptRuntimeError('Operands must be numbers or strings.', pos)
        a, b = self.check_number_operands(a, b, pos)
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0.0:
                raise ScriptRuntimeError("Divisor can't be 0.", pos)
            return a / b
        if op == '>':
            return a > b
        if op == '>=':
            return a >= b
        if op == '<':
            return a < b
        if op == '<=':
            return a <= b
        raise NotImplementedError(f"unknown operator {op}")


def run_program(source: str, out: Optional[TextIO] = None, err: Optional[TextIO] = None,
                debug_level: int = 0) -> bool:
    """Convenience function to parse and run a TinyScript program from source."""
    interpreter = Interpreter(out=out, err=err, debug_level=debug_level)
    try:
        return interpreter.run(source)
    finally:
        interpreter.close()
