"""Runtime value model for TinyScript.

Numbers are Python ``float``, strings ``str`` and booleans ``bool``. The
remaining value kinds are defined here: the ``nil`` marker, user
functions, classes, instances, arrays and the internal return signal that
threads ``return`` through statement execution.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .ast import FuncDecl, Stmt
from .builtin_function import NativeFunction
from .environment import Environment


class NilVal:
    """Marker object for the TinyScript ``nil`` value."""
    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()


class ReturnSignal:
    """Result of executing a ``return`` statement.

    Statement execution hands this back as an ordinary value; blocks and
    loops stop when they see one and pass it upward until a call unwraps
    it. Script code never observes it.
    """
    def __init__(self, value: Any, pos: Optional[Any] = None):
        self.value = value
        # Where the return statement was written, for top-level diagnostics.
        self.pos = pos

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class ScriptFunction:
    """A user-defined function or method together with its closure frame."""
    def __init__(self, name: str, params: List[str], body: List[Stmt], closure: Environment,
                 is_initializer: bool = False):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure
        self.is_initializer = is_initializer

    @classmethod
    def from_decl(cls, decl: FuncDecl, closure: Environment) -> 'ScriptFunction':
        return cls(decl.name, decl.params, decl.body, closure, decl.is_initializer)

    def arity(self) -> int:
        return len(self.params)

    def bind(self, instance: 'Instance') -> 'ScriptFunction':
        env = Environment(parent=self.closure)
        env.define('this', instance)
        return ScriptFunction(self.name, self.params, self.body, env, self.is_initializer)

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


class ClassValue:
    def __init__(self, name: str, methods: Dict[str, Any], superclass: Optional[Any] = None):
        self.name = name
        self.methods = methods
        # Kept from the declaration; method lookup never consults it.
        self.superclass = superclass

    def find_method(self, name: str) -> Optional[Any]:
        return self.methods.get(name)

    def arity(self) -> int:
        initializer = self.find_method('init')
        if initializer is not None:
            return initializer.arity()
        return 0

    def __repr__(self) -> str:
        return f"class {self.name}"


class Instance:
    def __init__(self, klass: ClassValue):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: str) -> Optional[Any]:
        """Return the field ``name``, else the bound method, else ``None``."""
        if name in self.fields:
            return self.fields[name]
        method = self.klass.find_method(name)
        if isinstance(method, ScriptFunction):
            return method.bind(self)
        return method

    def set(self, name: str, value: Any):
        self.fields[name] = value

    def __repr__(self) -> str:
        return f"{self.klass.name} instance"


class ArrayVal:
    """A mutable, reference-typed list of values."""
    def __init__(self, elements: List[Any]):
        self.elements = elements

    def __repr__(self) -> str:
        return f"Array({self.elements!r})"


def format_number(x: float) -> str:
    """Shortest positional rendering of a number, without an exponent."""
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return '+Inf' if x > 0 else '-Inf'
    if x.is_integer():
        return str(int(x))
    text = repr(x)
    if 'e' in text:
        text = format(Decimal(text), 'f')
    return text


def to_string(value: Any) -> str:
    """Convert a TinyScript value to its printed representation."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NilVal) or value is None:
        return 'nil'
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.elements) + ']'
    if isinstance(value, (ScriptFunction, NativeFunction)):
        return f"<fn {value.name}>"
    if isinstance(value, ReturnSignal):
        return to_string(value.value)
    return repr(value)

