from typing import Any, Dict, Optional

from tinyscript.errors import ScriptRuntimeError


class Environment:
    """One scope frame: a name to value mapping plus the enclosing frame.

    Frames are created on block entry and on every call. A call frame's
    parent is the frame captured by the function at its definition site,
    which is what makes closures see (and mutate) their defining scope.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        self.values[name] = value

    def get(self, name: str) -> Any:
        # Immediate frame only; the scope chain is walked by get_at.
        if name in self.values:
            return self.values[name]
        raise ScriptRuntimeError(f'Undefined variable {name}.')

    def assign(self, name: str, value: Any):
        if name not in self.values:
            raise ScriptRuntimeError(f'Undefined variable {name}.')
        self.values[name] = value

    def ancestor(self, distance: int) -> 'Environment':
        env = self
        for _ in range(distance):
            if env.parent is None:
                raise ScriptRuntimeError(f'Scope distance {distance} exceeds the frame chain.')
            env = env.parent
        return env

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).get(name)

    def assign_at(self, distance: int, name: str, value: Any):
        self.ancestor(distance).assign(name, value)
