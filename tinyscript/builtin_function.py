from dataclasses import dataclass
from typing import Any, Callable, List, Tuple


@dataclass
class NativeFunction:
    """A host function reachable from scripts through ``import``.

    ``fn`` returns a single value or a tuple of results. When ``is_err``
    is set, the last result is an error indicator: ``None`` on success,
    otherwise an exception (or message) that the interpreter raises as a
    runtime error.
    """
    name: str
    params: List[str]
    is_err: bool
    fn: Callable[..., Any]

    def arity(self) -> int:
        return len(self.params)

    def invoke(self, args: List[Any]) -> Tuple[Any, ...]:
        result = self.fn(*args)
        if isinstance(result, tuple):
            return result
        return (result,)

    def __repr__(self) -> str:
        return f"<native {self.name}>"
