from typing import Any, Optional


class TinyScriptError(Exception):
    """Base class for errors reported on the TinyScript diagnostic stream.

    ``str()`` of an instance is the diagnostic line: the source position
    followed by the message.
    """
    def __init__(self, message: str, pos: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.pos = pos

    def __str__(self) -> str:
        if self.pos is None:
            return self.message
        return f"{self.pos} {self.message}"


class ParseError(TinyScriptError):
    """Raised on a grammar violation; aborts the whole parse call."""


class ScriptRuntimeError(TinyScriptError):
    """Exception type used to propagate TinyScript runtime errors."""
