# TinyScript language package
# This package provides a lexer, parser, resolver and tree-walking
# interpreter for the TinyScript scripting language.
from .errors import TinyScriptError, ParseError, ScriptRuntimeError
from .interpreter import run_program, Interpreter
from .parser import parse_program

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'TinyScriptError',
    'ParseError',
    'ScriptRuntimeError',
]
