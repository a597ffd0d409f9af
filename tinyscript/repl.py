"""Interactive read-eval-print loop for TinyScript."""

from typing import Optional, TextIO

from .errors import ParseError
from .interpreter import Interpreter
from .parser import parse_program

PROMPT = '>> '


def start(in_stream: TextIO, out_stream: TextIO, interpreter: Optional[Interpreter] = None):
    """Read lines from ``in_stream`` until ``exit`` or end of input.

    Every line runs against the same interpreter, so bindings made on one
    line are visible on the next.
    """
    if interpreter is None:
        interpreter = Interpreter(out=out_stream)
    while True:
        out_stream.write(PROMPT)
        out_stream.flush()
        raw = in_stream.readline()
        if raw == '':
            return
        line = raw.strip()
        if not line:
            continue
        if line == 'exit':
            print('bye.', file=out_stream)
            return
        try:
            statements = parse_program(line, interpreter.err)
        except ParseError:
            # Already reported; keep the session going.
            continue
        if statements:
            interpreter.interpret(statements)
