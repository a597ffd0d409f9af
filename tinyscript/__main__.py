"""CLI entry point for the TinyScript interpreter.

Usage:
    python -m tinyscript [-v|-vv|-vvv] [program_file]
    python -m tinyscript [-v...] --emit-ast <program_file>
    python -m tinyscript [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .tiny file and emit a resolved AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file the interactive prompt is started. Debug
information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import program_to_obj, program_from_obj
from .errors import ParseError
from .interpreter import Interpreter
from .parser import parse_program
from .resolver import resolve
from . import repl

BANNER = (
    'TinyScript programing language.',
    'Feel free to type commands.',
    'Type "exit" to exit.',
)


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='tinyscript', description="TinyScript language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='TINY_FILE', help='emit resolved AST JSON for the given .tiny file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='TinyScript program file (.tiny) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            statements = resolve(parse_program(source))
        except ParseError:
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(read_source(ast_path))
        statements = program_from_obj(data)
        interpreter = Interpreter(debug_level=args.v)
        try:
            ok = interpreter.interpret(statements)
        finally:
            interpreter.close()
        if not ok:
            sys.exit(1)
        return

    # Interactive mode
    if not args.program:
        for line in BANNER:
            print(line)
        interpreter = Interpreter(debug_level=args.v)
        try:
            repl.start(sys.stdin, sys.stdout, interpreter)
        finally:
            interpreter.close()
        return

    # Default: execute source file
    source = read_source(Path(args.program))
    interpreter = Interpreter(debug_level=args.v)
    try:
        ok = interpreter.run(source)
    finally:
        interpreter.close()
    if not ok:
        sys.exit(1)


if __name__ == '__main__':
    main()
