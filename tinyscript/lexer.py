"""Tokenizer for the TinyScript language.

The lexer is pull based: every call to :meth:`Lexer.next_token` cuts one
token from the source. Malformed strings and numbers do not abort lexing;
they produce an ``ILLEGAL`` token and a diagnostic line on the error
stream, and the parser decides what to do with the token.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

ILLEGAL = 'ILLEGAL'
EOF = 'EOF'
IDENT = 'IDENT'
NUMBER = 'NUMBER'
STRING = 'STRING'

KEYWORDS = frozenset({
    'class', 'else', 'false', 'function', 'for', 'if', 'nil', 'print',
    'return', 'super', 'this', 'true', 'var', 'let', 'while', 'import',
})

SINGLE_CHAR_TOKENS = frozenset('(){}[],.-+;/*&|')

# Operators that may be followed by '=' to form a two-character token.
EQUAL_SUFFIXED = frozenset('!=<>')

HEX_DIGITS = frozenset('0123456789abcdefABCDEF')


@dataclass(frozen=True)
class Position:
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass
class Token:
    kind: str
    lexeme: str
    pos: Position


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == '_'


def is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch == '_'


class Lexer:
    def __init__(self, source: str, err: Optional[TextIO] = None):
        self.source = source
        self.err = err
        self.index = 0
        self.line = 1
        self.column = 1

    @property
    def pos(self) -> Position:
        return Position(self.line, self.column)

    def peek(self, offset: int = 0) -> str:
        i = self.index + offset
        if i < len(self.source):
            return self.source[i]
        return ''

    def advance(self) -> str:
        ch = self.peek()
        if not ch:
            return ''
        self.index += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def error(self, pos: Position, msg: str) -> None:
        print(f"{pos} {msg}", file=self.err or sys.stderr)

    def skip(self) -> None:
        while True:
            ch = self.peek()
            if ch and ch.isspace():
                self.advance()
            elif ch == '/' and self.peek(1) == '/':
                while self.peek() and self.peek() != '\n':
                    self.advance()
            else:
                return

    def next_token(self) -> Token:
        self.skip()
        start = self.pos
        ch = self.peek()
        if not ch:
            return Token(EOF, '', start)
        if ch in EQUAL_SUFFIXED:
            self.advance()
            if self.peek() == '=':
                self.advance()
                return Token(ch + '=', ch + '=', start)
            return Token(ch, ch, start)
        if ch in SINGLE_CHAR_TOKENS:
            self.advance()
            return Token(ch, ch, start)
        if ch == '"':
            return self.read_string(start)
        if is_digit(ch):
            return self.read_number(start)
        if is_ident_start(ch):
            return self.read_identifier(start)
        self.advance()
        return Token(ILLEGAL, ch, start)

    def read_identifier(self, start: Position) -> Token:
        begin = self.index
        while self.peek() and is_ident_part(self.peek()):
            self.advance()
        text = self.source[begin:self.index]
        if text in KEYWORDS:
            return Token(text, text, start)
        return Token(IDENT, text, start)

    def read_number(self, start: Position) -> Token:
        begin = self.index
        while is_digit(self.peek()):
            self.advance()
        # A trailing '.' without digits belongs to the next token.
        if self.peek() == '.' and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        if self.peek() in ('e', 'E'):
            self.advance()
            if self.peek() in ('+', '-'):
                self.advance()
            if not is_digit(self.peek()):
                self.error(self.pos, 'power is required')
                return Token(ILLEGAL, self.source[begin:self.index], start)
            while is_digit(self.peek()):
                self.advance()
        return Token(NUMBER, self.source[begin:self.index], start)

    def read_string(self, start: Position) -> Token:
        self.advance()  # opening quote
        chars: List[str] = []
        while True:
            ch = self.peek()
            if not ch:
                self.error(self.pos, 'unterminated string')
                return Token(ILLEGAL, ''.join(chars), start)
            if ch == '"':
                self.advance()
                return Token(STRING, ''.join(chars), start)
            if ch != '\\':
                chars.append(self.advance())
                continue
            self.advance()
            escaped = self.peek()
            if escaped in ('"', '\\'):
                chars.append(self.advance())
            elif escaped == 'u':
                self.advance()
                code = ''
                for _ in range(4):
                    digit = self.peek()
                    if digit not in HEX_DIGITS:
                        self.error(self.pos, 'invalid unicode char')
                        return Token(ILLEGAL, ''.join(chars), start)
                    code += self.advance()
                point = int(code, 16)
                # Lone surrogates cannot be encoded; they become U+FFFD.
                if 0xD800 <= point <= 0xDFFF:
                    point = 0xFFFD
                chars.append(chr(point))
            else:
                self.error(self.pos, 'invalid escape char')
                return Token(ILLEGAL, ''.join(chars), start)


def tokenize(source: str, err: Optional[TextIO] = None) -> List[Token]:
    """Collect every token of ``source`` up to and including ``EOF``."""
    lexer = Lexer(source, err)
    tokens: List[Token] = []
    while True:
        token = lexer.next_token()
        tokens.append(token)
        if token.kind == EOF:
            return tokens
