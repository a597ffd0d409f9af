from tinyscript.lexer import Lexer, Position, tokenize, EOF, IDENT, ILLEGAL, NUMBER, STRING


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_declaration_tokens():
    tokens = tokenize('var x = 1.5e3;')
    assert [t.kind for t in tokens] == ['var', IDENT, '=', NUMBER, ';', EOF]
    assert tokens[1].lexeme == 'x'
    assert tokens[3].lexeme == '1.5e3'


def test_operators():
    assert kinds('!= == <= >= < > ! = & | [ ]') == [
        '!=', '==', '<=', '>=', '<', '>', '!', '=', '&', '|', '[', ']', EOF,
    ]


def test_keywords_and_identifiers():
    assert kinds('class init this let import _tmp1') == ['class', IDENT, 'this', 'let', 'import', IDENT, EOF]


def test_number_without_power_is_illegal(capsys):
    tokens = tokenize('1e')
    assert tokens[0].kind == ILLEGAL
    assert tokens[0].lexeme == '1e'
    assert 'power is required' in capsys.readouterr().err


def test_number_with_signed_power():
    tokens = tokenize('2E-3')
    assert tokens[0].kind == NUMBER
    assert tokens[0].lexeme == '2E-3'


def test_trailing_dot_is_separate_token():
    assert kinds('1.') == [NUMBER, '.', EOF]


def test_string_literal():
    tokens = tokenize('"A"')
    assert tokens[0].kind == STRING
    assert tokens[0].lexeme == 'A'


def test_string_escapes():
    tokens = tokenize(r'"say \"hi\" A \\"')
    assert tokens[0].kind == STRING
    assert tokens[0].lexeme == 'say "hi" A \\'


def test_unterminated_string(capsys):
    tokens = tokenize('"abc')
    assert tokens[0].kind == ILLEGAL
    assert 'unterminated string' in capsys.readouterr().err


def test_invalid_escape(capsys):
    tokens = tokenize(r'"\q"')
    assert tokens[0].kind == ILLEGAL
    assert 'invalid escape char' in capsys.readouterr().err


def test_surrogate_escape_becomes_replacement_char(capsys):
    tokens = tokenize(r'"\uD800x"')
    assert tokens[0].kind == STRING
    assert tokens[0].lexeme == '\ufffdx'
    assert capsys.readouterr().err == ''


def test_invalid_unicode(capsys):
    tokens = tokenize(r'"\u00zz"')
    assert tokens[0].kind == ILLEGAL
    assert 'invalid unicode char' in capsys.readouterr().err


def test_unknown_character_is_illegal(capsys):
    tokens = tokenize('@')
    assert tokens[0].kind == ILLEGAL
    assert tokens[0].lexeme == '@'
    assert capsys.readouterr().err == ''


def test_comments_are_skipped():
    assert kinds('// a comment\nprint 1; // trailing') == ['print', NUMBER, ';', EOF]


def test_positions():
    tokens = tokenize('a\n  b')
    assert tokens[0].pos == Position(1, 1)
    assert tokens[1].pos == Position(2, 3)
    assert str(tokens[1].pos) == '2:3'


def test_eof_is_idempotent():
    lexer = Lexer('x')
    assert lexer.next_token().kind == IDENT
    assert lexer.next_token().kind == EOF
    assert lexer.next_token().kind == EOF
