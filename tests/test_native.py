import os
import re

from tinyscript.builtin_function import NativeFunction
from tinyscript.interpreter import Interpreter, run_program
from tinyscript.std import NativeRegistry, default_registry


def test_default_registry_objects():
    registry = default_registry()
    assert sorted(registry.get_native_object('file')) == ['read_file', 'write_file']
    assert sorted(registry.get_native_object('os')) == ['num_cpu', 'pwd']
    assert sorted(registry.get_native_object('time')) == ['time', 'timestamp']
    assert registry.get_native_object('nope') is None


def test_import_os_pwd(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert run_program('import os; print os.pwd();')
    assert capsys.readouterr().out.strip() == os.getcwd()


def test_num_cpu(capsys):
    assert run_program('import os; print os.num_cpu() > 0;')
    assert capsys.readouterr().out.strip() == 'true'


def test_import_unknown_object(capsys):
    assert not run_program('import nope;')
    assert capsys.readouterr().err.strip() == '1:8 native object not found'


def test_native_object_stringification(capsys):
    assert run_program('import os; print os; print os.pwd;')
    assert capsys.readouterr().out.splitlines() == ['os instance', '<fn pwd>']


def test_file_write_and_read(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    source = '''
    import file;
    file.write_file("out.txt", "hello", "truncate");
    file.write_file("out.txt", " world", "append");
    print file.read_file("out.txt");
    file.write_file("out.txt", "again", "write");
    print file.read_file("out.txt");
    '''
    assert run_program(source)
    assert capsys.readouterr().out.splitlines() == ['hello world', 'again']
    assert (tmp_path / 'out.txt').read_text(encoding='utf-8') == 'again'


def test_read_missing_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert not run_program('import file; print file.read_file("missing.txt");')
    out, err = capsys.readouterr()
    assert out == ''
    assert 'missing.txt' in err


def test_native_arguments_must_be_literals(capsys):
    assert not run_program('import file; var name = "x"; file.read_file(name);')
    assert 'Native call arguments must be literals.' in capsys.readouterr().err


def test_native_arity(capsys):
    assert not run_program('import os; os.pwd(1);')
    assert 'Expected 0 arguments but got 1.' in capsys.readouterr().err


def test_time(capsys):
    assert run_program('import time; print time.time(); print time.timestamp();')
    now, stamp = capsys.readouterr().out.splitlines()
    assert re.fullmatch(r'\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}', now)
    assert re.fullmatch(r'\d+', stamp)


def test_custom_registry_marshalling(capsys):
    seen = []

    def add(a, b):
        seen.append((a, b))
        return a + b

    registry = NativeRegistry()
    registry.register_native('math', 'add', NativeFunction('add', ['a', 'b'], False, add))
    registry.register_native('math', 'yes', NativeFunction('yes', [], False, lambda: True))
    registry.register_native('math', 'nothing', NativeFunction('nothing', [], False, lambda: None))
    interp = Interpreter(registry=registry)
    assert interp.run('import math; print math.add(1, 2.5); print math.add(2, 3); print math.yes(); print math.nothing();')
    assert capsys.readouterr().out.splitlines() == ['3.5', '5', 'true', 'nil']
    assert seen == [(1, 2.5), (2, 3)]
    assert isinstance(seen[1][0], int)


def test_native_error_flag(capsys):
    registry = NativeRegistry()
    registry.register_native('svc', 'fail', NativeFunction('fail', [], True, lambda: (None, 'boom')))
    registry.register_native('svc', 'ok', NativeFunction('ok', [], True, lambda: ('fine', None)))
    interp = Interpreter(registry=registry)
    assert interp.run('import svc; print svc.ok();')
    assert not interp.run('import svc; svc.fail();')
    out, err = capsys.readouterr()
    assert out == 'fine\n'
    assert err.strip() == '1:21 boom'


def test_import_inside_block_binds_globally(capsys):
    assert run_program('{ import os; } print os;')
    assert capsys.readouterr().out.strip() == 'os instance'
