from pathlib import Path

from tinyscript.interpreter import Interpreter

EXAMPLES = Path(__file__).parent.parent / 'examples'


def run_example(name: str) -> None:
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    assert interp.run(source)


def test_program_hello(capsys):
    run_example('hello.tiny')
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'


def test_program_closure_counter(capsys):
    run_example('closure_counter.tiny')
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['1', '2', '3']


def test_program_logical_and(capsys):
    run_example('logical_and.tiny')
    out = capsys.readouterr().out.strip()
    # 1 > 1 is false, so the whole condition is false
    assert out == 'false'


def test_program_fibonacci(capsys):
    run_example('fibonacci.tiny')
    out = capsys.readouterr().out.split()
    assert out == ['0', '1', '1', '2', '3', '5', '8', '13', '21', '34']


def test_program_point(capsys):
    run_example('point.tiny')
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['(4, 6.5)', 'Point instance', 'class Point']


def test_program_arrays(capsys):
    run_example('arrays.tiny')
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['[10, 2, 3]', '3', '15', '[x, x, x]']


def test_program_scopes(capsys):
    run_example('scopes.tiny')
    out = capsys.readouterr().out.strip().splitlines()
    # showA is bound to the global a even after the block declares its own
    assert out == ['global', 'global', 'block', 'global']


def test_program_bubble_sort(capsys):
    run_example('bubble_sort.tiny')
    out = capsys.readouterr().out.strip()
    assert out == '[1, 2, 3, 5, 8, 9]'
