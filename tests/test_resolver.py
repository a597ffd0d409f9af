from tinyscript.parser import parse_program
from tinyscript.resolver import resolve


def resolved(source):
    return resolve(parse_program(source))


def test_global_reference():
    stmts = resolved('var a = 1; print a;')
    assert stmts[1].expr.distance == -1


def test_nested_block_reference():
    stmts = resolved('{ var a = 1; { print a; } }')
    inner = stmts[0].statements[1]
    assert inner.statements[0].expr.distance == 1


def test_same_block_reference():
    stmts = resolved('{ var a = 1; print a; }')
    assert stmts[0].statements[1].expr.distance == 0


def test_reference_before_local_declaration_is_global():
    stmts = resolved('{ print a; var a = 1; }')
    assert stmts[0].statements[0].expr.distance == -1


def test_parameter_reference():
    stmts = resolved('function f(x) { return x; }')
    assert stmts[0].body[0].value.distance == 0


def test_closure_capture_distance():
    stmts = resolved(
        'function outer() { var count = 0; function inner() { count = count + 1; } }'
    )
    inner = stmts[0].body[1]
    assign = inner.body[0].expr
    assert assign.target.distance == 1
    assert assign.value.left.distance == 1


def test_function_name_inside_its_own_body():
    stmts = resolved('{ function f() { return f; } }')
    ret = stmts[0].statements[0].body[0]
    assert ret.value.distance == 1


def test_this_in_method():
    stmts = resolved('class A { get() { return this; } }')
    ret = stmts[0].methods[0].body[0]
    assert ret.value.distance == 1


def test_this_in_nested_block_of_method():
    stmts = resolved('class A { get() { { return this; } } }')
    ret = stmts[0].methods[0].body[0].statements[0]
    assert ret.value.distance == 2


def test_this_outside_class():
    stmts = resolved('print this;')
    assert stmts[0].expr.distance == -1


def test_initializer_sees_outer_local():
    stmts = resolved('{ var a = 1; { var a = a; } }')
    decl = stmts[0].statements[1].statements[0]
    # The initializer is resolved before the new name is declared.
    assert decl.initializer.distance == 1


def test_array_literal_distance():
    stmts = resolved('var a = [1]; { var b = [2]; }')
    assert stmts[0].initializer.distance == -1
    assert stmts[1].statements[0].initializer.distance == 0


def test_for_loop_variable():
    stmts = resolved('for (var i = 0; i < 3; i = i + 1) { print i; }')
    loop = stmts[0].statements[1]
    assert loop.condition.left.distance == 0
    body_print = loop.body.statements[0].statements[0]
    assert body_print.expr.distance == 2
    increment = loop.body.statements[1].expr
    assert increment.target.distance == 1
