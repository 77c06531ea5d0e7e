from toyc.ir import Assign, BinaryOp, Const, Return, Temp, Var, generate, is_name, max_temp_index
from toyc.parser import parse_source


def _ir(text):
    return generate(parse_source(text))


def test_var_declaration_with_binary_expression():
    assert _ir("var x = 2 + 3; return x;") == [
        Assign(Temp(1), Const(2)),
        Assign(Temp(2), Const(3)),
        BinaryOp(Temp(3), Temp(1), "+", Temp(2)),
        Assign(Var("x"), Temp(3)),
        Return(Var("x")),
    ]


def test_literal_return_is_spilled():
    assert _ir("return 3;") == [Assign(Temp(1), Const(3)), Return(Temp(1))]


def test_variable_operands_are_not_spilled():
    code = _ir("func f(a, b) { return a * b; }")
    assert code == [BinaryOp(Temp(1), Var("a"), "*", Var("b")), Return(Temp(1))]


def test_nested_expression_uses_fresh_temps():
    code = _ir("var y = (1 + 2) * 4; return y;")
    assert code == [
        Assign(Temp(1), Const(1)),
        Assign(Temp(2), Const(2)),
        BinaryOp(Temp(3), Temp(1), "+", Temp(2)),
        Assign(Temp(4), Const(4)),
        BinaryOp(Temp(5), Temp(3), "*", Temp(4)),
        Assign(Var("y"), Temp(5)),
        Return(Var("y")),
    ]


def test_expression_statement_is_evaluated():
    code = _ir('var s = "a"; s + "b"; return s;')
    assert BinaryOp(Temp(2), Var("s"), "+", Temp(1)) in code
    assert code[-1] == Return(Var("s"))


def test_binary_operands_are_always_names():
    code = _ir('func f(n) { var a = n + 1 - 2 * n; var s = "x" + "y"; return a + 7; }')
    for instr in code:
        if isinstance(instr, BinaryOp):
            assert is_name(instr.left) and is_name(instr.right)
        if isinstance(instr, Return):
            assert is_name(instr.name)


def test_temps_are_unique_and_monotonic():
    code = _ir("var a = 1 + 2; var b = 3 + 4; return a + b;")
    defined = [instr.target for instr in code if isinstance(instr, Assign) and isinstance(instr.target, Temp)]
    defined += [instr.result for instr in code if isinstance(instr, BinaryOp)]
    indexes = [t.index for t in defined]
    assert len(indexes) == len(set(indexes))
    assert max_temp_index(code) == max(indexes)


def test_temp_names_cannot_clash_with_user_names():
    code = _ir("var t1 = 5; return t1 + 1;")
    assert Assign(Var("t1"), Const(5)) in code
    assert str(Temp(1)) == "%t1"
    assert Var("t1") != Temp(1)


def test_const_kinds_are_distinct():
    assert Const(1) != Const(True)
    assert Const(0) != Const(False)
    assert Const(1).kind == "int"
    assert Const(True).kind == "bool"
    assert Const("s").kind == "str"
