import pytest

from toyc.errors import ParseError
from toyc.nodes import (
    BinaryExpr,
    BoolLiteral,
    ExprStmt,
    Function,
    Identifier,
    IntLiteral,
    ReturnStmt,
    StrLiteral,
    VarDecl,
)
from toyc.parser import parse_source


def test_implicit_main_body():
    fn = parse_source("var x = 2 + 3; return x;")
    assert fn == Function(
        name="main",
        params=[],
        body=[
            VarDecl("x", BinaryExpr(IntLiteral(2), "+", IntLiteral(3))),
            ReturnStmt(Identifier("x")),
        ],
    )


def test_function_with_params():
    fn = parse_source("func add(a, b) { return a + b; }")
    assert fn.name == "add"
    assert fn.params == ["a", "b"]
    assert fn.body == [ReturnStmt(BinaryExpr(Identifier("a"), "+", Identifier("b")))]


def test_function_without_params():
    fn = parse_source('func greet() { var s = "hi"; s; return truth; }')
    assert fn.params == []
    assert fn.body == [
        VarDecl("s", StrLiteral("hi")),
        ExprStmt(Identifier("s")),
        ReturnStmt(BoolLiteral(True)),
    ]


def test_multiplication_binds_tighter():
    fn = parse_source("return 1 + 2 * 3;")
    assert fn.body[0].value == BinaryExpr(
        IntLiteral(1), "+", BinaryExpr(IntLiteral(2), "*", IntLiteral(3))
    )


def test_operators_are_left_associative():
    fn = parse_source("return 10 - 4 - 3;")
    assert fn.body[0].value == BinaryExpr(
        BinaryExpr(IntLiteral(10), "-", IntLiteral(4)), "-", IntLiteral(3)
    )


def test_parentheses_override_precedence():
    fn = parse_source("return (1 + 2) * 3;")
    assert fn.body[0].value == BinaryExpr(
        BinaryExpr(IntLiteral(1), "+", IntLiteral(2)), "*", IntLiteral(3)
    )


def test_missing_semicolon():
    with pytest.raises(ParseError) as excinfo:
        parse_source("var x = 1\nreturn x;")
    assert "';'" in str(excinfo.value)
    assert excinfo.value.line == 2


def test_control_flow_keywords_are_rejected():
    with pytest.raises(ParseError):
        parse_source("if x { return 1; }")


def test_duplicate_parameter():
    with pytest.raises(ParseError):
        parse_source("func f(a, a) { return a; }")


def test_trailing_tokens_after_function():
    with pytest.raises(ParseError):
        parse_source("func f() { return 1; } return 2;")


def test_unclosed_function_body():
    with pytest.raises(ParseError):
        parse_source("func f() { return 1;")
