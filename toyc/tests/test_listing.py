import json

from toyc.bytecode import Instr, Program
from toyc.compiler import compile_source
from toyc.ir import Assign, BinaryOp, Const, Return, Temp, Var
from toyc.listing import NO_VALUE, build_listing, format_ir, format_program, format_value, ir_to_dict


def test_format_value():
    assert format_value(None) == NO_VALUE
    assert format_value(5) == "5"
    assert format_value(False) == "falsy"
    assert format_value('say "hi"') == '"say \\"hi\\""'


def test_program_listing_for_folded_return():
    result = compile_source("var x = 2 + 3; return x;")
    assert format_program(result.program) == [
        "0000  PUSH_INT    5",
        "0001  STORE       x",
        "0002  PUSH_INT    5",
        "0003  STORE       %t4",
        "0004  LOAD        %t4",
        "0005  RET",
    ]
    assert format_ir(result.final_ir) == ["0000  x = 5", "0001  %t4 = 5", "0002  return %t4"]


def test_ir_listing_unnumbered():
    code = [BinaryOp(Temp(1), Var("a"), "*", Var("b")), Return(Temp(1))]
    assert format_ir(code, numbered=False) == ["%t1 = a * b", "return %t1"]


def test_jump_operands_render_as_targets():
    program = Program([Instr("PUSH_BOOL", True), Instr("JMP_IF_FALSE", 3), Instr("JMP", 3), Instr("RET")])
    assert format_program(program) == [
        "0000  PUSH_BOOL   truth",
        "0001  JMP_IF_FALSE-> 0003",
        "0002  JMP         -> 0003",
        "0003  RET",
    ]


def test_ir_to_dict_shapes():
    assert ir_to_dict(Assign(Var("x"), Const(True))) == {"op": "assign", "target": "x", "const": True, "kind": "bool"}
    assert ir_to_dict(Assign(Temp(2), Var("x"))) == {"op": "assign", "target": "%t2", "source": "x"}
    assert ir_to_dict(Return(Var("x"))) == {"op": "return", "name": "x"}


def test_build_listing_is_json_ready():
    result = compile_source('var s = "a" + "b"; return s;')
    payload = build_listing(result.ir, result.optimized_ir, result.program)
    decoded = json.loads(json.dumps(payload))
    assert decoded["version"] == 1
    assert decoded["bytecode"][0] == {"pc": 0, "mnemonic": "PUSH_STR", "opcode": 0x03, "arg": "ab"}
    assert decoded["bytecode"][-1] == {"pc": len(result.program) - 1, "mnemonic": "RET", "opcode": 0x3F}
    assert len(decoded["optimized_ir"]) == len(result.optimized_ir)


def test_build_listing_without_optimizer():
    result = compile_source("return 1;", optimize=False)
    payload = build_listing(result.ir, result.optimized_ir, result.program)
    assert "optimized_ir" not in payload
