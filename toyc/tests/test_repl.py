from toyc.repl import ToycREPL


def _feed(repl, *lines):
    out = []
    for line in lines:
        out.extend(repl.handle_line(line))
    return out


def test_return_line_compiles_and_runs_buffer():
    repl = ToycREPL()
    assert repl.handle_line("var x = 2;") == []
    assert repl.buffer == ["var x = 2;"]
    assert repl.handle_line("return x + 1;") == ["3"]
    assert repl.buffer == []


def test_blank_lines_are_ignored():
    repl = ToycREPL()
    assert repl.handle_line("   ") == []
    assert repl.buffer == []


def test_compile_error_keeps_earlier_lines():
    repl = ToycREPL()
    out = _feed(repl, "var x = 2;", "return y;")
    assert len(out) == 1 and out[0].startswith("error: ")
    assert repl.buffer == ["var x = 2;"]
    assert repl.handle_line("return x;") == ["2"]


def test_lex_error_is_not_buffered():
    repl = ToycREPL()
    out = repl.handle_line('var s = "open')
    assert out[0].startswith("error: ")
    assert repl.buffer == []


def test_runtime_fault_is_reported():
    repl = ToycREPL()
    out = repl.handle_line("return 1 / 0;")
    assert len(out) == 1
    assert out[0].startswith("fault: divide by zero")
    assert repl.buffer == []


def test_run_command_keeps_buffer():
    repl = ToycREPL()
    out = _feed(repl, "var x = 1;", ":run")
    assert out == ["<no value>"]
    assert repl.buffer == ["var x = 1;"]


def test_show_and_reset():
    repl = ToycREPL()
    assert repl.handle_line(":show") == ["(empty)"]
    repl.handle_line("var a = truth;")
    assert repl.handle_line(":show") == ["var a = truth;"]
    assert repl.handle_line(":reset") == ["buffer cleared"]
    assert repl.buffer == []


def test_listing_toggles():
    repl = ToycREPL()
    assert repl.handle_line(":ir") == ["IR listing on"]
    assert repl.handle_line(":bc") == ["bytecode listing on"]
    out = repl.handle_line("return 7;")
    assert out == [
        "0000  %t1 = 7",
        "0001  return %t1",
        "0000  PUSH_INT    7",
        "0001  STORE       %t1",
        "0002  LOAD        %t1",
        "0003  RET",
        "7",
    ]
    assert repl.handle_line(":ir") == ["IR listing off"]


def test_optimizer_toggle():
    repl = ToycREPL()
    assert repl.handle_line(":opt") == ["optimizer off"]
    assert repl.optimize is False
    repl.handle_line(":ir")
    out = repl.handle_line("return 2 + 3;")
    assert "0002  %t3 = %t1 + %t2" in out
    assert out[-1] == "5"


def test_quit_and_unknown_commands():
    repl = ToycREPL()
    assert repl.handle_line(":nope") == ["unknown command :nope (try :help)"]
    assert repl.handle_line(":help")[0].startswith("Enter statements")
    assert not repl.done
    assert repl.handle_line(":q") == []
    assert repl.done
