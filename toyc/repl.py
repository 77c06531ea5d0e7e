"""Interactive REPL: type a function body line by line, run it on ``return``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from . import lexer
from .compiler import compile_source
from .errors import CompileError
from .listing import format_ir, format_program, format_value
from .vm import VirtualMachine

LOGGER = logging.getLogger("toyc.repl")

HELP_TEXT = """\
Enter statements; a 'return ...;' line compiles and runs the buffered body.
  :run     compile and run the buffer as is
  :show    print the buffered source
  :ir      toggle the optimized IR listing
  :bc      toggle the bytecode listing
  :opt     toggle the optimizer
  :reset   clear the buffer
  :quit    leave"""


class ToycREPL:
    def __init__(self, *, history_path: Optional[Path] = None, optimize: bool = True) -> None:
        self.history_path = history_path
        self.optimize = optimize
        self.show_ir = False
        self.show_bytecode = False
        self.buffer: List[str] = []
        self.done = False

    def source(self) -> str:
        return "\n".join(self.buffer)

    def handle_line(self, line: str) -> List[str]:
        """Process one input line and return the lines to print."""

        stripped = line.strip()
        if not stripped:
            return []
        if stripped.startswith(":"):
            return self._command(stripped[1:].strip().lower())
        try:
            tokens = lexer.tokenize(stripped)
        except CompileError as exc:
            return [f"error: {exc}"]
        self.buffer.append(stripped)
        if tokens[0].matches(lexer.KEYWORD, "return"):
            return self._compile_and_run(reset_on_success=True)
        return []

    def _command(self, name: str) -> List[str]:
        if name in ("q", "quit", "exit"):
            self.done = True
            return []
        if name == "help":
            return HELP_TEXT.splitlines()
        if name == "run":
            return self._compile_and_run(reset_on_success=False)
        if name == "show":
            return list(self.buffer) or ["(empty)"]
        if name == "reset":
            self.buffer.clear()
            return ["buffer cleared"]
        if name == "ir":
            self.show_ir = not self.show_ir
            return [f"IR listing {'on' if self.show_ir else 'off'}"]
        if name == "bc":
            self.show_bytecode = not self.show_bytecode
            return [f"bytecode listing {'on' if self.show_bytecode else 'off'}"]
        if name == "opt":
            self.optimize = not self.optimize
            return [f"optimizer {'on' if self.optimize else 'off'}"]
        return [f"unknown command :{name} (try :help)"]

    def _compile_and_run(self, *, reset_on_success: bool) -> List[str]:
        out: List[str] = []
        try:
            result = compile_source(self.source(), optimize=self.optimize)
        except CompileError as exc:
            LOGGER.debug("compile failed: %s", exc)
            if reset_on_success:
                # drop the return line that triggered the compile, keep the rest
                self.buffer.pop()
            return [f"error: {exc}"]
        if self.show_ir:
            out.extend(format_ir(result.final_ir))
        if self.show_bytecode:
            out.extend(format_program(result.program))
        outcome = VirtualMachine().execute(result.program)
        if outcome.ok:
            out.append(format_value(outcome.value))
        else:
            out.append(f"fault: {outcome.fault}")
        if reset_on_success:
            self.buffer.clear()
        return out

    def run(self) -> int:
        history = FileHistory(str(self.history_path)) if self.history_path else InMemoryHistory()
        session = PromptSession("toyc> ", history=history)
        print("toyc REPL, :help for commands")
        while not self.done:
            prompt = "toyc> " if not self.buffer else "....> "
            try:
                with patch_stdout():
                    line = session.prompt(prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            for text in self.handle_line(line):
                print(text)
        return 0
