"""toyc command line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from . import lexer
from .compiler import compile_source
from .errors import CompileError
from .listing import build_listing, format_ir, format_program, format_value
from .vm import DEFAULT_MAX_STEPS, RuntimeValue, VirtualMachine, VMFault

LOG = logging.getLogger("toyc.cli")

EXIT_OK = 0
EXIT_COMPILE_ERROR = 1
EXIT_RUNTIME_FAULT = 2


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_binding(text: str) -> Tuple[str, RuntimeValue]:
    """Parse ``NAME=VALUE``; VALUE is an int, truth/falsy, or a string."""

    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    raw = raw.strip()
    value: RuntimeValue
    if raw in lexer.BOOLEAN_WORDS:
        value = lexer.BOOLEAN_WORDS[raw]
    else:
        try:
            value = int(raw)
        except ValueError:
            if len(raw) >= 2 and raw[0] == raw[-1] == '"':
                raw = raw[1:-1]
            value = raw
    return name, value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="toyc", description="Compile and run a toyc program")
    parser.add_argument("input", nargs="?", type=Path, help="source file ('-' reads stdin)")
    parser.add_argument("--repl", action="store_true", help="start the interactive REPL")
    parser.add_argument("--history", type=Path, default=Path.home() / ".toyc-history", help="REPL history file")
    parser.add_argument("--no-opt", action="store_true", help="disable the IR optimizer")
    parser.add_argument("--emit-tokens", action="store_true", help="print the token stream")
    parser.add_argument("--emit-ir", action="store_true", help="print IR before and after optimization")
    parser.add_argument("--emit-bytecode", action="store_true", help="print the bytecode listing")
    parser.add_argument("--emit-json", type=Path, help="write IR and bytecode listings as JSON")
    parser.add_argument("--trace", action="store_true", help="trace every VM instruction")
    parser.add_argument("--trace-file", type=Path, help="also write the VM trace to this file")
    parser.add_argument(
        "--arg",
        dest="args",
        action="append",
        type=parse_binding,
        default=[],
        metavar="NAME=VALUE",
        help="bind a function parameter (repeatable)",
    )
    parser.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS, help="VM step limit (0 disables)")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("TOYC_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    return parser


def _read_source(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _print_section(title: str, lines: List[str]) -> None:
    print(f"; {title}")
    for line in lines:
        print(line)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.repl:
        from .repl import ToycREPL

        return ToycREPL(history_path=args.history, optimize=not args.no_opt).run()
    if args.input is None:
        parser.error("an input file is required unless --repl is given")

    try:
        text = _read_source(args.input)
    except OSError as exc:
        print(f"toyc: cannot read {args.input}: {exc}", file=sys.stderr)
        return EXIT_COMPILE_ERROR

    try:
        if args.emit_tokens:
            _print_section("tokens", [f"{tok.line}:{tok.column} {tok.describe()}" for tok in lexer.tokenize(text)])
        result = compile_source(text, optimize=not args.no_opt)
    except CompileError as exc:
        print(f"toyc: {exc}", file=sys.stderr)
        return EXIT_COMPILE_ERROR

    if args.emit_ir:
        _print_section("ir", format_ir(result.ir))
        if result.optimized_ir is not None:
            _print_section("optimized ir", format_ir(result.optimized_ir))
    if args.emit_bytecode:
        _print_section("bytecode", format_program(result.program))
    if args.emit_json:
        payload = build_listing(result.ir, result.optimized_ir, result.program)
        try:
            with args.emit_json.open("w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
                fh.write("\n")
        except OSError as exc:
            print(f"toyc: cannot write {args.emit_json}: {exc}", file=sys.stderr)
            return EXIT_COMPILE_ERROR

    bindings: Dict[str, RuntimeValue] = dict(args.args)
    missing = [p for p in result.function.params if p not in bindings]
    if missing:
        print(f"toyc: missing --arg for parameter(s): {', '.join(missing)}", file=sys.stderr)
        return EXIT_COMPILE_ERROR
    for param in result.function.params:
        bound = bindings[param]
        if isinstance(bound, bool) or not isinstance(bound, int):
            print(f"toyc: parameter {param!r} takes an int, got {format_value(bound)}", file=sys.stderr)
            return EXIT_COMPILE_ERROR

    max_steps = args.max_steps if args.max_steps and args.max_steps > 0 else None
    try:
        trace_handle = args.trace_file.open("w", encoding="utf-8") if args.trace_file else None
    except OSError as exc:
        print(f"toyc: cannot write {args.trace_file}: {exc}", file=sys.stderr)
        return EXIT_COMPILE_ERROR
    try:
        vm = VirtualMachine(trace=args.trace, trace_file=trace_handle, max_steps=max_steps)
        value = vm.run(result.program, bindings)
    except VMFault as exc:
        print(f"toyc: runtime fault: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_FAULT
    finally:
        if trace_handle is not None:
            trace_handle.close()
    LOG.debug("run finished after %d steps", vm.steps)
    print(format_value(value))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
