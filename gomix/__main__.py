"""CLI entry point for the GoMix interpreter.

Usage:
    python -m gomix                                  start the REPL
    python -m gomix [-v|-vv|-vvv] <program_file>
    python -m gomix [-v...] --emit-ast <program_file>
    python -m gomix [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .gm file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --version     Print the interpreter version

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Parse errors are printed as
``[line:col] message`` and make the process exit with status 1, as does a
program whose final result is an error value.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional, TextIO

from . import __version__
from .ast_json import ast_to_obj, ast_from_obj
from .ast import Program
from .interpreter import Interpreter
from .parser import parse_source
from .types import NilVal, is_error, to_string

PROMPT = 'gomix >>> '


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str) -> Program:
    program, issues = parse_source(source)
    if issues:
        for issue in issues:
            print(str(issue), file=sys.stderr)
        sys.exit(1)
    return program


def execute(program: Program, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        result = interpreter.run(program)
    except Exception as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()
    report(result)


def report(result: Any) -> None:
    if is_error(result):
        print(to_string(result), file=sys.stderr)
        sys.exit(1)
    if not isinstance(result, NilVal):
        print(to_string(result))


def repl(debug_level: int = 0, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
    """Interactive loop sharing one interpreter across all entered lines.

    ``/exit`` leaves the loop and ``/scope`` lists the global bindings.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    interpreter = Interpreter(debug_level=debug_level, output=stdout, input_reader=stdin)
    stdout.write(f"GoMix {__version__}. Type /exit to quit, /scope to list bindings.\n")
    try:
        while True:
            stdout.write(PROMPT)
            stdout.flush()
            line = stdin.readline()
            if not line:
                stdout.write('\n')
                break
            line = line.strip()
            if not line:
                continue
            if line == '/exit':
                break
            if line == '/scope':
                for name in interpreter.global_env.names():
                    value, _ = interpreter.global_env.lookup(name)
                    stdout.write(f"{name} = {to_string(value)}\n")
                continue
            program, issues = parse_source(line)
            if issues:
                for issue in issues:
                    stdout.write(f"{issue}\n")
                continue
            try:
                result = interpreter.run(program)
            except Exception as e:
                stdout.write(f"Runtime error: {e}\n")
                continue
            if not isinstance(result, NilVal):
                stdout.write(f"{to_string(result)}\n")
    finally:
        interpreter.close()


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(prog='gomix', description="GoMix language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='GOMIX_FILE', help='emit AST JSON for the given .gm file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='GoMix program file (.gm) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        program = parse_or_exit(read_source(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(read_source(ast_path))
        execute(ast_from_obj(data), args.v)
        return

    if not args.program:
        repl(args.v)
        return
    execute(parse_or_exit(read_source(Path(args.program))), args.v)


if __name__ == '__main__':
    main()
