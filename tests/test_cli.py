import io
import json

import pytest

from gomix.__main__ import main, repl


def write_program(tmp_path, source, name='prog.gm'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_file_and_prints_final_result(tmp_path, capsys):
    path = write_program(tmp_path, 'println("hi"); 1 + 1;')
    main([str(path)])
    assert capsys.readouterr().out == 'hi\n2\n'


def test_parse_errors_exit_with_status_1(tmp_path, capsys):
    path = write_program(tmp_path, 'var = 1;')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith('[1:5] ')


def test_error_result_exits_with_status_1(tmp_path, capsys):
    path = write_program(tmp_path, 'println("before"); 1 / 0;')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'before\n'
    assert 'division by zero' in captured.err


def test_missing_file(tmp_path, capsys):
    missing = tmp_path / 'nope.gm'
    with pytest.raises(SystemExit):
        main([str(missing)])
    assert capsys.readouterr().err.strip() == f"Error: file {missing} not found"


def test_emit_ast_then_execute_it(tmp_path, capsys):
    path = write_program(tmp_path, 'func twice(n) { return n * 2; } println(twice(21));')
    main(['--emit-ast', str(path)])
    out_path = capsys.readouterr().out.strip()
    assert out_path.endswith('prog.gm.ast.json')
    with open(out_path, encoding='utf-8') as f:
        assert json.load(f)['type'] == 'Program'

    main(['--ast', out_path])
    assert capsys.readouterr().out == '42\n'


def test_repl_keeps_state_between_lines():
    stdin = io.StringIO('var x = 2;\nx * 21;\nvar = ;\n/scope\n/exit\n')
    stdout = io.StringIO()
    repl(stdin=stdin, stdout=stdout)
    text = stdout.getvalue()
    assert '42\n' in text
    assert 'x = 2\n' in text
    assert '[1:5]' in text


def test_main_without_program_starts_repl(monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', io.StringIO('println("from repl");\n'))
    main([])
    out = capsys.readouterr().out
    assert 'from repl\n' in out
    assert out.startswith('GoMix ')


def test_host_fault_is_reported_as_runtime_error(tmp_path, capsys, monkeypatch):
    def explode(self, node, op, a, b):
        raise OverflowError('host arithmetic failed')

    monkeypatch.setattr('gomix.interpreter.Interpreter.apply_int_op', explode)
    path = write_program(tmp_path, 'println("start"); 1 + 1;')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'start\n'
    assert captured.err.strip() == 'Runtime error: host arithmetic failed'


def test_repl_survives_host_fault(monkeypatch):
    def explode(self, node, op, a, b):
        raise MemoryError('out of memory')

    monkeypatch.setattr('gomix.interpreter.Interpreter.apply_int_op', explode)
    stdin = io.StringIO('2 * 3;\nprintln("still here");\n')
    stdout = io.StringIO()
    repl(stdin=stdin, stdout=stdout)
    text = stdout.getvalue()
    assert 'Runtime error: out of memory\n' in text
    assert 'still here\n' in text
