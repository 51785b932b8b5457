from pathlib import Path

from gomix.interpreter import parse_program, Interpreter

SAMPLES = Path(__file__).resolve().parent.parent / 'samples'


def test_program_1_fibonacci(capsys):
    source = (SAMPLES / 'program_1.gm').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == 'fib(10) = 55'
