from pathlib import Path

from gomix.interpreter import parse_program, Interpreter

SAMPLES = Path(__file__).resolve().parent.parent / 'samples'


def test_program_2_struct_methods(capsys):
    source = (SAMPLES / 'program_2.gm').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().splitlines()
    # class field is shared through `self`, instance fields through `this`
    assert out == ['30', '9', 'points: 2', 'object(Point)']
