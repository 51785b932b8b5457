from pathlib import Path

from gomix.interpreter import parse_program, Interpreter

SAMPLES = Path(__file__).resolve().parent.parent / 'samples'


def test_program_3_lists_and_tuples(capsys):
    source = (SAMPLES / 'program_3.gm').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == [
        'head: 1',
        'list(2, 3, 4)',
        '3 c',
        'list(4, 9, 16)',
        '29',
    ]
