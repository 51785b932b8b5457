from pathlib import Path

from gomix.interpreter import parse_program, Interpreter

SAMPLES = Path(__file__).resolve().parent.parent / 'samples'


def test_program_5_maps_sets_and_packages(capsys):
    source = (SAMPLES / 'program_5.gm').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == [
        'BOB 31',
        'ALICE 27',
        'CAROL 35',
        'set{3, 1, 2} 3',
        '4.000000 9',
        'total: 110',
    ]
