from pathlib import Path

from gomix.interpreter import parse_program, Interpreter

SAMPLES = Path(__file__).resolve().parent.parent / 'samples'


def test_program_4_enum_switch_fallthrough(capsys):
    source = (SAMPLES / 'program_4.gm').read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().splitlines()
    # MEDIUM falls through into HIGH until the break
    assert out == [
        '0 list(low)',
        '5 list(medium, high)',
        '6 list(high)',
        '42 list(unknown)',
    ]
