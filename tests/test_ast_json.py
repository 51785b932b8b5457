import json

from gomix.ast_json import ast_to_obj, ast_from_obj
from gomix.interpreter import Interpreter
from gomix.parser import parse_program

SOURCE = '''
enum Color { Red, Green = 5 }
struct Pair { func init(a, b) { this.a = a; this.b = b; } }
var m = map{"k": [1, 2...4]};
var p = new Pair(Color.Green, m["k"][1:]);
switch p.a { case 5: println("green"); break; default: println("other"); }
'''


def test_ast_survives_json_encoding():
    program = parse_program(SOURCE)
    restored = ast_from_obj(json.loads(json.dumps(ast_to_obj(program))))
    assert restored == program
    # positions are not part of node equality, so check them directly
    assert (restored.body[2].line, restored.body[2].column) == (4, 1)
    assert isinstance(restored.body[0].members[1], tuple)


def test_restored_ast_runs(capsys):
    program = ast_from_obj(json.loads(json.dumps(ast_to_obj(parse_program(SOURCE)))))
    Interpreter().run(program)
    assert capsys.readouterr().out == 'green\n'
