import io

from gomix.interpreter import parse_program, Interpreter
from gomix.types import ErrorVal, NIL


def run(source, interp=None):
    interp = interp or Interpreter()
    return interp.run(parse_program(source))


def items(value):
    return list(value.items)


def test_arity_and_type_errors():
    result = run('typeof();')
    assert isinstance(result, ErrorVal)
    assert result.message == 'wrong number of arguments. got=0, want=1'
    wrong = run('size_list([1]);')
    assert wrong.message == "argument to `size_list` must be a list, got 'array'"


def test_list_operations():
    assert run('popback_list(list());').message == 'cannot pop from empty list'
    assert items(run('var l = list(1, 3); insert_list(l, 1, 2); l;')) == [1, 2, 3]
    assert run('var l = list(1, 2, 3); remove_list(l, -1);') == 3
    assert run('contains_list(list(1, "a"), "a");') is True
    assert items(run('filter_list(list(1, 2, 3, 4), func(x) { return x % 2 == 0; });')) == [2, 4]
    assert run('find_list(list(1, 2, 3), func(x) { return x > 5; });') is NIL
    assert run('every_list(list(2, 4), func(x) { return x % 2 == 0; });') is True
    assert run('some_list(list(1, 3), func(x) { return x % 2 == 0; });') is False


def test_array_sorting():
    assert items(run('var a = [3, 1, 2]; sort_array(a); a;')) == [1, 2, 3]
    assert items(run('sorted_array([3, 1, 2], true);')) == [3, 2, 1]
    assert items(run('csorted_array([1, 3, 2], func(a, b) { return a > b; });')) == [3, 2, 1]
    assert items(run('sorted_array(["b", 10, "a", 2]);')) == [2, 10, 'a', 'b']


def test_array_callbacks():
    assert items(run('map_array([1, 2, 3], func(x) { return x * x; });')) == [1, 4, 9]
    assert run('reduce_array([1, 2, 3, 4], func(a, b) { return a + b; });') == 10
    assert run('index_array([5, 6, 7], 7);') == 2
    assert run('index_array([5, 6, 7], 8);') == -1
    failed = run('map_array([1, 2], func(x) { return x / 0; });')
    assert isinstance(failed, ErrorVal)
    assert 'division by zero' in failed.message


def test_array_mutators_alias_the_same_array():
    source = '''
    var a = [1, 2];
    var b = a;
    push_array(b, 3);
    unshift_array(a, 0);
    is_same_ref(a, b);
    '''
    interp = Interpreter()
    assert run(source, interp) is True
    assert items(run('a;', interp)) == [0, 1, 2, 3]
    assert run('is_same_ref(a, clone_array(a));', interp) is False


def test_map_and_set_builtins():
    interp = Interpreter()
    run('var m = make_map("x", 1, "y", 2); insert_map(m, "z", 3);', interp)
    assert run('size_map(m);', interp) == 3
    assert run('remove_map(m, "x");', interp) == 1
    assert run('contains_map(m, "x");', interp) is False
    assert items(run('values_map(m);', interp)) == [2, 3]
    pairs = run('enumerate_map(m);', interp)
    assert [items(p) for p in items(pairs)] == [['y', 2], ['z', 3]]
    run('var s = make_set(1, 2); insert_set(s, 2); insert_set(s, 5);', interp)
    assert run('size_set(s);', interp) == 3
    assert run('remove_set(s, 1);', interp) is True
    assert run('contains_set(s, 1);', interp) is False


def test_conversions_and_typeof():
    assert run('typeof(1.5);') == 'float'
    assert run('typeof(tuple());') == 'tuple'
    assert run('typeof(func() {});') == 'func'
    assert run('to_int("42");') == 42
    assert run('to_float(3);') == 3.0
    assert run('length("abc") + size([1, 2]);') == 5
    assert items(run('array(list(1, 2));')) == [1, 2]
    assert items(run('array(1...3);')) == [1, 2, 3]
    assert run('error("boom");').message == 'boom'


def test_printf_formats(capsys):
    run('printf("%s has %d items (%.1f%%)\\n", "cart", 3, 12.5);')
    assert capsys.readouterr().out == 'cart has 3 items (12.5%)\n'


def test_input_reads_from_shared_reader(capsys):
    interp = Interpreter(input_reader=io.StringIO('alice\nbob\nxy'))
    result = run('var a = input("name? "); var b = scanln(); a + "," + b + getchar();', interp)
    assert result == 'alice,bobx'
    assert capsys.readouterr().out == 'name? '


def test_file_builtins(tmp_path):
    path = str(tmp_path / 'notes.txt').replace('\\', '/')
    interp = Interpreter()
    run(f'write_file("{path}", "one"); append_file("{path}", "+two");', interp)
    assert run(f'read_file("{path}");', interp) == 'one+two'
    assert run(f'file_exists("{path}");', interp) is True
    run(f'remove_file("{path}");', interp)
    assert run(f'file_exists("{path}");', interp) is False
    missing = run(f'read_file("{path}");', interp)
    assert isinstance(missing, ErrorVal)
    assert 'could not read file' in missing.message


def test_strings_package():
    assert items(run('import strings; strings.split("a,b,c", ",");')) == ['a', 'b', 'c']
    assert run('import strings; strings.join(["a", "b"], "-");') == 'a-b'
    assert run('import strings; strings.substring("gomix", 2, 3);') == 'mix'
    assert run('import strings; strings.trim("  x ");') == 'x'
    assert run('import strings; strings.ord("A");') == 65
    assert run('import strings; strings.index("banana", "na");') == 2


def test_math_package():
    assert run('import math; math.floor(2.7);') == 2
    assert run('import math; math.round(-2.5);') == -3
    assert run('import math; math.pow(2, 10);') == 1024.0
    assert run('import math; math.abs(-4);') == 4
    bad = run('import math; math.sqrt("x");')
    assert bad.message == "argument to `sqrt` must be a number, got 'string'"


def test_to_int_rejects_values_outside_int64():
    infinite = run('to_int(1e400);')
    assert isinstance(infinite, ErrorVal)
    assert infinite.message.startswith("cannot convert 'inf'")
    assert isinstance(run('to_int(1e400 - 1e400);'), ErrorVal)
    assert isinstance(run('to_int(1e30);'), ErrorVal)
    assert isinstance(run('to_int("99999999999999999999");'), ErrorVal)
    assert run('to_int(-2.9);') == -2
