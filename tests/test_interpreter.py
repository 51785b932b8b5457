from gomix.interpreter import parse_program, Interpreter
from gomix.types import ArrayVal, ErrorVal, ListVal, NIL, TupleVal


def run(source, interp=None):
    interp = interp or Interpreter()
    return interp.run(parse_program(source))


def items(value):
    return list(value.items)


def test_precedence_multiplication_binds_tighter():
    assert run('1 + 2 * 3;') == 7
    assert run('(1 + 2) * 3;') == 9
    assert run('2 + 3 * 4 - 10 / 2;') == 9
    assert run('1 << 2 + 1;') == 8
    assert run('1 < 2 == true;') is True
    assert run('1 | 6 & 3;') == 3


def test_integer_and_float_arithmetic():
    assert run('7 / 2;') == 3
    assert run('-7 / 2;') == -3
    assert run('-7 % 3;') == -1
    assert run('7.0 / 2;') == 3.5
    assert run('1 + 2.5;') == 3.5
    assert run('9223372036854775807 + 1;') == -9223372036854775808
    assert run('"id-" + 7;') == 'id-7'


def test_division_by_zero_is_error_value():
    result = run('10 / 0;')
    assert isinstance(result, ErrorVal)
    assert 'division by zero' in result.message
    assert result.message.startswith('[1:4]')


def test_while_requires_every_condition():
    source = '''
    var i = 0; var j = 10; var n = 0;
    while (i < 5, j > 7) { i = i + 1; j = j - 1; n = n + 1; }
    n;
    '''
    assert run(source) == 3


def test_negative_indexing():
    assert run('var a = [10, 20, 30]; a[-1];') == 30
    assert run('list(1, 2, 3)[-3];') == 1
    assert run('tuple(4, 5, 6)[-2];') == 5
    assert run('"hello"[-1];') == 'o'
    out_of_range = run('var a = [1, 2, 3]; a[3];')
    assert isinstance(out_of_range, ErrorVal)
    assert 'index out of bounds' in out_of_range.message


def test_slices_keep_collection_kind():
    assert items(run('var a = [1, 2, 3, 4, 5]; a[1:3];')) == [2, 3]
    assert items(run('var a = [1, 2, 3, 4, 5]; a[:2];')) == [1, 2]
    assert items(run('var a = [1, 2, 3, 4, 5]; a[-2:];')) == [4, 5]
    assert isinstance(run('list(1, 2, 3)[1:];'), ListVal)
    assert isinstance(run('tuple(1, 2, 3)[0:1];'), TupleVal)
    assert run('"hello"[1:3];') == 'el'


def test_foreach_closures_capture_each_iteration():
    source = '''
    var fs = list();
    foreach i in 1...3 { pushback_list(fs, func() { return i; }); }
    var out = list();
    foreach f in fs { pushback_list(out, f()); }
    out;
    '''
    assert items(run(source)) == [1, 2, 3]


def test_for_closures_capture_each_iteration():
    source = '''
    var fs = list();
    for (var i = 0; i < 3; i = i + 1) { pushback_list(fs, func() { return i; }); }
    var out = list();
    foreach f in fs { pushback_list(out, f()); }
    out;
    '''
    assert items(run(source)) == [0, 1, 2]


def test_function_literal_snapshots_scope_but_named_function_is_live():
    assert run('var x = 1; var f = func() { return x; }; x = 2; f();') == 1
    assert run('var x = 1; func g() { return x; } x = 2; g();') == 2


def test_closure_counter_keeps_state():
    source = '''
    func makeCounter() {
        var c = 0;
        return func() { c = c + 1; return c; };
    }
    var next = makeCounter();
    next(); next(); next();
    '''
    assert run(source) == 3


def test_const_assignment_fails_without_mutation():
    interp = Interpreter()
    result = run('const k = 5; k = 6;', interp)
    assert isinstance(result, ErrorVal)
    assert "can't assign to constant (k)" in result.message
    assert interp.global_env.lookup('k') == (5, True)

    nested = run('const k = 5; func f() { k += 1; } f();')
    assert isinstance(nested, ErrorVal)


def test_outer_const_blocks_assignment_through_shadowing_var():
    interp = Interpreter()
    result = run('const k = 5; func f() { var k = 1; k = 2; return k; } f();', interp)
    assert isinstance(result, ErrorVal)
    assert "can't assign to constant (k)" in result.message
    assert interp.global_env.lookup('k') == (5, True)

    block = run('const x = 1; { var x = 2; x = 3; x; }')
    assert isinstance(block, ErrorVal)
    assert "can't assign to constant (x)" in block.message


def test_shift_counts_past_64_bits():
    assert run('1 << 64;') == 0
    assert run('1 << 9223372036854775807;') == 0
    assert run('-8 >> 100;') == -1
    assert run('8 >> 64;') == 0
    assert run('1 << 63;') == -9223372036854775808
    var_shift = run('var n = 3; n <<= 70; n;')
    assert var_shift == 0
    negative = run('1 << -1;')
    assert isinstance(negative, ErrorVal)
    assert 'negative shift count' in negative.message


def test_new_without_init_rejects_arguments():
    assert run('struct S { } typeof(new S());') == 'object'
    result = run('struct S { } new S(1, 2);')
    assert isinstance(result, ErrorVal)
    assert 'wrong number of arguments: expected 0, got 2' in result.message


def test_return_from_nested_blocks_ends_the_call():
    assert run('func f(n) { if (n > 0) { while (true) { return n; } } return 0; } f(5);') == 5
    source = '''
    func g() {
        for (var i = 0; i < 10; i = i + 1) { if (i == 3) { return i; } }
        return -1;
    }
    g();
    '''
    assert run(source) == 3


def test_break_and_continue():
    source = '''
    var s = 0;
    for (var i = 0; i < 10; i = i + 1) {
        if (i % 2 == 0) { continue; }
        if (i > 7) { break; }
        s = s + i;
    }
    s;
    '''
    assert run(source) == 16


def test_fib_example():
    source = ('func fib(n){ if(n==0){return 0;} else if(n==1){return 1;} '
              'else {return fib(n-1)+fib(n-2);}} fib(10);')
    assert run(source) == 55


def test_list_example():
    result = run('var a = list(1,2,3); pushback_list(a,4); popfront_list(a); a')
    assert isinstance(result, ListVal)
    assert items(result) == [2, 3, 4]


def test_struct_example():
    source = ('struct P{ func init(x,y){ this.x=x; this.y=y; } '
              'func sum(){ return this.x+this.y; } } var p = new P(10,20); p.sum();')
    assert run(source) == 30


def test_struct_class_fields_and_constants():
    source = '''
    struct Counter {
        const LIMIT = 10;
        var count = 0;
        func init() { }
    }
    Counter.count = 5;
    var c = new Counter();
    c.LIMIT + Counter.count;
    '''
    assert run(source) == 15
    result = run('struct S { const LIMIT = 1; } S.LIMIT = 2;')
    assert isinstance(result, ErrorVal)
    assert 'constant field (LIMIT)' in result.message


def test_let_locks_type():
    assert run('let n = 1; n = 2; n;') == 2
    result = run('let n = 1; n = "x";')
    assert isinstance(result, ErrorVal)
    assert "can't assign `string` to variable (n) of type `int`" in result.message


def test_tuple_is_read_only():
    assert run('var t = tuple(1, 2, 3); size_tuple(t);') == 3
    pushed = run('pushback_list(tuple(1, 2), 3);')
    assert isinstance(pushed, ErrorVal)
    assert "must be a list, got 'tuple'" in pushed.message
    assert isinstance(run('var t = tuple(1, 2); t[0] = 9;'), ErrorVal)
    assert isinstance(run('push_array(tuple(1), 2);'), ErrorVal)


def test_map_and_set_keep_insertion_order():
    interp = Interpreter()
    keys = run('var m = map{"b": 1, "a": 2}; m["c"] = 3; keys_map(m);', interp)
    assert items(keys) == ['b', 'a', 'c']
    assert run('to_string(m);', interp) == 'map{b: 1, a: 2, c: 3}'
    assert run('m["missing"];', interp) is NIL
    assert items(run('values_set(set{3, 1, 3, 2});')) == [3, 1, 2]


def test_error_values_can_be_stored_and_inspected(capsys):
    assert run('var e = 10 / 0; typeof(e);') == 'error'
    result = run('10 / 0; println("after");')
    assert isinstance(result, ErrorVal)
    assert capsys.readouterr().out == ''


def test_redeclaration_and_unknown_names():
    redeclared = run('var a = 1; var a = 2;')
    assert 'identifier redeclaration found: a' in redeclared.message
    unknown = run('y = 3;')
    assert 'identifier not found: y' in unknown.message
    assert 'function not found: (nope)' in run('nope();').message
    assert 'not a function: (int)' in run('var x = 5; x();').message
    arity = run('func f(a) { return a; } f(1, 2);')
    assert 'wrong number of arguments: expected 1, got 2' in arity.message


def test_immediately_invoked_function_literal():
    assert run('func(x) { return x * 2; }(21);') == 42


def test_imports_and_packages():
    assert run('import math; math.sqrt(16.0);') == 4.0
    assert run('import strings as s; s.upper("go");') == 'GO'
    missing = run('import nosuch;')
    assert 'package not found: nosuch' in missing.message


def test_ranges():
    assert run('var t = 0; foreach i in 1...4 { t = t + i; } t;') == 10
    assert run('to_string(3...1);') == 'range(3,1)'
    assert run('(1...5)[1];') == 2
    assert isinstance(run('foreach k in map{"a": 1} { }'), ErrorVal)


def test_compound_assignment_on_index_and_member():
    assert run('var a = [1, 2]; a[0] += 5; a[0];') == 6
    assert run('var m = map{}; m["n"] = 1; m["n"] *= 7; m["n"];') == 7
    source = '''
    struct Box { func init(v) { this.v = v; } }
    var b = new Box(4);
    b.v -= 1;
    b.v;
    '''
    assert run(source) == 3


def test_runaway_recursion_is_error_value():
    result = run('func r(n) { return r(n + 1); } r(0);')
    assert isinstance(result, ErrorVal)
    assert 'maximum call depth' in result.message


def test_println_joins_display_forms(capsys):
    run('println("a", 1, true, nil, 2.5, [1, "b"]);')
    assert capsys.readouterr().out == 'a 1 true nil 2.500000 [1, b]\n'


def test_debug_log_written_to_file(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=2, debug_file=str(debug_file))
    run('var x = 5; x = x + 1;', interp)
    interp.close()
    text = debug_file.read_text(encoding='utf-8')
    assert 'declare var x: int = 5' in text
    assert 'assign x = 6' in text


def test_array_literal_evaluates_to_array():
    assert isinstance(run('[1, 2, 3];'), ArrayVal)
