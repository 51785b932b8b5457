"""The `strings` package, made visible with `import strings;`."""

from gomix.builtin_function import Builtin, Package
from gomix.types import ArrayVal, ErrorVal, ListVal, TupleVal, is_int, to_string
from .checks import argument_error, arity_error, check_arity


def populate_strings_package() -> Package:

    def string_args(name, args, want):
        """Check arity and that the first argument is a string."""
        err = check_arity(args, want)
        if err:
            return err
        if not isinstance(args[0], str):
            return argument_error(name, 'a string', args[0], None if want == 1 else 0)
        return None

    def simple(name, fn):
        def std_fn(runtime, writer, *args):
            err = string_args(name, args, 1)
            if err:
                return err
            return fn(args[0])
        return std_fn

    def with_substring(name, fn):
        def std_fn(runtime, writer, *args):
            err = string_args(name, args, 2)
            if err:
                return err
            if not isinstance(args[1], str):
                return argument_error(name, 'a string', args[1], 1)
            return fn(args[0], args[1])
        return std_fn

    def std_split(runtime, writer, *args):
        err = string_args('split', args, 2)
        if err:
            return err
        sep = to_string(args[1])
        if sep == '':
            return ArrayVal(list(args[0]))
        return ArrayVal(args[0].split(sep))

    def std_join(runtime, writer, *args):
        err = check_arity(args, 2)
        if err:
            return err
        items = args[0]
        if not isinstance(items, (ArrayVal, ListVal, TupleVal)):
            return argument_error('join', 'an array', items, 0)
        return to_string(args[1]).join(to_string(v) for v in items.items)

    def std_replace(runtime, writer, *args):
        err = string_args('replace', args, 3)
        if err:
            return err
        return args[0].replace(to_string(args[1]), to_string(args[2]))

    def std_substring(runtime, writer, *args):
        if len(args) not in (2, 3):
            return arity_error(args, '2 or 3')
        s, start = args[0], args[1]
        if not isinstance(s, str):
            return argument_error('substring', 'a string', s, 0)
        if not is_int(start):
            return argument_error('substring', 'an integer', start, 1)
        if start < 0 or start > len(s):
            return ErrorVal('substring start index out of bounds')
        length = len(s) - start
        if len(args) == 3:
            length = args[2]
            if not is_int(length):
                return argument_error('substring', 'an integer', length, 2)
        if length < 0 or start + length > len(s):
            return ErrorVal('substring length out of bounds')
        return s[start:start + length]

    def std_ord(runtime, writer, *args):
        err = string_args('ord', args, 1)
        if err:
            return err
        if len(args[0]) != 1:
            return ErrorVal(f"ord expects a single character, got {len(args[0])}")
        return ord(args[0])

    def std_chr(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        if not is_int(args[0]):
            return argument_error('chr', 'an integer', args[0])
        try:
            return chr(args[0])
        except (ValueError, OverflowError):
            return ErrorVal(f"chr: code point out of range: {args[0]}")

    functions = {
        'upper': simple('upper', str.upper),
        'lower': simple('lower', str.lower),
        'trim': simple('trim', str.strip),
        'reverse': simple('reverse', lambda s: s[::-1]),
        'split': std_split,
        'join': std_join,
        'replace': std_replace,
        'contains': with_substring('contains', lambda s, sub: sub in s),
        'index': with_substring('index', lambda s, sub: s.find(sub)),
        'starts_with': with_substring('starts_with', lambda s, sub: s.startswith(sub)),
        'ends_with': with_substring('ends_with', lambda s, sub: s.endswith(sub)),
        'substring': std_substring,
        'ord': std_ord,
        'chr': std_chr,
    }
    return Package('strings', {name: Builtin(name, fn) for name, fn in functions.items()})
