"""The `math` package, made visible with `import math;`."""

import math

from gomix.builtin_function import Builtin, Package
from gomix.types import ErrorVal, is_int, is_number
from .checks import argument_error, arity_error, check_arity


def populate_math_package() -> Package:

    def unary_float(name, fn):
        def std_fn(runtime, writer, *args):
            err = check_arity(args, 1)
            if err:
                return err
            if not is_number(args[0]):
                return argument_error(name, 'a number', args[0])
            try:
                return fn(float(args[0]))
            except (ValueError, OverflowError) as e:
                return ErrorVal(f"{name}: {e}")
        return std_fn

    def unary_int(name, fn):
        def std_fn(runtime, writer, *args):
            err = check_arity(args, 1)
            if err:
                return err
            if not is_number(args[0]):
                return argument_error(name, 'a number', args[0])
            if is_int(args[0]):
                return args[0]
            try:
                return int(fn(args[0]))
            except (ValueError, OverflowError) as e:
                return ErrorVal(f"{name}: {e}")
        return std_fn

    def std_abs(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        if not is_number(args[0]):
            return argument_error('abs', 'a number', args[0])
        return abs(args[0])

    def extremum(name, pick):
        def std_fn(runtime, writer, *args):
            if not args:
                return arity_error(args, '1 or more')
            for value in args:
                if not is_number(value):
                    return argument_error(name, 'a number', value)
            return pick(args)
        return std_fn

    def std_round(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if not is_number(value):
            return argument_error('round', 'a number', value)
        if is_int(value):
            return value
        try:
            # half away from zero
            return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)
        except (ValueError, OverflowError) as e:
            return ErrorVal(f"round: {e}")

    def std_pow(runtime, writer, *args):
        err = check_arity(args, 2)
        if err:
            return err
        for i, value in enumerate(args):
            if not is_number(value):
                return argument_error('pow', 'a number', value, i)
        try:
            return math.pow(float(args[0]), float(args[1]))
        except (ValueError, OverflowError) as e:
            return ErrorVal(f"pow: {e}")

    def std_pi(runtime, writer, *args):
        err = check_arity(args, 0)
        if err:
            return err
        return math.pi

    functions = {
        'abs': std_abs,
        'min': extremum('min', min),
        'max': extremum('max', max),
        'floor': unary_int('floor', math.floor),
        'ceil': unary_int('ceil', math.ceil),
        'round': std_round,
        'sqrt': unary_float('sqrt', math.sqrt),
        'pow': std_pow,
        'sin': unary_float('sin', math.sin),
        'cos': unary_float('cos', math.cos),
        'tan': unary_float('tan', math.tan),
        'log': unary_float('log', math.log),
        'log10': unary_float('log10', math.log10),
        'exp': unary_float('exp', math.exp),
        'pi': std_pi,
    }
    return Package('math', {name: Builtin(name, fn) for name, fn in functions.items()})
