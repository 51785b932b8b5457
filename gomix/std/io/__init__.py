from .basic_io import BasicIO
from gomix.builtin_function import Builtin
from gomix.types import to_string
from gomix.std.checks import argument_error, arity_error, check_arity
from typing import Any, Dict


def populate_io_builtins() -> Dict[str, Builtin]:
        basic_io = BasicIO()

        def std_input(runtime, writer, *args) -> Any:
            if len(args) > 1:
                return arity_error(args, '0 or 1')
            if args:
                writer.write(to_string(args[0]))
                writer.flush()
            return basic_io.read_line(runtime.get_input_reader())

        def std_scanln(runtime, writer, *args) -> Any:
            err = check_arity(args, 0)
            if err:
                return err
            return basic_io.read_line(runtime.get_input_reader())

        def std_getchar(runtime, writer, *args) -> Any:
            err = check_arity(args, 0)
            if err:
                return err
            return basic_io.read_char(runtime.get_input_reader())

        def std_read_file(runtime, writer, *args) -> Any:
            err = check_arity(args, 1)
            if err:
                return err
            filename = args[0]
            if not isinstance(filename, str):
                return argument_error('read_file', 'a string', filename)
            return basic_io.read_file(filename)

        def std_write_file(runtime, writer, *args) -> Any:
            err = check_arity(args, 2)
            if err:
                return err
            filename = args[0]
            if not isinstance(filename, str):
                return argument_error('write_file', 'a string', filename, 0)
            return basic_io.write_file(filename, to_string(args[1]))

        def std_append_file(runtime, writer, *args) -> Any:
            err = check_arity(args, 2)
            if err:
                return err
            filename = args[0]
            if not isinstance(filename, str):
                return argument_error('append_file', 'a string', filename, 0)
            return basic_io.append_file(filename, to_string(args[1]))

        def std_file_exists(runtime, writer, *args) -> Any:
            err = check_arity(args, 1)
            if err:
                return err
            filename = args[0]
            if not isinstance(filename, str):
                return argument_error('file_exists', 'a string', filename)
            return basic_io.file_exists(filename)

        def std_remove_file(runtime, writer, *args) -> Any:
            if len(args) not in (1, 2):
                return arity_error(args, '1 or 2')
            filename = args[0]
            if not isinstance(filename, str):
                return argument_error('remove_file', 'a string', filename, 0)
            force = args[1] if len(args) == 2 else False
            if not isinstance(force, bool):
                return argument_error('remove_file', 'a boolean', force, 1)
            return basic_io.remove_file(filename, force)

        def std_rename_file(runtime, writer, *args) -> Any:
            err = check_arity(args, 2)
            if err:
                return err
            for i, name in enumerate(args):
                if not isinstance(name, str):
                    return argument_error('rename_file', 'a string', name, i)
            return basic_io.rename_file(args[0], args[1])

        def std_copy_file(runtime, writer, *args) -> Any:
            err = check_arity(args, 2)
            if err:
                return err
            for i, name in enumerate(args):
                if not isinstance(name, str):
                    return argument_error('copy_file', 'a string', name, i)
            return basic_io.copy_file(args[0], args[1])

        builtins = {
            'input': std_input,
            'scanln': std_scanln,
            'getchar': std_getchar,
            'read_file': std_read_file,
            'write_file': std_write_file,
            'append_file': std_append_file,
            'file_exists': std_file_exists,
            'remove_file': std_remove_file,
            'rename_file': std_rename_file,
            'copy_file': std_copy_file,
        }
        return {name: Builtin(name, fn) for name, fn in builtins.items()}
