import os
import shutil
from typing import Any, TextIO

from gomix.types import NIL, ErrorVal


class BasicIO:
    """Path based file operations backing the io builtins.

    Failures are reported as ErrorVal results carrying the OS reason.
    """

    def read_file(self, filename: str) -> Any:
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            return ErrorVal(f"could not read file '{filename}': {e.strerror or e}")

    def write_file(self, filename: str, data: str) -> Any:
        try:
            with open(filename, 'w', encoding='utf-8') as f:
                f.write(data)
            return NIL
        except OSError as e:
            return ErrorVal(f"could not write to file '{filename}': {e.strerror or e}")

    def append_file(self, filename: str, data: str) -> Any:
        try:
            with open(filename, 'a', encoding='utf-8') as f:
                f.write(data)
            return NIL
        except OSError as e:
            return ErrorVal(f"could not open file '{filename}' for appending: {e.strerror or e}")

    def remove_file(self, filename: str, force: bool = False) -> Any:
        try:
            if force and os.path.isdir(filename):
                shutil.rmtree(filename)
            else:
                os.remove(filename)
            return NIL
        except OSError as e:
            return ErrorVal(f"could not remove '{filename}': {e.strerror or e}")

    def rename_file(self, old_filename: str, new_filename: str) -> Any:
        try:
            os.rename(old_filename, new_filename)
            return NIL
        except OSError as e:
            return ErrorVal(f"could not rename '{old_filename}' to '{new_filename}': {e.strerror or e}")

    def copy_file(self, source_filename: str, dest_filename: str) -> Any:
        try:
            shutil.copy(source_filename, dest_filename)
            return NIL
        except OSError as e:
            return ErrorVal(f"could not copy '{source_filename}' to '{dest_filename}': {e.strerror or e}")

    def file_exists(self, filename: str) -> bool:
        return os.path.exists(filename)

    @staticmethod
    def read_line(reader: TextIO) -> str:
        return reader.readline().rstrip('\r\n')

    @staticmethod
    def read_char(reader: TextIO) -> Any:
        ch = reader.read(1)
        return ch if ch else NIL
