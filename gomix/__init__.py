# GoMix language package
# This package provides a parser and tree-walking interpreter for the GoMix language.
__version__ = '1.0.0'

from .interpreter import run_program, run_file, Interpreter
from .errors import GomixFault, ParseFailure, ParseIssue

__all__ = [
    'run_program',
    'run_file',
    'Interpreter',
    'GomixFault',
    'ParseFailure',
    'ParseIssue',
]
