from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class ParseIssue:
    """A syntax error recorded by the parser."""
    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"[{self.line}:{self.column}] {self.message}"


class ParseFailure(Exception):
    """Raised by `parse_program` when the parser collected any issue."""
    def __init__(self, issues: List[ParseIssue]):
        super().__init__('\n'.join(str(issue) for issue in issues))
        self.issues = issues


class GomixFault(Exception):
    """Internal interpreter fault; never used for language-level errors."""
