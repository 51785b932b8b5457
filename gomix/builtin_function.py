from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Protocol, TextIO


class Runtime(Protocol):
    """Capabilities the interpreter hands to builtins that call back into it."""

    def call_function(self, fn: Any, *args: Any) -> Any:
        ...

    def get_input_reader(self) -> TextIO:
        ...


# callback(runtime, writer, *args) -> value
BuiltinCallback = Callable[..., Any]


@dataclass
class Builtin:
    name: str
    callback: BuiltinCallback

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


@dataclass
class Package:
    """A named namespace of builtins made visible by `import`."""
    name: str
    functions: Dict[str, Builtin] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<package {self.name}>"
