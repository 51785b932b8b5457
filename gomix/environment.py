from typing import Any, Dict, List, Optional, Set, Tuple


class Environment:
    """A lexical scope mapping identifiers to values and declaration metadata.

    Scopes form a chain through `parent`. Reads and writes walk up the
    chain; declarations always land in the scope they are made in.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}
        self.consts: Set[str] = set()
        self.let_types: Dict[str, str] = {}

    def lookup(self, name: str) -> Tuple[Any, bool]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env.values[name], True
            env = env.parent
        return None, False

    def bind(self, name: str, value: Any) -> bool:
        """Create or overwrite `name` in this scope only.

        Returns True when the name was already bound here.
        """
        shadowed = name in self.values
        self.values[name] = value
        return shadowed

    def bind_const(self, name: str, value: Any) -> bool:
        shadowed = self.bind(name, value)
        self.consts.add(name)
        return shadowed

    def bind_let(self, name: str, value: Any, type_name: str) -> bool:
        shadowed = self.bind(name, value)
        self.let_types[name] = type_name
        return shadowed

    def owner(self, name: str) -> Optional['Environment']:
        """Nearest scope in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def assign(self, name: str, value: Any) -> Tuple[Optional['Environment'], bool]:
        """Overwrite the nearest existing binding of `name`; never creates one."""
        env = self.owner(name)
        if env is None:
            return None, False
        env.values[name] = value
        return env, True

    def is_constant(self, name: str) -> bool:
        """True when `name` was declared const in this scope or any enclosing one."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.consts:
                return True
            env = env.parent
        return False

    def let_type(self, name: str) -> Optional[str]:
        """Locked type of `name` if its nearest binding was made with `let`."""
        env = self.owner(name)
        if env is None:
            return None
        return env.let_types.get(name)

    def snapshot(self) -> 'Environment':
        """Shallow copy of this scope's bindings sharing the same parent."""
        copy = Environment(self.parent)
        copy.values = dict(self.values)
        copy.consts = set(self.consts)
        copy.let_types = dict(self.let_types)
        return copy

    def names(self) -> List[str]:
        return list(self.values.keys())
