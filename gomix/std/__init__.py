"""Standard library registry.

Each interpreter builds its own tables from these loaders, so builtins and
packages are never shared mutable state between runs.
"""

from typing import Dict

from gomix.builtin_function import Builtin, Package
from .common import populate_common_builtins
from .lists import populate_list_builtins
from .tuples import populate_tuple_builtins
from .arrays import populate_array_builtins
from .maps import populate_map_builtins, populate_set_builtins
from .io import populate_io_builtins
from .mathlib import populate_math_package
from .strings import populate_strings_package


def load_builtins() -> Dict[str, Builtin]:
    builtins: Dict[str, Builtin] = {}
    for populate in (populate_common_builtins, populate_list_builtins, populate_tuple_builtins,
                     populate_array_builtins, populate_map_builtins, populate_set_builtins,
                     populate_io_builtins):
        builtins.update(populate())
    return builtins


def load_packages() -> Dict[str, Package]:
    packages = [populate_math_package(), populate_strings_package()]
    return {package.name: package for package in packages}
