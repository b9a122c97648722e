"""Native modules available to `import`.

Each module is produced by a `populate_*_module` factory returning a fresh
member mapping, so every `import` statement yields an independent module
value. The `database` module is the only one with state; that state lives
in the `KeyValueStore` owned by the loader.
"""

from typing import Any, Callable, Dict, List, Optional

from ruten.errors import RutenError
from ruten.types import ModuleVal
from .database import populate_database_module
from .database.store import KeyValueStore
from .json import populate_json_module
from .math import populate_math_module
from .strings import populate_strings_module


class ModuleLoader:
    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store if store is not None else KeyValueStore()
        self.factories: Dict[str, Callable[[], Dict[str, Any]]] = {
            'math': populate_math_module,
            'strings': populate_strings_module,
            'json': populate_json_module,
            'database': lambda: populate_database_module(self.store),
        }

    def register(self, name: str, factory: Callable[[], Dict[str, Any]]):
        self.factories[name] = factory

    def available(self) -> List[str]:
        return sorted(self.factories)

    def resolve(self, name: str) -> ModuleVal:
        factory = self.factories.get(name)
        if factory is None:
            raise RutenError('ImportError', f"no module named '{name}'")
        return ModuleVal(name, factory())
