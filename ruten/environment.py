from typing import Any, Dict, List, Optional
from ruten.errors import RutenError


class Environment:
    """A chain of scopes (innermost last) mapping identifiers to values.

    `snapshot` produces an independent copy whose later mutation is never
    seen by the original, and vice versa. The copy shares the scope
    dictionaries with the original; a shared scope is copied by whichever
    side writes to it first.
    """
    def __init__(self, scopes: Optional[List[Dict[str, Any]]] = None):
        if scopes is None:
            self.scopes: List[Dict[str, Any]] = [{}]
            self.owned: List[bool] = [True]
        else:
            self.scopes = scopes
            self.owned = [False] * len(scopes)

    def push_scope(self):
        self.scopes.append({})
        self.owned.append(True)

    def _writable(self, index: int) -> Dict[str, Any]:
        if not self.owned[index]:
            self.scopes[index] = dict(self.scopes[index])
            self.owned[index] = True
        return self.scopes[index]

    def get(self, name: str) -> Any:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        raise RutenError('NameError', f'undefined variable: {name}')

    def set(self, name: str, value: Any):
        # Rebind the nearest existing binding; otherwise declare in the innermost scope
        for index in range(len(self.scopes) - 1, -1, -1):
            if name in self.scopes[index]:
                self._writable(index)[name] = value
                return
        self.define(name, value)

    def define(self, name: str, value: Any):
        self._writable(len(self.scopes) - 1)[name] = value

    def snapshot(self) -> 'Environment':
        self.owned = [False] * len(self.scopes)
        return Environment(list(self.scopes))
